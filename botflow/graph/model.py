"""
model.py - GraphModel snapshot and render-ready node/edge types.

The GraphModel is built once per set of input files and never mutated. A
renderer may derive decorated copies of the nodes (orientation, drag
positions, highlight flags) via botflow.graph.decorate, but ids, counts and
topology always come from here.

Node payloads form a tagged union on `kind`:
- StepNodeData ("step"): a conversation step, on the timeline or as the
  synthetic root of a mini-app tree.
- RunNodeData ("run"): a mini-app run inside a step's tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Union

from botflow.sources.types import ConversationStep, MiniAppRun, RunLog

NODE_TYPE = "graphNode"
EDGE_TYPE = "smoothstep"

EdgeKind = Literal["sequence", "root", "dependency", "chain"]


# =============================================================================
# Nodes
# =============================================================================


@dataclass(frozen=True)
class Position:
    """2D position of a node's top-left corner."""
    x: float
    y: float


@dataclass(frozen=True)
class StepNodeData:
    """Payload of a step node (timeline node or synthetic tree root)."""
    step_id: str
    label: str
    subtitle: str = ""
    meta: str = ""
    tone: str = "slate"
    # Transient decorations, None until a renderer applies them
    active: Optional[bool] = None
    muted: Optional[bool] = None
    kind: Literal["step"] = "step"


@dataclass(frozen=True)
class RunNodeData:
    """Payload of a mini-app run node."""
    step_id: str
    run_id: str
    label: str
    subtitle: str = ""
    meta: str = ""
    tone: str = "slate"
    depth: float = 1
    active: Optional[bool] = None
    muted: Optional[bool] = None
    kind: Literal["run"] = "run"


NodeData = Union[StepNodeData, RunNodeData]


@dataclass(frozen=True)
class GraphNode:
    """A render-ready node: stable id, position and typed payload."""
    id: str
    position: Position
    data: NodeData
    type: str = NODE_TYPE


# =============================================================================
# Edges
# =============================================================================


@dataclass(frozen=True)
class EdgeStyle:
    """Stroke style of an edge. A dash pattern marks dependency edges."""
    stroke: str
    stroke_width: float = 2
    dash: Optional[str] = None


SEQUENCE_STYLE = EdgeStyle(stroke="rgba(89, 98, 117, 0.7)")
ROOT_STYLE = EdgeStyle(stroke="rgba(77, 96, 138, 0.45)")
DEPENDENCY_STYLE = EdgeStyle(stroke="rgba(154, 126, 255, 0.45)", dash="5 4")
CHAIN_STYLE = EdgeStyle(stroke="rgba(85, 122, 255, 0.55)")


@dataclass(frozen=True)
class GraphEdge:
    """A directed edge between two node ids."""
    id: str
    source: str
    target: str
    kind: EdgeKind
    style: EdgeStyle
    animated: bool = False
    type: str = EDGE_TYPE


# =============================================================================
# Id helpers
# =============================================================================


def step_node_id(step_id: str) -> str:
    return f"step:{step_id}"


def root_node_id(step_id: str) -> str:
    return f"runroot:{step_id}"


def run_node_id(step_id: str, run_id: str) -> str:
    return f"run:{step_id}:{run_id}"


# =============================================================================
# GraphModel
# =============================================================================


_LOOKUP_FIELDS = (
    "steps_by_id",
    "step_logs_by_step_id",
    "runs_by_step_id",
    "run_logs_by_run_id",
    "run_nodes_by_step_id",
    "run_edges_by_step_id",
)


@dataclass(frozen=True)
class GraphModel:
    """Immutable snapshot combining normalized data and computed layouts.

    Attributes:
        conversation_id: Conversation identifier from the conversation file.
        step_order: Step ids exactly as they appear in the conversation file.
        steps_by_id: Step id -> flattened conversation step.
        step_logs_by_step_id: Step id -> opaque event list.
        runs_by_step_id: Step id -> runs sorted by effective order.
        run_logs_by_run_id: Run id -> run log (orphans included).
        step_nodes / step_edges: The step timeline graph.
        run_nodes_by_step_id / run_edges_by_step_id: Per-step mini-app tree.
        depths_by_step_id: Step id -> run id -> resolved depth key.

    Lookup fields are stored as read-only mappings, so a built model cannot
    be changed in place; use dataclasses.replace for a new snapshot.
    """
    conversation_id: str
    step_order: Tuple[str, ...]
    steps_by_id: Mapping[str, ConversationStep] = field(default_factory=dict)
    step_logs_by_step_id: Mapping[str, List[Any]] = field(default_factory=dict)
    runs_by_step_id: Mapping[str, Tuple[MiniAppRun, ...]] = field(default_factory=dict)
    run_logs_by_run_id: Mapping[str, RunLog] = field(default_factory=dict)
    step_nodes: Tuple[GraphNode, ...] = ()
    step_edges: Tuple[GraphEdge, ...] = ()
    run_nodes_by_step_id: Mapping[str, Tuple[GraphNode, ...]] = field(default_factory=dict)
    run_edges_by_step_id: Mapping[str, Tuple[GraphEdge, ...]] = field(default_factory=dict)
    depths_by_step_id: Mapping[str, Mapping[str, float]] = field(default_factory=dict)

    def __post_init__(self):
        for name in _LOOKUP_FIELDS:
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))
        object.__setattr__(
            self,
            "depths_by_step_id",
            MappingProxyType(
                {sid: MappingProxyType(dict(depths)) for sid, depths in self.depths_by_step_id.items()}
            ),
        )

    def runs_for(self, step_id: str) -> Tuple[MiniAppRun, ...]:
        return self.runs_by_step_id.get(step_id, ())

    def tree_for(self, step_id: str) -> Tuple[Tuple[GraphNode, ...], Tuple[GraphEdge, ...]]:
        """Return (nodes, edges) of a step's mini-app tree; empty when unknown."""
        return (
            self.run_nodes_by_step_id.get(step_id, ()),
            self.run_edges_by_step_id.get(step_id, ()),
        )


# =============================================================================
# Serialization
# =============================================================================


def node_data_to_dict(data: NodeData) -> Dict[str, Any]:
    """Convert a node payload to the renderer's camelCase shape."""
    result: Dict[str, Any] = {"kind": data.kind, "stepId": data.step_id}
    if isinstance(data, RunNodeData):
        result["runId"] = data.run_id
        result["depth"] = data.depth
    result.update(
        {
            "label": data.label,
            "subtitle": data.subtitle,
            "meta": data.meta,
            "tone": data.tone,
        }
    )
    if data.active is not None:
        result["active"] = data.active
    if data.muted is not None:
        result["muted"] = data.muted
    return result


def node_to_dict(node: GraphNode) -> Dict[str, Any]:
    return {
        "id": node.id,
        "type": node.type,
        "position": {"x": node.position.x, "y": node.position.y},
        "data": node_data_to_dict(node.data),
    }


def edge_to_dict(edge: GraphEdge) -> Dict[str, Any]:
    style: Dict[str, Any] = {"stroke": edge.style.stroke, "strokeWidth": edge.style.stroke_width}
    if edge.style.dash:
        style["strokeDasharray"] = edge.style.dash
    return {
        "id": edge.id,
        "source": edge.source,
        "target": edge.target,
        "kind": edge.kind,
        "type": edge.type,
        "animated": edge.animated,
        "style": style,
    }


def step_to_dict(step: ConversationStep) -> Dict[str, Any]:
    return {
        "stepId": step.step_id,
        "ts": step.ts,
        "userText": step.user_text,
        "botText": step.bot_text,
    }


def run_to_dict(run: MiniAppRun) -> Dict[str, Any]:
    return {
        "runId": run.run_id,
        "name": run.name,
        "order": run.order,
        "dependsOn": list(run.depends_on),
    }


def run_log_to_dict(log: RunLog) -> Dict[str, Any]:
    return {"kvps": log.kvps, "raw": log.raw, "http": log.http}


def graph_model_to_dict(model: GraphModel) -> Dict[str, Any]:
    """Serialize a GraphModel to the JSON contract consumed by renderers."""
    return {
        "conversationId": model.conversation_id,
        "stepOrder": list(model.step_order),
        "stepsById": {sid: step_to_dict(s) for sid, s in model.steps_by_id.items()},
        "stepLogsByStepId": {sid: list(events) for sid, events in model.step_logs_by_step_id.items()},
        "runsByStepId": {
            sid: [run_to_dict(r) for r in runs] for sid, runs in model.runs_by_step_id.items()
        },
        "runLogsByRunId": {rid: run_log_to_dict(log) for rid, log in model.run_logs_by_run_id.items()},
        "stepNodes": [node_to_dict(n) for n in model.step_nodes],
        "stepEdges": [edge_to_dict(e) for e in model.step_edges],
        "runNodesByStepId": {
            sid: [node_to_dict(n) for n in nodes] for sid, nodes in model.run_nodes_by_step_id.items()
        },
        "runEdgesByStepId": {
            sid: [edge_to_dict(e) for e in edges] for sid, edges in model.run_edges_by_step_id.items()
        },
    }
