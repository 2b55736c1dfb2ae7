"""
decorate.py - Transient, non-structural decorations for rendered nodes.

These helpers let a presentation layer derive what it shows from a
GraphModel without touching the model itself: every function returns new
node tuples, keeps ids and counts, and never adds or removes edges.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from .layout import orient_nodes
from .model import GraphModel, GraphNode, Position, RunNodeData

PositionLike = Union[Position, Mapping[str, Any], Tuple[float, float]]


def _as_position(value: PositionLike) -> Optional[Position]:
    if isinstance(value, Position):
        return value
    if isinstance(value, Mapping):
        if "x" in value and "y" in value:
            return Position(x=float(value["x"]), y=float(value["y"]))
        return None
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return Position(x=float(value[0]), y=float(value[1]))
    return None


def apply_position_overrides(
    nodes: Sequence[GraphNode],
    overrides: Mapping[str, PositionLike],
) -> Tuple[GraphNode, ...]:
    """Replace positions of dragged nodes; unknown ids are ignored."""
    result = []
    for node in nodes:
        override = overrides.get(node.id)
        position = _as_position(override) if override is not None else None
        result.append(replace(node, position=position) if position else node)
    return tuple(result)


def apply_highlighting(
    nodes: Sequence[GraphNode],
    active_step_id: Optional[str] = None,
    active_run_id: Optional[str] = None,
) -> Tuple[GraphNode, ...]:
    """Flag nodes as active or muted for the current selection.

    A step node is active when its step is selected. A run node is active
    when its step is selected and either no run is selected or it is the
    selected run. While a step is selected every other node is muted.
    """
    result = []
    for node in nodes:
        data = node.data
        if isinstance(data, RunNodeData):
            is_active = data.step_id == active_step_id and (
                not active_run_id or data.run_id == active_run_id
            )
        else:
            is_active = data.step_id == active_step_id
        muted = bool(active_step_id) and not is_active
        result.append(replace(node, data=replace(data, active=is_active, muted=muted)))
    return tuple(result)


def tree_score(model: GraphModel, step_id: str) -> float:
    """How interesting a step's mini-app tree is to show first.

    Entry runs count once, merge runs (more than one declared parent) twice,
    plus a small bonus for size.
    """
    runs = model.runs_for(step_id)
    if not runs:
        return 0
    root_count = sum(1 for r in runs if len(r.depends_on) == 0)
    merge_count = sum(1 for r in runs if len(r.depends_on) > 1)
    return root_count + merge_count * 2 + max(0, len(runs) - 2) * 0.1


def select_featured_step(model: GraphModel) -> Optional[str]:
    """Return the step with the highest tree score; ties go to the earliest."""
    best_step_id: Optional[str] = model.step_order[0] if model.step_order else None
    best_score = -1.0
    for step_id in model.step_order:
        score = tree_score(model, step_id)
        if score > best_score:
            best_score = score
            best_step_id = step_id
    return best_step_id


def orient_model(model: GraphModel, orientation: str, margin: float) -> GraphModel:
    """Return a copy of the model with every node list re-flowed.

    The timeline and each mini-app tree are oriented independently, since a
    renderer only ever shows one of them at a time.
    """
    if orientation == "horizontal":
        return model
    return replace(
        model,
        step_nodes=orient_nodes(model.step_nodes, orientation, margin),
        run_nodes_by_step_id={
            sid: orient_nodes(nodes, orientation, margin)
            for sid, nodes in model.run_nodes_by_step_id.items()
        },
    )
