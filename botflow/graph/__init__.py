"""
botflow.graph - Graph model builder for conversation / mini-app logs.

Package Structure:
    model.py     - GraphModel, GraphNode/GraphEdge, node payload union
    resolver.py  - Per-step dependency depths with cycle tolerance
    layout.py    - Timeline and mini-app tree coordinates, orientation
    builder.py   - build_graph_model orchestration
    decorate.py  - Drag overrides, highlighting, featured step

Usage:
    from botflow.graph import build_graph_model, graph_model_to_dict

    model = build_graph_model(conversation, step_logs, mini_apps, run_logs)
    payload = graph_model_to_dict(model)
"""

from .builder import build_graph_model, build_graph_model_from_bundle
from .decorate import (
    apply_highlighting,
    apply_position_overrides,
    orient_model,
    select_featured_step,
    tree_score,
)
from .layout import ORIENTATIONS, layout_mini_app_tree, layout_step_timeline, orient_nodes
from .model import (
    EdgeStyle,
    GraphEdge,
    GraphModel,
    GraphNode,
    Position,
    RunNodeData,
    StepNodeData,
    edge_to_dict,
    graph_model_to_dict,
    node_to_dict,
    root_node_id,
    run_node_id,
    step_node_id,
)
from .resolver import StepResolution, compute_depths, resolve_step

__all__ = [
    # Builder
    "build_graph_model",
    "build_graph_model_from_bundle",
    # Model
    "GraphModel",
    "GraphNode",
    "GraphEdge",
    "EdgeStyle",
    "Position",
    "StepNodeData",
    "RunNodeData",
    "graph_model_to_dict",
    "node_to_dict",
    "edge_to_dict",
    "step_node_id",
    "root_node_id",
    "run_node_id",
    # Resolver
    "StepResolution",
    "resolve_step",
    "compute_depths",
    # Layout
    "ORIENTATIONS",
    "layout_step_timeline",
    "layout_mini_app_tree",
    "orient_nodes",
    # Decorations
    "apply_position_overrides",
    "apply_highlighting",
    "orient_model",
    "select_featured_step",
    "tree_score",
]
