"""
Graph endpoints for the botflow API.

Provides REST endpoints for:
- Building a graph model from uploaded source payloads
- Building the packaged demo graph model
- Returning a single decorated view (timeline or mini-app tree)
"""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query

from botflow.config.layout_config import get_layout_config
from botflow.graph.builder import build_graph_model, build_graph_model_from_bundle
from botflow.graph.decorate import (
    apply_highlighting,
    apply_position_overrides,
    orient_model,
    select_featured_step,
)
from botflow.graph.model import GraphModel, edge_to_dict, graph_model_to_dict, node_to_dict
from botflow.sources.loader import load_demo_bundle

from ..schema import (
    GraphBuildRequest,
    GraphModelResponse,
    GraphViewRequest,
    GraphViewResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/graph", tags=["graph"])

OrientationParam = Literal["horizontal", "vertical"]


def _build_from_request(request: GraphBuildRequest) -> GraphModel:
    """Build the model, rejecting requests without a conversation payload."""
    if request.conversation is None:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "conversation_required",
                "message": "A conversation payload is required to build the graph",
                "details": {},
            },
        )
    return build_graph_model(
        request.conversation,
        step_logs=request.step_logs,
        mini_apps=request.mini_apps,
        run_logs=request.run_logs,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("", response_model=GraphModelResponse)
async def build_graph(
    request: GraphBuildRequest,
    orientation: OrientationParam = Query("horizontal", description="Layout axis"),
):
    """Build a complete graph model from the four source payloads.

    Returns:
        GraphModelResponse with the timeline and every step's mini-app tree.

    Raises:
        400: Conversation payload missing.
    """
    model = _build_from_request(request)
    model = orient_model(model, orientation, get_layout_config().vertical_margin)
    logger.info(
        "Built graph for conversation %s (%d steps)", model.conversation_id, len(model.step_order)
    )
    return graph_model_to_dict(model)


@router.get("/demo", response_model=GraphModelResponse)
async def build_demo_graph(
    orientation: OrientationParam = Query("horizontal", description="Layout axis"),
):
    """Build the graph model for the packaged demo conversation."""
    model = build_graph_model_from_bundle(load_demo_bundle())
    model = orient_model(model, orientation, get_layout_config().vertical_margin)
    return graph_model_to_dict(model)


@router.post("/view", response_model=GraphViewResponse)
async def build_graph_view(request: GraphViewRequest):
    """Build the model and return one view with decorations applied.

    Decorations are applied in display order: orientation, then manual
    position overrides, then selection highlighting.

    Raises:
        400: Conversation payload missing.
        404: Requested step has no mini-app tree in this conversation.
    """
    model = _build_from_request(request)
    model = orient_model(model, request.orientation, get_layout_config().vertical_margin)

    step_id = None
    if request.view == "mini_apps":
        step_id = request.step_id or select_featured_step(model)
        if step_id is None or step_id not in model.run_nodes_by_step_id:
            raise HTTPException(
                status_code=404,
                detail={
                    "error": "step_not_found",
                    "message": f"Step '{step_id}' is not part of conversation '{model.conversation_id}'",
                    "details": {"step_id": step_id},
                },
            )
        nodes, edges = model.tree_for(step_id)
    else:
        nodes, edges = model.step_nodes, model.step_edges

    if request.position_overrides:
        nodes = apply_position_overrides(
            nodes, {nid: pos.model_dump() for nid, pos in request.position_overrides.items()}
        )
    if request.selected_step_id:
        nodes = apply_highlighting(nodes, request.selected_step_id, request.selected_run_id)

    return GraphViewResponse(
        conversation_id=model.conversation_id,
        view=request.view,
        step_id=step_id,
        orientation=request.orientation,
        nodes=[node_to_dict(n) for n in nodes],
        edges=[edge_to_dict(e) for e in edges],
    )
