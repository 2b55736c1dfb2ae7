"""
Pydantic schema models for the botflow graph API.

These models describe the request bodies accepted by the graph endpoints and
the render-ready payloads they return. Response field names follow the
camelCase contract the front-end renderer consumes.

Usage:
    from botflow.api.schema import GraphBuildRequest, GraphModelResponse

    @router.post("", response_model=GraphModelResponse)
    async def build_graph(request: GraphBuildRequest):
        ...
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Health
# =============================================================================


class HealthResponse(BaseModel):
    """Response model for /api/health endpoint."""
    status: str = Field(description="Overall health status (ok)")
    version: str = Field(description="botflow package version")
    timestamp: str = Field(description="ISO 8601 timestamp of health check")


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(description="Error code (e.g., 'conversation_required')")
    message: str = Field(description="Human-readable error message")
    details: Dict[str, Any] = Field(default_factory=dict, description="Additional error details")


# =============================================================================
# Requests
# =============================================================================


class GraphBuildRequest(BaseModel):
    """The four source payloads. Only the conversation is required."""
    conversation: Optional[Dict[str, Any]] = Field(
        None, description="conversation.json: {conversation_id, steps[]}"
    )
    step_logs: Optional[Dict[str, Any]] = Field(
        None, description="stepLogs.json: {conversation_id, step_logs[]}"
    )
    mini_apps: Optional[Dict[str, Any]] = Field(
        None, description="miniAppRuns.json: {conversation_id, mini_app_runs[]}"
    )
    run_logs: Optional[Dict[str, Any]] = Field(None, description="runLogs.json: {run_logs[]}")


class NodePosition(BaseModel):
    """2D node position."""
    x: float
    y: float


class GraphViewRequest(GraphBuildRequest):
    """Build the model and return one decorated view of it."""
    view: Literal["steps", "mini_apps"] = Field("steps", description="Which graph to return")
    step_id: Optional[str] = Field(
        None, description="Step whose mini-app tree to return (default: featured step)"
    )
    orientation: Literal["horizontal", "vertical"] = Field("horizontal", description="Layout axis")
    selected_step_id: Optional[str] = Field(None, description="Selected step for highlighting")
    selected_run_id: Optional[str] = Field(None, description="Selected run for highlighting")
    position_overrides: Dict[str, NodePosition] = Field(
        default_factory=dict, description="Manual node positions by node id (after orientation)"
    )


# =============================================================================
# Graph payloads
# =============================================================================


class GraphNodePayload(BaseModel):
    """Single render-ready node."""
    id: str = Field(description="Stable node id (step:, runroot:, run:)")
    type: str = Field(description="Renderer node type")
    position: NodePosition
    data: Dict[str, Any] = Field(description="Node payload: kind, stepId, runId?, label, subtitle, meta, tone")


class GraphEdgePayload(BaseModel):
    """Single render-ready edge."""
    id: str
    source: str
    target: str
    kind: str = Field(description="sequence, root, dependency or chain")
    type: str
    animated: bool = False
    style: Dict[str, Any] = Field(default_factory=dict)


class GraphModelResponse(BaseModel):
    """Complete graph model snapshot."""
    conversationId: str
    stepOrder: List[str]
    stepsById: Dict[str, Dict[str, Any]]
    stepLogsByStepId: Dict[str, List[Any]]
    runsByStepId: Dict[str, List[Dict[str, Any]]]
    runLogsByRunId: Dict[str, Dict[str, Any]]
    stepNodes: List[GraphNodePayload]
    stepEdges: List[GraphEdgePayload]
    runNodesByStepId: Dict[str, List[GraphNodePayload]]
    runEdgesByStepId: Dict[str, List[GraphEdgePayload]]


class GraphViewResponse(BaseModel):
    """One decorated view (timeline or mini-app tree) of a graph model."""
    conversation_id: str
    view: str
    step_id: Optional[str] = None
    orientation: str
    nodes: List[GraphNodePayload]
    edges: List[GraphEdgePayload]
