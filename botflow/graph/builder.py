"""
builder.py - Assemble the GraphModel from the four source payloads.

Pipeline:
    raw payloads -> source parsers -> resolver (per step)
                 -> layout (timeline + per-step tree) -> GraphModel

The conversation file defines both the canonical step order and the complete
set of step keys. Steps that only appear in the step-log or mini-app files
never reach the model. Run logs are indexed globally and kept even when no
run refers to them.

Usage:
    from botflow.graph.builder import build_graph_model

    model = build_graph_model(conversation, mini_apps=mini_apps)
    nodes, edges = model.tree_for(model.step_order[0])

The builder is a pure function: the same inputs (and layout config) always
produce a structurally identical model, and nothing is raised for missing
optional inputs, dangling dependencies or cycles.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from botflow.config.layout_config import LayoutConfig, get_layout_config
from botflow.sources.conversation import parse_conversation_file
from botflow.sources.mini_apps import parse_mini_apps_file
from botflow.sources.run_logs import parse_run_logs_file
from botflow.sources.step_logs import parse_step_logs_file
from botflow.sources.types import ConversationStep, MiniAppRun, SourceBundle

from .layout import layout_mini_app_tree, layout_step_timeline
from .model import GraphEdge, GraphModel, GraphNode
from .resolver import resolve_step

logger = logging.getLogger(__name__)

Payload = Optional[Mapping[str, Any]]


def _unique(step_ids: Tuple[str, ...]) -> List[str]:
    seen = set()
    result = []
    for step_id in step_ids:
        if step_id not in seen:
            seen.add(step_id)
            result.append(step_id)
    return result


def build_graph_model(
    conversation: Mapping[str, Any],
    step_logs: Payload = None,
    mini_apps: Payload = None,
    run_logs: Payload = None,
    config: Optional[LayoutConfig] = None,
) -> GraphModel:
    """Build an immutable GraphModel from raw JSON payloads.

    Args:
        conversation: Parsed conversation.json (required).
        step_logs: Parsed stepLogs.json, or None.
        mini_apps: Parsed miniAppRuns.json, or None.
        run_logs: Parsed runLogs.json, or None.
        config: Layout constants; defaults to get_layout_config().

    Returns:
        GraphModel snapshot with both the timeline and per-step trees.
    """
    config = config or get_layout_config()

    parsed_conversation = parse_conversation_file(conversation)
    parsed_step_logs = parse_step_logs_file(step_logs)
    parsed_mini_apps = parse_mini_apps_file(mini_apps)
    parsed_run_logs = parse_run_logs_file(run_logs)

    steps_by_id: Dict[str, ConversationStep] = {}
    for step in parsed_conversation.steps:
        steps_by_id[step.step_id] = step

    step_order = tuple(step.step_id for step in parsed_conversation.steps)
    canonical = _unique(step_order)

    for label, keys in (
        ("step logs", parsed_step_logs.by_step_id),
        ("mini-app runs", parsed_mini_apps.by_step_id),
    ):
        unknown = sorted(set(keys) - set(canonical))
        if unknown:
            logger.info(
                "Ignoring %s for %d step(s) absent from conversation %s: %s",
                label,
                len(unknown),
                parsed_conversation.conversation_id,
                ", ".join(unknown),
            )

    step_logs_by_step_id = {
        sid: parsed_step_logs.by_step_id[sid] for sid in canonical if sid in parsed_step_logs.by_step_id
    }
    runs_by_step_id: Dict[str, Tuple[MiniAppRun, ...]] = {
        sid: parsed_mini_apps.by_step_id[sid] for sid in canonical if sid in parsed_mini_apps.by_step_id
    }

    step_nodes, step_edges = layout_step_timeline(step_order, steps_by_id, config)

    run_nodes_by_step_id: Dict[str, Tuple[GraphNode, ...]] = {}
    run_edges_by_step_id: Dict[str, Tuple[GraphEdge, ...]] = {}
    depths_by_step_id: Dict[str, Dict[str, float]] = {}
    for step_id in canonical:
        runs = runs_by_step_id.get(step_id, ())
        resolution = resolve_step(runs)
        nodes, edges = layout_mini_app_tree(step_id, steps_by_id.get(step_id), runs, resolution, config)
        run_nodes_by_step_id[step_id] = nodes
        run_edges_by_step_id[step_id] = edges
        depths_by_step_id[step_id] = dict(resolution.depth_by_run_id)

    model = GraphModel(
        conversation_id=parsed_conversation.conversation_id,
        step_order=step_order,
        steps_by_id=steps_by_id,
        step_logs_by_step_id=step_logs_by_step_id,
        runs_by_step_id=runs_by_step_id,
        run_logs_by_run_id=dict(parsed_run_logs.by_run_id),
        step_nodes=step_nodes,
        step_edges=step_edges,
        run_nodes_by_step_id=run_nodes_by_step_id,
        run_edges_by_step_id=run_edges_by_step_id,
        depths_by_step_id=depths_by_step_id,
    )
    logger.debug(
        "Built graph model for %s: %d steps, %d runs, %d run logs",
        model.conversation_id,
        len(step_order),
        sum(len(runs) for runs in runs_by_step_id.values()),
        len(model.run_logs_by_run_id),
    )
    return model


def build_graph_model_from_bundle(
    bundle: SourceBundle,
    config: Optional[LayoutConfig] = None,
) -> GraphModel:
    """Convenience wrapper around build_graph_model for a SourceBundle."""
    return build_graph_model(
        bundle.conversation,
        step_logs=bundle.step_logs,
        mini_apps=bundle.mini_apps,
        run_logs=bundle.run_logs,
        config=config,
    )
