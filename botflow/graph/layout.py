"""
layout.py - Turn the step sequence and resolved trees into coordinates.

Two graph shapes are produced:

Step timeline:
    One node per step, left to right at a fixed spacing, alternating between
    two y levels to reduce edge overlap. One edge per consecutive pair;
    every other edge is flagged animated.

Mini-app tree (per step):
    Depth keys become columns. A synthetic root node for the step sits at
    the left, vertically centred on the tallest column. Each column is
    centred as a block against the tallest column, then stacked by row
    height. Edges depend on the step-level dependency switch:
    - with dependencies: root -> every run without valid parents, and one
      dashed edge per valid parent;
    - without: root -> first run, then a linear chain in order.

`orient_nodes` re-flows any node list for the vertical orientation.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Literal, Mapping, Optional, Sequence, Tuple

from botflow.config.layout_config import LayoutConfig
from botflow.sources.types import ConversationStep, MiniAppRun

from .model import (
    CHAIN_STYLE,
    DEPENDENCY_STYLE,
    ROOT_STYLE,
    SEQUENCE_STYLE,
    GraphEdge,
    GraphNode,
    Position,
    RunNodeData,
    StepNodeData,
    root_node_id,
    run_node_id,
    step_node_id,
)
from .resolver import StepResolution

logger = logging.getLogger(__name__)

Orientation = Literal["horizontal", "vertical"]
ORIENTATIONS: Tuple[str, ...] = ("horizontal", "vertical")


def _tone(config: LayoutConfig, index: int) -> str:
    return config.tones[index % len(config.tones)] if config.tones else "slate"


def _format_order(order: Optional[float]) -> str:
    if not order:
        return ""
    if isinstance(order, float) and order.is_integer():
        order = int(order)
    return f"order {order}"


# =============================================================================
# Step timeline
# =============================================================================


def layout_step_timeline(
    step_ids: Sequence[str],
    steps_by_id: Mapping[str, ConversationStep],
    config: LayoutConfig,
) -> Tuple[Tuple[GraphNode, ...], Tuple[GraphEdge, ...]]:
    """Place one node per step and connect consecutive steps.

    Args:
        step_ids: Canonical step order (conversation file order).
        steps_by_id: Step id -> ConversationStep, for labels.
        config: Layout constants.

    Returns:
        (nodes, edges) of the timeline graph.
    """
    nodes: List[GraphNode] = []
    for index, step_id in enumerate(step_ids):
        step: Optional[ConversationStep] = steps_by_id.get(step_id)
        nodes.append(
            GraphNode(
                id=step_node_id(step_id),
                position=Position(
                    x=index * config.step_spacing_x,
                    y=config.step_base_y + (index % 2) * config.step_zigzag_y,
                ),
                data=StepNodeData(
                    step_id=step_id,
                    label=f"Step {step_id}",
                    subtitle=(step.user_text if step else "")[: config.step_subtitle_chars],
                    meta=(step.ts or "") if step else "",
                    tone=_tone(config, index),
                ),
            )
        )

    edges: List[GraphEdge] = []
    for index in range(len(step_ids) - 1):
        source, target = step_ids[index], step_ids[index + 1]
        edges.append(
            GraphEdge(
                id=f"e-step:{source}->{target}",
                source=step_node_id(source),
                target=step_node_id(target),
                kind="sequence",
                style=SEQUENCE_STYLE,
                animated=index % 2 == 0,
            )
        )

    return tuple(nodes), tuple(edges)


# =============================================================================
# Mini-app tree
# =============================================================================


def _root_edge(step_id: str, run_id: str) -> GraphEdge:
    return GraphEdge(
        id=f"e-root:{step_id}->{run_id}",
        source=root_node_id(step_id),
        target=run_node_id(step_id, run_id),
        kind="root",
        style=ROOT_STYLE,
    )


def _run_edge(step_id: str, source_run: str, target_run: str, kind: str) -> GraphEdge:
    return GraphEdge(
        id=f"e-run:{step_id}:{source_run}->{target_run}",
        source=run_node_id(step_id, source_run),
        target=run_node_id(step_id, target_run),
        kind=kind,
        style=DEPENDENCY_STYLE if kind == "dependency" else CHAIN_STYLE,
    )


def layout_mini_app_tree(
    step_id: str,
    step: Optional[ConversationStep],
    runs: Sequence[MiniAppRun],
    resolution: StepResolution,
    config: LayoutConfig,
) -> Tuple[Tuple[GraphNode, ...], Tuple[GraphEdge, ...]]:
    """Lay out one step's mini-app tree.

    Args:
        step_id: The step the tree belongs to.
        step: Conversation record for root labels, if known.
        runs: The step's runs in effective order.
        resolution: Output of resolver.resolve_step for the same runs.
        config: Layout constants.

    Returns:
        (nodes, edges); the synthetic root is always the first node.
    """
    max_rows = resolution.max_rows
    row_height = config.run_row_height
    baseline = config.run_baseline_y
    summary = step.user_text if step else ""

    nodes: List[GraphNode] = [
        GraphNode(
            id=root_node_id(step_id),
            position=Position(x=config.root_x, y=baseline + ((max_rows - 1) * row_height) / 2),
            data=StepNodeData(
                step_id=step_id,
                label=f"Step {step_id}",
                subtitle=summary[: config.root_subtitle_chars] or "Mini-app tree",
                meta=f"{len(runs)} mini-apps",
                tone="slate",
            ),
        )
    ]

    for depth, row in resolution.rows:
        column = resolution.column_of(depth)
        top = baseline + ((max_rows - len(row)) * row_height) / 2
        for index, run in enumerate(row):
            nodes.append(
                GraphNode(
                    id=run_node_id(step_id, run.run_id),
                    position=Position(x=column * config.run_column_width, y=top + index * row_height),
                    data=RunNodeData(
                        step_id=step_id,
                        run_id=run.run_id,
                        label=run.name.replace("_", " "),
                        subtitle=run.run_id,
                        meta=_format_order(run.order),
                        tone=_tone(config, index),
                        depth=depth,
                    ),
                )
            )

    edges: List[GraphEdge] = []
    if resolution.has_dependencies:
        for run in runs:
            parents = resolution.parents_by_run_id.get(run.run_id, ())
            if not parents:
                edges.append(_root_edge(step_id, run.run_id))
                continue
            for parent in parents:
                edges.append(_run_edge(step_id, parent, run.run_id, "dependency"))
    elif runs:
        edges.append(_root_edge(step_id, runs[0].run_id))
        for previous, current in zip(runs, runs[1:]):
            edges.append(_run_edge(step_id, previous.run_id, current.run_id, "chain"))

    logger.debug(
        "Laid out step %s: %d runs, %d columns, %d edges",
        step_id,
        len(runs),
        len(resolution.rows),
        len(edges),
    )

    return tuple(nodes), tuple(edges)


# =============================================================================
# Orientation
# =============================================================================


def orient_nodes(
    nodes: Sequence[GraphNode],
    orientation: str,
    margin: float,
) -> Tuple[GraphNode, ...]:
    """Re-flow node positions for the requested orientation.

    "horizontal" returns the nodes unchanged. "vertical" swaps x and y, then
    translates each axis so its minimum (taken together with 0) is at least
    `margin`.

    Raises:
        ValueError: For an unknown orientation.
    """
    if orientation not in ORIENTATIONS:
        raise ValueError(f"Unknown orientation '{orientation}' (expected one of {ORIENTATIONS})")
    if orientation == "horizontal" or not nodes:
        return tuple(nodes)

    swapped = [Position(x=n.position.y, y=n.position.x) for n in nodes]
    min_x = min([p.x for p in swapped] + [0])
    min_y = min([p.y for p in swapped] + [0])
    offset_x = margin - min_x if min_x < margin else 0
    offset_y = margin - min_y if min_y < margin else 0

    return tuple(
        replace(node, position=Position(x=pos.x + offset_x, y=pos.y + offset_y))
        for node, pos in zip(nodes, swapped)
    )
