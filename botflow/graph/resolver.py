"""
resolver.py - Dependency resolution for a single step's mini-app runs.

Computes the layer ("depth") of every run from its declared `depends_on`
edges. Depth only drives layout columns; it says nothing about the order the
runs actually executed in.

Rules:
1. Only parents that exist in the same step count ("valid parents");
   dangling and cross-step references are dropped.
2. depth = 1 without valid parents, otherwise max(depth(parent) + 1).
3. A cycle is broken where the walk re-enters a run that is still in
   progress: that occurrence counts as depth 1. Nothing is raised.
4. When no run in the step declares any dependency, the run's effective
   order is used as its depth key, so the step lays out as an ordered chain.
5. Runs sharing a depth form a row sorted by effective order.

The walk uses an explicit stack so long dependency chains cannot hit the
interpreter recursion limit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from botflow.sources.types import MiniAppRun, effective_order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepResolution:
    """Logical structure of one step's mini-app tree.

    Attributes:
        has_dependencies: True when any run declares a non-empty depends_on.
            This is a per-step switch; see rule 4 above.
        parents_by_run_id: Run id -> valid parent run ids (deduplicated,
            declaration order).
        depth_by_run_id: Run id -> depth key (topological depth, or the
            effective order in the dependency-free fallback).
        rows: (depth key, runs) pairs sorted by depth key; each row sorted by
            effective order.
    """
    has_dependencies: bool
    parents_by_run_id: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    depth_by_run_id: Dict[str, float] = field(default_factory=dict)
    rows: Tuple[Tuple[float, Tuple[MiniAppRun, ...]], ...] = ()

    @property
    def max_rows(self) -> int:
        """Height of the tallest column, never less than 1."""
        return max([1] + [len(runs) for _, runs in self.rows])

    def column_of(self, depth: float) -> float:
        """Column index for a depth key.

        The depth key is the column in both modes: topological depth with
        dependencies, the effective order in the fallback. A run without an
        order therefore lands in column ORDER_SENTINEL.
        """
        return depth


def has_declared_dependencies(runs: Sequence[MiniAppRun]) -> bool:
    return any(len(run.depends_on) > 0 for run in runs)


def valid_parents(runs: Sequence[MiniAppRun]) -> Dict[str, Tuple[str, ...]]:
    """Map each run id to its parents that exist within this step."""
    run_ids = {run.run_id for run in runs}
    parents_by_run_id: Dict[str, Tuple[str, ...]] = {}
    for run in runs:
        kept: List[str] = []
        for dep in run.depends_on:
            if dep not in run_ids:
                logger.debug("Dropping dangling dependency %s -> %s", run.run_id, dep)
                continue
            if dep not in kept:
                kept.append(dep)
        parents_by_run_id[run.run_id] = tuple(kept)
    return parents_by_run_id


def _resolve_depth(
    start: str,
    parents_by_run_id: Dict[str, Tuple[str, ...]],
    memo: Dict[str, int],
) -> int:
    """Depth of `start`, memoizing every run finalized along the way.

    Each frame is [run_id, parents, next_parent_index, best_depth].
    """
    if start in memo:
        return memo[start]

    in_progress = {start}
    frames: List[list] = [[start, parents_by_run_id.get(start, ()), 0, 1]]

    while frames:
        frame = frames[-1]
        run_id, parents, index, _ = frame

        if index < len(parents):
            parent = parents[index]
            frame[2] = index + 1
            if parent in memo:
                parent_depth = memo[parent]
            elif parent in in_progress:
                logger.debug("Breaking dependency cycle at %s -> %s", run_id, parent)
                parent_depth = 1
            else:
                in_progress.add(parent)
                frames.append([parent, parents_by_run_id.get(parent, ()), 0, 1])
                continue
            frame[3] = max(frame[3], parent_depth + 1)
            continue

        frames.pop()
        in_progress.discard(run_id)
        depth = frame[3]
        memo[run_id] = depth
        if frames:
            frames[-1][3] = max(frames[-1][3], depth + 1)

    return memo[start]


def compute_depths(runs: Sequence[MiniAppRun]) -> Dict[str, int]:
    """Topological depth of every run, tolerant of cycles and dangling ids."""
    parents_by_run_id = valid_parents(runs)
    memo: Dict[str, int] = {}
    return {run.run_id: _resolve_depth(run.run_id, parents_by_run_id, memo) for run in runs}


def resolve_step(runs: Sequence[MiniAppRun]) -> StepResolution:
    """Resolve depths and depth-grouped rows for one step's runs.

    Args:
        runs: The step's runs, normally already sorted by effective order.

    Returns:
        StepResolution for the layout engine. Total over any finite input.
    """
    has_deps = has_declared_dependencies(runs)
    parents_by_run_id = valid_parents(runs)

    if has_deps:
        memo: Dict[str, int] = {}
        depth_by_run_id: Dict[str, float] = {
            run.run_id: _resolve_depth(run.run_id, parents_by_run_id, memo) for run in runs
        }
    else:
        depth_by_run_id = {run.run_id: effective_order(run.order) for run in runs}

    grouped: Dict[float, List[MiniAppRun]] = {}
    for run in runs:
        grouped.setdefault(depth_by_run_id[run.run_id], []).append(run)

    rows = tuple(
        (depth, tuple(sorted(grouped[depth], key=lambda r: effective_order(r.order))))
        for depth in sorted(grouped)
    )

    return StepResolution(
        has_dependencies=has_deps,
        parents_by_run_id=parents_by_run_id,
        depth_by_run_id=depth_by_run_id,
        rows=rows,
    )
