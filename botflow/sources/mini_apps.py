"""
mini_apps.py - Parse the mini-app-runs file into step-scoped run lists.

Input shape:
    {"conversation_id": str,
     "mini_app_runs": [{"step_id", "runs": [{"run_id", "name", "order"?,
                                             "depends_on"?: [run_id]}]}]}
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ._records import iter_records, record_id
from .types import MiniAppRun, ParsedMiniApps, coerce_order

logger = logging.getLogger(__name__)


def _normalize_depends_on(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(dep) for dep in value if dep is not None and not isinstance(dep, (dict, list)))


def parse_run(record: Mapping[str, Any]) -> Optional[MiniAppRun]:
    """Normalize a single run record; None when it has no run_id."""
    run_id = record_id(record, "run_id")
    if run_id is None:
        return None
    name = record.get("name")
    return MiniAppRun(
        run_id=run_id,
        name=name if isinstance(name, str) else "",
        order=coerce_order(record.get("order")),
        depends_on=_normalize_depends_on(record.get("depends_on")),
    )


def parse_mini_apps_file(mini_apps: Optional[Mapping[str, Any]] = None) -> ParsedMiniApps:
    """Parse miniAppRuns.json into `step_id -> runs`.

    Each step's runs are sorted by `order` ascending; runs without an order
    sort last (ORDER_SENTINEL). The sort is stable, so equal orders keep file
    order. `depends_on` is always a tuple, empty when missing.
    """
    by_step_id: Dict[str, Tuple[MiniAppRun, ...]] = {}
    for item in iter_records(mini_apps, "mini_app_runs"):
        step_id = record_id(item, "step_id")
        if step_id is None:
            logger.debug("Skipping mini-app group without step_id")
            continue

        runs: List[MiniAppRun] = []
        for run_record in iter_records(item, "runs"):
            run = parse_run(run_record)
            if run is None:
                logger.debug("Skipping run without run_id in step '%s'", step_id)
                continue
            runs.append(run)

        by_step_id[step_id] = tuple(sorted(runs, key=lambda r: r.sort_key))

    return ParsedMiniApps(by_step_id=by_step_id)
