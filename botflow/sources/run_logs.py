"""
run_logs.py - Parse the run-logs file into a run id index.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from ._records import iter_records, record_id
from .types import ParsedRunLogs, RunLog

logger = logging.getLogger(__name__)


def parse_run_logs_file(run_logs: Optional[Mapping[str, Any]] = None) -> ParsedRunLogs:
    """Parse runLogs.json into `run_id -> RunLog`.

    Normalized payload fields:
    - kvps: key-value pairs captured for the run.
    - raw: the explicit `raw` payload, or the whole record when absent.
    - http: HTTP / side-effect records.

    Logs whose run id matches no mini-app run are kept; they are simply
    never reached from the graph.
    """
    by_run_id: Dict[str, RunLog] = {}
    for item in iter_records(run_logs, "run_logs"):
        run_id = record_id(item, "run_id")
        if run_id is None:
            logger.debug("Skipping run log without run_id")
            continue
        raw = item.get("raw")
        kvps = item.get("kvps")
        http = item.get("http")
        by_run_id[run_id] = RunLog(
            kvps=kvps if isinstance(kvps, dict) else None,
            raw=raw if raw is not None else item,
            http=http if isinstance(http, list) else None,
        )

    return ParsedRunLogs(by_run_id=by_run_id)
