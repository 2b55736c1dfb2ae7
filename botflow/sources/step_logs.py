"""
step_logs.py - Parse the step-logs file into a step id index.

Events are opaque; they are passed through verbatim.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from ._records import iter_records, record_id
from .types import ParsedStepLogs

logger = logging.getLogger(__name__)


def parse_step_logs_file(step_logs: Optional[Mapping[str, Any]] = None) -> ParsedStepLogs:
    """Parse stepLogs.json into `step_id -> events`.

    An absent file yields an empty index. A step listed twice keeps the
    last entry.
    """
    by_step_id: Dict[str, List[Any]] = {}
    for item in iter_records(step_logs, "step_logs"):
        step_id = record_id(item, "step_id")
        if step_id is None:
            logger.debug("Skipping step log without step_id")
            continue
        events = item.get("events")
        by_step_id[step_id] = events if isinstance(events, list) else []

    return ParsedStepLogs(by_step_id=by_step_id)
