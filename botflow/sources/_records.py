"""Helpers shared by the source parsers for reading loosely-shaped JSON."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Mapping, Optional

logger = logging.getLogger(__name__)


def iter_records(payload: Optional[Mapping[str, Any]], key: str) -> Iterator[Dict[str, Any]]:
    """Yield the object records stored under payload[key].

    A missing payload, a missing or non-list array and non-object entries
    all degrade to fewer (or zero) records.
    """
    if not isinstance(payload, Mapping):
        return
    items = payload.get(key)
    if not isinstance(items, list):
        return
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            logger.debug("Skipping non-object entry %d in '%s'", index, key)
            continue
        yield item


def record_id(record: Mapping[str, Any], key: str) -> Optional[str]:
    """Return record[key] as a string id, or None when it is absent."""
    value = record.get(key)
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def text_of(value: Any) -> str:
    """Pull `text` out of a {"text": ...} object, defaulting to ""."""
    if isinstance(value, Mapping):
        text = value.get("text")
        if isinstance(text, str):
            return text
    return ""
