"""
conversation.py - Parse the conversation file.

Input shape:
    {"conversation_id": str,
     "steps": [{"step_id", "ts"?, "user"?: {"text"?}, "bot"?: {"text"?}}]}

The step list defines the canonical step order for the whole graph model,
so the parser never reorders it.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from ._records import iter_records, record_id, text_of
from .types import ConversationStep, ParsedConversation

logger = logging.getLogger(__name__)


def parse_conversation_file(conversation: Optional[Mapping[str, Any]]) -> ParsedConversation:
    """Parse conversation.json into a ParsedConversation.

    Nested `user.text` / `bot.text` are flattened into `user_text` /
    `bot_text`, defaulting to "" when missing. Steps without a `step_id`
    cannot be addressed and are skipped.
    """
    conversation_id = ""
    if isinstance(conversation, Mapping):
        raw_id = conversation.get("conversation_id")
        conversation_id = "" if raw_id is None else str(raw_id)

    steps: List[ConversationStep] = []
    for item in iter_records(conversation, "steps"):
        step_id = record_id(item, "step_id")
        if step_id is None:
            logger.debug("Skipping conversation step without step_id: %r", item)
            continue
        ts = item.get("ts")
        steps.append(
            ConversationStep(
                step_id=step_id,
                ts=ts if isinstance(ts, str) else None,
                user_text=text_of(item.get("user")),
                bot_text=text_of(item.get("bot")),
            )
        )

    return ParsedConversation(conversation_id=conversation_id, steps=tuple(steps))
