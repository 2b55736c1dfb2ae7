"""
types.py - Normalized records produced by the source parsers.

Each parser owns exactly one input file kind and turns its raw JSON payload
into one of the Parsed* containers below. Nothing here knows about the other
files; cross-file merging happens in botflow.graph.builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# Type aliases for readability
StepId = str
RunId = str

# Runs without an explicit order sort after every ordered run.
ORDER_SENTINEL = 10_000


def effective_order(order: Optional[float]) -> float:
    """Return the run order, or ORDER_SENTINEL when the run has none."""
    return order if order is not None else ORDER_SENTINEL


def coerce_order(value: Any) -> Optional[float]:
    """Keep numeric orders; anything else counts as missing.

    bool is rejected explicitly since it is an int subclass.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


# =============================================================================
# Conversation
# =============================================================================


@dataclass(frozen=True)
class ConversationStep:
    """One conversational turn, with the nested user/bot text flattened."""
    step_id: StepId
    ts: Optional[str] = None
    user_text: str = ""
    bot_text: str = ""


@dataclass(frozen=True)
class ParsedConversation:
    """Conversation file contents; `steps` keeps file order."""
    conversation_id: str
    steps: Tuple[ConversationStep, ...] = ()


# =============================================================================
# Step logs
# =============================================================================


@dataclass(frozen=True)
class ParsedStepLogs:
    """Step id -> opaque event list, passed through verbatim."""
    by_step_id: Dict[StepId, List[Any]] = field(default_factory=dict)


# =============================================================================
# Mini-app runs
# =============================================================================


@dataclass(frozen=True)
class MiniAppRun:
    """One mini-app execution under a step.

    Attributes:
        run_id: Identifier, unique within its step.
        name: Mini-app name (e.g. "intent_classifier").
        order: Optional ordering hint; None sorts last (ORDER_SENTINEL).
        depends_on: Run ids of sibling runs in the same step. Always a tuple.
    """
    run_id: RunId
    name: str = ""
    order: Optional[float] = None
    depends_on: Tuple[RunId, ...] = ()

    @property
    def sort_key(self) -> float:
        return effective_order(self.order)


@dataclass(frozen=True)
class ParsedMiniApps:
    """Step id -> runs sorted by effective order (stable)."""
    by_step_id: Dict[StepId, Tuple[MiniAppRun, ...]] = field(default_factory=dict)


# =============================================================================
# Run logs
# =============================================================================


@dataclass(frozen=True)
class RunLog:
    """Key-value log for a single run.

    `raw` falls back to the whole source record when the file gives no
    explicit raw payload.
    """
    kvps: Optional[Dict[str, Any]] = None
    raw: Any = None
    http: Optional[List[Any]] = None


@dataclass(frozen=True)
class ParsedRunLogs:
    """Run id -> RunLog. Global namespace, independent of steps."""
    by_run_id: Dict[RunId, RunLog] = field(default_factory=dict)


# =============================================================================
# Source bundle
# =============================================================================


@dataclass(frozen=True)
class SourceBundle:
    """The four raw payloads handed to the builder.

    Only the conversation payload is required. The others are None when the
    corresponding file was not supplied.
    """
    conversation: Dict[str, Any]
    step_logs: Optional[Dict[str, Any]] = None
    mini_apps: Optional[Dict[str, Any]] = None
    run_logs: Optional[Dict[str, Any]] = None
