"""
loader.py - Read the four source files from disk.

The graph builder is a pure function over already-parsed JSON payloads. This
module is the caller-side collaborator that turns file paths into a
SourceBundle and enforces the one hard precondition of the pipeline: without
a conversation file there is no step order, so nothing is built.

Usage:
    from botflow.sources.loader import load_source_bundle

    bundle = load_source_bundle(
        "data/conversation.json",
        mini_apps="data/miniAppRuns.json",
    )
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .types import SourceBundle

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_DEMO_DIR = Path(__file__).parent / "demo"
_DEMO_FILES = {
    "conversation": "conversation.json",
    "step_logs": "step_logs.json",
    "mini_apps": "mini_app_runs.json",
    "run_logs": "run_logs.json",
}


# =============================================================================
# Error Types
# =============================================================================


class SourceError(Exception):
    """Base exception for source loading errors."""

    pass


class MissingConversationError(SourceError):
    """Raised when the required conversation file is not supplied."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path
        msg = "A conversation file is required to build the graph"
        if path:
            msg += f" (not found: {path})"
        super().__init__(msg)


class SourceFileError(SourceError):
    """Raised when a source file cannot be read or is not a JSON object."""

    def __init__(self, kind: str, path: Path, reason: str):
        self.kind = kind
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid {kind} file {path}: {reason}")


# =============================================================================
# Loading
# =============================================================================


def load_json_file(path: PathLike, kind: str = "source") -> Dict[str, Any]:
    """Load a JSON object from disk.

    Args:
        path: File to read.
        kind: Label used in error messages ("conversation", "run_logs", ...).

    Returns:
        The decoded top-level object.

    Raises:
        SourceFileError: If the file is unreadable, not valid JSON, or its
            top level is not an object.
    """
    file_path = Path(path)
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SourceFileError(kind, file_path, str(e)) from e
    except json.JSONDecodeError as e:
        raise SourceFileError(kind, file_path, f"invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise SourceFileError(kind, file_path, "top-level value must be an object")

    return data


def _load_optional(path: Optional[PathLike], kind: str) -> Optional[Dict[str, Any]]:
    if path is None:
        return None
    file_path = Path(path)
    if not file_path.exists():
        logger.info("Optional %s file not found, treating as absent: %s", kind, file_path)
        return None
    return load_json_file(file_path, kind)


def load_source_bundle(
    conversation: Optional[PathLike],
    step_logs: Optional[PathLike] = None,
    mini_apps: Optional[PathLike] = None,
    run_logs: Optional[PathLike] = None,
) -> SourceBundle:
    """Load the conversation file plus any optional files into a SourceBundle.

    Raises:
        MissingConversationError: If no conversation path is given or the
            file does not exist.
        SourceFileError: If any supplied file exists but cannot be decoded.
    """
    if conversation is None:
        raise MissingConversationError()
    conversation_path = Path(conversation)
    if not conversation_path.exists():
        raise MissingConversationError(conversation_path)

    bundle = SourceBundle(
        conversation=load_json_file(conversation_path, "conversation"),
        step_logs=_load_optional(step_logs, "step_logs"),
        mini_apps=_load_optional(mini_apps, "mini_apps"),
        run_logs=_load_optional(run_logs, "run_logs"),
    )
    logger.debug(
        "Loaded sources: conversation=%s step_logs=%s mini_apps=%s run_logs=%s",
        conversation_path,
        bundle.step_logs is not None,
        bundle.mini_apps is not None,
        bundle.run_logs is not None,
    )
    return bundle


def load_demo_bundle() -> SourceBundle:
    """Load the packaged demo conversation (six steps, twenty mini-app runs)."""
    return load_source_bundle(**{kind: _DEMO_DIR / name for kind, name in _DEMO_FILES.items()})
