"""
botflow.sources - Source parsers for the four conversation log files.

Each parser is a pure normalization function over one file kind:

    conversation.py - conversation.json  -> ParsedConversation
    step_logs.py    - stepLogs.json      -> ParsedStepLogs
    mini_apps.py    - miniAppRuns.json   -> ParsedMiniApps
    run_logs.py     - runLogs.json       -> ParsedRunLogs

loader.py reads the files from disk; demo/ holds a packaged example set.
"""

from .conversation import parse_conversation_file
from .loader import (
    MissingConversationError,
    SourceError,
    SourceFileError,
    load_demo_bundle,
    load_json_file,
    load_source_bundle,
)
from .mini_apps import parse_mini_apps_file
from .run_logs import parse_run_logs_file
from .step_logs import parse_step_logs_file
from .types import (
    ORDER_SENTINEL,
    ConversationStep,
    MiniAppRun,
    ParsedConversation,
    ParsedMiniApps,
    ParsedRunLogs,
    ParsedStepLogs,
    RunLog,
    SourceBundle,
    effective_order,
)

__all__ = [
    # Parsers
    "parse_conversation_file",
    "parse_step_logs_file",
    "parse_mini_apps_file",
    "parse_run_logs_file",
    # Loading
    "load_json_file",
    "load_source_bundle",
    "load_demo_bundle",
    "SourceError",
    "MissingConversationError",
    "SourceFileError",
    # Types
    "ORDER_SENTINEL",
    "effective_order",
    "ConversationStep",
    "MiniAppRun",
    "RunLog",
    "ParsedConversation",
    "ParsedStepLogs",
    "ParsedMiniApps",
    "ParsedRunLogs",
    "SourceBundle",
]
