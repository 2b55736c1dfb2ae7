#!/usr/bin/env python3
"""
build_graph.py - Build a graph model from conversation log files.

Reads the conversation file plus any of the optional step-log, mini-app-run
and run-log files, builds the GraphModel and writes it as JSON.

Usage:
    botflow-graph --conversation data/conversation.json \\
        --mini-apps data/miniAppRuns.json --out output/graph.json

    botflow-graph --demo --orientation vertical

Exit codes:
    0 - Graph written
    2 - Missing or invalid source file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from botflow.config.layout_config import get_layout_config
from botflow.graph.builder import build_graph_model_from_bundle
from botflow.graph.decorate import orient_model
from botflow.graph.layout import ORIENTATIONS
from botflow.graph.model import graph_model_to_dict
from botflow.sources.loader import SourceError, load_demo_bundle, load_source_bundle

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build a step timeline and mini-app dependency graph as JSON"
    )
    parser.add_argument("--conversation", help="Path to conversation.json (required unless --demo)")
    parser.add_argument("--step-logs", default=None, help="Path to stepLogs.json")
    parser.add_argument("--mini-apps", default=None, help="Path to miniAppRuns.json")
    parser.add_argument("--run-logs", default=None, help="Path to runLogs.json")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use the packaged demo conversation instead of files",
    )
    parser.add_argument(
        "--orientation",
        choices=ORIENTATIONS,
        default="horizontal",
        help="Layout axis (default: horizontal)",
    )
    parser.add_argument("--out", default="", help="Output JSON path (default: stdout)")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.demo:
            bundle = load_demo_bundle()
        else:
            bundle = load_source_bundle(
                args.conversation,
                step_logs=args.step_logs,
                mini_apps=args.mini_apps,
                run_logs=args.run_logs,
            )
    except SourceError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    model = build_graph_model_from_bundle(bundle)
    model = orient_model(model, args.orientation, get_layout_config().vertical_margin)
    text = json.dumps(graph_model_to_dict(model), indent=args.indent or None, ensure_ascii=False)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
        print(f"Wrote graph for {model.conversation_id} ({len(model.step_order)} steps) to {out_path}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
