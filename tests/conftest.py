"""
Test fixtures for the botflow graph model builder.

Provides small hand-written source payloads plus the packaged demo bundle,
and keeps the cached layout config isolated between tests.
"""

from typing import Any, Dict

import pytest

from botflow.config.layout_config import LayoutConfig, reset_config
from botflow.sources.loader import load_demo_bundle


@pytest.fixture(autouse=True)
def _isolate_layout_config(monkeypatch):
    """Drop BOTFLOW_* overrides and the cached config around every test."""
    import os

    for key in list(os.environ):
        if key.startswith("BOTFLOW_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def layout_config() -> LayoutConfig:
    """Built-in layout defaults, independent of layout.yaml."""
    return LayoutConfig()


@pytest.fixture
def conversation() -> Dict[str, Any]:
    """Three steps s1, s2, s3 in file order."""
    return {
        "conversation_id": "conv_test",
        "steps": [
            {
                "step_id": "s1",
                "ts": "2026-02-17T10:00:00Z",
                "user": {"text": "Hello, I need help with a transfer."},
                "bot": {"text": "Sure, where are you sending money?"},
            },
            {
                "step_id": "s2",
                "ts": "2026-02-17T10:00:06Z",
                "user": {"text": "From Mexico to Spain, in EUR."},
                "bot": {"text": "Checking KYC, limits and FX."},
            },
            {"step_id": "s3", "user": {"text": "Thanks"}},
        ],
    }


@pytest.fixture
def mini_apps() -> Dict[str, Any]:
    """Step s2 holds a diamond: r1 -> (r2, r3) -> r4."""
    return {
        "conversation_id": "conv_test",
        "mini_app_runs": [
            {
                "step_id": "s2",
                "runs": [
                    {"run_id": "r4", "name": "policy_guard", "order": 4, "depends_on": ["r2", "r3"]},
                    {"run_id": "r1", "name": "intent_classifier", "order": 1},
                    {"run_id": "r3", "name": "fx_quote", "order": 3, "depends_on": ["r1"]},
                    {"run_id": "r2", "name": "kyc_check", "order": 2, "depends_on": ["r1"]},
                ],
            }
        ],
    }


@pytest.fixture
def step_logs() -> Dict[str, Any]:
    return {
        "conversation_id": "conv_test",
        "step_logs": [
            {"step_id": "s1", "events": [{"level": "info", "msg": "route=help"}]},
            {"step_id": "s2", "events": [{"level": "info", "msg": "route=details"}]},
        ],
    }


@pytest.fixture
def run_logs() -> Dict[str, Any]:
    return {
        "run_logs": [
            {"run_id": "r1", "kvps": {"intent": "transfer", "confidence": 0.97}},
            {"run_id": "r2", "kvps": {"kyc": "ok"}, "raw": {"payload": 1}, "http": [{"status": 200}]},
            {"run_id": "orphan", "kvps": {"unused": True}},
        ]
    }


@pytest.fixture
def demo_bundle():
    return load_demo_bundle()
