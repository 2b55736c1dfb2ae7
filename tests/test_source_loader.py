"""Tests for loader.py - reading source files and the demo bundle."""

import json

import pytest

from botflow.sources.loader import (
    MissingConversationError,
    SourceFileError,
    load_demo_bundle,
    load_json_file,
    load_source_bundle,
)


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadSourceBundle:
    """Tests for load_source_bundle."""

    def test_loads_all_files(self, tmp_path, conversation, step_logs, mini_apps, run_logs):
        bundle = load_source_bundle(
            write_json(tmp_path / "conversation.json", conversation),
            step_logs=write_json(tmp_path / "stepLogs.json", step_logs),
            mini_apps=write_json(tmp_path / "miniAppRuns.json", mini_apps),
            run_logs=write_json(tmp_path / "runLogs.json", run_logs),
        )

        assert bundle.conversation == conversation
        assert bundle.mini_apps == mini_apps
        assert bundle.run_logs == run_logs

    def test_missing_optional_file_is_absent(self, tmp_path, conversation):
        bundle = load_source_bundle(
            write_json(tmp_path / "conversation.json", conversation),
            run_logs=tmp_path / "missing.json",
        )
        assert bundle.run_logs is None
        assert bundle.step_logs is None

    def test_conversation_required(self):
        with pytest.raises(MissingConversationError):
            load_source_bundle(None)

    def test_missing_conversation_file(self, tmp_path):
        with pytest.raises(MissingConversationError) as exc_info:
            load_source_bundle(tmp_path / "nope.json")
        assert exc_info.value.path == tmp_path / "nope.json"

    def test_invalid_optional_file_raises(self, tmp_path, conversation):
        bad = tmp_path / "miniAppRuns.json"
        bad.write_text("{not json", encoding="utf-8")

        with pytest.raises(SourceFileError) as exc_info:
            load_source_bundle(write_json(tmp_path / "conversation.json", conversation), mini_apps=bad)
        assert exc_info.value.kind == "mini_apps"


class TestLoadJsonFile:
    """Tests for load_json_file."""

    def test_top_level_must_be_object(self, tmp_path):
        with pytest.raises(SourceFileError, match="must be an object"):
            load_json_file(write_json(tmp_path / "list.json", [1, 2]))

    def test_unreadable_path(self, tmp_path):
        with pytest.raises(SourceFileError):
            load_json_file(tmp_path)


class TestDemoBundle:
    """The packaged demo fixtures."""

    def test_demo_bundle_contents(self):
        bundle = load_demo_bundle()

        assert bundle.conversation["conversation_id"] == "conv_4602"
        assert len(bundle.conversation["steps"]) == 6
        assert len(bundle.mini_apps["mini_app_runs"]) == 6
        assert len(bundle.run_logs["run_logs"]) == 20
        assert bundle.step_logs is not None
