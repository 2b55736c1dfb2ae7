"""Tests for the botflow-graph command-line tool."""

import json

from botflow.tools.build_graph import main


class TestBuildGraphCli:
    """Tests for build_graph.main."""

    def test_demo_to_file(self, tmp_path, capsys):
        out = tmp_path / "out" / "graph.json"

        assert main(["--demo", "--out", str(out)]) == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["stepOrder"] == ["s01", "s02", "s03", "s04", "s05", "s06"]
        assert "conv_4602" in capsys.readouterr().out

    def test_files_to_stdout(self, tmp_path, capsys, conversation, mini_apps):
        conv_path = tmp_path / "conversation.json"
        conv_path.write_text(json.dumps(conversation), encoding="utf-8")
        apps_path = tmp_path / "miniAppRuns.json"
        apps_path.write_text(json.dumps(mini_apps), encoding="utf-8")

        assert main(["--conversation", str(conv_path), "--mini-apps", str(apps_path)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert len(data["runEdgesByStepId"]["s2"]) == 5

    def test_vertical(self, capsys):
        assert main(["--demo", "--orientation", "vertical", "--indent", "0"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert min(n["position"]["x"] for n in data["stepNodes"]) >= 24

    def test_missing_conversation(self, tmp_path, capsys):
        assert main(["--conversation", str(tmp_path / "missing.json")]) == 2
        assert "conversation file is required" in capsys.readouterr().err

    def test_no_conversation_argument(self, capsys):
        assert main([]) == 2
