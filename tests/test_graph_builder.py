"""Tests for builder.py - assembling the GraphModel from source payloads.

These tests verify:
1. The conversation file defines step order and the complete step key set
2. The documented diamond scenario resolves and lays out as expected
3. Building is deterministic
4. Optional inputs degrade to empty collections
5. Serialization follows the renderer contract
"""

import json

import pytest

from botflow.graph import build_graph_model, build_graph_model_from_bundle, graph_model_to_dict


@pytest.fixture
def model(conversation, step_logs, mini_apps, run_logs, layout_config):
    return build_graph_model(conversation, step_logs, mini_apps, run_logs, config=layout_config)


# =============================================================================
# Step order and key set
# =============================================================================


class TestStepOrder:
    """The conversation file is the canonical step order."""

    def test_step_order_matches_conversation(self, model):
        assert model.step_order == ("s1", "s2", "s3")
        assert [n.id for n in model.step_nodes] == ["step:s1", "step:s2", "step:s3"]

    def test_order_independent_of_other_files(self, conversation, layout_config):
        mini_apps = {
            "mini_app_runs": [
                {"step_id": "s3", "runs": [{"run_id": "x", "name": "x"}]},
                {"step_id": "s1", "runs": [{"run_id": "y", "name": "y"}]},
            ]
        }
        step_logs = {"step_logs": [{"step_id": "s3", "events": []}, {"step_id": "s1", "events": []}]}
        model = build_graph_model(conversation, step_logs, mini_apps, None, config=layout_config)

        assert model.step_order == ("s1", "s2", "s3")
        assert list(model.run_nodes_by_step_id) == ["s1", "s2", "s3"]

    def test_unknown_step_is_excluded(self, conversation, mini_apps, layout_config):
        mini_apps["mini_app_runs"].append(
            {"step_id": "ghost", "runs": [{"run_id": "g1", "name": "ghost_run"}]}
        )
        step_logs = {"step_logs": [{"step_id": "ghost", "events": [{"x": 1}]}]}
        model = build_graph_model(conversation, step_logs, mini_apps, None, config=layout_config)

        assert "ghost" not in model.runs_by_step_id
        assert "ghost" not in model.run_nodes_by_step_id
        assert "ghost" not in model.run_edges_by_step_id
        assert "ghost" not in model.step_logs_by_step_id
        for step_id in model.step_order:
            nodes, _ = model.tree_for(step_id)
            assert all("g1" not in n.id for n in nodes)

    def test_duplicate_step_ids_keep_file_sequence(self, layout_config):
        conversation = {
            "conversation_id": "c",
            "steps": [
                {"step_id": "a", "user": {"text": "first"}},
                {"step_id": "b"},
                {"step_id": "a", "user": {"text": "second"}},
            ],
        }
        model = build_graph_model(conversation, config=layout_config)

        assert model.step_order == ("a", "b", "a")
        assert model.steps_by_id["a"].user_text == "second"
        assert list(model.run_nodes_by_step_id) == ["a", "b"]


# =============================================================================
# Diamond scenario
# =============================================================================


class TestDiamondScenario:
    """Step s2: r1 -> (r2, r3) -> r4."""

    def test_depths(self, model):
        assert model.depths_by_step_id["s2"] == {"r1": 1, "r2": 2, "r3": 2, "r4": 3}

    def test_node_count(self, model):
        nodes, _ = model.tree_for("s2")
        assert len(nodes) == 5
        assert sum(1 for n in nodes if n.data.kind == "run") == 4
        assert sum(1 for n in nodes if n.id == "runroot:s2") == 1

    def test_r4_has_two_incoming_edges(self, model):
        _, edges = model.tree_for("s2")
        sources = sorted(e.source for e in edges if e.target == "run:s2:r4")
        assert sources == ["run:s2:r2", "run:s2:r3"]

    def test_runs_are_sorted(self, model):
        assert [r.run_id for r in model.runs_by_step_id["s2"]] == ["r1", "r2", "r3", "r4"]

    def test_steps_without_runs_get_a_root_only_tree(self, model):
        nodes, edges = model.tree_for("s1")
        assert [n.id for n in nodes] == ["runroot:s1"]
        assert edges == ()
        assert "s1" not in model.runs_by_step_id


# =============================================================================
# Determinism and graceful degradation
# =============================================================================


class TestBuilderProperties:
    """Purity and tolerance of the builder."""

    def test_deterministic(self, conversation, step_logs, mini_apps, run_logs, layout_config):
        first = build_graph_model(conversation, step_logs, mini_apps, run_logs, config=layout_config)
        second = build_graph_model(conversation, step_logs, mini_apps, run_logs, config=layout_config)

        assert json.dumps(graph_model_to_dict(first)) == json.dumps(graph_model_to_dict(second))

    def test_conversation_only(self, conversation, layout_config):
        model = build_graph_model(conversation, config=layout_config)

        assert model.step_logs_by_step_id == {}
        assert model.runs_by_step_id == {}
        assert model.run_logs_by_run_id == {}
        assert len(model.step_nodes) == 3
        assert len(model.step_edges) == 2

    def test_empty_conversation(self, layout_config):
        model = build_graph_model({"conversation_id": "empty"}, config=layout_config)
        assert model.step_order == ()
        assert model.step_nodes == ()
        assert model.step_edges == ()

    def test_orphan_run_logs_are_kept(self, model):
        assert "orphan" in model.run_logs_by_run_id

    def test_lookups_are_read_only(self, model):
        with pytest.raises(TypeError):
            model.run_nodes_by_step_id["s9"] = ()
        with pytest.raises(TypeError):
            model.depths_by_step_id["s2"]["r1"] = 7

        assert "s9" not in model.run_nodes_by_step_id
        assert model.depths_by_step_id["s2"]["r1"] == 1
        assert model.run_logs_by_run_id["r1"].raw["run_id"] == "r1"

    def test_step_logs_passed_through(self, model, step_logs):
        assert model.step_logs_by_step_id["s1"] == step_logs["step_logs"][0]["events"]

    def test_cycle_does_not_raise(self, conversation, layout_config):
        mini_apps = {
            "mini_app_runs": [
                {
                    "step_id": "s1",
                    "runs": [
                        {"run_id": "A", "name": "a", "order": 1, "depends_on": ["B"]},
                        {"run_id": "B", "name": "b", "order": 2, "depends_on": ["A"]},
                    ],
                }
            ]
        }
        model = build_graph_model(conversation, mini_apps=mini_apps, config=layout_config)
        nodes, edges = model.tree_for("s1")

        assert {n.id for n in nodes} == {"runroot:s1", "run:s1:A", "run:s1:B"}
        assert len(edges) == 2

    def test_uses_layout_config(self, conversation):
        from botflow.config.layout_config import LayoutConfig

        model = build_graph_model(conversation, config=LayoutConfig(step_spacing_x=100))
        assert [n.position.x for n in model.step_nodes] == [0, 100, 200]


# =============================================================================
# Serialization and demo
# =============================================================================


class TestSerialization:
    """graph_model_to_dict produces the renderer contract."""

    def test_top_level_keys(self, model):
        data = graph_model_to_dict(model)
        assert set(data) == {
            "conversationId",
            "stepOrder",
            "stepsById",
            "stepLogsByStepId",
            "runsByStepId",
            "runLogsByRunId",
            "stepNodes",
            "stepEdges",
            "runNodesByStepId",
            "runEdgesByStepId",
        }

    def test_node_shape(self, model):
        data = graph_model_to_dict(model)
        run_node = data["runNodesByStepId"]["s2"][1]

        assert run_node["id"] == "run:s2:r1"
        assert run_node["type"] == "graphNode"
        assert run_node["position"] == {"x": 320, "y": 185}
        assert run_node["data"]["kind"] == "run"
        assert run_node["data"]["runId"] == "r1"
        assert "active" not in run_node["data"]

    def test_edge_shape(self, model):
        data = graph_model_to_dict(model)
        dep_edge = data["runEdgesByStepId"]["s2"][1]

        assert dep_edge["style"]["strokeDasharray"] == "5 4"
        assert "strokeDasharray" not in data["stepEdges"][0]["style"]
        assert data["stepEdges"][0]["animated"] is True

    def test_serializes_to_json(self, model):
        json.dumps(graph_model_to_dict(model))

    def test_demo_bundle(self, demo_bundle, layout_config):
        model = build_graph_model_from_bundle(demo_bundle, config=layout_config)

        assert model.conversation_id == "conv_4602"
        assert model.step_order == ("s01", "s02", "s03", "s04", "s05", "s06")
        assert model.depths_by_step_id["s02"] == {"r004": 1, "r005": 2, "r006": 2, "r007": 3, "r008": 4}
        assert len(model.run_logs_by_run_id) == 20
