import json
from pathlib import Path

import pytest
import yaml

from gamebook.engine.types import EncounterNode, NarrativeNode, RandomBranchNode, TerminalNode, UnknownNode
from gamebook.errors import LoadError
from gamebook.validation import load_crt, load_story

ROOT = Path(__file__).resolve().parents[1]

MINI = {
    "title": "Mini",
    "nodes": [
        {
            "id": "start",
            "type": "story",
            "text": "Begin.",
            "choices": [
                {"text": "Walk", "next_node_id": "end"},
                {"description": "Sneak", "next_node_id": "end", "conditions": {"discipline": "Camouflage"}},
            ],
        },
        {
            "id": "fight",
            "type": "encounter",
            "enemies": [{"name": "Rat", "hp": 2, "cs": 3}],
            "outcomes": [{"condition": "combat_won", "next_node_id": "end"}],
        },
        {"id": "roll", "type": "random_roll", "outcomes": [{"condition_int": [0, 1], "next_node_id": "end"}]},
        {"id": "weird", "type": "riddle"},
        {"id": "end", "type": "end"},
    ],
}


def test_bundled_story_and_table_are_valid():
    doc = load_story(ROOT / "data" / "stories" / "kai_trail.toml")
    assert doc.system == "lonewolf"
    graph = doc.to_graph()
    assert graph.start_id == "start"
    assert "game_over" in graph

    crt = load_crt(ROOT / "gamebook" / "data" / "combat_result_table.toml")
    assert len(crt) == 230
    assert crt.gaps() == []


@pytest.mark.parametrize("suffix", [".json", ".yaml"])
def test_story_formats(tmp_path, suffix):
    path = tmp_path / f"mini{suffix}"
    if suffix == ".json":
        path.write_text(json.dumps(MINI), encoding="utf-8")
    else:
        path.write_text(yaml.safe_dump(MINI), encoding="utf-8")
    graph = load_story(path).to_graph()
    assert isinstance(graph.get("start"), NarrativeNode)
    assert isinstance(graph.get("fight"), EncounterNode)
    assert isinstance(graph.get("roll"), RandomBranchNode)
    assert isinstance(graph.get("end"), TerminalNode)
    weird = graph.get("weird")
    assert isinstance(weird, UnknownNode) and weird.type_tag == "riddle"

    walk, sneak = graph.get("start").choices
    assert walk.description == "Walk" and not walk.gated
    assert sneak.required_discipline == "Camouflage"
    assert graph.get("fight").enemies[0].hit_points == 2
    assert graph.get("roll").outcomes[0].condition_int == frozenset({0, 1})


def test_duplicate_id_replaces_earlier(tmp_path):
    data = {
        "nodes": [
            {"id": "start", "type": "story", "choices": [{"next_node_id": "a"}]},
            {"id": "a", "type": "end", "text": "first"},
            {"id": "a", "type": "end", "text": "second"},
        ]
    }
    path = tmp_path / "dup.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    graph = load_story(path).to_graph()
    assert graph.order == ("start", "a")
    assert graph.get("a").text == "second"


def test_missing_file_is_load_error(tmp_path):
    with pytest.raises(LoadError) as exc:
        load_story(tmp_path / "nope.toml")
    assert exc.value.path == tmp_path / "nope.toml"


def test_bad_toml_is_load_error(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("title = \n", encoding="utf-8")
    with pytest.raises(LoadError) as exc:
        load_story(path)
    assert "cannot decode" in str(exc.value)


def test_schema_errors_are_listed(tmp_path):
    path = tmp_path / "s.json"
    path.write_text(json.dumps({"nodes": [{"id": "", "type": "story"}, {"type": "end"}]}), encoding="utf-8")
    with pytest.raises(LoadError) as exc:
        load_story(path)
    msg = str(exc.value)
    assert msg.startswith("JSON Schema validation failed")
    assert "/nodes/0/id" in msg
    assert "/nodes/1" in msg


def test_empty_story_rejected(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text('{"nodes": []}', encoding="utf-8")
    with pytest.raises(LoadError):
        load_story(path)


def test_enemy_needs_stats(tmp_path):
    data = {"nodes": [{"id": "f", "type": "encounter", "enemies": [{"Name": "Ghost"}]}]}
    path = tmp_path / "ghost.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(LoadError):
        load_story(path)


def test_crt_out_of_domain_rejected(tmp_path):
    path = tmp_path / "crt.yaml"
    path.write_text(
        yaml.safe_dump({"results": [{"RandNum": 3, "ComRatio": 12, "EnemyLoss": 1, "PlayerLoss": 1}]}),
        encoding="utf-8",
    )
    with pytest.raises(LoadError):
        load_crt(path)


def test_crt_negative_loss_rejected(tmp_path):
    path = tmp_path / "crt.json"
    path.write_text(json.dumps({"results": [{"RandNum": 3, "ComRatio": 0, "EnemyLoss": -1}]}), encoding="utf-8")
    with pytest.raises(LoadError):
        load_crt(path)


def test_partial_crt_loads_with_gaps(tmp_path):
    path = tmp_path / "crt.toml"
    path.write_text(
        "[[results]]\nRandNum = 3\nComRatio = 5\nEnemyLoss = 5\nPlayerLoss = 2\nIsKilled = false\n",
        encoding="utf-8",
    )
    crt = load_crt(path)
    assert len(crt) == 1
    assert len(crt.gaps()) == 229
