import json

import pytest

from vigil import config
from vigil.graph.builder import DEFAULT_HEURISTICS, build_graph
from vigil.video_library import VideoMeta


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config, "get_config_path", lambda: path)
    monkeypatch.delenv("VIGIL_PORT", raising=False)
    monkeypatch.delenv("VIGIL_LOG_LEVEL", raising=False)
    return path


def test_load_config(config_path):
    assert config.load_config() == {}
    config_path.write_text(json.dumps({"port": 9000}), encoding="utf-8")
    assert config.load_config() == {"port": 9000}


def test_corrupt_config_is_ignored(config_path):
    config_path.write_text("[broken", encoding="utf-8")
    assert config.load_config() == {}


def test_port_priority(config_path, monkeypatch):
    assert config.get_port({}) == config.DEFAULT_PORT
    assert config.get_port({"port": "9001"}) == 9001
    monkeypatch.setenv("VIGIL_PORT", "9100")
    assert config.get_port({"port": 9001}) == 9100
    monkeypatch.setenv("VIGIL_PORT", "abc")
    assert config.get_port({}) == config.DEFAULT_PORT


def test_log_level(config_path, monkeypatch):
    assert config.get_log_level({}) == "INFO"
    assert config.get_log_level({"log_level": "debug"}) == "DEBUG"
    monkeypatch.setenv("VIGIL_LOG_LEVEL", "chatty")
    assert config.get_log_level({}) == "INFO"


def test_edge_mode(config_path):
    assert config.get_edge_mode({}) == "star"
    assert config.get_edge_mode({"graph_edge_mode": "graph"}) == "graph"
    assert config.get_edge_mode({"graph_edge_mode": "spiral"}) == "star"


def test_graph_heuristics_overrides(config_path):
    with config_path.open("w", encoding="utf-8") as f:
        json.dump({"graph_heuristics": {
            "long_clip_seconds": 600,
            "fire_keywords": ["spark"],
            "safety_keywords": "hazard",
            "bogus": 1,
        }}, f)

    heuristics = config.get_graph_heuristics()
    assert heuristics.long_clip_seconds == 600
    assert heuristics.fire_keywords == ("spark",)
    assert heuristics.safety_keywords == ("hazard",)
    assert heuristics.short_clip_seconds == DEFAULT_HEURISTICS.short_clip_seconds


def test_graph_heuristics_defaults(config_path):
    assert config.get_graph_heuristics({}) == DEFAULT_HEURISTICS
    assert config.get_graph_heuristics({"graph_heuristics": []}) == DEFAULT_HEURISTICS


def test_graph_heuristics_numeric_strings_are_converted(config_path):
    heuristics = config.get_graph_heuristics({"graph_heuristics": {
        "long_clip_seconds": "600",
        "short_clip_seconds": 45,
        "multi_tag_count": "3",
    }})
    assert heuristics.long_clip_seconds == 600.0
    assert heuristics.short_clip_seconds == 45.0
    assert heuristics.multi_tag_count == 3

    graph = build_graph(VideoMeta(id="v", name="V", duration_seconds=30), heuristics)
    assert "Short clip" in [n.label for n in graph.nodes]


@pytest.mark.parametrize("key,value", [
    ("fire_keywords", 5),
    ("safety_keywords", {"a": 1}),
    ("long_clip_seconds", "ten minutes"),
    ("short_clip_seconds", None),
    ("multi_tag_count", True),
    ("long_clip_seconds", -1),
    ("short_clip_seconds", "nan"),
])
def test_invalid_graph_heuristics_keep_defaults(config_path, key, value):
    heuristics = config.get_graph_heuristics({"graph_heuristics": {key: value}})
    assert getattr(heuristics, key) == getattr(DEFAULT_HEURISTICS, key)

    graph = build_graph(VideoMeta(id="v", name="V", tags=["fire"], duration_seconds=30), heuristics)
    assert graph.get_node("status").label == "Fire attention"
