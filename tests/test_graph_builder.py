import pytest

from vigil.graph.builder import (
    GraphHeuristics,
    build_graph,
    derive_status_node,
    format_upload_time,
)
from vigil.video_library import VideoMeta


def make_video(**overrides):
    data = dict(
        id="dock-01",
        name="Dock patrol",
        src="./cache_videos/dock-01.mp4",
        tags=["forklift"],
        summary="Night patrol along the loading dock",
        duration_seconds=120,
        uploaded_at="2024-03-05T08:09:00",
    )
    data.update(overrides)
    return VideoMeta(**data)


def insights(graph):
    return [n for n in graph.nodes if n.type == "insight"]


def test_empty_state_graph():
    graph = build_graph(None)

    assert [n.id for n in graph.nodes] == ["context", "task", "scene", "risk"]
    assert len(graph.edges) == 3
    fixed = [n.id for n in graph.nodes if n.fixed]
    assert fixed == ["context"]


def test_video_graph_structure():
    graph = build_graph(make_video(tags=["forklift", "dock"]))

    ids = [n.id for n in graph.nodes]
    assert ids[:6] == ["video", "summary", "duration", "uploaded", "tag-hub", "status"]
    assert "tag-0" in ids and "tag-1" in ids
    assert [n.id for n in graph.nodes if n.fixed] == ["video"]
    assert graph.get_node("video").label == "Dock patrol"

    pairs = {(e.source, e.target) for e in graph.edges}
    for target in ("summary", "duration", "uploaded", "tag-hub", "status"):
        assert ("video", target) in pairs
    assert ("tag-hub", "tag-0") in pairs
    assert ("tag-hub", "tag-1") in pairs

    # every edge resolves to a node
    for edge in graph.edges:
        assert edge.source in ids and edge.target in ids


def test_summary_edge_is_highlighted():
    graph = build_graph(make_video())
    summary_edge = next(e for e in graph.edges if e.target == "summary")
    assert summary_edge.type == "highlight"
    assert all(e.type is None for e in graph.edges if e.target == "duration")


def test_many_tags_and_blank_summary():
    video = make_video(tags=["fire", "helmet", "helmet", "line", "zone"], summary="")
    graph = build_graph(video)

    found = {n.label: n for n in insights(graph)}
    assert found["Multi-tag scene"].anchor == "tag-hub"
    assert found["Missing summary"].anchor == "summary"
    assert graph.get_node("status").label == "Fire attention"

    highlighted = {(e.source, e.target) for e in graph.edges if e.type == "highlight"}
    for node in insights(graph):
        assert (node.anchor, node.id) in highlighted

    # duplicate tags still get distinct nodes
    assert len([n for n in graph.nodes if n.type == "tag"]) == 5


@pytest.mark.parametrize("seconds,label", [
    (30, "Short clip"),
    (400, "Long-form inspection"),
    (300, "Long-form inspection"),
])
def test_duration_insights(seconds, label):
    graph = build_graph(make_video(duration_seconds=seconds))
    anchored = [n for n in insights(graph) if n.anchor == "duration"]
    assert [n.label for n in anchored] == [label]


@pytest.mark.parametrize("seconds", [120, 60, 0])
def test_no_duration_insight_in_middle_range(seconds):
    graph = build_graph(make_video(duration_seconds=seconds))
    assert [n for n in insights(graph) if n.anchor == "duration"] == []


@pytest.mark.parametrize("tags,label", [
    (["Smoke near gate"], "Fire attention"),
    (["火情"], "Fire attention"),
    (["safety vest"], "Safety alert"),
    (["告警"], "Safety alert"),
    ([], "Needs labeling"),
    (["forklift"], "Inspection overview"),
])
def test_status_derivation(tags, label):
    assert derive_status_node(tags).label == label


def test_fire_wins_over_safety():
    assert derive_status_node(["safety", "fire"]).label == "Fire attention"


def test_custom_heuristics():
    heuristics = GraphHeuristics(multi_tag_count=2, short_clip_seconds=200, fire_keywords=("spark",))
    graph = build_graph(make_video(tags=["spark", "dock"], duration_seconds=120), heuristics)

    labels = [n.label for n in insights(graph)]
    assert "Multi-tag scene" in labels
    assert "Short clip" in labels
    assert graph.get_node("status").label == "Fire attention"


def test_duration_label_and_detail():
    graph = build_graph(make_video(duration_seconds=125))
    duration = graph.get_node("duration")
    assert duration.label == "Duration 02:05"
    assert "125 seconds" in duration.detail

    graph = build_graph(make_video(duration_seconds=125, duration_formatted="2m5s"))
    assert graph.get_node("duration").label == "Duration 2m5s"


def test_unnamed_video_and_blank_summary_placeholder():
    graph = build_graph(make_video(name="", summary="   "))
    assert graph.get_node("video").label == "Untitled video"
    assert graph.get_node("summary").detail == "No summary provided yet"


def test_builder_does_not_mutate_input():
    tags = ["fire", "dock"]
    video = make_video(tags=tags)
    build_graph(video)
    assert video.tags == ["fire", "dock"]
    assert tags == ["fire", "dock"]


def test_format_upload_time():
    assert format_upload_time(None) == "Upload time not recorded"
    assert format_upload_time("not a date") == "Upload time has an invalid format"
    assert format_upload_time("2024-03-05T08:09:00") == "2024-03-05 08:09"
