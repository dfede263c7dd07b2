"""
Graph builder: turns one video's metadata into a typed node/edge graph.

The result is a pure function of the VideoMeta and the heuristics; the
input is never mutated. Without a video, a constant empty-state graph is
returned.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from vigil.graph import constants as C
from vigil.graph.model import Edge, Graph, Node
from vigil.video_library import VideoMeta, format_duration


@dataclass(frozen=True)
class GraphHeuristics:
    """Thresholds and keyword lists behind the status and insight nodes."""

    long_clip_seconds: float = C.LONG_CLIP_SECONDS
    short_clip_seconds: float = C.SHORT_CLIP_SECONDS
    multi_tag_count: int = C.MULTI_TAG_COUNT
    fire_keywords: Tuple[str, ...] = C.FIRE_KEYWORDS
    safety_keywords: Tuple[str, ...] = C.SAFETY_KEYWORDS


DEFAULT_HEURISTICS = GraphHeuristics()


def build_empty_graph() -> Graph:
    return Graph(
        nodes=[
            Node("context", "General context", "core",
                 "No video selected, showing the default relations", fixed=True),
            Node("task", "Task", "summary", "Define the analysis goal for the scene"),
            Node("scene", "Scene", "meta", "Default base scene node"),
            Node("risk", "Potential risk", "status", "Risk depends on the video content"),
        ],
        edges=[
            Edge("context", "task"),
            Edge("context", "scene"),
            Edge("task", "risk"),
        ],
    )


def build_graph(video: Optional[VideoMeta],
                heuristics: GraphHeuristics = DEFAULT_HEURISTICS) -> Graph:
    """Build the metadata graph for a video, or the empty-state graph."""
    if video is None:
        return build_empty_graph()

    tags = list(video.tags or [])
    duration_label = video.duration_formatted or format_duration(video.duration_seconds)
    summary_text = (video.summary or "").strip() or "No summary provided yet"

    tag_nodes = [
        Node(f"tag-{idx}", tag, "tag", f"Tag: {tag}")
        for idx, tag in enumerate(tags)
    ]
    status_node = derive_status_node(tags, heuristics)
    insight_nodes = derive_insight_nodes(video, heuristics)

    nodes = [
        Node("video", video.name or "Untitled video", "core",
             f"Source: {video.src or 'unknown'}", fixed=True),
        Node("summary", "Summary", "summary", summary_text),
        Node("duration", f"Duration {duration_label}", "metric", describe_duration(video.duration_seconds)),
        Node("uploaded", "Uploaded", "meta", format_upload_time(video.uploaded_at)),
        Node("tag-hub", "Tags", "hub", ", ".join(tags) if tags else "No tags"),
        status_node,
        *tag_nodes,
        *insight_nodes,
    ]

    edges = [
        Edge("video", "summary", C.EDGE_HIGHLIGHT),
        Edge("video", "duration"),
        Edge("video", "uploaded"),
        Edge("video", "tag-hub"),
        Edge("video", status_node.id),
        *[Edge("tag-hub", n.id) for n in tag_nodes],
        *[Edge(n.anchor or "summary", n.id, C.EDGE_HIGHLIGHT) for n in insight_nodes],
    ]
    return Graph(nodes=nodes, edges=edges)


def describe_duration(seconds: Optional[float]) -> str:
    if not seconds or seconds <= 0:
        return "Exact duration unavailable, try reloading the video metadata"
    return f"About {seconds / 60:.1f} minutes ({round(seconds)} seconds)"


def format_upload_time(value: Optional[str]) -> str:
    if not value:
        return "Upload time not recorded"
    try:
        stamp = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return "Upload time has an invalid format"
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone()
    return stamp.strftime("%Y-%m-%d %H:%M")


def derive_status_node(tags: List[str], heuristics: GraphHeuristics = DEFAULT_HEURISTICS) -> Node:
    lowered = [t.lower() for t in tags]

    def mentions(keywords):
        return any(k.lower() in tag for tag in lowered for k in keywords)

    if mentions(heuristics.fire_keywords):
        label, detail = "Fire attention", "Fire or smoke tags present, check heat sources first"
    elif mentions(heuristics.safety_keywords):
        label, detail = "Safety alert", "Safety tags present, check protective gear and alarms"
    elif not tags:
        label, detail = "Needs labeling", "No tags yet, add keywords so the scene can be understood"
    else:
        label, detail = "Inspection overview", "No explicit risk tags detected"
    return Node("status", label, "status", detail)


def derive_insight_nodes(video: VideoMeta, heuristics: GraphHeuristics = DEFAULT_HEURISTICS) -> List[Node]:
    insights = []
    seconds = video.duration_seconds or 0

    if seconds >= heuristics.long_clip_seconds:
        insights.append(("Long-form inspection",
                         f"Longer than {heuristics.long_clip_seconds / 60:g} minutes, review it in highlighted segments", "duration"))
    elif 0 < seconds < heuristics.short_clip_seconds:
        insights.append(("Short clip",
                         f"Shorter than {heuristics.short_clip_seconds:g} seconds, the model may need more context", "duration"))

    if len(video.tags or []) >= heuristics.multi_tag_count:
        insights.append(("Multi-tag scene",
                         "Many tags, focus on the three most important ones", "tag-hub"))

    if not (video.summary or "").strip():
        insights.append(("Missing summary",
                         "Summary is empty, describe the key scenes in the chat panel", "summary"))

    return [
        Node(f"insight-{idx}", label, "insight", detail, anchor=anchor)
        for idx, (label, detail, anchor) in enumerate(insights)
    ]
