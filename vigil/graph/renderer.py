"""
Renderer: turns positioned nodes plus the camera into drawing commands.

The command list mirrors the 2D canvas API (save/restore, scale,
translate, fills, strokes, arcs, text) so any painter can replay it; the
SVG painter in svg.py is the one the web UI uses.

Order of operations:
  1. device-pixel-ratio scale (once, outermost)
  2. background in CSS pixels
  3. camera translate + scale
  4. grid, edges, nodes and labels in world coordinates
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from vigil.graph import constants as C
from vigil.graph.camera import Camera
from vigil.graph.layout import node_radius
from vigil.graph.model import Edge, Graph, Node, find_anchor

Point = Tuple[float, float]


@dataclass(frozen=True)
class Save:
    pass


@dataclass(frozen=True)
class Restore:
    pass


@dataclass(frozen=True)
class Scale:
    sx: float
    sy: float


@dataclass(frozen=True)
class Translate:
    dx: float
    dy: float


@dataclass(frozen=True)
class ClearRect:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class LinearGradient:
    x0: float
    y0: float
    x1: float
    y1: float
    stops: Tuple[Tuple[float, str], ...]


@dataclass(frozen=True)
class FillRect:
    x: float
    y: float
    width: float
    height: float
    fill: Union[str, LinearGradient]


@dataclass(frozen=True)
class StrokeLines:
    """A batch of independent line segments sharing one stroke style."""
    segments: Tuple[Tuple[Point, Point], ...]
    stroke: str
    line_width: float


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    radius: float
    fill: str
    stroke: str
    line_width: float
    glow_color: Optional[str] = None
    glow_blur: float = 0.0
    node_id: Optional[str] = None


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    font: str
    fill: str
    align: str = "center"
    baseline: str = "top"


DrawCommand = Union[Save, Restore, Scale, Translate, ClearRect, FillRect, StrokeLines, Circle, Text]


def node_theme(node: Node) -> dict:
    return C.NODE_THEME.get(node.type, C.DEFAULT_NODE_THEME)


def grid_lines(camera: Camera, width: float, height: float,
               grid_size: float = C.GRID_SIZE) -> Tuple[Tuple[Point, Point], ...]:
    """
    Grid segments covering the visible viewport, in world coordinates.
    The extent comes from inverse-transforming the viewport corners, so the
    grid always fills the screen whatever the pan and zoom.
    """
    left, top, right, bottom = camera.visible_world_rect(width, height)
    if not all(math.isfinite(v) for v in (left, top, right, bottom)):
        return ()
    start_x = math.floor(left / grid_size) * grid_size
    start_y = math.floor(top / grid_size) * grid_size
    columns = math.ceil((right + grid_size - start_x) / grid_size)
    rows = math.ceil((bottom + grid_size - start_y) / grid_size)

    segments = []
    for i in range(max(columns, 0)):
        x = start_x + i * grid_size
        segments.append(((x, top), (x, bottom)))
    for j in range(max(rows, 0)):
        y = start_y + j * grid_size
        segments.append(((left, y), (right, y)))
    return tuple(segments)


def _star_edges(nodes: Sequence[Node]) -> List[Tuple[Point, Point, str]]:
    core = find_anchor(list(nodes))
    if core is None or not core.is_positioned:
        return []
    return [
        ((node.x, node.y), (core.x, core.y), C.EDGE_COLOR)
        for node in nodes
        if node is not core and node.is_positioned
    ]


def _graph_edges(nodes: Sequence[Node], edges: Sequence[Edge]) -> List[Tuple[Point, Point, str]]:
    by_id = {n.id: n for n in nodes}
    lines = []
    for edge in Graph(list(nodes), list(edges)).resolved_edges():
        src, tgt = by_id[edge.source], by_id[edge.target]
        if not (src.is_positioned and tgt.is_positioned):
            continue
        color = C.EDGE_HIGHLIGHT_COLOR if edge.type == C.EDGE_HIGHLIGHT else C.EDGE_COLOR
        lines.append(((src.x, src.y), (tgt.x, tgt.y), color))
    return lines


def render_graph(nodes: Sequence[Node], camera: Camera, width: float, height: float,
                 dpr: float = 1.0, active_node_id: Optional[str] = None,
                 edges: Optional[Sequence[Edge]] = None, edge_mode: str = "star") -> List[DrawCommand]:
    """
    Produce the drawing commands for one frame.

    edge_mode "star" draws every node to the core node; "graph" draws the
    logical edge list instead, skipping edges with unknown endpoints.
    Returns an empty list when the canvas has no usable size yet.
    """
    if not all(math.isfinite(v) and v > 0 for v in (width, height)):
        return []
    if not math.isfinite(dpr) or dpr <= 0:
        dpr = 1.0

    gradient = LinearGradient(0.0, 0.0, width, height,
                              ((0.0, C.BACKGROUND_GRADIENT[0]), (1.0, C.BACKGROUND_GRADIENT[1])))
    commands: List[DrawCommand] = [
        Save(),
        Scale(dpr, dpr),
        ClearRect(0.0, 0.0, width, height),
        FillRect(0.0, 0.0, width, height, C.BACKGROUND_COLOR),
        FillRect(0.0, 0.0, width, height, gradient),
        Save(),
        Translate(camera.x, camera.y),
        Scale(camera.scale, camera.scale),
        StrokeLines(grid_lines(camera, width, height), C.GRID_COLOR, 1 / camera.scale),
    ]

    if edge_mode == "graph" and edges is not None:
        edge_lines = _graph_edges(nodes, edges)
    else:
        edge_lines = _star_edges(nodes)
    for start, end, color in edge_lines:
        commands.append(StrokeLines(((start, end),), color, C.EDGE_WIDTH))

    for node in nodes:
        if not node.is_positioned:
            continue
        theme = node_theme(node)
        radius = node_radius(node)
        active = node.id == active_node_id
        commands.append(Circle(
            node.x, node.y, radius,
            fill=theme["fill"],
            stroke=theme["stroke"],
            line_width=3.0 if active else 2.0,
            glow_color=C.ACTIVE_GLOW_COLOR if active else None,
            glow_blur=C.ACTIVE_GLOW_BLUR if active else 0.0,
            node_id=node.id,
        ))
        commands.append(Text(node.x, node.y + radius + C.LABEL_GAP, node.label,
                             C.LABEL_FONT, C.LABEL_COLOR))

    commands.append(Restore())  # camera
    commands.append(Restore())  # device pixel ratio
    return commands
