"""
Deterministic ring layout.

The core node sits at the canvas centre; every other node is placed on a
concentric ring chosen by its type. There is no simulation: the same
graph and bounds always give the same positions.
"""

import math
from typing import Iterable, List, Optional, Tuple

from vigil.graph import constants as C
from vigil.graph.model import Graph, Node, find_anchor

Size = Tuple[float, float]


def node_radius(node: Node) -> float:
    if node.type in C.NODE_RADIUS:
        return C.NODE_RADIUS[node.type]
    return C.FIXED_NODE_RADIUS if node.fixed else C.DEFAULT_NODE_RADIUS


def _usable(value: Optional[float], default: float) -> float:
    if value is None or not math.isfinite(value) or value <= 0:
        return default
    return float(value)


def _place_on_circle(nodes: List[Node], cx: float, cy: float, radius: float, phase: float) -> None:
    count = max(len(nodes), 1)
    for index, node in enumerate(nodes):
        angle = phase + (index / count) * math.pi * 2
        node.x = cx + radius * math.cos(angle)
        node.y = cy + radius * math.sin(angle)


def layout_nodes(graph: Graph, width: Optional[float] = None, height: Optional[float] = None) -> List[Node]:
    """
    Position every node of the graph inside a width x height canvas.

    Returns copies of the graph's nodes with x/y set; the graph itself is
    left untouched. Missing or non-positive bounds fall back to the
    default canvas size.
    """
    width = _usable(width, C.DEFAULT_CANVAS_WIDTH)
    height = _usable(height, C.DEFAULT_CANVAS_HEIGHT)
    cx, cy = width / 2, height / 2
    nodes = [n.copy() for n in graph.nodes]
    if not nodes:
        return nodes

    core = find_anchor(nodes)
    core.x, core.y = cx, cy
    core.fixed = True

    shortest = min(width, height)
    placed = {id(core)}
    for types, factor, floor, phase in C.RING_CONFIGS:
        ring = [n for n in nodes if n is not core and n.type in types]
        if not ring:
            continue
        _place_on_circle(ring, cx, cy, max(shortest * factor, floor), phase)
        placed.update(id(n) for n in ring)

    leftovers = [n for n in nodes if id(n) not in placed]
    if leftovers:
        factor, floor, phase = C.FALLBACK_RING
        _place_on_circle(leftovers, cx, cy, max(shortest * factor, floor), phase)

    return nodes


def rescale_to_canvas(nodes: Iterable[Node], old_size: Optional[Size], new_size: Optional[Size]) -> bool:
    """
    Scale node coordinates in place by new/old per axis.

    Used on resize instead of a relayout so manual drags survive. Returns
    False (and leaves the nodes alone) when either size is unusable.
    """
    if not old_size or not new_size:
        return False
    old_w, old_h = old_size
    new_w, new_h = new_size
    sizes = (old_w, old_h, new_w, new_h)
    if any(v is None or not math.isfinite(v) or v <= 0 for v in sizes):
        return False

    sx, sy = new_w / old_w, new_h / old_h
    for node in nodes:
        if node.is_positioned:
            node.x *= sx
            node.y *= sy
    return True
