"""
Interactive metadata graph for the selected video.

This package provides:
- build_graph: VideoMeta -> typed node/edge Graph
- layout_nodes / rescale_to_canvas: deterministic ring layout
- Camera: pan/zoom transform
- PointerStateMachine / hit_test: pointer gestures on the canvas
- render_graph / render_svg: drawing commands and their SVG form
- GraphSession: per-client owner of all of the above

Usage:
    from vigil.graph import GraphSession, PointerEvent, PointerPhase
"""

from vigil.graph.builder import DEFAULT_HEURISTICS, GraphHeuristics, build_empty_graph, build_graph
from vigil.graph.camera import Camera
from vigil.graph.interaction import (
    InteractionMode,
    PointerEvent,
    PointerPhase,
    PointerStateMachine,
    Tooltip,
    hit_test,
)
from vigil.graph.layout import layout_nodes, node_radius, rescale_to_canvas
from vigil.graph.model import Edge, Graph, Node
from vigil.graph.renderer import render_graph
from vigil.graph.session import GraphSession
from vigil.graph.svg import render_svg

__all__ = [
    'Camera',
    'DEFAULT_HEURISTICS',
    'Edge',
    'Graph',
    'GraphHeuristics',
    'GraphSession',
    'InteractionMode',
    'Node',
    'PointerEvent',
    'PointerPhase',
    'PointerStateMachine',
    'Tooltip',
    'build_empty_graph',
    'build_graph',
    'hit_test',
    'layout_nodes',
    'node_radius',
    'render_graph',
    'render_svg',
    'rescale_to_canvas',
]
