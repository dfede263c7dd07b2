"""
Graph session - single owner of the graph panel's mutable state.

One GraphSession exists per browser client. It holds the current video,
its graph, the laid-out nodes, canvas size, camera, selection and
tooltip, and exposes the only sanctioned ways to change them. Every
mutation that affects the picture notifies the change listeners so the
host can redraw.
"""

import logging
import math
from typing import Callable, List, Optional, Tuple

from vigil.graph.builder import DEFAULT_HEURISTICS, GraphHeuristics, build_graph
from vigil.graph.camera import Camera
from vigil.graph.interaction import PointerEvent, PointerStateMachine, Tooltip
from vigil.graph.layout import layout_nodes, rescale_to_canvas
from vigil.graph.model import Graph, Node
from vigil.graph.renderer import DrawCommand, render_graph
from vigil.graph.svg import render_svg
from vigil.video_library import VideoMeta

logger = logging.getLogger(__name__)


class GraphSession:
    """Session-scoped context for the interactive metadata graph."""

    def __init__(self, heuristics: GraphHeuristics = DEFAULT_HEURISTICS, edge_mode: str = "star"):
        self.heuristics = heuristics
        self.edge_mode = edge_mode
        self.video: Optional[VideoMeta] = None
        self.graph: Graph = build_graph(None, heuristics)
        self.nodes: List[Node] = []
        self.size: Optional[Tuple[float, float]] = None
        self.dpr: float = 1.0
        self.camera = Camera()
        self.fullscreen = False
        self.pointer = PointerStateMachine()
        self._on_change: List[Callable[["GraphSession"], None]] = []
        self._on_tooltip: List[Callable[[Optional[Tooltip]], None]] = []

    # --- Listeners ---

    def add_change_listener(self, callback: Callable[["GraphSession"], None]) -> None:
        self._on_change.append(callback)

    def add_tooltip_listener(self, callback: Callable[[Optional[Tooltip]], None]) -> None:
        self._on_tooltip.append(callback)

    def _notify(self, tooltip_before: Optional[Tooltip] = None, check_tooltip: bool = True) -> None:
        if check_tooltip and self.tooltip != tooltip_before:
            for callback in self._on_tooltip:
                callback(self.tooltip)
        for callback in self._on_change:
            callback(self)

    # --- Read-only views ---

    @property
    def is_mounted(self) -> bool:
        return self.size is not None

    @property
    def active_node_id(self) -> Optional[str]:
        return self.pointer.active_node_id

    @property
    def tooltip(self) -> Optional[Tooltip]:
        return self.pointer.tooltip

    def snapshot(self) -> Tuple[Graph, Camera]:
        """Copies of the positioned graph and camera for external tooling."""
        nodes = [n.copy() for n in (self.nodes or self.graph.nodes)]
        return Graph(nodes, list(self.graph.edges)), self.camera.copy()

    # --- Mutations ---

    def rebuild_graph(self) -> None:
        """Rebuild the graph for the current video and lay it out afresh."""
        tooltip_before = self.tooltip
        self.graph = build_graph(self.video, self.heuristics)
        self.pointer.reset()
        self._relayout()
        self._notify(tooltip_before)

    def set_video(self, video: Optional[VideoMeta]) -> None:
        previous = self.video.id if self.video else None
        current = video.id if video else None
        self.video = video
        if previous != current:
            logger.info(f"Graph session switched to video {current!r}")
            self.camera.reset()
        self.rebuild_graph()

    def set_camera(self, camera: Camera) -> None:
        self.camera.set(camera.x, camera.y, camera.scale)
        self._notify(check_tooltip=False)

    def set_active_node(self, node_id: Optional[str]) -> None:
        tooltip_before = self.tooltip
        known = node_id is not None and self.graph.get_node(node_id) is not None
        self.pointer.active_node_id = node_id if known else None
        if not known:
            self.pointer.tooltip = None
        self._notify(tooltip_before)

    def resize(self, width: float, height: float, dpr: Optional[float] = None) -> bool:
        """
        Record a new canvas size. The first size triggers the layout; later
        sizes rescale the existing positions so manual drags are kept.
        """
        if not all(v is not None and math.isfinite(v) and v > 0 for v in (width, height)):
            return False
        if dpr is not None and math.isfinite(dpr) and dpr > 0:
            self.dpr = float(dpr)

        new_size = (float(width), float(height))
        old_size = self.size
        self.size = new_size
        if old_size is None or not self.nodes:
            self._relayout()
        elif old_size != new_size:
            rescale_to_canvas(self.nodes, old_size, new_size)
        logger.debug(f"Graph canvas resized {old_size} -> {new_size}")
        self._notify(check_tooltip=False)
        return True

    def set_fullscreen(self, fullscreen: bool) -> None:
        if fullscreen == self.fullscreen:
            return
        self.fullscreen = fullscreen
        self.camera.reset()
        self._notify(check_tooltip=False)

    def _relayout(self) -> None:
        if self.size is None:
            self.nodes = []
            return
        self.nodes = layout_nodes(self.graph, *self.size)

    # --- Input ---

    def handle_pointer(self, event: PointerEvent) -> bool:
        if not self.is_mounted or not self.nodes:
            return False
        tooltip_before = self.tooltip
        changed = self.pointer.handle(event, self.nodes, self.camera, self.size)
        if changed:
            self._notify(tooltip_before)
        return changed

    def handle_wheel(self, x: float, y: float, delta: float) -> bool:
        if not self.is_mounted:
            return False
        changed = self.camera.zoom_at((x, y), delta)
        if changed:
            self._notify(check_tooltip=False)
        return changed

    def dismiss_outside(self) -> bool:
        tooltip_before = self.tooltip
        changed = self.pointer.dismiss()
        if changed:
            self._notify(tooltip_before)
        return changed

    # --- Output ---

    def render(self) -> List[DrawCommand]:
        if not self.is_mounted:
            return []
        width, height = self.size
        return render_graph(
            self.nodes, self.camera, width, height,
            dpr=self.dpr,
            active_node_id=self.active_node_id,
            edges=self.graph.edges,
            edge_mode=self.edge_mode,
        )

    def render_svg(self, id_prefix: str = "graph") -> str:
        if not self.is_mounted:
            return ""
        width, height = self.size
        return render_svg(self.render(), width, height, self.dpr, id_prefix=id_prefix)
