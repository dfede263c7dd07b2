"""
Hit-testing and the pointer state machine for the graph canvas.

The machine is driven by toolkit-neutral PointerEvents (phase, screen
position, pointer id) so it can be exercised without a browser:

    IDLE --down on node--> NODE_SELECTED --up/leave/cancel--> IDLE (tooltip)
    IDLE --down on empty--> PANNING --up/leave/cancel--> IDLE

While a gesture is running, events from any other pointer id are ignored.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from vigil.graph import constants as C
from vigil.graph.camera import Camera, PanGesture, clamp
from vigil.graph.layout import node_radius
from vigil.graph.model import Node

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class PointerPhase(str, Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"
    CANCEL = "cancel"


class InteractionMode(str, Enum):
    IDLE = "idle"
    NODE_SELECTED = "node_selected"
    PANNING = "panning"


@dataclass(frozen=True)
class PointerEvent:
    """A pointer event in canvas-relative screen (CSS pixel) coordinates."""
    phase: PointerPhase
    x: float
    y: float
    pointer_id: Optional[int] = None

    @property
    def point(self) -> Point:
        return self.x, self.y


@dataclass(frozen=True)
class Tooltip:
    label: str
    detail: str
    left: float
    top: float


@dataclass
class Gesture:
    """Transient state of one pointer gesture, from down to up/cancel."""
    mode: InteractionMode = InteractionMode.IDLE
    pointer_id: Optional[int] = None
    node_id: Optional[str] = None
    drag_offset: Point = (0.0, 0.0)
    press_point: Point = (0.0, 0.0)
    drag_moved: bool = False
    pan: Optional[PanGesture] = None

    def accepts(self, event: PointerEvent) -> bool:
        return self.pointer_id is None or event.pointer_id == self.pointer_id


def _as_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def pointer_event_from_payload(phase: PointerPhase, raw) -> Optional[PointerEvent]:
    """
    Normalize a browser event payload into a PointerEvent.

    Accepts a dict with offsetX/offsetY/pointerId (or x/y/pointer_id) or an
    [x, y, pointer_id] list. Returns None when no usable position is present.
    """
    if isinstance(raw, dict):
        x = raw.get('offsetX', raw.get('x'))
        y = raw.get('offsetY', raw.get('y'))
        pointer_id = raw.get('pointerId', raw.get('pointer_id'))
    elif isinstance(raw, (list, tuple)) and len(raw) >= 2:
        x, y = raw[0], raw[1]
        pointer_id = raw[2] if len(raw) > 2 else None
    else:
        return None

    x, y = _as_float(x), _as_float(y)
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    if pointer_id is not None:
        try:
            pointer_id = int(pointer_id)
        except (TypeError, ValueError):
            pointer_id = None
    return PointerEvent(phase, x, y, pointer_id)


def hit_test(nodes: Sequence[Node], camera: Camera, screen_point: Point) -> Optional[Node]:
    """
    Return the node under a screen point, or None for empty canvas.

    Nodes are tested in reverse draw order, so when hit areas overlap the
    node drawn last (on top) wins. A node is hit within its radius plus
    HIT_PADDING.
    """
    sx, sy = screen_point
    if not (math.isfinite(sx) and math.isfinite(sy)):
        return None
    wx, wy = camera.screen_to_world((sx, sy))
    for node in reversed(nodes):
        if not node.is_positioned:
            continue
        if math.hypot(wx - node.x, wy - node.y) <= node_radius(node) + C.HIT_PADDING:
            return node
    return None


def place_tooltip(node: Node, screen_point: Point, container_size: Point) -> Tooltip:
    """Anchor a tooltip just below-right of the pointer, kept inside the container."""
    width, height = container_size
    sx, sy = screen_point
    left = clamp(sx + C.TOOLTIP_OFFSET, C.TOOLTIP_MARGIN, width - C.TOOLTIP_FAR_MARGIN)
    top = clamp(sy + C.TOOLTIP_OFFSET, C.TOOLTIP_MARGIN, height - C.TOOLTIP_FAR_MARGIN)
    return Tooltip(node.label, node.detail or "No description", left, top)


class PointerStateMachine:
    """Interprets pointer events against the current nodes and camera."""

    def __init__(self):
        self.gesture = Gesture()
        self.active_node_id: Optional[str] = None
        self.tooltip: Optional[Tooltip] = None

    @property
    def mode(self) -> InteractionMode:
        return self.gesture.mode

    def reset(self) -> None:
        """Drop the running gesture, selection and tooltip (graph rebuilt)."""
        self.gesture = Gesture()
        self.active_node_id = None
        self.tooltip = None

    def dismiss(self) -> bool:
        """Pointer went down outside the canvas: clear selection and tooltip."""
        changed = self.active_node_id is not None or self.tooltip is not None
        self.active_node_id = None
        self.tooltip = None
        return changed

    def handle(self, event: PointerEvent, nodes: List[Node], camera: Camera,
               container_size: Point) -> bool:
        """
        Feed one pointer event through the machine.
        Returns True when the canvas needs to be redrawn.
        """
        if not (math.isfinite(event.x) and math.isfinite(event.y)):
            return False

        if event.phase == PointerPhase.DOWN:
            return self._on_down(event, nodes, camera)
        if event.phase == PointerPhase.MOVE:
            return self._on_move(event, nodes, camera)
        return self._on_release(event, nodes, camera, container_size)

    def _on_down(self, event: PointerEvent, nodes: List[Node], camera: Camera) -> bool:
        if self.gesture.mode != InteractionMode.IDLE and not self.gesture.accepts(event):
            return False

        target = hit_test(nodes, camera, event.point)
        if target is not None:
            wx, wy = camera.screen_to_world(event.point)
            self.gesture = Gesture(
                mode=InteractionMode.NODE_SELECTED,
                pointer_id=event.pointer_id,
                node_id=target.id,
                drag_offset=(wx - target.x, wy - target.y),
                press_point=event.point,
            )
            self.active_node_id = target.id
            self.tooltip = None
            logger.debug(f"pointer {event.pointer_id} pressed node {target.id}")
            return True

        self.tooltip = None
        self.active_node_id = None
        self.gesture = Gesture(
            mode=InteractionMode.PANNING,
            pointer_id=event.pointer_id,
            press_point=event.point,
            pan=camera.begin_pan(event.point),
        )
        logger.debug(f"pointer {event.pointer_id} started panning")
        return True

    def _on_move(self, event: PointerEvent, nodes: List[Node], camera: Camera) -> bool:
        gesture = self.gesture
        if gesture.mode == InteractionMode.IDLE or not gesture.accepts(event):
            return False

        if gesture.mode == InteractionMode.PANNING:
            camera.pan_to(gesture.pan, event.point)
            return True
        return self._drag_node(event, nodes, camera)

    def _drag_node(self, event: PointerEvent, nodes: List[Node], camera: Camera) -> bool:
        gesture = self.gesture
        if not gesture.drag_moved:
            px, py = gesture.press_point
            if math.hypot(event.x - px, event.y - py) <= C.DRAG_THRESHOLD:
                return False
            gesture.drag_moved = True

        node = next((n for n in nodes if n.id == gesture.node_id), None)
        if node is None:
            return False
        wx, wy = camera.screen_to_world(event.point)
        ox, oy = gesture.drag_offset
        node.x, node.y = wx - ox, wy - oy
        return True

    def _on_release(self, event: PointerEvent, nodes: List[Node], camera: Camera,
                    container_size: Point) -> bool:
        gesture = self.gesture
        if gesture.mode == InteractionMode.PANNING:
            if not gesture.accepts(event):
                return False
            moved = False
            if event.phase == PointerPhase.UP:
                # pointerup carries the final position of the pan
                before = (camera.x, camera.y)
                camera.pan_to(gesture.pan, event.point)
                moved = (camera.x, camera.y) != before
            self.gesture = Gesture()
            logger.debug(f"pointer {event.pointer_id} finished panning")
            return moved

        if gesture.mode == InteractionMode.NODE_SELECTED:
            if not gesture.accepts(event):
                return False
            if event.phase == PointerPhase.UP:
                self._drag_node(event, nodes, camera)
            self.gesture = Gesture()
        elif event.phase != PointerPhase.UP:
            # leave/cancel with no gesture running
            return False

        target = hit_test(nodes, camera, event.point)
        if target is not None:
            self.active_node_id = target.id
            self.tooltip = place_tooltip(target, event.point, container_size)
        else:
            self.active_node_id = None
            self.tooltip = None
        return True
