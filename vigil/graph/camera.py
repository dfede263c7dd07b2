"""
Camera model: a translate-then-scale transform from world to screen.

    screen = world * scale + (x, y)
    world  = (screen - (x, y)) / scale

Non-finite inputs are ignored so the camera can never end up in a state
that breaks rendering or hit-testing.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from vigil.graph.constants import MAX_SCALE, MIN_SCALE, ZOOM_INTENSITY

Point = Tuple[float, float]


def _finite(*values: float) -> bool:
    return all(v is not None and math.isfinite(v) for v in values)


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


@dataclass
class PanGesture:
    """Camera offset and screen point captured when a pan starts."""
    camera_x: float
    camera_y: float
    screen_x: float
    screen_y: float


@dataclass
class Camera:
    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0

    def __post_init__(self):
        if not _finite(self.x, self.y):
            self.x, self.y = 0.0, 0.0
        if not _finite(self.scale) or self.scale <= 0:
            self.scale = 1.0
        self.scale = clamp(self.scale, MIN_SCALE, MAX_SCALE)

    def copy(self) -> "Camera":
        return Camera(self.x, self.y, self.scale)

    def reset(self) -> None:
        self.x, self.y, self.scale = 0.0, 0.0, 1.0

    def world_to_screen(self, point: Point) -> Point:
        wx, wy = point
        return wx * self.scale + self.x, wy * self.scale + self.y

    def screen_to_world(self, point: Point) -> Point:
        sx, sy = point
        return (sx - self.x) / self.scale, (sy - self.y) / self.scale

    def visible_world_rect(self, width: float, height: float) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) of the viewport in world coordinates."""
        left, top = self.screen_to_world((0.0, 0.0))
        right, bottom = self.screen_to_world((width, height))
        return left, top, right, bottom

    # --- Panning ---

    def begin_pan(self, screen_point: Point) -> PanGesture:
        sx, sy = screen_point
        return PanGesture(self.x, self.y, sx, sy)

    def pan_to(self, gesture: PanGesture, screen_point: Point) -> None:
        sx, sy = screen_point
        if not _finite(sx, sy):
            return
        self.x = gesture.camera_x + (sx - gesture.screen_x)
        self.y = gesture.camera_y + (sy - gesture.screen_y)

    # --- Zooming ---

    def zoom_at(self, screen_point: Point, delta: float) -> bool:
        """
        Zoom around a screen-space anchor.

        A negative delta (wheel up) zooms in, a positive one zooms out, each
        step by a factor of exp(0.1). The world point under the anchor stays
        under it after the zoom. Returns True if the camera changed.
        """
        sx, sy = screen_point
        if not _finite(sx, sy, delta) or delta == 0:
            return False

        direction = -1.0 if delta > 0 else 1.0
        factor = math.exp(direction * ZOOM_INTENSITY)
        new_scale = clamp(self.scale * factor, MIN_SCALE, MAX_SCALE)
        if new_scale == self.scale:
            return False

        wx, wy = self.screen_to_world((sx, sy))
        self.x = sx - wx * new_scale
        self.y = sy - wy * new_scale
        self.scale = new_scale
        return True

    def set(self, x: Optional[float] = None, y: Optional[float] = None, scale: Optional[float] = None) -> None:
        """Assign camera fields; non-finite values are ignored, scale is clamped."""
        if x is not None and _finite(x):
            self.x = float(x)
        if y is not None and _finite(y):
            self.y = float(y)
        if scale is not None and _finite(scale) and scale > 0:
            self.scale = clamp(float(scale), MIN_SCALE, MAX_SCALE)
