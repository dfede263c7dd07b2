import math

import pytest

from vigil.graph.camera import Camera


CAMERAS = [
    Camera(),
    Camera(50, 30, 1),
    Camera(-120.5, 33.25, 0.1),
    Camera(17, -240, 4.75),
]


@pytest.mark.parametrize("camera", CAMERAS)
def test_screen_world_round_trip(camera):
    for point in [(0, 0), (123.4, -56.7), (1e4, 3e3)]:
        x, y = camera.screen_to_world(camera.world_to_screen(point))
        assert x == pytest.approx(point[0])
        assert y == pytest.approx(point[1])


def test_pan_from_gesture_start():
    camera = Camera()
    gesture = camera.begin_pan((100, 100))
    camera.pan_to(gesture, (120, 90))
    camera.pan_to(gesture, (150, 130))
    assert (camera.x, camera.y, camera.scale) == (50, 30, 1)


def test_pan_keeps_scale_and_ignores_bad_points():
    camera = Camera(5, 5, 2)
    gesture = camera.begin_pan((0, 0))
    camera.pan_to(gesture, (float("nan"), 3))
    assert (camera.x, camera.y) == (5, 5)
    camera.pan_to(gesture, (10, -10))
    assert (camera.x, camera.y, camera.scale) == (15, -5, 2)


@pytest.mark.parametrize("camera", CAMERAS[:3])
@pytest.mark.parametrize("delta", [-120, 120])
def test_zoom_keeps_anchor_fixed(camera, delta):
    camera = camera.copy()
    anchor = (123, 77)
    world = camera.screen_to_world(anchor)
    camera.zoom_at(anchor, delta)
    sx, sy = camera.world_to_screen(world)
    assert sx == pytest.approx(anchor[0])
    assert sy == pytest.approx(anchor[1])


def test_zoom_direction_and_factor():
    camera = Camera()
    assert camera.zoom_at((0, 0), -3)
    assert camera.scale == pytest.approx(math.exp(0.1))

    camera = Camera()
    assert camera.zoom_at((0, 0), 250)
    assert camera.scale == pytest.approx(math.exp(-0.1))


def test_scale_is_clamped():
    camera = Camera()
    for _ in range(100):
        camera.zoom_at((40, 40), -1)
    assert camera.scale == pytest.approx(5.0)
    assert not camera.zoom_at((40, 40), -1)

    for _ in range(200):
        camera.zoom_at((40, 40), 1)
    assert camera.scale == pytest.approx(0.1)


def test_zero_or_invalid_delta_is_a_no_op():
    camera = Camera(1, 2, 1.5)
    assert not camera.zoom_at((10, 10), 0)
    assert not camera.zoom_at((10, 10), float("nan"))
    assert not camera.zoom_at((float("inf"), 10), -1)
    assert (camera.x, camera.y, camera.scale) == (1, 2, 1.5)


def test_reset_and_set():
    camera = Camera(10, 20, 3)
    camera.reset()
    assert (camera.x, camera.y, camera.scale) == (0, 0, 1)

    camera.set(x=4, y=float("inf"), scale=50)
    assert (camera.x, camera.y, camera.scale) == (4, 0, 5.0)


def test_visible_world_rect():
    camera = Camera(100, 50, 2)
    assert camera.visible_world_rect(400, 300) == (-50, -25, 150, 125)
