import pytest

from vigil.graph.camera import Camera
from vigil.graph.interaction import PointerEvent, PointerPhase
from vigil.graph.session import GraphSession
from vigil.video_library import VideoMeta


def video(video_id="v1", **overrides):
    data = dict(id=video_id, name=f"Video {video_id}", tags=["fire"], summary="s", duration_seconds=90)
    data.update(overrides)
    return VideoMeta(**data)


def mounted(width=400, height=300):
    session = GraphSession()
    session.resize(width, height)
    return session


def node(session, node_id):
    return next(n for n in session.nodes if n.id == node_id)


def click(session, x, y, pid=1):
    session.handle_pointer(PointerEvent(PointerPhase.DOWN, x, y, pid))
    session.handle_pointer(PointerEvent(PointerPhase.UP, x, y, pid))


def test_unmounted_session_is_inert():
    session = GraphSession()
    assert session.render() == []
    assert session.render_svg() == ""
    assert not session.handle_pointer(PointerEvent(PointerPhase.DOWN, 1, 1, 1))
    assert not session.handle_wheel(1, 1, -1)
    assert not session.resize(0, 300)
    assert [n.id for n in session.graph.nodes] == ["context", "task", "scene", "risk"]


def test_first_resize_lays_out_graph():
    session = mounted()
    assert len(session.nodes) == 4
    core = node(session, "context")
    assert (core.x, core.y) == (200, 150)
    assert session.render()


def test_later_resize_rescales_and_keeps_drags():
    session = mounted()
    task = node(session, "task")
    session.handle_pointer(PointerEvent(PointerPhase.DOWN, task.x, task.y, 1))
    session.handle_pointer(PointerEvent(PointerPhase.MOVE, 40, 60, 1))
    session.handle_pointer(PointerEvent(PointerPhase.UP, 40, 60, 1))
    assert (task.x, task.y) == (40, 60)

    session.resize(800, 450, dpr=2)
    assert (task.x, task.y) == pytest.approx((80, 90))
    assert session.dpr == 2


def test_set_video_rebuilds_and_resets_camera():
    session = mounted()
    session.handle_wheel(100, 100, -1)
    session.set_video(video("v1"))

    assert session.camera == Camera()
    assert node(session, "video").label == "Video v1"
    assert node(session, "video").x == 200


def test_same_video_keeps_camera_but_clears_selection():
    session = mounted()
    session.set_video(video("v1"))
    session.set_camera(Camera(15, 25, 2))
    click(session, *session.camera.world_to_screen((200, 150)))
    assert session.active_node_id == "video"

    session.set_video(video("v1"))
    assert session.camera == Camera(15, 25, 2)
    assert session.active_node_id is None
    assert session.tooltip is None


def test_fullscreen_toggle_resets_camera():
    session = mounted()
    session.set_camera(Camera(5, 5, 3))
    session.set_fullscreen(True)
    assert session.camera == Camera()

    session.set_camera(Camera(5, 5, 3))
    session.set_fullscreen(True)
    assert session.camera == Camera(5, 5, 3)
    session.set_fullscreen(False)
    assert session.camera == Camera()


def test_listeners_follow_tooltip_changes():
    session = mounted()
    tooltips, redraws = [], []
    session.add_tooltip_listener(tooltips.append)
    session.add_change_listener(lambda s: redraws.append(s.active_node_id))

    click(session, 200, 150)
    assert tooltips[-1].label == "General context"
    assert redraws[-1] == "context"

    assert session.dismiss_outside()
    assert tooltips[-1] is None
    assert redraws[-1] is None
    assert not session.dismiss_outside()


def test_set_active_node():
    session = mounted()
    session.set_active_node("scene")
    assert session.active_node_id == "scene"
    commands = session.render()
    assert any(getattr(c, "node_id", None) == "scene" and c.line_width == 3 for c in commands)

    session.set_active_node("missing")
    assert session.active_node_id is None


def test_wheel_zoom_and_snapshot_are_isolated():
    session = mounted()
    assert session.handle_wheel(200, 150, -1)
    graph, camera = session.snapshot()
    assert camera.scale > 1

    graph.nodes[0].x = -999
    camera.x = -999
    assert session.nodes[0].x == 200
    assert session.camera.x != -999


def test_graph_edge_mode_renders_logical_edges():
    session = GraphSession(edge_mode="graph")
    session.resize(400, 300)
    svg = session.render_svg(id_prefix="g1")
    assert svg.count('stroke-width="1.5"') == 3
