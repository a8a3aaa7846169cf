from __future__ import annotations

import sys
from types import ModuleType, SimpleNamespace

import pytest

from framepace.api.window import WindowCloseEvent, WindowResizeEvent
from framepace.window.rendercanvas_glfw import (
    RenderCanvasWindow,
    create_rendercanvas_window,
    run_backend_loop,
    stop_backend_loop,
)


class _Loop:
    def __init__(self) -> None:
        self.ran = 0
        self.stopped = 0

    def run(self) -> None:
        self.ran += 1

    def stop(self) -> None:
        self.stopped += 1


class _Canvas:
    def __init__(self, **kwargs) -> None:
        self.kwargs = kwargs
        self.handlers: dict[str, object] = {}
        self.draw_requests: list[object | None] = []
        self.titles: list[str] = []
        self.closed = False
        self.physical_size = (1280, 960)

    def add_event_handler(self, handler, event_type: str) -> None:
        self.handlers[event_type] = handler

    def request_draw(self, handler=None) -> None:
        self.draw_requests.append(handler)

    def set_title(self, title: str) -> None:
        self.titles.append(title)

    def get_physical_size(self) -> tuple[int, int]:
        return self.physical_size

    def close(self) -> None:
        self.closed = True


def _install_fake_rendercanvas(monkeypatch: pytest.MonkeyPatch, canvas_cls=_Canvas) -> ModuleType:
    rendercanvas_mod = ModuleType("rendercanvas")
    glfw_mod = ModuleType("rendercanvas.glfw")
    glfw_mod.RenderCanvas = canvas_cls
    glfw_mod.loop = _Loop()
    rendercanvas_mod.glfw = glfw_mod
    monkeypatch.setitem(sys.modules, "rendercanvas", rendercanvas_mod)
    monkeypatch.setitem(sys.modules, "rendercanvas.glfw", glfw_mod)
    return glfw_mod


def test_create_rendercanvas_window_builds_on_demand_canvas(monkeypatch) -> None:
    glfw_mod = _install_fake_rendercanvas(monkeypatch)

    window = create_rendercanvas_window(width=800, height=600, title="demo", vsync=False)

    assert window.backend == "rendercanvas.glfw"
    assert window.canvas.kwargs["size"] == (800, 600)
    assert window.canvas.kwargs["title"] == "demo"
    assert window.canvas.kwargs["update_mode"] == "ondemand"
    assert window.canvas.kwargs["vsync"] is False
    window.run_loop()
    assert glfw_mod.loop.ran == 1


def test_create_rendercanvas_window_falls_back_for_older_canvas_signature(monkeypatch) -> None:
    class _LegacyCanvas(_Canvas):
        def __init__(self, *, size, title) -> None:
            super().__init__(size=size, title=title)

    _install_fake_rendercanvas(monkeypatch, _LegacyCanvas)

    window = create_rendercanvas_window(width=320, height=240)

    assert window.canvas.kwargs == {"size": (320, 240), "title": "framepace"}


def test_create_rendercanvas_window_reports_missing_backend(monkeypatch) -> None:
    monkeypatch.setitem(sys.modules, "rendercanvas.missing", None)
    with pytest.raises(RuntimeError, match="unavailable"):
        create_rendercanvas_window(module_name="rendercanvas.missing")


def test_surface_handle_exposes_canvas_and_auto_present() -> None:
    canvas = _Canvas()
    surface = RenderCanvasWindow(canvas=canvas).create_surface()
    assert surface.provider is canvas
    assert surface.presents_after_draw is True


def test_resize_event_is_normalized_to_physical_pixels() -> None:
    canvas = _Canvas()
    window = RenderCanvasWindow(canvas=canvas)

    canvas.handlers["resize"]({"event_type": "resize", "width": 400, "height": 300, "pixel_ratio": 2.0})
    canvas.handlers["resize"]({"event_type": "resize", "width": 0, "height": 0, "pixel_ratio": 2.0})

    assert window.poll_events() == (
        WindowResizeEvent(width=800, height=600),
        WindowResizeEvent(width=0, height=0),
    )
    assert window.poll_events() == ()
    assert canvas.draw_requests == [None, None]


def test_close_event_is_queued_and_suppresses_redraws() -> None:
    canvas = _Canvas()
    window = RenderCanvasWindow(canvas=canvas)

    canvas.handlers["close"]({"event_type": "close"})
    window.request_redraw()

    assert window.poll_events() == (WindowCloseEvent(),)
    assert canvas.draw_requests == []


def test_draw_handler_and_title_forward_to_canvas() -> None:
    canvas = _Canvas()
    window = RenderCanvasWindow(canvas=canvas)

    def handler() -> None:
        return None

    window.set_draw_handler(handler)
    window.request_redraw()
    window.set_title("FPS: 30.0")

    assert canvas.draw_requests == [handler, None]
    assert canvas.titles == ["FPS: 30.0"]


def test_physical_size_falls_back_to_logical_size_and_ratio() -> None:
    canvas = SimpleNamespace(get_logical_size=lambda: (100.0, 50.0), get_pixel_ratio=lambda: 1.5)
    assert RenderCanvasWindow(canvas=canvas).physical_size() == (150, 75)
    assert RenderCanvasWindow(canvas=SimpleNamespace()).physical_size() == (0, 0)


def test_close_closes_canvas_and_stops_loop_once() -> None:
    loop = _Loop()
    canvas = _Canvas()
    window = RenderCanvasWindow(canvas=canvas, _rc_mod=SimpleNamespace(loop=loop))

    window.close()
    window.close()

    assert canvas.closed is True
    assert loop.stopped == 1


def test_run_backend_loop_prefers_loop_object_then_run_function() -> None:
    loop = _Loop()
    run_backend_loop(SimpleNamespace(loop=loop))
    assert loop.ran == 1

    calls: list[str] = []
    run_backend_loop(SimpleNamespace(run=lambda: calls.append("run")))
    assert calls == ["run"]

    with pytest.raises(RuntimeError):
        run_backend_loop(SimpleNamespace())

    stop_backend_loop(SimpleNamespace(loop=loop))
    assert loop.stopped == 1
