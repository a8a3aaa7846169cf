"""Window port over a rendercanvas canvas (GLFW backend by default)."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from importlib import import_module
import logging
import os
from typing import Any

from framepace.api.window import (
    SurfaceHandle,
    WindowCloseEvent,
    WindowEvent,
    WindowPort,
    WindowResizeEvent,
)

_LOG = logging.getLogger("framepace.window")

_TRACE_ENV = "FRAMEPACE_WINDOW_EVENTS_TRACE_ENABLED"


def run_backend_loop(rc_mod: Any) -> None:
    """Block in the backend event loop until the last canvas closes."""
    loop = getattr(rc_mod, "loop", None)
    runner = getattr(loop, "run", None) or getattr(rc_mod, "run", None)
    if not callable(runner):
        raise RuntimeError(f"{getattr(rc_mod, '__name__', rc_mod)!r} exposes no event loop to run")
    runner()


def stop_backend_loop(rc_mod: Any) -> None:
    stopper = getattr(getattr(rc_mod, "loop", None), "stop", None)
    if callable(stopper):
        stopper()


@dataclass(slots=True)
class RenderCanvasWindow(WindowPort):
    """Turns canvas events into window notifications and forwards redraw requests.

    Resize and close arrive from the canvas as callbacks; they are queued and
    handed to the scheduler through ``poll_events`` at the start of the next
    draw callback, so notifications stay in arrival order.
    """

    canvas: Any
    backend: str = "rendercanvas.glfw"
    _rc_mod: Any | None = field(default=None, repr=False)
    _pending: deque[WindowEvent] = field(default_factory=deque, repr=False)
    _trace: bool = field(default=False, repr=False)
    _closed: bool = field(default=False, repr=False)
    _close_requested: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        self._trace = os.getenv(_TRACE_ENV, "0").strip().lower() in {"1", "true", "yes", "on"}
        add_handler = getattr(self.canvas, "add_event_handler", None)
        if not callable(add_handler):
            _LOG.debug("canvas_events_unavailable canvas=%s", type(self.canvas).__name__)
            return
        for event_type in ("resize", "close"):
            self._subscribe(add_handler, event_type)
        if self._trace:
            self._subscribe(add_handler, "*")

    def create_surface(self) -> SurfaceHandle:
        # The canvas presents the current texture once the draw callback returns.
        return SurfaceHandle(
            surface_id=str(id(self.canvas)),
            backend=self.backend,
            provider=self.canvas,
            presents_after_draw=True,
        )

    def physical_size(self) -> tuple[int, int]:
        physical = _call(self.canvas, "get_physical_size")
        if _is_pair(physical):
            return (int(physical[0]), int(physical[1]))
        logical = _call(self.canvas, "get_logical_size")
        if _is_pair(logical):
            ratio = _positive(_call(self.canvas, "get_pixel_ratio"))
            return (int(float(logical[0]) * ratio), int(float(logical[1]) * ratio))
        return (0, 0)

    def poll_events(self) -> tuple[WindowEvent, ...]:
        events = tuple(self._pending)
        self._pending.clear()
        return events

    def set_draw_handler(self, handler: Callable[[], None]) -> None:
        _call(self.canvas, "request_draw", handler)

    def request_redraw(self) -> None:
        if self._closed or self._close_requested:
            return
        _call(self.canvas, "request_draw")

    def set_title(self, title: str) -> None:
        _call(self.canvas, "set_title", title)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        _call(self.canvas, "close")
        self.stop_loop()

    def run_loop(self) -> None:
        if self._rc_mod is not None:
            run_backend_loop(self._rc_mod)

    def stop_loop(self) -> None:
        if self._rc_mod is not None:
            stop_backend_loop(self._rc_mod)

    def _subscribe(self, add_handler: Callable[..., object], event_type: str) -> None:
        try:
            add_handler(self._on_canvas_event, event_type)
        except (TypeError, ValueError):
            _LOG.debug("canvas_event_unsupported type=%s", event_type)

    def _on_canvas_event(self, event: object) -> None:
        event_type = str(_field(event, "event_type", ""))
        if event_type == "resize":
            self._queue_resize(event)
        elif event_type == "close":
            self._pending.append(WindowCloseEvent())
            self._close_requested = True
        if self._trace and event_type not in {"before_draw", "animate"}:
            _LOG.debug("canvas_event type=%s payload=%r", event_type, event)

    def _queue_resize(self, event: object) -> None:
        size = _field(event, "size")
        if _is_pair(size):
            width, height = size[0], size[1]
        else:
            width, height = _field(event, "width"), _field(event, "height")
        if not isinstance(width, (int, float)) or not isinstance(height, (int, float)):
            _LOG.debug("resize_event_ignored payload=%r", event)
            return
        # Canvas sizes are logical; the surface is sized in physical pixels.
        ratio = _positive(_field(event, "pixel_ratio"))
        self._pending.append(
            WindowResizeEvent(
                width=max(0, int(float(width) * ratio)),
                height=max(0, int(float(height) * ratio)),
            )
        )
        self.request_redraw()


def create_rendercanvas_window(
    canvas: Any | None = None,
    *,
    width: int = 640,
    height: int = 480,
    title: str = "framepace",
    max_fps: float = 1000.0,
    vsync: bool = True,
    module_name: str = "rendercanvas.glfw",
) -> RenderCanvasWindow:
    """Wrap ``canvas``, or open an on-demand canvas from ``module_name``.

    ``max_fps`` is left high: pacing belongs to the frame scheduler, not the canvas.
    """
    if canvas is not None:
        return RenderCanvasWindow(canvas=canvas)
    try:
        rc_mod = import_module(module_name)
    except ImportError as exc:
        raise RuntimeError(
            f"window backend {module_name!r} unavailable; install rendercanvas and glfw"
        ) from exc
    canvas_cls = getattr(rc_mod, "RenderCanvas", None)
    if canvas_cls is None:
        raise RuntimeError(f"{module_name} does not provide RenderCanvas")
    size = (int(width), int(height))
    try:
        canvas = canvas_cls(
            size=size,
            title=title,
            update_mode="ondemand",
            max_fps=float(max_fps),
            vsync=bool(vsync),
        )
    except TypeError:
        canvas = canvas_cls(size=size, title=title)
    _LOG.info("window_created backend=%s size=%dx%d", module_name, size[0], size[1])
    return RenderCanvasWindow(canvas=canvas, backend=module_name, _rc_mod=rc_mod)


def _call(target: object, method: str, *args: object) -> object | None:
    func = getattr(target, method, None)
    return func(*args) if callable(func) else None


def _field(event: object, key: str, default: object | None = None) -> object | None:
    if isinstance(event, dict):
        return event.get(key, default)
    return getattr(event, key, default)


def _is_pair(value: object) -> bool:
    return isinstance(value, (tuple, list)) and len(value) >= 2


def _positive(value: object) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return float(value)
    return 1.0


__all__ = [
    "RenderCanvasWindow",
    "create_rendercanvas_window",
    "run_backend_loop",
    "stop_backend_loop",
]
