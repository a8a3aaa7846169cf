"""Frame scheduler driving the capped-rate presentation loop."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from enum import Enum, auto
from time import monotonic
from typing import Any, Protocol

from framepace.api.render import RenderableProgram
from framepace.api.window import (
    RedrawPort,
    WindowCloseEvent,
    WindowEvent,
    WindowRedrawEvent,
    WindowResizeEvent,
)
from framepace.rendering.presenter import Presenter
from framepace.rendering.surface import SurfaceManager
from framepace.runtime.errors import (
    RECOVERABLE_RUNTIME_ERRORS,
    DeviceLostError,
    SurfaceLostError,
    log_recoverable,
)
from framepace.runtime.metrics import FrameCounter, FrameStats
from framepace.runtime.time import TimingGate

_LOG = logging.getLogger("framepace.scheduler")


class SchedulerState(Enum):
    """Presentation loop states."""

    IDLE = auto()
    RESIZING = auto()
    RENDERING = auto()
    CLOSING = auto()


class Releasable(Protocol):
    def release(self) -> None: ...


def format_fps_title(fps: float) -> str:
    return f"FPS: {fps:.1f}"


class FrameScheduler:
    """Consumes window notifications and runs gated render cycles."""

    def __init__(
        self,
        *,
        surface_manager: SurfaceManager,
        presenter: Presenter,
        frame_counter: FrameCounter,
        gate: TimingGate,
        device: Any,
        queue: Any,
        program: RenderableProgram,
        window: RedrawPort,
        time_source: Callable[[], float] | None = None,
        owned_resources: Sequence[Releasable] = (),
    ) -> None:
        self._surface_manager = surface_manager
        self._presenter = presenter
        self._frame_counter = frame_counter
        self._gate = gate
        self._device = device
        self._queue = queue
        self._program = program
        self._window = window
        self._time_source = time_source or monotonic
        self._owned_resources: list[Releasable] = list(owned_resources)
        self._state = SchedulerState.IDLE
        self._fatal_error: BaseException | None = None
        self._rendered_cycles = 0
        self._skipped_cycles = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_closed(self) -> bool:
        return self._state is SchedulerState.CLOSING

    @property
    def fatal_error(self) -> BaseException | None:
        return self._fatal_error

    @property
    def rendered_cycles(self) -> int:
        return self._rendered_cycles

    @property
    def skipped_cycles(self) -> int:
        return self._skipped_cycles

    @property
    def stats(self) -> FrameStats:
        return self._frame_counter.stats

    def run(self, events: Iterable[WindowEvent]) -> SchedulerState:
        """Consume notifications until the stream ends or the loop closes."""
        for event in events:
            if self.handle(event) is SchedulerState.CLOSING:
                break
        return self._state

    def handle(self, event: WindowEvent) -> SchedulerState:
        if self._state is SchedulerState.CLOSING:
            return self._state
        if isinstance(event, WindowCloseEvent):
            self.close()
        elif isinstance(event, WindowResizeEvent):
            self._on_resize(event)
        elif isinstance(event, WindowRedrawEvent):
            self._on_redraw()
        else:
            _LOG.debug("scheduler_event_ignored type=%s", type(event).__name__)
        return self._state

    def close(self) -> None:
        """Enter the terminal state and release owned resources in reverse order."""
        if self._state is SchedulerState.CLOSING:
            return
        self._state = SchedulerState.CLOSING
        if self._surface_manager.discard_outstanding():
            _LOG.info("scheduler_close_discarded_target")
        owned = self._owned_resources
        self._owned_resources = []
        for resource in reversed(owned):
            try:
                resource.release()
            except RECOVERABLE_RUNTIME_ERRORS:
                log_recoverable(
                    _LOG,
                    f"resource_release_failed resource={type(resource).__name__}",
                    level=logging.WARNING,
                )
        _LOG.info(
            "scheduler_closed rendered=%d skipped=%d fatal=%s",
            self._rendered_cycles,
            self._skipped_cycles,
            self._fatal_error is not None,
        )

    def _on_resize(self, event: WindowResizeEvent) -> None:
        self._state = SchedulerState.RESIZING
        try:
            self._surface_manager.reconfigure((event.width, event.height))
        except RuntimeError as exc:
            self._fail(DeviceLostError(f"surface reconfigure failed: {exc}"), cause=exc)
            return
        self._window.request_redraw()
        self._state = SchedulerState.IDLE

    def _on_redraw(self) -> None:
        self._state = SchedulerState.RENDERING
        try:
            if not self._gate.try_fire(self._time_source()):
                self._skipped_cycles += 1
            elif self._render_with_recovery():
                self._rendered_cycles += 1
                self._window.set_title(format_fps_title(self._frame_counter.get_last_fps()))
            else:
                return
            self._window.request_redraw()
        finally:
            if self._state is SchedulerState.RENDERING:
                self._state = SchedulerState.IDLE

    def _render_with_recovery(self) -> bool:
        # Only a lost surface is retried; any other cycle failure ends the loop.
        try:
            self._render_once()
            return True
        except SurfaceLostError as exc:
            _LOG.warning("surface_lost retrying_after_reconfigure error=%s", exc)
        except Exception as exc:
            self._fail(_as_device_lost(exc), cause=exc)
            return False
        try:
            self._surface_manager.reconfigure(self._surface_manager.config.size, force=True)
            self._render_once()
            return True
        except SurfaceLostError as exc:
            self._fail(DeviceLostError(f"surface still lost after reconfigure: {exc}"), cause=exc)
        except Exception as exc:
            self._fail(_as_device_lost(exc), cause=exc)
        return False

    def _render_once(self) -> None:
        self._presenter.render_cycle(
            self._surface_manager,
            self._device,
            self._queue,
            self._program,
            self._frame_counter,
        )

    def _fail(self, error: DeviceLostError, *, cause: BaseException) -> None:
        if error is not cause:
            error.__cause__ = cause
        self._fatal_error = error
        _LOG.error("render_loop_fatal error=%s", error, exc_info=error)
        self.close()


def _as_device_lost(exc: BaseException) -> DeviceLostError:
    if isinstance(exc, DeviceLostError):
        return exc
    return DeviceLostError(f"render cycle failed: {type(exc).__name__}: {exc}")


__all__ = ["FrameScheduler", "Releasable", "SchedulerState", "format_fps_title"]
