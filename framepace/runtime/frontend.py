"""Runtime window frontend bridging host draw callbacks into the scheduler."""

from __future__ import annotations

import logging

from framepace.api.window import WindowCloseEvent, WindowPort, WindowRedrawEvent
from framepace.runtime.scheduler import FrameScheduler

_LOG = logging.getLogger("framepace.frontend")


class HostedWindowFrontend:
    """Frontend adapter over the window event loop and frame scheduler."""

    def __init__(self, window: WindowPort, scheduler: FrameScheduler) -> None:
        self._window = window
        self._scheduler = scheduler

    def run(self) -> None:
        self._window.set_draw_handler(self._draw_frame)
        self._window.run_loop()
        # The backend loop also exits when the canvas closes on its own.
        self._process_window_events()
        if not self._scheduler.is_closed:
            self._scheduler.handle(WindowCloseEvent())

    def _draw_frame(self) -> None:
        self._process_window_events()
        if not self._scheduler.is_closed:
            self._scheduler.handle(WindowRedrawEvent())
        if self._scheduler.is_closed:
            self._window.close()

    def _process_window_events(self) -> None:
        for event in self._window.poll_events():
            self._scheduler.handle(event)
            if self._scheduler.is_closed:
                _LOG.debug("frontend_close_observed event=%s", type(event).__name__)
                return


__all__ = ["HostedWindowFrontend"]
