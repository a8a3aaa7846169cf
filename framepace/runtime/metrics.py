"""Frame rate sampling for the presentation loop."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from time import monotonic

_LOG = logging.getLogger("framepace.metrics")


@dataclass(frozen=True, slots=True)
class FrameStats:
    """Last committed frame rate sample."""

    last_fps: float = 0.0
    last_frame_time_ms: float = 0.0


class FrameCounter:
    """Accumulates completed frames and commits averages once per sample window."""

    def __init__(
        self,
        *,
        time_source: Callable[[], float] | None = None,
        sample_window_seconds: float = 1.0,
    ) -> None:
        if sample_window_seconds <= 0.0:
            raise ValueError("sample_window_seconds must be > 0")
        self._time_source = time_source or monotonic
        self._sample_window_seconds = float(sample_window_seconds)
        self._window_start = self._time_source()
        self._frame_count = 0
        self._stats = FrameStats()

    @property
    def frame_count(self) -> int:
        """Frames counted since the last committed sample."""
        return self._frame_count

    @property
    def stats(self) -> FrameStats:
        return self._stats

    def update(self) -> None:
        """Record one completed render cycle."""
        self._frame_count += 1
        now = self._time_source()
        elapsed_seconds = now - self._window_start
        if elapsed_seconds < self._sample_window_seconds:
            return
        elapsed_ms = elapsed_seconds * 1000.0
        self._stats = FrameStats(
            last_fps=self._frame_count / elapsed_seconds,
            last_frame_time_ms=elapsed_ms / self._frame_count,
        )
        self._frame_count = 0
        self._window_start = now
        _LOG.debug(
            "frame_sample frame_time_ms=%.2f fps=%.1f",
            self._stats.last_frame_time_ms,
            self._stats.last_fps,
        )

    def get_last_fps(self) -> float:
        return self._stats.last_fps

    def get_last_frame_time(self) -> float:
        """Average frame duration in milliseconds over the last sample."""
        return self._stats.last_frame_time_ms


__all__ = ["FrameCounter", "FrameStats"]
