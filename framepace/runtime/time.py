"""Runtime timing primitives."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TimingGate:
    """Fixed-interval gate admitting at most one render cycle per period.

    Firing records the actual firing time rather than the ideal next tick, so
    late cycles push the schedule back instead of bursting to catch up.
    """

    target_period: float
    last_fired: float | None = None

    def __post_init__(self) -> None:
        if self.target_period <= 0.0:
            raise ValueError("target_period must be > 0")

    @classmethod
    def from_fps(cls, fps: float) -> "TimingGate":
        if fps <= 0.0:
            raise ValueError("fps must be > 0")
        return cls(target_period=1.0 / float(fps))

    def is_open(self, now: float) -> bool:
        if self.last_fired is None:
            return True
        return (now - self.last_fired) >= self.target_period

    def try_fire(self, now: float) -> bool:
        """Fire and return True when open; otherwise leave state untouched."""
        if not self.is_open(now):
            return False
        self.last_fired = now
        return True

    def reset(self) -> None:
        self.last_fired = None

