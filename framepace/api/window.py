"""Window and surface contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class SurfaceHandle:
    """Opaque renderer-attachable surface handle."""

    surface_id: str
    backend: str
    provider: object | None = None
    presents_after_draw: bool = False


@dataclass(frozen=True, slots=True)
class WindowResizeEvent:
    """Resize notification in physical pixels, as reported by the host.

    Sizes may be zero while the window is minimized; consumers clamp.
    """

    width: int
    height: int


@dataclass(frozen=True, slots=True)
class WindowRedrawEvent:
    """Redraw-request notification."""


@dataclass(frozen=True, slots=True)
class WindowCloseEvent:
    """Normalized close-request event."""

    requested: bool = True


WindowEvent = WindowResizeEvent | WindowRedrawEvent | WindowCloseEvent


class RedrawPort(Protocol):
    """Window surface the scheduler drives between cycles."""

    def request_redraw(self) -> None:
        """Ask the host for exactly one more redraw notification."""

    def set_title(self, title: str) -> None:
        """Set OS window title."""


class WindowPort(RedrawPort, Protocol):
    """Host window and event-loop ownership contract."""

    def create_surface(self) -> SurfaceHandle:
        """Create a surface handle used by the renderer backend."""

    def physical_size(self) -> tuple[int, int]:
        """Return current drawable size in physical pixels."""

    def poll_events(self) -> tuple[WindowEvent, ...]:
        """Poll and return normalized window events."""

    def set_draw_handler(self, handler: object) -> None:
        """Register the callback invoked for each host redraw."""

    def run_loop(self) -> None:
        """Run the OS/backend event loop."""

    def stop_loop(self) -> None:
        """Stop the OS/backend event loop when supported."""

    def close(self) -> None:
        """Close window and release backend resources."""


__all__ = [
    "RedrawPort",
    "SurfaceHandle",
    "WindowCloseEvent",
    "WindowEvent",
    "WindowPort",
    "WindowRedrawEvent",
    "WindowResizeEvent",
]
