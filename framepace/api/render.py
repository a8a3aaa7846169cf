"""Render surface contracts shared by runtime and rendering layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class SurfaceCapabilities:
    """Formats and present modes the adapter supports for one surface."""

    formats: tuple[str, ...]
    present_modes: tuple[str, ...] = ("fifo",)


@dataclass(frozen=True, slots=True)
class SurfaceConfig:
    """Live output surface configuration. Sizes are never below 1x1."""

    width: int
    height: int
    format: str
    present_mode: str

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True, slots=True)
class RenderableProgram:
    """Pre-built render pipeline consumed opaquely by the presenter."""

    pipeline: object
    target_format: str
    label: str = "program"


class SurfaceContextPort(Protocol):
    """Subset of the wgpu canvas context used by the surface manager."""

    def configure(self, **kwargs: object) -> None:
        """Apply device, format and size to the surface."""

    def get_current_texture(self) -> object:
        """Return the next drawable texture."""


def clamp_surface_size(width: object, height: object) -> tuple[int, int]:
    """Clamp host-reported sizes to a drawable 1x1 minimum."""
    return (max(1, _as_int(width)), max(1, _as_int(height)))


def _as_int(value: object) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    return 0


__all__ = [
    "RenderableProgram",
    "SurfaceCapabilities",
    "SurfaceConfig",
    "SurfaceContextPort",
    "clamp_surface_size",
]
