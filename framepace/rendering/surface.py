"""Output surface configuration and per-frame target acquisition."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from framepace.api.render import (
    SurfaceCapabilities,
    SurfaceConfig,
    SurfaceContextPort,
    clamp_surface_size,
)
from framepace.runtime.errors import DeviceLostError, FatalInitError, SurfaceLostError

_LOG = logging.getLogger("framepace.surface")

_DEVICE_LOST_MARKERS: tuple[str, ...] = (
    "device lost",
    "devicelost",
    "lost device",
    "device is lost",
    "out of memory",
    "outofmemory",
)


@dataclass(slots=True, eq=False)
class PresentableTarget:
    """One acquired surface texture, valid until presented or discarded."""

    texture: object
    config: SurfaceConfig
    sequence: int
    _manager: "SurfaceManager" = field(repr=False)
    _state: str = field(default="acquired", repr=False)

    @property
    def is_valid(self) -> bool:
        return self._state == "acquired"

    @property
    def state(self) -> str:
        return self._state

    def create_view(self) -> object:
        self._ensure_valid("create_view")
        create_view = getattr(self.texture, "create_view", None)
        if not callable(create_view):
            raise SurfaceLostError(
                f"target #{self.sequence} texture {type(self.texture).__name__} cannot create a view"
            )
        return create_view()

    def present(self) -> None:
        self._manager.present(self)

    def discard(self) -> None:
        self._manager.discard(self)

    def _ensure_valid(self, action: str) -> None:
        if not self.is_valid:
            raise RuntimeError(f"{action} on {self._state} target #{self.sequence}")


class SurfaceManager:
    """Owns the live surface configuration and the single outstanding target."""

    def __init__(
        self,
        context: SurfaceContextPort,
        device: object,
        *,
        vsync: bool = True,
        usage: object | None = None,
        alpha_mode: str = "opaque",
        presents_after_draw: bool = False,
    ) -> None:
        self._context = context
        self._device = device
        self._vsync = bool(vsync)
        self._usage = usage
        self._alpha_mode = alpha_mode
        self._presents_after_draw = bool(presents_after_draw)
        self._config: SurfaceConfig | None = None
        self._outstanding: PresentableTarget | None = None
        self._sequence = 0
        self._configure_calls = 0

    @property
    def config(self) -> SurfaceConfig:
        if self._config is None:
            raise RuntimeError("surface manager is not initialized")
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._config is not None

    @property
    def has_outstanding(self) -> bool:
        return self._outstanding is not None

    @property
    def configure_calls(self) -> int:
        """Number of times a configuration was applied to the surface."""
        return self._configure_calls

    def initialize(
        self,
        capabilities: SurfaceCapabilities,
        requested_size: tuple[int, int],
    ) -> SurfaceConfig:
        """Select format and present mode, clamp the size and configure the surface."""
        if not capabilities.formats:
            raise FatalInitError(
                "no compatible surface format for adapter",
                details={"present_modes": tuple(capabilities.present_modes)},
            )
        width, height = clamp_surface_size(*requested_size)
        config = SurfaceConfig(
            width=width,
            height=height,
            format=str(capabilities.formats[0]),
            present_mode=_select_present_mode(capabilities.present_modes, vsync=self._vsync),
        )
        self._apply(config)
        self._config = config
        _LOG.info(
            "surface_initialized size=%dx%d format=%s present_mode=%s",
            config.width,
            config.height,
            config.format,
            config.present_mode,
        )
        return config

    def reconfigure(self, new_size: tuple[int, int], *, force: bool = False) -> SurfaceConfig:
        """Apply a new size; same-size calls are no-ops unless forced."""
        current = self.config
        width, height = clamp_surface_size(*new_size)
        if not force and (width, height) == current.size:
            return current
        config = SurfaceConfig(
            width=width,
            height=height,
            format=current.format,
            present_mode=current.present_mode,
        )
        self._apply(config)
        self._config = config
        _LOG.debug("surface_reconfigured size=%dx%d force=%s", width, height, force)
        return config

    def acquire(self) -> PresentableTarget:
        """Return the next drawable target for the current configuration."""
        config = self.config
        if self._outstanding is not None:
            raise RuntimeError(
                f"target #{self._outstanding.sequence} is still outstanding; "
                "present or discard it before acquiring another"
            )
        try:
            texture = self._context.get_current_texture()
        except Exception as exc:
            raise _classify_acquire_error(exc) from exc
        if texture is None:
            raise SurfaceLostError("surface returned no texture")
        self._sequence += 1
        target = PresentableTarget(texture=texture, config=config, sequence=self._sequence, _manager=self)
        self._outstanding = target
        return target

    def present(self, target: PresentableTarget) -> None:
        """Hand the target back to the platform for display."""
        self._ensure_outstanding(target, "present")
        if not self._presents_after_draw:
            present = getattr(self._context, "present", None)
            if callable(present):
                present()
        target._state = "presented"
        self._outstanding = None

    def discard(self, target: PresentableTarget) -> None:
        """Drop the target without presenting it."""
        self._ensure_outstanding(target, "discard")
        target._state = "discarded"
        self._outstanding = None
        _LOG.debug("target_discarded sequence=%d", target.sequence)

    def discard_outstanding(self) -> bool:
        target = self._outstanding
        if target is None:
            return False
        self.discard(target)
        return True

    def release(self) -> None:
        """Discard any outstanding target and detach the surface configuration."""
        self.discard_outstanding()
        if self._config is None:
            return
        unconfigure = getattr(self._context, "unconfigure", None)
        if callable(unconfigure):
            unconfigure()
        self._config = None

    def _ensure_outstanding(self, target: PresentableTarget, action: str) -> None:
        target._ensure_valid(action)
        if target is not self._outstanding:
            raise RuntimeError(f"{action} on target #{target.sequence} not owned by this surface")

    def _apply(self, config: SurfaceConfig) -> None:
        kwargs: dict[str, object] = {
            "device": self._device,
            "format": config.format,
            "alpha_mode": self._alpha_mode,
        }
        if self._usage is not None:
            kwargs["usage"] = self._usage
        try:
            self._context.configure(
                **kwargs,
                present_mode=config.present_mode,
                size=(config.width, config.height),
            )
        except TypeError:
            # Canvas contexts that size themselves from the window reject these keywords.
            self._context.configure(**kwargs)
        self._configure_calls += 1


def _select_present_mode(supported: tuple[str, ...], *, vsync: bool) -> str:
    if vsync:
        preferred = ("fifo", "mailbox", "immediate")
    else:
        preferred = ("mailbox", "immediate", "fifo")
    for mode in preferred:
        if mode in supported:
            return mode
    return "fifo"


def _classify_acquire_error(exc: BaseException) -> RuntimeError:
    text = f"{exc.__class__.__name__}: {exc}".lower()
    if any(marker in text for marker in _DEVICE_LOST_MARKERS):
        return DeviceLostError(f"device lost during acquire: {exc}")
    return SurfaceLostError(f"surface acquire failed: {exc}")


__all__ = ["PresentableTarget", "SurfaceManager"]
