"""Environment-driven runtime configuration for the presentation loop."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import TypeVar

from framepace.api.logging import LoggingConfig

DEFAULT_FPS_CAP = 30.0
DEFAULT_CLEAR_COLOR: tuple[float, float, float, float] = (0.0, 1.0, 0.0, 1.0)
DEFAULT_PRESENT_MODES: tuple[str, ...] = ("fifo", "mailbox", "immediate")

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})

_N = TypeVar("_N", int, float)


@dataclass(frozen=True, slots=True)
class RuntimeWindowConfig:
    backend: str
    width: int
    height: int
    title: str


@dataclass(frozen=True, slots=True)
class RuntimeRenderConfig:
    fps_cap: float
    vsync: bool
    clear_color: tuple[float, float, float, float]

    @property
    def target_period_seconds(self) -> float:
        """Minimum spacing between two render cycles."""
        return 1.0 / self.fps_cap


@dataclass(frozen=True, slots=True)
class RuntimeRendererConfig:
    present_modes: tuple[str, ...]
    wgpu_backends: tuple[str, ...]
    power_preference: str


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Immutable configuration snapshot for one run."""

    window: RuntimeWindowConfig
    render: RuntimeRenderConfig
    renderer: RuntimeRendererConfig
    logging: LoggingConfig

    def with_overrides(
        self,
        *,
        fps_cap: float | None = None,
        width: int | None = None,
        height: int | None = None,
        title: str | None = None,
        vsync: bool | None = None,
        log_level: str | None = None,
        log_file: str | None = None,
    ) -> "RuntimeConfig":
        """Apply command-line values; ``None`` keeps the loaded value."""
        window_changes = _given(width=width, height=height, title=title)
        render_changes = _given(fps_cap=fps_cap, vsync=vsync)
        logging_changes = _given(level_name=log_level, file_path=log_file)
        if "width" in window_changes:
            window_changes["width"] = max(1, int(window_changes["width"]))
        if "height" in window_changes:
            window_changes["height"] = max(1, int(window_changes["height"]))
        if "fps_cap" in render_changes:
            render_changes["fps_cap"] = max(1.0, float(render_changes["fps_cap"]))
        if "level_name" in logging_changes:
            logging_changes["level_name"] = str(logging_changes["level_name"]).strip().upper()
        if "file_path" in logging_changes:
            logging_changes["file_path"] = str(logging_changes["file_path"]) or None
        return replace(
            self,
            window=replace(self.window, **window_changes),
            render=replace(self.render, **render_changes),
            logging=replace(self.logging, **logging_changes),
        )


_RUNTIME_CONFIG: ContextVar[RuntimeConfig | None] = ContextVar("framepace_runtime_config", default=None)


class _EnvReader:
    """Tolerant lookups: unset, blank or malformed values fall back to defaults."""

    def __init__(self, env: Mapping[str, str] | None) -> None:
        self._env = os.environ if env is None else env

    def text(self, name: str, default: str = "") -> str:
        raw = self._env.get(name)
        value = "" if raw is None else str(raw).strip()
        return value or default

    def flag(self, name: str, default: bool) -> bool:
        value = self.text(name).lower()
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
        return default

    def number(self, name: str, default: _N, cast: Callable[[str], _N], *, minimum: _N) -> _N:
        value = self.text(name)
        try:
            parsed = cast(value) if value else default
        except ValueError:
            parsed = default
        return max(minimum, parsed)

    def items(self, name: str) -> tuple[str, ...]:
        return tuple(part.strip() for part in self.text(name).split(",") if part.strip())

    def color(self, name: str, default: tuple[float, float, float, float]) -> tuple[float, float, float, float]:
        parts = self.items(name)
        if len(parts) not in {3, 4}:
            return default
        try:
            channels = [min(1.0, max(0.0, float(part))) for part in parts]
        except ValueError:
            return default
        channels.extend([1.0] * (4 - len(channels)))
        return (channels[0], channels[1], channels[2], channels[3])


def resolve_log_level_name(default: str = "INFO", *, env: Mapping[str, str] | None = None) -> str:
    """``FRAMEPACE_LOG_LEVEL`` wins over the generic ``LOG_LEVEL``."""
    reader = _EnvReader(env)
    return reader.text("FRAMEPACE_LOG_LEVEL", reader.text("LOG_LEVEL", default)).upper()


def load_runtime_config(*, env: Mapping[str, str] | None = None) -> RuntimeConfig:
    read = _EnvReader(env)
    present_modes = tuple(mode.lower() for mode in read.items("FRAMEPACE_WGPU_PRESENT_MODES"))
    return RuntimeConfig(
        window=RuntimeWindowConfig(
            backend=read.text("FRAMEPACE_WINDOW_BACKEND", "rendercanvas_glfw").lower(),
            width=read.number("FRAMEPACE_WINDOW_WIDTH", 640, int, minimum=1),
            height=read.number("FRAMEPACE_WINDOW_HEIGHT", 480, int, minimum=1),
            title=read.text("FRAMEPACE_WINDOW_TITLE", "framepace"),
        ),
        render=RuntimeRenderConfig(
            fps_cap=read.number("FRAMEPACE_FPS_CAP", DEFAULT_FPS_CAP, float, minimum=1.0),
            vsync=read.flag("FRAMEPACE_RENDER_VSYNC", True),
            clear_color=read.color("FRAMEPACE_CLEAR_COLOR", DEFAULT_CLEAR_COLOR),
        ),
        renderer=RuntimeRendererConfig(
            present_modes=present_modes or DEFAULT_PRESENT_MODES,
            wgpu_backends=read.items("FRAMEPACE_WGPU_BACKENDS"),
            power_preference=read.text("FRAMEPACE_WGPU_POWER_PREFERENCE", "high-performance").lower(),
        ),
        logging=LoggingConfig(
            level_name=resolve_log_level_name(env=env),
            console_format=read.text("FRAMEPACE_LOG_FORMAT", "text").lower(),
            file_path=read.text("FRAMEPACE_LOG_FILE") or None,
        ),
    )


def initialize_runtime_config(*, env: Mapping[str, str] | None = None) -> RuntimeConfig:
    """Load from the environment and make it the current config."""
    return set_runtime_config(load_runtime_config(env=env))


def set_runtime_config(config: RuntimeConfig) -> RuntimeConfig:
    _RUNTIME_CONFIG.set(config)
    return config


def get_runtime_config() -> RuntimeConfig:
    config = _RUNTIME_CONFIG.get()
    return config if config is not None else initialize_runtime_config()


def _given(**values: object) -> dict[str, object]:
    return {key: value for key, value in values.items() if value is not None}


__all__ = [
    "DEFAULT_CLEAR_COLOR",
    "DEFAULT_FPS_CAP",
    "DEFAULT_PRESENT_MODES",
    "RuntimeConfig",
    "RuntimeRenderConfig",
    "RuntimeRendererConfig",
    "RuntimeWindowConfig",
    "get_runtime_config",
    "initialize_runtime_config",
    "load_runtime_config",
    "resolve_log_level_name",
    "set_runtime_config",
]
