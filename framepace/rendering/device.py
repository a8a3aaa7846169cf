"""wgpu adapter/device/queue acquisition for one window surface."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from framepace.api.render import SurfaceCapabilities
from framepace.api.window import SurfaceHandle
from framepace.runtime.errors import (
    RECOVERABLE_RUNTIME_ERRORS,
    FatalInitError,
    log_recoverable,
)

_LOG = logging.getLogger("framepace.device")


@dataclass(slots=True)
class GpuContext:
    """Device handles and surface capabilities obtained once at startup."""

    adapter: Any
    device: Any
    queue: Any
    surface_context: Any
    capabilities: SurfaceCapabilities
    texture_usage: object | None = None
    selected_backend: str = "unknown"
    adapter_info: dict[str, object] = field(default_factory=dict)

    def release(self) -> None:
        """Destroy the logical device; the adapter needs no explicit release."""
        device = self.device
        self.queue = None
        self.device = None
        destroy = getattr(device, "destroy", None)
        if not callable(destroy):
            return
        try:
            destroy()
        except RECOVERABLE_RUNTIME_ERRORS:
            log_recoverable(_LOG, "device_destroy_failed")


def request_gpu_context(
    surface: SurfaceHandle,
    *,
    power_preference: str = "high-performance",
    backends: tuple[str, ...] = (),
    present_modes: tuple[str, ...] = ("fifo", "mailbox", "immediate"),
) -> GpuContext:
    """Request adapter, device and queue able to render to ``surface``.

    Any failure is reported as ``FatalInitError`` carrying diagnostic details.
    """
    try:
        import wgpu
    except Exception as exc:
        raise FatalInitError(
            "wgpu dependency unavailable",
            details={
                "selected_backend": "unknown",
                "adapter_info": {},
                "exception_type": exc.__class__.__name__,
                "exception_message": str(exc),
            },
        ) from exc
    surface_context = _resolve_surface_context(surface)
    selected_backend = "unknown"
    adapter_info: dict[str, object] = {}
    try:
        adapter, selected_backend = _request_adapter(
            wgpu,
            surface.provider,
            power_preference=power_preference,
            backends=backends,
        )
        adapter_info = _extract_adapter_info(adapter)
        device = _request_device(adapter)
        capabilities = _query_capabilities(surface_context, adapter, present_modes)
    except Exception as exc:
        details: dict[str, object] = {
            "selected_backend": selected_backend,
            "adapter_info": dict(adapter_info),
            "exception_type": exc.__class__.__name__,
            "exception_message": str(exc),
        }
        if isinstance(exc, FatalInitError):
            details.update(exc.details)
        raise FatalInitError("wgpu backend initialization failed", details=details) from exc
    queue = getattr(device, "queue", None)
    if queue is None:
        raise FatalInitError(
            "wgpu device queue unavailable",
            details={"selected_backend": selected_backend, "adapter_info": dict(adapter_info)},
        )
    _LOG.info(
        "gpu_context_ready backend=%s adapter=%s formats=%s",
        selected_backend,
        adapter_info.get("description") or adapter_info.get("device", "unknown"),
        ",".join(capabilities.formats),
    )
    return GpuContext(
        adapter=adapter,
        device=device,
        queue=queue,
        surface_context=surface_context,
        capabilities=capabilities,
        texture_usage=_resolve_texture_usage(wgpu),
        selected_backend=selected_backend,
        adapter_info=adapter_info,
    )


def _resolve_surface_context(surface: SurfaceHandle) -> Any:
    get_context = getattr(surface.provider, "get_context", None)
    if not callable(get_context):
        raise FatalInitError(
            "surface provider does not expose get_context('wgpu')",
            details={"surface_id": surface.surface_id, "backend": surface.backend},
        )
    context = get_context("wgpu")
    if context is None:
        raise FatalInitError(
            "surface provider returned no wgpu context",
            details={"surface_id": surface.surface_id, "backend": surface.backend},
        )
    return context


def _request_adapter(
    wgpu_mod: Any,
    canvas: object | None,
    *,
    power_preference: str,
    backends: tuple[str, ...],
) -> tuple[Any, str]:
    gpu = getattr(wgpu_mod, "gpu", None)
    request_adapter_sync = getattr(gpu, "request_adapter_sync", None)
    if not callable(request_adapter_sync):
        raise FatalInitError(
            "wgpu adapter request API unavailable",
            details={"selected_backend": "unknown", "adapter_info": {}},
        )
    backend_order: tuple[str | None, ...] = tuple(backends) or (None,)
    adapter = None
    selected_backend = "default"
    for backend_name in backend_order:
        selected_backend = str(backend_name) if backend_name else "default"
        kwargs: dict[str, object] = {"power_preference": power_preference, "canvas": canvas}
        if backend_name:
            kwargs["backend"] = backend_name
        try:
            adapter = request_adapter_sync(**kwargs)
        except TypeError:
            adapter = request_adapter_sync(power_preference=power_preference)
        if adapter is not None:
            break
    if adapter is None:
        raise FatalInitError(
            "wgpu adapter request returned None",
            details={
                "selected_backend": selected_backend,
                "attempted_backends": tuple(backends),
                "adapter_info": {},
            },
        )
    return adapter, selected_backend


def _request_device(adapter: Any) -> Any:
    request_device_sync = getattr(adapter, "request_device_sync", None)
    if not callable(request_device_sync):
        raise FatalInitError("wgpu device request API unavailable")
    device = request_device_sync(label="framepace.device")
    if device is None:
        raise FatalInitError("wgpu device request returned None")
    return device


def _extract_adapter_info(adapter: object) -> dict[str, object]:
    info = getattr(adapter, "info", None)
    if isinstance(info, dict):
        return {str(key): value for key, value in info.items()}
    return {}


def _query_capabilities(
    surface_context: Any,
    adapter: Any,
    present_modes: tuple[str, ...],
) -> SurfaceCapabilities:
    formats: list[str] = []
    get_preferred_format = getattr(surface_context, "get_preferred_format", None)
    if callable(get_preferred_format):
        preferred = get_preferred_format(adapter)
        if preferred:
            formats.append(str(preferred))
    return SurfaceCapabilities(formats=tuple(formats), present_modes=tuple(present_modes))


def _resolve_texture_usage(wgpu_mod: Any) -> object | None:
    usage = getattr(wgpu_mod, "TextureUsage", None)
    return getattr(usage, "RENDER_ATTACHMENT", None)


__all__ = ["GpuContext", "request_gpu_context"]
