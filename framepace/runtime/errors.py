"""Runtime error taxonomy and exception policy helpers."""

from __future__ import annotations

import logging
from typing import TypeAlias


class FatalInitError(RuntimeError):
    """Raised when no compatible adapter, device or surface format exists."""

    def __init__(self, message: str, *, details: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.details = dict(details or {})


class SurfaceLostError(RuntimeError):
    """Surface acquisition failed against a stale or invalid configuration."""


class DeviceLostError(RuntimeError):
    """The underlying device is gone; the render loop cannot continue."""


# Explicitly bounded fallback set for teardown/backend compatibility paths.
RecoverableRuntimeErrors: TypeAlias = tuple[type[BaseException], ...]
RECOVERABLE_RUNTIME_ERRORS: RecoverableRuntimeErrors = (
    RuntimeError,
    OSError,
    ValueError,
    TypeError,
    AttributeError,
)


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *,
    level: int = logging.DEBUG,
) -> None:
    """Emit structured observability for tolerated recoverable exceptions."""
    logger.log(level, message, exc_info=True)


__all__ = [
    "DeviceLostError",
    "FatalInitError",
    "RECOVERABLE_RUNTIME_ERRORS",
    "SurfaceLostError",
    "log_recoverable",
]
