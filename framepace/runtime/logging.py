"""Logging setup for the presentation loop."""

from __future__ import annotations

import json
import logging
import queue
from datetime import UTC, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

from framepace.api.logging import LoggingConfig
from framepace.runtime.config import resolve_log_level_name

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_QUEUE_LISTENER: QueueListener | None = None

# LogRecord attributes that are not caller-supplied ``extra`` fields.
_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` values land under ``fields``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        fields = {key: value for key, value in vars(record).items() if key not in _RECORD_FIELDS}
        if fields:
            payload["fields"] = fields
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(config: LoggingConfig) -> None:
    """Install console logging and, with ``file_path`` set, a queued file sink."""
    global _QUEUE_LISTENER

    shutdown_logging()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(_level(config.level_name))

    console = logging.StreamHandler()
    console.setFormatter(_formatter(config.console_format))
    if not config.file_path:
        root.addHandler(console)
        return

    # File writes happen on the listener thread, off the render loop.
    log_queue: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    root.addHandler(QueueHandler(log_queue))
    _QUEUE_LISTENER = QueueListener(
        log_queue,
        console,
        _file_handler(Path(config.file_path), config.file_format),
        respect_handler_level=True,
    )
    _QUEUE_LISTENER.start()


def shutdown_logging() -> None:
    """Flush and stop the file listener, if one is running."""
    global _QUEUE_LISTENER

    listener = _QUEUE_LISTENER
    _QUEUE_LISTENER = None
    if listener is None:
        return
    listener.stop()
    for handler in listener.handlers:
        handler.close()


def setup_logging() -> None:
    """Configure default logging unless the host already installed handlers."""
    if logging.getLogger().handlers:
        return
    configure_logging(LoggingConfig(level_name=resolve_log_level_name(default="INFO")))


def _level(name: str) -> int:
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _formatter(kind: str) -> logging.Formatter:
    if kind.strip().lower() == "json":
        return JsonFormatter()
    return logging.Formatter(TEXT_FORMAT)


def _file_handler(path: Path, kind: str) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    handler.setFormatter(_formatter(kind))
    return handler


__all__ = [
    "JsonFormatter",
    "TEXT_FORMAT",
    "configure_logging",
    "setup_logging",
    "shutdown_logging",
]
