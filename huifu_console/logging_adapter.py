"""Unified logging adapter for huifu_console.

Plain ``logging`` calls everywhere, rendered in one human-readable format:
``[ts][LEVEL][source] message | {extra}``.
"""

from __future__ import annotations

import datetime
import json
import logging
from typing import Any, Dict, Optional

from .config import config

_HANDLER_MARK = "_huifu_console_handler"

# loggers that share the console format; tornado.access carries the page requests
CONSOLE_LOGGERS = ("huifu_console", "tornado.access")


def resolve_level(level_name: Optional[str]) -> int:
    """Map a level name such as ``"warning"`` to its number; unknown names fall back to INFO."""
    level = logging.getLevelName(str(level_name or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def format_line(record: Dict[str, Any]) -> str:
    extra = record.get("extra") or {}
    extra_text = ""
    if extra:
        try:
            extra_text = " | " + json.dumps(extra, ensure_ascii=False, default=str, separators=(",", ":"))
        except (TypeError, ValueError):
            extra_text = " | " + str(extra)
    return f"[{record['ts']}][{record['level']}][{record['source']}] {record['message']}{extra_text}"


class ConsoleFormatter(logging.Formatter):
    """Formats records as ``format_line`` does; ``extra={"console_extra": {...}}`` becomes the JSON tail."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.datetime.fromtimestamp(record.created).isoformat(sep=" ", timespec="seconds"),
            "level": record.levelname,
            "source": getattr(record, "console_source", None) or record.name,
            "message": record.getMessage(),
            "extra": getattr(record, "console_extra", {}) or {},
        }
        line = format_line(payload)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_console_logging(level_name: Optional[str] = None) -> logging.Logger:
    """Attach one console handler to each of ``CONSOLE_LOGGERS``.

    Calling it again only changes the level. Without ``level_name`` the
    ``log.level`` setting is used.
    """
    level = resolve_level(level_name or config.get("log.level"))
    for name in CONSOLE_LOGGERS:
        target = logging.getLogger(name)
        if not any(getattr(h, _HANDLER_MARK, False) for h in target.handlers):
            handler = logging.StreamHandler()
            setattr(handler, _HANDLER_MARK, True)
            handler.setFormatter(ConsoleFormatter())
            target.addHandler(handler)
        target.propagate = False
        target.setLevel(level)
    return logging.getLogger(CONSOLE_LOGGERS[0])
