"""Centralized logging helpers.

All modules log through the standard ``logging`` package and attach
structured fields with ``extra_context``. ``configure_logging`` installs a
single stderr handler on the root logger, emitting JSON lines by default or a
human friendly format when ``WPSCAFFOLD_LOG_FORMAT=pretty``.
"""
from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from constants import Constants

__version__ = "0.3.0"

_HANDLER_NAME = "wpscaffold-console"
_CONTEXT_KEY = "wpscaffold_context"
_SENSITIVE_PARAMS = ("token", "key", "secret", "password", "auth")


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON object carrying its structured context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "severity": record.levelname.lower(),
            "message": record.getMessage(),
            "logger": record.name,
            "version": __version__,
        }
        context = getattr(record, _CONTEXT_KEY, None)
        if isinstance(context, dict):
            payload.update(context)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class PrettyFormatter(logging.Formatter):
    """Human readable format; structured fields are appended as key=value."""

    def __init__(self) -> None:
        super().__init__("[%(levelname)s] %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = getattr(record, _CONTEXT_KEY, None)
        if context and logging.getLogger().isEnabledFor(logging.DEBUG):
            fields = " ".join(f"{k}={v}" for k, v in context.items())
            text = f"{text} ({fields})"
        return text


def _resolve_level(name: Optional[str]) -> int:
    level = getattr(logging, str(name or "INFO").upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Install the console handler on the root logger.

    Args:
        level: Level name; defaults to the WPSCAFFOLD_LOG_LEVEL env var, then INFO.
        fmt: "json" or "pretty"; defaults to WPSCAFFOLD_LOG_FORMAT, then json.
    """
    level_name = level or os.environ.get(Constants.ENV_LOG_LEVEL)
    fmt_name = (fmt or os.environ.get(Constants.ENV_LOG_FORMAT) or "json").lower()

    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(PrettyFormatter() if fmt_name == "pretty" else JsonFormatter())
    root.addHandler(handler)
    root.setLevel(_resolve_level(level_name))


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra=`` mapping for a log call, dropping empty fields."""
    return {_CONTEXT_KEY: {k: v for k, v in fields.items() if v is not None}}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def safe_url(url: str) -> str:
    """Strip credentials and secret-looking query parameters from a URL."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    netloc = parts.netloc.rsplit("@", 1)[-1]
    query = [
        (k, "[REDACTED]" if any(s in k.lower() for s in _SENSITIVE_PARAMS) else v)
        for k, v in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit((parts.scheme, netloc, parts.path, urlencode(query), parts.fragment))


class Timer:
    """Context manager measuring wall time of a block."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
