"""Logging helpers shared by the CLI, the resolver and the package index clients.

Provides a single place to configure root logging plus small utilities for
structured DEBUG traces (``extra=`` payloads), URL redaction and timing.
"""
from __future__ import annotations

import logging
import re
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_QUERY = re.compile(r"(?i)(token|key|secret|password|auth)=([^&]+)")


def configure_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure root logging using the project log format.

    Args:
        level: Logging level name (DEBUG, INFO, ...).
        logfile: Optional file path; logs go to stderr when omitted.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    kwargs: Dict[str, Any] = {"level": log_level, "format": Constants.LOG_FORMAT, "force": True}
    if logfile:
        kwargs["filename"] = logfile
    logging.basicConfig(**kwargs)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by logger."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping for structured log records.

    None values are dropped so records only carry meaningful fields.
    """
    return {k: v for k, v in fields.items() if v is not None}


def redact(text: str) -> str:
    """Mask credential-looking query parameters in text."""
    if not text:
        return text
    return _SENSITIVE_QUERY.sub(lambda m: f"{m.group(1)}=***", text)


def safe_url(url: str) -> str:
    """Return url without userinfo and with sensitive query values masked."""
    if not url:
        return url
    parts = urlsplit(url)
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, redact(parts.query), parts.fragment))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self):
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Elapsed milliseconds, measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 3)
