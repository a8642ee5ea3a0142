"""Logging helpers with redaction."""

from __future__ import annotations

import logging
import re

import httpx


_SENSITIVE_KEYS = re.compile(r"(^key$|token|secret|api[_-]?key|password|subscription)", re.IGNORECASE)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def redact_url(url: str) -> str:
    """Mask credential-like query parameters in a fragment URL."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        base, separator, _ = url.partition("?")
        return f"{base}?REDACTED" if separator else base
    if not parsed.query:
        return url

    params = [
        (key, "REDACTED" if _SENSITIVE_KEYS.search(key) else value)
        for key, value in parsed.params.multi_items()
    ]
    return str(parsed.copy_with(params=params))
