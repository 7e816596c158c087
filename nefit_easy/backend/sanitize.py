"""Shared sanitisation helpers for log output."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..const import CONF_ACCESS_KEY, CONF_PASSWORD, CONF_SERIAL_NUMBER

_SECRET_KEYS = frozenset({CONF_ACCESS_KEY, CONF_PASSWORD})


def mask_identifier(value: str | None) -> str:
    """Return a masked identifier suitable for log output."""

    if value is None:
        return ""
    trimmed = str(value).strip()
    if not trimmed:
        return ""
    if len(trimmed) <= 4:
        return "***"
    if len(trimmed) <= 8:
        return f"{trimmed[:2]}...{trimmed[-2:]}"
    prefix = trimmed[:3]
    suffix = trimmed[-3:]
    return f"{prefix}...{suffix}"


def redact_settings(settings: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``settings`` safe to log."""

    redacted: dict[str, Any] = {}
    for key, value in settings.items():
        if key in _SECRET_KEYS:
            redacted[key] = "***" if value else value
        elif key == CONF_SERIAL_NUMBER:
            redacted[key] = mask_identifier(value)
        else:
            redacted[key] = value
    return redacted


__all__ = ["mask_identifier", "redact_settings"]
