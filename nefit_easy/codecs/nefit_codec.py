"""Codec helpers for Nefit Easy backend endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..const import VALUE_OFF, VALUE_ON
from .models import (
    BOILER_INDICATORS,
    Envelope,
    PressureSnapshot,
    StatusSnapshot,
    ToggleSnapshot,
    UiStatusPayload,
    WriteResult,
)


def _envelope(raw: Any, *, label: str) -> Envelope:
    """Validate the outer GET envelope of ``raw``."""

    if not isinstance(raw, Mapping):
        raise ValueError(f"Undecodable {label} response: {type(raw).__name__}")
    return Envelope.model_validate(raw)


def decode_status(ui_status: Any, outdoor: Any | None = None) -> StatusSnapshot:
    """Translate the abbreviated UI status (plus outdoor sensor) to a snapshot."""

    envelope = _envelope(ui_status, label="uiStatus")
    value = envelope.value
    if not isinstance(value, Mapping):
        raise ValueError("Undecodable uiStatus response: missing value")
    payload = UiStatusPayload.model_validate(value)

    outdoor_temp: Any = None
    if outdoor is not None:
        outdoor_temp = _envelope(outdoor, label="outdoor temperature").value

    boiler_indicator = None
    if payload.boiler_indicator is not None:
        boiler_indicator = BOILER_INDICATORS.get(payload.boiler_indicator)

    return StatusSnapshot(
        user_mode=payload.user_mode,
        in_house_temp=payload.in_house_temp,
        outdoor_temp=outdoor_temp,
        boiler_indicator=boiler_indicator,
        temp_setpoint=payload.temp_setpoint,
        temp_manual_setpoint=payload.temp_manual_setpoint,
        fireplace_mode=payload.fireplace_mode,
    )


def decode_pressure(raw: Any) -> PressureSnapshot:
    """Return the system pressure reading."""

    envelope = _envelope(raw, label="pressure")
    return PressureSnapshot(pressure=envelope.value, unit=envelope.unitOfMeasure)


def decode_toggle(raw: Any) -> ToggleSnapshot | None:
    """Return an on/off snapshot, or ``None`` when the endpoint had no content."""

    if raw is None:
        return None
    envelope = _envelope(raw, label="status")
    if envelope.value is None:
        return None
    return ToggleSnapshot(value=str(envelope.value))


def decode_write_result(raw: Any) -> WriteResult:
    """Validate the result envelope of a PUT."""

    if not isinstance(raw, Mapping):
        raise ValueError(f"Undecodable write response: {type(raw).__name__}")
    return WriteResult.model_validate(raw)


def encode_toggle(enabled: bool) -> dict[str, str]:
    """Return the PUT body for an on/off endpoint."""

    return {"value": VALUE_ON if enabled else VALUE_OFF}


def encode_value(value: Any) -> dict[str, Any]:
    """Return the PUT body for a scalar endpoint."""

    return {"value": value}


__all__ = [
    "decode_pressure",
    "decode_status",
    "decode_toggle",
    "decode_write_result",
    "encode_toggle",
    "encode_value",
]
