"""Pydantic models for Nefit Easy backend payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..const import (
    BOILER_CENTRAL_HEATING,
    BOILER_HOT_WATER,
    BOILER_OFF,
    STATUS_OK,
    USER_MODE_MANUAL,
    VALUE_ON,
)
from ..utils import float_or_none

BOILER_INDICATORS: dict[str, str] = {
    "CH": BOILER_CENTRAL_HEATING,
    "HW": BOILER_HOT_WATER,
    "No": BOILER_OFF,
}


def _coerce_float(value: Any) -> Any:
    """Convert numeric strings to floats, mapping blanks to ``None``."""

    if isinstance(value, str):
        return float_or_none(value)
    return value


def _coerce_on_off(value: Any) -> Any:
    """Convert ``"on"``/``"off"`` and ``"true"``/``"false"`` strings to bools."""

    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"on", "true"}:
            return True
        if lowered in {"off", "false"}:
            return False
    return value


class Envelope(BaseModel):
    """Response wrapper returned by the backend for every GET."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    type: str | None = None
    value: Any = None
    unitOfMeasure: str | None = None


class UiStatusPayload(BaseModel):
    """Abbreviated ``/ecus/rrc/uiStatus`` value as sent by the thermostat."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    user_mode: str | None = Field(default=None, alias="UMD")
    in_house_temp: float | None = Field(default=None, alias="IHT")
    boiler_indicator: str | None = Field(default=None, alias="BAI")
    temp_setpoint: float | None = Field(default=None, alias="TSP")
    temp_manual_setpoint: float | None = Field(default=None, alias="MMT")
    fireplace_mode: bool | None = Field(default=None, alias="FPA")

    @field_validator("in_house_temp", "temp_setpoint", "temp_manual_setpoint", mode="before")
    @classmethod
    def _normalise_temperature(cls, value: Any) -> Any:
        """Parse temperatures reported as strings."""

        return _coerce_float(value)

    @field_validator("fireplace_mode", mode="before")
    @classmethod
    def _normalise_flag(cls, value: Any) -> Any:
        """Parse ``on``/``off`` flags."""

        return _coerce_on_off(value)


class StatusSnapshot(BaseModel):
    """General status of the appliance, in readable vocabulary."""

    model_config = ConfigDict(extra="ignore")

    user_mode: str | None = None
    in_house_temp: float | None = None
    outdoor_temp: float | None = None
    boiler_indicator: str | None = None
    temp_setpoint: float | None = None
    temp_manual_setpoint: float | None = None
    fireplace_mode: bool | None = None

    @field_validator(
        "in_house_temp",
        "outdoor_temp",
        "temp_setpoint",
        "temp_manual_setpoint",
        mode="before",
    )
    @classmethod
    def _normalise_temperature(cls, value: Any) -> Any:
        """Parse temperatures reported as strings."""

        return _coerce_float(value)

    @property
    def target_setpoint(self) -> float | None:
        """Return the setpoint that applies to the active user mode."""

        if self.user_mode == USER_MODE_MANUAL:
            return self.temp_manual_setpoint
        return self.temp_setpoint


class PressureSnapshot(BaseModel):
    """System pressure reading."""

    model_config = ConfigDict(extra="ignore")

    pressure: float | None = None
    unit: str | None = None

    @field_validator("pressure", mode="before")
    @classmethod
    def _normalise_pressure(cls, value: Any) -> Any:
        """Parse pressures reported as strings."""

        return _coerce_float(value)


class ToggleSnapshot(BaseModel):
    """On/off status endpoint (holiday mode, shower timer)."""

    model_config = ConfigDict(extra="ignore")

    value: str | None = None

    @property
    def is_on(self) -> bool:
        """Return ``True`` when the endpoint reports ``on``."""

        return self.value == VALUE_ON


class WriteResult(BaseModel):
    """Result envelope returned for every PUT."""

    model_config = ConfigDict(extra="allow")

    status: str

    @property
    def ok(self) -> bool:
        """Return ``True`` when the backend accepted the write."""

        return self.status == STATUS_OK
