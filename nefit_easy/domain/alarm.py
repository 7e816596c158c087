"""Pressure alarm edge detection."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PressureThresholds:
    """Acceptable system pressure band in bar."""

    low: float
    high: float

    def is_outside(self, value: float) -> bool:
        """Return ``True`` when ``value`` lies outside the band."""

        return value < self.low or value > self.high


@dataclass(frozen=True, slots=True)
class PressureAlarmEvent:
    """Emitted when the pressure alarm switches on."""

    pressure: float


@dataclass(frozen=True, slots=True)
class AlarmEvaluation:
    """Outcome of a single pressure evaluation."""

    active: bool
    activated: PressureAlarmEvent | None = None


def evaluate_pressure_alarm(
    value: float,
    thresholds: PressureThresholds,
    previously_active: bool | None,
) -> AlarmEvaluation:
    """Return the new alarm state for ``value``.

    An activation event is only produced on the transition from inactive (or
    unknown) to active; a reading that keeps the alarm active yields none.
    """

    active = thresholds.is_outside(value)
    if active and not previously_active:
        return AlarmEvaluation(active=True, activated=PressureAlarmEvent(value))
    return AlarmEvaluation(active=active)


__all__ = [
    "AlarmEvaluation",
    "PressureAlarmEvent",
    "PressureThresholds",
    "evaluate_pressure_alarm",
]
