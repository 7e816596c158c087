"""Domain-layer primitives for the Nefit Easy integration."""

from .alarm import (
    AlarmEvaluation,
    PressureAlarmEvent,
    PressureThresholds,
    evaluate_pressure_alarm,
)
from .store import CapabilityStore, validate_capability_value

__all__ = [
    "AlarmEvaluation",
    "CapabilityStore",
    "PressureAlarmEvent",
    "PressureThresholds",
    "evaluate_pressure_alarm",
    "validate_capability_value",
]
