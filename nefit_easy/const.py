"""Constants for the Nefit Easy integration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

# Pairing defaults
DEFAULT_NAME: Final = "Nefit Easy"

# Version recorded on devices at pairing time; devices paired without it
# predate the current settings layout and must be re-added.
INTEGRATION_VERSION: Final = "4.1.0"
PAIRED_WITH_APP_VERSION: Final = "paired_with_app_version"

# Capabilities
CAP_INDOOR_TEMP: Final = "measure_temperature"
CAP_OUTDOOR_TEMP: Final = "measure_temperature.outdoor"
CAP_TARGET_TEMP: Final = "target_temperature"
CAP_PRESSURE: Final = "system_pressure"
CAP_CLOCK_PROGRAMME: Final = "clock_programme"
CAP_OPERATING_MODE: Final = "operating_mode"
CAP_CENTRAL_HEATING: Final = "central_heating"
CAP_ALARM_PRESSURE: Final = "alarm_pressure"
CAP_FIREPLACE_MODE: Final = "fireplace_mode"
CAP_HOLIDAY_MODE: Final = "holiday_mode"
CAP_SHOWER_TIMER: Final = "shower_timer"
CAP_SHOWER_TIME: Final = "shower_time"

# Removed in 4.0.7, dropped from existing devices on init.
LEGACY_CAP_THERMOSTAT_MODE: Final = "thermostat_mode"

KIND_BOOL: Final = "boolean"
KIND_NUMBER: Final = "number"
KIND_ENUM: Final = "enum"

CAPABILITY_KINDS: Final[Mapping[str, str]] = {
    CAP_INDOOR_TEMP: KIND_NUMBER,
    CAP_OUTDOOR_TEMP: KIND_NUMBER,
    CAP_TARGET_TEMP: KIND_NUMBER,
    CAP_PRESSURE: KIND_NUMBER,
    CAP_CLOCK_PROGRAMME: KIND_BOOL,
    CAP_OPERATING_MODE: KIND_ENUM,
    CAP_CENTRAL_HEATING: KIND_BOOL,
    CAP_ALARM_PRESSURE: KIND_BOOL,
    CAP_FIREPLACE_MODE: KIND_BOOL,
    CAP_HOLIDAY_MODE: KIND_BOOL,
    CAP_SHOWER_TIMER: KIND_BOOL,
    CAP_SHOWER_TIME: KIND_NUMBER,
}

# Backend vocabulary
USER_MODE_CLOCK: Final = "clock"
USER_MODE_MANUAL: Final = "manual"
BOILER_CENTRAL_HEATING: Final = "central heating"
BOILER_HOT_WATER: Final = "hot water"
BOILER_OFF: Final = "off"
VALUE_ON: Final = "on"
VALUE_OFF: Final = "off"
STATUS_OK: Final = "ok"
PRESSURE_UNIT_BAR: Final = "bar"

# Readings at or above this are sensor glitches, not pressure.
PRESSURE_SANITY_CEILING: Final = 25.0

# Settings keys, as persisted by the platform
CONF_SERIAL_NUMBER: Final = "serialNumber"
CONF_ACCESS_KEY: Final = "accessKey"
CONF_PASSWORD: Final = "password"
CONF_PRESSURE_TOO_LOW: Final = "pressureTooLow"
CONF_PRESSURE_TOO_HIGH: Final = "pressureTooHigh"
CONF_SYNC_INTERVAL: Final = "syncInterval"

CREDENTIAL_KEYS: Final = frozenset({CONF_SERIAL_NUMBER, CONF_ACCESS_KEY, CONF_PASSWORD})

DEFAULT_PRESSURE_TOO_LOW: Final = 1.2
DEFAULT_PRESSURE_TOO_HIGH: Final = 2.8

# Polling
DEFAULT_SYNC_INTERVAL: Final = 60  # seconds
MIN_SYNC_INTERVAL: Final = 10  # seconds
MAX_SYNC_INTERVAL: Final = 3600  # seconds
DEBUG_SYNC_INTERVAL: Final = 10  # seconds

# Capability writes
DEBOUNCE_RATE: Final = 0.5  # seconds

DEBUG_ENV_VAR: Final = "NEFIT_EASY_DEBUG"
