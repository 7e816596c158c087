"""Synchronization engine for Nefit Easy thermostats."""
from __future__ import annotations

from typing import Any

from .config import DeviceContext, DeviceSettings
from .const import INTEGRATION_VERSION
from .errors import (
    CredentialError,
    DeviceConnectionError,
    DuplicateDeviceError,
    NefitEasyError,
    StorageWriteError,
    SyncError,
)
from .port import PlatformPortProto

__version__ = INTEGRATION_VERSION

__all__ = [
    "CredentialError",
    "DeviceConnectionError",
    "DeviceContext",
    "DeviceSettings",
    "DuplicateDeviceError",
    "NefitEasyDevice",
    "NefitEasyError",
    "PlatformPortProto",
    "StorageWriteError",
    "SyncError",
    "async_validate_new_device",
]


def __getattr__(name: str) -> Any:
    """Lazily import the device and pairing entry points."""

    if name == "NefitEasyDevice":
        from .device import NefitEasyDevice

        globals()[name] = NefitEasyDevice
        return NefitEasyDevice
    if name == "async_validate_new_device":
        from .pairing import async_validate_new_device

        globals()[name] = async_validate_new_device
        return async_validate_new_device
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
