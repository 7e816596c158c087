"""Error taxonomy of the synchronization engine."""

from __future__ import annotations


class NefitEasyError(Exception):
    """Base class for device-level errors."""


class DeviceConnectionError(NefitEasyError):
    """The initial connection to the backend could not be established.

    The device stays unavailable until its connection settings change.
    """


class SyncError(NefitEasyError):
    """A reconciliation cycle failed; retried on the next interval."""


class StorageWriteError(NefitEasyError):
    """The platform refused a capability value."""

    def __init__(self, capability: str, cause: BaseException) -> None:
        """Record the capability and the underlying platform error."""

        super().__init__(f"Unable to set capability '{capability}': {cause}")
        self.capability = capability
        self.cause = cause


class CredentialError(NefitEasyError):
    """New connection settings were rejected by the backend."""


class DuplicateDeviceError(NefitEasyError):
    """The appliance being paired is already registered."""


__all__ = [
    "CredentialError",
    "DeviceConnectionError",
    "DuplicateDeviceError",
    "NefitEasyError",
    "StorageWriteError",
    "SyncError",
]
