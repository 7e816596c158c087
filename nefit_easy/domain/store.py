"""Capability values published through the platform port."""

from __future__ import annotations

from typing import Any

from ..const import CAPABILITY_KINDS, KIND_BOOL, KIND_ENUM, KIND_NUMBER
from ..errors import StorageWriteError
from ..port import PlatformPortProto
from ..utils import format_value


def validate_capability_value(capability: str, value: Any) -> Any:
    """Return ``value`` formatted for ``capability`` or raise ``TypeError``."""

    kind = CAPABILITY_KINDS.get(capability)
    if kind is None:
        raise KeyError(f"Unknown capability: {capability!r}")
    if kind == KIND_BOOL:
        if not isinstance(value, bool):
            raise TypeError(f"{capability} expects a boolean, got {value!r}")
        return value
    if kind == KIND_NUMBER:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"{capability} expects a number, got {value!r}")
        return format_value(value)
    if kind == KIND_ENUM and not isinstance(value, str):
        raise TypeError(f"{capability} expects a string, got {value!r}")
    return value


class CapabilityStore:
    """Capability values published through the platform port.

    Comparisons always use the value the platform currently shows, so a
    change made on the platform side is corrected by the next write.
    """

    def __init__(self, port: PlatformPortProto) -> None:
        """Initialise the store in front of ``port``."""

        self._port = port

    def get(self, capability: str) -> Any:
        """Return the platform's value of ``capability`` (``None`` when unknown)."""

        return self._port.get_capability_value(capability)

    async def async_set(self, capability: str, value: Any) -> bool:
        """Publish ``value`` and return ``True`` when it changed.

        ``None`` is ignored. Raises ``StorageWriteError`` when the platform
        rejects the value.
        """

        if value is None:
            return False
        value = validate_capability_value(capability, value)
        if self.get(capability) == value:
            return False
        try:
            await self._port.async_set_capability_value(capability, value)
        except Exception as err:
            raise StorageWriteError(capability, err) from err
        return True
