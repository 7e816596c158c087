"""Vetting of new appliances before they are stored."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
import logging
from typing import Any

import voluptuous as vol

from .backend.base import ClientFactory, RemoteClientError
from .backend.sanitize import mask_identifier
from .config import DeviceContext, DeviceSettings
from .const import (
    CONF_ACCESS_KEY,
    CONF_PASSWORD,
    CONF_SERIAL_NUMBER,
    DEFAULT_NAME,
    PAIRED_WITH_APP_VERSION,
)
from .credentials import async_probe_device
from .errors import CredentialError, DuplicateDeviceError
from .i18n import MSG_CREDENTIALS, MSG_DUPLICATE

_LOGGER = logging.getLogger(__name__)

PAIRING_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_SERIAL_NUMBER): vol.All(vol.Coerce(str), vol.Strip),
        vol.Required(CONF_ACCESS_KEY): vol.All(vol.Coerce(str), vol.Strip),
        vol.Required(CONF_PASSWORD): str,
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True, slots=True)
class PairingResult:
    """Record describing a vetted appliance, ready to be stored."""

    name: str
    data: dict[str, Any]
    store: dict[str, Any] = field(default_factory=dict)


async def async_validate_new_device(
    client_factory: ClientFactory,
    user_input: Mapping[str, Any],
    context: DeviceContext,
    *,
    is_registered: Callable[[str], bool] = lambda serial: False,
) -> PairingResult:
    """Check pairing input against the backend and return the device record.

    Raises ``vol.Invalid`` for malformed input, ``DuplicateDeviceError`` when
    the serial number is already registered and ``CredentialError`` when the
    backend cannot decode our requests. Transport errors propagate.
    """

    data = PAIRING_SCHEMA(dict(user_input))
    settings = DeviceSettings.from_mapping(data)
    serial = settings.connection.serial_number
    _LOGGER.debug("validating new device %s", mask_identifier(serial))

    if is_registered(serial):
        _LOGGER.info("device %s is already registered", mask_identifier(serial))
        raise DuplicateDeviceError(context.message(MSG_DUPLICATE))

    await async_probe_device(
        client_factory,
        settings.connection,
        credential_message=context.message(MSG_CREDENTIALS),
        label=mask_identifier(serial),
    )
    return PairingResult(
        name=DEFAULT_NAME,
        data=data,
        store={PAIRED_WITH_APP_VERSION: context.integration_version},
    )


def pairing_error_key(err: BaseException) -> str:
    """Map a pairing failure onto a form error key."""

    if isinstance(err, vol.Invalid):
        return "invalid_input"
    if isinstance(err, DuplicateDeviceError):
        return "duplicate"
    if isinstance(err, CredentialError):
        return "credentials"
    if isinstance(err, (RemoteClientError, OSError)):
        return "cannot_connect"
    _LOGGER.error("Unexpected error during pairing: %s", err)
    return "unknown"


__all__ = [
    "PAIRING_SCHEMA",
    "PairingResult",
    "async_validate_new_device",
    "pairing_error_key",
]
