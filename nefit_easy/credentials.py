"""Validation of new connection settings."""

from __future__ import annotations

import logging

from .availability import AvailabilityStateMachine
from .backend.base import ClientFactory, RemoteClientProto, ResponseDecodeError
from .backend.sanitize import mask_identifier
from .config import ConnectionSettings
from .errors import CredentialError
from .scheduler import SyncScheduler

_LOGGER = logging.getLogger(__name__)


async def release_client(client: RemoteClientProto | None, label: str = "") -> None:
    """End ``client``, logging instead of raising on failure."""

    if client is None:
        return
    try:
        await client.end()
    except Exception:  # noqa: BLE001 - defensive logging only
        _LOGGER.debug("%s: failed to release client", label, exc_info=True)


class ClientSlot:
    """Exclusive owner of a device's active remote client."""

    def __init__(self, label: str = "") -> None:
        """Initialise an empty slot."""

        self._client: RemoteClientProto | None = None
        self._label = label

    @property
    def client(self) -> RemoteClientProto:
        """Return the active client; raise when none is connected."""

        if self._client is None:
            raise RuntimeError(f"{self._label}: no connected client")
        return self._client

    @property
    def connected(self) -> bool:
        """Return ``True`` when a client is installed."""

        return self._client is not None

    async def async_replace(self, client: RemoteClientProto) -> None:
        """Install ``client`` and release the one it replaces."""

        previous, self._client = self._client, client
        if previous is not None and previous is not client:
            await release_client(previous, self._label)

    async def async_release(self) -> None:
        """Release and forget the active client."""

        client, self._client = self._client, None
        await release_client(client, self._label)


async def async_probe_client(
    client_factory: ClientFactory,
    settings: ConnectionSettings,
    *,
    credential_message: str = "Invalid credentials",
    label: str = "",
) -> RemoteClientProto:
    """Return a connected client that answered one status request.

    An undecodable response means the password is wrong and raises
    ``CredentialError``; any other error propagates unchanged. The new
    client is released on every failure.
    """

    serial = mask_identifier(settings.serial_number)
    client = client_factory(settings)
    try:
        await client.connect()
        await client.status()
    except (ResponseDecodeError, ValueError) as err:
        await release_client(client, label)
        _LOGGER.warning("%s: invalid credentials for %s", label, serial)
        raise CredentialError(credential_message) from err
    except BaseException:
        await release_client(client, label)
        _LOGGER.warning("%s: unable to validate settings for %s", label, serial)
        raise
    return client


async def async_probe_device(
    client_factory: ClientFactory,
    settings: ConnectionSettings,
    *,
    credential_message: str = "Invalid credentials",
    label: str = "",
) -> None:
    """Check that ``settings`` reach a working appliance, keeping nothing."""

    client = await async_probe_client(
        client_factory, settings, credential_message=credential_message, label=label
    )
    await release_client(client, label)


class CredentialValidator:
    """Probe new connection settings and swap in the resulting client."""

    def __init__(
        self,
        client_factory: ClientFactory,
        slot: ClientSlot,
        availability: AvailabilityStateMachine,
        scheduler: SyncScheduler,
        *,
        credential_message: str = "Invalid credentials",
        label: str = "",
    ) -> None:
        """Initialise the validator for one device."""

        self._client_factory = client_factory
        self._slot = slot
        self._availability = availability
        self._scheduler = scheduler
        self._credential_message = credential_message
        self._label = label

    async def async_validate(self, settings: ConnectionSettings) -> None:
        """Probe ``settings`` and make the new client the active one.

        On failure the current client and availability are left untouched.
        Nothing happens once the device has been removed.
        """

        if self._availability.halted:
            _LOGGER.debug("%s: device removed, skipping validation", self._label)
            return
        client = await async_probe_client(
            self._client_factory,
            settings,
            credential_message=self._credential_message,
            label=self._label,
        )
        await self._slot.async_replace(client)
        _LOGGER.info(
            "%s: connection settings updated for %s",
            self._label,
            mask_identifier(settings.serial_number),
        )
        await self._availability.async_set_available()
        self._scheduler.resume()
