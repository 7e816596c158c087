"""Remote client factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import ClientFactory, TransportFactory
from .client import NefitEasyClient

if TYPE_CHECKING:
    from ..config import ConnectionSettings


def create_client_factory(transport_factory: TransportFactory) -> ClientFactory:
    """Return a factory building command clients over ``transport_factory``."""

    def _create(settings: ConnectionSettings) -> NefitEasyClient:
        return NefitEasyClient(transport_factory(settings), settings.serial_number)

    return _create
