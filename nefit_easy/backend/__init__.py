"""Backend package exports."""
from __future__ import annotations

from .base import (
    ClientFactory,
    NefitTransportProto,
    RemoteClientError,
    RemoteClientProto,
    ResponseDecodeError,
    TransportFactory,
)
from .client import NefitEasyClient
from .factory import create_client_factory

__all__ = [
    "ClientFactory",
    "NefitEasyClient",
    "NefitTransportProto",
    "RemoteClientError",
    "RemoteClientProto",
    "ResponseDecodeError",
    "TransportFactory",
    "create_client_factory",
]
