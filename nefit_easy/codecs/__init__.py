"""Payload codecs for the Nefit Easy backend."""

from .models import PressureSnapshot, StatusSnapshot, ToggleSnapshot, WriteResult
from .nefit_codec import (
    decode_pressure,
    decode_status,
    decode_toggle,
    decode_write_result,
    encode_toggle,
    encode_value,
)

__all__ = [
    "PressureSnapshot",
    "StatusSnapshot",
    "ToggleSnapshot",
    "WriteResult",
    "decode_pressure",
    "decode_status",
    "decode_toggle",
    "decode_write_result",
    "encode_toggle",
    "encode_value",
]
