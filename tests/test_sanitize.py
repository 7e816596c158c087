"""Tests for log sanitisation helpers."""

from __future__ import annotations

import pytest

from nefit_easy.backend.sanitize import mask_identifier, redact_settings


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("  ", ""),
        ("1234", "***"),
        ("12345678", "12...78"),
        ("123456789", "123...789"),
    ],
)
def test_mask_identifier(value: str | None, expected: str) -> None:
    """Identifiers keep only a short prefix and suffix."""

    assert mask_identifier(value) == expected


def test_redact_settings_hides_secrets() -> None:
    """Secrets are replaced and serial numbers masked."""

    redacted = redact_settings(
        {
            "serialNumber": "123456789",
            "accessKey": "abcd",
            "password": "",
            "syncInterval": 60,
        }
    )

    assert redacted == {
        "serialNumber": "123...789",
        "accessKey": "***",
        "password": "",
        "syncInterval": 60,
    }
