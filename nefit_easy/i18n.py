"""User-facing messages for the Nefit Easy integration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

MSG_CONNECTING = "device.connecting"
MSG_TOO_OLD = "device.too_old"
MSG_FORCE_REPAIR = "device.force_repair"
MSG_SYNC_ERROR = "device.sync_error"
MSG_CREDENTIALS = "settings.credentials"
MSG_DUPLICATE = "pair.duplicate"

DEFAULT_LANGUAGE = "en"

TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        MSG_CONNECTING: "Connecting to the Nefit backend...",
        MSG_TOO_OLD: "This device was added with an old version of the app, please remove and re-add it",
        MSG_FORCE_REPAIR: "Please remove and re-add this device",
        MSG_SYNC_ERROR: "Error syncing with the Nefit backend",
        MSG_CREDENTIALS: "Invalid credentials",
        MSG_DUPLICATE: "This device has already been added",
    },
    "nl": {
        MSG_CONNECTING: "Verbinden met de Nefit backend...",
        MSG_TOO_OLD: "Dit apparaat is toegevoegd met een oude versie van de app, verwijder het en voeg het opnieuw toe",
        MSG_FORCE_REPAIR: "Verwijder dit apparaat en voeg het opnieuw toe",
        MSG_SYNC_ERROR: "Fout bij synchroniseren met de Nefit backend",
        MSG_CREDENTIALS: "Ongeldige inloggegevens",
        MSG_DUPLICATE: "Dit apparaat is al toegevoegd",
    },
    "de": {
        MSG_CONNECTING: "Verbindung zum Nefit-Backend wird hergestellt...",
        MSG_TOO_OLD: "Dieses Gerät wurde mit einer alten App-Version hinzugefügt, bitte entfernen und neu hinzufügen",
        MSG_FORCE_REPAIR: "Bitte entfernen Sie dieses Gerät und fügen Sie es erneut hinzu",
        MSG_SYNC_ERROR: "Fehler bei der Synchronisation mit dem Nefit-Backend",
        MSG_CREDENTIALS: "Ungültige Zugangsdaten",
        MSG_DUPLICATE: "Dieses Gerät wurde bereits hinzugefügt",
    },
}


def get_messages(language: str | None) -> dict[str, str]:
    """Return the message table for ``language``, falling back to English."""

    base = dict(TRANSLATIONS[DEFAULT_LANGUAGE])
    if language:
        base.update(TRANSLATIONS.get(language.split("-")[0].lower(), {}))
    return base


def format_message(
    messages: Mapping[str, str] | None,
    key: str,
    **placeholders: Any,
) -> str:
    """Return the formatted message for ``key``, or ``key`` when unknown."""

    template: str | None = None
    if isinstance(messages, Mapping):
        template = messages.get(key)
    if template is None:
        template = TRANSLATIONS[DEFAULT_LANGUAGE].get(key)
    if not template:
        return key
    try:
        return template.format(**placeholders)
    except (KeyError, ValueError):
        return template


__all__ = [
    "MSG_CONNECTING",
    "MSG_CREDENTIALS",
    "MSG_DUPLICATE",
    "MSG_FORCE_REPAIR",
    "MSG_SYNC_ERROR",
    "MSG_TOO_OLD",
    "format_message",
    "get_messages",
]
