"""Display helpers for amounts and status values.

Amounts are shown as whole FCFA with space-grouped thousands. Status,
priority and sensor values share one label/colour table; unknown values
fall back to the raw value and a neutral colour.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from terangabuild.config import get_config

_GREEN = "bg-green-100 text-green-800"
_BLUE = "bg-blue-100 text-blue-800"
_YELLOW = "bg-yellow-100 text-yellow-800"
_RED = "bg-red-100 text-red-800"
_GRAY = "bg-gray-100 text-gray-800"

# value -> (label, colour classes)
STATUS_DISPLAY: dict[str, tuple[str, str]] = {
    # Project
    "completed": ("Terminé", _GREEN),
    "in_progress": ("En cours", _BLUE),
    "planning": ("Planification", _YELLOW),
    "on_hold": ("En attente", _RED),
    # Order
    "delivered": ("Livré", _GREEN),
    "shipped": ("Expédié", _BLUE),
    "confirmed": ("Confirmé", _BLUE),
    "preparing": ("En préparation", _YELLOW),
    "pending": ("En attente", _YELLOW),
    "cancelled": ("Annulé", _RED),
    # Sensor
    "normal": ("Normal", _GREEN),
    "warning": ("Attention", _YELLOW),
    "critical": ("Critique", _RED),
    # Priority
    "high": ("Haute", _RED),
    "medium": ("Moyenne", _YELLOW),
    "low": ("Basse", _GREEN),
}


def format_currency(amount: Decimal | int | float | None, label: str | None = None) -> str:
    """Format an amount as whole currency units, e.g. ``45 000 000 FCFA``."""
    locale = get_config().locale
    label = label or locale.currency_label
    value = Decimal(str(amount or 0)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    grouped = f"{abs(int(value)):,}".replace(",", locale.thousands_separator)
    return f"{sign}{grouped} {label}"


def format_date(value: date | None) -> str:
    """Format a date the French way (``15/08/2024``); empty for None."""
    if value is None:
        return ""
    return value.strftime(get_config().locale.date_format)


def _key(status: Enum | str | None) -> str:
    if isinstance(status, Enum):
        return str(status.value)
    return status or ""


def status_label(status: Enum | str | None) -> str:
    key = _key(status)
    return STATUS_DISPLAY.get(key, (key, _GRAY))[0]


def status_color(status: Enum | str | None) -> str:
    return STATUS_DISPLAY.get(_key(status), ("", _GRAY))[1]
