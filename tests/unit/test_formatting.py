"""Unit tests for currency and status display helpers."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from terangabuild.formatting import format_currency, format_date, status_color, status_label
from terangabuild.models import OrderStatus, Priority, ProjectStatus


class TestFormatCurrency:
    @pytest.mark.parametrize(
        "amount,expected",
        [
            (45000000, "45 000 000 FCFA"),
            (Decimal("29250000"), "29 250 000 FCFA"),
            (Decimal("1234.5"), "1 235 FCFA"),
            (999, "999 FCFA"),
            (0, "0 FCFA"),
            (None, "0 FCFA"),
        ],
    )
    def test_whole_amounts_with_grouping(self, amount, expected):
        assert format_currency(amount) == expected

    def test_custom_label(self):
        assert format_currency(1500, label="XOF") == "1 500 XOF"


class TestStatusDisplay:
    def test_project_status_labels(self):
        assert status_label("in_progress") == "En cours"
        assert status_label(ProjectStatus.COMPLETED) == "Terminé"
        assert status_label("on_hold") == "En attente"

    def test_order_and_priority_labels(self):
        assert status_label(OrderStatus.CANCELLED) == "Annulé"
        assert status_label(Priority.HIGH) == "Haute"
        assert status_label("warning") == "Attention"

    def test_colors(self):
        assert status_color("completed") == "bg-green-100 text-green-800"
        assert status_color("planning") == "bg-yellow-100 text-yellow-800"
        assert status_color("critical") == "bg-red-100 text-red-800"

    def test_unknown_value_falls_back(self):
        assert status_label("archived") == "archived"
        assert status_color("archived") == "bg-gray-100 text-gray-800"
        assert status_label(None) == ""


class TestFormatDate:
    def test_day_first(self):
        assert format_date(date(2024, 8, 15)) == "15/08/2024"

    def test_none(self):
        assert format_date(None) == ""
