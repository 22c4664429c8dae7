from datetime import datetime
from decimal import Decimal
from urllib.parse import parse_qs, urlsplit

from services import reminders
from services.business_service import calculate_business
from services.records import ProductRecord


def test_reminder_mailto(make_client):
    client = make_client(1, end=datetime(2024, 7, 5), email="giulia@example.com", name="Giulia")
    product = ProductRecord(1, "Pro", Decimal("100"))

    url = reminders.build_reminder_mailto(client, product)
    parts = urlsplit(url)
    query = parse_qs(parts.query)

    assert parts.scheme == "mailto"
    assert parts.path == "giulia@example.com"
    assert "+" not in parts.query
    assert query["subject"] == [reminders.REMINDER_SUBJECT]
    body = query["body"][0]
    assert body.startswith("Ciao Giulia,")
    assert '"Pro"' in body
    assert "05/07/2024" in body


def test_reminder_without_product(make_client):
    body = reminders.build_reminder_body(make_client(1), None)
    assert reminders.DEFAULT_SERVICE_NAME in body


def test_open_reminder_uses_browser(make_client, monkeypatch):
    opened = []
    monkeypatch.setattr(reminders.webbrowser, "open", opened.append)

    reminders.open_reminder(make_client(1), None)

    assert len(opened) == 1
    assert opened[0].startswith("mailto:mario@example.com?")


def test_calculate_business():
    result = calculate_business("100", 10, "2.5", "30")

    assert result.total_card_cost == Decimal("25.0")
    assert result.total_costs == Decimal("125.0")
    assert result.gross_earnings == Decimal("300")
    assert result.net_total == Decimal("175.0")
    assert result.partner_share == Decimal("87.5")


def test_calculate_business_invalid_values_are_zero():
    result = calculate_business("abc", None, "", "x")

    assert result.net_total == 0
    assert result.partner_share == 0
