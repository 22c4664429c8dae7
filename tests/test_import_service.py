from datetime import datetime
from decimal import Decimal

import pytest

from database.models import Client, Product, Seller, SubscriptionType
from services.import_service import (
    CsvHeaderError,
    ImportRowError,
    import_clients_csv,
    parse_clients_csv,
    parse_date,
    parse_subscription_type,
)
from services.records import ProductRecord, SellerRecord

PRODUCTS = [ProductRecord(1, "Basic", Decimal("59.99"))]
SELLERS = [SellerRecord(7, "Luca", Decimal("10"))]

HEADER = (
    "Nome,Cognome,Email,Prodotto,Inizio Abbonamento,Fine Abbonamento,"
    "Venditore,Nome Azienda,Tipo Abbonamento"
)


def test_parse_valid_row_with_quoted_comma():
    text = (
        HEADER
        + "\n"
        + 'Mario,Rossi,Mario@Example.com,basic,01/01/2024,31/12/2024,'
        + 'luca,"Rossi, Bianchi & C.",annuale'
    )

    result = parse_clients_csv(text, PRODUCTS, SELLERS)

    assert result.ok
    (client,) = result.clients
    assert client.id is None
    assert client.email == "mario@example.com"
    assert client.company_name == "Rossi, Bianchi & C."
    assert client.product_id == 1
    assert client.seller_id == 7
    assert client.subscription_type is SubscriptionType.ANNUAL
    assert client.subscription.start == datetime(2024, 1, 1)
    assert client.subscription.end == datetime(2024, 12, 31)


def test_row_errors_are_collected():
    rows = [
        "Anna,Neri,,Basic,01/01/2024,31/12/2024,,,",
        "Luigi,Verdi,luigi@example.com,Gold,01/01/2024,31/12/2024,,,",
        "Sara,Bruni,not-an-email,Basic,01/01/2024,31/12/2024,,,",
        "Elena,Gallo,elena@example.com,Basic,31-12-2024,01/01/2025,,,",
        "Paolo,Russo,paolo@example.com,Basic,2024-06-01,2024-05-01,,,",
        "Ok,Client,ok@example.com,Basic,2024-01-01,2024-02-01,Nessuno,,",
    ]
    text = HEADER + "\n" + "\n".join(rows)

    result = parse_clients_csv(text, PRODUCTS, SELLERS)

    assert [e.row for e in result.errors] == [2, 3, 4, 5, 6]
    assert result.errors[0].reason == "Dati obbligatori mancanti."
    assert result.errors[1].reason == 'Prodotto "Gold" non trovato.'
    assert result.errors[2].reason == "Email non valida."
    assert "Date di abbonamento non valide" in result.errors[3].reason
    assert str(result.errors[0]) == "Riga 2: Dati obbligatori mancanti."
    # неизвестный продавец не ошибка: клиент без продавца
    (client,) = result.clients
    assert client.seller_id is None


def test_missing_headers():
    with pytest.raises(CsvHeaderError) as exc:
        parse_clients_csv("nome,cognome\nMario,Rossi", PRODUCTS, SELLERS)

    assert exc.value.missing == [
        "email",
        "prodotto",
        "inizio abbonamento",
        "fine abbonamento",
    ]


def test_empty_file_is_header_error():
    with pytest.raises(CsvHeaderError):
        parse_clients_csv("", PRODUCTS, SELLERS)


def test_bom_and_blank_lines_ignored():
    text = "\ufeff" + HEADER + "\n\nMario,Rossi,m@example.com,Basic,01/01/2024,31/12/2024,,,\n"

    result = parse_clients_csv(text, PRODUCTS, SELLERS)

    assert result.ok
    assert len(result.clients) == 1


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Mensile", SubscriptionType.MONTHLY),
        ("annual", SubscriptionType.ANNUAL),
        ("PROVA", SubscriptionType.TRIAL),
        ("", SubscriptionType.MONTHLY),
        ("sconosciuto", SubscriptionType.MONTHLY),
    ],
)
def test_parse_subscription_type(value, expected):
    assert parse_subscription_type(value) is expected


def test_parse_date_formats():
    assert parse_date("05/02/2024") == datetime(2024, 2, 5)
    assert parse_date("2024-02-05") == datetime(2024, 2, 5)
    assert parse_date("5 febbraio") is None


def test_import_clients_csv_saves_valid_rows(in_memory_db):
    Product.create(name="Basic", price=Decimal("59.99"))
    Seller.create(name="Luca", commission_rate=Decimal("10"))
    text = (
        HEADER
        + "\nmario,rossi,mario@example.com,Basic,01/01/2024,31/12/2024,Luca,,"
        + "\nAnna,Neri,anna@example.com,Missing,01/01/2024,31/12/2024,,,"
    )

    imported, errors = import_clients_csv(text)

    assert imported == 1
    assert errors == [ImportRowError(3, 'Prodotto "Missing" non trovato.')]
    client = Client.get()
    assert client.name == "Mario"
    assert client.surname == "Rossi"
    assert client.seller.name == "Luca"


def test_rejected_rows_logged_as_warning(caplog):
    text = HEADER + "\nAnna,Neri,,Basic,01/01/2024,31/12/2024,,,"

    with caplog.at_level("INFO", logger="services.import_service"):
        result = parse_clients_csv(text, PRODUCTS, SELLERS)

    assert not result.ok
    (record,) = [r for r in caplog.records if "Разбор CSV" in r.getMessage()]
    assert record.levelname == "WARNING"
