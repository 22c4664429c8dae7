"""Импорт клиентов из CSV.

Разбор ведётся модулем :mod:`csv`, поэтому поля в кавычках с запятыми
внутри читаются корректно. Ошибки строк не прерывают импорт: они
собираются в список ``(номер строки, причина)``.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from database.models import SubscriptionType
from services.client_service import add_clients
from services.records import ClientRecord, ProductRecord, SellerRecord, Subscription
from services.store import load_store
from services.validators import normalize_email, normalize_vat

logger = logging.getLogger(__name__)

REQUIRED_HEADERS = (
    "nome",
    "cognome",
    "email",
    "prodotto",
    "inizio abbonamento",
    "fine abbonamento",
)

SUBSCRIPTION_TYPE_ALIASES = {
    "mensile": SubscriptionType.MONTHLY,
    "monthly": SubscriptionType.MONTHLY,
    "annuale": SubscriptionType.ANNUAL,
    "annual": SubscriptionType.ANNUAL,
    "prova": SubscriptionType.TRIAL,
    "trial": SubscriptionType.TRIAL,
}

DATE_FORMATS = ("%d/%m/%Y", "%Y-%m-%d")


class CsvImportError(Exception):
    """Файл нельзя импортировать целиком."""


class CsvHeaderError(CsvImportError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            f"Intestazioni CSV mancanti: {', '.join(missing)}. "
            f"Le intestazioni richieste sono: {', '.join(REQUIRED_HEADERS)}."
        )


@dataclass(frozen=True)
class ImportRowError:
    row: int
    reason: str

    def __str__(self) -> str:
        return f"Riga {self.row}: {self.reason}"


@dataclass
class ImportResult:
    clients: list[ClientRecord] = field(default_factory=list)
    errors: list[ImportRowError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_date(value: str) -> datetime | None:
    """Разобрать дату ``DD/MM/YYYY`` или ``YYYY-MM-DD``."""
    text = (value or "").strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_subscription_type(value: str | None) -> SubscriptionType:
    """Тип абонемента по-итальянски или по-английски; по умолчанию месячный."""
    key = (value or "").strip().lower()
    return SUBSCRIPTION_TYPE_ALIASES.get(key, SubscriptionType.MONTHLY)


def _by_name(items: Iterable, name: str):
    needle = name.strip().lower()
    for item in items:
        if item.name.strip().lower() == needle:
            return item
    return None


def parse_clients_csv(
    text: str,
    products: Iterable[ProductRecord],
    sellers: Iterable[SellerRecord],
) -> ImportResult:
    """Разобрать CSV-текст в записи клиентов.

    Raises:
        CsvHeaderError: нет обязательных колонок.
    """
    products = list(products)
    sellers = list(sellers)
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))

    try:
        raw_headers = next(reader)
    except StopIteration:
        raise CsvHeaderError(list(REQUIRED_HEADERS)) from None

    headers = [h.strip().lower() for h in raw_headers]
    missing = [h for h in REQUIRED_HEADERS if h not in headers]
    if missing:
        raise CsvHeaderError(missing)
    index = {h: i for i, h in enumerate(headers)}

    result = ImportResult()
    for row in reader:
        row_no = reader.line_num
        if not any(cell.strip() for cell in row):
            continue

        def get(header: str) -> str:
            i = index.get(header)
            if i is None or i >= len(row):
                return ""
            return row[i].strip()

        required = {h: get(h) for h in REQUIRED_HEADERS}
        if not all(required.values()):
            result.errors.append(ImportRowError(row_no, "Dati obbligatori mancanti."))
            continue

        product = _by_name(products, required["prodotto"])
        if product is None:
            result.errors.append(
                ImportRowError(row_no, f'Prodotto "{required["prodotto"]}" non trovato.')
            )
            continue

        try:
            email = normalize_email(required["email"])
        except ValueError:
            result.errors.append(ImportRowError(row_no, "Email non valida."))
            continue

        seller_name = get("venditore")
        seller = _by_name(sellers, seller_name) if seller_name else None

        start = parse_date(required["inizio abbonamento"])
        end = parse_date(required["fine abbonamento"])
        if start is None or end is None or start >= end:
            result.errors.append(
                ImportRowError(
                    row_no,
                    "Date di abbonamento non valide o in formato non supportato "
                    "(usare GG/MM/AAAA o AAAA-MM-GG).",
                )
            )
            continue

        result.clients.append(
            ClientRecord(
                id=None,
                name=required["nome"],
                surname=required["cognome"],
                email=email,
                subscription=Subscription(start, end),
                subscription_type=parse_subscription_type(get("tipo abbonamento")),
                company_name=get("nome azienda") or None,
                vat_number=normalize_vat(get("partita iva")),
                address=get("indirizzo"),
                iban=get("iban"),
                other_info=get("info aggiuntive"),
                product_id=product.id,
                seller_id=seller.id if seller else None,
            )
        )

    log = logger.info if result.ok else logger.warning
    log("📄 Разбор CSV: принято %d, ошибок %d", len(result.clients), len(result.errors))
    return result


def import_clients_csv(text: str) -> tuple[int, list[ImportRowError]]:
    """Разобрать CSV по продуктам/продавцам из базы и сохранить клиентов."""
    store = load_store()
    result = parse_clients_csv(text, store.products, store.sellers)
    created = add_clients(result.clients) if result.clients else []
    return len(created), result.errors
