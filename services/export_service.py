"""Экспорт клиентов и отчётов в CSV.

Формат: каждое поле в двойных кавычках, кавычки внутри удваиваются,
поля разделяются запятой, строки символом ``\\n``, кодировка UTF-8.
"""

import csv
import io
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Mapping

from services.reporting import (
    UNASSIGNED_LABEL,
    product_summaries,
    seller_summaries,
)
from services.store import CrmStore
from utils.money import format_amount, format_rate
from utils.time_utils import format_date

logger = logging.getLogger(__name__)

MISSING_PRICE_LABEL = "N/A"


class ExportError(Exception):
    """Нечего экспортировать."""


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return format_date(value)
    return str(value)


def to_csv(rows: Iterable[Mapping[str, Any]], headers: list[str] | None = None) -> str:
    """Сериализовать строки-словари в CSV-текст.

    Заголовки берутся из первой строки, если не заданы явно.
    """
    rows = list(rows)
    if not rows:
        raise ExportError("Нет данных для экспорта")
    if headers is None:
        headers = list(rows[0].keys())
    logger.debug("Заголовки CSV: %s", headers)

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_cell(row.get(h)) for h in headers])
    return buf.getvalue().rstrip("\n")


def write_csv(path, rows: Iterable[Mapping[str, Any]], headers: list[str] | None = None) -> int:
    """Записать строки в файл и вернуть их количество."""
    rows = list(rows)
    text = to_csv(rows, headers)
    Path(path).write_text(text, encoding="utf-8")
    logger.info("📤 Экспортировано строк: %d → %s", len(rows), path)
    return len(rows)


# ──────────────────────────── Наборы строк ─────────────────────────────


def client_export_rows(store: CrmStore) -> list[dict[str, Any]]:
    """Клиенты, отсортированные по дате окончания (ближайшие первыми)."""
    rows = []
    for client in sorted(store.clients, key=lambda c: c.subscription.end):
        product = store.get_product(client.product_id)
        seller = store.get_seller(client.seller_id)
        rows.append(
            {
                "Nome": client.name,
                "Cognome": client.surname,
                "Nome Azienda": client.company_name or "",
                "Partita IVA": client.vat_number or "",
                "Email": client.email,
                "Indirizzo": client.address,
                "Prodotto": product.name if product else UNASSIGNED_LABEL,
                "Prezzo Prodotto (€)": (
                    format_amount(product.price) if product else MISSING_PRICE_LABEL
                ),
                "Venditore": seller.name if seller else UNASSIGNED_LABEL,
                "Tipo Abbonamento": client.subscription_type.value,
                "Inizio Abbonamento": client.subscription.start,
                "Fine Abbonamento": client.subscription.end,
                "IBAN": client.iban,
                "Info Aggiuntive": client.other_info,
            }
        )
    return rows


def sales_report_rows(store: CrmStore, now: datetime) -> list[dict[str, Any]]:
    """Все продажи по продавцам с комиссией."""
    return [
        {
            "Venditore": summary.name,
            "Cliente": sale.client_name,
            "Prodotto": sale.product_name,
            "Prezzo Prodotto (€)": format_amount(sale.product_price),
            "Provvigione (€)": format_amount(sale.commission),
        }
        for summary in seller_summaries(store, now)
        for sale in summary.sales
    ]


def product_report_rows(store: CrmStore, now: datetime) -> list[dict[str, Any]]:
    return [
        {
            "Prodotto": s.name,
            "Prezzo (€)": format_amount(s.price),
            "Clienti Attivi": s.active_clients,
            "Guadagno Totale (€)": format_amount(s.total_revenue),
        }
        for s in product_summaries(store, now)
    ]


def seller_report_rows(store: CrmStore, now: datetime) -> list[dict[str, Any]]:
    return [
        {
            "Venditore": s.name,
            "Provvigione (%)": format_rate(s.commission_rate),
            "Totale Vendite": s.sales_count,
            "Guadagno Generato (€)": format_amount(s.total_revenue),
            "Provvigioni Totali (€)": format_amount(s.total_commission),
        }
        for s in seller_summaries(store, now)
    ]
