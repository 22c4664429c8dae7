"""Письма-напоминания об окончании абонемента."""

import logging
import urllib.parse
import webbrowser

from services.records import ClientRecord, ProductRecord
from utils.time_utils import format_date

logger = logging.getLogger(__name__)

REMINDER_SUBJECT = "Promemoria Scadenza Abbonamento"
DEFAULT_SERVICE_NAME = "il nostro servizio"

REMINDER_TEMPLATE = """Ciao {name},

Ti scriviamo per ricordarti che il tuo abbonamento per "{product}" è in scadenza il {end_date}.

Se desideri rinnovare o discutere le opzioni disponibili, non esitare a contattarci.

Grazie,
Il Tuo Team"""


def build_reminder_body(client: ClientRecord, product: ProductRecord | None) -> str:
    return REMINDER_TEMPLATE.format(
        name=client.name,
        product=product.name if product else DEFAULT_SERVICE_NAME,
        end_date=format_date(client.subscription.end),
    )


def build_reminder_mailto(client: ClientRecord, product: ProductRecord | None) -> str:
    """Ссылка ``mailto:`` с темой и текстом напоминания."""
    query = urllib.parse.urlencode(
        {
            "subject": REMINDER_SUBJECT,
            "body": build_reminder_body(client, product),
        },
        quote_via=urllib.parse.quote,
    )
    return f"mailto:{client.email}?{query}"


def open_reminder(client: ClientRecord, product: ProductRecord | None) -> None:
    """Открывает почтовый клиент с готовым напоминанием."""
    url = build_reminder_mailto(client, product)
    logger.info("✉️ Напоминание клиенту #%s (%s)", client.id, client.email)
    webbrowser.open(url)
