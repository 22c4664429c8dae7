"""Сервисный модуль для управления клиентами."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from peewee import ModelSelect

from database.db import db
from database.models import Client, Product, Seller, SubscriptionType
from services.records import ClientRecord
from services.validators import (
    normalize_email,
    normalize_iban,
    normalize_name,
    normalize_vat,
)

logger = logging.getLogger(__name__)

CLIENT_ALLOWED_FIELDS = {
    "name",
    "surname",
    "company_name",
    "vat_number",
    "address",
    "email",
    "iban",
    "other_info",
    "start_date",
    "end_date",
    "subscription_type",
    "product_id",
    "seller_id",
}
CLIENT_REQUIRED_FIELDS = ("name", "surname", "email", "start_date", "end_date")
# поля, которые можно очистить при редактировании, и их пустое значение
CLIENT_CLEARABLE_FIELDS = {
    "company_name": None,
    "vat_number": None,
    "address": "",
    "iban": "",
    "other_info": "",
    "product_id": None,
    "seller_id": None,
}

SORT_EXPIRY_DESC = "expiry_desc"
SORT_EXPIRY_ASC = "expiry_asc"
SORT_NAME_ASC = "name_asc"


def _clean_client_data(data: dict[str, object]) -> dict[str, object]:
    """Отфильтровать допустимые поля и нормализовать значения."""
    clean: dict[str, object] = {}
    for key, value in data.items():
        if key == "product" and value is not None:
            clean["product_id"] = getattr(value, "id", value)
        elif key == "seller" and value is not None:
            clean["seller_id"] = getattr(value, "id", value)
        elif key in CLIENT_ALLOWED_FIELDS and value not in ("", None):
            clean[key] = value

    for key in ("name", "surname"):
        if key in clean:
            clean[key] = normalize_name(str(clean[key]))
    if "email" in clean:
        clean["email"] = normalize_email(str(clean["email"]))
    if "iban" in clean:
        clean["iban"] = normalize_iban(str(clean["iban"]))
    if "vat_number" in clean:
        clean["vat_number"] = normalize_vat(str(clean["vat_number"]))
    if "subscription_type" in clean:
        clean["subscription_type"] = SubscriptionType(clean["subscription_type"]).value
    return clean


def _check_period(start: datetime, end: datetime) -> None:
    if start >= end:
        logger.warning("❌ Некорректный период абонемента: %s → %s", start, end)
        raise ValueError("Дата начала абонемента должна быть раньше даты окончания")


def _check_references(data: dict[str, object]) -> None:
    product_id = data.get("product_id")
    if product_id is not None and Product.get_or_none(Product.id == product_id) is None:
        raise ValueError(f"Продукт #{product_id} не найден")
    seller_id = data.get("seller_id")
    if seller_id is not None and Seller.get_or_none(Seller.id == seller_id) is None:
        raise ValueError(f"Продавец #{seller_id} не найден")


# ──────────────────────────── Получение ─────────────────────────────


def get_all_clients() -> ModelSelect:
    """Вернуть выборку всех клиентов."""
    return Client.select()


def get_client_by_id(client_id: int) -> Client | None:
    """Получить клиента по его идентификатору."""
    return Client.get_or_none(Client.id == client_id)


# ──────────────────────────── Добавление ─────────────────────────────


def add_client(**kwargs) -> Client:
    """Создать и вернуть нового клиента."""
    clean_data = _clean_client_data(kwargs)

    missing = [f for f in CLIENT_REQUIRED_FIELDS if f not in clean_data]
    if missing:
        logger.warning("❌ Попытка создать клиента без полей: %s", missing)
        raise ValueError(f"Обязательные поля клиента: {', '.join(missing)}")

    _check_period(clean_data["start_date"], clean_data["end_date"])
    _check_references(clean_data)

    with db.atomic():
        client = Client.create(**clean_data)

    logger.info("🆕 Создан клиент #%s: %s", client.id, client)
    return client


def add_clients(records: Iterable[ClientRecord]) -> list[Client]:
    """Сохранить пачку записей (например, после импорта CSV) одной транзакцией."""
    created = []
    with db.atomic():
        for record in records:
            created.append(
                add_client(
                    name=record.name,
                    surname=record.surname,
                    email=record.email,
                    company_name=record.company_name,
                    vat_number=record.vat_number,
                    address=record.address,
                    iban=record.iban,
                    other_info=record.other_info,
                    start_date=record.subscription.start,
                    end_date=record.subscription.end,
                    subscription_type=record.subscription_type,
                    product_id=record.product_id,
                    seller_id=record.seller_id,
                )
            )
    logger.info("📥 Импортировано клиентов: %d", len(created))
    return created


# ──────────────────────────── Обновление ─────────────────────────────


def update_client(client: Client, **kwargs) -> Client:
    """Обновить данные клиента.

    Пустое значение (``""`` или ``None``) у необязательного поля очищает его;
    ``product_id=None`` / ``seller_id=None`` снимают привязку.
    """
    updates = _clean_client_data(kwargs)
    for key, blank in CLIENT_CLEARABLE_FIELDS.items():
        if key in kwargs and kwargs[key] in ("", None):
            updates[key] = blank

    if not updates:
        return client

    start = updates.get("start_date", client.start_date)
    end = updates.get("end_date", client.end_date)
    _check_period(start, end)
    _check_references(updates)

    logger.info("✏️ Обновление клиента #%s: %s", client.id, sorted(updates))

    with db.atomic():
        for k, v in updates.items():
            setattr(client, k, v)
        client.save()
    return client


# ──────────────────────────── Удаление ─────────────────────────────


def delete_client(client_id: int) -> bool:
    """Удаляет клиента вместе с его проектами."""
    client = Client.get_or_none(Client.id == client_id)
    if client is None:
        logger.warning("❗ Клиент с id=%s не найден для удаления", client_id)
        return False
    with db.atomic():
        client.delete_instance(recursive=True)
    logger.info("🗑 Клиент #%s удалён", client_id)
    return True


# ──────────────────────────── Фильтры ─────────────────────────────


def filter_clients(
    clients: Iterable[ClientRecord],
    search_text: str = "",
    product_id: int | None = None,
    seller_id: int | None = None,
    subscription_type: SubscriptionType | str | None = None,
    sort: str = SORT_EXPIRY_DESC,
) -> list[ClientRecord]:
    """Отфильтровать и отсортировать клиентов для списка.

    Поиск без учёта регистра по имени, фамилии, компании и email.
    """
    needle = (search_text or "").strip().lower()
    sub_type = SubscriptionType(subscription_type) if subscription_type else None

    def matches(c: ClientRecord) -> bool:
        if needle:
            haystack = [c.name, c.surname, c.company_name or "", c.email]
            if not any(needle in value.lower() for value in haystack):
                return False
        if product_id is not None and c.product_id != product_id:
            return False
        if seller_id is not None and c.seller_id != seller_id:
            return False
        if sub_type is not None and c.subscription_type != sub_type:
            return False
        return True

    result = [c for c in clients if matches(c)]

    if sort == SORT_EXPIRY_ASC:
        result.sort(key=lambda c: c.subscription.end)
    elif sort == SORT_NAME_ASC:
        result.sort(key=lambda c: c.full_name.lower())
    else:
        result.sort(key=lambda c: c.subscription.end, reverse=True)
    return result
