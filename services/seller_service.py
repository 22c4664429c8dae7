"""Сервисный модуль для управления продавцами."""

import logging

from peewee import ModelSelect

from database.db import db
from database.models import Client, Seller
from services.validators import parse_decimal

logger = logging.getLogger(__name__)


def get_all_sellers() -> ModelSelect:
    return Seller.select().order_by(Seller.name.asc())


def get_seller_by_id(seller_id: int) -> Seller | None:
    return Seller.get_or_none(Seller.id == seller_id)


def get_seller_by_name(name: str) -> Seller | None:
    """Поиск продавца по имени без учёта регистра."""
    needle = (name or "").strip().lower()
    for seller in Seller.select():
        if seller.name.strip().lower() == needle:
            return seller
    return None


def add_seller(name: str, commission_rate) -> Seller:
    """Создать продавца; ставка комиссии в процентах."""
    name = (name or "").strip()
    if not name:
        raise ValueError("Поле 'name' обязательно для продавца")
    seller = Seller.create(name=name, commission_rate=parse_decimal(commission_rate))
    logger.info(
        "🧑‍💼 Создан продавец #%s: %s (%s%%)", seller.id, seller.name, seller.commission_rate
    )
    return seller


def update_seller(seller: Seller, name: str | None = None, commission_rate=None) -> Seller:
    if name is not None and name.strip():
        seller.name = name.strip()
    if commission_rate is not None:
        seller.commission_rate = parse_decimal(commission_rate)
    seller.save()
    logger.info("✏️ Обновлён продавец #%s", seller.id)
    return seller


def delete_seller(seller_id: int) -> bool:
    """Удалить продавца; клиенты остаются, но без продавца."""
    seller = get_seller_by_id(seller_id)
    if seller is None:
        logger.warning("❗ Продавец с id=%s не найден для удаления", seller_id)
        return False
    with db.atomic():
        unassigned = (
            Client.update(seller=None).where(Client.seller == seller_id).execute()
        )
        seller.delete_instance()
    logger.info("🗑 Продавец #%s удалён, клиентов без продавца: %d", seller_id, unassigned)
    return True
