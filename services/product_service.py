"""Сервисный модуль для управления продуктами."""

import logging

from peewee import ModelSelect

from database.db import db
from database.models import Client, Product
from services.validators import parse_price

logger = logging.getLogger(__name__)


def get_all_products() -> ModelSelect:
    return Product.select().order_by(Product.name.asc())


def get_product_by_id(product_id: int) -> Product | None:
    return Product.get_or_none(Product.id == product_id)


def get_product_by_name(name: str) -> Product | None:
    """Поиск продукта по названию без учёта регистра."""
    needle = (name or "").strip().lower()
    for product in Product.select():
        if product.name.strip().lower() == needle:
            return product
    return None


def add_product(name: str, price) -> Product:
    """Создать продукт."""
    name = (name or "").strip()
    if not name:
        raise ValueError("Поле 'name' обязательно для продукта")
    product = Product.create(name=name, price=parse_price(price))
    logger.info("📦 Создан продукт #%s: %s (%s)", product.id, product.name, product.price)
    return product


def update_product(product: Product, name: str | None = None, price=None) -> Product:
    if name is not None and name.strip():
        product.name = name.strip()
    if price is not None:
        product.price = parse_price(price)
    product.save()
    logger.info("✏️ Обновлён продукт #%s", product.id)
    return product


def delete_product(product_id: int) -> bool:
    """Удалить продукт; клиенты остаются, но без продукта."""
    product = get_product_by_id(product_id)
    if product is None:
        logger.warning("❗ Продукт с id=%s не найден для удаления", product_id)
        return False
    with db.atomic():
        unassigned = (
            Client.update(product=None).where(Client.product == product_id).execute()
        )
        product.delete_instance()
    logger.info("🗑 Продукт #%s удалён, клиентов без продукта: %d", product_id, unassigned)
    return True
