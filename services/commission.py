"""Расчёт комиссии продавца."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from services.records import ClientRecord
from services.store import CrmStore
from utils.money import ZERO, to_decimal

_HUNDRED = Decimal("100")


def calculate_commission(price: Any, rate: Any) -> Decimal:
    """Комиссия ``price × rate / 100`` без округления.

    >>> calculate_commission("59.99", 10)
    Decimal('5.999')
    """
    return to_decimal(price) * to_decimal(rate) / _HUNDRED


def commission_for_client(client: ClientRecord, store: CrmStore) -> Decimal:
    """Комиссия по клиенту; без продукта или продавца возвращает ноль."""
    product = store.get_product(client.product_id)
    seller = store.get_seller(client.seller_id)
    if product is None or seller is None:
        return ZERO
    return calculate_commission(product.price, seller.commission_rate)
