"""Сводные отчёты по продуктам и продавцам.

Все функции чистые: принимают снимок :class:`CrmStore` и момент ``now``,
ничего не кэшируют и не изменяют входные данные. Выручка продукта
считается как «число активных клиентов × цена» без учёта типа абонемента.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from services.commission import commission_for_client
from services.records import ClientRecord
from services.store import CrmStore
from services.subscription_status import (
    EXPIRING_STATES,
    SubscriptionState,
    classify,
    is_active,
    progress,
)
from utils.money import ZERO

UNASSIGNED_LABEL = "N/D"


@dataclass(frozen=True)
class ProductSummary:
    product_id: int
    name: str
    price: Decimal
    active_clients: int
    total_revenue: Decimal


@dataclass(frozen=True)
class SaleRecord:
    client_id: int
    client_name: str
    product_name: str
    product_price: Decimal
    commission: Decimal


@dataclass(frozen=True)
class SellerSummary:
    seller_id: int
    name: str
    commission_rate: Decimal
    sales: tuple[SaleRecord, ...]
    total_revenue: Decimal
    total_commission: Decimal

    @property
    def sales_count(self) -> int:
        return len(self.sales)


@dataclass(frozen=True)
class GlobalSummary:
    total_revenue: Decimal
    total_commission: Decimal
    sales_count: int
    average_sale: Decimal


@dataclass(frozen=True)
class ClientStatus:
    client: ClientRecord
    state: SubscriptionState
    progress: float
    commission: Decimal
    product_name: str
    seller_name: str


def active_clients(store: CrmStore, now: datetime) -> list[ClientRecord]:
    """Клиенты с неистёкшим абонементом."""
    return [
        c for c in store.clients if is_active(classify(c.subscription, now))
    ]


def product_summaries(store: CrmStore, now: datetime) -> list[ProductSummary]:
    active = active_clients(store, now)
    result = []
    for product in store.products:
        count = sum(1 for c in active if c.product_id == product.id)
        result.append(
            ProductSummary(
                product_id=product.id,
                name=product.name,
                price=product.price,
                active_clients=count,
                total_revenue=product.price * count,
            )
        )
    return result


def _sale_for(client: ClientRecord, store: CrmStore) -> SaleRecord:
    product = store.get_product(client.product_id)
    return SaleRecord(
        client_id=client.id,
        client_name=client.full_name,
        product_name=product.name if product else UNASSIGNED_LABEL,
        product_price=product.price if product else ZERO,
        commission=commission_for_client(client, store),
    )


def seller_summaries(store: CrmStore, now: datetime) -> list[SellerSummary]:
    """Продажи и комиссии по каждому продавцу.

    Комиссия суммируется по клиентам, а не считается от итоговой выручки.
    """
    active = active_clients(store, now)
    result = []
    for seller in store.sellers:
        sales = tuple(
            _sale_for(c, store) for c in active if c.seller_id == seller.id
        )
        result.append(
            SellerSummary(
                seller_id=seller.id,
                name=seller.name,
                commission_rate=seller.commission_rate,
                sales=sales,
                total_revenue=sum((s.product_price for s in sales), ZERO),
                total_commission=sum((s.commission for s in sales), ZERO),
            )
        )
    return result


def global_summary(store: CrmStore, now: datetime) -> GlobalSummary:
    sellers = seller_summaries(store, now)
    total_revenue = sum((s.total_revenue for s in sellers), ZERO)
    total_commission = sum((s.total_commission for s in sellers), ZERO)
    sales_count = sum(s.sales_count for s in sellers)
    average = total_revenue / sales_count if sales_count else ZERO
    return GlobalSummary(
        total_revenue=total_revenue,
        total_commission=total_commission,
        sales_count=sales_count,
        average_sale=average,
    )


def expiring_soon(store: CrmStore, now: datetime) -> list[ClientRecord]:
    """Клиенты в состоянии URGENT/EXPIRING_SOON, ближайшие к окончанию первыми."""
    clients = [
        c for c in store.clients if classify(c.subscription, now) in EXPIRING_STATES
    ]
    return sorted(clients, key=lambda c: c.subscription.end)


def client_status(client: ClientRecord, store: CrmStore, now: datetime) -> ClientStatus:
    product = store.get_product(client.product_id)
    seller = store.get_seller(client.seller_id)
    return ClientStatus(
        client=client,
        state=classify(client.subscription, now),
        progress=progress(client.subscription, now),
        commission=commission_for_client(client, store),
        product_name=product.name if product else UNASSIGNED_LABEL,
        seller_name=seller.name if seller else UNASSIGNED_LABEL,
    )


def client_statuses(store: CrmStore, now: datetime) -> list[ClientStatus]:
    return [client_status(c, store, now) for c in store.clients]
