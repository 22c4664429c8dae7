"""Сводная информация для дашборда."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from services.records import ClientRecord
from services.reporting import expiring_soon
from services.store import CrmStore
from services.subscription_status import SubscriptionState, classify, is_active
from utils.money import ZERO


@dataclass(frozen=True)
class Dashboard:
    total_clients: int
    active_subscriptions: int
    estimated_revenue: Decimal
    expiring: list[ClientRecord] = field(default_factory=list)
    states: dict[str, int] = field(default_factory=dict)


def count_states(store: CrmStore, now: datetime) -> dict[str, int]:
    """Количество клиентов в каждом состоянии, включая нулевые."""
    counts = Counter(classify(c.subscription, now) for c in store.clients)
    return {state.value: counts.get(state, 0) for state in SubscriptionState}


def estimated_revenue(store: CrmStore) -> Decimal:
    """Сумма цен продуктов по всем клиентам, у которых продукт назначен."""
    total = ZERO
    for client in store.clients:
        product = store.get_product(client.product_id)
        if product is not None:
            total += product.price
    return total


def get_dashboard(store: CrmStore, now: datetime) -> Dashboard:
    """Вернуть счётчики и список истекающих абонементов."""
    states = count_states(store, now)
    active = sum(
        count for state, count in states.items() if is_active(SubscriptionState(state))
    )
    return Dashboard(
        total_clients=len(store.clients),
        active_subscriptions=active,
        estimated_revenue=estimated_revenue(store),
        expiring=expiring_soon(store, now),
        states=states,
    )
