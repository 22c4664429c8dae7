"""Состояние абонемента клиента и обратный отсчёт.

Состояние не хранится: оно каждый раз вычисляется из дат абонемента и
текущего момента.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from services.records import Subscription
from utils.time_utils import DurationParts, split_duration

URGENT_WINDOW = timedelta(days=7)
EXPIRING_WINDOW = timedelta(days=30)


class SubscriptionState(str, Enum):
    NOT_STARTED = "not_started"
    HEALTHY = "healthy"
    EXPIRING_SOON = "expiring_soon"
    URGENT = "urgent"
    EXPIRED = "expired"


EXPIRING_STATES = frozenset({SubscriptionState.URGENT, SubscriptionState.EXPIRING_SOON})


@dataclass(frozen=True)
class CountdownView:
    state: SubscriptionState
    progress: float
    remaining: DurationParts | None = None
    elapsed: DurationParts | None = None
    until_start: DurationParts | None = None


def classify(subscription: Subscription, now: datetime) -> SubscriptionState:
    """Определить состояние абонемента на момент ``now``.

    Нижняя граница каждого окна включается, верхняя нет: до окончания
    ровно 7 суток → ``EXPIRING_SOON``, ровно 30 суток → ``HEALTHY``.
    """
    if now < subscription.start:
        return SubscriptionState.NOT_STARTED
    if now >= subscription.end:
        return SubscriptionState.EXPIRED

    left = subscription.end - now
    if left < URGENT_WINDOW:
        return SubscriptionState.URGENT
    if left < EXPIRING_WINDOW:
        return SubscriptionState.EXPIRING_SOON
    return SubscriptionState.HEALTHY


def is_active(state: SubscriptionState) -> bool:
    """Активным считается любой абонемент, кроме истёкшего."""
    return state is not SubscriptionState.EXPIRED


def progress(subscription: Subscription, now: datetime) -> float:
    """Доля прошедшего срока в диапазоне ``[0, 1]``."""
    if now < subscription.start:
        return 0.0
    fraction = (now - subscription.start) / subscription.duration
    return min(max(fraction, 0.0), 1.0)


def countdown(subscription: Subscription, now: datetime) -> CountdownView:
    """Данные для живого таймера абонемента."""
    state = classify(subscription, now)
    if state is SubscriptionState.NOT_STARTED:
        return CountdownView(
            state=state,
            progress=0.0,
            until_start=split_duration(now, subscription.start),
        )
    if state is SubscriptionState.EXPIRED:
        # для истёкшего показываем, сколько прошло с окончания
        return CountdownView(
            state=state,
            progress=1.0,
            elapsed=split_duration(subscription.end, now),
        )
    return CountdownView(
        state=state,
        progress=progress(subscription, now),
        remaining=split_duration(now, subscription.end),
        elapsed=split_duration(subscription.start, now),
    )
