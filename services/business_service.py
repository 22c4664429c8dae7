"""Калькулятор доходности партнёрской схемы («Analisi Business»)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from utils.money import to_decimal

PARTNER_SHARE = Decimal("0.5")


@dataclass(frozen=True)
class BusinessResult:
    total_card_cost: Decimal
    total_costs: Decimal
    gross_earnings: Decimal
    net_total: Decimal
    partner_share: Decimal


def calculate_business(
    subscription_cost,
    card_quantity,
    cost_per_card,
    earning_per_card,
) -> BusinessResult:
    """Посчитать затраты, выручку и долю партнёра.

    Некорректные значения трактуются как ноль; количество карт
    округляется вниз до целого.
    """
    quantity = int(to_decimal(card_quantity))
    subscription = to_decimal(subscription_cost)
    total_card_cost = quantity * to_decimal(cost_per_card)
    total_costs = subscription + total_card_cost
    gross = quantity * to_decimal(earning_per_card)
    net = gross - total_costs
    return BusinessResult(
        total_card_cost=total_card_cost,
        total_costs=total_costs,
        gross_earnings=gross,
        net_total=net,
        partner_share=net * PARTNER_SHARE,
    )
