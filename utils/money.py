"""Утилиты для денежных сумм.

Все промежуточные вычисления ведутся в :class:`~decimal.Decimal` без
округления; до двух знаков округляем только при выводе.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

_TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Привести число/строку к ``Decimal``; ``None`` и мусор дают ноль."""
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    try:
        return Decimal(str(value).strip().replace(",", "."))
    except InvalidOperation:
        return ZERO


def format_amount(value: Any) -> str:
    """Сумма с двумя знаками после точки: ``5.999`` → ``"6.00"``."""
    amount = to_decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    return f"{amount:.2f}"


def format_eur(value: Any, symbol: str = "€") -> str:
    """Отформатировать сумму в евро по-итальянски: ``1.234,50 €``."""
    amount = to_decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    formatted = f"{amount:,.2f}"
    # 1,234.50 → 1.234,50
    formatted = formatted.replace(",", "\0").replace(".", ",").replace("\0", ".")
    return f"{formatted} {symbol}"


def format_rate(value: Any) -> str:
    """Процент без лишних нулей: ``10.000`` → ``"10"``, ``2.500`` → ``"2.5"``."""
    rate = to_decimal(value).normalize()
    return f"{rate:f}"
