"""Валидаторы и нормализаторы входных данных."""

import re
from decimal import Decimal, InvalidOperation

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_name(name: str) -> str:
    """Нормализует имя/фамилию: каждая часть с заглавной буквы.

    Args:
        name: Исходная строка.

    Returns:
        str: Строка вида ``Rossi-Bianchi Mario``.
    """
    parts = re.split(r"\s+", (name or "").strip())

    def norm(word: str) -> str:
        return "-".join(p.capitalize() for p in word.split("-") if p)

    return " ".join(norm(p) for p in parts if p)


def normalize_email(email: str) -> str:
    """Обрезает пробелы, приводит к нижнему регистру и проверяет формат."""
    value = (email or "").strip().lower()
    if not _EMAIL_RE.match(value):
        raise ValueError(f"Некорректный email: {email!r}")
    return value


def normalize_iban(iban: str | None) -> str:
    """Убирает пробелы и приводит IBAN к верхнему регистру."""
    return re.sub(r"\s+", "", iban or "").upper()


def normalize_vat(vat: str | None) -> str | None:
    """Партита IVA без пробелов; пустое значение → ``None``."""
    value = re.sub(r"\s+", "", vat or "").upper()
    return value or None


def parse_decimal(value: str | int | float | Decimal | None) -> Decimal:
    """Разобрать число, допуская запятую как десятичный разделитель.

    Raises:
        ValueError: строка не является числом.
    """
    if isinstance(value, Decimal):
        return value
    if value is None:
        raise ValueError("Пустое числовое значение")
    text = str(value).strip().replace("\u00a0", "").replace(" ", "")
    text = text.replace(",", ".")
    try:
        return Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Некорректное число: {value!r}") from None


def parse_price(value) -> Decimal:
    """Цена продукта: неотрицательное число."""
    price = parse_decimal(value)
    if price < 0:
        raise ValueError("Цена не может быть отрицательной")
    return price
