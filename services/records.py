"""Неизменяемые записи предметной области для расчётного ядра.

Записи не зависят от базы данных: их строят из моделей peewee через
``from_model`` или напрямую (импорт CSV, тесты). ``id=None`` означает
запись, ещё не добавленную в хранилище.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from database.models import Client, Product, Seller, SubscriptionType
from utils.money import to_decimal


@dataclass(frozen=True)
class Subscription:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(
                "Дата начала абонемента должна быть раньше даты окончания"
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class ProductRecord:
    id: int | None
    name: str
    price: Decimal = Decimal("0")

    @classmethod
    def from_model(cls, product: Product) -> "ProductRecord":
        return cls(id=product.id, name=product.name, price=to_decimal(product.price))


@dataclass(frozen=True)
class SellerRecord:
    id: int | None
    name: str
    commission_rate: Decimal = Decimal("0")

    @classmethod
    def from_model(cls, seller: Seller) -> "SellerRecord":
        return cls(
            id=seller.id,
            name=seller.name,
            commission_rate=to_decimal(seller.commission_rate),
        )


@dataclass(frozen=True)
class ClientRecord:
    id: int | None
    name: str
    surname: str
    email: str
    subscription: Subscription
    subscription_type: SubscriptionType = SubscriptionType.MONTHLY
    company_name: str | None = None
    vat_number: str | None = None
    address: str = ""
    iban: str = ""
    other_info: str = ""
    product_id: int | None = None
    seller_id: int | None = None

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}".strip()

    @classmethod
    def from_model(cls, client: Client) -> "ClientRecord":
        return cls(
            id=client.id,
            name=client.name,
            surname=client.surname,
            email=client.email,
            subscription=Subscription(client.start_date, client.end_date),
            subscription_type=SubscriptionType(client.subscription_type),
            company_name=client.company_name,
            vat_number=client.vat_number,
            address=client.address or "",
            iban=client.iban or "",
            other_info=client.other_info or "",
            product_id=client.product_id,
            seller_id=client.seller_id,
        )
