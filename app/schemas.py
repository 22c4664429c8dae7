from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator

from database.models import ProjectStatus, SubscriptionType, TaskStatus
from services.subscription_status import SubscriptionState


def _naive(value: datetime | None) -> datetime | None:
    """Даты в базе хранятся без часового пояса (локальное время)."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


# ──────────────────────────── Продукты и продавцы ─────────────────────────────


class ProductBase(BaseModel):
    name: str | None = None
    price: Decimal | None = None


class ProductCreate(ProductBase):
    name: str
    price: Decimal


class ProductRead(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


class SellerBase(BaseModel):
    name: str | None = None
    commission_rate: Decimal | None = None


class SellerCreate(SellerBase):
    name: str
    commission_rate: Decimal


class SellerRead(SellerBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


# ──────────────────────────── Клиенты ─────────────────────────────


class ClientBase(BaseModel):
    name: str | None = None
    surname: str | None = None
    company_name: str | None = None
    vat_number: str | None = None
    address: str | None = None
    email: str | None = None
    iban: str | None = None
    other_info: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    subscription_type: SubscriptionType | None = None
    product_id: int | None = None
    seller_id: int | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _strip_tz(cls, value):
        return _naive(value)


class ClientCreate(ClientBase):
    name: str
    surname: str
    email: str
    start_date: datetime
    end_date: datetime


class ClientUpdate(ClientBase):
    pass


class ClientRead(ClientBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


class DurationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    days: int
    hours: int
    minutes: int
    seconds: int


class ClientStatusRead(BaseModel):
    client_id: int
    full_name: str
    state: SubscriptionState
    progress: float
    commission: Decimal
    product_name: str
    seller_name: str
    remaining: DurationRead | None = None
    elapsed: DurationRead | None = None
    until_start: DurationRead | None = None


# ──────────────────────────── Отчёты ─────────────────────────────


class ProductSummaryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: int
    name: str
    price: Decimal
    active_clients: int
    total_revenue: Decimal


class SaleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    client_id: int
    client_name: str
    product_name: str
    product_price: Decimal
    commission: Decimal


class SellerSummaryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    seller_id: int
    name: str
    commission_rate: Decimal
    sales_count: int
    sales: list[SaleRead]
    total_revenue: Decimal
    total_commission: Decimal


class GlobalSummaryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_revenue: Decimal
    total_commission: Decimal
    sales_count: int
    average_sale: Decimal


class ExpiringClientRead(BaseModel):
    client_id: int
    full_name: str
    email: str
    end_date: datetime
    state: SubscriptionState
    reminder_url: str


class DashboardRead(BaseModel):
    total_clients: int
    active_subscriptions: int
    estimated_revenue: Decimal
    states: dict[str, int]
    expiring: list[ExpiringClientRead]


class BusinessInput(BaseModel):
    subscription_cost: Decimal = Decimal("0")
    card_quantity: int = 0
    cost_per_card: Decimal = Decimal("0")
    earning_per_card: Decimal = Decimal("0")


class BusinessRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_card_cost: Decimal
    total_costs: Decimal
    gross_earnings: Decimal
    net_total: Decimal
    partner_share: Decimal


class ImportRowErrorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    row: int
    reason: str


class ImportResultRead(BaseModel):
    imported: int
    errors: list[ImportRowErrorRead]


# ──────────────────────────── Проекты ─────────────────────────────


class ProjectBase(BaseModel):
    name: str | None = None
    description: str | None = None
    client_id: int | None = None
    status: ProjectStatus | None = None
    start_date: date | None = None
    end_date: date | None = None


class ProjectCreate(ProjectBase):
    name: str
    client_id: int


class ProjectUpdate(ProjectBase):
    pass


class ProjectRead(ProjectBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    progress: int = 0


class TaskBase(BaseModel):
    title: str | None = None
    status: TaskStatus | None = None
    due_date: date | None = None


class TaskCreate(TaskBase):
    title: str


class TaskUpdate(TaskBase):
    pass


class TaskRead(TaskBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
