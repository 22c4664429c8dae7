from datetime import datetime
from enum import Enum

from peewee import (
    Model,
    CharField,
    DateField,
    DateTimeField,
    DecimalField,
    ForeignKeyField,
    TextField,
)

from database.db import db


class SubscriptionType(str, Enum):
    MONTHLY = "monthly"
    ANNUAL = "annual"
    TRIAL = "trial"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class BaseModel(Model):
    class Meta:
        database = db


class Product(BaseModel):
    name = CharField(index=True)
    price = DecimalField(max_digits=12, decimal_places=2, default=0)

    def __str__(self) -> str:
        return self.name


class Seller(BaseModel):
    name = CharField(index=True)
    # процент, например 10 → 10 %
    commission_rate = DecimalField(max_digits=7, decimal_places=3, default=0)

    def __str__(self) -> str:
        return self.name


class Client(BaseModel):
    name = CharField(index=True)
    surname = CharField(index=True)
    company_name = CharField(null=True)
    vat_number = CharField(null=True)
    address = CharField(default="")
    email = CharField(index=True)
    iban = CharField(default="")
    other_info = TextField(default="")

    # subscription
    start_date = DateTimeField()
    end_date = DateTimeField()
    subscription_type = CharField(default=SubscriptionType.MONTHLY.value)

    product = ForeignKeyField(
        Product, null=True, backref="clients", on_delete="SET NULL"
    )
    seller = ForeignKeyField(
        Seller, null=True, backref="clients", on_delete="SET NULL"
    )

    created_at = DateTimeField(default=datetime.now)

    def __str__(self) -> str:
        return f"{self.name} {self.surname}"


class Project(BaseModel):
    name = CharField()
    description = TextField(null=True)
    client = ForeignKeyField(Client, backref="projects", on_delete="CASCADE")
    status = CharField(default=ProjectStatus.PLANNING.value)
    start_date = DateField()
    end_date = DateField(null=True)

    def __str__(self) -> str:
        return self.name


class Task(BaseModel):
    project = ForeignKeyField(Project, backref="tasks", on_delete="CASCADE")
    title = CharField()
    status = CharField(default=TaskStatus.TODO.value)
    due_date = DateField(null=True)

    def __str__(self) -> str:
        return self.title
