import os
import signal
import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest
from peewee import SqliteDatabase

# Force tests to use in-memory SQLite by default to avoid touching any real DB.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

# ensure project root is on sys.path when running tests
sys.path.append(str(Path(__file__).resolve().parent))

from database.db import db
from database.init import ALL_MODELS
from services.records import ClientRecord, ProductRecord, SellerRecord, Subscription
from services.store import CrmStore

# TestClient выполняет обработчики в другом потоке: одно соединение на всех.
if getattr(db, "obj", None) is None:
    db.initialize(
        SqliteDatabase(
            ":memory:",
            pragmas={"foreign_keys": 1},
            thread_safe=False,
            check_same_thread=False,
        )
    )

_TEST_TIMEOUT = int(os.environ.get("PYTEST_TIMEOUT", "60"))


@pytest.fixture(autouse=True)
def watchdog():
    """Fail a test if it hangs longer than the timeout."""
    if not hasattr(signal, "SIGALRM"):
        yield
        return

    def handler(signum, frame):  # pragma: no cover - timeout handler
        pytest.fail("Test timeout exceeded", pytrace=False)

    signal.signal(signal.SIGALRM, handler)
    signal.alarm(_TEST_TIMEOUT)
    try:
        yield
    finally:
        signal.alarm(0)


@pytest.fixture()
def in_memory_db():
    test_db = db.obj
    # Safety guard: never run tests against a non in-memory DB.
    if not (isinstance(test_db, SqliteDatabase) and test_db.database == ":memory:"):
        raise RuntimeError("Refusing to run tests on a non in-memory database")

    test_db.connect(reuse_if_open=True)
    test_db.drop_tables(ALL_MODELS, safe=True)
    test_db.create_tables(ALL_MODELS)
    try:
        yield test_db
    finally:
        test_db.drop_tables(ALL_MODELS, safe=True)


@pytest.fixture()
def moment():
    """Фиксированный «сейчас» для расчётов состояния."""
    return datetime(2024, 6, 15, 12, 0, 0)


@pytest.fixture()
def make_client():
    def _make_client(
        client_id=None,
        start=datetime(2024, 1, 1),
        end=datetime(2024, 12, 31),
        product_id=None,
        seller_id=None,
        name="Mario",
        surname="Rossi",
        email="mario@example.com",
        **extra,
    ) -> ClientRecord:
        return ClientRecord(
            id=client_id,
            name=name,
            surname=surname,
            email=email,
            subscription=Subscription(start, end),
            product_id=product_id,
            seller_id=seller_id,
            **extra,
        )

    return _make_client


@pytest.fixture()
def sample_store(make_client):
    """Два продукта, два продавца и клиенты во всех состояниях на 15.06.2024."""
    products = [
        ProductRecord(1, "Basic", Decimal("59.99")),
        ProductRecord(2, "Pro", Decimal("100.00")),
    ]
    sellers = [
        SellerRecord(1, "Luca", Decimal("10")),
        SellerRecord(2, "Anna", Decimal("5")),
    ]
    clients = [
        # активен, продаёт Luca
        make_client(1, product_id=1, seller_id=1, name="Mario", surname="Rossi"),
        # истекает через 3 дня
        make_client(
            2,
            start=datetime(2024, 1, 1),
            end=datetime(2024, 6, 18, 12),
            product_id=2,
            seller_id=1,
            name="Giulia",
            surname="Bianchi",
            email="giulia@example.com",
        ),
        # истекает через 20 дней
        make_client(
            3,
            start=datetime(2024, 1, 1),
            end=datetime(2024, 7, 5, 12),
            product_id=1,
            seller_id=2,
            name="Paolo",
            surname="Verdi",
            email="paolo@example.com",
        ),
        # уже истёк
        make_client(
            4,
            start=datetime(2023, 1, 1),
            end=datetime(2024, 1, 1),
            product_id=2,
            seller_id=2,
            name="Sara",
            surname="Neri",
            email="sara@example.com",
        ),
        # ещё не начался, без продавца
        make_client(
            5,
            start=datetime(2024, 7, 1),
            end=datetime(2025, 7, 1),
            product_id=2,
            name="Elena",
            surname="Gallo",
            email="elena@example.com",
        ),
    ]
    return CrmStore(clients=clients, products=products, sellers=sellers)
