from decimal import Decimal

import pytest

from services.records import ProductRecord, SellerRecord
from services.store import CrmStore


def test_add_assigns_ids(make_client):
    store = CrmStore()
    product = store.add_product(ProductRecord(None, "Basic", Decimal("10")))
    client = store.add_client(make_client(product_id=product.id))

    assert product.id is not None
    assert client.id is not None
    assert store.get_client(client.id) == client


def test_duplicate_id_rejected(make_client):
    store = CrmStore(clients=[make_client(1)])
    with pytest.raises(ValueError):
        store.add_client(make_client(1))


def test_collections_are_read_only_snapshots(sample_store):
    clients = sample_store.clients
    assert isinstance(clients, tuple)
    with pytest.raises(AttributeError):
        clients[0].name = "Changed"


def test_replace_unknown_raises(make_client):
    store = CrmStore()
    with pytest.raises(KeyError):
        store.replace_client(make_client(42))


def test_remove_product_unassigns_clients(sample_store):
    sample_store.remove_product(2)

    assert sample_store.get_product(2) is None
    assert all(c.product_id != 2 for c in sample_store.clients)
    assert sample_store.get_client(2).product_id is None
    assert sample_store.get_client(1).product_id == 1


def test_remove_seller_unassigns_clients(sample_store):
    sample_store.remove_seller(1)

    assert sample_store.get_client(1).seller_id is None
    assert sample_store.get_client(3).seller_id == 2


def test_get_with_none_or_dangling_id(sample_store):
    assert sample_store.get_product(None) is None
    assert sample_store.get_seller(999) is None


def test_load_store_from_database(in_memory_db):
    from datetime import datetime

    from database.models import Client, Product, Seller
    from services.store import load_store

    product = Product.create(name="Basic", price=Decimal("59.99"))
    seller = Seller.create(name="Luca", commission_rate=Decimal("10"))
    Client.create(
        name="Mario",
        surname="Rossi",
        email="mario@example.com",
        start_date=datetime(2024, 1, 1),
        end_date=datetime(2024, 12, 31),
        product=product,
        seller=seller,
    )

    store = load_store()

    assert len(store.clients) == 1
    record = store.clients[0]
    assert record.product_id == product.id
    assert store.get_seller(record.seller_id).commission_rate == Decimal("10")
    assert store.get_product(record.product_id).price == Decimal("59.99")
