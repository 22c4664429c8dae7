"""Явное хранилище клиентов, продуктов и продавцов в памяти.

Коллекции меняются только через методы ``add_*``, ``replace_*`` и
``remove_*``; наружу отдаются кортежи, чтобы расчётные функции не могли
изменить состояние.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import replace
from typing import Iterable

from database.models import Client, Product, Seller
from services.records import ClientRecord, ProductRecord, SellerRecord

logger = logging.getLogger(__name__)


class CrmStore:
    """Снимок данных CRM, передаваемый в функции отчётов."""

    def __init__(
        self,
        clients: Iterable[ClientRecord] = (),
        products: Iterable[ProductRecord] = (),
        sellers: Iterable[SellerRecord] = (),
    ) -> None:
        self._clients: dict[int, ClientRecord] = {}
        self._products: dict[int, ProductRecord] = {}
        self._sellers: dict[int, SellerRecord] = {}
        self._ids = itertools.count(1)
        for product in products:
            self.add_product(product)
        for seller in sellers:
            self.add_seller(seller)
        for client in clients:
            self.add_client(client)

    # ──────────────────────────── Чтение ─────────────────────────────

    @property
    def clients(self) -> tuple[ClientRecord, ...]:
        return tuple(self._clients.values())

    @property
    def products(self) -> tuple[ProductRecord, ...]:
        return tuple(self._products.values())

    @property
    def sellers(self) -> tuple[SellerRecord, ...]:
        return tuple(self._sellers.values())

    def get_client(self, client_id: int | None) -> ClientRecord | None:
        return self._clients.get(client_id)

    def get_product(self, product_id: int | None) -> ProductRecord | None:
        """Продукт по id; ``None`` для пустой или висячей ссылки."""
        if product_id is None:
            return None
        return self._products.get(product_id)

    def get_seller(self, seller_id: int | None) -> SellerRecord | None:
        """Продавец по id; ``None`` для пустой или висячей ссылки."""
        if seller_id is None:
            return None
        return self._sellers.get(seller_id)

    # ──────────────────────────── Добавление ─────────────────────────────

    def _assign_id(self, record, table: dict):
        if record.id is None:
            new_id = next(self._ids)
            while new_id in table:
                new_id = next(self._ids)
            return replace(record, id=new_id)
        if record.id in table:
            raise ValueError(f"Запись с id={record.id} уже существует")
        return record

    def add_client(self, client: ClientRecord) -> ClientRecord:
        client = self._assign_id(client, self._clients)
        self._clients[client.id] = client
        return client

    def add_product(self, product: ProductRecord) -> ProductRecord:
        product = self._assign_id(product, self._products)
        self._products[product.id] = product
        return product

    def add_seller(self, seller: SellerRecord) -> SellerRecord:
        seller = self._assign_id(seller, self._sellers)
        self._sellers[seller.id] = seller
        return seller

    # ──────────────────────────── Замена ─────────────────────────────

    def replace_client(self, client: ClientRecord) -> ClientRecord:
        if client.id not in self._clients:
            raise KeyError(client.id)
        self._clients[client.id] = client
        return client

    def replace_product(self, product: ProductRecord) -> ProductRecord:
        if product.id not in self._products:
            raise KeyError(product.id)
        self._products[product.id] = product
        return product

    def replace_seller(self, seller: SellerRecord) -> SellerRecord:
        if seller.id not in self._sellers:
            raise KeyError(seller.id)
        self._sellers[seller.id] = seller
        return seller

    # ──────────────────────────── Удаление ─────────────────────────────

    def remove_client(self, client_id: int) -> ClientRecord:
        return self._clients.pop(client_id)

    def remove_product(self, product_id: int) -> ProductRecord:
        """Удалить продукт; клиенты остаются без продукта."""
        product = self._products.pop(product_id)
        for client in list(self._clients.values()):
            if client.product_id == product_id:
                self._clients[client.id] = replace(client, product_id=None)
        logger.info("🗑 Продукт #%s удалён из хранилища", product_id)
        return product

    def remove_seller(self, seller_id: int) -> SellerRecord:
        """Удалить продавца; клиенты остаются без продавца."""
        seller = self._sellers.pop(seller_id)
        for client in list(self._clients.values()):
            if client.seller_id == seller_id:
                self._clients[client.id] = replace(client, seller_id=None)
        logger.info("🗑 Продавец #%s удалён из хранилища", seller_id)
        return seller


def load_store() -> CrmStore:
    """Собрать снимок :class:`CrmStore` из базы данных."""
    products = [ProductRecord.from_model(p) for p in Product.select()]
    sellers = [SellerRecord.from_model(s) for s in Seller.select()]
    clients = [ClientRecord.from_model(c) for c in Client.select()]
    logger.debug(
        "Снимок CRM: %d клиентов, %d продуктов, %d продавцов",
        len(clients),
        len(products),
        len(sellers),
    )
    return CrmStore(clients=clients, products=products, sellers=sellers)
