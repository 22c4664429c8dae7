"""Peewee-Proxy ``db``; инициализируется в :mod:`database.init`."""

from peewee import Proxy

db = Proxy()
