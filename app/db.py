from config import get_settings
from database.db import db
from database.init import create_tables, init_from_env


def init_app_db() -> None:
    init_from_env(get_settings().database_url)
    create_tables()


def get_session():
    """Открыть соединение peewee на время запроса."""
    opened = db.connect(reuse_if_open=True)
    try:
        yield db
    finally:
        # in-memory SQLite живёт ровно столько, сколько соединение
        if opened and db.database != ":memory:":
            db.close()
