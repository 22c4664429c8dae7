import logging

from config import Settings
from utils.logging_config import PeeweeFilter, resolve_level, setup_logging


def _record(msg: str, sql: str | None = None) -> logging.LogRecord:
    record = logging.LogRecord("peewee", logging.DEBUG, "", 0, msg, None, None)
    if sql is not None:
        record.sql = sql
    return record


def test_filter_excludes_select_queries():
    filt = PeeweeFilter()

    assert not filt.filter(_record("SELECT * FROM client"))
    assert not filt.filter(_record("ignored", sql="   SELECT * FROM client"))


def test_filter_keeps_other_queries():
    filt = PeeweeFilter()

    for query in ["INSERT INTO client VALUES (1)", "UPDATE product SET price=1"]:
        assert filt.filter(_record(query))
        assert filt.filter(_record("ignored", sql=f"   {query}"))


def test_resolve_level():
    assert resolve_level(Settings(log_level="WARNING")) == logging.WARNING
    assert resolve_level(Settings(log_level="nonsense")) == logging.INFO
    assert resolve_level(Settings(log_level="ERROR", detailed_logging=True)) == logging.DEBUG


def test_setup_logging_writes_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(Settings(log_dir=str(tmp_path / "logs"), log_level="INFO"))
        logging.getLogger("tests").info("hello")
        for handler in root.handlers:
            handler.flush()
        assert "hello" in (tmp_path / "logs" / "crm.log").read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
