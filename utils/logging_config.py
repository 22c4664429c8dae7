"""Конфигурация логирования CRM: консоль и файл ``crm.log``."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from config import Settings, get_settings

LOG_FILE_NAME = "crm.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s │ %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 2_000_000  # 2 MB
LOG_BACKUP_COUNT = 3

# шумные библиотеки HTTP-слоя
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class PeeweeFilter(logging.Filter):
    """Скрывает SELECT-запросы peewee."""

    def filter(self, record: logging.LogRecord) -> bool:
        sql = getattr(record, "sql", None)
        text = str(sql if sql is not None else record.getMessage())
        return not text.lstrip().upper().startswith("SELECT")


def resolve_level(settings: Settings) -> int:
    """Уровень логирования с учётом флага подробного режима."""
    if settings.detailed_logging:
        return logging.DEBUG
    return getattr(logging, settings.log_level, logging.INFO)


def _handlers(log_path: Path, level: int) -> list[logging.Handler]:
    fmt = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    file_h = RotatingFileHandler(
        log_path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    console_h = logging.StreamHandler()
    for handler in (file_h, console_h):
        handler.setFormatter(fmt)
        handler.setLevel(level)
    return [file_h, console_h]


def setup_logging(settings: Settings | None = None) -> Path:
    """Настроить корневой логгер и вернуть путь к файлу лога."""
    settings = settings or get_settings()
    logs_dir = Path(settings.log_dir).expanduser()
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / LOG_FILE_NAME

    level = resolve_level(settings)
    logging.basicConfig(level=level, handlers=_handlers(log_path, level), force=True)

    if not settings.detailed_logging:
        logging.getLogger("peewee").addFilter(PeeweeFilter())
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Логи пишутся в %s", log_path)
    return log_path
