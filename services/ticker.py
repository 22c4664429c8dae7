"""Периодический пересчёт состояния без привязки к UI.

:class:`Ticker` раз в ``interval`` секунд вызывает колбэк с текущим
моментом времени. Колбэк должен быть чистой функцией над снимком данных
(см. :mod:`services.reporting`).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from services.reporting import expiring_soon
from services.store import CrmStore
from services.subscription_status import classify
from utils.time_utils import now as wall_clock
from utils.time_utils import split_duration

logger = logging.getLogger(__name__)


class Ticker:
    """Фоновый поток, вызывающий ``callback(now)`` с заданным периодом."""

    def __init__(
        self,
        interval: float,
        callback: Callable[[datetime], object],
        clock: Callable[[], datetime] = wall_clock,
    ) -> None:
        if interval <= 0:
            raise ValueError("Интервал должен быть положительным")
        self.interval = interval
        self._callback = callback
        self._clock = clock
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self):
        """Выполнить один пересчёт синхронно."""
        self.ticks += 1
        try:
            return self._callback(self._clock())
        except Exception:
            logger.exception("Ошибка в обработчике тика #%s", self.ticks)
            return None

    def _run(self) -> None:
        while not self._stop.is_set():
            self.tick()
            self._stop.wait(self.interval)

    def start(self) -> "Ticker":
        if self.running:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="crm-ticker", daemon=True)
        self._thread.start()
        logger.debug("Тикер запущен, период %s с", self.interval)
        return self

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.debug("Тикер остановлен после %d тиков", self.ticks)

    def __enter__(self) -> "Ticker":
        return self.start()

    def __exit__(self, *exc) -> None:
        self.stop()


def log_expiring(store_loader: Callable[[], CrmStore]) -> Callable[[datetime], list]:
    """Колбэк для тикера: пишет в лог истекающие абонементы."""

    def _on_tick(now: datetime) -> list:
        store = store_loader()
        expiring = expiring_soon(store, now)
        for client in expiring:
            left = split_duration(now, client.subscription.end)
            logger.info(
                "⏳ %s: %s, осталось %s",
                client.full_name,
                classify(client.subscription, now).value,
                left,
            )
        return expiring

    return _on_tick
