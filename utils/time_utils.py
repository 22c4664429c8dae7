from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

DATE_FORMAT = "%d/%m/%Y"

MS_PER_SECOND = 1_000
MS_PER_MINUTE = 60_000
MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000


@dataclass(frozen=True)
class DurationParts:
    """Разложение интервала на дни, часы, минуты и секунды."""

    days: int
    hours: int
    minutes: int
    seconds: int

    def total_ms(self) -> int:
        """Миллисекунды, покрытые целыми частями (без остатка < 1 с)."""
        return (
            self.days * MS_PER_DAY
            + self.hours * MS_PER_HOUR
            + self.minutes * MS_PER_MINUTE
            + self.seconds * MS_PER_SECOND
        )

    def __str__(self) -> str:
        return f"{self.days}g {self.hours}o {self.minutes}m {self.seconds}s"


def now(tz: tzinfo | None = None) -> datetime:
    """Текущий момент времени."""
    return datetime.now(tz)


def delta_ms(delta: timedelta) -> int:
    """Целое число миллисекунд в ``timedelta`` (с округлением вниз)."""
    return delta // timedelta(milliseconds=1)


def split_duration(a: datetime, b: datetime) -> DurationParts:
    """Разложить ``|b - a|`` на дни/часы/минуты/секунды.

    Порядок аргументов не важен: берётся модуль разности.
    """
    diff_ms = delta_ms(abs(b - a))
    return DurationParts(
        days=diff_ms // MS_PER_DAY,
        hours=(diff_ms // MS_PER_HOUR) % 24,
        minutes=(diff_ms // MS_PER_MINUTE) % 60,
        seconds=(diff_ms // MS_PER_SECOND) % 60,
    )


def format_date(value: date | datetime | None, default: str = "—") -> str:
    """Дата в формате ``dd/mm/YYYY``."""
    if value is None:
        return default
    return value.strftime(DATE_FORMAT)
