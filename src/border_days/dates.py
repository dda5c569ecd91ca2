from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Union


DateLike = Union[date, datetime, str]

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class FixedOffsetCalendar:
    """
    Calendar-day arithmetic pinned to one fixed UTC offset.

    Every instant entering the calculator is projected onto its calendar day
    at this offset ("date-only anchor"). Offsets are never mixed.
    """
    offset_hours: int = 8

    def __post_init__(self) -> None:
        if not -12 <= self.offset_hours <= 14:
            raise ValueError(f"UTC offset out of range: {self.offset_hours}")

    @property
    def tz(self) -> timezone:
        return timezone(timedelta(hours=self.offset_hours))

    def to_date_only(self, value: DateLike) -> date:
        """
        - date: already a calendar day, returned as-is
        - aware datetime: converted to the fixed offset, then truncated
        - naive datetime: treated as a UTC instant
        - str: ISO date or datetime
        """
        if isinstance(value, str):
            value = parse_iso(value)
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return value.astimezone(self.tz).date()
        return value

    def today(self) -> date:
        return datetime.now(self.tz).date()

    def days_inclusive(self, start: DateLike, end: DateLike) -> int:
        a = self.to_date_only(start)
        b = self.to_date_only(end)
        if b < a:
            return 0
        return (b - a).days + 1

    def iter_days(self, start: date, end: date) -> Iterator[date]:
        d = start
        while d <= end:
            yield d
            d += ONE_DAY


def parse_iso(s: str) -> Union[date, datetime]:
    s = s.strip()
    if len(s) == 10:
        return date.fromisoformat(s)
    # fromisoformat only learned "Z" in 3.11
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return datetime.fromisoformat(s)


CST = FixedOffsetCalendar(8)
