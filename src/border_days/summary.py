from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Tuple

from .calculator import calculate_overseas_days
from .chronology import OrderKey, chronological_key
from .dates import CST, ONE_DAY, DateLike, FixedOffsetCalendar
from .models import BorderEvent, CalculationResult


DEFAULT_TARGET_DAYS = 270


@dataclass(frozen=True)
class WindowSummary:
    start: date
    end: date
    total_days: int
    past_days: int
    future_days: int
    overseas_days: int
    domestic_days: int
    target_days: int
    eligible: bool
    remaining_days: int
    result: CalculationResult = field(default_factory=CalculationResult)

    @property
    def overseas_ratio(self) -> float:
        if self.past_days == 0:
            return 0.0
        return self.overseas_days / self.past_days


def port_frequency(records: Iterable[BorderEvent], limit: Optional[int] = None) -> List[Tuple[str, int]]:
    """Ports ranked by number of crossings (blank ports skipped)."""
    counts = Counter(r.port.strip() for r in records if r.port.strip())
    return counts.most_common(limit)


def summarize_window(
    events: Iterable[BorderEvent],
    start: DateLike,
    end: DateLike,
    *,
    target_days: int = DEFAULT_TARGET_DAYS,
    calendar: FixedOffsetCalendar = CST,
    today: Optional[date] = None,
    order: OrderKey = chronological_key,
) -> WindowSummary:
    """
    A query window may reach into the future (e.g. a graduation date).
    Only the part up to today is counted:

      past   = [start, min(end, today)]
      future = [tomorrow, end]

    Future days are reported separately and never count as overseas or domestic.
    """
    q_start = calendar.to_date_only(start)
    q_end = calendar.to_date_only(end)
    today = today or calendar.today()

    past_end = min(q_end, today)
    past_days = calendar.days_inclusive(q_start, past_end)
    future_days = calendar.days_inclusive(max(q_start, today + ONE_DAY), q_end)

    if past_days:
        result = calculate_overseas_days(events, q_start, past_end, calendar=calendar, today=today, order=order)
    else:
        result = CalculationResult()

    overseas_days = min(result.total_overseas_days, past_days)

    return WindowSummary(
        start=q_start,
        end=q_end,
        total_days=calendar.days_inclusive(q_start, q_end),
        past_days=past_days,
        future_days=future_days,
        overseas_days=overseas_days,
        domestic_days=past_days - overseas_days,
        target_days=target_days,
        eligible=overseas_days >= target_days,
        remaining_days=max(0, target_days - overseas_days),
        result=result,
    )
