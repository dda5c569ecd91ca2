from __future__ import annotations

from bisect import bisect_right
from datetime import date
from typing import Iterable, List, Optional, Set

from .chronology import OrderKey, chronological_key, sort_chronological
from .dates import CST, ONE_DAY, DateLike, FixedOffsetCalendar
from .documents import group_by_document
from .log import get_logger
from .models import AbroadSegment, BorderEvent, CalculationResult


log = get_logger()


def _fill(days: Set[date], start: date, end: date) -> None:
    d = start
    while d <= end:
        days.add(d)
        d += ONE_DAY


def build_overseas_days(
    events: Iterable[BorderEvent],
    today: date,
    *,
    order: OrderKey = chronological_key,
) -> Set[date]:
    """
    Day-fill: every calendar day on which any document shows the person
    abroad, as a set (a day counts once however many documents cover it).

    Walks each document's crossings oldest -> newest:
      - exit while abroad (re-exit before the entry showed up): the person
        stayed abroad, fill up to the day before the new exit
      - entry while abroad: fill [exit, entry] inclusive
      - entry while not abroad: orphan, ignored
      - still abroad at the end: fill through today
    """
    days: Set[date] = set()

    for group in group_by_document(events).values():
        active_exit: Optional[date] = None

        for e in sort_chronological(group, order):
            if e.is_exit:
                if active_exit is not None:
                    _fill(days, active_exit, e.date - ONE_DAY)
                active_exit = e.date
            elif active_exit is not None:
                _fill(days, active_exit, e.date)
                active_exit = None

        if active_exit is not None:
            _fill(days, active_exit, today)

    return days


def _merge_segments(segments: List[AbroadSegment], today: date) -> List[AbroadSegment]:
    merged: List[AbroadSegment] = []
    for s in sorted(segments, key=lambda x: x.exit_date):
        if not merged or not merged[-1].touches(s, today):
            merged.append(s)
            continue

        last = merged[-1]
        new_end = max(last.end(today), s.end(today))
        still_open = new_end == today and (last.is_open or s.is_open)
        merged[-1] = AbroadSegment(
            exit_date=last.exit_date,
            entry_date=None if still_open else new_end,
        )
    return merged


def build_abroad_segments(
    events: Iterable[BorderEvent],
    today: date,
    *,
    order: OrderKey = chronological_key,
) -> List[AbroadSegment]:
    """
    Plain exit -> entry pairing per document, then one merged timeline
    (overlapping or touching stays collapse, whichever document they came from).
    """
    segments: List[AbroadSegment] = []

    for group in group_by_document(events).values():
        open_exit: Optional[date] = None
        for e in sort_chronological(group, order):
            if e.is_exit:
                open_exit = e.date
            elif open_exit is not None:
                exit_date, entry_date = open_exit, e.date
                if entry_date < exit_date:
                    exit_date, entry_date = entry_date, exit_date
                segments.append(AbroadSegment(exit_date=exit_date, entry_date=entry_date))
                open_exit = None

        if open_exit is not None:
            segments.append(AbroadSegment(exit_date=open_exit, entry_date=None))

    return _merge_segments(segments, today)


def count_days_in_window(days: Set[date], start: date, end: date, calendar: FixedOffsetCalendar = CST) -> int:
    if end < start:
        return 0
    # Walk whichever side is smaller; both give the same membership count
    if calendar.days_inclusive(start, end) <= len(days):
        return sum(1 for d in calendar.iter_days(start, end) if d in days)
    return sum(1 for d in days if start <= d <= end)


def calculate_overseas_days(
    events: Iterable[BorderEvent],
    start: DateLike,
    end: DateLike,
    *,
    calendar: FixedOffsetCalendar = CST,
    today: Optional[date] = None,
    order: OrderKey = chronological_key,
) -> CalculationResult:
    """
    Overseas days within [start, end] (inclusive) plus the in-window records
    split into overseas / domestic.

    start/end are instants (or calendar days) and are projected onto the
    calendar's fixed offset here; callers should not pre-normalize them.
    `today` closes still-open stays and defaults to the calendar's today.
    """
    events = list(events)
    q_start = calendar.to_date_only(start)
    q_end = calendar.to_date_only(end)

    if q_end < q_start:
        return CalculationResult()

    today = today or calendar.today()

    days = build_overseas_days(events, today, order=order)
    total = count_days_in_window(days, q_start, q_end, calendar)

    window = calendar.days_inclusive(q_start, q_end)
    assert 0 <= total <= window, f"overseas days {total} exceed window of {window} days"

    segments = build_abroad_segments(events, today, order=order)

    starts = [s.exit_date for s in segments]

    in_range = [e for e in events if q_start <= e.date <= q_end]
    overseas: List[BorderEvent] = []
    domestic: List[BorderEvent] = []
    for e in in_range:
        # merged segments are sorted and disjoint: only the last one starting
        # on or before the day can hold it
        i = bisect_right(starts, e.date) - 1
        if i >= 0 and segments[i].contains(e.date, today):
            overseas.append(e)
        else:
            domestic.append(e)

    log.debug(
        "overseas days {}..{}: {} of {} days, {} records ({} overseas)",
        q_start,
        q_end,
        total,
        window,
        len(in_range),
        len(overseas),
    )

    return CalculationResult(
        total_overseas_days=total,
        total_records=len(in_range),
        overseas_records=overseas,
        domestic_records=domestic,
    )


def get_days_in_range(start: DateLike, end: DateLike, *, calendar: FixedOffsetCalendar = CST) -> int:
    """Inclusive number of calendar days in [start, end] at the fixed offset."""
    return calendar.days_inclusive(start, end)
