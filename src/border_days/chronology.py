from __future__ import annotations

from typing import Any, Callable, Iterable, List, Tuple

from .models import BorderEvent


OrderKey = Callable[[BorderEvent], Any]


def chronological_key(e: BorderEvent) -> Tuple[Any, int, int]:
    """
    Logical time order, oldest first.

    1. calendar date
    2. feed sequence: the feed numbers crossings newest-first, so a larger
       id is older
    3. Exit before Entry, used only when ids carry no sequence
    """
    seq = e.sequence_number
    return (e.date, -seq if seq is not None else 0, 0 if e.is_exit else 1)


def source_order_key(e: BorderEvent) -> int:
    """Feed display order: ascending numeric id, non-numeric ids as 0."""
    return e.sequence_number or 0


def sort_chronological(events: Iterable[BorderEvent], order: OrderKey = chronological_key) -> List[BorderEvent]:
    return sorted(events, key=order)


def sort_source_order(events: Iterable[BorderEvent]) -> List[BorderEvent]:
    return sorted(events, key=source_order_key)
