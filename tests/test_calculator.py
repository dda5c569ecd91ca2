import random
from datetime import date, datetime, timedelta, timezone

from border_days.calculator import (
    build_abroad_segments,
    build_overseas_days,
    calculate_overseas_days,
    get_days_in_range,
)
from border_days.models import AbroadSegment, BorderEvent

TODAY = date(2025, 6, 30)


def ev(id, day, type, doc="普通护照", number="E12345678", **kw):
    return BorderEvent(
        id=id,
        date=day,
        type=type,
        port=kw.pop("port", "深圳湾"),
        document_name=doc,
        document_number=number,
        **kw,
    )


def calc(events, start, end, today=TODAY):
    return calculate_overseas_days(events, start, end, today=today)


def test_same_day_exit_and_entry_is_one_day():
    events = [
        ev("a2", "2024-11-20", "entry"),
        ev("a1", "2024-11-20", "exit"),
    ]
    assert calc(events, "2024-01-01", "2024-12-31").total_overseas_days == 1


def test_two_trips_sum_without_inflation():
    events = [
        ev("b4", "2024-11-20", "entry"),
        ev("b3", "2024-11-20", "exit"),
        ev("b2", "2024-03-16", "entry"),
        ev("b1", "2024-03-15", "exit"),
    ]
    r = calc(events, "2024-01-01", "2024-12-31")
    assert r.total_overseas_days == 3  # 2 + 1, never the 292-day span between them
    assert r.total_records == 4


def test_domestic_gap_not_counted():
    events = [
        ev("c4", "2024-12-11", "entry"),
        ev("c3", "2024-12-10", "exit"),
        ev("c2", "2024-02-02", "entry"),
        ev("c1", "2024-02-01", "exit"),
    ]
    assert calc(events, "2024-01-01", "2024-12-31").total_overseas_days == 4


def test_mixed_documents_counted_independently():
    events = [
        ev("h2", "2024-11-20", "entry", "往来港澳通行证", "H-002"),
        ev("p1", "2024-03-15", "exit", "普通护照", "P-001"),
        ev("h1", "2024-11-20", "exit", "往来港澳通行证", "H-002"),
        ev("p2", "2024-03-16", "entry", "普通护照", "P-001"),
    ]
    assert calc(events, "2024-01-01", "2024-12-31").total_overseas_days == 3


def test_interleaved_same_day_documents_do_not_cross_pair():
    events = [
        ev("rx-p-entry", "2024-11-20", "entry", "普通护照", "P-100", time="23:10"),
        ev("rx-h-exit", "2024-11-20", "exit", "往来港澳通行证", "H-200", time="09:30"),
        ev("rx-p-exit", "2024-11-20", "exit", "普通护照", "P-100", time="08:00"),
        ev("rx-h-entry", "2024-11-21", "entry", "往来港澳通行证", "H-200", time="00:20"),
    ]
    r = calc(events, "2024-11-20", "2024-11-21")
    assert r.total_overseas_days == 2


def test_window_inside_domestic_gap_is_zero():
    events = [
        ev("d4", "2024-11-20", "entry"),
        ev("d3", "2024-11-20", "exit"),
        ev("d2", "2024-03-16", "entry"),
        ev("d1", "2024-03-15", "exit"),
    ]
    r = calc(events, "2024-04-01", "2024-11-19")
    assert r.total_overseas_days == 0
    assert r.total_records == 0


def test_window_outside_all_data():
    events = [ev("2", "2024-03-16", "entry"), ev("3", "2024-03-15", "exit")]
    r = calc(events, "2020-01-01", "2020-12-31")
    assert r.total_overseas_days == 0
    assert r.total_records == 0
    assert r.overseas_records == [] and r.domestic_records == []


def test_reversed_window_is_empty_result():
    events = [ev("2", "2024-03-16", "entry"), ev("3", "2024-03-15", "exit")]
    r = calc(events, "2024-12-31", "2024-01-01")
    assert r.total_overseas_days == 0
    assert r.total_records == 0


def test_open_stay_runs_through_today():
    events = [ev("1", "2025-06-21", "exit")]
    r = calc(events, "2025-01-01", "2025-12-31", today=date(2025, 6, 30))
    assert r.total_overseas_days == 10
    assert [e.id for e in r.overseas_records] == ["1"]


def test_same_day_return_and_departure_keeps_stay_continuous():
    # feed ids: larger = older
    events = [
        ev("4", "2024-01-01", "exit"),
        ev("3", "2024-01-05", "entry"),
        ev("2", "2024-01-05", "exit"),
        ev("1", "2024-01-10", "entry"),
    ]
    assert calc(events, "2024-01-01", "2024-01-31").total_overseas_days == 10


def test_re_exit_fills_until_day_before_new_exit():
    events = [
        ev("3", "2024-01-01", "exit"),
        ev("2", "2024-01-05", "exit"),
        ev("1", "2024-01-08", "entry"),
    ]
    days = build_overseas_days(events, TODAY)
    assert min(days) == date(2024, 1, 1)
    assert max(days) == date(2024, 1, 8)
    assert len(days) == 8


def test_multi_leg_same_day_counts_once():
    events = [
        ev("4", "2024-01-01", "exit"),
        ev("3", "2024-01-01", "entry"),
        ev("2", "2024-01-01", "exit"),
        ev("1", "2024-01-01", "entry"),
    ]
    assert calc(events, "2024-01-01", "2024-01-01").total_overseas_days == 1


def test_orphan_entry_ignored_and_domestic():
    events = [
        ev("3", "2024-03-15", "exit"),
        ev("2", "2024-03-20", "entry"),
        ev("1", "2024-04-01", "entry"),
    ]
    r = calc(events, "2024-03-01", "2024-04-30")
    assert r.total_overseas_days == 6
    assert r.total_records == 3
    assert [e.id for e in r.overseas_records] == ["3", "2"]
    assert [e.id for e in r.domestic_records] == ["1"]


def test_time_field_is_ignored():
    a = [ev("2", "2024-05-01", "entry", time="23:59"), ev("3", "2024-05-01", "exit", time="00:01")]
    b = [ev("2", "2024-05-01", "entry", time="00:01"), ev("3", "2024-05-01", "exit", time="23:59")]
    ra = calc(a, "2024-05-01", "2024-05-31")
    rb = calc(b, "2024-05-01", "2024-05-31")
    assert ra.total_overseas_days == rb.total_overseas_days == 1
    assert [e.id for e in ra.overseas_records] == [e.id for e in rb.overseas_records]


def test_missing_document_fields_share_one_identity():
    events = [
        BorderEvent(id="2", date="2024-05-03", type="entry"),
        BorderEvent(id="3", date="2024-05-01", type="exit", document_name=None, document_number=None),
    ]
    assert calc(events, "2024-05-01", "2024-05-31").total_overseas_days == 3


def test_query_bounds_projected_to_fixed_offset():
    events = [ev("2", "2024-01-01", "entry"), ev("3", "2024-01-01", "exit")]
    # 16:00 UTC on Dec 31 is already Jan 1 at UTC+8
    start = datetime(2023, 12, 31, 16, 0, tzinfo=timezone.utc)
    end = datetime(2023, 12, 31, 17, 0, tzinfo=timezone.utc)
    r = calculate_overseas_days(events, start, end, today=TODAY)
    assert r.total_overseas_days == 1
    assert r.total_records == 2


def test_overlapping_documents_do_not_double_count():
    events = [
        ev("4", "2024-03-01", "exit", "普通护照", "P1"),
        ev("2", "2024-03-10", "entry", "普通护照", "P1"),
        ev("3", "2024-03-05", "exit", "往来港澳通行证", "H1"),
        ev("1", "2024-03-15", "entry", "往来港澳通行证", "H1"),
    ]
    assert calc(events, "2024-01-01", "2024-12-31").total_overseas_days == 15
    assert build_abroad_segments(events, TODAY) == [
        AbroadSegment(exit_date=date(2024, 3, 1), entry_date=date(2024, 3, 15))
    ]


def test_touching_segments_merge():
    events = [
        ev("4", "2024-03-01", "exit", "普通护照", "P1"),
        ev("3", "2024-03-05", "entry", "普通护照", "P1"),
        ev("2", "2024-03-06", "exit", "往来港澳通行证", "H1"),
        ev("1", "2024-03-08", "entry", "往来港澳通行证", "H1"),
    ]
    segs = build_abroad_segments(events, TODAY)
    assert segs == [AbroadSegment(exit_date=date(2024, 3, 1), entry_date=date(2024, 3, 8))]


def test_open_segment_stays_open_after_merge():
    today = date(2024, 6, 20)
    events = [
        ev("3", "2024-06-01", "exit", "普通护照", "P1"),
        ev("2", "2024-06-03", "exit", "往来港澳通行证", "H1"),
        ev("1", "2024-06-05", "entry", "往来港澳通行证", "H1"),
    ]
    segs = build_abroad_segments(events, today)
    assert len(segs) == 1
    assert segs[0].exit_date == date(2024, 6, 1)
    assert segs[0].is_open


def test_reversed_pair_is_swapped_not_dropped():
    # an order that trusts ids alone can see the entry dated before its exit
    events = [ev("1", "2024-03-20", "exit"), ev("2", "2024-03-15", "entry")]
    segs = build_abroad_segments(events, TODAY, order=lambda e: int(e.id))
    assert segs == [AbroadSegment(exit_date=date(2024, 3, 15), entry_date=date(2024, 3, 20))]


def test_inputs_are_not_mutated():
    events = [ev("2", "2024-03-16", "entry"), ev("3", "2024-03-15", "exit")]
    before = [e.model_dump() for e in events]
    calc(events, "2024-01-01", "2024-12-31")
    assert [e.model_dump() for e in events] == before
    assert [e.id for e in events] == ["2", "3"]


def test_days_in_range_inclusive():
    assert get_days_in_range(date(2024, 1, 1), date(2024, 12, 31)) == 366
    assert get_days_in_range(date(2024, 1, 1), date(2024, 1, 1)) == 1
    assert get_days_in_range(date(2024, 1, 2), date(2024, 1, 1)) == 0


def test_total_never_exceeds_window():
    rng = random.Random(20240101)
    docs = [("普通护照", "P1"), ("往来港澳通行证", "H1"), ("", "")]
    base = date(2024, 1, 1)

    for _ in range(200):
        n = rng.randint(0, 12)
        events = []
        for i in range(n):
            name, number = rng.choice(docs)
            events.append(
                ev(
                    str(rng.randint(1, 50)),
                    base + timedelta(days=rng.randint(0, 60)),
                    rng.choice(["exit", "entry"]),
                    name,
                    number,
                )
            )
        start = base + timedelta(days=rng.randint(0, 60))
        end = start + timedelta(days=rng.randint(0, 30))
        r = calc(events, start, end, today=base + timedelta(days=90))

        assert 0 <= r.total_overseas_days <= get_days_in_range(start, end)
        assert r.total_records == len(r.overseas_records) + len(r.domestic_records)
