from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from src.hr_admin.hr_admin.biometric.model import Punch
from src.hr_admin.hr_admin.biometric.processor import (
    MISSING_PUNCH_NOTE,
    STILL_CLOCKED_IN_NOTE,
    classify_day,
    in_range,
    process_punches,
    summarize_day,
)
from src.hr_admin.hr_admin.core.enums import PunchStatus
from tests.fakes import EMPLOYEES

DAY = date(2026, 3, 2)


def at(hour, minute=0, second=0, day=DAY):
    return datetime(day.year, day.month, day.day, hour, minute, second)


def statuses(timestamps):
    return [p.status for p in classify_day(timestamps)]


def test_single_morning_punch_is_missing_clock_in():
    punches = classify_day([at(8, 2)])
    assert punches[0].status == PunchStatus.CLOCK_IN
    assert punches[0].missing_punch is True


def test_single_afternoon_punch_is_clock_out():
    assert statuses([at(12, 0)]) == [PunchStatus.CLOCK_OUT]


def test_two_punches_sorted_before_classifying():
    assert statuses([at(17, 5), at(8, 0)]) == [PunchStatus.CLOCK_IN, PunchStatus.CLOCK_OUT]
    assert classify_day([at(17, 5), at(8, 0)])[0].timestamp == at(8, 0)


def test_four_punches():
    assert statuses([at(8), at(12), at(13), at(17)]) == [
        PunchStatus.CLOCK_IN,
        PunchStatus.BREAK_IN,
        PunchStatus.BREAK_OUT,
        PunchStatus.CLOCK_OUT,
    ]


def test_odd_counts_alternate_breaks():
    assert statuses([at(8), at(10), at(17)]) == [PunchStatus.CLOCK_IN, PunchStatus.BREAK_IN, PunchStatus.CLOCK_OUT]
    assert statuses([at(8), at(10), at(10, 15), at(12), at(17)]) == [
        PunchStatus.CLOCK_IN,
        PunchStatus.BREAK_IN,
        PunchStatus.BREAK_OUT,
        PunchStatus.BREAK_IN,
        PunchStatus.CLOCK_OUT,
    ]


def test_summary_excludes_break():
    row = summarize_day(4, DAY, classify_day([at(8), at(12), at(13), at(17)]))

    assert row.time_in == at(8)
    assert row.time_out == at(17)
    assert row.break_in == at(12)
    assert row.break_out == at(13)
    assert row.hours_worked == Decimal("8.00")
    assert row.is_nightshift is False
    assert row.notes is None


def test_summary_counts_whole_minutes():
    row = summarize_day(4, DAY, classify_day([at(8, 0, 0), at(16, 20, 59)]))
    assert row.hours_worked == Decimal("8.33")


def test_leftover_seconds_are_dropped_per_segment():
    row = summarize_day(4, DAY, classify_day([at(8), at(12, 0, 40), at(13), at(17, 0, 40)]))
    assert row.hours_worked == Decimal("8.00")


def test_lone_clock_in_is_still_clocked_in():
    row = summarize_day(4, DAY, classify_day([at(7, 58)]))

    assert row.time_in == at(7, 58)
    assert row.time_out is None
    assert row.hours_worked is None
    assert MISSING_PUNCH_NOTE in row.notes
    assert STILL_CLOCKED_IN_NOTE in row.notes


def test_lone_clock_out_falls_back_to_punch_for_time_in():
    row = summarize_day(4, DAY, classify_day([at(17, 3)]))

    assert row.time_in == at(17, 3)
    assert row.time_out == at(17, 3)
    assert row.hours_worked == Decimal("0.00")
    assert row.notes == MISSING_PUNCH_NOTE


def test_in_range():
    punch = Punch("1004", at(8))
    assert in_range(punch, None, None)
    assert in_range(punch, DAY, DAY)
    assert not in_range(punch, date(2026, 3, 3), None)
    assert not in_range(punch, None, date(2026, 3, 1))


def test_process_punches_groups_by_employee_day_and_skips_unknown_ids():
    employees = {e.idno: e for e in EMPLOYEES}
    punches = [
        Punch("1004", at(8)),
        Punch("1004", at(17)),
        Punch("1005", at(9)),
        Punch("1005", at(18)),
        Punch("1004", at(8, 5, day=date(2026, 3, 3))),
        Punch("9999", at(8)),
    ]

    rows, processed, skipped = process_punches(punches, employees)

    assert processed == 5
    assert skipped == 1
    assert [(r.employee_id, r.attendance_date) for r in rows] == [
        (4, DAY),
        (4, date(2026, 3, 3)),
        (5, DAY),
    ]
    assert rows[0].hours_worked == Decimal("9.00")
    assert rows[1].notes is not None
    assert all(r.source == "biometric" for r in rows)
