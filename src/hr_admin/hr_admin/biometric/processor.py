"""Turns raw device punches into processed attendance rows.

Devices do not record reliably whether a punch is an in or an out, so the
meaning of each punch is inferred from how many punches the employee made
that day:

    1 punch   before noon: Clock In, otherwise Clock Out (flagged as missing)
    2 punches Clock In, Clock Out
    4 punches Clock In, Break In, Break Out, Clock Out
    other     first Clock In, last Clock Out, alternating Break In / Break Out
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..core.enums import PunchStatus
from ..employees.model import Employee
from .model import ClassifiedPunch, ProcessedAttendance, Punch

STILL_CLOCKED_IN_NOTE = "Employee is still clocked in. No checkout recorded."
MISSING_PUNCH_NOTE = "Missing punch."


def classify_day(timestamps: Sequence[datetime]) -> List[ClassifiedPunch]:
    """Assign a status to one employee's punches of one day."""

    ordered = sorted(timestamps)
    count = len(ordered)
    if count == 0:
        return []

    if count == 1:
        status = PunchStatus.CLOCK_IN if ordered[0].hour < 12 else PunchStatus.CLOCK_OUT
        return [ClassifiedPunch(ordered[0], status, missing_punch=True)]

    if count == 2:
        statuses = [PunchStatus.CLOCK_IN, PunchStatus.CLOCK_OUT]
    elif count == 4:
        statuses = [PunchStatus.CLOCK_IN, PunchStatus.BREAK_IN, PunchStatus.BREAK_OUT, PunchStatus.CLOCK_OUT]
    else:
        statuses = []
        for i in range(count):
            if i == 0:
                statuses.append(PunchStatus.CLOCK_IN)
            elif i == count - 1:
                statuses.append(PunchStatus.CLOCK_OUT)
            elif i % 2 == 1:
                statuses.append(PunchStatus.BREAK_IN)
            else:
                statuses.append(PunchStatus.BREAK_OUT)

    return [ClassifiedPunch(ts, status) for ts, status in zip(ordered, statuses)]


def _whole_minutes(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


def summarize_day(employee_id: int, attendance_date: date, punches: Sequence[ClassifiedPunch]) -> ProcessedAttendance:
    """Fold classified punches into time in/out, breaks and hours worked."""

    worked_minutes = 0
    open_since: Optional[datetime] = None
    time_in = time_out = break_in = break_out = None

    for punch in punches:
        if punch.status == PunchStatus.CLOCK_IN:
            if time_in is None:
                time_in = punch.timestamp
            open_since = punch.timestamp
        elif punch.status == PunchStatus.CLOCK_OUT:
            time_out = punch.timestamp
            if open_since is not None:
                worked_minutes += _whole_minutes(open_since, punch.timestamp)
                open_since = None
        elif punch.status == PunchStatus.BREAK_IN:
            break_in = punch.timestamp
            if open_since is not None:
                worked_minutes += _whole_minutes(open_since, punch.timestamp)
                open_since = None
        elif punch.status == PunchStatus.BREAK_OUT:
            break_out = punch.timestamp
            open_since = punch.timestamp

    notes: List[str] = []
    if any(p.missing_punch for p in punches):
        notes.append(MISSING_PUNCH_NOTE)

    if time_in is None and punches:
        time_in = punches[0].timestamp

    if time_out is None and punches:
        if punches[-1].status in (PunchStatus.CLOCK_IN, PunchStatus.BREAK_OUT):
            notes.append(STILL_CLOCKED_IN_NOTE)
        else:
            time_out = punches[-1].timestamp

    hours_worked = None
    is_nightshift = False
    if time_in is not None and time_out is not None:
        hours_worked = (Decimal(worked_minutes) / Decimal(60)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        is_nightshift = time_in.date() != time_out.date()

    return ProcessedAttendance(
        employee_id=employee_id,
        attendance_date=attendance_date,
        time_in=time_in,
        time_out=time_out,
        break_in=break_in,
        break_out=break_out,
        hours_worked=hours_worked,
        is_nightshift=is_nightshift,
        notes=" ".join(notes) or None,
    )


def in_range(punch: Punch, start: Optional[date], end: Optional[date]) -> bool:
    day = punch.timestamp.date()
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def process_punches(
    punches: Iterable[Punch],
    employees_by_idno: Mapping[str, Employee],
) -> Tuple[List[ProcessedAttendance], int, int]:
    """Group punches per employee-day and summarize each day.

    Returns (rows, processed punch count, skipped punch count). Punches from
    ids that match no employee are skipped.
    """

    grouped: Dict[Tuple[int, date], List[datetime]] = defaultdict(list)
    processed = skipped = 0
    for punch in punches:
        employee = employees_by_idno.get(str(punch.user_id))
        if employee is None:
            skipped += 1
            continue
        grouped[(employee.employee_id, punch.timestamp.date())].append(punch.timestamp)
        processed += 1

    rows = [
        summarize_day(employee_id, day, classify_day(timestamps))
        for (employee_id, day), timestamps in sorted(grouped.items())
    ]
    return rows, processed, skipped
