import logging
from datetime import datetime, date, timedelta
from typing import Optional, List, Dict, Iterable
from zoneinfo import ZoneInfo

from models.schema import (
    AttendanceFilter,
    ClockStatus,
    Coordinate,
    DailyAttendance,
    GeofenceResult,
    MonthlySummary,
    OvertimeRule,
    PunchEvent,
    PunchType,
    ShiftState,
    VenueGeofence,
)
from utils.geofence import evaluate
from utils.helper import local_day

ONE_MINUTE = timedelta(minutes=1)

# Tie-break for punches sharing a timestamp; an on-site punch goes first
PUNCH_ORDER = {
    PunchType.IN: 0,
    PunchType.BREAK_START: 1,
    PunchType.BREAK_END: 2,
    PunchType.OUT: 3,
}


def whole_minutes(start: datetime, end: datetime) -> int:
    return (end - start) // ONE_MINUTE


def sort_punches(events: Iterable[PunchEvent]) -> List[PunchEvent]:
    return sorted(
        events,
        key=lambda e: (e.timestamp, PUNCH_ORDER[e.punch_type], not e.is_within_geofence),
    )


def annotate_punch(
    staff_id: str,
    punch_type: PunchType,
    timestamp: datetime,
    coordinates: Optional[Coordinate],
    fence: VenueGeofence,
) -> PunchEvent:
    """Build a punch as captured, flagged against the venue geofence.

    A punch without a GPS fix is never evaluated and is out of the fence.
    """
    if coordinates is None:
        logging.warning(f"No location for {punch_type.value} punch, staff_id: {staff_id}")
        geofence = GeofenceResult(is_within_geofence=False)
    else:
        geofence = evaluate(coordinates, fence)

    return PunchEvent(
        staff_id=staff_id,
        punch_type=punch_type,
        timestamp=timestamp,
        coordinates=coordinates,
        is_within_geofence=geofence.is_within_geofence,
        distance_meters=geofence.distance_meters,
    )


def summarize_day(day: date, day_events: List[PunchEvent], rule: OvertimeRule) -> DailyAttendance:
    # day_events must already be in punch order
    clock_in = next((e for e in day_events if e.punch_type == PunchType.IN), None)
    clock_out = next((e for e in reversed(day_events) if e.punch_type == PunchType.OUT), None)

    # Breaks pair by position; the surplus of either side is dropped
    break_starts = [e for e in day_events if e.punch_type == PunchType.BREAK_START]
    break_ends = [e for e in day_events if e.punch_type == PunchType.BREAK_END]
    if len(break_starts) != len(break_ends):
        logging.debug(
            f"Unpaired breaks on {day}: {len(break_starts)} starts, {len(break_ends)} ends"
        )
    break_minutes = sum(
        max(0, whole_minutes(start.timestamp, end.timestamp))
        for start, end in zip(break_starts, break_ends)
    )

    total_minutes = 0
    if clock_in and clock_out:
        total_minutes = max(0, whole_minutes(clock_in.timestamp, clock_out.timestamp) - break_minutes)
    elif clock_in:
        logging.debug(f"No clock-out on {day} for staff_id: {clock_in.staff_id}")

    return DailyAttendance(
        date=day,
        clock_in=clock_in.timestamp if clock_in else None,
        clock_out=clock_out.timestamp if clock_out else None,
        break_minutes=break_minutes,
        total_minutes=total_minutes,
        overtime_minutes=rule.overtime(total_minutes),
        is_within_geofence=clock_in.is_within_geofence if clock_in else False,
    )


def reconstruct_attendance(
    events: Iterable[PunchEvent],
    rule: Optional[OvertimeRule] = None,
    tz: Optional[str] = None,
) -> List[DailyAttendance]:
    """Rebuild daily attendance for one staff member from raw punches.

    Punches may arrive in any order. They are bucketed by calendar day
    (venue-local when ``tz`` is given) and each non-empty day yields one
    record. Within a day the first clock-in and the last clock-out bound the
    worked span, so intermediate out/in pairs are absorbed into it. A shift
    crossing midnight produces two partial records.

    Records come back most recent day first. Incomplete data never raises:
    missing punches and unpaired breaks count as zero.
    """
    rule = rule or OvertimeRule()

    by_day: Dict[date, List[PunchEvent]] = {}
    for event in sort_punches(events):
        by_day.setdefault(local_day(event.timestamp, tz), []).append(event)

    records = [summarize_day(day, day_events, rule) for day, day_events in by_day.items()]
    return sorted(records, key=lambda r: r.date, reverse=True)


def get_clock_status(
    events: Iterable[PunchEvent],
    day: Optional[date] = None,
    tz: Optional[str] = None,
) -> ClockStatus:
    """Where a staff member stands on one day.

    Someone on a break is still clocked in; only a clock-out ends the shift.
    """
    if day is None:
        day = datetime.now(ZoneInfo(tz)).date() if tz else date.today()

    last_in = last_out = None
    clocked_in = on_break = False
    for event in sort_punches(events):
        if local_day(event.timestamp, tz) != day:
            continue
        if event.punch_type == PunchType.IN:
            last_in = event.timestamp
            clocked_in, on_break = True, False
        elif event.punch_type == PunchType.OUT:
            last_out = event.timestamp
            clocked_in, on_break = False, False
        elif event.punch_type == PunchType.BREAK_START:
            on_break = clocked_in
        else:
            on_break = False

    if on_break:
        state = ShiftState.ON_BREAK
    elif clocked_in:
        state = ShiftState.ON_SHIFT
    elif last_out is not None:
        state = ShiftState.SHIFT_COMPLETE
    else:
        state = ShiftState.NOT_CHECKED_IN

    return ClockStatus(
        state=state,
        is_clocked_in=clocked_in,
        is_on_break=on_break,
        last_clock_in=last_in,
        last_clock_out=last_out,
    )


def summarize_month(records: Iterable[DailyAttendance], year: int, month: int) -> MonthlySummary:
    """Totals over the completed days (those with a clock-out) of one month."""
    completed = [
        r for r in records
        if r.date.year == year and r.date.month == month and r.clock_out is not None
    ]
    return MonthlySummary(
        year=year,
        month=month,
        shifts=len(completed),
        total_minutes=sum(r.total_minutes for r in completed),
        break_minutes=sum(r.break_minutes for r in completed),
        overtime_minutes=sum(r.overtime_minutes for r in completed),
    )


def filter_attendance(records: Iterable[DailyAttendance], kind: str = AttendanceFilter.ALL) -> List[DailyAttendance]:
    kind = AttendanceFilter(kind)
    if kind == AttendanceFilter.OVERTIME:
        return [r for r in records if r.overtime_minutes > 0]
    if kind == AttendanceFilter.BREAK:
        return [r for r in records if r.break_minutes > 0]
    return list(records)
