import logging
from datetime import datetime, date, timezone
from typing import Optional, List, Dict, Iterable
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from models.schema import Coordinate, PunchEvent


def local_day(timestamp: datetime, tz: Optional[str] = None) -> date:
    """Calendar day a punch belongs to.

    Without a timezone the timestamp's own date component is used. With one,
    aware timestamps are converted to that zone first; naive timestamps are
    taken to be UTC.
    """
    if tz is None:
        return timestamp.date()
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(ZoneInfo(tz)).date()


def _parse_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def map_clock_record(row: dict) -> Optional[PunchEvent]:
    """Map a stored clock_records row into a PunchEvent.

    Rows with an unknown clock_type or an unreadable clock_time are rejected
    (logged and returned as None).
    """
    staff_id = row.get("staff_id")
    if staff_id is None:
        logging.error(f"Rejected clock record {row.get('id')}: missing staff_id")
        return None

    try:
        latitude = _parse_float(row.get("latitude"))
        longitude = _parse_float(row.get("longitude"))
        coordinates = None
        if latitude is not None and longitude is not None:
            coordinates = Coordinate(latitude=latitude, longitude=longitude)

        return PunchEvent(
            staff_id=str(staff_id),
            punch_type=row.get("clock_type"),
            timestamp=row.get("clock_time"),
            coordinates=coordinates,
            is_within_geofence=row.get("is_within_geofence") or False,
            distance_meters=_parse_float(row.get("distance_from_venue")),
        )
    except (ValidationError, TypeError, ValueError) as exc:
        logging.error(f"Rejected clock record {row.get('id')}: {exc}")
        return None


def map_clock_records(rows: Iterable[dict]) -> List[PunchEvent]:
    events = []
    for row in rows:
        event = map_clock_record(row)
        if event is not None:
            events.append(event)
    return events


def partition_by_staff(events: Iterable[PunchEvent]) -> Dict[str, List[PunchEvent]]:
    by_staff: Dict[str, List[PunchEvent]] = {}
    for event in events:
        by_staff.setdefault(event.staff_id, []).append(event)
    return by_staff
