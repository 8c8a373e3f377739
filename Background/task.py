from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, status
from pydantic import BaseModel
import logging

from config import VENUE_TIMEZONE, get_overtime_rule, get_venue_geofence
from main import annotate_punch, get_clock_status, reconstruct_attendance, summarize_month
from models.schema import (
    Coordinate,
    DailyAttendance,
    MonthlySummary,
    PunchEvent,
    PunchType,
    VenueGeofence,
)
from utils.helper import local_day, partition_by_staff

app = FastAPI()


class PunchRequest(BaseModel):
    staff_id: str
    punch_type: PunchType
    timestamp: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@app.get("/venue")
def read_venue() -> VenueGeofence:
    return get_venue_geofence()


@app.post("/punch")
def receive_punch(punch: PunchRequest) -> PunchEvent:
    coordinates = None
    if punch.latitude is not None and punch.longitude is not None:
        coordinates = Coordinate(latitude=punch.latitude, longitude=punch.longitude)

    return annotate_punch(
        punch.staff_id,
        punch.punch_type,
        punch.timestamp or datetime.now(timezone.utc),
        coordinates,
        get_venue_geofence(),
    )


@app.post("/attendance")
def reconstruct(events: List[PunchEvent]) -> Dict[str, List[DailyAttendance]]:
    rule = get_overtime_rule()
    return {
        staff_id: reconstruct_attendance(staff_events, rule, VENUE_TIMEZONE)
        for staff_id, staff_events in partition_by_staff(events).items()
    }


@app.post("/attendance/summary")
def monthly_summary(year: int, month: int, events: List[PunchEvent]) -> Dict[str, MonthlySummary]:
    if not 1 <= month <= 12:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid month: {month}",
        )

    rule = get_overtime_rule()
    return {
        staff_id: summarize_month(reconstruct_attendance(staff_events, rule, VENUE_TIMEZONE), year, month)
        for staff_id, staff_events in partition_by_staff(events).items()
    }


def run_end_of_day_check(events: List[PunchEvent], now: Optional[datetime] = None) -> List[str]:
    """Log and return the staff members still clocked in on the current venue day."""
    now = now or datetime.now(timezone.utc)
    today = local_day(now, VENUE_TIMEZONE)
    logging.info("Running end-of-day open session check for all staff")

    still_clocked_in = []
    for staff_id, staff_events in partition_by_staff(events).items():
        clock_status = get_clock_status(staff_events, today, VENUE_TIMEZONE)
        if clock_status.is_clocked_in:
            logging.warning(f"Still clocked in at end of day, staff_id: {staff_id}")
            still_clocked_in.append(staff_id)

    logging.info("End-of-day open session check completed.")
    return still_clocked_in
