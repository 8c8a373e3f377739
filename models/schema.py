from datetime import datetime, date, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, computed_field, field_validator

DEFAULT_OVERTIME_THRESHOLD_MINUTES = 480


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


# Circular geofence around a venue
class VenueGeofence(BaseModel):
    model_config = ConfigDict(frozen=True)

    center: Coordinate
    radius_meters: float = 100.0


class GeofenceResult(BaseModel):
    is_within_geofence: bool
    distance_meters: Optional[float] = None


class PunchType(str, Enum):
    IN = "in"
    OUT = "out"
    BREAK_START = "break_start"
    BREAK_END = "break_end"


class PunchEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    staff_id: str
    punch_type: PunchType
    timestamp: datetime
    coordinates: Optional[Coordinate] = None
    is_within_geofence: bool = False
    distance_meters: Optional[float] = None

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # Naive punch times are UTC instants
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class DailyAttendance(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    break_minutes: int = 0
    total_minutes: int = 0
    overtime_minutes: int = 0
    is_within_geofence: bool = False

    @computed_field
    @property
    def is_in_progress(self) -> bool:
        return self.clock_in is not None and self.clock_out is None


class OvertimeRule(BaseModel):
    """Threshold beyond which net worked minutes count as overtime."""

    model_config = ConfigDict(frozen=True)

    threshold_minutes: int = DEFAULT_OVERTIME_THRESHOLD_MINUTES

    def overtime(self, total_minutes: int) -> int:
        return max(0, total_minutes - self.threshold_minutes)


class ShiftState(str, Enum):
    NOT_CHECKED_IN = "not_checked_in"
    ON_SHIFT = "on_shift"
    ON_BREAK = "on_break"
    SHIFT_COMPLETE = "shift_complete"


class ClockStatus(BaseModel):
    state: ShiftState
    is_clocked_in: bool
    is_on_break: bool
    last_clock_in: Optional[datetime] = None
    last_clock_out: Optional[datetime] = None


class AttendanceFilter(str, Enum):
    ALL = "all"
    OVERTIME = "overtime"
    BREAK = "break"


class MonthlySummary(BaseModel):
    year: int
    month: int
    shifts: int
    total_minutes: int
    break_minutes: int
    overtime_minutes: int
