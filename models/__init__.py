from .schema import (
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
