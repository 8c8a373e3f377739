from math import radians, sin, cos, sqrt, atan2
from typing import Optional

from models.schema import Coordinate, GeofenceResult, VenueGeofence

EARTH_RADIUS_METERS = 6371000


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two WGS84 points (haversine)."""
    φ1, φ2 = radians(a.latitude), radians(b.latitude)
    Δφ = radians(b.latitude - a.latitude)
    Δλ = radians(b.longitude - a.longitude)

    h = sin(Δφ / 2) ** 2 + cos(φ1) * cos(φ2) * sin(Δλ / 2) ** 2
    c = 2 * atan2(sqrt(h), sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def evaluate(point: Coordinate, fence: VenueGeofence) -> GeofenceResult:
    distance = distance_meters(point, fence.center)
    # Boundary is inclusive
    return GeofenceResult(
        is_within_geofence=distance <= fence.radius_meters,
        distance_meters=distance,
    )


def format_distance(meters: Optional[float]) -> str:
    if meters is None or meters < 0:
        return "Unknown"
    if meters < 1000:
        return f"{round(meters)}m"
    return f"{meters / 1000:.1f}km"
