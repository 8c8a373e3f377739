import os

from dotenv import load_dotenv

from models.schema import Coordinate, OvertimeRule, VenueGeofence

# Load environment variables from .env file, if it exists
load_dotenv()

# Venue defaults: The Roof, Da Nang
VENUE_LATITUDE = float(os.getenv("VENUE_LATITUDE", "16.0544"))
VENUE_LONGITUDE = float(os.getenv("VENUE_LONGITUDE", "108.2022"))
GEOFENCE_RADIUS_METERS = float(os.getenv("GEOFENCE_RADIUS_METERS", "100"))
VENUE_TIMEZONE = os.getenv("VENUE_TIMEZONE", "Asia/Ho_Chi_Minh")

OVERTIME_THRESHOLD_MINUTES = int(os.getenv("OVERTIME_THRESHOLD_MINUTES", "480"))


def get_venue_geofence() -> VenueGeofence:
    return VenueGeofence(
        center=Coordinate(latitude=VENUE_LATITUDE, longitude=VENUE_LONGITUDE),
        radius_meters=GEOFENCE_RADIUS_METERS,
    )


def get_overtime_rule() -> OvertimeRule:
    return OvertimeRule(threshold_minutes=OVERTIME_THRESHOLD_MINUTES)
