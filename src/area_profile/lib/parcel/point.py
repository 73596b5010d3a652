"""Sweden bounding box validation and meter-to-degree conversion for parcel points."""

import math

from shapely.geometry import Polygon, box

# Sweden approximate bounding box (WGS84) with a small buffer
SE_MIN_LAT = 55.0
SE_MAX_LAT = 69.1
SE_MIN_LNG = 10.9
SE_MAX_LNG = 24.2


def validate_service_area_coordinates(lat: float, lng: float) -> None:
    """Validate that coordinates fall within the Sweden service area.

    Raises:
        ValueError: If coordinates are outside Sweden's bounding box.
    """
    if not (SE_MIN_LAT <= lat <= SE_MAX_LAT and SE_MIN_LNG <= lng <= SE_MAX_LNG):
        msg = "Coordinates are outside the Sweden service area."
        raise ValueError(msg)


def meters_to_degrees(meters: float, latitude: float) -> float:
    """Convert meters to approximate degrees at a given latitude.

    Uses a latitude-dependent approximation; at Swedish latitudes the
    longitude term dominates.

    Args:
        meters: Distance in meters.
        latitude: WGS84 latitude for longitude scaling.

    Returns:
        Conservative radius in degrees (max of lat/lng conversions).
    """
    if meters <= 0:
        return 0.0

    lat_deg = meters / 111_320
    lng_deg = meters / (111_320 * math.cos(math.radians(latitude)))
    return max(lat_deg, lng_deg)


def point_to_polygon(lon: float, lat: float, buffer_meters: float = 100.0) -> Polygon:
    """Build a square polygon centred on a point.

    Args:
        lon: WGS84 longitude.
        lat: WGS84 latitude.
        buffer_meters: Half-width of the square in meters.

    Returns:
        Axis-aligned square polygon.

    Raises:
        ValueError: If ``buffer_meters`` is not positive.
    """
    if buffer_meters <= 0:
        msg = f"buffer_meters must be positive, got {buffer_meters}"
        raise ValueError(msg)
    radius = meters_to_degrees(buffer_meters, lat)
    return box(lon - radius, lat - radius, lon + radius, lat + radius)
