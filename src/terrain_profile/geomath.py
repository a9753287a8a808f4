"""Distance and sampling geometry between two map points.

Sample points are spaced by linear interpolation of latitude and longitude,
not along the great circle. Over the short segments picked on a map the
difference is small, and the displayed profile depends on this spacing.
"""

import math

from terrain_profile.errors import InvalidArgument
from terrain_profile.models import GeoPoint

# Earth's mean radius in meters
EARTH_RADIUS_M = 6_371_000


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance between two points using Haversine formula.

    Args:
        lat1, lon1: First point coordinates in degrees
        lat2, lon2: Second point coordinates in degrees

    Returns:
        Distance in meters
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    # Clamp: rounding can push a slightly above 1 for antipodal points
    c = 2 * math.asin(math.sqrt(min(1.0, a)))

    return EARTH_RADIUS_M * c


def distance(p1: GeoPoint, p2: GeoPoint) -> float:
    """Great-circle distance between two points in meters."""
    return haversine_distance(p1.lat, p1.lon, p2.lat, p2.lon)


def interpolate(p1: GeoPoint, p2: GeoPoint, count: int) -> tuple[GeoPoint, ...]:
    """Split the segment p1-p2 into `count` equal steps.

    Returns:
        count + 1 points; the first is p1 and the last is p2.

    Raises:
        InvalidArgument: If count is not a positive integer.
    """
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise InvalidArgument(f"Sample count must be a positive integer, got {count!r}")

    dlat = p2.lat - p1.lat
    dlon = p2.lon - p1.lon
    points = [p1]
    for i in range(1, count):
        ratio = i / count
        points.append(GeoPoint(lat=p1.lat + dlat * ratio, lon=p1.lon + dlon * ratio))
    points.append(p2)
    return tuple(points)
