from dataclasses import dataclass

from terrain_profile.errors import InvalidArgument


@dataclass(frozen=True)
class GeoPoint:
    lat: float  # degrees, [-90, 90]
    lon: float  # degrees, [-180, 180]

    def __post_init__(self):
        if not -90.0 <= self.lat <= 90.0:
            raise InvalidArgument(f"Latitude out of range: {self.lat}")
        if not -180.0 <= self.lon <= 180.0:
            raise InvalidArgument(f"Longitude out of range: {self.lon}")

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lon": self.lon}


@dataclass(frozen=True)
class Empty:
    """No endpoint selected yet."""


@dataclass(frozen=True)
class OneSelected:
    a: GeoPoint


@dataclass(frozen=True)
class TwoSelected:
    a: GeoPoint
    b: GeoPoint


SelectionState = Empty | OneSelected | TwoSelected


@dataclass(frozen=True)
class ProfileSample:
    point: GeoPoint
    elevation: float  # meters


@dataclass(frozen=True)
class PathSummary:
    total_distance: float  # meters
    start_elevation: float  # meters
    end_elevation: float  # meters
    min_elevation: float  # meters
    max_elevation: float  # meters

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_distance": self.total_distance,
            "start_elevation": self.start_elevation,
            "end_elevation": self.end_elevation,
            "min_elevation": self.min_elevation,
            "max_elevation": self.max_elevation,
        }


def selected_points(state: SelectionState) -> list[GeoPoint]:
    """Return the endpoints held by a selection state, in click order."""
    if isinstance(state, TwoSelected):
        return [state.a, state.b]
    if isinstance(state, OneSelected):
        return [state.a]
    return []
