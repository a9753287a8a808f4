"""Sample points along a segment and pair them with looked-up elevations."""

from collections.abc import Callable, Sequence

from terrain_profile.errors import ResultMismatch
from terrain_profile.geomath import interpolate
from terrain_profile.models import GeoPoint, ProfileSample

DEFAULT_SAMPLE_COUNT = 50

ElevationLookup = Callable[[list[tuple[float, float]]], list[float]]


def build_samples(a: GeoPoint, b: GeoPoint, count: int = DEFAULT_SAMPLE_COUNT) -> tuple[GeoPoint, ...]:
    """Return the count + 1 sample points from a to b."""
    return interpolate(a, b, count)


def locations_for(samples: Sequence[GeoPoint]) -> list[tuple[float, float]]:
    """Convert samples into the (lat, lon) pairs the elevation service takes."""
    return [(p.lat, p.lon) for p in samples]


def resolve_profile(samples: Sequence[GeoPoint], elevations: Sequence[float | None]) -> tuple[ProfileSample, ...]:
    """Pair each sample with its elevation, index for index.

    Raises:
        ResultMismatch: If the counts differ or any elevation is missing.
    """
    if len(elevations) != len(samples):
        raise ResultMismatch(
            f"Elevation service returned {len(elevations)} results for {len(samples)} samples"
        )
    profile = []
    for i, (point, elevation) in enumerate(zip(samples, elevations)):
        if elevation is None:
            raise ResultMismatch(f"No elevation for sample {i} ({point.lat}, {point.lon})")
        profile.append(ProfileSample(point=point, elevation=float(elevation)))
    return tuple(profile)


def sample_profile(
    a: GeoPoint,
    b: GeoPoint,
    lookup: ElevationLookup,
    count: int = DEFAULT_SAMPLE_COUNT,
) -> tuple[ProfileSample, ...]:
    """Sample the segment a-b and resolve its elevation in one batched lookup.

    Raises:
        LookupFailure: If the lookup fails (ResultMismatch on a count mismatch).
    """
    samples = build_samples(a, b, count)
    elevations = lookup(locations_for(samples))
    return resolve_profile(samples, elevations)
