from collections.abc import Sequence

from terrain_profile.errors import EmptyInput
from terrain_profile.models import PathSummary, ProfileSample


def summarize(profile: Sequence[ProfileSample], total_distance: float) -> PathSummary:
    """Derive start/end/min/max elevation for a completed profile.

    Raises:
        EmptyInput: If the profile has no samples.
    """
    if not profile:
        raise EmptyInput("Cannot summarize an empty elevation profile")

    elevations = [s.elevation for s in profile]
    return PathSummary(
        total_distance=total_distance,
        start_elevation=elevations[0],
        end_elevation=elevations[-1],
        min_elevation=min(elevations),
        max_elevation=max(elevations),
    )
