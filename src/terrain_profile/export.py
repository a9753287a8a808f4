from collections.abc import Sequence

import gpxpy
import gpxpy.gpx

from terrain_profile.errors import EmptyInput
from terrain_profile.models import ProfileSample


def profile_to_gpx(profile: Sequence[ProfileSample], name: str = "Terrain profile") -> str:
    """Render a resolved profile as a single-track GPX document.

    Raises:
        EmptyInput: If the profile has no samples.
    """
    if not profile:
        raise EmptyInput("Cannot export an empty elevation profile")

    gpx = gpxpy.gpx.GPX()
    track = gpxpy.gpx.GPXTrack(name=name)
    gpx.tracks.append(track)
    segment = gpxpy.gpx.GPXTrackSegment()
    track.segments.append(segment)

    for sample in profile:
        segment.points.append(
            gpxpy.gpx.GPXTrackPoint(
                latitude=sample.point.lat,
                longitude=sample.point.lon,
                elevation=sample.elevation,
            )
        )
    return gpx.to_xml()
