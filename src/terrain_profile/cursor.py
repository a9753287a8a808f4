"""Link between a chart sample index and the highlighted map point."""

from collections.abc import Sequence

from terrain_profile.models import GeoPoint


def select_from_chart(current: int | None, index: int, profile_length: int) -> int | None:
    """Return the new cursor after a chart click on `index`.

    Indices outside [0, profile_length) leave the cursor unchanged; chart
    hit testing is imprecise, so this is not an error.
    """
    if isinstance(index, bool) or not isinstance(index, int):
        return current
    if 0 <= index < profile_length:
        return index
    return current


def highlighted_point(samples: Sequence[GeoPoint], cursor: int | None) -> GeoPoint | None:
    """Map point for the current cursor, or None when nothing is highlighted."""
    if cursor is None or not 0 <= cursor < len(samples):
        return None
    return samples[cursor]
