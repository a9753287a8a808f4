"""Elevation profile chart generation."""

import bisect
import io
from collections.abc import Sequence

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for server
import matplotlib.pyplot as plt

from terrain_profile.errors import EmptyInput
from terrain_profile.models import ProfileSample

PROFILE_COLOR = '#228B22'
CURSOR_COLOR = '#1E88E5'


def chart_distances(sample_count: int, total_distance: float) -> list[float]:
    """Distance from A in meters of each sample along the chart x-axis."""
    if sample_count <= 0:
        return []
    if sample_count == 1:
        return [0.0]
    return [total_distance * i / (sample_count - 1) for i in range(sample_count)]


def nearest_index(distances: Sequence[float], x: float) -> int | None:
    """Index of the sample closest to chart position x (meters).

    Returns None for an empty chart. Ties go to the lower index.
    """
    if not distances:
        return None
    pos = bisect.bisect_left(distances, x)
    if pos == 0:
        return 0
    if pos == len(distances):
        return len(distances) - 1
    before = distances[pos - 1]
    after = distances[pos]
    return pos if after - x < x - before else pos - 1


def render_profile_png(
    profile: Sequence[ProfileSample],
    total_distance: float,
    cursor: int | None = None,
    aspect_ratio: float = 2.0,
) -> bytes:
    """Render the elevation profile as a filled line chart.

    Args:
        profile: Resolved elevation samples from A to B
        total_distance: A-B distance in meters
        cursor: Sample index to highlight, if any
        aspect_ratio: Width/height ratio

    Returns:
        PNG image bytes

    Raises:
        EmptyInput: If the profile has no samples.
    """
    if not profile:
        raise EmptyInput("Cannot chart an empty elevation profile")

    distances = chart_distances(len(profile), total_distance)
    elevations = [s.elevation for s in profile]

    fig_height = 4
    fig_width = fig_height * aspect_ratio
    fig, ax = plt.subplots(figsize=(fig_width, fig_height), facecolor='white')

    low, high = min(elevations), max(elevations)
    pad = max((high - low) * 0.1, 1.0)
    floor = low - pad

    ax.fill_between(distances, floor, elevations, color=PROFILE_COLOR, alpha=0.3, linewidth=0)
    ax.plot(distances, elevations, color=PROFILE_COLOR, linewidth=2, label='Elevation (m)')

    if cursor is not None and 0 <= cursor < len(profile):
        ax.axvline(distances[cursor], color=CURSOR_COLOR, linewidth=1, alpha=0.6)
        ax.plot([distances[cursor]], [elevations[cursor]], marker='o', markersize=8,
                color=CURSOR_COLOR, zorder=3)

    ax.set_xlim(0, distances[-1] if distances[-1] > 0 else 1)
    ax.set_ylim(floor, high + pad)
    ax.set_xlabel('Distance (m)', fontsize=10)
    ax.set_ylabel('Elevation (m)', fontsize=10)
    ax.set_title('Terrain profile', fontsize=12, fontweight='bold')
    ax.spines['top'].set_visible(False)
    ax.spines['right'].set_visible(False)
    ax.grid(axis='y', alpha=0.3, linestyle='-', linewidth=0.5)
    ax.legend(loc='upper right', fontsize=9)

    fig.tight_layout()

    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=100, facecolor='white', edgecolor='none')
    plt.close(fig)
    buf.seek(0)
    return buf.getvalue()
