"""Formatting utilities for display."""

from terrain_profile.models import PathSummary


def format_distance(meters: float) -> str:
    """Format meters as X.XX km."""
    return f"{meters / 1000:.2f} km"


def format_elevation(meters: float) -> str:
    """Format elevation rounded to whole meters."""
    return f"{meters:.0f} m"


def point_a_selected_message() -> str:
    return "Point A selected. Click again to choose point B."


def initial_message() -> str:
    return "Click on the map to choose point A."


def restart_message() -> str:
    return "Selection restarted from the clicked point. Click again to choose point B."


def reset_message() -> str:
    return "Cleared. Click on the map to choose a new point A."


def computing_message(distance_m: float) -> str:
    return f"Computing elevation profile over {format_distance(distance_m)}..."


def success_message(summary: PathSummary) -> str:
    """Status line shown once a profile has been resolved."""
    return (
        f"Done! Distance: {format_distance(summary.total_distance)} | "
        f"Elevation: {format_elevation(summary.start_elevation)} -> {format_elevation(summary.end_elevation)} | "
        f"Highest: {format_elevation(summary.max_elevation)} | "
        f"Lowest: {format_elevation(summary.min_elevation)}"
    )


def failure_message(error: Exception) -> str:
    return f"Could not fetch elevation data: {error}"


def step_label(step: int) -> str:
    """Heading for the selection step (1 = choose A, 2 = choose B, 3 = done)."""
    if step == 1:
        return "Step 1: choose point A"
    if step == 2:
        return "Step 2: choose point B"
    return "Done"
