"""Two-point selection state machine driven by map clicks."""

from enum import Enum

from terrain_profile.models import GeoPoint, OneSelected, SelectionState, TwoSelected


class Effect(Enum):
    CLEAR_PROFILE = "clear_profile"  # drop profile, samples and cursor
    START_LOOKUP = "start_lookup"  # sample and look up the new A-B segment


def transition(state: SelectionState, point: GeoPoint) -> tuple[SelectionState, list[Effect]]:
    """Apply one map click.

    Empty -> OneSelected, OneSelected -> TwoSelected, and a click on a
    completed pair starts over from the clicked point.

    Returns:
        (next_state, effects) where effects are to be carried out in order.
    """
    if isinstance(state, OneSelected):
        return TwoSelected(state.a, point), [Effect.START_LOOKUP]
    # Empty, or a completed pair being restarted
    return OneSelected(point), [Effect.CLEAR_PROFILE]


def step_number(state: SelectionState) -> int:
    """1 while choosing A, 2 while choosing B, 3 once both are chosen."""
    if isinstance(state, TwoSelected):
        return 3
    if isinstance(state, OneSelected):
        return 2
    return 1
