"""Per-user profile session: selection, lookup, profile and chart cursor.

All state changes happen through the event methods of ProfileSession
(click, complete_lookup, select_from_chart, clear_cursor, reset), which must
be called from one thread. Elevation lookups run on worker threads via
LookupRunner and come back as LookupCompleted events on a queue; the owner
drains that queue on the event thread.

Every lookup is stamped with the session generation at the time it started.
The generation moves on when a new segment is started or the current one is
abandoned, so a result that arrives after that is dropped.
"""

import logging
import queue
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum

from terrain_profile import formatters
from terrain_profile.cursor import highlighted_point, select_from_chart
from terrain_profile.errors import InvalidArgument, LookupFailure
from terrain_profile.geomath import distance
from terrain_profile.models import (
    Empty,
    GeoPoint,
    PathSummary,
    ProfileSample,
    SelectionState,
    TwoSelected,
    selected_points,
)
from terrain_profile.sampler import DEFAULT_SAMPLE_COUNT, build_samples, locations_for, resolve_profile
from terrain_profile.selector import Effect, step_number, transition
from terrain_profile.summary import summarize

logger = logging.getLogger(__name__)


class StatusKind(Enum):
    SELECTING_A = "selecting_a"
    SELECTING_B = "selecting_b"
    COMPUTING = "computing"
    SUCCESS = "success"
    FAILURE = "failure"
    RESET = "reset"


@dataclass(frozen=True)
class Status:
    kind: StatusKind
    message: str
    distance: float | None = None  # meters, once both endpoints are known
    summary: PathSummary | None = None  # only on SUCCESS

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "distance": self.distance,
            "summary": self.summary.to_dict() if self.summary else None,
        }


@dataclass(frozen=True)
class LookupRequest:
    generation: int
    samples: tuple[GeoPoint, ...]


@dataclass(frozen=True)
class LookupCompleted:
    generation: int
    elevations: list[float | None] | None = None
    error: LookupFailure | None = None


class ProfileSession:
    """State of one user's two-point elevation profile."""

    def __init__(
        self,
        dispatch: Callable[[LookupRequest], object] | None = None,
        sample_count: int = DEFAULT_SAMPLE_COUNT,
    ):
        if isinstance(sample_count, bool) or not isinstance(sample_count, int) or sample_count <= 0:
            raise InvalidArgument(f"Sample count must be a positive integer, got {sample_count!r}")
        self.dispatch = dispatch
        self.sample_count = sample_count
        self.state: SelectionState = Empty()
        self.generation = 0
        self.pending_generation: int | None = None
        self.samples: tuple[GeoPoint, ...] = ()
        self.profile: tuple[ProfileSample, ...] = ()
        self.cursor: int | None = None
        self.distance = 0.0
        self.status = Status(StatusKind.SELECTING_A, formatters.initial_message())
        self._observers: list[Callable[[Status], None]] = []

    def subscribe(self, observer: Callable[[Status], None]) -> None:
        """Call observer with every subsequent status transition."""
        self._observers.append(observer)

    @property
    def computing(self) -> bool:
        return self.pending_generation is not None

    @property
    def summary(self) -> PathSummary | None:
        if not self.profile:
            return None
        return summarize(self.profile, self.distance)

    @property
    def highlighted(self) -> GeoPoint | None:
        return highlighted_point(self.samples, self.cursor)

    def click(self, point: GeoPoint) -> Status:
        """Handle a map click on `point`."""
        previous = self.state
        self.state, effects = transition(previous, point)

        for effect in effects:
            if effect is Effect.CLEAR_PROFILE:
                if isinstance(previous, TwoSelected):
                    self.generation += 1
                self._clear_profile()
                self.distance = 0.0
                if isinstance(previous, TwoSelected):
                    self._set_status(Status(StatusKind.SELECTING_B, formatters.restart_message()))
                else:
                    self._set_status(Status(StatusKind.SELECTING_B, formatters.point_a_selected_message()))
            elif effect is Effect.START_LOOKUP:
                self._start_lookup(self.state)
        return self.status

    def complete_lookup(self, completion: LookupCompleted) -> bool:
        """Apply a finished lookup. Returns False if it was stale and dropped."""
        if completion.generation != self.generation or self.pending_generation != completion.generation:
            logger.debug(
                "Dropping stale elevation result for generation %d (current %d)",
                completion.generation,
                self.generation,
            )
            return False

        self.pending_generation = None
        self.cursor = None

        error = completion.error
        if error is None:
            try:
                profile = resolve_profile(self.samples, completion.elevations or [])
            except LookupFailure as e:
                error = e

        if error is not None:
            logger.warning("Elevation profile for generation %d failed: %s", completion.generation, error)
            self.samples = ()
            self.profile = ()
            self._set_status(Status(StatusKind.FAILURE, formatters.failure_message(error), distance=self.distance))
            return True

        self.profile = profile
        summary = summarize(profile, self.distance)
        self._set_status(
            Status(StatusKind.SUCCESS, formatters.success_message(summary), distance=self.distance, summary=summary)
        )
        return True

    def select_from_chart(self, index: int) -> GeoPoint | None:
        """Highlight sample `index`; out-of-range indices are ignored."""
        self.cursor = select_from_chart(self.cursor, index, len(self.profile))
        return self.highlighted

    def clear_cursor(self) -> None:
        self.cursor = None

    def reset(self) -> Status:
        """Forget both endpoints and any profile, abandoning a pending lookup."""
        if not isinstance(self.state, Empty):
            self.generation += 1
        self.state = Empty()
        self._clear_profile()
        self.distance = 0.0
        self._set_status(Status(StatusKind.RESET, formatters.reset_message()))
        return self.status

    def to_dict(self) -> dict:
        """Snapshot of the session for JSON clients."""
        highlighted = self.highlighted
        return {
            "step": step_number(self.state),
            "points": [p.to_dict() for p in selected_points(self.state)],
            "generation": self.generation,
            "computing": self.computing,
            "distance": self.distance,
            "status": self.status.to_dict(),
            "profile": [
                {"lat": s.point.lat, "lon": s.point.lon, "elevation": s.elevation}
                for s in self.profile
            ],
            "cursor": self.cursor,
            "highlighted": highlighted.to_dict() if highlighted else None,
        }

    def _clear_profile(self) -> None:
        # Cursor first so it never points into a replaced profile
        self.cursor = None
        self.profile = ()
        self.samples = ()
        self.pending_generation = None

    def _start_lookup(self, state: TwoSelected) -> None:
        self.generation += 1
        self.cursor = None
        self.profile = ()
        self.distance = distance(state.a, state.b)
        self.samples = build_samples(state.a, state.b, self.sample_count)
        self.pending_generation = self.generation
        self._set_status(
            Status(StatusKind.COMPUTING, formatters.computing_message(self.distance), distance=self.distance)
        )
        if self.dispatch is not None:
            self.dispatch(LookupRequest(generation=self.generation, samples=self.samples))

    def _set_status(self, status: Status) -> None:
        self.status = status
        for observer in self._observers:
            observer(status)


class LookupRunner:
    """Runs elevation lookups off the event thread and queues their completions."""

    def __init__(self, lookup: Callable[[list[tuple[float, float]]], list], executor: Executor | None = None):
        self.lookup = lookup
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="elevation")
        self.completed: "queue.Queue[LookupCompleted]" = queue.Queue()

    def submit(self, request: LookupRequest) -> Future:
        return self._executor.submit(self._run, request)

    def _run(self, request: LookupRequest) -> None:
        try:
            elevations = self.lookup(locations_for(request.samples))
            completion = LookupCompleted(request.generation, elevations=list(elevations))
        except LookupFailure as e:
            completion = LookupCompleted(request.generation, error=e)
        except Exception as e:
            logger.exception("Unexpected error in elevation lookup for generation %d", request.generation)
            completion = LookupCompleted(request.generation, error=LookupFailure(str(e)))
        self.completed.put(completion)

    def drain(self, session: ProfileSession) -> int:
        """Apply every completion already queued. Returns how many were applied."""
        applied = 0
        while True:
            try:
                completion = self.completed.get_nowait()
            except queue.Empty:
                return applied
            if session.complete_lookup(completion):
                applied += 1

    def wait(self, session: ProfileSession, timeout: float | None = None) -> None:
        """Block, applying completions, until the session has no pending lookup.

        Raises:
            TimeoutError: If no completion arrives within timeout seconds.
        """
        while session.computing:
            try:
                completion = self.completed.get(timeout=timeout)
            except queue.Empty:
                raise TimeoutError("Timed out waiting for elevation lookup") from None
            session.complete_lookup(completion)

    def shutdown(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False)
