from dataclasses import dataclass
from enum import Enum
from typing import Optional

FRONT_DEGREES = 0.0
BACK_DEGREES = 180.0
DEFAULT_FACE_THRESHOLD = 90.0
DEFAULT_FLIP_DURATION = 0.5


class Face(Enum):
    QUESTION = "question"
    ANSWER = "answer"


class FlipPhase(Enum):
    FRONT = "front"
    TRANSITIONING = "transitioning"
    BACK = "back"


@dataclass(frozen=True)
class CubicBezierEasing:
    """Easing curve defined by the two inner control points of a unit cubic Bezier."""

    x1: float
    y1: float
    x2: float
    y2: float

    NEWTON_ITERATIONS = 8
    BISECTION_ITERATIONS = 32
    EPSILON = 1e-6

    @staticmethod
    def _bezier(t: float, p1: float, p2: float) -> float:
        inverse = 1.0 - t
        return 3 * inverse * inverse * t * p1 + 3 * inverse * t * t * p2 + t * t * t

    @staticmethod
    def _bezier_slope(t: float, p1: float, p2: float) -> float:
        inverse = 1.0 - t
        return 3 * inverse * inverse * p1 + 6 * inverse * t * (p2 - p1) + 3 * t * t * (1.0 - p2)

    def _solve_t(self, x: float) -> float:
        t = x
        for _ in range(self.NEWTON_ITERATIONS):
            error = self._bezier(t, self.x1, self.x2) - x
            if abs(error) < self.EPSILON:
                return t
            slope = self._bezier_slope(t, self.x1, self.x2)
            if abs(slope) < self.EPSILON:
                break
            t -= error / slope

        low, high = 0.0, 1.0
        t = x
        for _ in range(self.BISECTION_ITERATIONS):
            value = self._bezier(t, self.x1, self.x2)
            if abs(value - x) < self.EPSILON:
                break
            if value < x:
                low = t
            else:
                high = t
            t = (low + high) / 2
        return t

    def __call__(self, fraction: float) -> float:
        if fraction <= 0.0:
            return 0.0
        if fraction >= 1.0:
            return 1.0
        t = min(1.0, max(0.0, self._solve_t(fraction)))
        return self._bezier(t, self.y1, self.y2)


# Standard "fast out, slow in" material curve
FAST_OUT_SLOW_IN = CubicBezierEasing(0.4, 0.0, 0.2, 1.0)


def is_front_visible(progress: float, threshold: float = DEFAULT_FACE_THRESHOLD) -> bool:
    """The question side faces the viewer until the card has turned `threshold` degrees."""
    return progress < threshold


def face_for(progress: float, threshold: float = DEFAULT_FACE_THRESHOLD) -> Face:
    return Face.QUESTION if is_front_visible(progress, threshold) else Face.ANSWER


def phase_for(progress: float) -> FlipPhase:
    if progress <= FRONT_DEGREES:
        return FlipPhase.FRONT
    if progress >= BACK_DEGREES:
        return FlipPhase.BACK
    return FlipPhase.TRANSITIONING


class FlipAnimation:
    """
    Flip state of a single card.

    The rotation progress (0 to 180 degrees) is a pure function of time and of
    the last tap, so the renderer and the face predicate always read the same
    value. A tap toggles `is_flipped` and animates from wherever the card is
    right now toward the new endpoint.
    """

    def __init__(
        self,
        duration: float = DEFAULT_FLIP_DURATION,
        easing: CubicBezierEasing = FAST_OUT_SLOW_IN,
        face_threshold: float = DEFAULT_FACE_THRESHOLD,
    ):
        if duration <= 0:
            raise ValueError("Flip duration must be greater than zero")
        self.duration = duration
        self.easing = easing
        self.face_threshold = face_threshold
        self.is_flipped = False
        self._start_value = FRONT_DEGREES
        self._start_time: Optional[float] = None

    @property
    def target_value(self) -> float:
        return BACK_DEGREES if self.is_flipped else FRONT_DEGREES

    def tap(self, now: float) -> bool:
        """
        Toggle the card and (re)start its animation at time `now`.

        Returns:
            bool: The new flipped target
        """
        current = self.progress_at(now)
        self.is_flipped = not self.is_flipped
        self._start_value = current
        self._start_time = now
        return self.is_flipped

    def progress_at(self, now: float) -> float:
        if self._start_time is None:
            return self.target_value

        elapsed = now - self._start_time
        if elapsed <= 0:
            return self._start_value
        if elapsed >= self.duration:
            return self.target_value

        fraction = self.easing(elapsed / self.duration)
        return self._start_value + (self.target_value - self._start_value) * fraction

    def is_running(self, now: float) -> bool:
        return self._start_time is not None and now - self._start_time < self.duration

    def phase_at(self, now: float) -> FlipPhase:
        return phase_for(self.progress_at(now))

    def face_at(self, now: float) -> Face:
        return face_for(self.progress_at(now), self.face_threshold)

    def reset(self) -> None:
        """Snap back to the question side without animating."""
        self.is_flipped = False
        self._start_value = FRONT_DEGREES
        self._start_time = None
