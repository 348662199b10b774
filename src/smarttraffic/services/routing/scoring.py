"""Multi-criteria selection of the best route among provider alternatives.

Each candidate's duration, distance and traffic delay are normalised against
the largest value in the set (lower is better, 1 means best-in-set), combined
with the weight triple of the requested preference, and the highest composite
score wins. Ties go to the candidate that appears first.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Callable, Mapping, Sequence

from .models import CandidateRoute, PreferenceWeights, ScoredRoute

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 75
MAX_CONFIDENCE = 99


class Preference(str, Enum):
    FASTEST = "Fastest"
    SHORTEST = "Shortest"
    BALANCED = "Balanced"


PREFERENCE_WEIGHTS: Mapping[Preference, PreferenceWeights] = {
    Preference.FASTEST: PreferenceWeights(duration=0.7, distance=0.2, traffic=0.1),
    Preference.SHORTEST: PreferenceWeights(duration=0.2, distance=0.7, traffic=0.1),
    Preference.BALANCED: PreferenceWeights(duration=0.4, distance=0.4, traffic=0.2),
}


def parse_preference(value: str | Preference, warn: Callable[[str], None] | None = None) -> Preference:
    """Map a preference name to its enum member, substituting Balanced for unknown names."""
    if isinstance(value, Preference):
        return value
    try:
        return Preference(value)
    except ValueError:
        (warn or logger.warning)(f"Invalid routing preference: {value!r}. Defaulting to 'Balanced'.")
        return Preference.BALANCED


def resolve_weights(
    preference: str | Preference,
    weights: Mapping[Preference, PreferenceWeights] | None = None,
    warn: Callable[[str], None] | None = None,
) -> PreferenceWeights:
    table = weights if weights is not None else PREFERENCE_WEIGHTS
    resolved = parse_preference(preference, warn)
    if resolved not in table:
        (warn or logger.warning)(f"No weights configured for {resolved.value!r}. Defaulting to 'Balanced'.")
        return table.get(Preference.BALANCED, PREFERENCE_WEIGHTS[Preference.BALANCED])
    return table[resolved]


def goodness(value: float, maximum: float) -> float:
    """Normalised score in [0, 1]; a metric shared by every candidate scores 1."""
    return 1 - (value / maximum) if maximum > 0 else 1


def composite_score(route: CandidateRoute, maxima: tuple[float, float, float], weights: PreferenceWeights) -> float:
    max_duration, max_distance, max_delay = maxima
    duration_score = goodness(route.travel_time_seconds, max_duration)
    distance_score = goodness(route.length_meters, max_distance)
    traffic_score = goodness(route.traffic_delay_seconds, max_delay)
    return (
        (duration_score * weights.duration)
        + (distance_score * weights.distance)
        + (traffic_score * weights.traffic)
    )


def metric_maxima(candidates: Sequence[CandidateRoute]) -> tuple[float, float, float]:
    max_duration = max_distance = max_delay = 0.0
    for route in candidates:
        if route.travel_time_seconds > max_duration:
            max_duration = route.travel_time_seconds
        if route.length_meters > max_distance:
            max_distance = route.length_meters
        if route.traffic_delay_seconds > max_delay:
            max_delay = route.traffic_delay_seconds
    return max_duration, max_distance, max_delay


def confidence_from_score(score: float) -> int:
    """UI calibration of a composite score into the 75-99 range.

    This is a display heuristic, not a statistical probability. Rounding is
    half-up so values match the dashboard client. A non-finite score, which
    only arises from non-finite metrics, maps to the base confidence.
    """
    if not math.isfinite(score):
        return BASE_CONFIDENCE
    return min(math.floor(score * 100 + 0.5) + BASE_CONFIDENCE, MAX_CONFIDENCE)


def _composite_scores(
    candidates: Sequence[CandidateRoute], triple: PreferenceWeights
) -> list[float]:
    maxima = metric_maxima(candidates)
    return [composite_score(route, maxima, triple) for route in candidates]


def pick_best(candidates: Sequence[CandidateRoute], scores: Sequence[float]) -> ScoredRoute | None:
    """Highest of already computed ``scores``; the earliest candidate wins ties.

    The scan is seeded with the first candidate, so the result always points at
    a real position even when no score compares greater (NaN).
    """
    if not candidates:
        return None

    best_index = 0
    best_score = scores[0]
    for index in range(1, len(candidates)):
        if scores[index] > best_score:
            best_index = index
            best_score = scores[index]

    return ScoredRoute(
        route=candidates[best_index],
        score=best_score,
        confidence=confidence_from_score(best_score),
        index=best_index,
    )


def select_best_route(
    candidates: Sequence[CandidateRoute],
    preference: str | Preference,
    *,
    weights: Mapping[Preference, PreferenceWeights] | None = None,
    warn: Callable[[str], None] | None = None,
) -> ScoredRoute | None:
    """Pick the best candidate for ``preference``.

    Returns ``None`` for an empty candidate list. Unknown preferences fall back
    to Balanced and are reported through ``warn`` (the module logger by
    default). The input sequence is never modified.
    """
    if not candidates:
        return None

    triple = resolve_weights(preference, weights, warn)
    return pick_best(candidates, _composite_scores(candidates, triple))


def score_candidates(
    candidates: Sequence[CandidateRoute],
    preference: str | Preference,
    *,
    weights: Mapping[Preference, PreferenceWeights] | None = None,
) -> list[float]:
    """Composite score of every candidate, in input order, for display."""
    if not candidates:
        return []
    triple = resolve_weights(preference, weights, warn=lambda _message: None)
    return _composite_scores(candidates, triple)
