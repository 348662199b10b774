"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True, frozen=True)
class CandidateRoute:
    """Summary metrics of one alternative returned by the routing provider."""

    travel_time_seconds: float
    length_meters: float
    traffic_delay_seconds: float = 0.0


@dataclass(slots=True, frozen=True)
class PreferenceWeights:
    duration: float
    distance: float
    traffic: float


@dataclass(slots=True, frozen=True)
class ScoredRoute:
    route: CandidateRoute
    score: float
    confidence: int
    index: int


@dataclass(slots=True)
class RouteLeg:
    distance_m: float
    travel_time_s: float
    traffic_delay_s: float
    geometry: List[tuple[float, float]] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)
