"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class WaypointModel(BaseModel):
    """A point given either by coordinates or by a catalog city name."""

    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    city: Optional[str] = None
    address: Optional[str] = None

    @model_validator(mode="after")
    def _require_position(self) -> "WaypointModel":
        if self.city is None and (self.lat is None or self.lng is None):
            raise ValueError("A waypoint needs either lat/lng or a city name.")
        return self


class RouteSearchRequest(BaseModel):
    origin: WaypointModel
    destination: WaypointModel
    via: List[WaypointModel] = Field(default_factory=list)
    preference: Optional[str] = Field(
        default=None,
        description="Fastest, Shortest or Balanced. Unknown values fall back to Balanced.",
    )
    travel_mode: Literal["car", "truck", "bicycle", "pedestrian"] = "car"
    include_ai_summary: bool = True


class CandidateRouteModel(BaseModel):
    travel_time_seconds: float = Field(..., ge=0, allow_inf_nan=False)
    length_meters: float = Field(..., ge=0, allow_inf_nan=False)
    traffic_delay_seconds: float = Field(0, ge=0, allow_inf_nan=False)


class ScoredCandidateModel(CandidateRouteModel):
    index: int
    score: float


class BestRouteModel(BaseModel):
    index: int
    score: float
    confidence: int
    route: CandidateRouteModel


class RouteLegModel(BaseModel):
    distance_m: float
    travel_time_s: float
    traffic_delay_s: float
    geometry: List[List[float]]
    instructions: List[str]


class RouteSearchResponse(BaseModel):
    preference: str
    best_route: Optional[BestRouteModel] = None
    leg: Optional[RouteLegModel] = None
    candidates: List[ScoredCandidateModel] = Field(default_factory=list)
    summary: str
    ai_summary: Optional[str] = None
    metadata: dict = Field(default_factory=dict)


class ScoreRoutesRequest(BaseModel):
    candidates: List[CandidateRouteModel]
    preference: str = "Balanced"


class ScoreRoutesResponse(BaseModel):
    preference: str
    best_route: Optional[BestRouteModel] = None
    candidates: List[ScoredCandidateModel] = Field(default_factory=list)
