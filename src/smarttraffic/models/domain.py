"""Domain models for cities, locations and stored reports."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True, frozen=True)
class City:
    """A selectable city with its map centre."""

    name: str
    latitude: float
    longitude: float


@dataclass(slots=True)
class Location:
    lat: float
    lng: float
    address: Optional[str] = None


@dataclass(slots=True)
class TrafficFlowData:
    """Traffic flow averaged over the sample points of an area."""

    current_speed: float
    free_flow_speed: float
    current_travel_time: float
    free_flow_travel_time: float
    confidence: float
    sample_count: int

    @property
    def congestion_percent(self) -> int:
        if self.free_flow_speed <= 0:
            return 0
        ratio = 1 - (self.current_speed / self.free_flow_speed)
        return max(0, min(100, round(ratio * 100)))

    @property
    def delay_seconds(self) -> float:
        return max(self.current_travel_time - self.free_flow_travel_time, 0.0)


@dataclass(slots=True)
class Report:
    """A generated traffic report as kept in report history."""

    content: str
    location: Location
    source: str
    metrics: dict = field(default_factory=dict)
    city: Optional[str] = None
    radius_km: Optional[float] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
