"""Traffic flow sampling around a point."""

from __future__ import annotations

import logging

from ...config import settings
from ...models.domain import TrafficFlowData
from ..errors import ProviderError
from ..geospatial import destination_point
from ..providers import ProviderClient

logger = logging.getLogger(__name__)

# centre plus the four compass points
SAMPLE_BEARINGS = (0.0, 90.0, 180.0, 270.0)


class TrafficFlowClient(ProviderClient):
    service_name = "TomTom Traffic"

    def __init__(self, base_url: str | None = None, zoom: int | None = None, **kwargs) -> None:
        super().__init__(base_url or settings.traffic_base_url, **kwargs)
        self.zoom = zoom if zoom is not None else settings.flow_zoom

    def segment(self, lat: float, lng: float) -> dict | None:
        """Flow data of the road segment closest to the point, if any."""
        url = f"{self.base_url}/flowSegmentData/absolute/{self.zoom}/json"
        try:
            data = self._get_json(url, {"point": f"{lat},{lng}", "unit": "KMPH"})
        except ProviderError as exc:
            # the provider answers 400 when no road is near the point
            logger.debug(f"No flow data near {lat},{lng}: {exc}")
            return None
        return data.get("flowSegmentData")

    def sample_points(self, lat: float, lng: float, radius_km: float) -> list[tuple[float, float]]:
        offset = radius_km / 2
        return [(lat, lng)] + [destination_point(lat, lng, bearing, offset) for bearing in SAMPLE_BEARINGS]

    def sample(self, lat: float, lng: float, radius_km: float) -> TrafficFlowData:
        segments: list[dict] = []
        for point_lat, point_lng in self.sample_points(lat, lng, radius_km):
            segment = self.segment(point_lat, point_lng)
            if segment is not None:
                segments.append(segment)
        if not segments:
            raise ProviderError(f"No traffic flow data available within {radius_km:g} km of {lat},{lng}.")
        return aggregate_segments(segments)


def aggregate_segments(segments: list[dict]) -> TrafficFlowData:
    count = len(segments)

    def average(key: str) -> float:
        return sum(float(segment.get(key) or 0) for segment in segments) / count

    return TrafficFlowData(
        current_speed=average("currentSpeed"),
        free_flow_speed=average("freeFlowSpeed"),
        current_travel_time=average("currentTravelTime"),
        free_flow_travel_time=average("freeFlowTravelTime"),
        confidence=average("confidence"),
        sample_count=count,
    )
