"""HTTP client for the TomTom routing API."""

from __future__ import annotations

import logging
import math
from typing import Literal, Sequence

import httpx

from ...config import settings
from ..errors import ProviderError
from ..providers import ProviderClient
from .models import CandidateRoute

TravelMode = Literal["car", "truck", "bicycle", "pedestrian"]

logger = logging.getLogger(__name__)


class RoutingClient(ProviderClient):
    service_name = "TomTom Routing"

    def __init__(self, base_url: str | None = None, max_alternatives: int | None = None, **kwargs) -> None:
        super().__init__(base_url or settings.routing_base_url, **kwargs)
        self.max_alternatives = max_alternatives if max_alternatives is not None else settings.max_alternatives

    def calculate_routes(self, waypoints: Sequence[tuple[float, float]], travel_mode: TravelMode = "car") -> dict:
        """Fetch the main route and its alternatives between ``waypoints``.

        Args:
            waypoints: Sequence of (lat, lng) tuples, origin first and destination last.
            travel_mode: Vehicle profile understood by the provider.

        Returns:
            The decoded provider response; ``routes`` keeps provider order.
        """
        if len(waypoints) < 2:
            raise ValueError("At least two waypoints (start and end) are required.")

        locations = ":".join(f"{lat},{lng}" for lat, lng in waypoints)
        params = {
            "traffic": "true",
            "travelMode": travel_mode,
            "routeRepresentation": "polyline",
            "instructionsType": "text",
            "computeTravelTimeFor": "all",
        }
        # alternatives are only supported between two points
        if len(waypoints) == 2 and self.max_alternatives:
            params["maxAlternatives"] = self.max_alternatives
        url = f"{self.base_url}/calculateRoute/{locations}/json"
        data = self._get_json(url, params)
        if "routes" not in data:
            raise ProviderError("Could not find a route between the selected points.")
        logger.info(f"Routing provider returned {len(data['routes'])} route(s) for {len(waypoints)} waypoints")
        return data


def parse_candidates(payload: dict) -> list[CandidateRoute]:
    """Convert provider routes into scoring candidates, preserving order."""
    candidates: list[CandidateRoute] = []
    for position, route in enumerate(payload.get("routes") or []):
        summary = route.get("summary") or {}
        try:
            travel_time = float(summary["travelTimeInSeconds"])
            length = float(summary["lengthInMeters"])
            delay = float(summary.get("trafficDelayInSeconds") or 0)
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderError(f"Route {position} has a missing or invalid travel time, length or delay.") from exc
        if not all(math.isfinite(value) for value in (travel_time, length, delay)):
            raise ProviderError(f"Route {position} has a non-finite travel time, length or delay.")
        candidates.append(
            CandidateRoute(
                travel_time_seconds=max(travel_time, 0.0),
                length_meters=max(length, 0.0),
                traffic_delay_seconds=max(delay, 0.0),
            )
        )
    return candidates


def extract_geometry(route: dict) -> list[tuple[float, float]]:
    """(lat, lng) points of every leg of a provider route, in travel order."""
    points: list[tuple[float, float]] = []
    for leg in route.get("legs") or []:
        for point in leg.get("points") or []:
            points.append((float(point["latitude"]), float(point["longitude"])))
    return points


def extract_instructions(route: dict) -> list[str]:
    guidance = route.get("guidance") or {}
    return [item["message"] for item in guidance.get("instructions") or [] if item.get("message")]


def check_health(base_url: str | None = None, api_key: str | None = None) -> bool:
    """Check routing connectivity with a short request between two Nairobi points."""
    base = base_url or settings.routing_base_url
    key = api_key or settings.tomtom_api_key
    if not base or not key:
        return False
    try:
        url = f"{base.rstrip('/')}/calculateRoute/-1.2921,36.8219:-1.2864,36.8172/json"
        response = httpx.get(url, params={"key": key}, timeout=5.0)
        response.raise_for_status()
        return "routes" in response.json()
    except httpx.HTTPError:
        return False
    except ValueError:
        return False
