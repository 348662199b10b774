"""Route search orchestration: fetch alternatives, pick the best, describe it."""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings
from ...data.cities_repository import resolve_city
from ...schemas.routing import (
    BestRouteModel,
    CandidateRouteModel,
    RouteLegModel,
    RouteSearchRequest,
    RouteSearchResponse,
    ScoredCandidateModel,
    ScoreRoutesRequest,
    ScoreRoutesResponse,
    WaypointModel,
)
from ..ai.client import get_chat_completion
from ..ai.prompts import route_summary_prompt
from ..errors import AIServiceError
from ..geospatial import haversine_km, simplify_route
from .client import RoutingClient, extract_geometry, extract_instructions, parse_candidates
from .models import CandidateRoute, RouteLeg, ScoredRoute
from .scoring import parse_preference, pick_best, score_candidates

logger = logging.getLogger(__name__)

NO_ROUTES_MESSAGE = "No routes found between the selected points."
SUMMARY_ERROR_MESSAGE = "Could not generate AI summary at this time."


def _resolve_waypoint(waypoint: WaypointModel) -> tuple[float, float]:
    if waypoint.lat is not None and waypoint.lng is not None:
        return waypoint.lat, waypoint.lng
    city = resolve_city(waypoint.city or "")
    if city is None:
        raise ValueError(f"Unknown city '{waypoint.city}'.")
    return city.latitude, city.longitude


def _candidate_model(route: CandidateRoute) -> CandidateRouteModel:
    return CandidateRouteModel(
        travel_time_seconds=route.travel_time_seconds,
        length_meters=route.length_meters,
        traffic_delay_seconds=route.traffic_delay_seconds,
    )


def _best_model(scored: ScoredRoute) -> BestRouteModel:
    return BestRouteModel(
        index=scored.index,
        score=scored.score,
        confidence=scored.confidence,
        route=_candidate_model(scored.route),
    )


def _scored_candidates(candidates: Sequence[CandidateRoute], scores: Sequence[float]) -> list[ScoredCandidateModel]:
    return [
        ScoredCandidateModel(index=index, score=score, **_candidate_model(route).model_dump())
        for index, (route, score) in enumerate(zip(candidates, scores))
    ]


def build_leg(scored: ScoredRoute, provider_route: dict) -> RouteLeg:
    """Attach geometry and guidance of the provider route the selection points at."""
    geometry = simplify_route(extract_geometry(provider_route), settings.route_simplify_factor)
    return RouteLeg(
        distance_m=scored.route.length_meters,
        travel_time_s=scored.route.travel_time_seconds,
        traffic_delay_s=scored.route.traffic_delay_seconds,
        geometry=geometry,
        instructions=extract_instructions(provider_route),
    )


def fallback_route_summary(preference: str, leg: RouteLeg) -> str:
    distance_km = leg.distance_m / 1000
    duration_min = round(leg.travel_time_s / 60)
    return (
        f"This route follows your '{preference}' preference. The journey is about {distance_km:.1f} km "
        f"and will take around {duration_min} minutes. Drive safe!"
    )


def generate_route_summary(scored: ScoredRoute, preference: str, leg: RouteLeg) -> str:
    if not settings.ai_route_summaries:
        return fallback_route_summary(preference, leg)
    prompt = route_summary_prompt(
        preference=preference,
        distance_km=leg.distance_m / 1000,
        duration_min=round(leg.travel_time_s / 60),
        delay_min=round(leg.traffic_delay_s / 60),
        confidence=scored.confidence,
        instructions=leg.instructions,
    )
    try:
        return get_chat_completion(prompt, model=settings.llm_routing_model, key_type="routing")
    except AIServiceError as exc:
        logger.error(f"Error generating AI route summary: {exc}")
        return SUMMARY_ERROR_MESSAGE


def search_routes(payload: RouteSearchRequest, client: RoutingClient | None = None) -> RouteSearchResponse:
    preference = parse_preference(payload.preference or settings.default_preference).value
    waypoints = [_resolve_waypoint(point) for point in (payload.origin, *payload.via, payload.destination)]

    client = client or RoutingClient()
    response = client.calculate_routes(waypoints, travel_mode=payload.travel_mode)
    provider_routes = response.get("routes") or []
    candidates = parse_candidates(response)

    origin, destination = waypoints[0], waypoints[-1]
    metadata = {
        "travel_mode": payload.travel_mode,
        "waypoint_count": len(waypoints),
        "candidate_count": len(candidates),
        "straight_line_km": round(haversine_km(origin[0], origin[1], destination[0], destination[1]), 3),
    }

    scores = score_candidates(candidates, preference)
    best = pick_best(candidates, scores)
    if best is None:
        return RouteSearchResponse(preference=preference, summary=NO_ROUTES_MESSAGE, metadata=metadata)

    leg = build_leg(best, provider_routes[best.index])
    summary = f"Selected Route: {leg.distance_m:.0f}m, {leg.travel_time_s:.0f}s"
    ai_summary = generate_route_summary(best, preference, leg) if payload.include_ai_summary else None
    logger.info(
        f"Selected route {best.index} of {len(candidates)} for preference {preference} "
        f"(score={best.score:.3f}, confidence={best.confidence})"
    )

    return RouteSearchResponse(
        preference=preference,
        best_route=_best_model(best),
        leg=RouteLegModel(
            distance_m=leg.distance_m,
            travel_time_s=leg.travel_time_s,
            traffic_delay_s=leg.traffic_delay_s,
            geometry=[[lat, lng] for lat, lng in leg.geometry],
            instructions=leg.instructions,
        ),
        candidates=_scored_candidates(candidates, scores),
        summary=summary,
        ai_summary=ai_summary,
        metadata=metadata,
    )


def score_routes(payload: ScoreRoutesRequest) -> ScoreRoutesResponse:
    """Score caller-supplied candidates without contacting the provider."""
    candidates = [
        CandidateRoute(
            travel_time_seconds=item.travel_time_seconds,
            length_meters=item.length_meters,
            traffic_delay_seconds=item.traffic_delay_seconds,
        )
        for item in payload.candidates
    ]
    preference = parse_preference(payload.preference).value
    scores = score_candidates(candidates, preference)
    best = pick_best(candidates, scores)
    return ScoreRoutesResponse(
        preference=preference,
        best_route=_best_model(best) if best else None,
        candidates=_scored_candidates(candidates, scores),
    )
