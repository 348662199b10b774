"""Traffic report generation from live flow metrics."""

from __future__ import annotations

import logging
from dataclasses import asdict

from ...config import settings
from ...data.cities_repository import resolve_city
from ...models.domain import Location, Report, TrafficFlowData
from ...persistence.reports import save_report
from ...schemas.reports import ReportRequest
from ..ai.client import get_chat_completion
from ..ai.prompts import traffic_report_prompt
from ..errors import AIServiceError, ProviderError
from ..geocoding import GeocodingClient
from ..traffic.flow import TrafficFlowClient

logger = logging.getLogger(__name__)


def _resolve_location(payload: ReportRequest) -> tuple[Location, str | None]:
    if payload.lat is not None and payload.lng is not None:
        return Location(lat=payload.lat, lng=payload.lng, address=payload.address), payload.city
    city = resolve_city(payload.city or "")
    if city is None:
        raise ValueError(f"Unknown city '{payload.city}'.")
    return Location(lat=city.latitude, lng=city.longitude, address=payload.address or city.name), city.name


def _fill_address(location: Location, geocoder: GeocodingClient | None) -> None:
    if location.address:
        return
    try:
        location.address = (geocoder or GeocodingClient()).reverse(location.lat, location.lng)
    except (ProviderError, ConnectionError, ValueError) as exc:
        logger.warning(f"Reverse geocoding failed for {location.lat},{location.lng}: {exc}")


def template_report(location: Location, radius_km: float, flow: TrafficFlowData) -> str:
    """Markdown report built without the language model."""
    if flow.congestion_percent >= 50:
        level = "Heavy congestion"
    elif flow.congestion_percent >= 20:
        level = "Moderate traffic"
    else:
        level = "Free-flowing traffic"
    return (
        f"### Traffic Report for {location.address or 'the selected area'}\n\n"
        f"Here are the key traffic metrics within a {radius_km:g}km radius:\n\n"
        f"**{level}**\n"
        f"- **Current speed:** {flow.current_speed:.0f} km/h (free flow {flow.free_flow_speed:.0f} km/h)\n"
        f"- **Congestion:** {flow.congestion_percent}%\n"
        f"- **Delay per segment:** {flow.delay_seconds:.0f} s\n"
        f"- **Data confidence:** {flow.confidence:.2f} from {flow.sample_count} sample point(s)\n"
    )


def generate_traffic_report(
    payload: ReportRequest,
    flow_client: TrafficFlowClient | None = None,
    geocoder: GeocodingClient | None = None,
) -> Report:
    location, city_name = _resolve_location(payload)
    radius_km = payload.radius_km or settings.report_default_radius_km
    _fill_address(location, geocoder)

    flow = (flow_client or TrafficFlowClient()).sample(location.lat, location.lng, radius_km)

    try:
        content = get_chat_completion(traffic_report_prompt(location, radius_km, flow))
        source = "ai"
    except AIServiceError as exc:
        logger.warning(f"AI report generation failed, using template report: {exc}")
        content = template_report(location, radius_km, flow)
        source = "template"

    metrics = asdict(flow)
    metrics["congestion_percent"] = flow.congestion_percent
    metrics["delay_seconds"] = flow.delay_seconds
    report = Report(
        content=content,
        location=location,
        source=source,
        metrics=metrics,
        city=city_name,
        radius_km=radius_km,
    )
    if payload.persist:
        report = save_report(report)
    return report
