"""Prompt templates for route summaries and traffic reports."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Location, TrafficFlowData


def route_summary_prompt(
    preference: str,
    distance_km: float,
    duration_min: int,
    delay_min: int,
    confidence: int,
    instructions: Sequence[str],
) -> str:
    key_turns = "; ".join(instructions[:5]) or "none provided"
    return (
        "You are an expert driving assistant AI. Your goal is to provide a clear, conversational, "
        "and helpful summary of a driving route.\n"
        f'The user\'s routing preference was "{preference}".\n'
        f"The route is {distance_km:.1f} km and will take about {duration_min} minutes.\n"
        f"There is a traffic delay of about {delay_min} minutes.\n"
        f"We are {confidence}% confident this is the best route.\n"
        f"Key turns for context: {key_turns}\n\n"
        "Based on this, generate a concise, friendly, 4-6 sentence summary for the driver. "
        "Highlight the key benefits (e.g., fastest, shortest, balanced) and weave in the traffic "
        "information naturally. Do not just list the instructions. "
        'Conclude with a friendly sign-off like "Drive safe!"'
    )


def traffic_report_prompt(location: Location, radius_km: float, flow: TrafficFlowData) -> str:
    place = location.address or f"{location.lat:.4f}, {location.lng:.4f}"
    return (
        "You are a traffic analyst writing a short report for a city traffic dashboard.\n"
        f"Area: {place} (radius {radius_km:g} km).\n"
        f"Average current speed: {flow.current_speed:.0f} km/h; free-flow speed: {flow.free_flow_speed:.0f} km/h.\n"
        f"Average segment travel time: {flow.current_travel_time:.0f} s versus {flow.free_flow_travel_time:.0f} s "
        "in free flow.\n"
        f"Estimated congestion: {flow.congestion_percent}%. Data confidence: {flow.confidence:.2f} "
        f"from {flow.sample_count} sample point(s).\n\n"
        "Write the report in markdown with a level-3 heading, a two-sentence overview, a bullet list "
        "of key observations, and one practical recommendation for drivers. Do not invent incidents "
        "that the data does not support."
    )
