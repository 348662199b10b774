"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def destination_point(lat: float, lon: float, bearing: float, distance_km: float) -> tuple[float, float]:
    """Point reached from (lat, lon) after ``distance_km`` along ``bearing`` degrees."""

    phi1 = math.radians(lat)
    lambda1 = math.radians(lon)
    theta = math.radians(bearing)
    delta = distance_km / EARTH_RADIUS_KM

    phi2 = math.asin(math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(delta) * math.cos(theta))
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )
    return math.degrees(phi2), (math.degrees(lambda2) + 540) % 360 - 180


def simplify_route(coordinates: Sequence[tuple[float, float]], factor: int = 3) -> list[tuple[float, float]]:
    """Keep every ``factor``-th point, always retaining the first and last points."""

    if not coordinates:
        return []
    if factor <= 1:
        return list(coordinates)

    simplified = [coordinates[0]]
    for i in range(factor, len(coordinates), factor):
        simplified.append(coordinates[i])

    last_index = len(coordinates) - 1
    if last_index > 0 and last_index % factor != 0:
        simplified.append(coordinates[last_index])
    return simplified
