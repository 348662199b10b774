"""Forward and reverse geocoding through the TomTom search API."""

from __future__ import annotations

from urllib.parse import quote

from ..config import settings
from ..models.domain import Location
from .providers import ProviderClient

MIN_QUERY_LENGTH = 3


class GeocodingClient(ProviderClient):
    service_name = "TomTom Search"

    def __init__(self, base_url: str | None = None, **kwargs) -> None:
        super().__init__(base_url or settings.search_base_url, **kwargs)

    def search(self, text: str, limit: int | None = None) -> list[Location]:
        query = text.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []
        params = {
            "limit": limit or settings.geocoding_limit,
            "countrySet": settings.geocoding_country_set,
            "typeahead": "true",
        }
        data = self._get_json(f"{self.base_url}/search/{quote(query, safe='')}.json", params)
        locations: list[Location] = []
        for result in data.get("results") or []:
            position = result.get("position") or {}
            if "lat" not in position or "lon" not in position:
                continue
            address = (result.get("address") or {}).get("freeformAddress")
            name = (result.get("poi") or {}).get("name")
            locations.append(
                Location(
                    lat=float(position["lat"]),
                    lng=float(position["lon"]),
                    address=f"{name}, {address}" if name and address else (name or address),
                )
            )
        return locations

    def reverse(self, lat: float, lng: float) -> str | None:
        """Freeform address of the closest match, or None when nothing is found."""
        data = self._get_json(f"{self.base_url}/reverseGeocode/{lat},{lng}.json", {"limit": 1})
        addresses = data.get("addresses") or []
        if not addresses:
            return None
        return (addresses[0].get("address") or {}).get("freeformAddress")
