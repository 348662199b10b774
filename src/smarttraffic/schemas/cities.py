"""City catalog and geocoding schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class CityModel(BaseModel):
    name: str
    latitude: float
    longitude: float


class GeocodeResultModel(BaseModel):
    lat: float
    lng: float
    address: Optional[str] = None


class ReverseGeocodeModel(BaseModel):
    lat: float
    lng: float
    address: Optional[str] = None
    found: bool
