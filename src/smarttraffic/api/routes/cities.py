"""City catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Path, status

from ...data.cities_repository import get_cities, resolve_city
from ...schemas.cities import CityModel

router = APIRouter(prefix="/cities", tags=["cities"])


@router.get("", response_model=list[CityModel])
def list_cities() -> list[CityModel]:
    try:
        cities = get_cities()
    except (FileNotFoundError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return [CityModel(name=c.name, latitude=c.latitude, longitude=c.longitude) for c in cities]


@router.get("/{name}", response_model=CityModel)
def get_city(name: str = Path(..., description="City name, case-insensitive")) -> CityModel:
    city = resolve_city(name)
    if city is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown city '{name}'.")
    return CityModel(name=city.name, latitude=city.latitude, longitude=city.longitude)
