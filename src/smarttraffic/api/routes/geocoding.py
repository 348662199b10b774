"""Geocoding endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from ...schemas.cities import GeocodeResultModel, ReverseGeocodeModel
from ...services.errors import ProviderError
from ...services.geocoding import GeocodingClient

router = APIRouter(prefix="/geocoding", tags=["geocoding"])


@router.get("/search", response_model=list[GeocodeResultModel])
def search(q: str = Query(..., description="Free-text place or address")) -> list[GeocodeResultModel]:
    try:
        results = GeocodingClient().search(q)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except (ProviderError, ConnectionError) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return [GeocodeResultModel(lat=r.lat, lng=r.lng, address=r.address) for r in results]


@router.get("/reverse", response_model=ReverseGeocodeModel)
def reverse(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
) -> ReverseGeocodeModel:
    try:
        address = GeocodingClient().reverse(lat, lng)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except (ProviderError, ConnectionError) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return ReverseGeocodeModel(lat=lat, lng=lng, address=address, found=address is not None)
