"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import RouteSearchRequest, RouteSearchResponse, ScoreRoutesRequest, ScoreRoutesResponse
from ...services.errors import ProviderError
from ...services.routing import service as routing_service

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/search", response_model=RouteSearchResponse, status_code=status.HTTP_200_OK)
def search(payload: RouteSearchRequest) -> RouteSearchResponse:
    try:
        return routing_service.search_routes(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except (ProviderError, ConnectionError) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error searching routes: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to search routes: {str(exc)}"
        ) from exc


@router.post("/score", response_model=ScoreRoutesResponse, status_code=status.HTTP_200_OK)
def score(payload: ScoreRoutesRequest) -> ScoreRoutesResponse:
    """Rank caller-supplied candidates with the selection policy."""
    return routing_service.score_routes(payload)
