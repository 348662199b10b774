"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_routing_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.client import check_health as routing_health_check
    return routing_health_check


@router.get("/health/providers", status_code=status.HTTP_200_OK)
def health_providers() -> dict:
    """Report which external services are configured and whether routing answers."""
    try:
        routing_reachable = _get_routing_health_check()()
        routing_error = None
    except Exception as e:
        routing_reachable = False
        routing_error = str(e)

    payload = {
        "routing": {
            "configured": bool(settings.tomtom_api_key),
            "healthy": routing_reachable,
        },
        "ai": {"configured": bool(settings.llm_api_key)},
        "database": {"configured": bool(settings.supabase_url and settings.supabase_key)},
    }
    if routing_error:
        payload["routing"]["error"] = routing_error
    return payload
