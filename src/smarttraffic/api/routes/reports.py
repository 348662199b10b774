"""Traffic report endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Path, Query, status

from ...models.domain import Report
from ...persistence.reports import get_report, list_reports
from ...schemas.reports import LocationModel, ReportModel, ReportRequest
from ...services.errors import ProviderError
from ...services.reports import generate_traffic_report

router = APIRouter(prefix="/reports", tags=["reports"])


def _to_model(report: Report) -> ReportModel:
    return ReportModel(
        id=report.id,
        content=report.content,
        location=LocationModel(lat=report.location.lat, lng=report.location.lng, address=report.location.address),
        source=report.source,
        metrics=report.metrics,
        city=report.city,
        radius_km=report.radius_km,
        created_at=report.created_at,
    )


@router.post("/generate", response_model=ReportModel, status_code=status.HTTP_201_CREATED)
def generate(payload: ReportRequest) -> ReportModel:
    try:
        return _to_model(generate_traffic_report(payload))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except (ProviderError, ConnectionError) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error generating traffic report: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate report: {str(exc)}"
        ) from exc


@router.get("", response_model=list[ReportModel])
def get_reports(
    city: str | None = Query(default=None, description="Filter by city"),
    search: str | None = Query(default=None, description="Case-insensitive search across content and address"),
    limit: int | None = Query(default=None, gt=0, description="Maximum number of reports to return"),
) -> list[ReportModel]:
    return [_to_model(report) for report in list_reports(city=city, search=search, limit=limit)]


@router.get("/{report_id}", response_model=ReportModel)
def get_single_report(report_id: str = Path(..., description="Report identifier")) -> ReportModel:
    report = get_report(report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Report {report_id} not found")
    return _to_model(report)
