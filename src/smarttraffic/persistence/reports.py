"""Report history storage: Supabase first, JSON Lines file otherwise."""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, replace
from datetime import datetime, timezone
from typing import Any, Optional

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import Location, Report
from .filesystem import FileStorage


def _report_to_row(report: Report) -> dict[str, Any]:
    row = asdict(report)
    row["created_at"] = report.created_at.isoformat() if report.created_at else None
    return row


def _row_to_report(row: dict[str, Any]) -> Report:
    location = row.get("location") or {}
    created_at = row.get("created_at")
    if isinstance(created_at, str):
        created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
    return Report(
        id=str(row["id"]),
        content=row.get("content") or "",
        location=Location(
            lat=float(location.get("lat", 0.0)),
            lng=float(location.get("lng", 0.0)),
            address=location.get("address"),
        ),
        source=row.get("source") or "ai",
        metrics=row.get("metrics") or {},
        city=row.get("city"),
        radius_km=row.get("radius_km"),
        created_at=created_at,
    )


def _newest_first_key(report: Report) -> datetime:
    return report.created_at or datetime.min.replace(tzinfo=timezone.utc)


def _matches(report: Report, city: Optional[str], search: Optional[str]) -> bool:
    if city and (report.city or "").lower() != city.lower():
        return False
    if search:
        needle = search.lower()
        haystack = f"{report.content} {report.location.address or ''}".lower()
        if needle not in haystack:
            return False
    return True


def save_report(report: Report, storage: FileStorage | None = None) -> Report:
    """Append a report to history, assigning its id and creation time."""
    stored = replace(
        report,
        id=report.id or uuid.uuid4().hex,
        created_at=report.created_at or datetime.now(timezone.utc),
    )
    row = _report_to_row(stored)

    supabase = get_supabase_client()
    if supabase:
        try:
            supabase.table(settings.reports_table).insert(row).execute()
            return stored
        except Exception as e:
            logging.warning(f"Failed to save report to database, writing to file instead: {e}")

    storage = storage or FileStorage()
    storage.append_jsonl(storage.report_log, row)
    return stored


def _load_reports_from_database() -> list[Report] | None:
    supabase = get_supabase_client()
    if not supabase:
        return None
    try:
        response = supabase.table(settings.reports_table).select("*").order("created_at", desc=True).execute()
    except Exception as e:
        logging.warning(f"Database query for reports failed, falling back to file: {e}")
        return None
    reports: list[Report] = []
    for row in response.data or []:
        try:
            reports.append(_row_to_report(row))
        except (KeyError, ValueError, TypeError) as e:
            logging.warning(f"Skipping invalid report row: {e}")
    return reports


def _load_reports_from_file(storage: FileStorage | None = None) -> list[Report]:
    storage = storage or FileStorage()
    reports: list[Report] = []
    for row in storage.read_jsonl(storage.report_log):
        try:
            reports.append(_row_to_report(row))
        except (KeyError, ValueError, TypeError) as e:
            logging.warning(f"Skipping invalid report record: {e}")
    reports.sort(key=_newest_first_key, reverse=True)
    return reports


def _load_reports(storage: FileStorage | None = None) -> list[Report]:
    """Database rows merged with reports that fell back to the file, newest first."""
    file_reports = _load_reports_from_file(storage)
    database_reports = _load_reports_from_database()
    if database_reports is None:
        return file_reports

    merged = {report.id: report for report in file_reports}
    # the database copy wins when a report exists in both
    merged.update((report.id, report) for report in database_reports)
    reports = list(merged.values())
    reports.sort(key=_newest_first_key, reverse=True)
    return reports


def list_reports(
    *,
    city: Optional[str] = None,
    search: Optional[str] = None,
    limit: Optional[int] = None,
    storage: FileStorage | None = None,
) -> list[Report]:
    """Stored reports, newest first."""
    reports = _load_reports(storage)

    matched: list[Report] = []
    for report in reports:
        if not _matches(report, city, search):
            continue
        matched.append(report)
        if limit and len(matched) >= limit:
            break
    return matched


def get_report(report_id: str, storage: FileStorage | None = None) -> Report | None:
    for report in list_reports(storage=storage):
        if report.id == report_id:
            return report
    return None
