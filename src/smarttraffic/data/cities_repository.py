"""City catalog with an optional spreadsheet override."""

from __future__ import annotations

import csv
import logging
from functools import lru_cache
from pathlib import Path

from openpyxl import load_workbook

from ..config import settings
from ..models.domain import City

DEFAULT_CITIES: tuple[City, ...] = (
    City(name="Nairobi", latitude=-1.2921, longitude=36.8219),
    City(name="Mombasa", latitude=-4.0435, longitude=39.6682),
    City(name="Kisumu", latitude=-0.1022, longitude=34.7617),
    City(name="Nakuru", latitude=-0.3031, longitude=36.0800),
    City(name="Eldoret", latitude=0.5143, longitude=35.2698),
)

REQUIRED_COLUMNS = {"City", "Latitude", "Longitude"}


def _rows_from_workbook(path: Path) -> list[tuple]:
    wb = load_workbook(path, data_only=True, read_only=True)
    try:
        return list(wb.active.iter_rows(min_row=1, values_only=True))
    finally:
        wb.close()


def _rows_from_csv(path: Path) -> list[tuple]:
    with path.open("r", encoding="utf-8-sig", newline="") as handle:
        return [tuple(row) for row in csv.reader(handle)]


def _load_cities_from_file(source: Path) -> tuple[City, ...]:
    if not source.exists():
        raise FileNotFoundError(f"City catalog not found: {source}")

    rows = _rows_from_workbook(source) if source.suffix.lower() in {".xlsx", ".xlsm"} else _rows_from_csv(source)
    if not rows:
        raise ValueError(f"City catalog '{source}' is empty.")

    header_map = {str(name).strip(): idx for idx, name in enumerate(rows[0]) if name is not None}
    missing_columns = REQUIRED_COLUMNS - set(header_map)
    if missing_columns:
        raise ValueError(f"City catalog missing columns: {', '.join(sorted(missing_columns))}")

    cities: list[City] = []
    for row in rows[1:]:
        name = row[header_map["City"]]
        if not name:
            continue
        try:
            cities.append(
                City(
                    name=str(name).strip(),
                    latitude=float(row[header_map["Latitude"]]),
                    longitude=float(row[header_map["Longitude"]]),
                )
            )
        except (TypeError, ValueError) as e:
            logging.warning(f"Skipping invalid city row {row!r}: {e}")
    return tuple(cities)


@lru_cache()
def get_cities(source: Path | None = None) -> tuple[City, ...]:
    """Cities from the configured catalog file, or the built-in list."""
    path = source or settings.cities_file
    if path is None:
        return DEFAULT_CITIES
    return _load_cities_from_file(path)


def resolve_city(name: str) -> City | None:
    wanted = name.strip().lower()
    for city in get_cities():
        if city.name.lower() == wanted:
            return city
    return None
