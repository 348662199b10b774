from pathlib import Path

import pytest
from openpyxl import Workbook

from smarttraffic.data import cities_repository


@pytest.fixture(autouse=True)
def clear_city_cache():
    cities_repository.get_cities.cache_clear()
    yield
    cities_repository.get_cities.cache_clear()


def test_default_catalog_and_lookup():
    names = [city.name for city in cities_repository.get_cities()]

    assert names == ["Nairobi", "Mombasa", "Kisumu", "Nakuru", "Eldoret"]
    assert cities_repository.resolve_city("  ELDORET ").latitude == 0.5143
    assert cities_repository.resolve_city("Lamu") is None


def test_catalog_from_csv(tmp_path: Path):
    source = tmp_path / "cities.csv"
    source.write_text("City,Latitude,Longitude\nThika,-1.0333,37.0693\n,1,1\nNyeri,bad,36.95\n", encoding="utf-8")

    cities = cities_repository.get_cities(source)

    assert [(c.name, c.latitude, c.longitude) for c in cities] == [("Thika", -1.0333, 37.0693)]


def test_catalog_from_workbook(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    source = tmp_path / "cities.xlsx"
    wb = Workbook()
    sheet = wb.active
    sheet.append(["City", "Latitude", "Longitude"])
    sheet.append(["Machakos", -1.5177, 37.2634])
    wb.save(source)
    monkeypatch.setattr(cities_repository.settings, "cities_file", source)

    assert cities_repository.resolve_city("machakos").longitude == 37.2634


def test_catalog_missing_columns(tmp_path: Path):
    source = tmp_path / "cities.csv"
    source.write_text("Name,Lat\nThika,-1.03\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Latitude"):
        cities_repository.get_cities(source)
