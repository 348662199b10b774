from pathlib import Path

import pytest

from smarttraffic.models.domain import TrafficFlowData
from smarttraffic.persistence import reports as report_store
from smarttraffic.persistence.filesystem import FileStorage
from smarttraffic.schemas.reports import ReportRequest
from smarttraffic.services.errors import AIServiceError, ProviderError
from smarttraffic.services.reports import generator

FLOW = TrafficFlowData(
    current_speed=24.0,
    free_flow_speed=60.0,
    current_travel_time=150.0,
    free_flow_travel_time=60.0,
    confidence=0.9,
    sample_count=5,
)


class DummyFlowClient:
    def __init__(self, flow: TrafficFlowData | None = FLOW):
        self.flow = flow
        self.calls: list[tuple] = []

    def sample(self, lat, lng, radius_km):
        self.calls.append((lat, lng, radius_km))
        if self.flow is None:
            raise ProviderError("no data")
        return self.flow


class DummyGeocoder:
    def __init__(self, address: str | None = "Kenyatta Avenue, Nairobi"):
        self.address = address

    def reverse(self, lat, lng):
        return self.address


@pytest.fixture(autouse=True)
def file_storage(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(report_store, "get_supabase_client", lambda: None)
    monkeypatch.setattr(report_store, "FileStorage", lambda: FileStorage(root=tmp_path))
    return FileStorage(root=tmp_path)


def test_congestion_and_delay_are_derived():
    assert FLOW.congestion_percent == 60
    assert FLOW.delay_seconds == 90.0


def test_report_from_city_uses_ai_and_persists(monkeypatch, file_storage):
    prompts: list[str] = []

    def fake_completion(prompt, model=None, json_mode=False, key_type="default"):
        prompts.append(prompt)
        return "### Nairobi\nTraffic is slow."

    monkeypatch.setattr(generator, "get_chat_completion", fake_completion)
    flow_client = DummyFlowClient()

    report = generator.generate_traffic_report(ReportRequest(city="nairobi", radius_km=3), flow_client=flow_client)

    assert report.source == "ai"
    assert report.content == "### Nairobi\nTraffic is slow."
    assert report.city == "Nairobi"
    assert report.location.address == "Nairobi"
    assert report.metrics["congestion_percent"] == 60
    assert report.metrics["sample_count"] == 5
    assert flow_client.calls == [(-1.2921, 36.8219, 3)]
    assert "Estimated congestion: 60%" in prompts[0]
    assert report.id is not None
    assert [r.id for r in report_store.list_reports(storage=file_storage)] == [report.id]


def test_report_falls_back_to_template_when_ai_fails(monkeypatch):
    def failing_completion(*args, **kwargs):
        raise AIServiceError("key missing")

    monkeypatch.setattr(generator, "get_chat_completion", failing_completion)

    report = generator.generate_traffic_report(
        ReportRequest(lat=-4.0435, lng=39.6682, persist=False),
        flow_client=DummyFlowClient(),
        geocoder=DummyGeocoder("Nkrumah Road, Mombasa"),
    )

    assert report.source == "template"
    assert report.content.startswith("### Traffic Report for Nkrumah Road, Mombasa")
    assert "**Heavy congestion**" in report.content
    assert "- **Congestion:** 60%" in report.content
    assert report.id is None
    assert report.radius_km == generator.settings.report_default_radius_km


def test_reverse_geocoding_failure_leaves_address_empty(monkeypatch):
    class FailingGeocoder:
        def reverse(self, lat, lng):
            raise ConnectionError("offline")

    monkeypatch.setattr(generator, "get_chat_completion", lambda *a, **k: "ok")

    report = generator.generate_traffic_report(
        ReportRequest(lat=0.5, lng=35.2, persist=False),
        flow_client=DummyFlowClient(),
        geocoder=FailingGeocoder(),
    )

    assert report.location.address is None


def test_missing_flow_data_propagates(monkeypatch):
    monkeypatch.setattr(generator, "get_chat_completion", lambda *a, **k: "unused")

    with pytest.raises(ProviderError):
        generator.generate_traffic_report(
            ReportRequest(city="Kisumu", persist=False),
            flow_client=DummyFlowClient(flow=None),
        )


def test_unknown_city_is_rejected():
    with pytest.raises(ValueError, match="Gotham"):
        generator.generate_traffic_report(ReportRequest(city="Gotham"), flow_client=DummyFlowClient())


def test_request_needs_city_or_coordinates():
    with pytest.raises(ValueError):
        ReportRequest(lat=1.0)
