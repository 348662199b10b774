import httpx
import pytest

from smarttraffic.services.errors import ProviderError
from smarttraffic.services.geocoding import GeocodingClient
from smarttraffic.services.geospatial import destination_point, haversine_km, simplify_route
from smarttraffic.services.traffic.flow import TrafficFlowClient, aggregate_segments


def _segment(current: float, free: float, confidence: float = 1.0) -> dict:
    return {
        "currentSpeed": current,
        "freeFlowSpeed": free,
        "currentTravelTime": 100 * free / current,
        "freeFlowTravelTime": 100,
        "confidence": confidence,
    }


def test_simplify_route_keeps_endpoints():
    points = [(float(i), 0.0) for i in range(8)]

    assert simplify_route(points, 3) == [(0.0, 0.0), (3.0, 0.0), (6.0, 0.0), (7.0, 0.0)]
    assert simplify_route(points[:7], 3) == [(0.0, 0.0), (3.0, 0.0), (6.0, 0.0)]
    assert simplify_route(points, 1) == points
    assert simplify_route([], 3) == []


def test_destination_point_distance_matches_haversine():
    lat, lng = destination_point(-1.2921, 36.8219, 90.0, 2.5)

    assert haversine_km(-1.2921, 36.8219, lat, lng) == pytest.approx(2.5, rel=1e-6)


def test_aggregate_segments_averages():
    flow = aggregate_segments([_segment(30, 60, 0.8), _segment(50, 50, 1.0)])

    assert flow.current_speed == 40
    assert flow.free_flow_speed == 55
    assert flow.confidence == pytest.approx(0.9)
    assert flow.sample_count == 2


def test_flow_sample_skips_points_without_roads():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] % 2 == 0:
            return httpx.Response(400, json={"error": "Point too far from nearest existing segment."})
        return httpx.Response(200, json={"flowSegmentData": _segment(20, 40)})

    client = TrafficFlowClient(
        base_url="https://traffic.test/traffic/services/4",
        api_key="k",
        backoff_seconds=0,
        transport=httpx.MockTransport(handler),
    )

    flow = client.sample(-1.2921, 36.8219, 4.0)

    assert calls["count"] == 5
    assert flow.sample_count == 3
    assert flow.congestion_percent == 50


def test_flow_sample_without_any_data_raises():
    client = TrafficFlowClient(
        base_url="https://traffic.test/traffic/services/4",
        api_key="k",
        transport=httpx.MockTransport(lambda request: httpx.Response(400, json={})),
    )

    with pytest.raises(ProviderError):
        client.sample(0.0, 0.0, 2.0)


def test_geocoding_search_and_reverse():
    def handler(request: httpx.Request) -> httpx.Response:
        if "reverseGeocode" in request.url.path:
            return httpx.Response(
                200, json={"addresses": [{"address": {"freeformAddress": "Haile Selassie Avenue, Nairobi"}}]}
            )
        assert request.url.params["countrySet"] == "KE"
        return httpx.Response(
            200,
            json={
                "results": [
                    {"position": {"lat": -1.2833, "lon": 36.8167}, "address": {"freeformAddress": "Nairobi"}},
                    {"poi": {"name": "Westgate"}, "position": {"lat": -1.257, "lon": 36.803}, "address": {"freeformAddress": "Westlands"}},
                    {"address": {"freeformAddress": "no position"}},
                ]
            },
        )

    client = GeocodingClient(
        base_url="https://search.test/search/2", api_key="k", transport=httpx.MockTransport(handler)
    )

    results = client.search("Nairobi")
    assert [r.address for r in results] == ["Nairobi", "Westgate, Westlands"]
    assert results[0].lat == -1.2833
    assert client.reverse(-1.29, 36.82) == "Haile Selassie Avenue, Nairobi"


def test_geocoding_short_query_skips_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = GeocodingClient(base_url="https://search.test/search/2", api_key="k", transport=httpx.MockTransport(handler))

    assert client.search("Na") == []


def test_reverse_geocode_without_match():
    client = GeocodingClient(
        base_url="https://search.test/search/2",
        api_key="k",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"addresses": []})),
    )

    assert client.reverse(0.0, 0.0) is None
