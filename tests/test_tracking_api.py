import pytest
from rest_framework.test import APIClient, APIRequestFactory, force_authenticate

from accounts.models import User
from accounts.service import AuthService
from shipments.services import PackageService
from store.errors import NetworkError
from tracking import static_map
from tracking_api import services
from tracking_api.views import (
    PackageListView,
    PackageLocationView,
    PackageStatsView,
    PackageStatusView,
    TrackPackageView,
    TrackingEventsView,
)

factory = APIRequestFactory()


@pytest.fixture
def wired(monkeypatch, fake_store):
    """Route the API's service lookups to the fake store, with no maps key."""
    tokens = []

    def package_service(access_token=None):
        tokens.append(access_token)
        return PackageService(fake_store)

    monkeypatch.setattr(services, "get_package_service", package_service)
    monkeypatch.setattr(services, "get_auth_service", lambda: AuthService(fake_store))
    monkeypatch.setattr(static_map, "GOOGLE_MAPS_API_KEY", None)
    return tokens


def staff(role):
    return User(id="u-1", email="ops@swiftmail.test", role=role)


def test_track_package(wired, fake_store, package_row):
    fake_store.select_results.append(package_row)

    response = TrackPackageView.as_view()(factory.get("/"), tracking_number="SMS123456789")

    assert response.status_code == 200
    data = response.data
    assert data["status"] == "in_transit"
    assert data["status_label"] == "In Transit"
    assert data["delivered"] is False
    assert data["current"]["label"] == "Amarillo, TX"
    assert data["origin"]["label"] == "Dallas, TX"
    assert 45 < data["progress"]["percent_complete"] < 60
    assert data["progress"]["eta_label"] == "6h remaining"
    assert isinstance(data["progress"]["percent"], int)
    assert data["map_url"] is None


def test_track_package_includes_map_when_key_configured(wired, monkeypatch, fake_store, package_row):
    monkeypatch.setattr(static_map, "GOOGLE_MAPS_API_KEY", "maps-key")
    fake_store.select_results.append({**package_row, "status": "delivered"})

    data = TrackPackageView.as_view()(factory.get("/"), tracking_number="SMS123456789").data

    assert data["delivered"] is True
    assert data["progress"]["percent_complete"] == 100
    assert data["progress"]["eta_label"] == "Delivered"
    assert data["map_url"].startswith(static_map.STATIC_MAP_URL)
    assert "key=maps-key" in data["map_url"]


def test_track_unknown_package_is_404(wired):
    response = TrackPackageView.as_view()(factory.get("/"), tracking_number="NOPE")

    assert response.status_code == 404
    assert response.data["code"] == "NOT_FOUND"


def test_track_package_store_down_is_503(wired, fake_store):
    fake_store.select_results.append(NetworkError("down"))

    response = TrackPackageView.as_view()(factory.get("/"), tracking_number="SMS123456789")

    assert response.status_code == 503
    assert response.data["code"] == "NETWORK_ERROR"


def test_track_package_without_coordinates_is_400(wired, fake_store, package_row):
    fake_store.select_results.append({**package_row, "origin_lat": None})

    response = TrackPackageView.as_view()(factory.get("/"), tracking_number="SMS123456789")

    assert response.status_code == 400
    assert response.data["code"] == "VALIDATION_ERROR"


def test_tracking_events_oldest_first(wired, fake_store, package_row):
    fake_store.select_results.append(package_row)

    response = TrackingEventsView.as_view()(factory.get("/"), tracking_number="SMS123456789")

    assert [e["id"] for e in response.data] == ["evt-1", "evt-2"]
    assert response.data[0]["event_type"] == "created"


def test_package_list_requires_authentication(wired):
    response = PackageListView.as_view()(factory.get("/"))
    assert response.status_code == 401


def test_package_list_rejects_bad_token(wired):
    request = factory.get("/", HTTP_AUTHORIZATION="Bearer not-a-real-token")
    response = PackageListView.as_view()(request)
    assert response.status_code == 401


def test_package_list_resolves_bearer_token(wired, fake_store, package_row):
    fake_store.auth_users["tok-1"] = {"id": "u-1", "email": "ops@swiftmail.test"}
    fake_store.select_results.append({"id": "u-1", "role": "viewer"})
    fake_store.select_results.append([package_row])

    request = factory.get("/", HTTP_AUTHORIZATION="Bearer tok-1")
    response = PackageListView.as_view()(request)

    assert response.status_code == 200
    assert response.data[0]["tracking_number"] == "SMS123456789"
    assert wired == ["tok-1"]


def test_package_list_with_status_filter(wired, fake_store, package_row):
    fake_store.select_results.append([package_row])
    request = factory.get("/", {"status": "in_transit", "limit": 5})
    force_authenticate(request, user=staff("viewer"), token="tok-1")

    response = PackageListView.as_view()(request)

    assert response.status_code == 200
    assert response.data[0]["status_label"] == "In Transit"
    kwargs = fake_store.calls_to("select")[0][3]
    assert kwargs["filters"] == {"status": "in_transit"}
    assert kwargs["limit"] == 5


def test_package_list_search(wired, fake_store):
    request = factory.get("/", {"search": "SMS123"})
    force_authenticate(request, user=staff("agent"), token="tok-1")

    PackageListView.as_view()(request)

    assert "tracking_number.ilike.*SMS123*" in fake_store.calls_to("select")[0][3]["or_filter"]


def test_package_list_bad_status_is_400(wired):
    request = factory.get("/", {"status": "lost"})
    force_authenticate(request, user=staff("viewer"), token="tok-1")
    assert PackageListView.as_view()(request).status_code == 400


def test_plain_user_cannot_list_packages(wired):
    request = factory.get("/")
    force_authenticate(request, user=staff("user"), token="tok-1")
    assert PackageListView.as_view()(request).status_code == 403


def test_stats_need_reports_capability(wired, fake_store):
    request = factory.get("/")
    force_authenticate(request, user=staff("operator"), token="tok-1")
    assert PackageStatsView.as_view()(request).status_code == 403

    fake_store.select_results.append([{"status": "delivered"}])
    request = factory.get("/")
    force_authenticate(request, user=staff("manager"), token="tok-1")
    response = PackageStatsView.as_view()(request)
    assert response.status_code == 200
    assert response.data["delivered"] == 1


def test_update_location(wired, fake_store, package_row):
    fake_store.update_results.append({**package_row, "current_lat": 35.2, "current_lng": -101.8, "current_location": "Canyon, TX"})
    request = factory.patch("/", {"lat": 35.2, "lng": -101.8, "label": "Canyon, TX"}, format="json")
    force_authenticate(request, user=staff("operator"), token="tok-1")

    response = PackageLocationView.as_view()(request, package_id="pkg-1")

    assert response.status_code == 200
    assert response.data["current_location"] == "Canyon, TX"
    assert fake_store.calls_to("update")[0][2]["current_lat"] == 35.2


@pytest.mark.parametrize("payload", [{"lat": 95, "lng": 0, "label": "North"}, {"lat": 10, "lng": 10, "label": "X"}])
def test_update_location_validation(wired, fake_store, payload):
    request = factory.patch("/", payload, format="json")
    force_authenticate(request, user=staff("operator"), token="tok-1")

    response = PackageLocationView.as_view()(request, package_id="pkg-1")

    assert response.status_code == 400
    assert fake_store.calls_to("update") == []


def test_viewer_cannot_update_location(wired):
    request = factory.patch("/", {"lat": 10, "lng": 10, "label": "Somewhere"}, format="json")
    force_authenticate(request, user=staff("viewer"), token="tok-1")
    assert PackageLocationView.as_view()(request, package_id="pkg-1").status_code == 403


def test_update_status(wired, fake_store, package_row):
    fake_store.update_results.append({**package_row, "status": "out_for_delivery"})
    request = factory.post("/", {"status": "out_for_delivery", "location": "Denver, CO"}, format="json")
    force_authenticate(request, user=staff("operator"), token="tok-1")

    response = PackageStatusView.as_view()(request, package_id="pkg-1")

    assert response.status_code == 200
    assert response.data["status"] == "out_for_delivery"
    assert fake_store.calls_to("insert")[0][2]["event_type"] == "out_for_delivery"


def test_routes_are_wired(wired, fake_store, package_row):
    fake_store.select_results.append(package_row)

    response = APIClient().get("/api/v1/track/SMS123456789/")

    assert response.status_code == 200
    assert response.json()["tracking_number"] == "SMS123456789"


def test_package_list_rejects_undecodable_token(wired):
    request = factory.get("/", HTTP_AUTHORIZATION="Bearer \xff\xfe")

    response = PackageListView.as_view()(request)

    assert response.status_code == 401
    assert "invalid characters" in response.data["detail"]


def test_auth_provider_outage_is_503(wired, fake_store):
    fake_store.auth_users["tok-1"] = NetworkError("down")

    response = PackageListView.as_view()(factory.get("/", HTTP_AUTHORIZATION="Bearer tok-1"))

    assert response.status_code == 503
    assert response.data["code"] == "NETWORK_ERROR"


def test_package_list_search_keeps_filters_and_paging(wired, fake_store):
    request = factory.get("/", {"search": "SMS", "status": "in_transit", "limit": 5, "offset": 10})
    force_authenticate(request, user=staff("viewer"), token="tok-1")

    response = PackageListView.as_view()(request)

    assert response.status_code == 200
    kwargs = fake_store.calls_to("select")[0][3]
    assert kwargs["filters"] == {"status": "in_transit"}
    assert kwargs["limit"] == 5
    assert kwargs["offset"] == 10
    assert "tracking_number.ilike.*SMS*" in kwargs["or_filter"]
