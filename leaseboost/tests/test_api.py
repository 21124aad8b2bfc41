"""API endpoint tests"""

import httpx
import pytest
from fastapi.testclient import TestClient

from leaseboost.api.deps import get_http_client, get_settings
from leaseboost.core.config import Settings
from leaseboost.main import app

NO_CREDENTIALS = {
    "GOOGLE_PLACES_API_KEY": None,
    "GOOGLE_MAPS_API_KEY": None,
    "APIFY_API_TOKEN": None,
    "MEETUP_API_KEY": None,
    "FACEBOOK_ACCESS_TOKEN": None,
    "PREDICTHQ_API_TOKEN": None,
    "TICKETMASTER_API_KEY": None,
    "HUNTER_IO_API_KEY": None,
}


def upstream(request):
    """Mocked upstream APIs"""
    if request.url.host == "nominatim.openstreetmap.org":
        if request.url.params["q"] == "nowhere":
            return httpx.Response(200, json=[])
        return httpx.Response(
            200, json=[{"lat": "32.7157", "lon": "-117.1611", "display_name": "1 Market Street, San Diego"}]
        )
    if request.url.host == "app.ticketmaster.com":
        return httpx.Response(200, json={"_embedded": {"events": [{"id": "T1", "name": "Street Fair"}]}})
    return httpx.Response(500)


class TestAPI:
    """Test API endpoints"""

    @pytest.fixture
    def overrides(self):
        return dict(NO_CREDENTIALS)

    @pytest.fixture
    def client(self, overrides):
        """Create test client with mocked settings and upstream HTTP"""

        async def mock_http_client():
            async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as http:
                yield http

        app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, **overrides)
        app.dependency_overrides[get_http_client] = mock_http_client
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_health_check(self, client):
        """Test health check endpoint"""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["providers"] == []

    def test_geocode(self, client):
        response = client.post("/api/geocode", json={"address": "1 Market St, San Diego, CA"})
        assert response.status_code == 200
        body = response.json()
        assert body["latitude"] == pytest.approx(32.7157)
        assert body["displayName"] == "1 Market Street, San Diego"

    def test_geocode_requires_address(self, client):
        response = client.post("/api/geocode", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Address is required"}

    def test_geocode_not_found(self, client):
        response = client.post("/api/geocode", json={"address": "nowhere"})
        assert response.status_code == 404
        assert response.json() == {"error": "Address not found"}

    def test_nearby_without_credentials(self, client):
        response = client.get("/api/places/nearby", params={"lat": 32.7157, "lng": -117.1611})
        assert response.status_code == 200
        body = response.json()
        assert len(body["results"]) == 3
        assert body["message"].startswith("Mock data")

    def test_nearby_rejects_bad_coordinates(self, client):
        response = client.get("/api/places/nearby", params={"lat": 123, "lng": -117.1611})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_events_without_providers(self, client):
        response = client.get("/api/events", params={"lat": 32.7157, "lng": -117.1611})
        assert response.status_code == 200
        body = response.json()
        assert body["events"] == []
        assert body["source"] == "none"
        assert "No event API configured" in body["message"]

    def test_events_from_ticketmaster(self, client, overrides):
        overrides["TICKETMASTER_API_KEY"] = "tm"
        response = client.get("/api/events", params={"lat": 32.7157, "lng": -117.1611, "radius": 5})
        assert response.status_code == 200
        body = response.json()
        assert body["source"] == "ticketmaster"
        assert body["events"][0]["id"] == "tm-T1"
        assert body["events"][0]["onlineEvent"] is False

    def test_events_all_providers_failing(self, client, overrides):
        overrides["PREDICTHQ_API_TOKEN"] = "phq"
        response = client.get("/api/events", params={"lat": 32.7157, "lng": -117.1611})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch events", "events": []}

    def test_enrich_businesses_requires_key(self, client):
        response = client.post("/api/businesses/enrich", json={"businesses": [{"name": "Biz", "placeId": "p1"}]})
        assert response.status_code == 500
        assert "not configured" in response.json()["error"]

    def test_enrich_institutions_nothing_selected(self, client, overrides):
        overrides["HUNTER_IO_API_KEY"] = "hunter"
        payload = {
            "institutions": [{"id": 1, "name": "Qualcomm", "enrichedContact": {"email": "hr@qualcomm.com"}}],
            "institutionIds": ["42"],
        }
        response = client.post("/api/institutions/enrich", json=payload)
        assert response.status_code == 200
        body = response.json()
        assert body["processed"] == 0
        assert body["creditsUsed"] == 0
        assert body["total"] == 1
        assert body["institutions"][0]["id"] == "1"

    def test_maps_config(self, client, overrides):
        response = client.get("/api/maps/config")
        assert response.status_code == 500

        overrides["GOOGLE_MAPS_API_KEY"] = "browser-key"
        response = client.get("/api/maps/config")
        assert response.status_code == 200
        assert response.json() == {"apiKey": "browser-key"}

    def test_invalid_endpoint(self, client):
        """Test invalid endpoint returns 404"""
        response = client.get("/invalid")
        assert response.status_code == 404
