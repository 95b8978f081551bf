from unittest.mock import MagicMock

import googlemaps
import pytest

from address6d.core.exceptions import UpstreamUnavailableError
from address6d.schemas.common import AddressContext
from address6d.services.geocoding import GeocodingService

MOCK_REVERSE_GEOCODE = [
    {
        "address_components": [
            {"long_name": "Hodan", "types": ["political", "sublocality", "sublocality_level_1"]},
            {"long_name": "Muqdisho", "types": ["locality", "political"]},
            {"long_name": "Soomaaliya", "types": ["country", "political"]},
        ],
        "formatted_address": "Hodan, Muqdisho, Soomaaliya",
    }
]


@pytest.fixture(scope="function")
def maps_client():
    return MagicMock(spec=googlemaps.Client)


@pytest.fixture(scope="function")
def geocoding_service(maps_client):
    return GeocodingService(api_key=None, client=maps_client)


class TestGeocodingService:
    def test_extracts_sublocality_and_locality(self, geocoding_service, maps_client):
        maps_client.reverse_geocode.return_value = MOCK_REVERSE_GEOCODE

        context = geocoding_service.reverse_geocode(2.04695, 45.31825)

        assert context == AddressContext(sublocality="Hodan", locality="Muqdisho")
        maps_client.reverse_geocode.assert_called_once_with(
            (2.04695, 45.31825),
            result_type=["sublocality", "locality"],
            language="so"
        )

    def test_missing_components_become_not_available(self, geocoding_service, maps_client):
        maps_client.reverse_geocode.return_value = [
            {"address_components": [{"long_name": "Muqdisho", "types": ["locality"]}]}
        ]

        context = geocoding_service.reverse_geocode(2.04695, 45.31825)

        assert context.sublocality == "N/A"
        assert context.locality == "Muqdisho"
        assert context.error is None

    def test_empty_results(self, geocoding_service, maps_client):
        maps_client.reverse_geocode.return_value = []

        context = geocoding_service.reverse_geocode(2.04695, 45.31825)

        assert context.error == "No address found for this location."

    def test_api_error_reported_not_raised(self, geocoding_service, maps_client):
        maps_client.reverse_geocode.side_effect = googlemaps.exceptions.ApiError(
            "REQUEST_DENIED", "The provided API key is invalid."
        )

        context = geocoding_service.reverse_geocode(2.04695, 45.31825)

        assert context.sublocality == "N/A"
        assert context.error.startswith("Geocoding failed: REQUEST_DENIED")

    def test_timeout_is_advisory(self, geocoding_service, maps_client):
        maps_client.reverse_geocode.side_effect = googlemaps.exceptions.Timeout()

        context = geocoding_service.reverse_geocode(2.04695, 45.31825)

        assert context.error.startswith("Geocoding failed")

    def test_strict_raises_upstream_unavailable(self, geocoding_service, maps_client):
        maps_client.reverse_geocode.side_effect = googlemaps.exceptions.TransportError("connection reset")

        with pytest.raises(UpstreamUnavailableError):
            geocoding_service.reverse_geocode_strict(2.04695, 45.31825)

    def test_not_configured(self):
        context = GeocodingService(api_key=None).reverse_geocode(2.04695, 45.31825)
        assert context.error == "Geocoding service not configured"

    def test_invalid_coordinates(self, geocoding_service, maps_client):
        context = geocoding_service.reverse_geocode(float("nan"), 45.0)

        assert context.error == "Invalid coordinates"
        maps_client.reverse_geocode.assert_not_called()


class TestReverseGeocodeEndpoint:
    def test_returns_context(self, app, client, maps_client):
        app.state.geocoding_service = GeocodingService(api_key=None, client=maps_client)
        maps_client.reverse_geocode.return_value = MOCK_REVERSE_GEOCODE

        response = client.get(
            "/api/geocode/reverse",
            params={"latitude": 2.04695, "longitude": 45.31825}
        )

        assert response.status_code == 200
        assert response.json() == {"sublocality": "Hodan", "locality": "Muqdisho", "error": None}

    def test_unconfigured_is_still_ok(self, client):
        response = client.get(
            "/api/geocode/reverse",
            params={"latitude": 2.04695, "longitude": 45.31825}
        )

        assert response.status_code == 200
        assert response.json()["error"] == "Geocoding service not configured"

    def test_out_of_range(self, client):
        response = client.get("/api/geocode/reverse", params={"latitude": 95, "longitude": 45})
        assert response.status_code == 400
