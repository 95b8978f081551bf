import googlemaps
from typing import Optional, List, Dict, Any
from address6d.core.exceptions import UpstreamUnavailableError
from address6d.core.logging_config import logger
from address6d.schemas.common import AddressContext
from address6d.utils.codes import is_valid_coordinate

NOT_AVAILABLE = "N/A"
RESULT_TYPES = ["sublocality", "locality"]


class GeocodingService:
    """Google Maps reverse geocoding for locality context"""

    def __init__(
        self,
        api_key: Optional[str],
        language: str = "so",
        timeout: float = 10.0,
        retry_timeout: float = 20.0,
        client: Optional[googlemaps.Client] = None
    ):
        self.language = language
        if client is not None:
            self.client = client
        elif api_key:
            self.client = googlemaps.Client(
                key=api_key,
                timeout=timeout,
                retry_timeout=retry_timeout
            )
            logger.info("Google Maps geocoding client initialized")
        else:
            self.client = None
            logger.warning("Google Maps API key not configured - geocoding disabled")

    def reverse_geocode(self, lat: float, lng: float) -> AddressContext:
        """
        Look up sublocality and locality names for a coordinate.

        Geocoding is advisory: every failure is reported in the result's
        error field and never raised.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            AddressContext with names ("N/A" when unknown) and an optional error
        """
        try:
            return self.reverse_geocode_strict(lat, lng)
        except UpstreamUnavailableError as e:
            return _unavailable(f"Geocoding failed: {e.detail}")

    def reverse_geocode_strict(self, lat: float, lng: float) -> AddressContext:
        """
        Same as reverse_geocode but raises when the provider cannot be reached.

        Raises:
            UpstreamUnavailableError: On timeouts and transport failures
        """
        if not is_valid_coordinate(lat, lng):
            return _unavailable("Invalid coordinates")

        if not self.client:
            return _unavailable("Geocoding service not configured")

        try:
            results = self.client.reverse_geocode(
                (lat, lng),
                result_type=RESULT_TYPES,
                language=self.language
            )
        except googlemaps.exceptions.ApiError as e:
            logger.warning(f"Geocoding API returned status {e.status} for ({lat}, {lng})")
            if e.status == "ZERO_RESULTS":
                return _unavailable("No address found for this location.")
            return _unavailable(f"Geocoding failed: {e.status}. {e.message or ''}".strip())
        except (googlemaps.exceptions.Timeout, googlemaps.exceptions.TransportError) as e:
            logger.error(f"Geocoding request failed for ({lat}, {lng}): {str(e)}")
            raise UpstreamUnavailableError("geocoding", str(e) or type(e).__name__)

        if not results:
            return _unavailable("No address found for this location.")

        sublocality, locality = self._extract_components(results[0])
        return AddressContext(
            sublocality=sublocality or NOT_AVAILABLE,
            locality=locality or NOT_AVAILABLE
        )

    def _extract_components(self, result: Dict[str, Any]) -> tuple:
        """
        Pick sublocality and locality names out of the best match.

        The first result is the most specific one Google returns.
        """
        sublocality = None
        locality = None
        components: List[Dict[str, Any]] = result.get("address_components", [])
        for component in components:
            types = component.get("types", [])
            if not sublocality and ("sublocality" in types or "sublocality_level_1" in types):
                sublocality = component.get("long_name")
            if not locality and "locality" in types:
                locality = component.get("long_name")
            if sublocality and locality:
                break
        return sublocality, locality


def _unavailable(error: str) -> AddressContext:
    return AddressContext(sublocality=NOT_AVAILABLE, locality=NOT_AVAILABLE, error=error)
