from typing import Optional
from address6d.core.logging_config import logger
from address6d.utils.codes import (
    BoundingBox,
    CodeResult,
    generate_6d_code,
    generate_geohash_code,
    get_11m_square_bounds,
    get_geohash_cell_bounds,
)

SCHEMES = {
    "decimal": (generate_6d_code, get_11m_square_bounds),
    "geohash": (generate_geohash_code, get_geohash_cell_bounds),
}


class CodeService:
    """
    Issues location codes with the one scheme configured for this deployment.

    Codes from different schemes cannot be translated into each other, so
    every caller goes through this service instead of the encoder functions.
    """

    def __init__(self, scheme: str = "decimal"):
        if scheme not in SCHEMES:
            raise ValueError(f"Unknown code scheme: {scheme}")
        self.scheme = scheme
        self._encode, self._bounds = SCHEMES[scheme]

    def encode(self, lat: float, lon: float) -> CodeResult:
        result = self._encode(lat, lon)
        if not result.ok:
            logger.warning(f"No code for lat={lat}, lon={lon}: {result.error.value}")
        return result

    def bounds(self, lat: float, lon: float) -> Optional[BoundingBox]:
        return self._bounds(lat, lon)

    def normalize(self, code: str) -> str:
        """Canonical form of a user-supplied code: trimmed, and upper case for geohash."""
        code = code.strip()
        return code.upper() if self.scheme == "geohash" else code

    def matches(self, code: str, lat: float, lon: float) -> bool:
        """True if code is the one this scheme derives from the coordinate."""
        result = self.encode(lat, lon)
        return result.ok and result.code == self.normalize(code)
