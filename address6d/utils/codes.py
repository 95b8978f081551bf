"""
Location code encoding.
Derives the short "6D" display code for a coordinate and the approximate
ground cell (~11m x ~11m) that the code stands for.

Two schemes exist and they are not interoperable:
- decimal: interleaves the 2nd-4th decimal digits of |lat| and |lon| ("41-68-92")
- geohash: 16-step bisection per axis, interleaved, base32 ("S00000")
"""
import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel

GEOHASH_ALPHABET = "0123456789bcdefghjkmnpqrstuvwxyz"

PRECISION_FACTOR = 10000  # 4th decimal place, ~11.1 meters at the equator

METERS_PER_DEGREE_LAT = 111132.0
HALF_CELL_METERS = 5.5

BISECTION_STEPS = 16
CHUNK_BITS = 5
CODE_LENGTH = 6


class CodeError(str, Enum):
    INVALID_INPUT = "invalid_input"
    INSUFFICIENT_PRECISION = "insufficient_precision"
    ENCODING_OUT_OF_RANGE = "encoding_out_of_range"


class CodeResult(BaseModel):
    """Either a code or the reason there is none."""
    code: Optional[str] = None
    error: Optional[CodeError] = None

    @property
    def ok(self) -> bool:
        return self.code is not None


class BoundingBox(BaseModel):
    north: float
    south: float
    east: float
    west: float

    def contains(self, lat: float, lon: float) -> bool:
        return self.south <= lat <= self.north and self.west <= lon <= self.east


def is_valid_coordinate(lat, lon) -> bool:
    """True for finite numbers inside [-90, 90] x [-180, 180]."""
    for value in (lat, lon):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if not math.isfinite(value):
            return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def generate_6d_code(lat: float, lon: float) -> CodeResult:
    """
    Generate the decimal-digit code for a coordinate.

    Format: P1P2-P3P4-P5P6 where P1, P3, P5 are the 2nd, 3rd and 4th decimal
    digits of abs(lat) and P2, P4, P6 the same digits of abs(lon).

    Args:
        lat: Latitude
        lon: Longitude

    Returns:
        CodeResult with the code, or with the reason no code was produced
    """
    if not is_valid_coordinate(lat, lon):
        return CodeResult(error=CodeError.INVALID_INPUT)

    lat_dec = _decimals(abs(lat))
    lon_dec = _decimals(abs(lon))

    if len(lat_dec) < 4 or len(lon_dec) < 4:
        return CodeResult(error=CodeError.INSUFFICIENT_PRECISION)

    digits = [lat_dec[1], lon_dec[1], lat_dec[2], lon_dec[2], lat_dec[3], lon_dec[3]]
    if not all(d in "0123456789" for d in digits):
        return CodeResult(error=CodeError.INSUFFICIENT_PRECISION)

    code = f"{digits[0]}{digits[1]}-{digits[2]}{digits[3]}-{digits[4]}{digits[5]}"
    return CodeResult(code=code)


def get_11m_square_bounds(lat: float, lon: float) -> Optional[BoundingBox]:
    """
    Bounds of the 0.0001 x 0.0001 degree square a decimal code stands for.

    The south/west corner is the coordinate floored to the 4th decimal place.
    """
    if not is_valid_coordinate(lat, lon):
        return None

    south, north = _grid_cell(lat)
    west, east = _grid_cell(lon)

    return BoundingBox(
        south=max(-90.0, south),
        west=max(-180.0, west),
        north=min(90.0, north),
        east=min(180.0, east),
    )


def generate_geohash_code(lat: float, lon: float) -> CodeResult:
    """
    Generate the 6-character geohash-style code for a coordinate.

    Each axis is bisected 16 times (a value >= the midpoint yields a 1 bit),
    bits are interleaved longitude first, and the first 30 bits are mapped
    through the geohash alphabet in 5-bit chunks.
    """
    if not is_valid_coordinate(lat, lon):
        return CodeResult(error=CodeError.INVALID_INPUT)

    lat_bits = _bisect_bits(lat, -90.0, 90.0)
    lon_bits = _bisect_bits(lon, -180.0, 180.0)
    bits = "".join(lo + la for lo, la in zip(lon_bits, lat_bits))

    chars = []
    for i in range(CODE_LENGTH):
        value = int(bits[i * CHUNK_BITS:(i + 1) * CHUNK_BITS], 2)
        if value >= len(GEOHASH_ALPHABET):
            return CodeResult(error=CodeError.ENCODING_OUT_OF_RANGE)
        chars.append(GEOHASH_ALPHABET[value])

    return CodeResult(code="".join(chars).upper())


def get_geohash_cell_bounds(lat: float, lon: float) -> Optional[BoundingBox]:
    """
    Approximate 11m x 11m box centred on the coordinate.

    Latitude is clamped at the poles. Longitude is not wrapped at +/-180.
    """
    if not is_valid_coordinate(lat, lon):
        return None

    meters_per_degree_lon = METERS_PER_DEGREE_LAT * math.cos(math.radians(lat))
    lat_delta = HALF_CELL_METERS / METERS_PER_DEGREE_LAT
    lon_delta = HALF_CELL_METERS / meters_per_degree_lon

    return BoundingBox(
        north=min(90.0, lat + lat_delta),
        south=max(-90.0, lat - lat_delta),
        east=lon + lon_delta,
        west=lon - lon_delta,
    )


def _decimals(value: float) -> str:
    """Decimal part of value formatted to 6 places."""
    text = f"{value:.6f}"
    return text.split(".")[1] if "." in text else ""


def _bisect_bits(value: float, low: float, high: float) -> str:
    bits = []
    for _ in range(BISECTION_STEPS):
        mid = (low + high) / 2
        if value >= mid:
            bits.append("1")
            low = mid
        else:
            bits.append("0")
            high = mid
    return "".join(bits)


def _grid_cell(value: float) -> tuple:
    """
    Edges of the 0.0001 degree grid cell holding value.

    value * 10000 can round up onto the next grid line when value sits just
    below it, so the floored index is stepped back when its edge overshoots.
    """
    index = math.floor(value * PRECISION_FACTOR)
    if index / PRECISION_FACTOR > value:
        index -= 1
    return index / PRECISION_FACTOR, (index + 1) / PRECISION_FACTOR
