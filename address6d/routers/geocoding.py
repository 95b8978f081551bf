from fastapi import APIRouter, Depends, Query
from address6d.dependencies import get_geocoding_service
from address6d.core.logging_config import logger
from address6d.schemas.common import AddressContext
from address6d.services import GeocodingService

router = APIRouter()


@router.get("/reverse", response_model=AddressContext)
def reverse_geocode(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    service: GeocodingService = Depends(get_geocoding_service)
):
    """
    Sublocality and locality names for a coordinate.

    Failures are reported in the error field; registration can go ahead
    without this context.
    """
    logger.info(f"Reverse geocode: latitude={latitude}, longitude={longitude}")
    return service.reverse_geocode(latitude, longitude)
