from fastapi import APIRouter, Depends, HTTPException, Query, status
from address6d.dependencies import get_code_service
from address6d.schemas.code import CodeResponse
from address6d.services import CodeService

router = APIRouter()


@router.get("", response_model=CodeResponse)
def get_code(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    service: CodeService = Depends(get_code_service)
):
    """
    Derive the location code and its cell bounds for a coordinate.

    Raises:
        HTTPException 422: If no code can be derived from the coordinate
    """
    result = service.encode(latitude, longitude)
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Could not generate a code: {result.error.value}"
        )

    return CodeResponse(
        code=result.code,
        scheme=service.scheme,
        latitude=latitude,
        longitude=longitude,
        bounds=service.bounds(latitude, longitude)
    )
