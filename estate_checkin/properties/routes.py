"""FastAPI routes for properties."""

from fastapi import APIRouter, Depends, HTTPException

from estate_checkin.deps import get_property_service
from estate_checkin.errors import PropertyNotFound
from estate_checkin.properties.schemas import Property, PropertyListResponse
from estate_checkin.properties.service import PropertyService

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=PropertyListResponse)
async def get_properties(service: PropertyService = Depends(get_property_service)):
    properties = service.list_properties()
    return PropertyListResponse(properties=properties, total=len(properties))


@router.get("/{property_id}", response_model=Property)
async def get_property(
    property_id: str,
    service: PropertyService = Depends(get_property_service),
):
    try:
        return service.get_property(property_id)
    except PropertyNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
