from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_session
from app.dependencies.auth import get_current_user
from app.schemas.auth import Actor
from app.schemas.property import AvailabilityResponse, AvailabilityUpdate, PropertyResponse
from app.services.availability import set_availability

router = APIRouter(prefix="/api/properties", tags=["properties"])


@router.patch("/{property_id}/availability", response_model=AvailabilityResponse)
async def update_availability(
    property_id: UUID,
    request: AvailabilityUpdate,
    user: Actor = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Landlord or admin adjusts unit counts or the availability remark by hand."""
    property_obj = await set_availability(db, user, property_id, request)
    return AvailabilityResponse(
        message="Availability updated",
        property=PropertyResponse.model_validate(property_obj),
    )
