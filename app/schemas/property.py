from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.property import AvailabilityStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PropertyResponse(CamelModel):
    id: UUID
    landlord_id: UUID
    title: str
    total_units: int
    available_units: int
    availability_status: AvailabilityStatus
    updated_at: Optional[datetime] = None


class PropertySummary(CamelModel):
    id: UUID
    title: str
    address: Optional[str] = ""
    price: Optional[Decimal] = None
    total_units: int
    available_units: int
    availability_status: AvailabilityStatus


class AvailabilityUpdate(CamelModel):
    """Manual override of the unit counts; every field is optional."""

    available_units: Optional[int] = None
    total_units: Optional[int] = None
    availability_status: Optional[AvailabilityStatus] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "availableUnits": 2,
                "totalUnits": 4,
            }
        },
    )


class AvailabilityResponse(CamelModel):
    message: str
    property: PropertyResponse
