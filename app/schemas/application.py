from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import AliasChoices, ConfigDict, Field

from app.models.application import ApplicationStatus
from app.schemas.property import CamelModel, PropertyResponse, PropertySummary


class ApplicationCreate(CamelModel):
    property_id: UUID
    message: Optional[str] = Field(default=None, max_length=2000)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "propertyId": "4f6d3c1e-2b7a-4c5e-9a0d-8e1f2a3b4c5d",
                "message": "Hi! I'd like to move in at the start of next month.",
            }
        }
    )


class ApplicationResponse(CamelModel):
    id: UUID
    property_id: UUID
    tenant_id: UUID
    landlord_id: UUID
    status: ApplicationStatus
    message: str = ""
    created_at: datetime
    acted_at: Optional[datetime] = None


class UserSummary(CamelModel):
    id: UUID
    full_name: str
    profile_pic: Optional[str] = ""
    contact_number: Optional[str] = Field(
        default="",
        validation_alias=AliasChoices("contactNumber", "contact_number", "phone_number"),
        serialization_alias="contactNumber",
    )


class TenantSummary(UserSummary):
    email: str


class TenantApplication(ApplicationResponse):
    """An application as shown to the tenant, with property and landlord display info."""

    property: Optional[PropertySummary] = None
    landlord: Optional[UserSummary] = None


class PropertyApplication(ApplicationResponse):
    tenant: Optional[TenantSummary] = None


class PropertyApplicationsResponse(CamelModel):
    property_id: UUID
    applications: List[PropertyApplication]


class SubmitApplicationResponse(CamelModel):
    message: str
    application: ApplicationResponse


class ApproveApplicationResponse(CamelModel):
    message: str
    application: ApplicationResponse
    property: PropertyResponse


class RejectApplicationResponse(CamelModel):
    message: str
    application: ApplicationResponse
