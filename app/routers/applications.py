from typing import List
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_session
from app.dependencies.auth import get_current_user
from app.dependencies.rate_limit import limit_submissions
from app.schemas.application import (
    ApplicationCreate,
    ApplicationResponse,
    ApproveApplicationResponse,
    PropertyApplication,
    PropertyApplicationsResponse,
    RejectApplicationResponse,
    SubmitApplicationResponse,
    TenantApplication,
)
from app.schemas.auth import Actor
from app.schemas.property import PropertyResponse
from app.services import applications, notifications

router = APIRouter(prefix="/api/applications", tags=["applications"])


@router.post(
    "",
    response_model=SubmitApplicationResponse,
    status_code=201,
    dependencies=[Depends(limit_submissions)],
)
async def submit_application(
    request: ApplicationCreate,
    background_tasks: BackgroundTasks,
    user: Actor = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    application = await applications.submit_application(db, user, request)
    background_tasks.add_task(
        notifications.publish_status_change,
        application.landlord_id,
        "application.submitted",
        {"applicationId": application.id, "propertyId": application.property_id, "status": application.status},
    )
    return SubmitApplicationResponse(
        message="Application submitted",
        application=ApplicationResponse.model_validate(application),
    )


@router.get("/mine", response_model=List[TenantApplication])
async def my_applications(user: Actor = Depends(get_current_user), db: AsyncSession = Depends(get_session)):
    apps = await applications.list_for_tenant(db, user)
    return [TenantApplication.model_validate(a) for a in apps]


@router.get("/property/{property_id}", response_model=PropertyApplicationsResponse)
async def applications_for_property(
    property_id: UUID,
    user: Actor = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    apps = await applications.list_for_property(db, user, property_id)
    return PropertyApplicationsResponse(
        property_id=property_id,
        applications=[PropertyApplication.model_validate(a) for a in apps],
    )


@router.patch("/{application_id}/approve", response_model=ApproveApplicationResponse)
async def approve_application(
    application_id: UUID,
    background_tasks: BackgroundTasks,
    user: Actor = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    application, property_obj = await applications.approve_application(db, user, application_id)
    background_tasks.add_task(
        notifications.publish_status_change,
        application.tenant_id,
        "application.approved",
        {"applicationId": application.id, "propertyId": application.property_id, "status": application.status},
    )
    return ApproveApplicationResponse(
        message="Application approved",
        application=ApplicationResponse.model_validate(application),
        property=PropertyResponse.model_validate(property_obj),
    )


@router.patch("/{application_id}/reject", response_model=RejectApplicationResponse)
async def reject_application(
    application_id: UUID,
    background_tasks: BackgroundTasks,
    user: Actor = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    application = await applications.reject_application(db, user, application_id)
    background_tasks.add_task(
        notifications.publish_status_change,
        application.tenant_id,
        "application.rejected",
        {"applicationId": application.id, "propertyId": application.property_id, "status": application.status},
    )
    return RejectApplicationResponse(
        message="Application rejected",
        application=ApplicationResponse.model_validate(application),
    )
