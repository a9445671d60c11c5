"""Rental application workflow: submit, approve, reject and list.

Capacity is the count of approved applications against
``Property.total_units`` (unset or zero counts as one unit).
``Property.available_units`` is rewritten from that count on every approval.
Approval claims a unit and moves the application out of ``Pending`` with
conditional UPDATEs inside one transaction, so two approvals racing on the
same property cannot both take the last unit.
"""
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from structlog import get_logger

from app.exceptions import AlreadyFinalized, CapacityExceeded, Conflict, NotFound, Unauthorized
from app.models.application import Application, ApplicationStatus
from app.models.property import AvailabilityStatus, Property, utcnow
from app.models.user import UserRole
from app.schemas.application import ApplicationCreate
from app.schemas.auth import Actor
from app.services.authorization import ensure_can_act_on_property

logger = get_logger(__name__)

DEFAULT_TOTAL_UNITS = 1


def unit_capacity(property_obj: Property) -> int:
    # an unset or zero total still lists one rentable unit
    return property_obj.total_units or DEFAULT_TOTAL_UNITS


async def count_approved(db: AsyncSession, property_id: UUID) -> int:
    result = await db.execute(
        select(func.count(Application.id)).where(
            Application.property_id == property_id,
            Application.status == ApplicationStatus.APPROVED.value,
        )
    )
    return result.scalar_one()


async def find_pending(db: AsyncSession, tenant_id: UUID, property_id: UUID) -> Application | None:
    result = await db.execute(
        select(Application)
        .where(
            Application.tenant_id == tenant_id,
            Application.property_id == property_id,
            Application.status == ApplicationStatus.PENDING.value,
        )
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_application(db: AsyncSession, application_id: UUID) -> Application:
    application = await db.get(Application, application_id)
    if application is None:
        raise NotFound("Application not found")
    return application


async def get_property(db: AsyncSession, property_id: UUID) -> Property:
    property_obj = await db.get(Property, property_id)
    if property_obj is None:
        raise NotFound("Property not found")
    return property_obj


def _ensure_pending(application: Application) -> None:
    if application.status != ApplicationStatus.PENDING:
        raise AlreadyFinalized(f"Application has already been {application.status.lower()}")


async def submit_application(db: AsyncSession, actor: Actor, data: ApplicationCreate) -> Application:
    """Create a ``Pending`` application for ``actor`` on ``data.property_id``."""
    if actor.role != UserRole.tenant:
        raise Unauthorized("Only tenants can apply for properties")

    property_obj = await get_property(db, data.property_id)

    approved = await count_approved(db, property_obj.id)
    if approved >= unit_capacity(property_obj):
        logger.info(
            "Application refused, property full",
            property_id=str(property_obj.id),
            tenant_id=str(actor.user_id),
            approved=approved,
        )
        raise CapacityExceeded("Property is fully occupied and cannot accept new applications")

    if await find_pending(db, actor.user_id, property_obj.id) is not None:
        raise Conflict("You already have a pending application for this property")

    application = Application(
        property_id=property_obj.id,
        tenant_id=actor.user_id,
        landlord_id=property_obj.landlord_id,
        status=ApplicationStatus.PENDING.value,
        message=data.message or "",
    )
    db.add(application)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent submission won the unique pending-pair index.
        await db.rollback()
        if await find_pending(db, actor.user_id, data.property_id) is not None:
            raise Conflict("You already have a pending application for this property")
        raise
    await db.refresh(application)

    logger.info(
        "Application submitted",
        application_id=str(application.id),
        property_id=str(property_obj.id),
        tenant_id=str(actor.user_id),
    )
    return application


def _approved_count_for_row():
    return (
        select(func.count(Application.id))
        .where(
            Application.property_id == Property.id,
            Application.status == ApplicationStatus.APPROVED.value,
        )
        .correlate(Property)
        .scalar_subquery()
    )


async def approve_application(db: AsyncSession, actor: Actor, application_id: UUID) -> Tuple[Application, Property]:
    """Approve a pending application and claim one unit of its property.

    The unit claim re-checks capacity in the UPDATE's WHERE clause; if no row
    matches the application stays ``Pending`` and ``CapacityExceeded`` is raised.
    """
    application = await get_application(db, application_id)
    property_obj = await get_property(db, application.property_id)
    ensure_can_act_on_property(actor, property_obj)
    _ensure_pending(application)

    property_id = property_obj.id
    now = utcnow()
    approved = _approved_count_for_row()
    capacity = func.coalesce(func.nullif(Property.total_units, 0), DEFAULT_TOTAL_UNITS)
    remaining = capacity - (approved + 1)

    claim = (
        update(Property)
        .where(Property.id == property_id, approved < capacity)
        .values(
            available_units=remaining,
            availability_status=case(
                (remaining <= 0, AvailabilityStatus.FULLY_OCCUPIED.value),
                else_=Property.availability_status,
            ),
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(claim)
    if result.rowcount == 0:
        await db.rollback()
        logger.warning(
            "Approval refused, no units left",
            application_id=str(application_id),
            property_id=str(property_id),
            actor_id=str(actor.user_id),
        )
        raise CapacityExceeded("No available units remaining for this property")

    transition = (
        update(Application)
        .where(
            Application.id == application.id,
            Application.status == ApplicationStatus.PENDING.value,
        )
        .values(status=ApplicationStatus.APPROVED.value, acted_at=now)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(transition)
    if result.rowcount == 0:
        # Decided by someone else between our read and the claim.
        await db.rollback()
        raise AlreadyFinalized("Application has already been decided")

    await db.commit()
    await db.refresh(application)
    await db.refresh(property_obj)

    logger.info(
        "Application approved",
        application_id=str(application.id),
        property_id=str(property_obj.id),
        actor_id=str(actor.user_id),
        available_units=property_obj.available_units,
        availability_status=property_obj.availability_status,
    )
    return application, property_obj


async def reject_application(db: AsyncSession, actor: Actor, application_id: UUID) -> Application:
    application = await get_application(db, application_id)
    property_obj = await get_property(db, application.property_id)
    ensure_can_act_on_property(actor, property_obj)
    _ensure_pending(application)

    transition = (
        update(Application)
        .where(
            Application.id == application.id,
            Application.status == ApplicationStatus.PENDING.value,
        )
        .values(status=ApplicationStatus.REJECTED.value, acted_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(transition)
    if result.rowcount == 0:
        await db.rollback()
        raise AlreadyFinalized("Application has already been decided")

    await db.commit()
    await db.refresh(application)

    logger.info(
        "Application rejected",
        application_id=str(application.id),
        property_id=str(property_obj.id),
        actor_id=str(actor.user_id),
    )
    return application


async def list_for_tenant(db: AsyncSession, actor: Actor) -> List[Application]:
    result = await db.execute(
        select(Application)
        .where(Application.tenant_id == actor.user_id)
        .options(selectinload(Application.property), selectinload(Application.landlord))
        .order_by(Application.created_at.desc())
    )
    return list(result.scalars().all())


async def list_for_property(db: AsyncSession, actor: Actor, property_id: UUID) -> List[Application]:
    property_obj = await get_property(db, property_id)
    ensure_can_act_on_property(actor, property_obj)

    result = await db.execute(
        select(Application)
        .where(Application.property_id == property_obj.id)
        .options(selectinload(Application.tenant))
        .order_by(Application.created_at.desc())
    )
    return list(result.scalars().all())
