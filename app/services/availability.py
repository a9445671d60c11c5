"""Manual availability edits made by a property's landlord (or an admin)."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from app.exceptions import NotFound, ValidationError
from app.models.property import AvailabilityStatus, Property
from app.schemas.auth import Actor
from app.schemas.property import AvailabilityUpdate
from app.services.applications import count_approved
from app.services.authorization import ensure_can_act_on_property

logger = get_logger(__name__)


def clamp_units(value: int, total_units: int) -> int:
    return max(0, min(value, total_units))


def status_for_units(available_units: int) -> AvailabilityStatus:
    if available_units <= 0:
        return AvailabilityStatus.FULLY_OCCUPIED
    return AvailabilityStatus.AVAILABLE


async def set_availability(db: AsyncSession, actor: Actor, property_id: UUID, changes: AvailabilityUpdate) -> Property:
    """
    Apply a landlord's manual override of unit counts and availability remark.

    ``total_units`` is clamped to >= 0 and ``available_units`` to
    ``[0, total_units]`` using the new total when one is given. A new total
    without explicit units recomputes the open units from the approved
    applications. Unless the caller sets ``availability_status``
    explicitly, it follows the resulting ``available_units``. The row is
    locked for the duration of the edit so it serializes with approvals
    claiming units on the same property.
    """
    fields = {k: v for k, v in changes.model_dump(exclude_unset=True).items() if v is not None}
    if not fields:
        raise ValidationError("Provide at least one of availableUnits, totalUnits or availabilityStatus")

    result = await db.execute(select(Property).where(Property.id == property_id).with_for_update())
    property_obj = result.scalar_one_or_none()
    if property_obj is None:
        raise NotFound("Property not found")
    ensure_can_act_on_property(actor, property_obj)

    total_units = property_obj.total_units if property_obj.total_units is not None else 1
    if "total_units" in fields:
        total_units = max(0, fields["total_units"])
        property_obj.total_units = total_units

    current = property_obj.available_units or 0
    if "available_units" in fields:
        available_units = clamp_units(fields["available_units"], total_units)
        units_touched = True
    elif "total_units" in fields:
        # a new total reopens or closes units around the tenants already approved
        approved = await count_approved(db, property_obj.id)
        available_units = clamp_units(total_units - approved, total_units)
        units_touched = available_units != current
    else:
        available_units = clamp_units(current, total_units)
        units_touched = available_units != current
    property_obj.available_units = available_units

    if "availability_status" in fields:
        property_obj.availability_status = fields["availability_status"].value
    elif units_touched:
        property_obj.availability_status = status_for_units(available_units).value

    await db.commit()
    await db.refresh(property_obj)

    logger.info(
        "Availability updated",
        property_id=str(property_obj.id),
        actor_id=str(actor.user_id),
        total_units=property_obj.total_units,
        available_units=property_obj.available_units,
        availability_status=property_obj.availability_status,
    )
    return property_obj
