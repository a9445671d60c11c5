from app.exceptions import Unauthorized
from app.models.property import Property
from app.schemas.auth import Actor


def can_act_on_property(actor: Actor, property_obj: Property) -> bool:
    """Landlords act on their own listings; admins act on every listing."""
    return actor.is_admin or property_obj.landlord_id == actor.user_id


def ensure_can_act_on_property(actor: Actor, property_obj: Property) -> None:
    if not can_act_on_property(actor, property_obj):
        raise Unauthorized("Unauthorized")
