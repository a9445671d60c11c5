import uuid
from datetime import datetime, timezone
import enum
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Text, Integer, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
from .base import Base


class AvailabilityStatus(str, enum.Enum):
    AVAILABLE = "Available"
    FULLY_OCCUPIED = "Fully Occupied"
    NOT_YET_READY = "Not Yet Ready"


def utcnow():
    return datetime.now(timezone.utc)


def _default_available_units(context):
    total_units = context.get_current_parameters().get("total_units")
    return 1 if total_units is None else max(total_units, 0)


class Property(Base):
    __tablename__ = "properties"
    __table_args__ = (
        CheckConstraint("total_units >= 0", name="ck_properties_total_units_non_negative"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    landlord_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, default="")
    address = Column(String(255), default="")
    price = Column(Numeric(10, 2), default=0)
    # Unit counts for multi-unit listings (dorms, apartments with several rentable units)
    total_units = Column(Integer, nullable=False, default=1)
    available_units = Column(Integer, nullable=False, default=_default_available_units)
    # Human-facing remark; approvals and manual edits both write it
    availability_status = Column(String(20), nullable=False, default=AvailabilityStatus.AVAILABLE.value, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    landlord = relationship("User", backref="properties")
