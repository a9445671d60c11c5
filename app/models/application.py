import uuid
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Index, Uuid, text
from sqlalchemy.orm import relationship
from .base import Base
from .property import utcnow


class ApplicationStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Application(Base):
    """A tenant's request to rent one unit of a property.

    ``landlord_id`` is a copy of the property's owner taken at submission
    time. Status moves ``Pending -> Approved`` or ``Pending -> Rejected``
    once; both targets are terminal.
    """

    __tablename__ = "applications"
    __table_args__ = (
        Index("ix_applications_property_status", "property_id", "status"),
        # at most one Pending application per (tenant, property)
        Index(
            "uq_applications_pending_pair",
            "tenant_id",
            "property_id",
            unique=True,
            postgresql_where=text("status = 'Pending'"),
            sqlite_where=text("status = 'Pending'"),
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    property_id = Column(Uuid, ForeignKey("properties.id"), nullable=False)
    tenant_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    landlord_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    status = Column(String(20), nullable=False, default=ApplicationStatus.PENDING.value)
    message = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    acted_at = Column(DateTime(timezone=True))

    # Relationships
    property = relationship("Property", backref="applications")
    tenant = relationship("User", foreign_keys=[tenant_id])
    landlord = relationship("User", foreign_keys=[landlord_id])
