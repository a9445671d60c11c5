import uuid
from datetime import datetime, timezone
import enum
from sqlalchemy import Column, String, Boolean, DateTime, Enum, Uuid
from .base import Base

# Define Enums
class UserRole(str, enum.Enum):
    admin = "admin"
    landlord = "landlord"
    tenant = "tenant"

class User(Base):
    """Account row owned by the user-management service; read-only here."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, nullable=False)
    full_name = Column(String, nullable=False)
    role = Column(Enum(UserRole, native_enum=False, length=20), default=UserRole.tenant, nullable=False)
    phone_number = Column(String(32))
    profile_pic = Column(String, default="")
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    is_active = Column(Boolean, default=True)
