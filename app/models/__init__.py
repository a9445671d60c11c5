from .base import Base
from .user import User, UserRole
from .property import Property, AvailabilityStatus
from .application import Application, ApplicationStatus

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Property",
    "AvailabilityStatus",
    "Application",
    "ApplicationStatus",
]
