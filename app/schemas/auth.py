from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field, field_validator

from app.models.user import UserRole


class Actor(BaseModel):
    """Identity resolved by the user-management service for a bearer token."""

    user_id: UUID = Field(validation_alias=AliasChoices("user_id", "userId", "id"))
    role: UserRole
    email: str | None = None

    @field_validator("role", mode="before")
    def normalize_role(cls, v):
        # user-management hands out "Tenant", "Landlord", ...; "owner" is the legacy landlord role
        if isinstance(v, str):
            v = v.strip().lower()
            return "landlord" if v == "owner" else v
        return v

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin
