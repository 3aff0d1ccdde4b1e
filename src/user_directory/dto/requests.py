"""Request DTOs for API endpoints."""

from datetime import date

from pydantic import BaseModel, Field


class UpdateUserRequest(BaseModel):
    """Request DTO for updating a user.

    Every field is optional; omitted fields are left untouched.
    The handler converts this to an AccountChanges entity.
    """

    username: str | None = Field(None, description="New unique username", min_length=1)
    email: str | None = Field(None, description="New unique email address", min_length=3)
    birthday: date | None = Field(None, description="Date of birth (ISO 8601), not in the future")
    password: str | None = Field(None, description="New plain-text password", min_length=1)
    privilege_id: int | None = Field(
        None,
        description="New privilege level id (applied for admin callers only)",
    )
