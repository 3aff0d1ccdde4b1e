"""Response DTOs for API endpoints."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from user_directory.entities import AccountEntity

NO_PRIVILEGE = "no privilege"


class AccountResponse(BaseModel):
    """Public view of an account. Never carries the password."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Unique account id")
    username: str = Field(..., description="Unique username")
    email: str = Field(..., description="Unique email address")
    birthday: date | None = Field(None, description="Date of birth")
    privilege: str = Field(..., description="Privilege level name, or 'no privilege'")
    privilege_id: int | None = Field(None, description="Privilege level id")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp")
    updated_at: datetime = Field(..., alias="updatedAt", description="Last modification timestamp")

    @classmethod
    def from_entity(cls, account: AccountEntity) -> "AccountResponse":
        """Build the public view of an account entity."""
        return cls(
            id=account.id,
            username=account.username,
            email=account.email,
            birthday=account.birthday,
            privilege=account.privilege_name or NO_PRIVILEGE,
            privilege_id=account.privilege_id,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class ErrorResponse(BaseModel):
    """Response DTO for failed requests."""

    error: str = Field(..., description="Human-readable error message")
    details: str | None = Field(
        None,
        description="Underlying error message (development environment only)",
    )


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    store_healthy: bool = Field(..., description="Whether the user store is reachable")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
