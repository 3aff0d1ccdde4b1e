"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import UpdateUserRequest
from .responses import NO_PRIVILEGE, AccountResponse, ErrorResponse, HealthCheckResponse

__all__ = [
    "UpdateUserRequest",
    "AccountResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "NO_PRIVILEGE",
]
