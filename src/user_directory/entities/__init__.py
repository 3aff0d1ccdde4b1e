"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No persistence concerns
"""

from .account import AccountEntity, PrivilegeEntity
from .caller import CallerIdentity
from .changes import AccountChanges

__all__ = ["AccountEntity", "PrivilegeEntity", "CallerIdentity", "AccountChanges"]
