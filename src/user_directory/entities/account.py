"""Account and privilege domain entities."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class PrivilegeEntity:
    """A named authorization tier (e.g. "admin")."""

    id: int
    name: str


@dataclass(frozen=True)
class AccountEntity:
    """Public projection of an account joined with its privilege level.

    The password hash is never part of this entity, so anything built
    from it (responses, cache entries) cannot leak it.

    Attributes:
        id: Unique, immutable account id
        username: Unique login name
        email: Unique email address
        birthday: Date of birth, if known
        privilege_id: Reference to the account's privilege level
        privilege_name: Name of that privilege level, None when unresolved
        created_at: When the store created the record
        updated_at: When the store last changed the record
    """

    id: int
    username: str
    email: str
    birthday: date | None
    privilege_id: int | None
    privilege_name: str | None
    created_at: datetime
    updated_at: datetime
