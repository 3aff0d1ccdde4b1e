"""Partial account update entity."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class AccountChanges:
    """Requested profile changes. None means "not provided"."""

    username: str | None = None
    email: str | None = None
    birthday: date | None = None
    password: str | None = None
    privilege_id: int | None = None
