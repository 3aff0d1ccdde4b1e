"""Caller identity entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CallerIdentity:
    """The authenticated requester, as resolved from the bearer token."""

    id: int
    privilege_id: int | None = None
