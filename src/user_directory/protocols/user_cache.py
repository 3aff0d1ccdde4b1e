"""User cache protocol.

Defines the interface for the short-lived, non-authoritative cache that
sits in front of the user store.
"""

from typing import Protocol, runtime_checkable

from user_directory.entities import AccountEntity


@runtime_checkable
class UserCache(Protocol):
    """Protocol for caching account listings and single accounts."""

    def get_all(self) -> list[AccountEntity] | None:
        """Return the cached listing, or None on a miss."""
        ...

    def set_all(self, accounts: list[AccountEntity], ttl: int) -> None:
        """Cache the full listing.

        Args:
            accounts: The accounts to cache
            ttl: Time-to-live in seconds
        """
        ...

    def get_user(self, account_id: int) -> AccountEntity | None:
        """Return one cached account, or None on a miss."""
        ...

    def set_user(self, account: AccountEntity, ttl: int) -> None:
        """Cache one account for ttl seconds."""
        ...

    def invalidate(self, account_id: int) -> int:
        """Drop the listing and the entry for one account.

        Returns:
            Number of entries deleted
        """
        ...

    def health_check(self) -> bool:
        """Check if the cache is accessible."""
        ...
