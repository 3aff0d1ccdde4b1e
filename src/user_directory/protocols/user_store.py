"""User record store protocol.

Defines the interface for the authoritative relational store holding
accounts and privilege levels.

Implementations can include:
- SQLModel/SQLAlchemy over SQLite or PostgreSQL (default)
- Any other store able to enforce unique usernames and emails
"""

from typing import Any, Protocol, runtime_checkable

from user_directory.entities import AccountEntity, PrivilegeEntity


@runtime_checkable
class UserStore(Protocol):
    """Protocol for account and privilege-level storage.

    Every account read returns the public projection joined with the
    privilege name; password hashes never leave the store.
    """

    def get_privilege(self, privilege_id: int) -> PrivilegeEntity | None:
        """Look up a privilege level by id.

        Args:
            privilege_id: The privilege level id

        Returns:
            The privilege level, or None if it does not exist
        """
        ...

    def list_accounts(self) -> list[AccountEntity]:
        """Return every account, ordered by id."""
        ...

    def get_account(self, account_id: int) -> AccountEntity | None:
        """Return one account, or None if it does not exist."""
        ...

    def find_by_username(self, username: str) -> AccountEntity | None:
        """Return the account holding this username, if any."""
        ...

    def find_by_email(self, email: str) -> AccountEntity | None:
        """Return the account holding this email, if any."""
        ...

    def update_account(self, account_id: int, changes: dict[str, Any]) -> bool:
        """Apply all changes to one account in a single write.

        Args:
            account_id: The account to update
            changes: Column name to new value (password already hashed)

        Returns:
            True if the account exists, False otherwise

        Raises:
            DuplicateValueError: If a unique constraint rejects the write
        """
        ...

    def health_check(self) -> bool:
        """Check if the store is accessible."""
        ...
