"""Password hashing protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class PasswordHasher(Protocol):
    """Protocol for one-way password hashing."""

    def hash(self, password: str) -> str:
        """Hash a plain-text password.

        Args:
            password: The plain-text password

        Returns:
            The encoded hash, salt included
        """
        ...
