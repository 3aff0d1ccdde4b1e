"""bcrypt implementation of PasswordHasher, via passlib."""

from passlib.context import CryptContext

from user_directory.config import settings


class BcryptPasswordHasher:
    """Hash passwords with bcrypt.

    This class satisfies the PasswordHasher protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, rounds: int | None = None) -> None:
        """Initialize the hasher.

        Args:
            rounds: bcrypt cost factor. If None, uses settings.
        """
        self._rounds = rounds or settings.password_hash_rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=self._rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    @property
    def rounds(self) -> int:
        """Get the bcrypt cost factor."""
        return self._rounds
