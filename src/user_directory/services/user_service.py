"""User service for core business logic.

This service enforces authorization and field validation, and
coordinates the user store (authoritative data), the user cache
(read-through, short TTL) and the password hasher.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime, time, timezone
from typing import Any, TypeVar

import anyio

from user_directory.config import settings
from user_directory.entities import AccountChanges, AccountEntity, CallerIdentity
from user_directory.errors import (
    ConflictError,
    DuplicateValueError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UnauthenticatedError,
)
from user_directory.protocols import PasswordHasher, UserCache, UserStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

ADMIN_PRIVILEGE = "admin"

TAKEN_MESSAGES = {
    "username": "Username already taken",
    "email": "Email already taken",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class UserService:
    """Core user management service.

    This service depends on PROTOCOLS, not concrete implementations:
    - UserStore: SQLite, PostgreSQL, or a fake in tests
    - UserCache: Redis, or a fake in tests
    - PasswordHasher: bcrypt, or anything cheaper in tests

    Example:
        ```python
        from user_directory.repositories import (
            BcryptPasswordHasher,
            RedisUserCache,
            SqlUserRepository,
        )
        from user_directory.services import UserService

        service = UserService.create(
            store=SqlUserRepository.create(),
            cache=RedisUserCache.create(),
            hasher=BcryptPasswordHasher(),
        )
        ```
    """

    def __init__(
        self,
        store: UserStore,
        cache: UserCache,
        hasher: PasswordHasher,
        cache_ttl: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the user service.

        Args:
            store: Authoritative account and privilege store (required).
            cache: Read-through cache in front of the store (required).
            hasher: Password hashing implementation (required).
            cache_ttl: Cache entry lifetime in seconds. Defaults to settings.
            clock: Returns the current UTC instant. Defaults to the system clock.
        """
        self._store = store
        self._cache = cache
        self._hasher = hasher
        self._ttl = cache_ttl or settings.users_cache_ttl
        self._clock = clock or _utcnow

    @classmethod
    def create(
        cls,
        store: UserStore,
        cache: UserCache,
        hasher: PasswordHasher,
        cache_ttl: int | None = None,
    ) -> "UserService":
        """Factory method to create UserService with settings defaults.

        Args:
            store: Account and privilege store (required).
            cache: User cache (required).
            hasher: Password hasher (required).
            cache_ttl: Cache lifetime in seconds. If None, uses settings.

        Returns:
            Configured UserService instance
        """
        return cls(store=store, cache=cache, hasher=hasher, cache_ttl=cache_ttl)

    @staticmethod
    async def _offload(func: Callable[..., T], *args: Any) -> T:
        """Run a blocking store, cache or hasher call in a worker thread."""
        return await anyio.to_thread.run_sync(func, *args)

    async def _is_admin(self, caller: CallerIdentity) -> bool:
        """Return True if the caller's privilege level is named "admin"."""
        if caller.privilege_id is None:
            return False
        privilege = await self._offload(self._store.get_privilege, caller.privilege_id)
        return privilege is not None and privilege.name == ADMIN_PRIVILEGE

    @staticmethod
    def _require_caller(caller: CallerIdentity | None) -> CallerIdentity:
        if caller is None:
            raise UnauthenticatedError("No authenticated user")
        return caller

    async def list_users(self, caller: CallerIdentity | None) -> list[AccountEntity]:
        """List every account. Admin only.

        Business logic:
        1. Reject missing identity and non-admin callers
        2. Return the cached listing if present
        3. Otherwise read the store, cache the result, and return it

        Args:
            caller: The authenticated requester, or None

        Returns:
            All accounts, ordered by id

        Raises:
            UnauthenticatedError: If no caller is attached
            ForbiddenError: If the caller is not an admin
        """
        caller = self._require_caller(caller)
        if not await self._is_admin(caller):
            raise ForbiddenError("Only admins can view users")

        cached = await self._offload(self._cache.get_all)
        if cached is not None:
            logger.debug("User listing served from cache")
            return cached

        accounts = await self._offload(self._store.list_accounts)
        await self._offload(self._cache.set_all, accounts, self._ttl)
        logger.debug("User listing cached (%d accounts, ttl=%ds)", len(accounts), self._ttl)
        return accounts

    async def get_user(self, caller: CallerIdentity | None, account_id: int) -> AccountEntity:
        """Fetch one account. Admins may fetch anyone, others only themselves.

        Args:
            caller: The authenticated requester, or None
            account_id: The account to fetch

        Returns:
            The account

        Raises:
            UnauthenticatedError: If no caller is attached
            ForbiddenError: If the caller may not view this account
            NotFoundError: If the account does not exist
        """
        caller = self._require_caller(caller)
        if caller.id != account_id and not await self._is_admin(caller):
            raise ForbiddenError("Unauthorized to view this user")

        cached = await self._offload(self._cache.get_user, account_id)
        if cached is not None:
            return cached

        account = await self._offload(self._store.get_account, account_id)
        if account is None:
            raise NotFoundError("User not found")
        await self._offload(self._cache.set_user, account, self._ttl)
        return account

    async def update_user(
        self,
        caller: CallerIdentity | None,
        account_id: int,
        changes: AccountChanges,
    ) -> AccountEntity:
        """Validate and apply profile changes to one account.

        Business logic:
        1. Only admins or the account owner may update
        2. Each provided field that differs from the stored value is validated
        3. privilege_id is honored for admins only, silently dropped otherwise
        4. A provided password is always re-hashed
        5. Validated fields are written in a single store update
        6. Cached listing and cached account are invalidated
        7. The account is re-read from the store and returned

        Args:
            caller: The authenticated requester, or None
            account_id: The account to update
            changes: The requested changes

        Returns:
            The account as stored after the update

        Raises:
            UnauthenticatedError: If no caller is attached
            ForbiddenError: If the caller may not update this account
            NotFoundError: If the account does not exist
            ConflictError: If the username or email belongs to another account
            InvalidInputError: If the birthday is in the future or the
                privilege does not exist
        """
        caller = self._require_caller(caller)
        is_admin = await self._is_admin(caller)
        if not is_admin and caller.id != account_id:
            raise ForbiddenError("Unauthorized to update this user")

        account = await self._offload(self._store.get_account, account_id)
        if account is None:
            raise NotFoundError("User not found")

        update_data: dict[str, Any] = {}

        if changes.username is not None and changes.username != account.username:
            existing = await self._offload(self._store.find_by_username, changes.username)
            if existing is not None and existing.id != account_id:
                raise ConflictError(TAKEN_MESSAGES["username"])
            update_data["username"] = changes.username

        if changes.email is not None and changes.email != account.email:
            existing = await self._offload(self._store.find_by_email, changes.email)
            if existing is not None and existing.id != account_id:
                raise ConflictError(TAKEN_MESSAGES["email"])
            update_data["email"] = changes.email

        if changes.birthday is not None and changes.birthday != account.birthday:
            if _start_of_day(changes.birthday) > self._clock():
                raise InvalidInputError("Birthday cannot be in the future")
            update_data["birthday"] = changes.birthday

        if changes.privilege_id is not None and is_admin:
            if await self._offload(self._store.get_privilege, changes.privilege_id) is None:
                raise InvalidInputError("Invalid privilege")
            update_data["privilege_id"] = changes.privilege_id

        if changes.password is not None:
            update_data["password"] = await self._offload(self._hasher.hash, changes.password)

        try:
            await self._offload(self._store.update_account, account_id, update_data)
        except DuplicateValueError as e:
            # A concurrent writer claimed the value after the pre-check
            raise ConflictError(TAKEN_MESSAGES[e.field]) from e

        await self._offload(self._cache.invalidate, account_id)
        logger.info("Updated user %d (%s)", account_id, ", ".join(sorted(update_data)) or "no changes")

        updated = await self._offload(self._store.get_account, account_id)
        if updated is None:
            raise NotFoundError("User not found")
        return updated

    async def is_healthy(self) -> dict[str, bool]:
        """Check store and cache health.

        Returns:
            Dictionary with "store" and "cache" health flags
        """
        return {
            "store": await self._offload(self._store.health_check),
            "cache": await self._offload(self._cache.health_check),
        }

    @property
    def cache_ttl(self) -> int:
        """Get the cache entry lifetime in seconds."""
        return self._ttl

    @property
    def store(self) -> UserStore:
        """Get the underlying store (for testing)."""
        return self._store

    @property
    def cache(self) -> UserCache:
        """Get the underlying cache (for testing)."""
        return self._cache
