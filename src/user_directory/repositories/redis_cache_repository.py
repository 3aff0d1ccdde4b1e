"""Redis implementation of UserCache.

Entries are plain JSON strings with a Redis-side expiry. Redis is never
the source of truth; every entry can be rebuilt from the user store.
"""

import json
from datetime import date, datetime
from typing import Any

import redis

from user_directory.config import get_redis_client
from user_directory.entities import AccountEntity

ALL_USERS_KEY = "all_users"


def user_key(account_id: int) -> str:
    """Return the cache key for a single account."""
    return f"user_{account_id}"


def _encode(account: AccountEntity) -> dict[str, Any]:
    return {
        "id": account.id,
        "username": account.username,
        "email": account.email,
        "birthday": account.birthday.isoformat() if account.birthday else None,
        "privilege_id": account.privilege_id,
        "privilege": account.privilege_name,
        "createdAt": account.created_at.isoformat(),
        "updatedAt": account.updated_at.isoformat(),
    }


def _decode(data: dict[str, Any]) -> AccountEntity:
    birthday = data.get("birthday")
    return AccountEntity(
        id=data["id"],
        username=data["username"],
        email=data["email"],
        birthday=date.fromisoformat(birthday) if birthday else None,
        privilege_id=data.get("privilege_id"),
        privilege_name=data.get("privilege"),
        created_at=datetime.fromisoformat(data["createdAt"]),
        updated_at=datetime.fromisoformat(data["updatedAt"]),
    )


class RedisUserCache:
    """Redis-backed read-through cache for accounts.

    This class satisfies the UserCache protocol through structural
    typing - no explicit inheritance needed.

    Key layout:
    - "all_users": JSON array of every account
    - "user_{id}": JSON object for one account
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize the Redis user cache.

        Args:
            redis_client: Redis client instance. If None, creates default.
        """
        self._client = redis_client or get_redis_client()

    @classmethod
    def create(cls, redis_client: redis.Redis | None = None) -> "RedisUserCache":
        """Factory method to create RedisUserCache with defaults."""
        return cls(redis_client=redis_client)

    def get_all(self) -> list[AccountEntity] | None:
        raw = self._client.get(ALL_USERS_KEY)
        if raw is None:
            return None
        return [_decode(item) for item in json.loads(raw)]  # type: ignore[arg-type]

    def set_all(self, accounts: list[AccountEntity], ttl: int) -> None:
        payload = json.dumps([_encode(account) for account in accounts])
        self._client.set(ALL_USERS_KEY, payload, ex=ttl)

    def get_user(self, account_id: int) -> AccountEntity | None:
        raw = self._client.get(user_key(account_id))
        if raw is None:
            return None
        return _decode(json.loads(raw))  # type: ignore[arg-type]

    def set_user(self, account: AccountEntity, ttl: int) -> None:
        self._client.set(user_key(account.id), json.dumps(_encode(account)), ex=ttl)

    def invalidate(self, account_id: int) -> int:
        """Delete the listing and the single-account entry.

        Args:
            account_id: The account that changed

        Returns:
            Number of keys that existed and were deleted
        """
        result: int = self._client.delete(ALL_USERS_KEY, user_key(account_id))  # type: ignore[assignment]
        return result

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            result = self._client.ping()
            return bool(result)
        except Exception:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
