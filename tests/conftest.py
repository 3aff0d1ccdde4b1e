"""Shared fixtures for the user directory tests."""

from datetime import date, datetime, timezone

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from user_directory.api.app import create_app
from user_directory.config import Settings
from user_directory.entities import AccountEntity
from user_directory.repositories import ALL_USERS_KEY, BcryptPasswordHasher, SqlUserRepository, user_key
from user_directory.services import UserService

JWT_SECRET = "test-secret-key-for-the-user-directory"
NOW = datetime(2024, 5, 1, 0, 0, tzinfo=timezone.utc)


class FakeUserCache:
    """In-memory UserCache that records what the service does with it."""

    def __init__(self) -> None:
        self.entries: dict[str, object] = {}
        self.ttls: dict[str, int] = {}
        self.deleted: list[str] = []
        self.reads: list[str] = []

    def get_all(self) -> list[AccountEntity] | None:
        self.reads.append(ALL_USERS_KEY)
        return self.entries.get(ALL_USERS_KEY)  # type: ignore[return-value]

    def set_all(self, accounts: list[AccountEntity], ttl: int) -> None:
        self.entries[ALL_USERS_KEY] = list(accounts)
        self.ttls[ALL_USERS_KEY] = ttl

    def get_user(self, account_id: int) -> AccountEntity | None:
        self.reads.append(user_key(account_id))
        return self.entries.get(user_key(account_id))  # type: ignore[return-value]

    def set_user(self, account: AccountEntity, ttl: int) -> None:
        self.entries[user_key(account.id)] = account
        self.ttls[user_key(account.id)] = ttl

    def invalidate(self, account_id: int) -> int:
        count = 0
        for key in (ALL_USERS_KEY, user_key(account_id)):
            self.deleted.append(key)
            if self.entries.pop(key, None) is not None:
                count += 1
        return count

    def health_check(self) -> bool:
        return True


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def store(engine, hasher) -> SqlUserRepository:
    """Store seeded with privileges admin (1), user (2) and accounts 1-9.

    Account 3 is "carol" (user), account 5 is "eve" (user),
    account 9 is "ivan" (user), account 1 is "root" (admin).
    """
    repo = SqlUserRepository(engine)
    admin = repo.ensure_privilege("admin")
    user = repo.ensure_privilege("user")
    names = ["root", "bea", "carol", "dan", "eve", "fay", "gus", "hal", "ivan"]
    password_hash = hasher.hash("initial-password")
    for index, name in enumerate(names, start=1):
        repo.create_account(
            username=name,
            email=f"{name}@example.com",
            password_hash=password_hash,
            privilege_id=admin.id if index == 1 else user.id,
            birthday=date(1990, 1, index),
        )
    return repo


@pytest.fixture
def cache() -> FakeUserCache:
    return FakeUserCache()


@pytest.fixture
def service(store, cache, hasher) -> UserService:
    return UserService(store=store, cache=cache, hasher=hasher, cache_ttl=300, clock=lambda: NOW)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(environment="development", jwt_secret=JWT_SECRET, password_hash_rounds=4)


@pytest.fixture
def client(test_settings, service):
    """Test client wired to the seeded store and the fake cache."""
    app = create_app(config=test_settings, user_service=service)
    with TestClient(app) as test_client:
        yield test_client


def make_token(account_id: int, privilege_id: int | None, secret: str = JWT_SECRET) -> str:
    claims = {"id": account_id, "privilege_id": privilege_id}
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_header(account_id: int, privilege_id: int | None) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(account_id, privilege_id)}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return auth_header(1, 1)
