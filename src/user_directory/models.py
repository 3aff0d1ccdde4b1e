"""SQLModel tables for the relational store."""

from datetime import date, datetime, timezone

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Privilege(SQLModel, table=True):
    """A named authorization tier shared by many accounts."""

    __tablename__ = "privileges"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, unique=True, index=True)


class Account(SQLModel, table=True):
    """A user account.

    Attributes:
        id: Unique identifier for the account.
        username: Unique login name.
        email: Unique email address.
        birthday: Date of birth, never in the future.
        password: bcrypt hash of the account password.
        privilege_id: The privilege level this account belongs to.
        created_at: When the account was created.
        updated_at: When the account was last modified.
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True)
    email: str = Field(nullable=False, unique=True, index=True)
    birthday: date | None = Field(default=None)
    password: str = Field(nullable=False)
    privilege_id: int | None = Field(default=None, foreign_key="privileges.id")
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
