"""SQLModel implementation of UserStore.

Works with any SQLAlchemy-supported database. SQLite is the default,
PostgreSQL is the intended production backend.
"""

import logging
import re
from datetime import date
from typing import Any

from sqlalchemy import Engine, text
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, col, select

from user_directory.config import get_engine
from user_directory.entities import AccountEntity, PrivilegeEntity
from user_directory.errors import DuplicateValueError
from user_directory.models import Account, Privilege, utcnow

logger = logging.getLogger(__name__)

UNIQUE_FIELDS = ("username", "email")

# users.<field> (SQLite, MySQL), ix_users_<field> (our indexes), users_<field>_key (PostgreSQL default)
_UNIQUE_TARGET = re.compile(r"\b(?:users\.|ix_users_|users_)(username|email)(?![a-z])")


class SqlUserRepository:
    """Relational store for accounts and privilege levels.

    This class satisfies the UserStore protocol through structural
    typing - no explicit inheritance needed.

    Reads always outer-join the privilege table so an account with a
    dangling or empty privilege reference is still returned.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        """Initialize the repository and make sure the schema exists.

        Args:
            engine: SQLAlchemy engine. If None, creates one from settings.
        """
        self._engine = engine or get_engine()
        self._ensure_schema()

    @classmethod
    def create(cls, engine: Engine | None = None) -> "SqlUserRepository":
        """Factory method to create SqlUserRepository with defaults.

        Args:
            engine: SQLAlchemy engine. If None, uses settings.

        Returns:
            Configured SqlUserRepository
        """
        return cls(engine=engine)

    def _ensure_schema(self) -> None:
        """Create the privileges and users tables if they do not exist."""
        SQLModel.metadata.create_all(self._engine)
        logger.info("User schema ready on %s", self._engine.url.render_as_string(hide_password=True))

    def _account_query(self):
        return select(Account, Privilege.name).outerjoin(
            Privilege, col(Account.privilege_id) == col(Privilege.id)
        )

    @staticmethod
    def _to_entity(account: Account, privilege_name: str | None) -> AccountEntity:
        return AccountEntity(
            id=account.id,  # type: ignore[arg-type]
            username=account.username,
            email=account.email,
            birthday=account.birthday,
            privilege_id=account.privilege_id,
            privilege_name=privilege_name,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )

    def _find_one(self, *conditions: Any) -> AccountEntity | None:
        with Session(self._engine) as session:
            row = session.exec(self._account_query().where(*conditions)).first()
            if row is None:
                return None
            account, privilege_name = row
            return self._to_entity(account, privilege_name)

    def get_privilege(self, privilege_id: int) -> PrivilegeEntity | None:
        with Session(self._engine) as session:
            privilege = session.get(Privilege, privilege_id)
            if privilege is None:
                return None
            return PrivilegeEntity(id=privilege.id, name=privilege.name)  # type: ignore[arg-type]

    def list_accounts(self) -> list[AccountEntity]:
        with Session(self._engine) as session:
            rows = session.exec(self._account_query().order_by(col(Account.id))).all()
            return [self._to_entity(account, name) for account, name in rows]

    def get_account(self, account_id: int) -> AccountEntity | None:
        return self._find_one(col(Account.id) == account_id)

    def find_by_username(self, username: str) -> AccountEntity | None:
        return self._find_one(col(Account.username) == username)

    def find_by_email(self, email: str) -> AccountEntity | None:
        return self._find_one(col(Account.email) == email)

    def update_account(self, account_id: int, changes: dict[str, Any]) -> bool:
        """Apply all changes to one account in a single commit.

        An empty change set leaves the record (and updated_at) untouched.

        Raises:
            DuplicateValueError: If the username or email unique index
                rejects the write
        """
        with Session(self._engine) as session:
            account = session.get(Account, account_id)
            if account is None:
                return False
            if not changes:
                return True

            for field, value in changes.items():
                setattr(account, field, value)
            account.updated_at = utcnow()
            session.add(account)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateValueError(self._violated_field(e)) from e
            return True

    @staticmethod
    def _violated_field(error: IntegrityError) -> str:
        # Match the constraint, never the offending value in PostgreSQL's DETAIL line
        diag = getattr(error.orig, "diag", None)
        target = getattr(diag, "constraint_name", None) or str(error.orig).partition("\n")[0]
        match = _UNIQUE_TARGET.search(target)
        if match is None:
            raise error
        return match.group(1)

    def ensure_privilege(self, name: str) -> PrivilegeEntity:
        """Return the privilege level with this name, creating it if missing.

        Args:
            name: Unique privilege name (e.g. "admin")

        Returns:
            The stored privilege level
        """
        with Session(self._engine) as session:
            privilege = session.exec(select(Privilege).where(col(Privilege.name) == name)).first()
            if privilege is None:
                privilege = Privilege(name=name)
                session.add(privilege)
                session.commit()
                session.refresh(privilege)
            return PrivilegeEntity(id=privilege.id, name=privilege.name)  # type: ignore[arg-type]

    def create_account(
        self,
        username: str,
        email: str,
        password_hash: str,
        privilege_id: int | None = None,
        birthday: date | None = None,
    ) -> AccountEntity:
        """Insert an account whose password is already hashed.

        Raises:
            DuplicateValueError: If the username or email is taken
        """
        with Session(self._engine) as session:
            account = Account(
                username=username,
                email=email,
                password=password_hash,
                privilege_id=privilege_id,
                birthday=birthday,
            )
            session.add(account)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateValueError(self._violated_field(e)) from e
            row = session.exec(self._account_query().where(col(Account.id) == account.id)).one()
            return self._to_entity(*row)

    def health_check(self) -> bool:
        """Check if the database is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.warning("User store health check failed", exc_info=True)
            return False
