#!/usr/bin/env python3
"""
Seed script for the user directory.

Creates the schema, the "admin" and "user" privilege levels and a few
sample accounts in the database configured by DATABASE_URL.
"""

from datetime import date

from user_directory.config import configure_logging, get_engine, settings
from user_directory.errors import DuplicateValueError
from user_directory.repositories import BcryptPasswordHasher, SqlUserRepository

SAMPLE_ACCOUNTS = [
    ("admin", "admin@example.com", "admin-password", "admin", date(1985, 4, 12)),
    ("alice", "alice@example.com", "alice-password", "user", date(1992, 8, 3)),
    ("bob", "bob@example.com", "bob-password", "user", None),
]


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def main() -> None:
    configure_logging()
    store = SqlUserRepository.create(engine=get_engine())
    hasher = BcryptPasswordHasher()

    print_section(f"Seeding {settings.database_url}")

    privileges = {name: store.ensure_privilege(name) for name in ("admin", "user")}
    for privilege in privileges.values():
        print(f"  + privilege {privilege.name!r} (id={privilege.id})")

    for username, email, password, privilege, birthday in SAMPLE_ACCOUNTS:
        try:
            account = store.create_account(
                username=username,
                email=email,
                password_hash=hasher.hash(password),
                privilege_id=privileges[privilege].id,
                birthday=birthday,
            )
            print(f"  + account {account.username!r} (id={account.id}, privilege={account.privilege_name})")
        except DuplicateValueError as e:
            print(f"  ! account {username!r} skipped: {e.field} already taken")

    print_section("Done")


if __name__ == "__main__":
    main()
