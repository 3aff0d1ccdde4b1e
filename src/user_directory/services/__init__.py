"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from user_directory.services import UserService

    service = UserService.create(store=store, cache=cache, hasher=hasher)
    accounts = await service.list_users(caller)
    ```
"""

from .user_service import ADMIN_PRIVILEGE, UserService

__all__ = [
    "ADMIN_PRIVILEGE",
    "UserService",
]
