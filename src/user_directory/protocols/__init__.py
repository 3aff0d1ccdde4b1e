"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (SQLite → PostgreSQL, Redis → in-memory, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from user_directory.protocols import UserCache, UserStore

    # Type hints work with any implementation
    store: UserStore = SqlUserRepository(engine)  # works
    cache: UserCache = RedisUserCache()           # also works
    ```
"""

from .password_hasher import PasswordHasher
from .user_cache import UserCache
from .user_store import UserStore

__all__ = [
    "PasswordHasher",
    "UserCache",
    "UserStore",
]
