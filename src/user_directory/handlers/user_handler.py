"""HTTP handlers for user operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import logging

from fastapi import HTTPException, status

from user_directory.dto import AccountResponse, HealthCheckResponse, UpdateUserRequest
from user_directory.entities import AccountChanges, CallerIdentity
from user_directory.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UnauthenticatedError,
    UserServiceError,
)
from user_directory.services import UserService

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[UserServiceError], int] = {
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_400_BAD_REQUEST,
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
}


class UserHandler:
    """HTTP handlers for user operations.

    This handler delegates business logic to UserService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Error handling and responses

    Example:
        ```python
        from user_directory.handlers import UserHandler

        handler = UserHandler(user_service=service, expose_errors=False)

        # Use in FastAPI route
        @app.get("/users", response_model=list[AccountResponse])
        async def list_users(caller: CallerDep):
            return await handler.list_users(caller)
        ```
    """

    def __init__(self, user_service: UserService, expose_errors: bool = False) -> None:
        """Initialize the user handler.

        Args:
            user_service: The user service for business logic (required).
            expose_errors: Include internal error messages in 500 responses.
        """
        self._users = user_service
        self._expose_errors = expose_errors

    def _client_error(self, error: UserServiceError) -> HTTPException:
        return HTTPException(status_code=STATUS_BY_ERROR[type(error)], detail=error.message)

    def _server_error(self, message: str, error: Exception) -> HTTPException:
        logger.exception("%s: %s", message, error)
        detail: dict[str, str] = {"error": message}
        if self._expose_errors:
            detail["details"] = str(error)
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

    async def list_users(self, caller: CallerIdentity | None) -> list[AccountResponse]:
        """Handle GET /users requests.

        Args:
            caller: The authenticated requester, or None

        Returns:
            Every account, without passwords

        Raises:
            HTTPException: 401, 403, or 500
        """
        try:
            accounts = await self._users.list_users(caller)
            return [AccountResponse.from_entity(account) for account in accounts]
        except UserServiceError as e:
            raise self._client_error(e) from e
        except Exception as e:
            raise self._server_error("Error fetching users", e) from e

    async def get_user(self, caller: CallerIdentity | None, account_id: int) -> AccountResponse:
        """Handle GET /users/{id} requests.

        Raises:
            HTTPException: 401, 403, 404, or 500
        """
        try:
            account = await self._users.get_user(caller, account_id)
            return AccountResponse.from_entity(account)
        except UserServiceError as e:
            raise self._client_error(e) from e
        except Exception as e:
            raise self._server_error("Error fetching user", e) from e

    async def update_user(
        self,
        caller: CallerIdentity | None,
        account_id: int,
        request: UpdateUserRequest,
    ) -> AccountResponse:
        """Handle PATCH/PUT /users/{id} requests.

        Args:
            caller: The authenticated requester, or None
            account_id: The account to update
            request: The update request DTO

        Returns:
            The updated account, without password

        Raises:
            HTTPException: 400, 401, 403, 404, or 500
        """
        changes = AccountChanges(
            username=request.username,
            email=request.email,
            birthday=request.birthday,
            password=request.password,
            privilege_id=request.privilege_id,
        )
        try:
            account = await self._users.update_user(caller, account_id, changes)
            return AccountResponse.from_entity(account)
        except UserServiceError as e:
            raise self._client_error(e) from e
        except Exception as e:
            raise self._server_error("Error updating user", e) from e

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests.

        Returns:
            HealthCheckResponse with store and cache status
        """
        health = await self._users.is_healthy()
        is_healthy = health["store"] and health["cache"]

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            store_healthy=health["store"],
            cache_healthy=health["cache"],
        )
