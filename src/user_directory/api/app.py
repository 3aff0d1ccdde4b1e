from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_directory.api.auth import CallerDep
from user_directory.api.dependencies import HandlerDep, lifespan
from user_directory.config import Settings, configure_logging, settings
from user_directory.dto import AccountResponse, ErrorResponse, HealthCheckResponse, UpdateUserRequest
from user_directory.services import UserService

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse, "description": "No authenticated user"},
    status.HTTP_403_FORBIDDEN: {"model": ErrorResponse, "description": "Caller not permitted"},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Internal failure"},
}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": ..., "details": ...}."""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed paths and bodies as {"error": "Invalid request", "details": [...]}."""
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


def create_app(config: Settings | None = None, user_service: UserService | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Settings to use. Defaults to the environment-derived settings.
        user_service: Pre-built service (e.g. with fakes). If None, the
            lifespan wires the SQL store, Redis cache and bcrypt hasher.

    Returns:
        The configured FastAPI application
    """
    config = config or settings

    app = FastAPI(
        title="User Directory API",
        description="User listing and profile management backed by a relational store and Redis",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = config
    if user_service is not None:
        app.state.user_service = user_service

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "User Directory API",
            "version": "0.1.0",
            "description": "User listing and profile management",
            "endpoints": {
                "users": "/users",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep, response: Response) -> HealthCheckResponse:
        """Health check endpoint."""
        result = await handler.health_check()
        if result.status != "healthy":
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return result

    @app.get("/users", response_model=list[AccountResponse], responses=ERROR_RESPONSES)
    async def list_users(handler: HandlerDep, caller: CallerDep) -> list[AccountResponse]:
        """List every user. Admin only, served from cache when warm."""
        return await handler.list_users(caller)

    @app.get(
        "/users/{account_id}",
        response_model=AccountResponse,
        responses={
            **ERROR_RESPONSES,
            status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "User not found"},
        },
    )
    async def get_user(account_id: int, handler: HandlerDep, caller: CallerDep) -> AccountResponse:
        """Fetch one user. Admins may fetch anyone, others only themselves."""
        return await handler.get_user(caller, account_id)

    @app.api_route(
        "/users/{account_id}",
        methods=["PATCH", "PUT"],
        response_model=AccountResponse,
        responses={
            **ERROR_RESPONSES,
            status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Validation failed"},
            status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "User not found"},
        },
    )
    async def update_user(
        account_id: int,
        request: UpdateUserRequest,
        handler: HandlerDep,
        caller: CallerDep,
    ) -> AccountResponse:
        """Update a user's profile fields.

        Args:
            account_id: The account to update.
            request: The fields to change; omitted fields are left untouched.

        Returns:
            The updated account, without password.
        """
        return await handler.update_user(caller, account_id, request)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(
        "user_directory.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
