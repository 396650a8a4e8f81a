"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from food_catalog.api.health_profiles import router as health_profile_router
from food_catalog.api.profiles import router as profile_router
from food_catalog.api.rate_limit import RateLimitMiddleware, RateLimitRule
from food_catalog.api.search import router as search_router
from food_catalog.app_logging import configure_logging
from food_catalog.config import Settings, parse_cors_origins
from food_catalog.containers import AppContainer

_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    429: "TOO_MANY_REQUESTS",
}
_LOCATIONS = {"body", "query", "path", "header"}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.add_middleware(RateLimitMiddleware, rules=_rate_limit_rules(settings))
    origins = parse_cors_origins(settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
        expose_headers=["Authorization"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if isinstance(exc.detail, dict):
            message = str(exc.detail.get("message", ""))
            error = str(exc.detail.get("error", _ERROR_CODES.get(exc.status_code)))
        else:
            message = str(exc.detail)
            error = _ERROR_CODES.get(exc.status_code, "ERROR")
            if exc.status_code == 404 and message == "Not Found":
                message = "Route not found"
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": message, "error": error},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": "Validation failed",
                "error": "VALIDATION_ERROR",
                "errors": [_format_validation_error(item) for item in exc.errors()],
            },
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error: method=%s path=%s", request.method, request.url.path
        )
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Internal server error",
                "error": "INTERNAL_ERROR",
            },
        )

    app.include_router(profile_router)
    app.include_router(health_profile_router)
    app.include_router(search_router)

    @app.get("/health")
    async def health() -> dict[str, object]:
        """Simple health check endpoint."""
        return {
            "success": True,
            "message": "Server is running",
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "environment": settings.environment,
        }

    @app.get("/")
    async def index() -> dict[str, object]:
        """List the available endpoints."""
        return {
            "success": True,
            "name": "Food catalog API",
            "version": "0.1.0",
            "endpoints": {
                "health": "/health",
                "profile": "/api/profile",
                "healthProfile": "/api/health-profile",
                "search": "/api/search",
                "trending": "/api/search/trending",
            },
        }

    return app


def _rate_limit_rules(settings: Settings) -> list[RateLimitRule]:
    return [
        RateLimitRule(
            prefix="/api/search",
            max_requests=settings.search_rate_limit_max_requests,
            window_seconds=settings.search_rate_limit_window_seconds,
            message="Too many search requests, please try again later.",
        ),
        RateLimitRule(
            prefix="/api/",
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        ),
    ]


def _format_validation_error(error: dict[str, object]) -> dict[str, str]:
    location = [str(part) for part in error.get("loc", ())]
    if location and location[0] in _LOCATIONS:
        location = location[1:]
    return {"field": ".".join(location), "message": str(error.get("msg", ""))}
