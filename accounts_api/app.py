from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from accounts_api.core.config import get_settings
from accounts_api.core.errors import ApiError
from accounts_api.db import create_all
from accounts_api.routers import users as users_router
from accounts_api.services.account_service import AccountService

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, no sniffing, HSTS in prod)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Cache-Control", "no-store")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status)


def create_app(service: AccountService | None = None, *, init_db: bool = True) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``uvicorn accounts_api.app:create_app --factory``)."""
    settings = service.settings if service else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_db:
            create_all()
        yield

    app = FastAPI(title="Accounts API", lifespan=lifespan)
    app.state.account_service = service or AccountService(settings=settings)
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.add_exception_handler(ApiError, api_error_handler)
    app.include_router(users_router.router)
    return app
