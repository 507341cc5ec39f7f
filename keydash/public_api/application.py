from typing import Optional
from uuid import uuid4
from structlog import get_logger
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from keydash.logging import initialize_logging
from keydash.settings import KeydashSettings, load_settings
from keydash.exceptions import KeydashException

from keydash.core.context import init_context_from_settings
from keydash.core.admins import ensure_default_admin
from .routers import ping, auth, admin, reseller, public

logger = get_logger(__name__)


def create_app(settings: Optional[KeydashSettings] = None):
    app = FastAPI(title="Keydash REST API", version="1.0.0")
    settings = settings or load_settings()
    initialize_logging(settings)
    app.state.settings = settings
    _configure_cors(app, settings)
    _configure_routes(app)
    _configure_session(app, settings)
    _configure_keydash_core(app, settings)
    _configure_error_handling(app)

    return app


def _configure_cors(app: FastAPI, settings: KeydashSettings):
    if settings.web.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.web.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )


def _configure_routes(app: FastAPI):
    app.include_router(ping.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")
    app.include_router(admin.router, prefix="/api")
    app.include_router(reseller.router, prefix="/api")
    app.include_router(public.router, prefix="/api")


def _configure_session(app: FastAPI, settings: KeydashSettings):
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret,
        session_cookie=settings.web.session_cookie,
        same_site=settings.web.session_same_site,
        https_only=settings.web.session_https_only,
        max_age=settings.web.session_max_age,
    )


def _configure_keydash_core(app: FastAPI, settings: KeydashSettings):
    app.state.keydash = init_context_from_settings(settings)
    ensure_default_admin(app.state.keydash)


def _error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(content={"status": "error", "message": message, **extra}, status_code=status_code)


def _configure_error_handling(app: FastAPI):
    @app.exception_handler(KeydashException)
    async def keydash_exception_handler(request: Request, exc: KeydashException):
        logger.debug("request rejected", path=request.url.path, status_code=exc.status_code, message=exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        response = _error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(loc) for loc in error["loc"] if loc != "body"), "message": error["msg"]}
            for error in exc.errors()
        ]
        message = errors[0]["message"] if errors else "Invalid request"
        return _error_response(400, message, errors=errors)

    @app.exception_handler(500)
    async def custom_http_exception_handler(request: Request, exc):
        error_code = uuid4()
        logger.exception(
            "Internal server error",
            exc=exc,
            error_code=error_code,
            method=request.method,
            url=request.url,
        )
        return _error_response(500, "Internal server error", errorCode=str(error_code))

    return custom_http_exception_handler
