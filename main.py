import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from store_rating.core.config import Settings, get_settings
from store_rating.core.exceptions import AppError, AuthenticationError
from store_rating.core.responses import error_response
from store_rating.database import build_engine, build_session_factory, create_tables
from store_rating.routes.auth import router as auth_router
from store_rating.routes.dashboard import router as dashboard_router
from store_rating.routes.ratings import router as ratings_router
from store_rating.routes.stores import router as stores_router
from store_rating.routes.user import router as users_router

logger = logging.getLogger(__name__)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return error_response(exc.status_code, exc.code, exc.message, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
            message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
        return error_response(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, "HTTP_ERROR", str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error on {request.method} {request.url.path}: {str(exc)}", exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "An unexpected error occurred")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    engine = build_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create tables (after models are imported)
        create_tables(engine)
        yield
        engine.dispose()

    app = FastAPI(title="Store Rating Platform API", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(users_router, prefix="/api/users", tags=["users"])
    app.include_router(stores_router, prefix="/api/stores", tags=["stores"])
    app.include_router(ratings_router, prefix="/api/ratings", tags=["ratings"])
    app.include_router(dashboard_router, prefix="/api/dashboard", tags=["dashboard"])

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
