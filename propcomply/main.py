"""PropComply API — FastAPI application factory."""


import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from propcomply.compliance.catalog import default_registry
from propcomply.core.config import settings
from propcomply.core.exceptions import register_exception_handlers
from propcomply.db.base import async_session_factory, create_schema
from propcomply.middleware.audit import AuditMiddleware
from propcomply.schemas.common import HealthResponse

# v1 routers
from propcomply.routers.v1.certificates import router as certificates_v1_router
from propcomply.routers.v1.compliance import router as compliance_v1_router
from propcomply.routers.v1.jurisdictions import router as jurisdictions_v1_router
from propcomply.routers.v1.properties import router as properties_v1_router

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Set up structured logging for the application."""
    level = logging.DEBUG if settings.app_env == "development" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    registry = default_registry()
    logger.info(
        "Compliance catalog loaded: %s (default %s)",
        ", ".join(registry.codes()), registry.default_code,
    )
    if settings.auto_create_schema:
        await create_schema()
    yield


def create_app() -> FastAPI:
    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url="/docs" if settings.app_env == "development" else None,
        redoc_url="/redoc" if settings.app_env == "development" else None,
        lifespan=lifespan,
    )
    app.state.session_factory = async_session_factory

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # --- Audit middleware ---
    app.add_middleware(AuditMiddleware)

    # --- Global exception handlers ---
    register_exception_handlers(app)

    # --- v1 API routes (/api/v1/*) ---
    app.include_router(jurisdictions_v1_router, prefix="/api/v1")
    app.include_router(properties_v1_router, prefix="/api/v1")
    app.include_router(certificates_v1_router, prefix="/api/v1")
    app.include_router(compliance_v1_router, prefix="/api/v1")

    # --- Health check ---
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health():
        registry = default_registry()
        return HealthResponse(
            app=settings.app_name,
            env=settings.app_env,
            catalog_version=registry.get(registry.default_code).version,
        )

    return app


app = create_app()
