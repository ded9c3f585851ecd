"""
FastAPI Application
==================

Main FastAPI application with REST endpoints for editing, rendering and
exporting email templates.
"""

from contextlib import asynccontextmanager
import uuid
from typing import AsyncGenerator, Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog
import uvicorn

from email_builder.api.routes.components import router as components_router
from email_builder.api.routes.health import router as health_router
from email_builder.api.routes.render import router as render_router
from email_builder.api.routes.templates import router as templates_router
from email_builder.config.database import close_databases, initialize_databases
from email_builder.config.logging import get_logger
from email_builder.config.settings import get_settings
from email_builder.core.catalog import CatalogError, get_default_catalog
from email_builder.core.storage import StorageError, close_template_store, get_template_store
from email_builder.models.schemas import ErrorResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting FastAPI application")

    if settings.storage_backend == "redis":
        try:
            await initialize_databases()
            logger.info("Databases initialized")
        except Exception as e:
            logger.error("Failed to initialize databases", error=str(e))
            raise RuntimeError(f"Database initialization failed: {e}")

    catalog = get_default_catalog()
    get_template_store()
    logger.info("Template store ready", components=len(catalog))

    try:
        yield
    finally:
        logger.info("Shutting down FastAPI application")
        close_template_store()

        try:
            await close_databases()
            logger.info("Databases closed")
        except Exception as e:
            logger.error("Error closing databases", error=str(e))


# Create FastAPI app
settings = get_settings()
app = FastAPI(
    title=settings.app_name,
    description="Assemble email templates from predefined components and render them to HTML",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_hosts,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(components_router)
app.include_router(templates_router)
app.include_router(render_router)


# Request ID middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next) -> JSONResponse:  # type: ignore
    """Add request ID to all requests."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)

    response = await call_next(request)  # type: ignore
    response.headers["X-Request-ID"] = request_id  # type: ignore

    return response  # type: ignore


# Exception handlers
@app.exception_handler(HTTPException)
async def custom_http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom HTTP exception handler with structured error response."""
    error_response = ErrorResponse(
        error=exc.detail,
        error_code=str(exc.status_code),
        details=None,
        request_id=getattr(request.state, "request_id", None),
    )

    logger.warning(
        "HTTP exception",
        status_code=exc.status_code,
        detail=exc.detail,
        request_id=error_response.request_id,
    )

    return JSONResponse(status_code=exc.status_code, content=error_response.model_dump(mode="json"))


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Storage medium unavailable: the operation failed and nothing was saved."""
    error_response = ErrorResponse(
        error="Template storage is not available. Please try again later.",
        error_code="STORAGE_UNAVAILABLE",
        details={"message": str(exc)} if settings.debug else None,
        request_id=getattr(request.state, "request_id", None),
    )

    logger.error("Storage error", error_message=str(exc), request_id=error_response.request_id)

    return JSONResponse(status_code=503, content=error_response.model_dump(mode="json"))


@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Component catalog could not be loaded."""
    error_response = ErrorResponse(
        error="Component catalog is not available.",
        error_code="CATALOG_ERROR",
        details={"message": str(exc)} if settings.debug else None,
        request_id=getattr(request.state, "request_id", None),
    )

    logger.error("Catalog error", error_message=str(exc), request_id=error_response.request_id)

    return JSONResponse(status_code=500, content=error_response.model_dump(mode="json"))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """General exception handler for unexpected errors."""
    error_response = ErrorResponse(
        error="Internal server error",
        error_code="INTERNAL_ERROR",
        details={"exception": str(exc)} if settings.debug else None,
        request_id=getattr(request.state, "request_id", None),
    )

    logger.error(
        "Unhandled exception",
        exception=str(exc),
        request_id=error_response.request_id,
        exc_info=True,
    )

    return JSONResponse(status_code=500, content=error_response.model_dump(mode="json"))


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs_url": "/docs" if settings.debug else None,
        "health_check": "/api/v1/health",
        "endpoints": {
            "components": "GET /api/v1/components",
            "templates": "GET|POST /api/v1/templates",
            "template": "GET|PUT|DELETE /api/v1/templates/{template_id}",
            "render": "GET /api/v1/templates/{template_id}/render",
            "export": "GET /api/v1/templates/{template_id}/export",
            "render_document": "POST /api/v1/render",
        },
    }


# Development server runner
def run_development_server() -> None:
    """Run development server with auto-reload."""
    uvicorn.run(
        "email_builder.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


def create_app() -> FastAPI:
    """
    Application factory function for creating FastAPI app instance.
    Used by integration tests and external deployment scripts.

    Returns:
        FastAPI application instance
    """
    return app


if __name__ == "__main__":
    run_development_server()
