"""
Requirement Map Service - Main Application
==========================================

FastAPI application serving force-directed layouts of requirement
dependency graphs.

Version: 0.1.0
"""

from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import settings
from shared.logging import bind_context, clear_context, get_logger, setup_logging
from shared.models.common import ErrorResponse, HealthResponse

from services.requirement_map.layout import ValidationError
from services.requirement_map.routes import layout

# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="requirement-map",
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "requirement_map_starting",
        environment=settings.environment.value,
        port=settings.ports.requirement_map,
        iterations=settings.layout.iterations,
        initial_radius=settings.layout.initial_radius,
    )

    yield

    logger.info("requirement_map_shutting_down")


# Create FastAPI application
app = FastAPI(
    title="Requirement Map Service",
    description="Force-directed 3D layout of requirement dependency graphs",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

REQUEST_ID_HEADER = "X-Request-ID"


@app.middleware("http")
async def request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind a request id to every log entry emitted while serving the request."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex

    clear_context()
    bind_context(request_id=request_id, path=request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_context()

    response.headers[REQUEST_ID_HEADER] = request_id
    return response


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    The in-process solver is the only component.
    """
    return HealthResponse(
        status="healthy",
        service="requirement-map",
        version="0.1.0",
        components={"solver": {"status": "healthy"}},
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Requirement Map Service",
        "version": "0.1.0",
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    layout.router,
    prefix="/api/v1/layout",
    tags=["Layout"],
)


# ============================================================================
# Error Handlers
# ============================================================================


@app.exception_handler(ValidationError)
async def layout_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Reject node lists with duplicate ids."""
    logger.warning(
        "layout_rejected",
        duplicate_ids=list(exc.duplicate_ids),
        path=request.url.path,
    )
    body = ErrorResponse(
        error=str(exc),
        error_code="duplicate_node_ids",
        details={"duplicate_ids": list(exc.duplicate_ids)},
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=body.model_dump(mode="json"),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "status_code": exc.status_code,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "status_code": 500,
        },
    )


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.requirement_map.main:app",
        host="0.0.0.0",
        port=settings.ports.requirement_map,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
