"""Main FastAPI application for the Glossary Search service."""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import structlog

from .api import (
    definitions_router,
    dictionaries_router,
    health_router,
    metrics_router,
    statistics_router,
    terms_router,
    text_router,
    transfer_router,
)
from .api.errors import to_http_exception
from .config import get_settings
from .core.exceptions import GlossaryError
from .models.response import ErrorResponse
from .service_instance import database, glossary_service

settings = get_settings()

logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Glossary Search service", version=settings.app_version)

    try:
        schema_version = database.initialize()
    except Exception as e:
        logger.error("Failed to initialize database", url=settings.database_url, error=str(e))
        raise

    logger.info(
        "Glossary store ready",
        schema_version=schema_version,
        llm_enabled=glossary_service.extractor.is_configured,
    )

    yield

    # Shutdown
    database.close()
    logger.info("Shutting down Glossary Search service")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Glossary store with term scanning, highlighting and ranked search",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next) -> Response:
    """Log all HTTP requests."""
    start_time = time.time()

    logger.info(
        "Request started",
        method=request.method,
        url=str(request.url),
        client_ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        "Request completed",
        method=request.method,
        url=str(request.url),
        status_code=response.status_code,
        process_time_ms=round(process_time * 1000, 2),
    )

    return response


@app.exception_handler(GlossaryError)
async def glossary_exception_handler(request: Request, exc: GlossaryError) -> JSONResponse:
    """Handle domain errors that escaped a router."""
    http_error = to_http_exception(exc)
    logger.warning(
        "Glossary error",
        method=request.method,
        url=str(request.url),
        error=str(exc),
        status_code=http_error.status_code,
    )

    return JSONResponse(
        status_code=http_error.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            message=str(exc),
        ).model_dump(mode="json"),
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle global exceptions."""
    logger.error(
        "Unhandled exception",
        method=request.method,
        url=str(request.url),
        error=str(exc),
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal Server Error",
            message="An unexpected error occurred",
            details={"exception": str(exc)} if settings.debug else None,
        ).model_dump(mode="json"),
    )


# Include API routers
app.include_router(dictionaries_router)
app.include_router(terms_router)
app.include_router(definitions_router)
app.include_router(text_router)
app.include_router(transfer_router)
app.include_router(statistics_router)
app.include_router(health_router)
app.include_router(metrics_router)


# Root endpoint
@app.get("/", summary="Root endpoint", description="Get basic information about the API")
async def root() -> dict:
    """Root endpoint with basic API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Glossary store with term scanning, highlighting and ranked search",
        "docs_url": "/docs",
        "health_url": "/api/v1/health",
        "status": "running",
    }


# API info endpoint
@app.get("/api", summary="API information", description="Get detailed API information")
async def api_info() -> dict:
    """Get detailed API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "endpoints": {
            "dictionaries": "/api/v1/dictionaries",
            "terms": "/api/v1/terms",
            "lookup": "/api/v1/terms/lookup/{term}",
            "search": "/api/v1/terms/search",
            "suggestions": "/api/v1/terms/suggestions/{query}",
            "definitions": "/api/v1/definitions",
            "scan": "/api/v1/text/scan",
            "highlight": "/api/v1/text/highlight",
            "index": "/api/v1/text/index",
            "import": "/api/v1/import",
            "export": "/api/v1/export/{dictionary_id}",
            "statistics": "/api/v1/statistics",
            "health": "/api/v1/health",
            "metrics": "/api/v1/metrics",
        },
        "features": [
            "Whole-word, case-insensitive term scanning",
            "Markdown and HTML highlighting",
            "Exact, prefix, contains and fuzzy search over terms, definitions and contexts",
            "Relevance-ranked fuzzy results",
            "Typo suggestions for failed lookups",
            "LLM-assisted term indexing",
            "JSON and CSV import/export",
        ],
        "limits": {
            "max_text_length": settings.max_text_length,
            "max_search_limit": settings.max_search_limit,
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "glossary_search.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
        log_level=settings.log_level.lower(),
    )
