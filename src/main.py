"""Scheme matcher FastAPI application entry point.

Creates the FastAPI app, configures middleware, includes routers, and
builds the matching services from the scheme catalog at startup.
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from config.settings import settings
from src.api.router import api_router

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Structured logging configuration
# ---------------------------------------------------------------------------


def _configure_logging() -> None:
    """Set up structlog with JSON or console rendering based on settings."""
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load the scheme catalog and build the matching services.

    On startup:
      1. Configure logging
      2. Load the scheme catalog (bundled or ``settings.schemes_path``)
      3. Build the matcher and search services over that catalog
      4. Store everything on ``app.state``

    A catalog that fails to load is logged and replaced by an empty one;
    the endpoints then return empty results instead of failing.
    """
    _configure_logging()
    logger.info("app.startup", env=settings.env)

    app.state.start_time = time.time()

    # -- 1. Scheme catalog --------------------------------------------------
    from src.data.seed import load_schemes

    app.state.scheme_data = []
    try:
        app.state.scheme_data = load_schemes(settings.schemes_path)
        logger.info("app.scheme_data_loaded", count=len(app.state.scheme_data))
    except Exception:
        logger.warning("app.scheme_data_load_failed", path=settings.schemes_path, exc_info=True)

    # -- 2. Matching services -----------------------------------------------
    from src.services.scheme_matcher import SchemeMatcher
    from src.services.scheme_search import SchemeSearchService

    app.state.scheme_matcher = SchemeMatcher(app.state.scheme_data)
    app.state.scheme_search = SchemeSearchService(app.state.scheme_data)
    logger.info("app.services_initialised")

    yield

    logger.info("app.shutdown")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Scheme Matcher API",
    description=(
        "Matches a citizen's profile against government welfare schemes and "
        "returns a ranked, explained list of relevant schemes."
    ),
    version="0.1.0",
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# -- CORS middleware --------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
)

# -- Include routers -------------------------------------------------------
app.include_router(api_router)


@app.get("/api", response_class=ORJSONResponse)
async def api_info() -> dict:
    """API information endpoint."""
    return {
        "name": "Scheme Matcher API",
        "version": app.version,
        "docs": "/docs",
        "health": "/api/v1/health",
        "endpoints": {
            "match": "/api/v1/match",
            "schemes": "/api/v1/schemes",
            "search": "/api/v1/schemes/search",
            "categories": "/api/v1/schemes/categories",
            "health": "/api/v1/health",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host=settings.api_host, port=settings.api_port)
