"""Main API router combining all v1 route modules.

Aggregates all routers under the ``/api/v1`` prefix so the
FastAPI application only needs to include a single router.

Includes:
    * match: profile-based scheme matching
    * schemes: catalog listing, detail, categories and keyword search
    * health: liveness probe
"""

from __future__ import annotations

from fastapi import APIRouter

from src.api.v1 import health, match, schemes

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(match.router)
api_router.include_router(schemes.router)
api_router.include_router(health.router)
