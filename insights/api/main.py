"""API router setup."""
from fastapi import APIRouter

from insights.api.routes import analytics, clients

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(analytics.router)
api_router.include_router(clients.router)
