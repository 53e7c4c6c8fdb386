"""API v1 router aggregation."""

from fastapi import APIRouter

from modelprobe.api.v1 import health, providers

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(providers.router, prefix="/providers", tags=["Providers"])
