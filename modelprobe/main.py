"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from modelprobe import __version__
from modelprobe.api.v1.router import api_router
from modelprobe.core.config import settings
from modelprobe.observability.logging import get_logger, setup_logging
from modelprobe.observability.metrics import metrics
from modelprobe.services.provider_service import get_provider_service

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    # Startup
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME}")

    service = get_provider_service()
    providers = service.available()
    configured = [p["name"] for p in service.list_configured() if p["configured"]]

    metrics.set_app_info(version=__version__, providers=",".join(providers))

    logger.info(f"Providers exposed: {providers}")
    logger.info(f"Providers with API keys: {configured}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await service.close_all()
    logger.info("Provider clients closed")
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.APP_NAME,
    description="Endpoint validation and model discovery for AI provider APIs",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint with API info."""
    return {
        "name": settings.APP_NAME,
        "version": __version__,
        "docs": "/docs",
        "health": f"/api/v1{settings.HEALTH_PATH}",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "modelprobe.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
