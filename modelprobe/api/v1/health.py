"""Health check endpoints."""

from fastapi import APIRouter, Response

from modelprobe import __version__
from modelprobe.core.config import settings
from modelprobe.observability.metrics import metrics

router = APIRouter()


@router.get(settings.HEALTH_PATH)
async def health_check():
    """
    Liveness probe endpoint.

    Returns basic status - use this for container liveness checks.
    """
    return {"status": "ok", "version": __version__}


@router.get(settings.METRICS_PATH)
async def prometheus_metrics():
    """
    Prometheus metrics endpoint.

    Returns all metrics in Prometheus text format.
    """
    if not settings.METRICS_ENABLED:
        return Response(content="Metrics disabled", status_code=404)

    content = metrics.get_metrics()
    return Response(content=content, media_type="text/plain; charset=utf-8")
