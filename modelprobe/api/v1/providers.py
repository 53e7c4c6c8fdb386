"""Provider endpoints.

Endpoints:
    GET  /providers                                 - List providers and key status
    GET  /providers/{name}/capabilities             - Static capabilities
    GET  /providers/{name}/endpoints                - Current endpoint status
    POST /providers/{name}/validate                 - Probe every endpoint
    GET  /providers/{name}/models                   - List models
    POST /providers/{name}/models/{model_id}/test   - Smoke-test a model

Usage:
    # Validate OpenAI with a 10 second deadline
    POST /providers/openai/validate?timeout_s=10&verbose=true
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from modelprobe.core.exceptions import (
    ConfigurationError,
    ModelProbeException,
    NotFoundError,
    ProviderError,
    ValidationError,
)
from modelprobe.observability.logging import get_logger
from modelprobe.services.provider_service import ProviderService, get_provider_service
from modelprobe.services.providers.base import BaseProvider

logger = get_logger(__name__)

router = APIRouter()


# Response schemas
class ProviderSummary(BaseModel):
    """Registered provider."""

    name: str
    configured: bool = Field(..., description="Whether an API key is available")
    initialized: bool = Field(..., description="Whether an instance has been created")


class ProviderListResponse(BaseModel):
    """Response schema for listing providers."""

    items: List[ProviderSummary]
    total: int


class EndpointResponse(BaseModel):
    """Endpoint status (credentials never included)."""

    path: str
    method: str
    description: str
    critical: bool
    status: str
    latency_ms: int
    error: Optional[str] = None


class EndpointListResponse(BaseModel):
    """Endpoint registry state."""

    provider: str
    endpoints: List[EndpointResponse]
    summary: Dict[str, int]


class ValidationResponse(EndpointListResponse):
    """Result of a validation run.

    ``validation_error`` is set when a critical endpoint failed or, for
    providers that require one working endpoint, when none worked.
    """

    validation_error: Optional[str] = None


class ModelListResponse(BaseModel):
    """Response schema for listing models."""

    provider: str
    items: List[Dict[str, Any]]
    total: int


class ModelTestResponse(BaseModel):
    """Response schema for a model smoke test."""

    provider: str
    model_id: str
    success: bool
    message: str
    latency_ms: int


def _get_service() -> ProviderService:
    """Get the provider service instance."""
    return get_provider_service()


def _raise_http(e: ModelProbeException) -> None:
    if isinstance(e, NotFoundError):
        raise HTTPException(status_code=404, detail=e.message)
    if isinstance(e, ValidationError):
        raise HTTPException(status_code=422, detail=e.message)
    if isinstance(e, ConfigurationError):
        raise HTTPException(status_code=400, detail=e.message)
    if isinstance(e, ProviderError):
        raise HTTPException(status_code=502, detail=e.message)
    raise HTTPException(status_code=500, detail=e.message)


def _provider(name: str) -> BaseProvider:
    try:
        return _get_service().get_provider(name)
    except ModelProbeException as e:
        _raise_http(e)


def _endpoint_list(provider: BaseProvider) -> Dict[str, Any]:
    registry = provider.get_endpoints()
    return {
        "provider": provider.name,
        "endpoints": registry.to_list(),
        "summary": registry.summary(),
    }


@router.get(
    "",
    response_model=ProviderListResponse,
    summary="List providers",
)
async def list_providers():
    """List every exposed provider and whether it has an API key."""
    items = _get_service().list_configured()
    return ProviderListResponse(items=items, total=len(items))


@router.get(
    "/{name}/capabilities",
    summary="Get provider capabilities",
)
async def get_capabilities(name: str):
    """Static capability description of a provider."""
    provider = _provider(name)
    return {"provider": provider.name, **provider.get_capabilities().to_dict()}


@router.get(
    "/{name}/endpoints",
    response_model=EndpointListResponse,
    summary="Get endpoint status",
    description="Current state of the provider's endpoints (unknown until validated).",
)
async def get_endpoints(name: str):
    """Return the endpoint registry without probing."""
    return _endpoint_list(_provider(name))


@router.post(
    "/{name}/validate",
    response_model=ValidationResponse,
    summary="Validate provider endpoints",
    description="Probe every endpoint concurrently under one deadline.",
)
async def validate_endpoints(
    name: str,
    timeout_s: Optional[float] = Query(None, gt=0, le=600, description="Deadline for the whole run"),
    verbose: bool = Query(False, description="Log progress at INFO"),
):
    """Run endpoint validation and return every endpoint's result."""
    service = _get_service()
    try:
        registry, validation_error = await service.validate(name, timeout_s=timeout_s, verbose=verbose)
    except ModelProbeException as e:
        _raise_http(e)

    provider = service.get_provider(name)
    return ValidationResponse(
        provider=provider.name,
        endpoints=registry.to_list(),
        summary=registry.summary(),
        validation_error=validation_error,
    )


@router.get(
    "/{name}/models",
    response_model=ModelListResponse,
    summary="List provider models",
)
async def list_models(name: str, verbose: bool = Query(False)):
    """List models with pricing and capability metadata."""
    try:
        models = await _get_service().list_models(name, verbose=verbose)
    except ModelProbeException as e:
        logger.error(f"Model listing failed for {name}: {e.message}")
        _raise_http(e)

    return ModelListResponse(
        provider=name.lower(),
        items=[m.to_dict() for m in models],
        total=len(models),
    )


@router.post(
    "/{name}/models/{model_id}/test",
    response_model=ModelTestResponse,
    summary="Test a model",
    description="Send one minimal request exercising the model.",
)
async def test_model(
    name: str,
    model_id: str,
    timeout_s: Optional[float] = Query(None, gt=0, le=600),
    verbose: bool = Query(False),
):
    """Smoke-test a model. A failing model yields success=false, not an error status."""
    try:
        result = await _get_service().test_model(name, model_id, timeout_s=timeout_s, verbose=verbose)
    except ModelProbeException as e:
        _raise_http(e)

    return ModelTestResponse(**result.to_dict())
