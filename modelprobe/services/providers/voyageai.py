"""Voyage AI embeddings provider.

Voyage has no model listing endpoint, so the catalog is static.
"""

import logging
from typing import List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.validation.probes import JSONProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

VOYAGE_BASE_URL = "https://api.voyageai.com/v1"
VOYAGE_CONTEXT_WINDOW = 16000

# (id, name, embedding dimension, categories)
VOYAGE_MODELS = (
    ("voyage-2", "Voyage 2: General-purpose embeddings", 1024, ("embeddings", "general-purpose")),
    ("voyage-code-2", "Voyage Code 2: Code-optimized embeddings", 1536, ("embeddings", "code")),
    ("voyage-large-2", "Voyage Large 2: High-performance embeddings", 1536,
     ("embeddings", "high-performance")),
)


class VoyageAIProvider(BaseProvider):
    """Voyage AI embeddings provider."""

    DEFAULT_BASE_URL = VOYAGE_BASE_URL
    DEFAULT_TIMEOUT_S = 60.0
    API_KEY_ENV = "VOYAGE_API_KEY"

    probe_strategy = JSONProbe(policy=StatusPolicy.NOT_ERROR)

    @property
    def name(self) -> str:
        return "voyageai"

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint(
                "POST",
                "/embeddings",
                "Create embeddings",
                test_params={"input": "test", "model": "voyage-2"},
            ),
        ]

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        models = [
            Model(
                id=model_id,
                name=name,
                context_window=VOYAGE_CONTEXT_WINDOW,
                categories=list(categories),
                capabilities={"embedding_dimension": str(dimension), "max_batch_size": "128"},
            )
            for model_id, name, dimension, categories in VOYAGE_MODELS
        ]
        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Found {len(models)} models for {self.name}",
        )
        return models

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_embeddings=True,
            supported_parameters=["input_type", "truncation_type"],
            max_requests_per_minute=60,
            max_tokens_per_request=VOYAGE_CONTEXT_WINDOW,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        response = await self.send(
            "POST",
            "/embeddings",
            ctx,
            headers=self.auth_headers(),
            json={"input": "test embedding", "model": model_id},
        )
        self._check_status(response, 200)
        data = self._decode_json(response)
        if verbose and data.get("data"):
            dimension = len(data["data"][0].get("embedding", []))
            logger.info(f"Model {model_id} is working ({dimension}-dimensional embeddings)")
