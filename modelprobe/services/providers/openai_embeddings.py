"""OpenAI embeddings provider.

Shares the OpenAI base URL and bearer auth with the chat provider and lists
only the text embedding models.
"""

import logging
from typing import List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.core.exceptions import DecodeError
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.providers.openai import OPENAI_BASE_URL, unix_to_iso
from modelprobe.services.validation.probes import JSONProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

EMBEDDING_CONTEXT_WINDOW = 8191

# id -> (name, description, USD per 1M tokens, dimensions, use case, request dimensions)
EMBEDDING_MODELS = {
    "text-embedding-3-small": (
        "Text Embedding 3 Small",
        "Smaller, more efficient embedding model with 1536 dimensions",
        0.02, "1536 (configurable: 512-1536)", "semantic search, clustering, recommendations (cost-effective)",
        1536,
    ),
    "text-embedding-3-large": (
        "Text Embedding 3 Large",
        "Most capable embedding model with up to 3072 dimensions",
        0.13, "3072 (configurable: 256-3072)", "semantic search, clustering, recommendations (highest quality)",
        3072,
    ),
    "text-embedding-ada-002": (
        "Text Embedding Ada 002",
        "Legacy embedding model with 1536 dimensions",
        0.10, "1536", "semantic search, clustering, recommendations (legacy)",
        None,
    ),
}


class EmbeddingsProvider(BaseProvider):
    """OpenAI text embeddings provider."""

    DEFAULT_BASE_URL = OPENAI_BASE_URL
    DEFAULT_TIMEOUT_S = 30.0
    API_KEY_ENV = "OPENAI_API_KEY"

    probe_strategy = JSONProbe(policy=StatusPolicy.NOT_ERROR)

    @property
    def name(self) -> str:
        return "embeddings"

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint("GET", "/models", "List available models"),
            self.endpoint(
                "POST",
                "/embeddings",
                "Create embeddings",
                test_params={"model": "text-embedding-3-small", "input": ["test"]},
            ),
        ]

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        data = await self._request_json("GET", "/models", ctx)

        models = []
        for item in data.get("data", []):
            entry = EMBEDDING_MODELS.get(item.get("id", ""))
            if entry is None:
                continue
            name, description, cost, dimensions, use_case, _ = entry
            models.append(
                Model(
                    id=item["id"],
                    name=name,
                    description=description,
                    cost_per_1m_in=cost,
                    context_window=EMBEDDING_CONTEXT_WINDOW,
                    created_at=unix_to_iso(item.get("created")),
                    categories=["embeddings", "text"],
                    capabilities={
                        "dimensions": dimensions,
                        "max_input": f"{EMBEDDING_CONTEXT_WINDOW} tokens",
                        "use_case": use_case,
                    },
                )
            )

        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Found {len(models)} embedding models for {self.name}",
        )
        return models

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_embeddings=True,
            supported_parameters=["model", "input", "dimensions", "encoding_format", "user"],
            security_features=["SOC2", "GDPR"],
            max_requests_per_minute=3000,
            max_tokens_per_request=EMBEDDING_CONTEXT_WINDOW,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        body = {"model": model_id, "input": ["test"]}
        entry = EMBEDDING_MODELS.get(model_id)
        if entry is not None and entry[-1]:
            body["dimensions"] = entry[-1]

        response = await self.send(
            "POST",
            "/embeddings",
            ctx,
            headers=self.auth_headers(),
            json=body,
        )
        self._check_status(response, 200)
        data = self._decode_json(response)
        if not data.get("data"):
            raise DecodeError(self.name, "no embeddings in response")
        if verbose:
            logger.info(f"Model {model_id} returned {len(data['data'][0].get('embedding', []))} dimensions")
