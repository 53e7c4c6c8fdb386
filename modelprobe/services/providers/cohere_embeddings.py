"""Cohere embeddings provider.

Only models serving the ``embed`` endpoint are listed. Every embedding
family shares the same price and input limit; the rule table differs only in
display name and categories.
"""

import logging
from typing import List, Optional

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model, ProviderCapabilities
from modelprobe.services.providers.catalog import PricingRule, apply_rule, match_rule
from modelprobe.services.validation.probes import JSONProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)

COHERE_BASE_URL = "https://api.cohere.ai/v1"
TEST_EMBED_MODEL = "embed-english-v3.0"
MAX_TEXTS_PER_REQUEST = 96

_EMBED_CAPABILITIES = {
    "embedding_types": "float,int8,uint8,binary,ubinary",
    "input_types": "search_document,search_query,classification,clustering",
    "truncate": "START,END,NONE",
}

COHERE_PRICING = (
    PricingRule("embed-english-v3.0", 0.10, 0.0, 512, 512,
                categories=("embeddings", "english", "high-quality")),
    PricingRule("embed-multilingual-v3.0", 0.10, 0.0, 512, 512,
                categories=("embeddings", "multilingual", "high-quality")),
    PricingRule("embed-english-light-v3.0", 0.10, 0.0, 512, 512,
                categories=("embeddings", "english", "light")),
    PricingRule("embed-multilingual-light-v3.0", 0.10, 0.0, 512, 512,
                categories=("embeddings", "multilingual", "light")),
    PricingRule("", 0.10, 0.0, 512, 512, categories=("embeddings",)),
)

_DISPLAY_NAMES = (
    ("embed-english-v3", "Cohere Embed English V3"),
    ("embed-multilingual-v3", "Cohere Embed Multilingual V3"),
    ("embed-english-light-v3", "Cohere Embed English Light V3"),
    ("embed-multilingual-light-v3", "Cohere Embed Multilingual Light V3"),
)


def format_model_name(model_id: str) -> str:
    for prefix, label in _DISPLAY_NAMES:
        if model_id.startswith(prefix):
            return f"{label}: {model_id}"
    return f"Cohere Embedding: {model_id}"


class CohereEmbeddingsProvider(BaseProvider):
    """Cohere embed API provider."""

    DEFAULT_BASE_URL = COHERE_BASE_URL
    DEFAULT_TIMEOUT_S = 60.0
    API_KEY_ENV = "COHERE_API_KEY"

    probe_strategy = JSONProbe(policy=StatusPolicy.NOT_ERROR)

    @property
    def name(self) -> str:
        return "cohere_embeddings"

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint(
                "POST",
                "/embed",
                "Create embeddings for text inputs",
                test_params={
                    "texts": ["test"],
                    "model": TEST_EMBED_MODEL,
                    "input_type": "search_query",
                },
            ),
            self.endpoint("GET", "/models", "List available models"),
        ]

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        data = await self._request_json("GET", "/models", ctx)

        models = []
        for item in data.get("models", []):
            if "embed" not in (item.get("endpoints") or []):
                continue
            model_id = item["name"]
            model = Model(id=model_id, name=format_model_name(model_id))
            apply_rule(model, match_rule(model_id, COHERE_PRICING, prefix=True))
            model.capabilities.update(_EMBED_CAPABILITIES)
            models.append(model)

        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Found {len(models)} embedding models for {self.name}",
        )
        return models

    def get_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_embeddings=True,
            supported_parameters=["input_type", "truncate", "embedding_types"],
            max_requests_per_minute=1000,
            max_tokens_per_request=MAX_TEXTS_PER_REQUEST,
        )

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        response = await self.send(
            "POST",
            "/embed",
            ctx,
            headers=self.auth_headers(),
            json={"texts": ["Hello, world!"], "model": model_id, "input_type": "search_query"},
        )
        self._check_status(response, 200)
        data = self._decode_json(response)
        if verbose and data.get("embeddings"):
            logger.info(f"Model {model_id} is working ({len(data['embeddings'][0])}-dimensional embeddings)")
