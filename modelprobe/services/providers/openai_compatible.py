"""Base class for vendors exposing an OpenAI-compatible chat API.

Subclasses declare the validation model, a pricing table and the capability labels
attached to every listed model. Endpoints, listing and the smoke test follow
the OpenAI wire format. Any status below 400 counts as working.
"""

import logging
from typing import Dict, List, Optional, Sequence

from modelprobe.core.context import ProbeContext
from modelprobe.observability.logging import get_logger
from modelprobe.services.providers.base import BaseProvider, Model
from modelprobe.services.providers.catalog import PricingRule, apply_rule, match_rule
from modelprobe.services.providers.openai import TEST_PROMPT, unix_to_iso
from modelprobe.services.validation.probes import JSONProbe, StatusPolicy
from modelprobe.services.validation.registry import Endpoint

logger = get_logger(__name__)


class OpenAICompatibleProvider(BaseProvider):
    """Chat vendor speaking the OpenAI ``/chat/completions`` dialect."""

    DEFAULT_TIMEOUT_S = 60.0

    probe_strategy = JSONProbe(policy=StatusPolicy.NOT_ERROR)

    # Model sent in the chat completion check
    VALIDATION_MODEL: str = ""
    PRICING: Sequence[PricingRule] = ()
    # Whether PRICING patterns are prefixes rather than substrings
    PRICING_BY_PREFIX: bool = False
    MODEL_CAPABILITIES: Dict[str, str] = {}

    def _build_endpoints(self) -> List[Endpoint]:
        return [
            self.endpoint(
                "POST",
                "/chat/completions",
                "Create a chat completion",
                test_params={
                    "model": self.VALIDATION_MODEL,
                    "max_tokens": 5,
                    "messages": [{"role": "user", "content": "Hi"}],
                },
            ),
            self.endpoint("GET", "/models", "List available models"),
        ]

    def format_model_name(self, model_id: str) -> str:
        return model_id

    def enrich_model(self, model: Model) -> Model:
        """Apply the pricing table and the shared capability labels."""
        apply_rule(model, match_rule(model.id, self.PRICING, prefix=self.PRICING_BY_PREFIX))
        model.supports_tools = True
        model.can_stream = True
        model.capabilities = dict(self.MODEL_CAPABILITIES)
        if model.can_reason:
            model.capabilities["reasoning"] = "advanced"
        return model

    async def list_models(
        self,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> List[Model]:
        data = await self._request_json("GET", "/models", ctx)

        models = []
        for item in data.get("data", []):
            model_id = item.get("id", "")
            if not model_id:
                continue
            model = Model(
                id=model_id,
                name=self.format_model_name(model_id),
                created_at=unix_to_iso(item.get("created")),
            )
            models.append(self.enrich_model(model))

        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Found {len(models)} models for {self.name}",
        )
        return models

    async def test_model(
        self,
        model_id: str,
        ctx: Optional[ProbeContext] = None,
        verbose: bool = False,
    ) -> None:
        response = await self.send(
            "POST",
            "/chat/completions",
            ctx,
            headers=self.auth_headers(),
            json={
                "model": model_id,
                "max_tokens": 10,
                "messages": [{"role": "user", "content": TEST_PROMPT}],
            },
        )
        self._check_status(response, 200)
        data = self._decode_json(response)
        if verbose and data.get("choices"):
            content = data["choices"][0].get("message", {}).get("content", "")
            logger.info(f"Model {model_id} responded: {content}")
