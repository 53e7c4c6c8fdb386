"""Data-driven pricing and capability tables.

Vendors expose model ids but rarely prices, so listings are enriched from
ordered rule tables. The first rule whose pattern matches the model id wins;
every table ends with a catch-all rule.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple


@dataclass(frozen=True)
class PricingRule:
    """Enrichment applied to model ids matching ``pattern``.

    Attributes:
        pattern: Substring (or prefix) to look for; "" matches everything
        cost_in: USD per 1M input units
        cost_out: USD per 1M output units
        context_window: Context size in tokens (0 = leave as is)
        max_tokens: Max output tokens (0 = leave as is)
        supports_images: Model accepts image input
        supports_tools: Model supports tool/function calling
        can_reason: Reasoning model
        categories: Category labels
    """
    pattern: str
    cost_in: float
    cost_out: float
    context_window: int = 0
    max_tokens: int = 0
    supports_images: bool = False
    supports_tools: bool = False
    can_reason: bool = False
    categories: Tuple[str, ...] = ()
    capabilities: Dict[str, str] = field(default_factory=dict, hash=False, compare=False)


def match_rule(
    model_id: str,
    rules: Sequence[PricingRule],
    prefix: bool = False,
) -> Optional[PricingRule]:
    """Return the first rule matching ``model_id``.

    Args:
        model_id: Vendor model identifier
        rules: Ordered rule table
        prefix: Match patterns as prefixes instead of substrings
    """
    model_id = model_id.lower()
    for rule in rules:
        if not rule.pattern:
            return rule
        if prefix and model_id.startswith(rule.pattern):
            return rule
        if not prefix and rule.pattern in model_id:
            return rule
    return None


def apply_rule(model, rule: PricingRule):
    """Copy pricing, limits and categories from ``rule`` onto ``model``.

    Limits of 0 in the rule leave the model's values untouched.
    """
    model.cost_per_1m_in = rule.cost_in
    model.cost_per_1m_out = rule.cost_out
    if rule.context_window:
        model.context_window = rule.context_window
    if rule.max_tokens:
        model.max_tokens = rule.max_tokens
    model.supports_images = rule.supports_images
    model.supports_tools = rule.supports_tools
    model.can_reason = rule.can_reason
    if rule.categories:
        model.categories = list(rule.categories)
    model.capabilities.update(rule.capabilities)
    return model
