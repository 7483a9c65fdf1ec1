from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .models import AgentRole, UsageMetadata


@dataclass(frozen=True)
class ModelPricing:
    """USD per 1K tokens."""
    input: float
    output: float


PRICING: Dict[str, ModelPricing] = {
    "gemini-2.5-pro": ModelPricing(input=0.00125, output=0.01),
    "gemini-2.5-flash": ModelPricing(input=0.0003, output=0.0025),
    "gemini-2.5-flash-lite": ModelPricing(input=0.0001, output=0.0004),
    "gemini-2.0-flash": ModelPricing(input=0.0001, output=0.0004),
    "gemini-2.0-flash-lite": ModelPricing(input=0.000075, output=0.0003),
}

# Unknown model ids are billed as the general-purpose flash tier.
DEFAULT_PRICING_MODEL = "gemini-2.5-flash"

DEFAULT_MODELS: Dict[AgentRole, str] = {
    AgentRole.ROUTER: "gemini-2.5-flash",
    AgentRole.HUNTER: "gemini-2.5-flash",
    AgentRole.SCRAPER: "gemini-2.5-flash-lite",
    AgentRole.ANALYST: "gemini-2.5-pro",
    AgentRole.REPORTER: "gemini-2.5-pro",
}


def pricing_for(model_id: str, pricing: Mapping[str, ModelPricing] = PRICING) -> ModelPricing:
    found = pricing.get(model_id)
    if found is not None:
        return found
    return pricing.get(DEFAULT_PRICING_MODEL, PRICING[DEFAULT_PRICING_MODEL])


def estimate_cost(
    model_id: str,
    usage: Optional[UsageMetadata],
    pricing: Mapping[str, ModelPricing] = PRICING,
) -> float:
    if usage is None:
        return 0.0
    price = pricing_for(model_id, pricing)
    prompt_tokens = max(usage.prompt_token_count or 0, 0)
    output_tokens = max(usage.candidates_token_count or 0, 0)
    return prompt_tokens / 1000 * price.input + output_tokens / 1000 * price.output
