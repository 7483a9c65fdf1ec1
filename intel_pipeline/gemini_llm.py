from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from google import genai
from google.genai import types

from .config import Settings
from .models import AgentRole, GroundingReference, ModelResponse, UsageMetadata
from .pricing import ModelPricing

logger = logging.getLogger(__name__)

GOOGLE_SEARCH = "google_search"


def _client_from_settings(settings: Settings) -> genai.Client:
    if settings.use_vertex:
        return genai.Client(
            vertexai=True,
            project=settings.gcp_project_id,
            location=settings.gcp_region,
        )
    return genai.Client(api_key=settings.api_key)


def _build_tools(tools: Sequence[str]) -> Optional[List[types.Tool]]:
    if not tools:
        return None
    out: List[types.Tool] = []
    for name in tools:
        if name != GOOGLE_SEARCH:
            raise ValueError(f"Unsupported tool grant: {name}")
        out.append(types.Tool(google_search=types.GoogleSearch()))
    return out


def _build_config(
    *,
    system_instruction: Optional[str],
    response_schema: Optional[Dict[str, Any]],
    tools: Sequence[str],
    temperature: Optional[float],
) -> types.GenerateContentConfig:
    kwargs: Dict[str, Any] = {}
    if system_instruction:
        kwargs["system_instruction"] = system_instruction
    if response_schema is not None:
        kwargs["response_mime_type"] = "application/json"
        kwargs["response_schema"] = response_schema
    grants = _build_tools(tools)
    if grants:
        kwargs["tools"] = grants
    if temperature is not None:
        kwargs["temperature"] = temperature
    return types.GenerateContentConfig(**kwargs)


def _extract_usage(resp: Any) -> Optional[UsageMetadata]:
    usage = getattr(resp, "usage_metadata", None)
    if usage is None:
        return None
    return UsageMetadata(
        prompt_token_count=getattr(usage, "prompt_token_count", None),
        candidates_token_count=getattr(usage, "candidates_token_count", None),
        total_token_count=getattr(usage, "total_token_count", None),
    )


def _extract_grounding(resp: Any) -> List[GroundingReference]:
    candidates = getattr(resp, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    refs: List[GroundingReference] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is None:
            continue
        refs.append(GroundingReference(uri=getattr(web, "uri", None), title=getattr(web, "title", None)))
    return refs


def to_model_response(resp: Any) -> ModelResponse:
    return ModelResponse(
        text=getattr(resp, "text", None),
        usage=_extract_usage(resp),
        grounding_references=tuple(_extract_grounding(resp)),
    )


@dataclass(frozen=True)
class GeminiLLM:
    """
    Single entry point to Gemini (Gemini API or Vertex AI).
    No retries and no error interpretation: SDK exceptions reach the caller as-is.
    """
    settings: Settings
    client: Any = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.client is None:
            object.__setattr__(self, "client", _client_from_settings(self.settings))

    @property
    def pricing(self) -> Mapping[str, ModelPricing]:
        return self.settings.pricing

    def model_for(self, role: AgentRole) -> str:
        return self.settings.model_for(role)

    def invoke(
        self,
        model_id: str,
        prompt: str,
        *,
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
        tools: Sequence[str] = (),
        temperature: Optional[float] = None,
    ) -> ModelResponse:
        config = _build_config(
            system_instruction=system_instruction,
            response_schema=response_schema,
            tools=tools,
            temperature=temperature,
        )
        logger.debug("generate_content model=%s prompt_chars=%d tools=%s", model_id, len(prompt), list(tools))
        resp = self.client.models.generate_content(
            model=model_id,
            contents=prompt,
            config=config,
        )
        return to_model_response(resp)

    def start_chat(
        self,
        model_id: str,
        *,
        system_instruction: str,
        tools: Sequence[str] = (),
    ) -> Any:
        config = _build_config(
            system_instruction=system_instruction,
            response_schema=None,
            tools=tools,
            temperature=None,
        )
        return self.client.chats.create(model=model_id, config=config)
