"""Shared fixtures: a scripted stand-in for the Gemini gateway."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

import pytest

from intel_pipeline.config import Settings
from intel_pipeline.models import AgentRole, GroundingReference, ModelResponse, UsageMetadata


def make_response(
    text: Optional[str],
    *,
    prompt_tokens: int = 100,
    output_tokens: int = 50,
    refs: Sequence[tuple] = (),
) -> ModelResponse:
    return ModelResponse(
        text=text,
        usage=UsageMetadata(
            prompt_token_count=prompt_tokens,
            candidates_token_count=output_tokens,
            total_token_count=prompt_tokens + output_tokens,
        ),
        grounding_references=tuple(GroundingReference(uri=u, title=t) for u, t in refs),
    )


@dataclass
class Call:
    model_id: str
    prompt: str
    system_instruction: Optional[str]
    response_schema: Optional[Dict[str, Any]]
    tools: tuple
    temperature: Optional[float]


@dataclass
class ScriptedLLM:
    """Replays queued responses (or raises queued exceptions) in order."""

    script: List[Union[ModelResponse, BaseException]] = field(default_factory=list)
    settings: Settings = field(default_factory=lambda: Settings(api_key="test-key"))
    calls: List[Call] = field(default_factory=list)
    chats: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def pricing(self):
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
        self.calls.append(
            Call(model_id, prompt, system_instruction, response_schema, tuple(tools), temperature)
        )
        if not self.script:
            raise AssertionError("ScriptedLLM ran out of responses")
        nxt = self.script.pop(0)
        if isinstance(nxt, BaseException):
            raise nxt
        return nxt

    def start_chat(self, model_id: str, *, system_instruction: str, tools: Sequence[str] = ()) -> Dict[str, Any]:
        chat = {"model": model_id, "system_instruction": system_instruction, "tools": tuple(tools)}
        self.chats.append(chat)
        return chat


ACME_ROUTE = {
    "target_company": "Acme Corp",
    "analysis_type": "pricing",
    "search_queries": ["pricing"],
}

ACME_SWOT = {
    "strengths": ["Strong brand"],
    "weaknesses": ["High prices"],
    "opportunities": ["SMB segment"],
    "threats": ["Low-cost entrants"],
    "scores": {
        "innovation": 70,
        "market_share": 60,
        "pricing_power": 80,
        "brand_reputation": 75,
        "velocity": 65,
    },
}


def acme_script() -> List[ModelResponse]:
    answer = "Acme Corp raised its Pro plan to $49/month on 2024-03-01 and launched Acme AI."
    return [
        make_response(json.dumps(ACME_ROUTE)),
        make_response(
            answer,
            refs=[
                ("https://acme.example/pricing", "Acme Pricing"),
                ("https://news.example/acme-ai", "Acme launches AI"),
            ],
        ),
        make_response("Acme Corp: Pro plan $49/month (since 2024-03-01). Launched Acme AI."),
        make_response(json.dumps(ACME_SWOT)),
        make_response("# Acme Corp Competitive Intelligence Report\n\n## Executive Summary\nAcme Corp ..."),
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key")


@pytest.fixture
def llm() -> ScriptedLLM:
    return ScriptedLLM()
