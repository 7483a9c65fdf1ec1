"""Tests for the Gemini gateway: request construction and response extraction."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from intel_pipeline.config import Settings
from intel_pipeline.gemini_llm import GOOGLE_SEARCH, GeminiLLM, to_model_response
from intel_pipeline.models import AgentRole, GroundingReference
from intel_pipeline.prompts import ROUTER_SCHEMA


class FakeModels:
    def __init__(self, response: Any = None, error: Exception = None) -> None:
        self.response = response
        self.error = error
        self.requests: List[Dict[str, Any]] = []

    def generate_content(self, **kwargs: Any) -> Any:
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeChats:
    def __init__(self) -> None:
        self.created: List[Dict[str, Any]] = []

    def create(self, **kwargs: Any) -> Any:
        self.created.append(kwargs)
        return SimpleNamespace(**kwargs)


def fake_client(response: Any = None, error: Exception = None) -> SimpleNamespace:
    return SimpleNamespace(models=FakeModels(response, error), chats=FakeChats())


def sdk_response(text="hello", chunks=None, usage=True) -> SimpleNamespace:
    metadata = SimpleNamespace(grounding_chunks=chunks) if chunks is not None else None
    return SimpleNamespace(
        text=text,
        usage_metadata=(
            SimpleNamespace(prompt_token_count=10, candidates_token_count=5, total_token_count=15)
            if usage
            else None
        ),
        candidates=[SimpleNamespace(grounding_metadata=metadata)],
    )


class TestResponseExtraction:
    def test_text_and_usage(self) -> None:
        resp = to_model_response(sdk_response())
        assert resp.text == "hello"
        assert resp.usage.prompt_token_count == 10
        assert resp.usage.candidates_token_count == 5
        assert resp.usage.total_token_count == 15
        assert resp.grounding_references == ()

    def test_missing_usage(self) -> None:
        assert to_model_response(sdk_response(usage=False)).usage is None

    def test_grounding_chunks(self) -> None:
        chunks = [
            SimpleNamespace(web=SimpleNamespace(uri="https://a.example", title="A")),
            SimpleNamespace(web=None),
            SimpleNamespace(web=SimpleNamespace(uri="https://b.example", title=None)),
        ]
        resp = to_model_response(sdk_response(chunks=chunks))
        assert resp.grounding_references == (
            GroundingReference(uri="https://a.example", title="A"),
            GroundingReference(uri="https://b.example", title=None),
        )

    def test_no_candidates(self) -> None:
        raw = SimpleNamespace(text=None, usage_metadata=None, candidates=None)
        resp = to_model_response(raw)
        assert resp.text is None
        assert resp.grounding_references == ()


class TestInvoke:
    def test_plain_call(self) -> None:
        client = fake_client(sdk_response())
        llm = GeminiLLM(settings=Settings(api_key="k"), client=client)

        resp = llm.invoke("gemini-2.5-flash", "prompt text")

        assert resp.text == "hello"
        req = client.models.requests[0]
        assert req["model"] == "gemini-2.5-flash"
        assert req["contents"] == "prompt text"
        assert req["config"].response_mime_type is None
        assert not req["config"].tools

    def test_schema_tools_and_instruction(self) -> None:
        client = fake_client(sdk_response())
        llm = GeminiLLM(settings=Settings(api_key="k"), client=client)

        llm.invoke(
            "gemini-2.5-flash",
            "q",
            system_instruction="be terse",
            response_schema=ROUTER_SCHEMA,
            tools=(GOOGLE_SEARCH,),
            temperature=0.0,
        )

        config = client.models.requests[0]["config"]
        assert config.system_instruction == "be terse"
        assert config.response_mime_type == "application/json"
        assert config.response_schema is not None
        assert config.temperature == 0.0
        assert len(config.tools) == 1
        assert config.tools[0].google_search is not None

    def test_unknown_tool_rejected_before_call(self) -> None:
        client = fake_client(sdk_response())
        llm = GeminiLLM(settings=Settings(api_key="k"), client=client)
        with pytest.raises(ValueError, match="Unsupported tool"):
            llm.invoke("m", "q", tools=("code_execution",))
        assert client.models.requests == []

    def test_service_errors_propagate_unchanged(self) -> None:
        boom = ConnectionError("network down")
        llm = GeminiLLM(settings=Settings(api_key="k"), client=fake_client(error=boom))
        with pytest.raises(ConnectionError) as excinfo:
            llm.invoke("m", "q")
        assert excinfo.value is boom

    def test_configuration_accessors(self) -> None:
        settings = Settings(api_key="k")
        llm = GeminiLLM(settings=settings, client=fake_client())
        assert llm.model_for(AgentRole.ANALYST) == settings.model_for(AgentRole.ANALYST)
        assert llm.pricing is settings.pricing


class TestStartChat:
    def test_chat_gets_search_and_instruction(self) -> None:
        client = fake_client()
        llm = GeminiLLM(settings=Settings(api_key="k"), client=client)

        llm.start_chat("gemini-2.5-pro", system_instruction="ctx", tools=(GOOGLE_SEARCH,))

        created = client.chats.created[0]
        assert created["model"] == "gemini-2.5-pro"
        assert created["config"].system_instruction == "ctx"
        assert created["config"].tools[0].google_search is not None
