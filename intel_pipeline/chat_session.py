from __future__ import annotations

from typing import Any

from .gemini_llm import GOOGLE_SEARCH, GeminiLLM
from .models import AgentRole
from .prompts import CHAT_SYSTEM


def create_chat_session(llm: GeminiLLM, context_text: str) -> Any:
    """
    Opens a follow-up chat seeded with the finished report.
    Search stays enabled so questions outside the report still get answered.
    The returned SDK chat object owns history; nothing is tracked here.
    """
    return llm.start_chat(
        llm.model_for(AgentRole.ANALYST),
        system_instruction=CHAT_SYSTEM.format(context=context_text),
        tools=(GOOGLE_SEARCH,),
    )
