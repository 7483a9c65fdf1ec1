from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass, replace
from typing import Iterable, List, Sequence, Tuple

from .gemini_llm import GOOGLE_SEARCH, GeminiLLM
from .models import AgentRole, GroundingReference, SourceRecord, StageResult
from .prompts import HUNTER_TOPICS, HUNTER_USER
from .stage_log import Stopwatch, stage_failure, success_entry

logger = logging.getLogger(__name__)

MAX_SOURCE_CHARS = 2000
SNIPPET_CHARS = 200
FALLBACK_SNIPPET_CHARS = 150


def fallback_search_url(company: str) -> str:
    return f"https://google.com/search?q={urllib.parse.quote(company, safe='')}"


def build_hunter_prompt(company: str, search_queries: Sequence[str]) -> str:
    topics = [q.strip() for q in search_queries if q and q.strip()]
    query_context = HUNTER_TOPICS.format(topics=", ".join(topics)) if topics else ""
    return HUNTER_USER.format(company=company, query_context=query_context)


def _usable_references(refs: Iterable[GroundingReference]) -> List[GroundingReference]:
    out: List[GroundingReference] = []
    for ref in refs:
        uri = (ref.uri or "").strip()
        title = (ref.title or "").strip()
        if not uri or not title:
            continue
        out.append(GroundingReference(uri=uri, title=title))
    return out


def records_from_answer(company: str, answer: str, refs: Iterable[GroundingReference]) -> List[SourceRecord]:
    """
    The search tool returns citations without per-page text, so every
    discovered reference carries the same answer text as its content.
    """
    records = [
        SourceRecord(
            url=ref.uri or "",
            title=ref.title or "",
            snippet=answer[:SNIPPET_CHARS] + "...",
            content=answer,
        )
        for ref in _usable_references(refs)
    ]

    if not records and answer:
        records = [
            SourceRecord(
                url=fallback_search_url(company),
                title=f"{company} Search Results",
                snippet=answer[:FALLBACK_SNIPPET_CHARS] + "...",
                content=answer,
            )
        ]

    return [replace(r, content=r.content[:MAX_SOURCE_CHARS]) for r in records]


@dataclass(frozen=True)
class HunterAgent:
    llm: GeminiLLM

    def run(self, company: str, search_queries: Sequence[str] = ()) -> StageResult[Tuple[SourceRecord, ...]]:
        stopwatch = Stopwatch.start()
        model_id = self.llm.model_for(AgentRole.HUNTER)
        try:
            resp = self.llm.invoke(
                model_id,
                build_hunter_prompt(company, search_queries),
                tools=(GOOGLE_SEARCH,),
            )
        except Exception as e:
            logger.error("Hunter stage failed: %s: %s", type(e).__name__, e)
            raise stage_failure(AgentRole.HUNTER, stopwatch, e) from e

        records = tuple(records_from_answer(company, resp.text or "", resp.grounding_references))
        if not records:
            logger.warning("Hunter found no sources for %s", company)

        log = success_entry(
            AgentRole.HUNTER,
            f"Discovered {len(records)} high-signal URLs via Google Search",
            stopwatch,
            model_id,
            resp,
            self.llm.pricing,
        )
        return StageResult(payload=records, log=log)
