from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .gemini_llm import GeminiLLM
from .models import AgentRole, ExtractedContent, SourceRecord, StageResult
from .prompts import SCRAPER_USER
from .stage_log import Stopwatch, stage_failure, success_entry

logger = logging.getLogger(__name__)

SUMMARY_CHARS = 2000

NO_SOURCES_TEXT = "No specific URLs found, please analyze general knowledge about the company."
EMPTY_EXTRACTION_TEXT = "Data extracted but no summary generated."


def build_raw_text(sources: Sequence[SourceRecord]) -> str:
    if not sources:
        return NO_SOURCES_TEXT
    blocks = [
        f"Source: {s.url}\nTitle: {s.title}\nSummary: {s.content[:SUMMARY_CHARS]}"
        for s in sources
    ]
    return "\n\n".join(blocks)


@dataclass(frozen=True)
class ScraperAgent:
    """Condenses discovered sources into one deduplicated, fact-preserving digest."""
    llm: GeminiLLM

    def run(self, sources: Sequence[SourceRecord]) -> StageResult[ExtractedContent]:
        stopwatch = Stopwatch.start()
        model_id = self.llm.model_for(AgentRole.SCRAPER)
        prompt = SCRAPER_USER.format(raw_text=build_raw_text(sources))
        try:
            resp = self.llm.invoke(model_id, prompt)
        except Exception as e:
            logger.error("Scraper stage failed: %s: %s", type(e).__name__, e)
            raise stage_failure(AgentRole.SCRAPER, stopwatch, e) from e

        text = resp.text or ""
        if not text:
            logger.warning("Scraper got an empty response, using placeholder text")
            text = EMPTY_EXTRACTION_TEXT

        log = success_entry(
            AgentRole.SCRAPER,
            f"Processed and cleaned content from {len(sources)} sources",
            stopwatch,
            model_id,
            resp,
            self.llm.pricing,
        )
        return StageResult(payload=ExtractedContent(text=text), log=log)
