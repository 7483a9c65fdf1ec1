from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

from .gemini_llm import GeminiLLM
from .models import SCORE_KEYS, AgentRole, SWOTAnalysis, SWOTScores, StageResult
from .output_parsing import ModelOutputError, coerce_score, coerce_str_list, parse_json_object
from .prompts import ANALYST_SCHEMA, ANALYST_SYSTEM, ANALYST_USER
from .stage_log import Stopwatch, stage_failure, success_entry

logger = logging.getLogger(__name__)

MIN_CONTENT_CHARS = 10
NEUTRAL_SCORE = 50
NO_DATA_TEXT = "No data available for analysis."


def safe_content(content: str) -> str:
    if content and len(content.strip()) > MIN_CONTENT_CHARS:
        return content
    return NO_DATA_TEXT


def _scores_from(raw: Any) -> SWOTScores:
    # Missing keys get the neutral midpoint so scores are never partial.
    raw = raw if isinstance(raw, dict) else {}
    return SWOTScores(**{k: coerce_score(raw.get(k), NEUTRAL_SCORE) for k in SCORE_KEYS})


def swot_from_dict(data: Dict[str, Any]) -> SWOTAnalysis:
    return SWOTAnalysis(
        strengths=coerce_str_list(data.get("strengths")),
        weaknesses=coerce_str_list(data.get("weaknesses")),
        opportunities=coerce_str_list(data.get("opportunities")),
        threats=coerce_str_list(data.get("threats")),
        scores=_scores_from(data.get("scores")),
    )


def parse_swot(text: str) -> SWOTAnalysis:
    """
    Malformed output degrades to an empty SWOT with zero scores instead of
    failing the stage; a well-formed object with partial scores is backfilled.
    """
    try:
        data = parse_json_object(text)
    except ModelOutputError as e:
        logger.warning("JSON parse failed, using fallback empty SWOT: %s", e)
        return SWOTAnalysis.empty()
    return swot_from_dict(data)


@dataclass(frozen=True)
class AnalystAgent:
    llm: GeminiLLM

    def run(self, content: str) -> StageResult[SWOTAnalysis]:
        stopwatch = Stopwatch.start()
        model_id = self.llm.model_for(AgentRole.ANALYST)
        try:
            resp = self.llm.invoke(
                model_id,
                ANALYST_USER.format(content=safe_content(content)),
                system_instruction=ANALYST_SYSTEM.strip(),
                response_schema=ANALYST_SCHEMA,
                temperature=0.0,
            )
        except Exception as e:
            logger.error("Analyst stage failed: %s: %s", type(e).__name__, e)
            raise stage_failure(AgentRole.ANALYST, stopwatch, e) from e

        swot = parse_swot(resp.text or "")

        log = success_entry(
            AgentRole.ANALYST,
            f"Generated SWOT analysis with {swot.scores.average():.1f}% avg score",
            stopwatch,
            model_id,
            resp,
            self.llm.pricing,
        )
        return StageResult(payload=swot, log=log)
