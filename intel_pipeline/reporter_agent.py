from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from .gemini_llm import GeminiLLM
from .models import AgentRole, Report, StageResult, SWOTAnalysis
from .prompts import REPORTER_SYSTEM, REPORTER_USER
from .stage_log import Stopwatch, error_entry, success_entry

logger = logging.getLogger(__name__)

REPORT_FAILED_TEXT = (
    "# Report Generation Failed\n\n"
    "The AI model encountered an error generating the final report. Please try again."
)


class EmptyReportError(RuntimeError):
    pass


def build_reporter_prompt(swot: SWOTAnalysis, context_text: str, company: str) -> str:
    return REPORTER_USER.format(
        company=company,
        swot_json=json.dumps(swot.to_dict(), ensure_ascii=False, indent=2),
        context=context_text,
    )


@dataclass(frozen=True)
class ReporterAgent:
    """
    Last stage. Never raises: on any failure it returns the placeholder report
    and an ERROR log entry so the caller always has something to render.
    """
    llm: GeminiLLM

    def run(self, swot: SWOTAnalysis, context_text: str, company: str) -> StageResult[Report]:
        stopwatch = Stopwatch.start()
        model_id = self.llm.model_for(AgentRole.REPORTER)
        try:
            resp = self.llm.invoke(
                model_id,
                build_reporter_prompt(swot, context_text, company),
                system_instruction=REPORTER_SYSTEM.strip(),
            )
            if not resp.text:
                raise EmptyReportError("Reporter agent returned empty content.")
        except Exception as e:
            logger.error("Reporter stage failed: %s: %s", type(e).__name__, e)
            return StageResult(
                payload=Report(text=REPORT_FAILED_TEXT),
                log=error_entry(AgentRole.REPORTER, f"Failed to generate report: {e}"),
            )

        log = success_entry(
            AgentRole.REPORTER,
            f"Finalized executive report for {company}",
            stopwatch,
            model_id,
            resp,
            self.llm.pricing,
        )
        return StageResult(payload=Report(text=resp.text), log=log)
