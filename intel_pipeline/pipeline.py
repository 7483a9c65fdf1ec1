from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from .analyst_agent import AnalystAgent
from .config import Settings
from .gemini_llm import GeminiLLM
from .hunter_agent import HunterAgent
from .models import (
    ExtractedContent,
    LogEntry,
    Report,
    RoutingDecision,
    SourceRecord,
    SWOTAnalysis,
)
from .reporter_agent import ReporterAgent
from .router_agent import RouterAgent
from .scraper_agent import ScraperAgent
from .slack_sender import send_to_slack
from .stage_log import StageError, format_log_entry

LogCallback = Callable[[LogEntry], None]


@dataclass(frozen=True)
class PipelineRun:
    query: str
    decision: RoutingDecision
    sources: Tuple[SourceRecord, ...]
    extracted: ExtractedContent
    swot: SWOTAnalysis
    report: Report
    logs: Tuple[LogEntry, ...] = field(default=())

    @property
    def total_cost(self) -> float:
        return sum(e.cost for e in self.logs)

    @property
    def total_tokens(self) -> int:
        return sum(e.token_usage for e in self.logs)


class PipelineAborted(Exception):
    """A stage before the reporter failed; no report was assembled."""

    def __init__(self, error: StageError, logs: Sequence[LogEntry]) -> None:
        super().__init__(f"Pipeline aborted at {error.agent.value}: {error.log.message}")
        self.error = error
        self.logs = tuple(logs)


def run_pipeline(query: str, llm: GeminiLLM, on_log: Optional[LogCallback] = None) -> PipelineRun:
    """
    Router -> Hunter -> Scraper -> Analyst -> Reporter, strictly in order.
    The audit trail belongs to this run; each entry is also passed to on_log
    as soon as its stage finishes.
    """
    logs: List[LogEntry] = []

    def record(entry: LogEntry) -> None:
        logs.append(entry)
        if on_log is not None:
            on_log(entry)

    try:
        routed = RouterAgent(llm=llm).run(query)
        record(routed.log)
        decision = routed.payload

        hunted = HunterAgent(llm=llm).run(decision.target_company, decision.search_queries)
        record(hunted.log)

        scraped = ScraperAgent(llm=llm).run(hunted.payload)
        record(scraped.log)

        analyzed = AnalystAgent(llm=llm).run(scraped.payload.text)
        record(analyzed.log)
    except StageError as e:
        record(e.log)
        raise PipelineAborted(e, logs) from e

    reported = ReporterAgent(llm=llm).run(analyzed.payload, scraped.payload.text, decision.target_company)
    record(reported.log)

    return PipelineRun(
        query=query,
        decision=decision,
        sources=hunted.payload,
        extracted=scraped.payload,
        swot=analyzed.payload,
        report=reported.payload,
        logs=tuple(logs),
    )


def report_filename(company: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", company.lower()).strip("-")
    return f"{slug or 'report'}.md"


def save_report(run: PipelineRun, reports_dir: str) -> Path:
    out_dir = Path(reports_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / report_filename(run.decision.target_company)
    path.write_text(run.report.text, encoding="utf-8")
    return path


def _print_log(entry: LogEntry) -> None:
    print(format_log_entry(entry), flush=True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    query = " ".join(argv).strip()
    if not query:
        print('usage: python -m intel_pipeline.pipeline "Analyze <company> <topic>"')
        return 2

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    settings = Settings.from_env()
    llm = GeminiLLM(settings=settings)

    try:
        run = run_pipeline(query, llm, on_log=_print_log)
    except PipelineAborted as e:
        print(f"[ERROR] {e}")
        return 1

    path = save_report(run, settings.reports_dir)
    print(f"[INFO] report saved: {path}")
    print(f"[INFO] total: {run.total_tokens} tok, ${run.total_cost:.5f}")

    if settings.slack_webhook_url:
        try:
            send_to_slack(settings.slack_webhook_url, run.report.text)
        except Exception as e:
            print(f"[WARN] slack delivery failed: {type(e).__name__}: {e}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
