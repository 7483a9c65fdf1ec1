from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Optional

from .models import AgentRole, LogEntry, LogStatus, ModelResponse
from .pricing import PRICING, ModelPricing, estimate_cost


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


@dataclass(frozen=True)
class Stopwatch:
    started: float

    @staticmethod
    def start() -> "Stopwatch":
        return Stopwatch(started=time.perf_counter())

    def elapsed_ms(self) -> float:
        return max((time.perf_counter() - self.started) * 1000.0, 0.0)


class StageError(Exception):
    """
    A stage could not produce its payload.
    log is the ERROR entry recorded for the failed invocation; cause is the
    underlying exception (also chained as __cause__).
    """

    def __init__(self, agent: AgentRole, log: LogEntry, cause: Optional[BaseException] = None) -> None:
        super().__init__(log.message)
        self.agent = agent
        self.log = log
        self.cause = cause


def success_entry(
    agent: AgentRole,
    message: str,
    stopwatch: Stopwatch,
    model_id: str,
    response: ModelResponse,
    pricing: Mapping[str, ModelPricing] = PRICING,
) -> LogEntry:
    usage = response.usage
    return LogEntry(
        timestamp=utc_timestamp(),
        agent=agent,
        message=message,
        status=LogStatus.SUCCESS,
        latency_ms=stopwatch.elapsed_ms(),
        token_usage=max((usage.total_token_count or 0) if usage else 0, 0),
        cost=estimate_cost(model_id, usage, pricing),
    )


def error_entry(agent: AgentRole, message: str, *, latency_ms: float = 0.0) -> LogEntry:
    return LogEntry(
        timestamp=utc_timestamp(),
        agent=agent,
        message=message,
        status=LogStatus.ERROR,
        latency_ms=latency_ms,
        token_usage=0,
        cost=0.0,
    )


def stage_failure(agent: AgentRole, stopwatch: Stopwatch, exc: BaseException) -> StageError:
    entry = error_entry(
        agent,
        f"{agent.value.title()} stage failed: {type(exc).__name__}: {exc}",
        latency_ms=stopwatch.elapsed_ms(),
    )
    return StageError(agent, entry, exc)


def format_log_entry(entry: LogEntry) -> str:
    return (
        f"[{entry.agent.value}] {entry.status.value} {entry.message} "
        f"({entry.latency_ms:.0f} ms, {entry.token_usage} tok, ${entry.cost:.5f})"
    )
