from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class AgentRole(str, Enum):
    ROUTER = "ROUTER"
    HUNTER = "HUNTER"
    SCRAPER = "SCRAPER"
    ANALYST = "ANALYST"
    REPORTER = "REPORTER"


class LogStatus(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass(frozen=True)
class UsageMetadata:
    prompt_token_count: Optional[int] = None
    candidates_token_count: Optional[int] = None
    total_token_count: Optional[int] = None


@dataclass(frozen=True)
class GroundingReference:
    uri: Optional[str] = None
    title: Optional[str] = None


@dataclass(frozen=True)
class ModelResponse:
    """
    What the gateway hands back for one model call.
    grounding_references is only populated when the search tool was granted.
    """
    text: Optional[str] = None
    usage: Optional[UsageMetadata] = None
    grounding_references: Tuple[GroundingReference, ...] = ()


@dataclass(frozen=True)
class RoutingDecision:
    target_company: str
    analysis_type: str
    search_queries: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SourceRecord:
    url: str
    title: str
    snippet: str
    content: str


@dataclass(frozen=True)
class ExtractedContent:
    text: str


SCORE_KEYS = ("innovation", "market_share", "pricing_power", "brand_reputation", "velocity")


@dataclass(frozen=True)
class SWOTScores:
    innovation: int
    market_share: int
    pricing_power: int
    brand_reputation: int
    velocity: int

    @staticmethod
    def uniform(value: int) -> "SWOTScores":
        return SWOTScores(**{k: value for k in SCORE_KEYS})

    def to_dict(self) -> Dict[str, int]:
        return {k: getattr(self, k) for k in SCORE_KEYS}

    def average(self) -> float:
        return sum(self.to_dict().values()) / len(SCORE_KEYS)


@dataclass(frozen=True)
class SWOTAnalysis:
    strengths: Tuple[str, ...]
    weaknesses: Tuple[str, ...]
    opportunities: Tuple[str, ...]
    threats: Tuple[str, ...]
    scores: SWOTScores

    @staticmethod
    def empty() -> "SWOTAnalysis":
        return SWOTAnalysis(
            strengths=(),
            weaknesses=(),
            opportunities=(),
            threats=(),
            scores=SWOTScores.uniform(0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "opportunities": list(self.opportunities),
            "threats": list(self.threats),
            "scores": self.scores.to_dict(),
        }


@dataclass(frozen=True)
class Report:
    text: str


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    agent: AgentRole
    message: str
    status: LogStatus
    latency_ms: float = 0.0
    token_usage: int = 0
    cost: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        # latencyMs / tokenUsage are the wire names of a log record
        return {
            "timestamp": self.timestamp,
            "agent": self.agent.value,
            "message": self.message,
            "status": self.status.value,
            "latencyMs": self.latency_ms,
            "tokenUsage": self.token_usage,
            "cost": self.cost,
        }


@dataclass(frozen=True)
class StageResult(Generic[T]):
    payload: T
    log: LogEntry
