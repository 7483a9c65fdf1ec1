from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

from .gemini_llm import GeminiLLM
from .models import AgentRole, RoutingDecision, StageResult
from .output_parsing import ModelOutputError, coerce_str_list, parse_json_object
from .prompts import ROUTER_SCHEMA, ROUTER_SYSTEM
from .stage_log import Stopwatch, stage_failure, success_entry

logger = logging.getLogger(__name__)


def _required_text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ModelOutputError(f"Router output is missing '{key}'")
    return value.strip()


def parse_routing_decision(text: str) -> RoutingDecision:
    data = parse_json_object(text)
    return RoutingDecision(
        target_company=_required_text(data, "target_company"),
        analysis_type=_required_text(data, "analysis_type"),
        search_queries=coerce_str_list(data.get("search_queries")),
    )


@dataclass(frozen=True)
class RouterAgent:
    """
    Turns the free-text request into a RoutingDecision.
    Unparseable output is fatal here: there is nothing to route on.
    """
    llm: GeminiLLM

    def run(self, query: str) -> StageResult[RoutingDecision]:
        stopwatch = Stopwatch.start()
        model_id = self.llm.model_for(AgentRole.ROUTER)
        try:
            resp = self.llm.invoke(
                model_id,
                query,
                system_instruction=ROUTER_SYSTEM.strip(),
                response_schema=ROUTER_SCHEMA,
                temperature=0.0,
            )
            decision = parse_routing_decision(resp.text or "")
        except Exception as e:
            logger.error("Router stage failed: %s: %s", type(e).__name__, e)
            raise stage_failure(AgentRole.ROUTER, stopwatch, e) from e

        log = success_entry(
            AgentRole.ROUTER,
            f"Identified target: {decision.target_company} ({decision.analysis_type})",
            stopwatch,
            model_id,
            resp,
            self.llm.pricing,
        )
        return StageResult(payload=decision, log=log)
