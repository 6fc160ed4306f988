"""Offline evaluation scorers for recorded weather agent runs."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from weather_agent.domain import AgentRun, ScoreResult
from utils.logging_utils import get_tagged_logger

from .base import NEUTRAL_SCORE, Judge, Scorer, clamp_score, verdict_score
from .judges import OllamaJudge
from .weather import (
    ActivityRelevanceScorer,
    CompletenessScorer,
    ToolCallAppropriatenessScorer,
    TranslationScorer,
)

logger = get_tagged_logger(__name__, tag="scorers")

SCORERS: Dict[str, Scorer] = {
    "tool_call_appropriateness": ToolCallAppropriatenessScorer(),
    "completeness": CompletenessScorer(),
    "translation": TranslationScorer(),
    "activity_relevance": ActivityRelevanceScorer(),
}

# Translation is registered on the agent but left out of batch evaluation runs.
DEFAULT_SCORERS = ("tool_call_appropriateness", "completeness", "activity_relevance")


def evaluate_run(
    run: AgentRun,
    scorers: Optional[Iterable[str]] = None,
    judge: Optional[Judge] = None,
) -> List[ScoreResult]:
    """Score one recorded run with the named scorers (default set if omitted)."""
    judge = judge or OllamaJudge()
    results: List[ScoreResult] = []
    for key in scorers or DEFAULT_SCORERS:
        scorer = SCORERS.get(key)
        if scorer is None:
            raise ValueError(f"Unknown scorer '{key}'")
        result = scorer.score(run, judge)
        logger.info("%s scored %.2f", scorer.name, result.score)
        results.append(result)
    return results


__all__ = [
    "NEUTRAL_SCORE",
    "Judge",
    "Scorer",
    "OllamaJudge",
    "SCORERS",
    "DEFAULT_SCORERS",
    "ToolCallAppropriatenessScorer",
    "CompletenessScorer",
    "TranslationScorer",
    "ActivityRelevanceScorer",
    "clamp_score",
    "verdict_score",
    "evaluate_run",
]
