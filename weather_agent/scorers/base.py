"""Judge interface and the preprocess/analyze/score pipeline shared by all scorers.

A scorer never talks to an LLM directly: it builds a prompt and hands it to an
injected `Judge`, then validates whatever comes back against a strict pydantic
schema. Everything after validation (score lookup, confidence scaling,
clamping, reason text) is deterministic and can be tested with a stub judge.
"""

from __future__ import annotations

import json
from typing import Any, ClassVar, Dict, Generic, Mapping, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from weather_agent.domain import AgentRun, ScoreResult
from weather_agent.errors import MalformedJudgeOutput
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="scorers")

NEUTRAL_SCORE = 0.5


class Judge(Protocol):
    """An LLM-backed evaluator returning structured output for a prompt."""

    def evaluate(self, *, instructions: str, prompt: str, schema: Dict[str, Any]) -> Any:
        """Return the judge's answer as a mapping or a JSON string."""
        ...


class JudgeAnalysis(BaseModel):
    """Base for judge output schemas: camelCase keys, unknown keys ignored."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


AnalysisT = TypeVar("AnalysisT", bound=JudgeAnalysis)


def clamp_score(score: float) -> float:
    """Clamp a score to the 0-1 range."""
    return max(0.0, min(1.0, score))


def verdict_score(table: Mapping[str, float], verdict: Any, confidence: float | None = 1.0) -> float:
    """Map a categorical verdict to a number, scaled by confidence and clamped.

    Verdicts missing from the table score NEUTRAL_SCORE before scaling; a
    missing confidence counts as 1.
    """
    base = table.get(str(getattr(verdict, "value", verdict)), NEUTRAL_SCORE)
    return clamp_score(base * (1.0 if confidence is None else confidence))


def first_user_text(run: AgentRun) -> str:
    """Content of the first user message in the run, or an empty string."""
    return next((m.content for m in run.input_messages if m.role == "user"), "")


class Scorer(Generic[AnalysisT]):
    """Three-stage pipeline: preprocess the run, ask the judge, score the verdict."""

    name: ClassVar[str]
    description: ClassVar[str]
    instructions: ClassVar[str]
    analysis_model: ClassVar[type[JudgeAnalysis]]

    def preprocess(self, run: AgentRun) -> Dict[str, Any]:
        """Extract user text, assistant text and tool call names from the run."""
        return {
            "user_text": first_user_text(run),
            "assistant_text": run.text,
            "tool_names": [tc.tool_name for tc in run.tool_calls],
        }

    def build_prompt(self, pre: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def parse(self, raw: Any) -> AnalysisT:
        """Validate raw judge output against the analysis schema."""
        try:
            if isinstance(raw, (str, bytes)):
                return self.analysis_model.model_validate_json(raw)  # type: ignore[return-value]
            return self.analysis_model.model_validate(raw)  # type: ignore[return-value]
        except ValidationError as exc:
            raise MalformedJudgeOutput(self.name, str(exc)) from exc

    def analyze(self, pre: Mapping[str, Any], judge: Judge) -> AnalysisT:
        raw = judge.evaluate(
            instructions=self.instructions,
            prompt=self.build_prompt(pre),
            schema=self.analysis_model.model_json_schema(by_alias=True),
        )
        return self.parse(raw)

    def generate_score(self, analysis: AnalysisT) -> float:
        raise NotImplementedError

    def generate_reason(self, analysis: AnalysisT, score: float) -> str:
        raise NotImplementedError

    def score(self, run: AgentRun, judge: Judge) -> ScoreResult:
        """Grade one run; malformed judge output yields the neutral score."""
        pre = self.preprocess(run)
        try:
            analysis = self.analyze(pre, judge)
        except MalformedJudgeOutput as exc:
            logger.warning("%s; using neutral score %.1f", exc, NEUTRAL_SCORE)
            return ScoreResult(
                scorer=self.name,
                score=NEUTRAL_SCORE,
                reason=f"Judge output could not be parsed; neutral score {NEUTRAL_SCORE} applied.",
            )
        value = self.generate_score(analysis)
        return ScoreResult(scorer=self.name, score=value, reason=self.generate_reason(analysis, value))


def as_json(value: Any) -> str:
    """Compact JSON for prompts; missing data renders as "undefined"."""
    if value is None:
        return "undefined"
    return json.dumps(value)
