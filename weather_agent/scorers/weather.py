"""LLM-judged scorers for weather agent transcripts."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping

from pydantic import Field

from weather_agent.domain import AgentRun
from weather_agent.scorers.base import (
    JudgeAnalysis,
    Scorer,
    as_json,
    clamp_score,
    first_user_text,
    verdict_score,
)

AVAILABLE_TOOLS_TEXT = """Available tools and their purposes:
- weatherTool: Current weather conditions for a location
- forecastTool: Multi-day weather forecasts (1-7 days)
- activityTool: Activity recommendations based on weather
- alertTool: Weather alerts and severe weather warnings
- clothingTool: Clothing recommendations for current conditions"""


def _joined(items: List[str]) -> str:
    return ", ".join(items) if items else "none"


# --- Tool call appropriateness ---------------------------------------------

APPROPRIATENESS_SCORES: Mapping[str, float] = MappingProxyType({
    "excellent": 1.0,
    "good": 0.8,
    "fair": 0.5,
    "poor": 0.2,
})


class ToolAppropriatenessAnalysis(JudgeAnalysis):
    expected_tools: List[str] = Field(default_factory=list)
    used_tools: List[str] = Field(default_factory=list)
    appropriateness: Literal["excellent", "good", "fair", "poor"]
    reasoning: str = ""
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)


class ToolCallAppropriatenessScorer(Scorer[ToolAppropriatenessAnalysis]):
    name = "Tool Call Appropriateness"
    description = "Evaluates if the right tool was used for the user request"
    instructions = (
        "You are an expert evaluator of tool usage appropriateness. "
        "Determine whether the assistant selected the most appropriate tool for the user request. "
        "Available tools: weatherTool (current conditions), forecastTool (multi-day forecast), "
        "activityTool (activity recommendations), alertTool (weather alerts), clothingTool (clothing suggestions). "
        "Return only the structured JSON matching the provided schema."
    )
    analysis_model = ToolAppropriatenessAnalysis

    def build_prompt(self, pre: Mapping[str, Any]) -> str:
        return f"""Evaluate if the assistant used appropriate tools for this weather-related request.

USER REQUEST: "{pre['user_text']}"

TOOLS USED: {as_json(pre['tool_names'])}

ASSISTANT RESPONSE: "{pre['assistant_text']}"

{AVAILABLE_TOOLS_TEXT}

Consider:
1. Did the assistant use tools that match the user's request?
2. Were multiple tools used when appropriate?
3. Were tools omitted when they should have been used?
4. Is the tool selection logical for the query type?

Return JSON with:
- expectedTools: array of tool names that should have been used
- usedTools: array of tool names that were actually used
- appropriateness: "excellent" | "good" | "fair" | "poor"
- reasoning: explanation of your evaluation
- confidence: 0-1 confidence in your assessment"""

    def generate_score(self, analysis: ToolAppropriatenessAnalysis) -> float:
        return verdict_score(APPROPRIATENESS_SCORES, analysis.appropriateness, analysis.confidence)

    def generate_reason(self, analysis: ToolAppropriatenessAnalysis, score: float) -> str:
        return (
            f"Tool appropriateness: {analysis.appropriateness}. "
            f"Expected: {_joined(analysis.expected_tools)}, Used: {_joined(analysis.used_tools)}. "
            f"Score: {score}. {analysis.reasoning}"
        ).strip()


# --- Response completeness --------------------------------------------------

COMPLETENESS_SCORES: Mapping[str, float] = MappingProxyType({
    "complete": 1.0,
    "mostly_complete": 0.8,
    "partial": 0.5,
    "incomplete": 0.2,
})

RequestType = Literal["current", "forecast", "activities", "alerts", "clothing", "general"]


class CompletenessAnalysis(JudgeAnalysis):
    request_type: List[RequestType] = Field(default_factory=list)
    addressed_aspects: List[str] = Field(default_factory=list)
    missing_aspects: List[str] = Field(default_factory=list)
    completeness: Literal["complete", "mostly_complete", "partial", "incomplete"]
    reasoning: str = ""


class CompletenessScorer(Scorer[CompletenessAnalysis]):
    name = "Response Completeness"
    description = "Evaluates if the response fully addresses all aspects of the user request"
    instructions = (
        "You are an expert evaluator of response completeness for weather assistance. "
        "Determine whether the assistant fully addressed all aspects of the user request, "
        "including current conditions, forecasts, activities, alerts, or clothing as relevant. "
        "Return only the structured JSON matching the provided schema."
    )
    analysis_model = CompletenessAnalysis

    def build_prompt(self, pre: Mapping[str, Any]) -> str:
        return f"""Evaluate if the weather assistant's response completely addresses the user's request.

USER REQUEST: "{pre['user_text']}"

ASSISTANT RESPONSE: "{pre['assistant_text']}"

TOOLS USED: {as_json(pre['tool_names'])}

Analyze:
1. What type of weather information was requested? (current, forecast, activities, alerts, clothing, general)
2. Did the response address all explicit and implicit needs?
3. Were relevant details provided (temperature, conditions, recommendations, etc.)?
4. Was location handling appropriate?
5. Were activity/clothing suggestions provided when relevant?

Return JSON with:
- requestType: array of relevant request types
- addressedAspects: array of aspects that were properly addressed
- missingAspects: array of aspects that were missing or incomplete
- completeness: "complete" | "mostly_complete" | "partial" | "incomplete"
- reasoning: explanation of your evaluation"""

    def generate_score(self, analysis: CompletenessAnalysis) -> float:
        return verdict_score(COMPLETENESS_SCORES, analysis.completeness)

    def generate_reason(self, analysis: CompletenessAnalysis, score: float) -> str:
        return (
            f"Completeness: {analysis.completeness}. "
            f"Addressed: {_joined(analysis.addressed_aspects)}. Missing: {_joined(analysis.missing_aspects)}. "
            f"Score: {score}. {analysis.reasoning}"
        ).strip()


# --- Location translation consistency ---------------------------------------

class TranslationAnalysis(JudgeAnalysis):
    user_location: str = ""
    detected_language: Literal["english", "non-english", "mixed", "unknown"]
    translation_consistency: Literal["consistent", "mostly_consistent", "inconsistent"]
    tools_used_english: bool
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    explanation: str = ""


def translation_score(analysis: TranslationAnalysis) -> float:
    """English requests get full credit; otherwise grade consistency and English tool input."""
    if analysis.detected_language == "english":
        return 1.0

    base = 0.5
    if analysis.translation_consistency == "consistent" and analysis.tools_used_english:
        base = 1.0
    elif analysis.translation_consistency == "mostly_consistent" and analysis.tools_used_english:
        base = 0.8
    elif analysis.translation_consistency == "inconsistent" or not analysis.tools_used_english:
        base = 0.3
    return clamp_score(base * analysis.confidence)


class TranslationScorer(Scorer[TranslationAnalysis]):
    name = "Location Translation Quality"
    description = "Checks that non-English location names are translated and used correctly across all tools"
    instructions = (
        "You are an expert evaluator of translation quality for geographic locations in weather contexts. "
        "Determine whether non-English locations are properly translated and consistently used "
        "across tool calls and responses. "
        "Return only the structured JSON matching the provided schema."
    )
    analysis_model = TranslationAnalysis

    def preprocess(self, run: AgentRun) -> Dict[str, Any]:
        tool_locations = [
            {"tool": tc.tool_name, "location": tc.input.get("location") or tc.input.get("city") or "unknown"}
            for tc in run.tool_calls
        ]
        return {
            "user_text": first_user_text(run),
            "assistant_text": run.text,
            "tool_locations": tool_locations,
        }

    def build_prompt(self, pre: Mapping[str, Any]) -> str:
        return f"""Evaluate location translation handling across the weather assistant's tools and response.

USER TEXT: "{pre['user_text']}"

ASSISTANT RESPONSE: "{pre['assistant_text']}"

TOOL LOCATIONS: {as_json(pre['tool_locations'])}

Tasks:
1) Identify if the user mentioned a location that appears non-English.
2) Check if all tool calls used consistent English location names.
3) Verify the final response uses proper English location names.
4) Assess overall translation consistency across the entire interaction.

Be lenient with transliteration differences (e.g., accents/diacritics).

Return JSON with:
{{
  "userLocation": string (the main location mentioned, empty string if none),
  "detectedLanguage": "english" | "non-english" | "mixed" | "unknown",
  "translationConsistency": "consistent" | "mostly_consistent" | "inconsistent",
  "toolsUsedEnglish": boolean,
  "confidence": number (0-1),
  "explanation": string
}}"""

    def generate_score(self, analysis: TranslationAnalysis) -> float:
        return translation_score(analysis)

    def generate_reason(self, analysis: TranslationAnalysis, score: float) -> str:
        return (
            f"Translation scoring: language={analysis.detected_language}, "
            f"consistency={analysis.translation_consistency}, toolsEnglish={str(analysis.tools_used_english).lower()}, "
            f"confidence={analysis.confidence}. Score={score}. {analysis.explanation}"
        ).strip()


# --- Activity recommendation relevance --------------------------------------

RELEVANCE_SCORES: Mapping[str, float] = MappingProxyType({
    "highly_relevant": 1.0,
    "relevant": 0.8,
    "somewhat_relevant": 0.5,
    "irrelevant": 0.2,
})


class ActivityRelevanceAnalysis(JudgeAnalysis):
    weather_conditions: str = ""
    activities_suggested: List[str] = Field(default_factory=list)
    relevance: Literal["highly_relevant", "relevant", "somewhat_relevant", "irrelevant"]
    reasoning: str = ""
    improvements: List[str] = Field(default_factory=list)


class ActivityRelevanceScorer(Scorer[ActivityRelevanceAnalysis]):
    name = "Activity Recommendation Relevance"
    description = "Evaluates if activity suggestions are appropriate for the weather conditions"
    instructions = (
        "You are an expert evaluator of weather-based activity recommendations. "
        "Determine whether the suggested activities are appropriate for the reported weather conditions. "
        "Return only the structured JSON matching the provided schema."
    )
    analysis_model = ActivityRelevanceAnalysis

    def preprocess(self, run: AgentRun) -> Dict[str, Any]:
        weather_data = next(
            (tc.output for tc in run.tool_calls if tc.tool_name in ("weatherTool", "forecastTool")), None
        )
        activity_data = next((tc.output for tc in run.tool_calls if tc.tool_name == "activityTool"), None)
        return {
            "user_text": first_user_text(run),
            "assistant_text": run.text,
            "weather_data": weather_data,
            "activity_data": activity_data,
        }

    def build_prompt(self, pre: Mapping[str, Any]) -> str:
        return f"""Evaluate if the activity recommendations match the weather conditions.

USER REQUEST: "{pre['user_text']}"

WEATHER DATA: {as_json(pre['weather_data'])}

ACTIVITY DATA: {as_json(pre['activity_data'])}

ASSISTANT RESPONSE: "{pre['assistant_text']}"

Consider:
1. Are outdoor activities suggested during good weather?
2. Are indoor alternatives provided during poor weather?
3. Do activity suggestions consider temperature, precipitation, and other factors?
4. Are the recommendations practical and safe?

Return JSON with:
- weatherConditions: summary of weather conditions
- activitiesSuggested: array of recommended activities
- relevance: "highly_relevant" | "relevant" | "somewhat_relevant" | "irrelevant"
- reasoning: explanation of your evaluation
- improvements: array of suggested improvements"""

    def generate_score(self, analysis: ActivityRelevanceAnalysis) -> float:
        return verdict_score(RELEVANCE_SCORES, analysis.relevance)

    def generate_reason(self, analysis: ActivityRelevanceAnalysis, score: float) -> str:
        return (
            f"Activity relevance: {analysis.relevance}. "
            f"Suggested: {_joined(analysis.activities_suggested)}. Score: {score}. {analysis.reasoning}"
        ).strip()
