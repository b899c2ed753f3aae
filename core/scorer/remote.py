#!/usr/bin/env python3
"""
Remote Scoring - model-backed scoring strategy.

Serializes the comparison record into a prompt, sends it to the configured
LLMProvider and parses the JSON answer. Scores are advisory: the backend is
a generative model, so two calls on the same record may differ.
"""

from typing import Any, Dict, Optional
import json
import logging
import re

from core.exceptions import StrategyError, StrategyUnavailable
from core.llm.interfaces import LLMProvider
from core.llm.system_prompts import MATCH_SCORING_PROMPT_TEMPLATE, MATCH_SCORING_SYSTEM_PROMPT
from core.matcher.models import ComparisonRecord, ScoreBreakdown
from core.scorer.interfaces import ScoringStrategy

logger = logging.getLogger(__name__)

# response key -> ScoreBreakdown field
SCORE_FIELDS = {
    "skillsMatch": "skills",
    "experienceMatch": "experience",
    "educationMatch": "education",
    "responsibilitiesMatch": "responsibilities",
    "locationMatch": "location",
    "overallMatch": "overall",
}

EXPLANATION_FIELDS = {
    "skillsExplanation": "skills_explanation",
    "experienceExplanation": "experience_explanation",
    "educationExplanation": "education_explanation",
    "responsibilitiesExplanation": "responsibilities_explanation",
    "overallExplanation": "overall_explanation",
}

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def _or_unknown(value: Any) -> str:
    if value is None or value == "" or value == ():
        return "Not specified"
    return str(value)


def build_prompt(record: ComparisonRecord) -> str:
    """Render the comparison record into the scoring prompt."""
    return MATCH_SCORING_PROMPT_TEMPLATE.format(
        candidate_skills=_or_unknown(", ".join(record.candidate_skills)),
        candidate_education=_or_unknown(record.candidate_education),
        candidate_summary=_or_unknown(record.candidate_summary),
        candidate_experience=record.candidate_experience if record.candidate_experience is not None else 0,
        candidate_location=_or_unknown(record.candidate_location),
        candidate_open_to_remote=record.candidate_open_to_remote,
        job_title=_or_unknown(record.job_title),
        job_description=_or_unknown(record.job_description),
        job_requirements=_or_unknown(record.job_requirements),
        job_responsibilities=_or_unknown(record.job_responsibilities),
        required_skills=_or_unknown(", ".join(record.required_skills)),
        job_location=_or_unknown(record.job_location),
        is_remote_job=record.is_remote_job,
        job_type=_or_unknown(record.job_type),
    )


def strip_markdown_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if present."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_RE.sub("", cleaned).strip()
    return cleaned


def _extract_json_object(text: str) -> Dict[str, Any]:
    cleaned = strip_markdown_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        # Tolerate prose around the object
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise StrategyError("Response is not valid JSON")
        try:
            data = json.loads(cleaned[start:end + 1])
        except json.JSONDecodeError as e:
            raise StrategyError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise StrategyError(f"Expected JSON object, got {type(data).__name__}")
    return data


def _clamp_score(key: str, value: Any) -> float:
    try:
        score = float(value)
    except (TypeError, ValueError) as e:
        raise StrategyError(f"Field {key} is not numeric: {value!r}") from e
    if score != score:  # NaN
        raise StrategyError(f"Field {key} is NaN")
    return max(0.0, min(100.0, score))


def parse_response(text: str, strategy_name: str = "remote") -> ScoreBreakdown:
    """Parse the model's answer into a ScoreBreakdown.

    Raises:
        StrategyError: if the text is not a JSON object or a field is missing
    """
    data = _extract_json_object(text)

    missing = [k for k in (*SCORE_FIELDS, *EXPLANATION_FIELDS) if data.get(k) is None]
    if missing:
        raise StrategyError(f"Response missing required fields: {missing}")

    values: Dict[str, Any] = {
        field: _clamp_score(key, data[key]) for key, field in SCORE_FIELDS.items()
    }
    values.update({field: str(data[key]) for key, field in EXPLANATION_FIELDS.items()})
    return ScoreBreakdown(strategy=strategy_name, **values)


class RemoteScoring(ScoringStrategy):
    """Scores a pair by asking a remote language model."""

    name = "remote"

    def __init__(self, provider: Optional[LLMProvider]):
        self.provider = provider

    def score(self, record: ComparisonRecord) -> ScoreBreakdown:
        if self.provider is None:
            raise StrategyUnavailable("Remote scoring backend not configured")

        prompt = build_prompt(record)
        try:
            response = self.provider.complete(prompt, system_prompt=MATCH_SCORING_SYSTEM_PROMPT)
        except Exception as e:
            raise StrategyError(f"Remote scoring call failed: {e}") from e

        try:
            return parse_response(response, strategy_name=self.name)
        except StrategyError:
            logger.error(f"Failed to parse remote scoring response: {response[:500]!r}")
            raise
