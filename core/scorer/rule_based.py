#!/usr/bin/env python3
"""
Rule-based Scoring - deterministic fallback strategy.

Dimension formulas:
- skills: share of required skills covered (substring match either way)
- experience: candidate years relative to required years
- education / responsibilities: fixed neutral defaults, no free-text analysis
- location: remote compatibility, else location string containment

Overall = 0.5 * skills + 0.3 * experience + 0.2 * location.

Education and responsibilities are deliberately left out of the overall
score, unlike the remote strategy which weighs all five dimensions.
"""

from typing import Iterable, Optional

from core.matcher.models import ComparisonRecord, ScoreBreakdown
from core.scorer.interfaces import ScoringStrategy

NEUTRAL_SKILLS_SCORE = 50.0
NEUTRAL_EXPERIENCE_SCORE = 75.0
DEFAULT_EDUCATION_SCORE = 75.0
DEFAULT_RESPONSIBILITIES_SCORE = 70.0
NEUTRAL_LOCATION_SCORE = 70.0
LOCATION_MISMATCH_SCORE = 60.0

WEIGHT_SKILLS = 0.5
WEIGHT_EXPERIENCE = 0.3
WEIGHT_LOCATION = 0.2


def _normalize_skills(skills: Iterable[str]) -> list:
    return [s.strip().lower() for s in skills if s and s.strip()]


def calculate_skills_score(candidate_skills: Iterable[str], required_skills: Iterable[str]) -> float:
    """Percentage of required skills that overlap a candidate skill.

    A required skill counts as covered when it contains, or is contained in,
    any candidate skill (case-insensitive).
    """
    candidate = _normalize_skills(candidate_skills)
    required = _normalize_skills(required_skills)
    if not candidate or not required:
        return NEUTRAL_SKILLS_SCORE

    matches = 0
    for req in required:
        if any(req in cand or cand in req for cand in candidate):
            matches += 1

    return min(100.0, matches * 100.0 / len(required))


def calculate_experience_score(candidate_years: Optional[int], required_years: Optional[int]) -> float:
    """100 when candidate meets the requirement, else proportional, floored at 0."""
    if candidate_years is None or required_years is None:
        return NEUTRAL_EXPERIENCE_SCORE
    if candidate_years >= required_years:
        return 100.0
    return max(0.0, candidate_years * 100.0 / required_years)


def calculate_location_score(record: ComparisonRecord) -> float:
    """Remote compatibility first, then case-insensitive location containment."""
    if record.is_remote_job and record.candidate_open_to_remote:
        return 100.0
    if record.job_location and record.candidate_location:
        if record.candidate_location.lower() in record.job_location.lower():
            return 100.0
        return LOCATION_MISMATCH_SCORE
    return NEUTRAL_LOCATION_SCORE


def calculate_overall_score(skills: float, experience: float, location: float) -> float:
    return WEIGHT_SKILLS * skills + WEIGHT_EXPERIENCE * experience + WEIGHT_LOCATION * location


class RuleBasedScoring(ScoringStrategy):
    """Deterministic scoring used when the remote strategy is off or fails."""

    name = "rule_based"

    def score(self, record: ComparisonRecord) -> ScoreBreakdown:
        skills = calculate_skills_score(record.candidate_skills, record.required_skills)
        experience = calculate_experience_score(
            record.candidate_experience, record.required_experience
        )
        location = calculate_location_score(record)
        overall = calculate_overall_score(skills, experience, location)

        return ScoreBreakdown(
            skills=skills,
            experience=experience,
            education=DEFAULT_EDUCATION_SCORE,
            responsibilities=DEFAULT_RESPONSIBILITIES_SCORE,
            location=location,
            overall=overall,
            skills_explanation="Skills match based on keyword overlap",
            experience_explanation="Experience match based on years",
            education_explanation="Education match estimated",
            responsibilities_explanation="Responsibilities match estimated",
            overall_explanation="Overall match calculated using weighted average",
            strategy=self.name,
        )
