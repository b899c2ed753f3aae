#!/usr/bin/env python3
"""
Matcher Models - Data structures for matching.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class ComparisonRecord:
    """Normalized (candidate, job) pair handed to a scoring strategy.

    Built fresh for every scoring call and never persisted.
    """
    candidate_skills: Tuple[str, ...] = ()
    candidate_experience: Optional[int] = None
    expected_salary: Optional[float] = None
    candidate_location: Optional[str] = None
    candidate_open_to_remote: bool = False
    candidate_education: str = ""
    candidate_summary: str = ""

    job_title: str = ""
    job_description: str = ""
    job_requirements: str = ""
    job_responsibilities: str = ""
    required_skills: Tuple[str, ...] = ()
    job_location: Optional[str] = None
    is_remote_job: bool = False
    job_type: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    required_experience: Optional[int] = None
    max_experience: Optional[int] = None


class ScoreBreakdown(BaseModel):
    """Five-dimension score record produced by a scoring strategy."""
    model_config = ConfigDict(frozen=True)

    skills: float = Field(ge=0, le=100)
    experience: float = Field(ge=0, le=100)
    education: float = Field(ge=0, le=100)
    responsibilities: float = Field(ge=0, le=100)
    location: float = Field(ge=0, le=100)
    overall: float = Field(ge=0, le=100)

    skills_explanation: str = ""
    experience_explanation: str = ""
    education_explanation: str = ""
    responsibilities_explanation: str = ""
    overall_explanation: str = ""

    strategy: str = "rule_based"


class MatchOutcome(BaseModel):
    """Result of matching one candidate against one job."""
    model_config = ConfigDict(frozen=True)

    subject_id: str
    target_id: str
    passes_gate: bool
    score_percent: float = Field(default=0.0, ge=0, le=100)
    breakdown: Optional[ScoreBreakdown] = None
    meets_threshold: bool = False
    gate_failure_reasons: List[str] = Field(default_factory=list)

    @property
    def is_match(self) -> bool:
        """Passed the gate and reached the threshold."""
        return self.passes_gate and self.meets_threshold

    @property
    def explanation(self) -> str:
        if self.breakdown is not None:
            return self.breakdown.overall_explanation
        if self.gate_failure_reasons:
            return "; ".join(self.gate_failure_reasons)
        return "Match calculated"

