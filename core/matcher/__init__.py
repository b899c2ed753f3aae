"""Matcher Module - domain objects, eligibility gate and comparison records.

MatchEngine lives in core.matcher.service and is imported from there, since
it depends on the scorer package which in turn uses these models.
"""
from core.matcher.dto import (
    Actor, ActorRole, Candidate, CandidateProfile, Job, JobApplication,
    JobCategory, categorize_job
)
from core.matcher.models import ComparisonRecord, MatchOutcome, ScoreBreakdown
from core.matcher.comparison import build_comparison_record
from core.matcher.eligibility import EligibilityGate

__all__ = [
    'EligibilityGate', 'build_comparison_record',
    'ComparisonRecord', 'MatchOutcome', 'ScoreBreakdown',
    'Actor', 'ActorRole', 'Candidate', 'CandidateProfile', 'Job',
    'JobApplication', 'JobCategory', 'categorize_job'
]
