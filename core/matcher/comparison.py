"""Builds the per-pair ComparisonRecord handed to scoring strategies."""

from typing import Iterable, Optional, Tuple

from core.matcher.dto import CandidateProfile, Job
from core.matcher.models import ComparisonRecord


def _as_float(value) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def _clean_skills(skills: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if not skills:
        return ()
    return tuple(s.strip() for s in skills if s and s.strip())


def build_comparison_record(profile: CandidateProfile, job: Job) -> ComparisonRecord:
    return ComparisonRecord(
        candidate_skills=_clean_skills(profile.skills),
        candidate_experience=profile.experience_years,
        expected_salary=_as_float(profile.expected_salary),
        candidate_location=profile.location,
        candidate_open_to_remote=bool(profile.open_to_remote),
        candidate_education=", ".join(e for e in profile.education if e),
        candidate_summary=profile.summary or "",
        job_title=job.title or "",
        job_description=job.description or "",
        job_requirements=job.requirements or "",
        job_responsibilities=job.responsibilities or "",
        required_skills=_clean_skills(job.required_skills),
        job_location=job.location,
        is_remote_job=bool(job.is_remote),
        job_type=job.job_type,
        salary_min=_as_float(job.salary_min),
        salary_max=_as_float(job.salary_max),
        required_experience=job.experience_min,
        max_experience=job.experience_max,
    )
