#!/usr/bin/env python3
"""
Eligibility Gate - strict pass/fail filters applied before any scoring.

Only compensation and minimum experience gate a pair. Every rule is
evaluated and all failures are collected, so callers can show the
candidate every reason at once.
"""

from typing import List, Tuple
import logging

from core.matcher.dto import CandidateProfile, Job

logger = logging.getLogger(__name__)

SALARY_BELOW_EXPECTATION = "Offered salary below expectation"
INSUFFICIENT_EXPERIENCE = "Insufficient experience"


def check_compensation(profile: CandidateProfile, job: Job) -> List[str]:
    """Job's published maximum (or, failing that, minimum) must cover expectation."""
    expected = profile.expected_salary
    if expected is None:
        return []

    if job.salary_max is not None:
        offered = job.salary_max
    elif job.salary_min is not None:
        offered = job.salary_min
    else:
        return []

    if float(offered) < float(expected):
        return [SALARY_BELOW_EXPECTATION]
    return []


def check_experience(profile: CandidateProfile, job: Job) -> List[str]:
    """Candidate years must reach the job's minimum when both are known."""
    if profile.experience_years is None or job.experience_min is None:
        return []
    if profile.experience_years < job.experience_min:
        return [INSUFFICIENT_EXPERIENCE]
    return []


class EligibilityGate:
    """Stateless gate; safe to share across threads."""

    rules = (check_compensation, check_experience)

    def evaluate(self, profile: CandidateProfile, job: Job) -> Tuple[bool, List[str]]:
        """
        Apply every gate rule to the pair.

        Args:
            profile: Candidate profile being considered
            job: Job being considered

        Returns:
            (passes, reasons) where passes is True iff no rule failed
        """
        reasons: List[str] = []
        for rule in self.rules:
            reasons.extend(rule(profile, job))

        if reasons:
            logger.debug(f"Job {job.id} gate failed: {reasons}")
        return not reasons, reasons
