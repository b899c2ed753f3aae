#!/usr/bin/env python3
"""
Match Engine - gate, score, threshold.

For one (candidate, job) pair:
1. Candidate without a profile -> not eligible
2. EligibilityGate fails -> not eligible, no strategy is invoked
3. Build ComparisonRecord and score via ScoringService (remote, else rule-based)
4. meets_threshold = overall >= minimum_threshold

The engine does no caching, pagination or access control; those belong to
the discovery layer.
"""
from typing import Optional
import logging

from core.matcher.comparison import build_comparison_record
from core.matcher.dto import Candidate, Job
from core.matcher.eligibility import EligibilityGate
from core.matcher.models import MatchOutcome
from core.scorer.service import ScoringService

logger = logging.getLogger(__name__)

PROFILE_INCOMPLETE = "Candidate profile not complete"
DEFAULT_MINIMUM_THRESHOLD = 70.0


class MatchEngine:
    """
    Central matching algorithm.

    Stateless apart from its collaborators, so one instance is shared by
    all discovery workers.
    """

    def __init__(
        self,
        scoring_service: ScoringService,
        gate: Optional[EligibilityGate] = None,
        minimum_threshold: float = DEFAULT_MINIMUM_THRESHOLD
    ):
        """
        Args:
            scoring_service: Strategy list with fallback policy
            gate: Eligibility gate; a default one is created if omitted
            minimum_threshold: Overall score a pair must reach to count as a match
        """
        self.scoring_service = scoring_service
        self.gate = gate or EligibilityGate()
        self.minimum_threshold = minimum_threshold

    @property
    def uses_remote(self) -> bool:
        return self.scoring_service.uses_remote

    def match(self, candidate: Candidate, job: Job) -> MatchOutcome:
        """
        Match one candidate against one job.

        Raises:
            StrategyError: if every scoring strategy failed
        """
        profile = candidate.profile
        if profile is None:
            return MatchOutcome(
                subject_id=candidate.id,
                target_id=job.id,
                passes_gate=False,
                gate_failure_reasons=[PROFILE_INCOMPLETE],
            )

        passes, reasons = self.gate.evaluate(profile, job)
        if not passes:
            return MatchOutcome(
                subject_id=candidate.id,
                target_id=job.id,
                passes_gate=False,
                gate_failure_reasons=reasons,
            )

        record = build_comparison_record(profile, job)
        breakdown = self.scoring_service.score(record)
        meets_threshold = breakdown.overall >= self.minimum_threshold

        logger.debug(
            f"Candidate {candidate.id} vs job {job.id}: {breakdown.overall:.1f} "
            f"({breakdown.strategy}, threshold {self.minimum_threshold})"
        )

        return MatchOutcome(
            subject_id=candidate.id,
            target_id=job.id,
            passes_gate=True,
            score_percent=breakdown.overall,
            breakdown=breakdown,
            meets_threshold=meets_threshold,
        )
