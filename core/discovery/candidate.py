#!/usr/bin/env python3
"""
Candidate Job Discovery - jobs that match a candidate.

Flow per request:
1. Load the candidate; profile must exist with matching enabled
2. Pull all active, matching-enabled jobs
3. Match every job (gate, then score) on the worker pool
4. Keep pairs that pass the gate and meet the threshold
5. Sort by score, highest first, then paginate

The full filtered list is sorted in memory before slicing, which bounds this
design to a moderate corpus. get_top_matches uses a bounded heap instead.
"""

from typing import List, Optional
import heapq
import logging
import threading

from core.discovery.base import DiscoveryService
from core.discovery.models import JobMatch, JobSummary, Page, page_slice, validate_page_request
from core.exceptions import (
    CandidateNotFound, JobNotFound, ProfileNotReady, SingleMatchIneligible
)
from core.matcher.dto import Candidate, Job
from core.matcher.models import MatchOutcome
from core.readers import CandidateReader, JobReader

logger = logging.getLogger(__name__)

VIEW = "candidate_jobs"


def _to_job_match(job: Job, outcome: MatchOutcome) -> JobMatch:
    return JobMatch(
        job=JobSummary.from_job(job),
        match_percentage=outcome.score_percent,
        breakdown=outcome.breakdown,
        match_explanation=outcome.explanation,
    )


def _score_key(match: JobMatch) -> float:
    return match.match_percentage


class CandidateJobDiscovery(DiscoveryService):
    """Candidate-seeking-jobs view of the matching engine."""

    def __init__(self, engine, candidates: CandidateReader, jobs: JobReader, cache=None, max_workers: int = 8):
        super().__init__(engine, cache, max_workers)
        self.candidates = candidates
        self.jobs = jobs

    def _load_candidate(self, candidate_id: str) -> Candidate:
        candidate = self._fetch("candidate", lambda: self.candidates.get_candidate(candidate_id))
        if candidate is None:
            raise CandidateNotFound(f"Candidate {candidate_id} not found")
        return candidate

    def _load_matchable_candidate(self, candidate_id: str) -> Candidate:
        candidate = self._load_candidate(candidate_id)
        if candidate.profile is None:
            raise ProfileNotReady("Please complete your profile to see job matches")
        if not candidate.profile.matching_enabled:
            raise ProfileNotReady("Job matching is disabled for this profile")
        return candidate

    def _collect_matches(
        self,
        candidate: Candidate,
        stop_event: Optional[threading.Event] = None
    ) -> List[JobMatch]:
        jobs = self._fetch("active jobs", self.jobs.list_active_matchable_jobs)
        outcomes = self._score([(candidate, job) for job in jobs], stop_event)

        matches = [
            _to_job_match(job, outcome)
            for job, outcome in zip(jobs, outcomes)
            if outcome is not None and outcome.is_match
        ]
        logger.info(f"Found {len(matches)} matching jobs out of {len(jobs)} for candidate {candidate.id}")
        return matches

    def discover_jobs_for_candidate(
        self,
        candidate_id: str,
        page: int = 1,
        size: int = 10,
        stop_event: Optional[threading.Event] = None
    ) -> Page[JobMatch]:
        """
        Paginated matching jobs for a candidate, best first.

        Raises:
            CandidateNotFound: unknown candidate
            ProfileNotReady: profile missing or matching disabled
            CorpusFetchFailure: jobs could not be read
            DiscoveryCancelled: stop_event was set mid-request
        """
        validate_page_request(page, size)
        logger.info(f"Getting matching jobs for candidate: {candidate_id}")
        candidate = self._load_matchable_candidate(candidate_id)

        def compute() -> Page[JobMatch]:
            matches = sorted(self._collect_matches(candidate, stop_event), key=_score_key, reverse=True)
            return Page[JobMatch].build(page_slice(matches, page, size), page, size, len(matches))

        return self._read_through(
            VIEW, candidate_id, {"page": page, "size": size}, Page[JobMatch], compute
        )

    def get_top_matches(
        self,
        candidate_id: str,
        limit: int = 10,
        stop_event: Optional[threading.Event] = None
    ) -> List[JobMatch]:
        candidate = self._load_matchable_candidate(candidate_id)
        return heapq.nlargest(limit, self._collect_matches(candidate, stop_event), key=_score_key)

    def get_match_count(self, candidate_id: str) -> int:
        """Number of matching jobs; 0 when the profile is missing or matching is off."""
        try:
            candidate = self._load_matchable_candidate(candidate_id)
        except ProfileNotReady:
            return 0
        return len(self._collect_matches(candidate))

    def get_single_match(self, candidate_id: str, job_id: str) -> JobMatch:
        """
        Match one candidate against one job.

        Raises:
            SingleMatchIneligible: the pair fails the gate (reasons) or the threshold (shortfall)
        """
        candidate = self._load_candidate(candidate_id)
        job = self._fetch("job", lambda: self.jobs.get_job(job_id))
        if job is None:
            raise JobNotFound(f"Job {job_id} not found")

        outcome = self.engine.match(candidate, job)
        if not outcome.passes_gate:
            raise SingleMatchIneligible(
                "Job does not meet your basic requirements",
                reasons=outcome.gate_failure_reasons,
            )
        if not outcome.meets_threshold:
            shortfall = self.engine.minimum_threshold - outcome.score_percent
            raise SingleMatchIneligible(
                f"Match score is {shortfall:.1f} points below the minimum threshold",
                shortfall=shortfall,
            )
        return _to_job_match(job, outcome)
