#!/usr/bin/env python3
"""
Recruiter Candidate Discovery - candidates that match one of a recruiter's jobs.

Two views:
- discover_candidates_for_job: every matchable candidate scored against the
  job; applicants first, then by score, descending.
- get_job_applicants: the job's applications, page by page. Each entry passes
  through the AccessControlGate; denied entries come back as redacted stubs
  and still count towards the page totals.
"""

from typing import Dict, List, Optional, Tuple
import heapq
import logging
import threading

from core.access.control import AccessControlGate
from core.discovery.base import DiscoveryService
from core.discovery.pool import check_cancelled
from core.discovery.models import (
    CandidateMatch, CandidateSummary, Page, RESTRICTED_STATUS, page_slice, validate_page_request
)
from core.exceptions import (
    AccessDenied, CandidateNotFound, JobNotFound, PermissionDenied, SingleMatchIneligible
)
from core.matcher.dto import Actor, Candidate, Job, JobApplication
from core.matcher.models import MatchOutcome
from core.readers import ApplicationReader, CandidateReader, JobReader

logger = logging.getLogger(__name__)

VIEW = "recruiter_candidates"

RESTRICTED_EXPLANATION = "Subscription required to view restricted job candidate data"
NO_PERMISSION_MESSAGE = "You don't have permission to view candidates for this job"
NO_APPLICANT_PERMISSION_MESSAGE = "You don't have permission to view applicants for this job"


def _redacted_stub() -> CandidateMatch:
    return CandidateMatch(
        candidate=None,
        match_percentage=0.0,
        breakdown=None,
        match_explanation=RESTRICTED_EXPLANATION,
        has_applied=True,
        application_status=RESTRICTED_STATUS,
    )


def _to_candidate_match(
    candidate: Candidate,
    outcome: Optional[MatchOutcome],
    application: Optional[JobApplication]
) -> CandidateMatch:
    profile = candidate.profile
    if outcome is None:
        explanation = "Match not calculated"
    else:
        explanation = outcome.explanation
    return CandidateMatch(
        candidate=CandidateSummary.from_candidate(candidate),
        match_percentage=outcome.score_percent if outcome is not None else 0.0,
        breakdown=outcome.breakdown if outcome is not None else None,
        match_explanation=explanation,
        expected_salary=float(profile.expected_salary) if profile and profile.expected_salary is not None else None,
        experience_years=profile.experience_years if profile else None,
        has_applied=application is not None,
        application_status=application.status if application is not None else None,
    )


def _ranking_key(match: CandidateMatch) -> Tuple[bool, float]:
    return match.has_applied, match.match_percentage


def _score_key(match: CandidateMatch) -> float:
    return match.match_percentage


class RecruiterCandidateDiscovery(DiscoveryService):
    """Recruiter-seeking-candidates view of the matching engine."""

    def __init__(
        self,
        engine,
        candidates: CandidateReader,
        jobs: JobReader,
        applications: ApplicationReader,
        access: AccessControlGate,
        cache=None,
        max_workers: int = 8
    ):
        super().__init__(engine, cache, max_workers)
        self.candidates = candidates
        self.jobs = jobs
        self.applications = applications
        self.access = access

    def _load_job(self, job_id: str) -> Job:
        job = self._fetch("job", lambda: self.jobs.get_job(job_id))
        if job is None:
            raise JobNotFound(f"Job {job_id} not found")
        return job

    def _load_owned_job(self, recruiter: Actor, job_id: str) -> Job:
        job = self._load_job(job_id)
        if not recruiter.is_recruiter or not recruiter.owns(job):
            raise PermissionDenied(NO_PERMISSION_MESSAGE)
        return job

    def _applications_by_candidate(self, job: Job) -> Dict[str, JobApplication]:
        applications = self._fetch(
            "applications", lambda: self.applications.list_applications_for_job(job.id)
        )
        return {a.candidate_id: a for a in applications}

    def _collect_matches(
        self,
        job: Job,
        stop_event: Optional[threading.Event] = None
    ) -> List[CandidateMatch]:
        candidates = self._fetch("matchable candidates", self.candidates.list_matchable_candidates)
        applied = self._applications_by_candidate(job)
        outcomes = self._score([(candidate, job) for candidate in candidates], stop_event)

        matches = [
            _to_candidate_match(candidate, outcome, applied.get(candidate.id))
            for candidate, outcome in zip(candidates, outcomes)
            if outcome is not None and outcome.is_match
        ]
        logger.info(f"Found {len(matches)} matching candidates for job: {job.id}")
        return matches

    def discover_candidates_for_job(
        self,
        recruiter: Actor,
        job_id: str,
        page: int = 1,
        size: int = 10,
        stop_event: Optional[threading.Event] = None
    ) -> Page[CandidateMatch]:
        """
        Paginated matching candidates for one of the recruiter's jobs.

        Raises:
            JobNotFound: unknown job
            PermissionDenied: the recruiter does not own the job
            CorpusFetchFailure: candidates could not be read
            DiscoveryCancelled: stop_event was set mid-request
        """
        validate_page_request(page, size)
        logger.info(f"Getting matching candidates for recruiter: {recruiter.id} and job: {job_id}")
        job = self._load_owned_job(recruiter, job_id)

        def compute() -> Page[CandidateMatch]:
            matches = sorted(self._collect_matches(job, stop_event), key=_ranking_key, reverse=True)
            return Page[CandidateMatch].build(page_slice(matches, page, size), page, size, len(matches))

        return self._read_through(
            VIEW, recruiter.id, {"job_id": job_id, "page": page, "size": size},
            Page[CandidateMatch], compute
        )

    def get_job_applicants(
        self,
        recruiter: Actor,
        job_id: str,
        page: int = 1,
        size: int = 10,
        stop_event: Optional[threading.Event] = None
    ) -> Page[CandidateMatch]:
        """
        Applicants to a job, in application order.

        Recruiters who do not own the job must pass can_access_job first. Each
        application on the page then passes can_access_application_data, which
        may consume quota; never cached for that reason.

        Raises:
            JobNotFound: unknown job
            AccessDenied: non-owner without access to the job
            DiscoveryCancelled: stop_event was set; no further quota is consumed
        """
        validate_page_request(page, size)
        logger.info(f"Getting applicants for recruiter: {recruiter.id} and job: {job_id}")
        job = self._load_job(job_id)

        if not recruiter.owns(job) and not self.access.can_access_job(recruiter, job):
            message = self.access.get_access_restriction_message(recruiter, job)
            raise AccessDenied(message or NO_APPLICANT_PERMISSION_MESSAGE)

        applications = self._fetch(
            "applications", lambda: self.applications.list_applications_for_job(job.id)
        )
        page_applications = page_slice(applications, page, size)

        granted: List[Tuple[int, JobApplication, Candidate]] = []
        entries: List[Optional[CandidateMatch]] = []
        for application in page_applications:
            # grants consume quota
            check_cancelled(stop_event)
            if not self.access.can_access_application_data(recruiter, job, application):
                entries.append(_redacted_stub())
                continue

            candidate = self._fetch(
                "candidate", lambda: self.candidates.get_candidate(application.candidate_id)
            )
            if candidate is None:
                logger.warning(f"Applicant {application.candidate_id} for job {job.id} no longer exists")
                entries.append(CandidateMatch(
                    match_explanation="Candidate not found",
                    has_applied=True,
                    application_status=application.status,
                ))
                continue

            granted.append((len(entries), application, candidate))
            entries.append(None)

        outcomes = self._score([(candidate, job) for _, _, candidate in granted], stop_event)
        for (index, application, candidate), outcome in zip(granted, outcomes):
            entries[index] = _to_candidate_match(candidate, outcome, application)

        return Page[CandidateMatch].build(entries, page, size, len(applications))

    def get_top_matches(
        self,
        recruiter: Actor,
        job_id: str,
        limit: int = 10,
        stop_event: Optional[threading.Event] = None
    ) -> List[CandidateMatch]:
        """Best-scoring candidates for the job, by score alone."""
        job = self._load_owned_job(recruiter, job_id)
        return heapq.nlargest(limit, self._collect_matches(job, stop_event), key=_score_key)

    def get_match_count(self, recruiter: Actor, job_id: str) -> int:
        job = self._load_owned_job(recruiter, job_id)
        return len(self._collect_matches(job))

    def get_single_match(self, recruiter: Actor, job_id: str, candidate_id: str) -> CandidateMatch:
        """
        Match one candidate against one of the recruiter's jobs.

        Raises:
            SingleMatchIneligible: the pair fails the gate (reasons) or the threshold (shortfall)
        """
        job = self._load_owned_job(recruiter, job_id)
        candidate = self._fetch("candidate", lambda: self.candidates.get_candidate(candidate_id))
        if candidate is None:
            raise CandidateNotFound(f"Candidate {candidate_id} not found")

        outcome = self.engine.match(candidate, job)
        if not outcome.passes_gate:
            raise SingleMatchIneligible(
                "Candidate does not meet the job's basic requirements",
                reasons=outcome.gate_failure_reasons,
            )
        if not outcome.meets_threshold:
            shortfall = self.engine.minimum_threshold - outcome.score_percent
            raise SingleMatchIneligible(
                f"Match score is {shortfall:.1f} points below the minimum threshold",
                shortfall=shortfall,
            )

        application = self._fetch(
            "application", lambda: self.applications.find_application(candidate_id, job_id)
        )
        return _to_candidate_match(candidate, outcome, application)
