#!/usr/bin/env python3
"""
Access Control Gate - subscription-aware authorization for match data.

Rules:
- Candidates may always view job listings.
- Recruiters may always access their own organization's jobs and applications.
- Restricted jobs not owned by the recruiter need an active subscription with
  remaining quota. Granting applicant-level data consumes one unit of quota
  in the same atomic store call; a denial consumes nothing.
- Standard jobs are free for every role.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from core.access.subscription import SubscriptionState, SubscriptionStore, UNLIMITED
from core.exceptions import AccessDenied
from core.matcher.dto import Actor, Candidate, Job, JobApplication

logger = logging.getLogger(__name__)

NO_SUBSCRIPTION_MESSAGE = (
    "This is a restricted job. You need an active subscription to access candidate data. "
    "Please upgrade your plan to view applications."
)
QUOTA_EXHAUSTED_MESSAGE = (
    "You have reached your monthly limit of restricted job applications. Remaining: {remaining}. "
    "Please upgrade your plan for more access."
)


@dataclass(frozen=True)
class SubscriptionRequirement:
    """What an actor needs to access a job's candidate data, and whether they have it."""
    requires_subscription: bool
    has_active_subscription: bool
    can_access: bool
    remaining_applications: int
    message: str


class AccessControlGate:
    """
    Authorizes actors against jobs and applications.

    The only shared mutable state is the quota counter, which is owned by the
    SubscriptionStore and only changed through ``increment_usage``.
    """

    def __init__(self, subscriptions: SubscriptionStore):
        self.subscriptions = subscriptions

    def _valid_subscription(self, actor_id: str) -> Optional[SubscriptionState]:
        subscription = self.subscriptions.get_active_subscription(actor_id)
        if subscription is None or not subscription.is_valid_for_restricted_access:
            return None
        return subscription

    def _consume_quota(self, actor: Actor) -> bool:
        if self._valid_subscription(actor.id) is None:
            return False
        granted = self.subscriptions.increment_usage(actor.id)
        if not granted:
            logger.info(f"Quota exhausted for actor {actor.id}")
        return granted

    def can_access_job(self, actor: Actor, job: Job) -> bool:
        """Whether the actor may open the job. Never consumes quota."""
        if actor.is_candidate:
            return True
        if not actor.is_recruiter:
            return False
        if actor.owns(job):
            return True
        if job.is_restricted:
            subscription = self._valid_subscription(actor.id)
            return subscription is not None and subscription.can_access_more
        return True

    def can_access_application_data(
        self,
        actor: Actor,
        job: Job,
        application: Optional[JobApplication] = None
    ) -> bool:
        """
        Whether a recruiter may see one application's candidate data.

        A granted restricted access consumes exactly one unit of quota.
        """
        if not actor.is_recruiter:
            return False
        if actor.owns(job):
            return True
        if job.is_restricted:
            return self._consume_quota(actor)
        return True

    def can_view_candidate_profile(self, actor: Actor, candidate: Candidate, job: Job) -> bool:
        """Profile view in the context of a job; consumes quota like application data."""
        if not actor.is_recruiter:
            return False
        if actor.owns(job):
            return True
        if job.is_restricted:
            return self._consume_quota(actor)
        return True

    def can_download_resume(self, actor: Actor, job: Job, application: JobApplication) -> bool:
        return self.can_access_application_data(actor, job, application)

    def can_contact_candidate(self, actor: Actor, candidate: Candidate, job: Job) -> bool:
        return self.can_view_candidate_profile(actor, candidate, job)

    def get_access_restriction_message(self, actor: Actor, job: Job) -> Optional[str]:
        """Why access to the job's candidate data would be denied, or None. Read-only."""
        if not (actor.is_recruiter and job.is_restricted) or actor.owns(job):
            return None

        subscription = self._valid_subscription(actor.id)
        if subscription is None:
            return NO_SUBSCRIPTION_MESSAGE
        if not subscription.can_access_more:
            return QUOTA_EXHAUSTED_MESSAGE.format(remaining=subscription.remaining_applications)
        return None

    def validate_restricted_access(self, actor: Actor, job: Job) -> None:
        """
        Raises:
            AccessDenied: if the actor would be refused restricted data for this job
        """
        message = self.get_access_restriction_message(actor, job)
        if message is not None:
            raise AccessDenied(message)

    def get_subscription_requirement(self, actor: Actor, job: Job) -> SubscriptionRequirement:
        if actor.is_recruiter and job.is_restricted and not actor.owns(job):
            subscription = self._valid_subscription(actor.id)
            return SubscriptionRequirement(
                requires_subscription=True,
                has_active_subscription=subscription is not None,
                can_access=subscription is not None and subscription.can_access_more,
                remaining_applications=subscription.remaining_applications if subscription else 0,
                message="Restricted Job - Subscription Required",
            )

        return SubscriptionRequirement(
            requires_subscription=False,
            has_active_subscription=True,
            can_access=True,
            remaining_applications=UNLIMITED,
            message="Free Access",
        )
