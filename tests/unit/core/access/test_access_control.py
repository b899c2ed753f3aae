"""
Tests for AccessControlGate and the in-memory quota store.
"""
import threading
from datetime import datetime, timedelta, timezone

import pytest

from core.access.control import AccessControlGate, NO_SUBSCRIPTION_MESSAGE
from core.access.subscription import InMemorySubscriptionStore, SubscriptionPlan, SubscriptionState
from core.exceptions import AccessDenied
from core.matcher.dto import Actor, ActorRole, JobApplication, JobCategory
from tests.mocks.matching_mocks import make_candidate, make_job

RECRUITER = Actor(id="recruiter-2", role=ActorRole.RECRUITER, organization_id="org-2")
OWNER = Actor(id="recruiter-1", role=ActorRole.RECRUITER, organization_id="org-1")
COLLEAGUE = Actor(id="recruiter-3", role=ActorRole.RECRUITER, organization_id="org-1")
CANDIDATE = Actor(id="cand-1", role=ActorRole.CANDIDATE)


def _restricted_job(job_id="job-r"):
    return make_job(job_id, category=JobCategory.RESTRICTED)


def _standard_job(job_id="job-s"):
    return make_job(job_id, title="Warehouse Associate", category=None)


def _application(job_id="job-r"):
    return JobApplication(id=f"app-{job_id}", candidate_id="cand-1", job_id=job_id)


def _subscribe(store, plan=SubscriptionPlan.BASIC, used=0, **kwargs):
    store.put(SubscriptionState.for_plan(RECRUITER.id, plan, applications_used=used, **kwargs))


class TestCanAccessJob:

    def test_candidates_always_allowed(self, access_gate):
        assert access_gate.can_access_job(CANDIDATE, _restricted_job()) is True

    def test_owner_and_organization_allowed(self, access_gate):
        assert access_gate.can_access_job(OWNER, _restricted_job()) is True
        assert access_gate.can_access_job(COLLEAGUE, _restricted_job()) is True

    def test_standard_job_free(self, access_gate):
        assert access_gate.can_access_job(RECRUITER, _standard_job()) is True

    def test_restricted_without_subscription(self, access_gate):
        assert access_gate.can_access_job(RECRUITER, _restricted_job()) is False

    def test_restricted_with_quota_does_not_consume(self, access_gate, subscriptions):
        _subscribe(subscriptions, used=10)

        assert access_gate.can_access_job(RECRUITER, _restricted_job()) is True
        assert subscriptions.get_active_subscription(RECRUITER.id).applications_used == 10

    def test_restricted_with_exhausted_quota(self, access_gate, subscriptions):
        _subscribe(subscriptions, used=50)

        assert access_gate.can_access_job(RECRUITER, _restricted_job()) is False

    def test_other_roles_denied(self, access_gate):
        admin = Actor(id="admin", role=ActorRole.ADMIN)

        assert access_gate.can_access_job(admin, _standard_job()) is False

    def test_title_keywords_mark_job_restricted(self, access_gate):
        job = make_job("job-k", title="Senior Python Engineer", category=None)

        assert job.is_restricted is True
        assert access_gate.can_access_job(RECRUITER, job) is False


class TestCanAccessApplicationData:

    def test_candidate_denied(self, access_gate):
        assert access_gate.can_access_application_data(CANDIDATE, _standard_job(), _application("job-s")) is False

    def test_owner_free(self, access_gate, subscriptions):
        assert access_gate.can_access_application_data(OWNER, _restricted_job(), _application()) is True

    def test_standard_job_free(self, access_gate, subscriptions):
        _subscribe(subscriptions, used=3)

        assert access_gate.can_access_application_data(RECRUITER, _standard_job(), _application("job-s")) is True
        assert subscriptions.get_active_subscription(RECRUITER.id).applications_used == 3

    def test_grant_consumes_one_unit(self, access_gate, subscriptions):
        _subscribe(subscriptions, used=3)

        assert access_gate.can_access_application_data(RECRUITER, _restricted_job(), _application()) is True
        assert subscriptions.get_active_subscription(RECRUITER.id).applications_used == 4

    def test_denial_consumes_nothing(self, access_gate, subscriptions):
        _subscribe(subscriptions, used=50)

        assert access_gate.can_access_application_data(RECRUITER, _restricted_job(), _application()) is False
        assert subscriptions.get_active_subscription(RECRUITER.id).applications_used == 50

    def test_free_plan_denied(self, access_gate, subscriptions):
        _subscribe(subscriptions, plan=SubscriptionPlan.FREE)

        assert access_gate.can_access_application_data(RECRUITER, _restricted_job(), _application()) is False

    def test_expired_subscription_denied(self, access_gate, subscriptions):
        _subscribe(subscriptions, end_date=datetime.now(timezone.utc) - timedelta(days=1))

        assert access_gate.can_access_application_data(RECRUITER, _restricted_job(), _application()) is False

    def test_unlimited_plan(self, access_gate, subscriptions):
        _subscribe(subscriptions, plan=SubscriptionPlan.ENTERPRISE, used=10000)

        assert access_gate.can_access_application_data(RECRUITER, _restricted_job(), _application()) is True

    def test_resume_and_contact_follow_same_rules(self, access_gate, subscriptions):
        _subscribe(subscriptions, used=48)
        job = _restricted_job()

        assert access_gate.can_download_resume(RECRUITER, job, _application()) is True
        assert access_gate.can_contact_candidate(RECRUITER, make_candidate(), job) is True
        assert access_gate.can_view_candidate_profile(RECRUITER, make_candidate(), job) is False


class TestQuotaConcurrency:

    def test_one_slot_ten_threads_one_grant(self, subscriptions):
        _subscribe(subscriptions, used=49)
        gate = AccessControlGate(subscriptions)
        barrier = threading.Barrier(10)
        results = []
        results_lock = threading.Lock()

        def attempt(i):
            barrier.wait()
            granted = gate.can_access_application_data(
                RECRUITER, _restricted_job(f"job-{i}"), _application(f"job-{i}")
            )
            with results_lock:
                results.append(granted)

        threads = [threading.Thread(target=attempt, args=(i,)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert results.count(False) == 9
        assert subscriptions.get_active_subscription(RECRUITER.id).applications_used == 50


class TestRestrictionMessages:

    def test_no_restriction_for_standard_job(self, access_gate):
        assert access_gate.get_access_restriction_message(RECRUITER, _standard_job()) is None

    def test_no_restriction_for_owner(self, access_gate):
        assert access_gate.get_access_restriction_message(OWNER, _restricted_job()) is None

    def test_no_subscription_message(self, access_gate):
        assert access_gate.get_access_restriction_message(RECRUITER, _restricted_job()) == NO_SUBSCRIPTION_MESSAGE

    def test_quota_exhausted_message(self, access_gate, subscriptions):
        _subscribe(subscriptions, used=50)

        message = access_gate.get_access_restriction_message(RECRUITER, _restricted_job())

        assert "limit" in message
        assert "Remaining: 0" in message

    def test_message_is_read_only(self, access_gate, subscriptions):
        _subscribe(subscriptions, used=5)

        assert access_gate.get_access_restriction_message(RECRUITER, _restricted_job()) is None
        assert subscriptions.get_active_subscription(RECRUITER.id).applications_used == 5

    def test_validate_restricted_access_raises(self, access_gate):
        with pytest.raises(AccessDenied):
            access_gate.validate_restricted_access(RECRUITER, _restricted_job())

    def test_subscription_requirement(self, access_gate, subscriptions):
        _subscribe(subscriptions, plan=SubscriptionPlan.PROFESSIONAL, used=20)

        requirement = access_gate.get_subscription_requirement(RECRUITER, _restricted_job())
        free = access_gate.get_subscription_requirement(RECRUITER, _standard_job())

        assert requirement.requires_subscription is True
        assert requirement.can_access is True
        assert requirement.remaining_applications == 180
        assert free.requires_subscription is False
        assert free.remaining_applications == -1


class TestSubscriptionPlan:

    @pytest.mark.parametrize("plan, limit", [
        (SubscriptionPlan.FREE, 0),
        (SubscriptionPlan.BASIC, 50),
        (SubscriptionPlan.PROFESSIONAL, 200),
        (SubscriptionPlan.ENTERPRISE, -1),
    ])
    def test_limits(self, plan, limit):
        assert plan.application_limit == limit

    def test_store_increment_without_subscription(self):
        assert InMemorySubscriptionStore().increment_usage("nobody") is False
