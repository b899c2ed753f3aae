#!/usr/bin/env python3
"""
Repository tests against SQLite databases.

Covers row-to-DTO mapping for jobs, candidates and applications, and the
conditional-update quota counter in SubscriptionRepository.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal
import threading

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session

from core.access.subscription import SubscriptionPlan
from core.matcher.dto import JobCategory
from database.models import Base, Candidate, CandidateProfile, Job, JobApplication, Subscription
from database.repositories import (
    ApplicationRepository, CandidateRepository, JobRepository, SubscriptionRepository
)

pytestmark = pytest.mark.db


def _add_job(session, **overrides):
    values = dict(
        owner_id="recruiter-1",
        organization_id="org-1",
        title="Backend Developer",
        required_skills=["Python"],
        salary_min=Decimal("70000"),
        salary_max=Decimal("90000"),
    )
    values.update(overrides)
    job = Job(**values)
    session.add(job)
    session.flush()
    return job


def _add_candidate(session, email, profile=True, **profile_values):
    candidate = Candidate(email=email, display_name=email.split("@")[0])
    if profile:
        candidate.profile = CandidateProfile(
            skills=profile_values.pop("skills", ["Python"]),
            experience_years=profile_values.pop("experience_years", 4),
            **profile_values
        )
    session.add(candidate)
    session.flush()
    return candidate


def _add_subscription(session, actor_id="recruiter-2", plan=SubscriptionPlan.BASIC, used=0, **overrides):
    row = Subscription(
        actor_id=actor_id,
        plan=plan.value,
        applications_used=used,
        application_limit=overrides.pop("application_limit", plan.application_limit),
        **overrides
    )
    session.add(row)
    session.flush()
    return row


class TestJobRepository:

    def test_get_job_maps_row(self, db_session):
        row = _add_job(db_session, category="RESTRICTED", experience_min=3)

        job = JobRepository(db_session).get_job(row.id)

        assert job.id == row.id
        assert job.category is JobCategory.RESTRICTED
        assert job.required_skills == ["Python"]
        assert float(job.salary_max) == 90000.0
        assert job.experience_min == 3
        assert job.is_active is True

    def test_unknown_category_derived_from_title(self, db_session):
        row = _add_job(db_session, title="Warehouse Associate", category="SOMETHING")

        job = JobRepository(db_session).get_job(row.id)

        assert job.category is None
        assert job.is_restricted is False

    def test_missing_job(self, db_session):
        assert JobRepository(db_session).get_job("nope") is None

    def test_only_active_matchable_listed(self, db_session):
        open_job = _add_job(db_session)
        _add_job(db_session, status="closed")
        _add_job(db_session, matching_enabled=False)

        jobs = JobRepository(db_session).list_active_matchable_jobs()

        assert [j.id for j in jobs] == [open_job.id]


class TestCandidateRepository:

    def test_candidate_with_profile(self, db_session):
        row = _add_candidate(
            db_session, "ada@example.com", education=["BSc Mathematics"], expected_salary=Decimal("85000")
        )

        candidate = CandidateRepository(db_session).get_candidate(row.id)

        assert candidate.name == "ada"
        assert candidate.profile.skills == ["Python"]
        assert candidate.profile.education == ["BSc Mathematics"]
        assert float(candidate.profile.expected_salary) == 85000.0

    def test_candidate_without_profile(self, db_session):
        row = _add_candidate(db_session, "new@example.com", profile=False)

        candidate = CandidateRepository(db_session).get_candidate(row.id)

        assert candidate.profile is None

    def test_matchable_requires_enabled_profile(self, db_session):
        ready = _add_candidate(db_session, "ready@example.com")
        _add_candidate(db_session, "hidden@example.com", matching_enabled=False)
        _add_candidate(db_session, "new@example.com", profile=False)

        candidates = CandidateRepository(db_session).list_matchable_candidates()

        assert [c.id for c in candidates] == [ready.id]


class TestApplicationRepository:

    def test_find_and_list(self, db_session):
        job = _add_job(db_session)
        first = _add_candidate(db_session, "a@example.com")
        second = _add_candidate(db_session, "b@example.com")
        now = datetime.now(timezone.utc)
        db_session.add_all([
            JobApplication(candidate_id=second.id, job_id=job.id, applied_at=now),
            JobApplication(candidate_id=first.id, job_id=job.id, status="REVIEWED", applied_at=now - timedelta(days=1)),
        ])
        db_session.flush()
        repo = ApplicationRepository(db_session)

        found = repo.find_application(first.id, job.id)
        listed = repo.list_applications_for_job(job.id)

        assert found.status == "REVIEWED"
        assert repo.find_application(first.id, "other-job") is None
        assert [a.candidate_id for a in listed] == [first.id, second.id]
        assert listed[1].status == "PENDING"


class TestSubscriptionRepository:

    def test_active_subscription_mapped(self, db_session):
        _add_subscription(db_session, plan=SubscriptionPlan.PROFESSIONAL, used=12)

        state = SubscriptionRepository(db_session).get_active_subscription("recruiter-2")

        assert state.plan_tier is SubscriptionPlan.PROFESSIONAL
        assert state.remaining_applications == 188

    def test_inactive_subscription_ignored(self, db_session):
        _add_subscription(db_session, is_active=False)

        assert SubscriptionRepository(db_session).get_active_subscription("recruiter-2") is None

    def test_unknown_plan_treated_as_free(self, db_session):
        db_session.add(Subscription(actor_id="recruiter-2", plan="GOLD", application_limit=10))
        db_session.flush()

        state = SubscriptionRepository(db_session).get_active_subscription("recruiter-2")

        assert state.plan_tier is SubscriptionPlan.FREE

    def test_increment_until_limit(self, db_session):
        row = _add_subscription(db_session, used=48)
        repo = SubscriptionRepository(db_session)

        results = [repo.increment_usage("recruiter-2") for _ in range(4)]

        assert results == [True, True, False, False]
        db_session.refresh(row)
        assert row.applications_used == 50

    def test_unlimited_always_increments(self, db_session):
        row = _add_subscription(db_session, plan=SubscriptionPlan.ENTERPRISE, used=5000)

        assert SubscriptionRepository(db_session).increment_usage("recruiter-2") is True
        db_session.refresh(row)
        assert row.applications_used == 5001

    def test_free_plan_never_increments(self, db_session):
        _add_subscription(db_session, plan=SubscriptionPlan.FREE, application_limit=10)

        assert SubscriptionRepository(db_session).increment_usage("recruiter-2") is False

    def test_expired_never_increments(self, db_session):
        _add_subscription(db_session, end_date=datetime.now(timezone.utc) - timedelta(days=1))

        assert SubscriptionRepository(db_session).increment_usage("recruiter-2") is False

    def test_future_end_date_increments(self, db_session):
        _add_subscription(db_session, end_date=datetime.now(timezone.utc) + timedelta(days=30))

        assert SubscriptionRepository(db_session).increment_usage("recruiter-2") is True

    def test_no_subscription(self, db_session):
        assert SubscriptionRepository(db_session).increment_usage("nobody") is False


@pytest.fixture
def file_engine(tmp_path):
    """File-backed SQLite so every session gets its own connection."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'quota.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        _add_subscription(session, used=49)
        session.commit()
    yield engine
    engine.dispose()


class TestSubscriptionRepositoryAcrossSessions:

    def test_stale_read_cannot_overshoot_limit(self, file_engine):
        with Session(file_engine) as first, Session(file_engine) as second:
            first_repo, second_repo = SubscriptionRepository(first), SubscriptionRepository(second)
            # both sessions see the last free slot
            assert first_repo.get_active_subscription("recruiter-2").remaining_applications == 1
            assert second_repo.get_active_subscription("recruiter-2").remaining_applications == 1

            assert first_repo.increment_usage("recruiter-2") is True
            first.commit()
            assert second_repo.increment_usage("recruiter-2") is False
            second.commit()

        with Session(file_engine) as session:
            assert SubscriptionRepository(session).get_active_subscription("recruiter-2").applications_used == 50

    def test_one_slot_ten_sessions_one_grant(self, file_engine):
        # serialize writers with BEGIN IMMEDIATE so SQLite waits instead of failing on lock upgrade
        @event.listens_for(file_engine, "connect")
        def _disable_driver_transactions(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(file_engine, "begin")
        def _begin_immediate(connection):
            connection.exec_driver_sql("BEGIN IMMEDIATE")

        file_engine.dispose()
        barrier = threading.Barrier(10)
        results = []
        results_lock = threading.Lock()

        def attempt():
            barrier.wait()
            with Session(file_engine) as session:
                granted = SubscriptionRepository(session).increment_usage("recruiter-2")
                session.commit()
            with results_lock:
                results.append(granted)

        threads = [threading.Thread(target=attempt) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert results.count(False) == 9
        with Session(file_engine) as session:
            assert SubscriptionRepository(session).get_active_subscription("recruiter-2").applications_used == 50
