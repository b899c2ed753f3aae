"""
End-to-end tests for the discovery CLI against a SQLite file database.
"""
import json
from decimal import Decimal

import pytest
import yaml
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

import main
from database.models import Base, Candidate, CandidateProfile, Job, JobApplication

pytestmark = pytest.mark.db


@pytest.fixture
def seeded(tmp_path, monkeypatch):
    for key in ("DATABASE_URL", "OPENAI_API_KEY", "LLM_BASE_URL", "MATCHING_AI_ENABLED", "REDIS_URL"):
        monkeypatch.delenv(key, raising=False)

    db_url = f"sqlite:///{tmp_path / 'careermatch.db'}"
    engine = create_engine(db_url)
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        job = Job(
            owner_id="recruiter-1", organization_id="org-1", title="Backend Developer",
            location_text="Berlin", is_remote=True, required_skills=["Python", "SQL"],
            salary_min=Decimal("70000"), salary_max=Decimal("100000"), experience_min=3,
        )
        senior_job = Job(
            owner_id="recruiter-1", title="Senior Backend Developer", required_skills=["Python"],
            experience_min=20,
        )
        candidate = Candidate(email="ada@example.com", display_name="Ada")
        candidate.profile = CandidateProfile(
            skills=["Python", "SQL"], experience_years=5, expected_salary=Decimal("80000"),
            location_text="Berlin", open_to_remote=True,
        )
        session.add_all([job, senior_job, candidate])
        session.flush()
        session.add(JobApplication(candidate_id=candidate.id, job_id=job.id))
        session.commit()
        ids = {"job": job.id, "senior_job": senior_job.id, "candidate": candidate.id}
    engine.dispose()

    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump({
        "database": {"url": db_url},
        "matching": {"ai_enabled": False},
        "cache": {"enabled": False},
    }))
    return str(config_path), ids


def test_jobs_for_candidate(seeded, capsys):
    config_path, ids = seeded

    code = main.main(["--config", config_path, "jobs-for-candidate", ids["candidate"]])

    assert code == 0
    page = json.loads(capsys.readouterr().out)
    assert page["total_elements"] == 1
    assert page["content"][0]["job"]["id"] == ids["job"]


def test_candidates_for_job_applicant_first(seeded, capsys):
    config_path, ids = seeded

    code = main.main([
        "--config", config_path, "candidates-for-job", "recruiter-1", ids["job"], "--top", "5"
    ])

    assert code == 0
    matches = json.loads(capsys.readouterr().out)
    assert matches[0]["has_applied"] is True


def test_applicants_denied_without_subscription(seeded, capsys):
    config_path, ids = seeded

    code = main.main(["--config", config_path, "applicants", "recruiter-9", ids["job"]])

    assert code == 1


def test_unknown_job_exit_code(seeded, capsys):
    config_path, ids = seeded

    code = main.main([
        "--config", config_path, "jobs-for-candidate", ids["candidate"], "--job-id", "missing"
    ])

    assert code == 1


def test_ineligible_single_match_exit_code(seeded, capsys):
    config_path, ids = seeded

    code = main.main([
        "--config", config_path, "jobs-for-candidate", ids["candidate"], "--job-id", ids["senior_job"]
    ])

    assert code == 2
    error = json.loads(capsys.readouterr().out)
    assert error["reasons"] == ["Insufficient experience"]
    assert error["shortfall"] is None


def test_missing_arguments_rejected(seeded):
    config_path, _ = seeded

    with pytest.raises(SystemExit):
        main.main(["--config", config_path, "jobs-for-candidate"])


@pytest.mark.parametrize("paging", [["--page", "0"], ["--size", "0"]])
def test_invalid_paging_exit_code(seeded, capsys, paging):
    config_path, ids = seeded

    code = main.main(["--config", config_path, "jobs-for-candidate", ids["candidate"], *paging])

    assert code == 1
    assert capsys.readouterr().out == ""
