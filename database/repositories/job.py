import logging
from typing import List, Optional

from sqlalchemy import select

from core.matcher.dto import Job as JobDTO, JobCategory
from core.readers import JobReader
from database.models import Job
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def job_to_dto(row: Job) -> JobDTO:
    """Convert a Job row into the engine's DTO while the session is open."""
    category = None
    if row.category:
        try:
            category = JobCategory(row.category)
        except ValueError:
            logger.warning(f"Unknown category {row.category!r} on job {row.id}, deriving from title")

    return JobDTO(
        id=str(row.id),
        title=row.title,
        owner_id=row.owner_id,
        organization_id=row.organization_id,
        company=row.company,
        description=row.description,
        requirements=row.requirements,
        responsibilities=row.responsibilities,
        required_skills=list(row.required_skills or []),
        location=row.location_text,
        is_remote=bool(row.is_remote),
        job_type=row.job_type,
        salary_min=row.salary_min,
        salary_max=row.salary_max,
        experience_min=row.experience_min,
        experience_max=row.experience_max,
        category=category,
        is_active=row.status == 'active',
        is_featured=bool(row.is_featured),
        matching_enabled=bool(row.matching_enabled),
    )


class JobRepository(BaseRepository, JobReader):
    def get_by_id(self, job_id: str) -> Optional[Job]:
        stmt = select(Job).where(Job.id == job_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_job(self, job_id: str) -> Optional[JobDTO]:
        row = self.get_by_id(job_id)
        return job_to_dto(row) if row is not None else None

    def list_active_matchable_jobs(self) -> List[JobDTO]:
        stmt = (
            select(Job)
            .where(Job.status == 'active', Job.matching_enabled.is_(True))
            .order_by(Job.created_at.desc(), Job.id)
        )
        return [job_to_dto(row) for row in self.db.execute(stmt).scalars()]
