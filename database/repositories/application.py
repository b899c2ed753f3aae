from typing import List, Optional

from sqlalchemy import select

from core.matcher.dto import JobApplication as ApplicationDTO
from core.readers import ApplicationReader
from database.models import JobApplication
from database.repositories.base import BaseRepository


def application_to_dto(row: JobApplication) -> ApplicationDTO:
    return ApplicationDTO(
        id=str(row.id),
        candidate_id=str(row.candidate_id),
        job_id=str(row.job_id),
        status=row.status,
    )


class ApplicationRepository(BaseRepository, ApplicationReader):
    def find_application(self, candidate_id: str, job_id: str) -> Optional[ApplicationDTO]:
        stmt = select(JobApplication).where(
            JobApplication.candidate_id == candidate_id,
            JobApplication.job_id == job_id
        )
        row = self.db.execute(stmt).scalar_one_or_none()
        return application_to_dto(row) if row is not None else None

    def list_applications_for_job(self, job_id: str) -> List[ApplicationDTO]:
        stmt = (
            select(JobApplication)
            .where(JobApplication.job_id == job_id)
            .order_by(JobApplication.applied_at, JobApplication.id)
        )
        return [application_to_dto(row) for row in self.db.execute(stmt).scalars()]
