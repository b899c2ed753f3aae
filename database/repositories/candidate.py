from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from core.matcher.dto import Candidate as CandidateDTO, CandidateProfile as ProfileDTO
from core.readers import CandidateReader
from database.models import Candidate, CandidateProfile
from database.repositories.base import BaseRepository


def profile_to_dto(row: CandidateProfile) -> ProfileDTO:
    return ProfileDTO(
        skills=list(row.skills or []),
        experience_years=row.experience_years,
        expected_salary=row.expected_salary,
        location=row.location_text,
        open_to_remote=bool(row.open_to_remote),
        education=list(row.education or []),
        summary=row.summary,
        matching_enabled=bool(row.matching_enabled),
    )


def candidate_to_dto(row: Candidate) -> CandidateDTO:
    return CandidateDTO(
        id=str(row.id),
        name=row.display_name,
        email=row.email,
        headline=row.headline,
        profile=profile_to_dto(row.profile) if row.profile is not None else None,
    )


class CandidateRepository(BaseRepository, CandidateReader):
    def get_candidate(self, candidate_id: str) -> Optional[CandidateDTO]:
        stmt = (
            select(Candidate)
            .options(selectinload(Candidate.profile))
            .where(Candidate.id == candidate_id)
        )
        row = self.db.execute(stmt).scalar_one_or_none()
        return candidate_to_dto(row) if row is not None else None

    def list_matchable_candidates(self) -> List[CandidateDTO]:
        stmt = (
            select(Candidate)
            .join(CandidateProfile, CandidateProfile.candidate_id == Candidate.id)
            .options(selectinload(Candidate.profile))
            .where(CandidateProfile.matching_enabled.is_(True))
            .order_by(Candidate.created_at, Candidate.id)
        )
        return [candidate_to_dto(row) for row in self.db.execute(stmt).scalars()]
