"""
Reader interfaces for the entities the matching engine consumes.

Implementations own persistence; the engine only reads through these.
SQLAlchemy-backed implementations live in database/repositories/, and tests
use in-memory fakes.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from core.matcher.dto import Candidate, Job, JobApplication


class CandidateReader(ABC):

    @abstractmethod
    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        """Return the candidate with its profile attached, or None."""
        pass

    @abstractmethod
    def list_matchable_candidates(self) -> List[Candidate]:
        """Candidates whose profile exists and has matching enabled."""
        pass


class JobReader(ABC):

    @abstractmethod
    def get_job(self, job_id: str) -> Optional[Job]:
        pass

    @abstractmethod
    def list_active_matchable_jobs(self) -> List[Job]:
        """Active jobs with matching enabled."""
        pass


class ApplicationReader(ABC):

    @abstractmethod
    def find_application(self, candidate_id: str, job_id: str) -> Optional[JobApplication]:
        pass

    @abstractmethod
    def list_applications_for_job(self, job_id: str) -> List[JobApplication]:
        """All applications to the job, oldest first."""
        pass
