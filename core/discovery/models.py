"""
Discovery response models.

Pages are pydantic models so the result cache can store them as JSON and
rebuild them with ``model_validate``. Page numbers are 1-based.
"""
from typing import Generic, List, Optional, Sequence, TypeVar
import math

from pydantic import BaseModel, Field

from core.matcher.dto import Candidate, Job
from core.matcher.models import ScoreBreakdown

T = TypeVar("T")

RESTRICTED_STATUS = "RESTRICTED"


class Page(BaseModel, Generic[T]):
    """One page of a fully sorted result list."""
    content: List[T] = Field(default_factory=list)
    page: int
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, content: List[T], page: int, size: int, total_elements: int) -> "Page[T]":
        total_pages = math.ceil(total_elements / size) if total_elements else 0
        return cls(
            content=content,
            page=page,
            size=size,
            total_elements=total_elements,
            total_pages=total_pages,
            first=page == 1,
            last=page >= total_pages,
            has_next=page < total_pages,
            has_previous=page > 1,
        )


def validate_page_request(page: int, size: int) -> None:
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")


def page_slice(items: Sequence[T], page: int, size: int) -> List[T]:
    """Items on the requested 1-based page."""
    validate_page_request(page, size)
    start = (page - 1) * size
    return list(items[start:start + size])


class JobSummary(BaseModel):
    """What a candidate sees of a matched job. Compensation is left out."""
    id: str
    title: str
    company: Optional[str] = None
    location: Optional[str] = None
    is_remote: bool = False
    job_type: Optional[str] = None
    category: str
    is_featured: bool = False

    @classmethod
    def from_job(cls, job: Job) -> "JobSummary":
        return cls(
            id=job.id,
            title=job.title,
            company=job.company,
            location=job.location,
            is_remote=job.is_remote,
            job_type=job.job_type,
            category=job.effective_category.value,
            is_featured=job.is_featured,
        )


class CandidateSummary(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    headline: Optional[str] = None

    @classmethod
    def from_candidate(cls, candidate: Candidate) -> "CandidateSummary":
        return cls(
            id=candidate.id,
            name=candidate.name,
            email=candidate.email,
            headline=candidate.headline,
        )


class JobMatch(BaseModel):
    job: JobSummary
    match_percentage: float
    breakdown: Optional[ScoreBreakdown] = None
    match_explanation: str = ""


class CandidateMatch(BaseModel):
    """A scored candidate; ``candidate`` is None for redacted applicant entries."""
    candidate: Optional[CandidateSummary] = None
    match_percentage: float = 0.0
    breakdown: Optional[ScoreBreakdown] = None
    match_explanation: str = ""
    expected_salary: Optional[float] = None
    experience_years: Optional[int] = None
    has_applied: bool = False
    application_status: Optional[str] = None

    @property
    def is_restricted(self) -> bool:
        return self.application_status == RESTRICTED_STATUS
