"""Data Transfer Objects for the matching engine.

DTOs are the plain Python view of candidates, jobs, applications and
actors. Repositories convert ORM rows into these objects while the session
is still open, so the engine never touches a live session.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

Number = Union[int, float, Decimal]


class ActorRole(str, Enum):
    """Role of the caller asking for match results."""
    CANDIDATE = "CANDIDATE"
    RECRUITER = "RECRUITER"
    ADMIN = "ADMIN"


class JobCategory(str, Enum):
    """Restricted jobs need an active subscription to see applicant data."""
    RESTRICTED = "RESTRICTED"
    STANDARD = "STANDARD"

    @property
    def requires_subscription(self) -> bool:
        return self is JobCategory.RESTRICTED


# Titles containing any of these are treated as restricted (premium) listings
# when a job does not carry an explicit category.
RESTRICTED_TITLE_KEYWORDS = (
    "software", "developer", "engineer", "programmer", "architect", "devops",
    "frontend", "backend", "fullstack", "full stack", "full-stack",
    "react", "angular", "vue", "node", "java", "python", "javascript",
    "typescript", "php", "ruby", "golang", "kotlin", "swift",
    "mobile", "android", "ios", "flutter", "react native",
    "data scientist", "data engineer", "ml engineer", "ai engineer",
    "machine learning", "artificial intelligence", "deep learning",
    "cloud", "aws", "azure", "gcp", "kubernetes", "docker",
    "cybersecurity", "security engineer", "penetration tester",
    "database", "dba", "sql", "nosql", "mongodb", "postgresql",
    "ui/ux", "ui designer", "ux designer", "product designer",
    "qa", "quality assurance", "test engineer", "automation",
    "scrum master", "product manager", "technical", "tech lead",
    "system admin", "network", "infrastructure", "it support",
)


def categorize_job(title: Optional[str]) -> JobCategory:
    """Classify a job by keywords in its title."""
    if not title:
        return JobCategory.STANDARD
    lower_title = title.lower()
    if any(keyword in lower_title for keyword in RESTRICTED_TITLE_KEYWORDS):
        return JobCategory.RESTRICTED
    return JobCategory.STANDARD


@dataclass
class CandidateProfile:
    """Matching-relevant part of a candidate's profile."""
    skills: List[str] = field(default_factory=list)
    experience_years: Optional[int] = None
    expected_salary: Optional[Number] = None
    location: Optional[str] = None
    open_to_remote: bool = False
    education: List[str] = field(default_factory=list)
    summary: Optional[str] = None
    matching_enabled: bool = True


@dataclass
class Candidate:
    """A job seeker. ``profile`` is None until the candidate completes it."""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    headline: Optional[str] = None
    profile: Optional[CandidateProfile] = None


@dataclass
class Job:
    """A job posting as seen by the matching engine."""
    id: str
    title: str
    owner_id: Optional[str] = None
    organization_id: Optional[str] = None
    company: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    responsibilities: Optional[str] = None
    required_skills: List[str] = field(default_factory=list)
    location: Optional[str] = None
    is_remote: bool = False
    job_type: Optional[str] = None
    salary_min: Optional[Number] = None
    salary_max: Optional[Number] = None
    experience_min: Optional[int] = None
    experience_max: Optional[int] = None
    category: Optional[JobCategory] = None
    is_active: bool = True
    is_featured: bool = False
    matching_enabled: bool = True

    @property
    def effective_category(self) -> JobCategory:
        if self.category is not None:
            return self.category
        return categorize_job(self.title)

    @property
    def is_restricted(self) -> bool:
        return self.effective_category.requires_subscription


@dataclass
class JobApplication:
    """A candidate's application to a job."""
    id: str
    candidate_id: str
    job_id: str
    status: str = "PENDING"


@dataclass
class Actor:
    """The authenticated caller of an engine operation."""
    id: str
    role: ActorRole
    organization_id: Optional[str] = None

    @property
    def is_recruiter(self) -> bool:
        return self.role == ActorRole.RECRUITER

    @property
    def is_candidate(self) -> bool:
        return self.role == ActorRole.CANDIDATE

    def owns(self, job: Job) -> bool:
        """True when the job belongs to this actor or to their organization."""
        if job.owner_id is not None and job.owner_id == self.id:
            return True
        return (
            self.organization_id is not None
            and job.organization_id is not None
            and job.organization_id == self.organization_id
        )
