from .base import Base
from .job import Job
from .candidate import Candidate, CandidateProfile
from .application import JobApplication
from .subscription import Subscription

__all__ = [
    'Base',
    'Job',
    'Candidate',
    'CandidateProfile',
    'JobApplication',
    'Subscription',
]
