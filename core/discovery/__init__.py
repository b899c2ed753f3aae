"""Discovery Module - corpus-wide matching in both directions."""
from core.discovery.models import (
    Page, JobSummary, CandidateSummary, JobMatch, CandidateMatch
)
from core.discovery.pool import score_pairs
from core.discovery.candidate import CandidateJobDiscovery
from core.discovery.recruiter import RecruiterCandidateDiscovery

__all__ = [
    'CandidateJobDiscovery', 'RecruiterCandidateDiscovery', 'score_pairs',
    'Page', 'JobSummary', 'CandidateSummary', 'JobMatch', 'CandidateMatch'
]
