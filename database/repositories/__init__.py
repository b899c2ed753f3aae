from database.repositories.base import BaseRepository
from database.repositories.job import JobRepository
from database.repositories.candidate import CandidateRepository
from database.repositories.application import ApplicationRepository
from database.repositories.subscription import SubscriptionRepository

__all__ = [
    'BaseRepository',
    'JobRepository',
    'CandidateRepository',
    'ApplicationRepository',
    'SubscriptionRepository',
]
