#!/usr/bin/env python3
"""
Custom exceptions for the matching engine.

Scoring strategy failures are always recovered inside the engine. The rest
surface to callers of the discovery services.
"""

from typing import List, Optional


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class ScoringStrategyException(ServiceException):
    """Base for failures of a single scoring strategy."""
    pass


class StrategyUnavailable(ScoringStrategyException):
    """Raised when a strategy has no usable backend (e.g. no API key)."""
    pass


class StrategyError(ScoringStrategyException):
    """Raised when a strategy call fails, times out or returns bad output."""
    pass


class CorpusFetchFailure(ServiceException):
    """Raised when the candidate/job collections cannot be read."""
    pass


class AccessDenied(ServiceException):
    """Raised when subscription or quota does not allow access."""
    pass


class PermissionDenied(ServiceException):
    """Raised when a recruiter requests data for a job they do not own."""
    pass


class ProfileNotReady(ServiceException):
    """Raised when a candidate has no profile or has matching disabled."""
    pass


class CandidateNotFound(ServiceException):
    """Raised when a candidate is not found."""
    pass


class JobNotFound(ServiceException):
    """Raised when a job is not found."""
    pass


class DiscoveryCancelled(ServiceException):
    """Raised when a discovery request is cancelled by its caller."""
    pass


class SingleMatchIneligible(ServiceException):
    """
    Raised when a requested single pair fails the gate or the threshold.

    Carries either the gate reasons or the amount by which the score fell
    short of the configured threshold.
    """

    def __init__(
        self,
        message: str,
        reasons: Optional[List[str]] = None,
        shortfall: Optional[float] = None
    ):
        super().__init__(message)
        self.reasons = list(reasons or [])
        self.shortfall = shortfall
