"""
Scoring Strategy Interface.

A strategy maps a ComparisonRecord to a complete ScoreBreakdown or raises
StrategyUnavailable / StrategyError. It never returns a partial result.
"""
from abc import ABC, abstractmethod

from core.matcher.models import ComparisonRecord, ScoreBreakdown


class ScoringStrategy(ABC):
    """Abstract scoring strategy."""

    name: str = "strategy"

    @abstractmethod
    def score(self, record: ComparisonRecord) -> ScoreBreakdown:
        """
        Score a normalized candidate/job pair.

        Raises:
            StrategyUnavailable: if the strategy cannot run at all
            StrategyError: if the call failed or produced unusable output
        """
        pass
