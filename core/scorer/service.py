#!/usr/bin/env python3
"""
Scoring Service - ordered strategy list with try-then-fallback policy.

When the remote strategy is enabled the list is [RemoteScoring, RuleBasedScoring];
otherwise it is [RuleBasedScoring]. Failures of any strategy except the last are
logged and the next one is tried, so callers only ever receive a complete
breakdown from whichever strategy produced it.
"""

from typing import List, Optional, Sequence
import logging

from core.exceptions import ScoringStrategyException, StrategyError
from core.llm.interfaces import LLMProvider
from core.matcher.models import ComparisonRecord, ScoreBreakdown
from core.scorer.interfaces import ScoringStrategy
from core.scorer.remote import RemoteScoring
from core.scorer.rule_based import RuleBasedScoring

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Scores comparison records with the first strategy that succeeds.

    Thread-safe as long as the strategies are; both built-in ones are.
    """

    def __init__(self, strategies: Sequence[ScoringStrategy]):
        if not strategies:
            raise ValueError("ScoringService needs at least one strategy")
        self.strategies: List[ScoringStrategy] = list(strategies)

    @classmethod
    def build(cls, ai_enabled: bool, provider: Optional[LLMProvider] = None) -> "ScoringService":
        """Build the standard strategy list for the given flag."""
        if ai_enabled:
            return cls([RemoteScoring(provider), RuleBasedScoring()])
        return cls([RuleBasedScoring()])

    @property
    def uses_remote(self) -> bool:
        return any(isinstance(s, RemoteScoring) for s in self.strategies)

    def score(self, record: ComparisonRecord) -> ScoreBreakdown:
        """
        Score the record, falling back down the strategy list on failure.

        Raises:
            StrategyError: only if the last strategy fails too
        """
        last = len(self.strategies) - 1
        for index, strategy in enumerate(self.strategies):
            try:
                return strategy.score(record)
            except ScoringStrategyException as e:
                if index == last:
                    raise
                logger.warning(
                    f"Scoring strategy '{strategy.name}' failed, "
                    f"falling back to '{self.strategies[index + 1].name}': {e}"
                )
            except Exception as e:
                if index == last:
                    raise StrategyError(f"Strategy '{strategy.name}' failed: {e}") from e
                logger.warning(
                    f"Scoring strategy '{strategy.name}' raised unexpectedly, "
                    f"falling back to '{self.strategies[index + 1].name}': {e}",
                    exc_info=True,
                )

        # unreachable: the loop either returns or raises on the last strategy
        raise StrategyError("No scoring strategy produced a result")
