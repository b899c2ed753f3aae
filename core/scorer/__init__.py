#!/usr/bin/env python3
"""
Scoring Module - maps a ComparisonRecord to a ScoreBreakdown.

Public API:
- ScoringStrategy: strategy interface
- RemoteScoring: model-backed strategy
- RuleBasedScoring: deterministic fallback strategy
- ScoringService: ordered strategy list with try-then-fallback policy

Modules:
- interfaces.py: ScoringStrategy ABC
- remote.py: prompt building and response parsing
- rule_based.py: per-dimension formulas
- service.py: ScoringService orchestrator
"""

from core.scorer.interfaces import ScoringStrategy
from core.scorer.remote import RemoteScoring
from core.scorer.rule_based import RuleBasedScoring
from core.scorer.service import ScoringService

__all__ = ['ScoringStrategy', 'RemoteScoring', 'RuleBasedScoring', 'ScoringService']
