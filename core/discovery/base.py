"""Shared plumbing for both discovery directions."""
from typing import Any, Callable, Dict, List, Optional, Sequence, Type, TypeVar
import logging
import threading

from core.cache.result_cache import ResultCacheService
from core.discovery.models import Page
from core.discovery.pool import Pair, score_pairs
from core.exceptions import CorpusFetchFailure
from core.matcher.models import MatchOutcome
from core.matcher.service import MatchEngine

logger = logging.getLogger(__name__)

R = TypeVar("R")
P = TypeVar("P", bound=Page)


class DiscoveryService:
    """Base class holding the engine, the optional cache and the worker budget."""

    def __init__(
        self,
        engine: MatchEngine,
        cache: Optional[ResultCacheService] = None,
        max_workers: int = 8
    ):
        self.engine = engine
        self.cache = cache
        self.max_workers = max_workers

    @staticmethod
    def _fetch(what: str, loader: Callable[[], R]) -> R:
        """Run a reader call, turning any failure into CorpusFetchFailure."""
        try:
            return loader()
        except Exception as e:
            logger.error(f"Failed to load {what}: {e}")
            raise CorpusFetchFailure(f"Failed to load {what}") from e

    def _score(
        self,
        pairs: Sequence[Pair],
        stop_event: Optional[threading.Event] = None
    ) -> List[Optional[MatchOutcome]]:
        return score_pairs(self.engine, pairs, self.max_workers, stop_event)

    def _read_through(
        self,
        view: str,
        subject_id: str,
        params: Dict[str, Any],
        page_type: Type[P],
        compute: Callable[[], P]
    ) -> P:
        """Serve the page from cache, else compute and store it."""
        if self.cache is not None:
            cached = self.cache.get_page(view, subject_id, params)
            if cached is not None:
                return page_type.model_validate(cached)

        page = compute()

        if self.cache is not None:
            self.cache.set_page(view, subject_id, params, page.model_dump(mode="json"))
        return page
