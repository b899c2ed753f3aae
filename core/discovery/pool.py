"""
Bounded per-pair scoring.

Pairs are independent, so they are scored on a ThreadPoolExecutor sized to
the remote backend's safe concurrent-call budget. With only the rule-based
strategy active the work is cheap and runs inline.
"""
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Dict, List, Optional, Sequence, Tuple
import logging
import threading

from core.exceptions import DiscoveryCancelled
from core.matcher.dto import Candidate, Job
from core.matcher.models import MatchOutcome
from core.matcher.service import MatchEngine

logger = logging.getLogger(__name__)

Pair = Tuple[Candidate, Job]

# How often a waiting request re-checks its stop_event
CANCEL_POLL_SECONDS = 0.1


def _match_one(engine: MatchEngine, candidate: Candidate, job: Job) -> Optional[MatchOutcome]:
    try:
        return engine.match(candidate, job)
    except Exception:
        logger.error(
            f"Error calculating match for candidate {candidate.id} and job {job.id}",
            exc_info=True,
        )
        return None


def check_cancelled(stop_event: Optional[threading.Event]) -> None:
    if stop_event is not None and stop_event.is_set():
        raise DiscoveryCancelled("Discovery request cancelled")


def score_pairs(
    engine: MatchEngine,
    pairs: Sequence[Pair],
    max_workers: int = 8,
    stop_event: Optional[threading.Event] = None
) -> List[Optional[MatchOutcome]]:
    """
    Match every pair, preserving input order.

    A pair that raises is logged and yields None; the batch carries on.

    Raises:
        DiscoveryCancelled: if stop_event is set before all pairs finish.
            Pending work is cancelled and partial results are discarded.
    """
    if not pairs:
        return []

    if not engine.uses_remote or max_workers <= 1:
        results: List[Optional[MatchOutcome]] = []
        for candidate, job in pairs:
            check_cancelled(stop_event)
            results.append(_match_one(engine, candidate, job))
        return results

    slots: List[Optional[MatchOutcome]] = [None] * len(pairs)
    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="match")
    try:
        futures: Dict[Future, int] = {
            executor.submit(_match_one, engine, candidate, job): index
            for index, (candidate, job) in enumerate(pairs)
        }
        pending = set(futures)
        while pending:
            check_cancelled(stop_event)
            done, pending = wait(pending, timeout=CANCEL_POLL_SECONDS, return_when=FIRST_COMPLETED)
            for future in done:
                slots[futures[future]] = future.result()
    except DiscoveryCancelled:
        logger.info(f"Discovery cancelled with {len(pending)} of {len(pairs)} pairs outstanding")
        executor.shutdown(wait=False, cancel_futures=True)
        raise
    else:
        executor.shutdown(wait=True)

    return slots
