#!/usr/bin/env python3
"""
Subscription state and the quota store interface.

The billing side owns subscriptions. The matching engine reads them and
consumes quota through exactly one atomic call, ``increment_usage``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional
import logging
import threading

logger = logging.getLogger(__name__)

UNLIMITED = -1


class SubscriptionPlan(str, Enum):
    """Plan tiers and their monthly restricted-application limits."""
    FREE = "FREE"
    BASIC = "BASIC"
    PROFESSIONAL = "PROFESSIONAL"
    ENTERPRISE = "ENTERPRISE"

    @property
    def application_limit(self) -> int:
        return PLAN_APPLICATION_LIMITS[self]

    @property
    def allows_restricted_access(self) -> bool:
        return self is not SubscriptionPlan.FREE


PLAN_APPLICATION_LIMITS = {
    SubscriptionPlan.FREE: 0,
    SubscriptionPlan.BASIC: 50,
    SubscriptionPlan.PROFESSIONAL: 200,
    SubscriptionPlan.ENTERPRISE: UNLIMITED,
}


@dataclass(frozen=True)
class SubscriptionState:
    """Snapshot of an actor's subscription. ``application_limit == -1`` means unlimited."""
    actor_id: str
    active: bool
    plan_tier: SubscriptionPlan
    applications_used: int = 0
    application_limit: int = 0
    end_date: Optional[datetime] = None

    @classmethod
    def for_plan(cls, actor_id: str, plan: SubscriptionPlan, **kwargs) -> "SubscriptionState":
        kwargs.setdefault("active", True)
        return cls(actor_id=actor_id, plan_tier=plan, application_limit=plan.application_limit, **kwargs)

    @property
    def is_unlimited(self) -> bool:
        return self.application_limit == UNLIMITED

    @property
    def remaining_applications(self) -> int:
        """Remaining quota, -1 for unlimited plans."""
        if self.is_unlimited:
            return UNLIMITED
        return max(0, self.application_limit - self.applications_used)

    @property
    def can_access_more(self) -> bool:
        return self.is_unlimited or self.applications_used < self.application_limit

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.end_date is None:
            return False
        now = now or datetime.now(timezone.utc)
        end = self.end_date
        if end.tzinfo is None:
            end = end.replace(tzinfo=timezone.utc)
        return end <= now

    @property
    def is_valid_for_restricted_access(self) -> bool:
        """Active, not expired, and on a plan that unlocks restricted jobs."""
        return self.active and not self.is_expired() and self.plan_tier.allows_restricted_access


class SubscriptionStore(ABC):
    """Reader/writer for subscription quota."""

    @abstractmethod
    def get_active_subscription(self, actor_id: str) -> Optional[SubscriptionState]:
        """Return the actor's active subscription, or None."""
        pass

    @abstractmethod
    def increment_usage(self, actor_id: str) -> bool:
        """
        Atomically consume one unit of restricted-access quota.

        Returns:
            True if a unit was consumed, False if the subscription is missing,
            invalid or exhausted. A False result changes nothing.
        """
        pass


class InMemorySubscriptionStore(SubscriptionStore):
    """
    Process-local store guarded by one lock per actor.

    Check-and-increment happens while holding the actor's lock, so concurrent
    grants for the same actor serialize and never pass the limit.
    """

    def __init__(self, subscriptions: Optional[Dict[str, SubscriptionState]] = None):
        self._subscriptions: Dict[str, SubscriptionState] = dict(subscriptions or {})
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, actor_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(actor_id)
            if lock is None:
                lock = self._locks[actor_id] = threading.Lock()
            return lock

    def put(self, subscription: SubscriptionState) -> None:
        with self._lock_for(subscription.actor_id):
            self._subscriptions[subscription.actor_id] = subscription

    def get_active_subscription(self, actor_id: str) -> Optional[SubscriptionState]:
        subscription = self._subscriptions.get(actor_id)
        if subscription is None or not subscription.active:
            return None
        return subscription

    def increment_usage(self, actor_id: str) -> bool:
        with self._lock_for(actor_id):
            subscription = self.get_active_subscription(actor_id)
            if subscription is None or not subscription.is_valid_for_restricted_access:
                return False
            if not subscription.can_access_more:
                return False
            self._subscriptions[actor_id] = replace(
                subscription, applications_used=subscription.applications_used + 1
            )

        logger.info(f"Incremented application usage for actor: {actor_id}")
        return True
