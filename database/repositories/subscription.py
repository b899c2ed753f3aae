import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update, or_

from core.access.subscription import SubscriptionPlan, SubscriptionState, SubscriptionStore, UNLIMITED
from database.models import Subscription
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def subscription_to_state(row: Subscription) -> SubscriptionState:
    try:
        plan = SubscriptionPlan(row.plan)
    except ValueError:
        logger.warning(f"Unknown plan {row.plan!r} on subscription {row.id}, treating as FREE")
        plan = SubscriptionPlan.FREE

    return SubscriptionState(
        actor_id=row.actor_id,
        active=bool(row.is_active),
        plan_tier=plan,
        applications_used=row.applications_used,
        application_limit=row.application_limit,
        end_date=row.end_date,
    )


class SubscriptionRepository(BaseRepository, SubscriptionStore):
    """
    Subscription quota backed by the subscription table.

    increment_usage is a single conditional UPDATE, so the check and the
    increment cannot interleave with a concurrent request. The row stays
    locked until the surrounding transaction ends.
    """

    def _active_row(self, actor_id: str) -> Optional[Subscription]:
        stmt = (
            select(Subscription)
            .where(Subscription.actor_id == actor_id, Subscription.is_active.is_(True))
            .order_by(Subscription.start_date.desc(), Subscription.id)
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_active_subscription(self, actor_id: str) -> Optional[SubscriptionState]:
        row = self._active_row(actor_id)
        return subscription_to_state(row) if row is not None else None

    def increment_usage(self, actor_id: str) -> bool:
        row = self._active_row(actor_id)
        if row is None:
            return False

        now = datetime.now(timezone.utc)
        stmt = (
            update(Subscription)
            .where(
                Subscription.id == row.id,
                Subscription.is_active.is_(True),
                Subscription.plan != SubscriptionPlan.FREE.value,
                or_(Subscription.end_date.is_(None), Subscription.end_date > now),
                or_(
                    Subscription.application_limit == UNLIMITED,
                    Subscription.applications_used < Subscription.application_limit,
                ),
            )
            .values(applications_used=Subscription.applications_used + 1)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.flush()

        granted = result.rowcount == 1
        if granted:
            logger.info(f"Incremented application usage for actor: {actor_id}")
        else:
            logger.info(f"Application quota exhausted or subscription invalid for actor: {actor_id}")
        return granted
