import uuid

from sqlalchemy import Column, Integer, Text, String, TIMESTAMP, Boolean, Index, func

from .base import Base


class Subscription(Base):
    """
    Recruiter subscription, owned by billing.

    applications_used is only ever changed by the conditional UPDATE in
    SubscriptionRepository.increment_usage.
    """
    __tablename__ = 'subscription'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    actor_id = Column(Text, nullable=False)
    plan = Column(Text, nullable=False, default='FREE')  # FREE|BASIC|PROFESSIONAL|ENTERPRISE
    is_active = Column(Boolean, nullable=False, default=True)
    applications_used = Column(Integer, nullable=False, default=0)
    application_limit = Column(Integer, nullable=False, default=0)  # -1 = unlimited
    start_date = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    end_date = Column(TIMESTAMP(timezone=True))

    __table_args__ = (
        Index('idx_subscription_actor_active', 'actor_id', 'is_active'),
    )
