"""Access Module - subscription quota and access control."""
from core.access.subscription import (
    SubscriptionPlan, SubscriptionState, SubscriptionStore, InMemorySubscriptionStore
)
from core.access.control import AccessControlGate, SubscriptionRequirement

__all__ = [
    'AccessControlGate', 'SubscriptionRequirement',
    'SubscriptionPlan', 'SubscriptionState', 'SubscriptionStore', 'InMemorySubscriptionStore'
]
