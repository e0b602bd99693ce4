"""Subscription plans and their static quota table."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from uuid import UUID, uuid4

from landlord_ledger.domain.value_objects import ResourceKind
from landlord_ledger.exceptions import InvalidPlanError

UNLIMITED = -1


class SubscriptionPlan(str, Enum):
    FREE = "FREE"
    BASIC = "BASIC"
    PREMIUM = "PREMIUM"
    ENTERPRISE = "ENTERPRISE"

    @classmethod
    def parse(cls, value: SubscriptionPlan | str) -> SubscriptionPlan:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise InvalidPlanError(str(value)) from None


class SubscriptionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CANCELED = "CANCELED"
    PAST_DUE = "PAST_DUE"
    UNPAID = "UNPAID"
    TRIAL = "TRIAL"


@dataclass(frozen=True, slots=True)
class PlanLimits:
    max_properties: int
    max_transactions: int
    max_documents: int
    features: tuple[str, ...] = ()

    def max_for(self, kind: ResourceKind) -> int:
        return {
            ResourceKind.PROPERTIES: self.max_properties,
            ResourceKind.TRANSACTIONS: self.max_transactions,
            ResourceKind.DOCUMENTS: self.max_documents,
        }[kind]

    def is_unlimited(self, kind: ResourceKind) -> bool:
        return self.max_for(kind) == UNLIMITED


PLAN_LIMITS: MappingProxyType[SubscriptionPlan, PlanLimits] = MappingProxyType(
    {
        SubscriptionPlan.FREE: PlanLimits(
            max_properties=1,
            max_transactions=10,
            max_documents=5,
            features=("Basic Property Management", "Transaction Tracking"),
        ),
        SubscriptionPlan.BASIC: PlanLimits(
            max_properties=5,
            max_transactions=100,
            max_documents=50,
            features=(
                "Property Management",
                "Transaction Tracking",
                "Basic Reports",
                "Email Support",
            ),
        ),
        SubscriptionPlan.PREMIUM: PlanLimits(
            max_properties=25,
            max_transactions=1000,
            max_documents=500,
            features=(
                "Advanced Reports",
                "AI Analysis",
                "Tax Optimization",
                "Priority Support",
            ),
        ),
        SubscriptionPlan.ENTERPRISE: PlanLimits(
            max_properties=UNLIMITED,
            max_transactions=UNLIMITED,
            max_documents=UNLIMITED,
            features=(
                "All Features",
                "Custom Integrations",
                "Dedicated Support",
                "API Access",
            ),
        ),
    }
)


def get_plan_limits(plan: SubscriptionPlan | str) -> PlanLimits:
    return PLAN_LIMITS[SubscriptionPlan.parse(plan)]


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Subscription:
    user_id: UUID
    plan: SubscriptionPlan = SubscriptionPlan.FREE
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    current_period_end: datetime | None = None
    cancel_at_period_end: bool = False
    id: UUID = field(default_factory=uuid4)

    def is_active(self, now: datetime | None = None) -> bool:
        """ACTIVE or TRIAL, and the paid-through date (if any) not yet reached."""
        now = now or _utc_now()
        if self.status not in (SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIAL):
            return False
        return self.current_period_end is None or now < self.current_period_end
