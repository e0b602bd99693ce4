from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from landlord_ledger.domain.subscriptions import (
    Subscription,
    SubscriptionPlan,
    SubscriptionStatus,
)
from landlord_ledger.domain.value_objects import (
    AnalyticsKind,
    Period,
    ReportKind,
    ResourceKind,
    TrendWindow,
)

if TYPE_CHECKING:
    from landlord_ledger.services.statements import Statement


@dataclass
class UsageSnapshot:
    """Usage of one resource kind at check time.

    ``current`` is None when the plan is unlimited for this kind, because
    the count is never fetched in that case.
    """

    resource: ResourceKind
    current: int | None
    maximum: int

    @property
    def is_unlimited(self) -> bool:
        return self.current is None

    @property
    def can_add(self) -> bool:
        return self.current is None or self.current < self.maximum


@dataclass
class UsageDecision:
    plan: SubscriptionPlan
    can_add_property: bool
    can_add_transaction: bool
    can_add_document: bool
    limits: list[UsageSnapshot]

    def snapshot_for(self, kind: ResourceKind) -> UsageSnapshot:
        for snapshot in self.limits:
            if snapshot.resource == kind:
                return snapshot
        raise KeyError(kind)


@dataclass
class SubscriptionCheck:
    plan: SubscriptionPlan
    status: SubscriptionStatus | None
    has_active_subscription: bool
    current_period_end: datetime | None
    cancel_at_period_end: bool
    features: list[str]

    @property
    def effective_plan(self) -> SubscriptionPlan:
        """The plan whose limits apply; lapsed subscriptions fall back to FREE."""
        return self.plan if self.has_active_subscription else SubscriptionPlan.FREE


class ReportingService(ABC):
    @abstractmethod
    def generate_report(
        self,
        kind: ReportKind | str,
        user_id: UUID,
        property_id: UUID | None = None,
        period: Period | None = None,
        year: int | None = None,
        today: date | None = None,
    ) -> Statement:
        pass

    @abstractmethod
    def record_statement(
        self,
        statement: Statement,
        user_id: UUID,
        property_id: UUID | None = None,
    ) -> None:
        pass


class AnalyticsService(ABC):
    @abstractmethod
    def generate_analytics(
        self,
        kind: AnalyticsKind | str,
        user_id: UUID,
        property_id: UUID | None = None,
        period: TrendWindow | str | None = None,
        today: date | None = None,
    ) -> Any:
        pass


class UsageLimitService(ABC):
    @abstractmethod
    def check_usage_limits(
        self, user_id: UUID, plan: SubscriptionPlan | str
    ) -> UsageDecision:
        pass

    @abstractmethod
    def ensure_can_add(
        self, user_id: UUID, plan: SubscriptionPlan | str, kind: ResourceKind
    ) -> UsageSnapshot:
        pass

    @abstractmethod
    def check_subscription_status(
        self, subscription: Subscription | None, now: datetime | None = None
    ) -> SubscriptionCheck:
        pass
