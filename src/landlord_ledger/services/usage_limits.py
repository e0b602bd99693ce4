"""Subscription-tier quota gate run before any create."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from landlord_ledger.domain.subscriptions import (
    Subscription,
    SubscriptionPlan,
    get_plan_limits,
)
from landlord_ledger.domain.value_objects import ResourceKind
from landlord_ledger.exceptions import UsageLimitExceededError
from landlord_ledger.logging_config import get_logger
from landlord_ledger.repositories.interfaces import UsageRepository
from landlord_ledger.services.interfaces import (
    SubscriptionCheck,
    UsageDecision,
    UsageLimitService,
    UsageSnapshot,
)

logger = get_logger(__name__)


class UsageLimitServiceImpl(UsageLimitService):
    """Evaluates plan quotas against live resource counts.

    Counts are fetched on every check and never cached. The check and the
    caller's subsequent insert are not atomic, so concurrent creates can
    overshoot a quota by at most the number of racing requests minus one.
    """

    def __init__(self, usage_repo: UsageRepository) -> None:
        self._usage_repo = usage_repo

    def _snapshot(
        self, user_id: UUID, plan: SubscriptionPlan, kind: ResourceKind
    ) -> UsageSnapshot:
        limits = get_plan_limits(plan)
        maximum = limits.max_for(kind)
        if limits.is_unlimited(kind):
            return UsageSnapshot(resource=kind, current=None, maximum=maximum)
        current = self._usage_repo.count_resources(user_id, kind)
        return UsageSnapshot(resource=kind, current=current, maximum=maximum)

    def check_usage_limits(
        self, user_id: UUID, plan: SubscriptionPlan | str
    ) -> UsageDecision:
        """Decide, per resource kind, whether the user may create one more.

        Raises:
            InvalidPlanError: Unknown ``plan``.
            LedgerStoreError: A resource count failed.
        """
        subscription_plan = SubscriptionPlan.parse(plan)
        snapshots = [
            self._snapshot(user_id, subscription_plan, kind) for kind in ResourceKind
        ]
        by_kind = {s.resource: s for s in snapshots}
        decision = UsageDecision(
            plan=subscription_plan,
            can_add_property=by_kind[ResourceKind.PROPERTIES].can_add,
            can_add_transaction=by_kind[ResourceKind.TRANSACTIONS].can_add,
            can_add_document=by_kind[ResourceKind.DOCUMENTS].can_add,
            limits=snapshots,
        )
        logger.info(
            "usage_limits_checked",
            user_id=str(user_id),
            plan=subscription_plan.value,
            can_add_property=decision.can_add_property,
            can_add_transaction=decision.can_add_transaction,
            can_add_document=decision.can_add_document,
        )
        return decision

    def ensure_can_add(
        self, user_id: UUID, plan: SubscriptionPlan | str, kind: ResourceKind
    ) -> UsageSnapshot:
        """Gate a single create.

        Raises:
            UsageLimitExceededError: The user is at or over the plan's quota.
        """
        subscription_plan = SubscriptionPlan.parse(plan)
        snapshot = self._snapshot(user_id, subscription_plan, kind)
        if not snapshot.can_add:
            logger.warning(
                "usage_limit_exceeded",
                user_id=str(user_id),
                plan=subscription_plan.value,
                resource=kind.value,
                current=snapshot.current,
                max=snapshot.maximum,
            )
            raise UsageLimitExceededError(
                kind.value,
                subscription_plan.value,
                snapshot.current if snapshot.current is not None else 0,
                snapshot.maximum,
            )
        return snapshot

    def check_subscription_status(
        self, subscription: Subscription | None, now: datetime | None = None
    ) -> SubscriptionCheck:
        """Summarize a subscription; no subscription at all means FREE."""
        if subscription is None:
            return SubscriptionCheck(
                plan=SubscriptionPlan.FREE,
                status=None,
                has_active_subscription=False,
                current_period_end=None,
                cancel_at_period_end=False,
                features=list(get_plan_limits(SubscriptionPlan.FREE).features),
            )
        return SubscriptionCheck(
            plan=subscription.plan,
            status=subscription.status,
            has_active_subscription=subscription.is_active(now),
            current_period_end=subscription.current_period_end,
            cancel_at_period_end=subscription.cancel_at_period_end,
            features=list(get_plan_limits(subscription.plan).features),
        )
