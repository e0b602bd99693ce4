"""Portfolio analytics: overview, metric trends, performance and history."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from landlord_ledger.domain.metrics import AIAnalysis, MetricEntry, PropertySnapshot
from landlord_ledger.domain.properties import Property
from landlord_ledger.domain.transactions import Transaction
from landlord_ledger.domain.value_objects import (
    ZERO,
    AnalyticsKind,
    MetricType,
    Period,
    TrendWindow,
)
from landlord_ledger.logging_config import get_logger
from landlord_ledger.repositories.interfaces import (
    AIAnalysisRepository,
    MetricRepository,
    PropertyRepository,
    PropertySnapshotRepository,
    TransactionRepository,
)
from landlord_ledger.services.aggregation import (
    TrendPoint,
    average,
    bucket_by_month,
    growth_rate,
    percentage,
    sum_where,
    total,
)
from landlord_ledger.services.interfaces import AnalyticsService
from landlord_ledger.services.scope import resolve_property_scope

logger = get_logger(__name__)


@dataclass
class PortfolioOverview:
    total_properties: int
    total_income: Decimal
    total_expenses: Decimal
    monthly_income: Decimal
    net_income: Decimal
    occupancy_rate: Decimal


@dataclass
class TrendReport:
    period: Period
    monthly_rent: list[TrendPoint]
    occupancy_rate: list[TrendPoint]
    roi: list[TrendPoint]
    cap_rate: list[TrendPoint]


@dataclass
class PerformanceReport:
    period: Period
    average_roi: Decimal
    average_cap_rate: Decimal
    average_occupancy_rate: Decimal
    total_monthly_rent: Decimal
    growth_rate: Decimal


@dataclass
class AIHistoryEntry:
    id: UUID
    type: str
    mode: str
    summary: str
    insights: list[Any]
    created_at: datetime
    property_id: UUID | None = None


AnalyticsResult = (
    PortfolioOverview
    | TrendReport
    | PerformanceReport
    | list[AIHistoryEntry]
    | list[PropertySnapshot]
)


def _oldest_first(metrics: Sequence[MetricEntry]) -> list[MetricEntry]:
    return sorted(metrics, key=lambda m: m.date)


def _values_of(metrics: Sequence[MetricEntry], metric_type: MetricType) -> list[Decimal]:
    return [m.value for m in metrics if m.metric_type == metric_type]


def build_overview(
    properties: Sequence[Property], transactions: Sequence[Transaction]
) -> PortfolioOverview:
    """All-time totals plus the current rent roll and unit occupancy."""
    total_income = sum_where(transactions, lambda t: t.is_income)
    total_expenses = sum_where(transactions, lambda t: t.is_expense)
    total_units = sum(p.units or 0 for p in properties)
    occupied_units = sum(p.occupied_units or 0 for p in properties)
    return PortfolioOverview(
        total_properties=len(properties),
        total_income=total_income,
        total_expenses=total_expenses,
        monthly_income=total(p.monthly_rent or ZERO for p in properties),
        net_income=total_income - total_expenses,
        occupancy_rate=percentage(Decimal(occupied_units), Decimal(total_units)),
    )


def build_trends(metrics: Sequence[MetricEntry], period: Period) -> TrendReport:
    """Monthly series per metric kind; each kind is bucketed independently."""
    ordered = _oldest_first(metrics)

    def series(metric_type: MetricType) -> list[TrendPoint]:
        return bucket_by_month(m for m in ordered if m.metric_type == metric_type)

    return TrendReport(
        period=period,
        monthly_rent=series(MetricType.MONTHLY_RENT),
        occupancy_rate=series(MetricType.OCCUPANCY_RATE),
        roi=series(MetricType.ROI),
        cap_rate=series(MetricType.CAP_RATE),
    )


def build_performance(metrics: Sequence[MetricEntry], period: Period) -> PerformanceReport:
    """Averages per kind; growth is measured across the whole mixed series."""
    return PerformanceReport(
        period=period,
        average_roi=average(_values_of(metrics, MetricType.ROI)),
        average_cap_rate=average(_values_of(metrics, MetricType.CAP_RATE)),
        average_occupancy_rate=average(_values_of(metrics, MetricType.OCCUPANCY_RATE)),
        total_monthly_rent=total(_values_of(metrics, MetricType.MONTHLY_RENT)),
        growth_rate=growth_rate(_oldest_first(metrics)),
    )


def project_ai_history(analyses: Sequence[AIAnalysis]) -> list[AIHistoryEntry]:
    return [
        AIHistoryEntry(
            id=a.id,
            type=a.analysis_type,
            mode=a.mode,
            summary=a.summary,
            insights=list(a.insights),
            created_at=a.created_at,
            property_id=a.property_id,
        )
        for a in analyses
    ]


class AnalyticsServiceImpl(AnalyticsService):
    def __init__(
        self,
        property_repo: PropertyRepository,
        transaction_repo: TransactionRepository,
        metric_repo: MetricRepository,
        snapshot_repo: PropertySnapshotRepository,
        ai_analysis_repo: AIAnalysisRepository,
        ai_history_limit: int = 20,
        default_window: TrendWindow | str = TrendWindow.SIX_MONTHS,
    ) -> None:
        self._property_repo = property_repo
        self._transaction_repo = transaction_repo
        self._metric_repo = metric_repo
        self._snapshot_repo = snapshot_repo
        self._ai_analysis_repo = ai_analysis_repo
        self._ai_history_limit = ai_history_limit
        self._default_window = TrendWindow.parse(default_window)

    def generate_analytics(
        self,
        kind: AnalyticsKind | str,
        user_id: UUID,
        property_id: UUID | None = None,
        period: TrendWindow | str | None = None,
        today: date | None = None,
    ) -> AnalyticsResult:
        """Build one analytics view for a user.

        ``period`` selects the trailing window for trends, performance and
        snapshots; the overview is always portfolio-wide and all-time.

        Raises:
            InvalidAnalyticsKindError: Unknown ``kind``.
            InvalidTrendWindowError: Unknown ``period`` token.
            PropertyNotFoundError: ``property_id`` is not one of the user's.
        """
        analytics_kind = AnalyticsKind.parse(kind)
        window = TrendWindow.parse(period) if period is not None else self._default_window
        resolve_property_scope(self._property_repo, user_id, property_id)
        today = today or date.today()

        result: AnalyticsResult
        if analytics_kind == AnalyticsKind.OVERVIEW:
            result = build_overview(
                list(self._property_repo.list_by_user(user_id)),
                list(self._transaction_repo.list_by_user(user_id)),
            )
        elif analytics_kind == AnalyticsKind.TRENDS:
            trailing = Period.trailing(window, today)
            result = build_trends(self._fetch_metrics(user_id, property_id, trailing), trailing)
        elif analytics_kind == AnalyticsKind.PERFORMANCE:
            trailing = Period.trailing(window, today)
            result = build_performance(
                self._fetch_metrics(user_id, property_id, trailing), trailing
            )
        elif analytics_kind == AnalyticsKind.AI_HISTORY:
            result = project_ai_history(
                list(
                    self._ai_analysis_repo.list_recent(
                        user_id, property_id=property_id, limit=self._ai_history_limit
                    )
                )
            )
        else:
            result = self._property_snapshots(
                user_id, property_id, Period.trailing(window, today)
            )

        logger.info(
            "analytics_generated",
            kind=analytics_kind.value,
            user_id=str(user_id),
            property_id=str(property_id) if property_id else None,
            window=window.value,
        )
        return result

    def _fetch_metrics(
        self, user_id: UUID, property_id: UUID | None, period: Period
    ) -> list[MetricEntry]:
        return list(
            self._metric_repo.list_by_user(
                user_id,
                property_id=property_id,
                start_date=period.start,
                end_date=period.end,
            )
        )

    def _property_snapshots(
        self, user_id: UUID, property_id: UUID | None, period: Period
    ) -> list[PropertySnapshot]:
        if property_id is not None:
            property_ids = [property_id]
        else:
            property_ids = self._property_repo.list_ids_by_user(user_id)
        if not property_ids:
            return []
        snapshots = self._snapshot_repo.list_for_properties(
            property_ids, start_date=period.start
        )
        return [s for s in snapshots if s.date <= period.end]
