from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import UUID, uuid4

import pytest

from landlord_ledger.domain.metrics import AIAnalysis, MetricEntry, PropertySnapshot
from landlord_ledger.domain.properties import Property
from landlord_ledger.domain.transactions import Transaction
from landlord_ledger.domain.value_objects import MetricType, Period
from landlord_ledger.exceptions import (
    InvalidAnalyticsKindError,
    InvalidTrendWindowError,
    PropertyNotFoundError,
)
from landlord_ledger.repositories.sqlite import (
    SQLiteAIAnalysisRepository,
    SQLiteDatabase,
    SQLiteMetricRepository,
    SQLitePropertyRepository,
    SQLitePropertySnapshotRepository,
    SQLiteTransactionRepository,
)
from landlord_ledger.services.aggregation import TrendPoint
from landlord_ledger.services.analytics import (
    AnalyticsServiceImpl,
    build_overview,
    build_performance,
    build_trends,
)

TODAY = date(2024, 6, 30)
WINDOW = Period(date(2023, 12, 30), TODAY)


def _snapshot(property_id: UUID, on: date) -> PropertySnapshot:
    return PropertySnapshot(
        property_id=property_id,
        date=on,
        monthly_rent=Decimal("3200"),
        estimated_value=Decimal("480000"),
        occupancy_rate=Decimal("100"),
        cap_rate=Decimal("6.5"),
        roi=Decimal("8"),
    )


class TestBuildOverview:
    def test_overview(
        self,
        make_transaction: Callable[..., Transaction],
        sample_property: Property,
        second_property: Property,
    ) -> None:
        txns = [
            make_transaction("INCOME", "3200", date(2019, 1, 1)),
            make_transaction("INCOME", "1500", date(2024, 1, 1)),
            make_transaction("EXPENSE", "700", date(2024, 2, 1)),
        ]
        overview = build_overview([sample_property, second_property], txns)
        assert overview.total_properties == 2
        assert overview.total_income == Decimal("4700")
        assert overview.total_expenses == Decimal("700")
        assert overview.net_income == Decimal("4000")
        assert overview.monthly_income == Decimal("4700")
        assert overview.occupancy_rate == Decimal("66.67")

    def test_empty_portfolio(self) -> None:
        overview = build_overview([], [])
        assert overview.total_properties == 0
        assert overview.occupancy_rate == Decimal("0")
        assert overview.net_income == Decimal("0")


class TestBuildTrends:
    def test_each_kind_bucketed_independently(
        self, make_metric: Callable[..., MetricEntry]
    ) -> None:
        metrics = [
            make_metric(MetricType.OCCUPANCY_RATE, "100", date(2024, 1, 25)),
            make_metric(MetricType.ROI, "7", date(2024, 2, 1)),
            make_metric(MetricType.OCCUPANCY_RATE, "90", date(2024, 1, 10)),
            make_metric(MetricType.MONTHLY_RENT, "3200", date(2024, 3, 1)),
        ]
        trends = build_trends(metrics, WINDOW)
        assert trends.occupancy_rate == [TrendPoint("2024-01", Decimal("95"))]
        assert trends.roi == [TrendPoint("2024-02", Decimal("7"))]
        assert trends.monthly_rent == [TrendPoint("2024-03", Decimal("3200"))]
        assert trends.cap_rate == []

    def test_months_follow_date_order(self, make_metric: Callable[..., MetricEntry]) -> None:
        metrics = [
            make_metric(MetricType.CAP_RATE, "6", date(2024, 3, 1)),
            make_metric(MetricType.CAP_RATE, "5", date(2024, 1, 1)),
        ]
        assert [p.month for p in build_trends(metrics, WINDOW).cap_rate] == [
            "2024-01",
            "2024-03",
        ]


class TestBuildPerformance:
    def test_statistics(self, make_metric: Callable[..., MetricEntry]) -> None:
        metrics = [
            make_metric(MetricType.ROI, "10", date(2024, 5, 1)),
            make_metric(MetricType.ROI, "6", date(2024, 1, 1)),
            make_metric(MetricType.CAP_RATE, "5", date(2024, 2, 1)),
            make_metric(MetricType.MONTHLY_RENT, "1500", date(2024, 3, 1)),
            make_metric(MetricType.MONTHLY_RENT, "1600", date(2024, 4, 1)),
        ]
        performance = build_performance(metrics, WINDOW)
        assert performance.average_roi == Decimal("8")
        assert performance.average_cap_rate == Decimal("5")
        assert performance.average_occupancy_rate == Decimal("0")
        assert performance.total_monthly_rent == Decimal("3100")
        # first point is ROI 6 (Jan), last is ROI 10 (May)
        assert performance.growth_rate == Decimal("66.67")

    def test_empty(self) -> None:
        performance = build_performance([], WINDOW)
        assert performance.average_roi == Decimal("0")
        assert performance.growth_rate == Decimal("0")


@pytest.fixture
def analytics_service(db: SQLiteDatabase) -> AnalyticsServiceImpl:
    return AnalyticsServiceImpl(
        property_repo=SQLitePropertyRepository(db),
        transaction_repo=SQLiteTransactionRepository(db),
        metric_repo=SQLiteMetricRepository(db),
        snapshot_repo=SQLitePropertySnapshotRepository(db),
        ai_analysis_repo=SQLiteAIAnalysisRepository(db),
        ai_history_limit=3,
    )


class TestAnalyticsService:
    def test_overview_ignores_period(
        self,
        db: SQLiteDatabase,
        analytics_service: AnalyticsServiceImpl,
        user_id: UUID,
        sample_property: Property,
        make_transaction: Callable[..., Transaction],
    ) -> None:
        SQLitePropertyRepository(db).add(sample_property)
        SQLiteTransactionRepository(db).add(make_transaction("INCOME", "500", date(2015, 1, 1)))

        overview = analytics_service.generate_analytics("overview", user_id, today=TODAY)
        assert overview.total_income == Decimal("500")
        assert overview.occupancy_rate == Decimal("100")

    def test_trends_use_the_trailing_window(
        self,
        db: SQLiteDatabase,
        analytics_service: AnalyticsServiceImpl,
        user_id: UUID,
        make_metric: Callable[..., MetricEntry],
    ) -> None:
        repo = SQLiteMetricRepository(db)
        repo.add(make_metric(MetricType.ROI, "3", date(2024, 2, 15)))
        repo.add(make_metric(MetricType.ROI, "5", date(2024, 4, 15)))
        repo.add(make_metric(MetricType.ROI, "7", date(2024, 5, 15)))

        trends = analytics_service.generate_analytics(
            "trends", user_id, period="3months", today=TODAY
        )
        assert trends.period == Period(date(2024, 3, 30), TODAY)
        assert [p.month for p in trends.roi] == ["2024-04", "2024-05"]

    def test_performance_defaults_to_six_months(
        self,
        db: SQLiteDatabase,
        analytics_service: AnalyticsServiceImpl,
        user_id: UUID,
        make_metric: Callable[..., MetricEntry],
    ) -> None:
        repo = SQLiteMetricRepository(db)
        repo.add(make_metric(MetricType.CAP_RATE, "9", date(2023, 11, 1)))
        repo.add(make_metric(MetricType.CAP_RATE, "6", date(2024, 2, 1)))

        performance = analytics_service.generate_analytics("performance", user_id, today=TODAY)
        assert performance.average_cap_rate == Decimal("6")

    def test_ai_history_is_limited_and_newest_first(
        self, db: SQLiteDatabase, analytics_service: AnalyticsServiceImpl, user_id: UUID
    ) -> None:
        repo = SQLiteAIAnalysisRepository(db)
        start = datetime(2024, 1, 1, tzinfo=UTC)
        for n in range(5):
            repo.add(
                AIAnalysis(
                    user_id=user_id,
                    analysis_type="property",
                    mode="quick",
                    summary=f"analysis {n}",
                    insights=[f"insight {n}"],
                    created_at=start + timedelta(days=n),
                )
            )

        history = analytics_service.generate_analytics("ai-history", user_id)
        assert [h.summary for h in history] == ["analysis 4", "analysis 3", "analysis 2"]
        assert history[0].insights == ["insight 4"]
        assert history[0].type == "property"

    def test_snapshots_for_all_user_properties(
        self,
        db: SQLiteDatabase,
        analytics_service: AnalyticsServiceImpl,
        user_id: UUID,
        sample_property: Property,
        second_property: Property,
    ) -> None:
        property_repo = SQLitePropertyRepository(db)
        property_repo.add(sample_property)
        property_repo.add(second_property)
        snapshot_repo = SQLitePropertySnapshotRepository(db)
        snapshot_repo.add(_snapshot(sample_property.id, date(2024, 3, 1)))
        snapshot_repo.add(_snapshot(second_property.id, date(2024, 2, 1)))
        snapshot_repo.add(_snapshot(second_property.id, date(2023, 1, 1)))
        snapshot_repo.add(_snapshot(uuid4(), date(2024, 3, 1)))

        snapshots = analytics_service.generate_analytics(
            "property-snapshots", user_id, today=TODAY
        )
        assert [(s.property_id, s.date) for s in snapshots] == [
            (second_property.id, date(2024, 2, 1)),
            (sample_property.id, date(2024, 3, 1)),
        ]

    def test_snapshots_for_one_property(
        self,
        db: SQLiteDatabase,
        analytics_service: AnalyticsServiceImpl,
        user_id: UUID,
        sample_property: Property,
        second_property: Property,
    ) -> None:
        SQLitePropertyRepository(db).add(sample_property)
        SQLitePropertyRepository(db).add(second_property)
        snapshot_repo = SQLitePropertySnapshotRepository(db)
        snapshot_repo.add(_snapshot(sample_property.id, date(2024, 3, 1)))
        snapshot_repo.add(_snapshot(second_property.id, date(2024, 3, 1)))

        snapshots = analytics_service.generate_analytics(
            "property-snapshots", user_id, property_id=second_property.id, today=TODAY
        )
        assert [s.property_id for s in snapshots] == [second_property.id]

    def test_property_of_another_user_is_not_found(
        self,
        db: SQLiteDatabase,
        analytics_service: AnalyticsServiceImpl,
        other_user_id: UUID,
        sample_property: Property,
    ) -> None:
        SQLitePropertyRepository(db).add(sample_property)
        with pytest.raises(PropertyNotFoundError):
            analytics_service.generate_analytics(
                "trends", other_user_id, property_id=sample_property.id
            )

    def test_unknown_kind_and_window(
        self, analytics_service: AnalyticsServiceImpl, user_id: UUID
    ) -> None:
        with pytest.raises(InvalidAnalyticsKindError):
            analytics_service.generate_analytics("forecast", user_id)
        with pytest.raises(InvalidTrendWindowError):
            analytics_service.generate_analytics("trends", user_id, period="5years")


class TestSnapshotsWithoutProperties:
    def test_user_without_properties_gets_no_snapshots(self) -> None:
        property_repo = MagicMock()
        property_repo.list_ids_by_user.return_value = []
        snapshot_repo = MagicMock()
        service = AnalyticsServiceImpl(
            property_repo=property_repo,
            transaction_repo=MagicMock(),
            metric_repo=MagicMock(),
            snapshot_repo=snapshot_repo,
            ai_analysis_repo=MagicMock(),
        )

        assert service.generate_analytics("property-snapshots", uuid4(), today=TODAY) == []
        snapshot_repo.list_for_properties.assert_not_called()
