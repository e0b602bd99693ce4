from landlord_ledger.services.analytics import (
    AIHistoryEntry,
    AnalyticsServiceImpl,
    PerformanceReport,
    PortfolioOverview,
    TrendReport,
)
from landlord_ledger.services.interfaces import (
    AnalyticsService,
    ReportingService,
    SubscriptionCheck,
    UsageDecision,
    UsageLimitService,
    UsageSnapshot,
)
from landlord_ledger.services.reporting import ReportingServiceImpl
from landlord_ledger.services.usage_limits import UsageLimitServiceImpl

__all__ = [
    "AIHistoryEntry",
    "AnalyticsService",
    "AnalyticsServiceImpl",
    "PerformanceReport",
    "PortfolioOverview",
    "ReportingService",
    "ReportingServiceImpl",
    "SubscriptionCheck",
    "TrendReport",
    "UsageDecision",
    "UsageLimitService",
    "UsageLimitServiceImpl",
    "UsageSnapshot",
]
