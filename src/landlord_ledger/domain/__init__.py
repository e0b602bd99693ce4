from landlord_ledger.domain.audit import StatementRecord
from landlord_ledger.domain.metrics import (
    AIAnalysis,
    Document,
    MetricEntry,
    PropertySnapshot,
)
from landlord_ledger.domain.properties import Property
from landlord_ledger.domain.subscriptions import (
    PLAN_LIMITS,
    UNLIMITED,
    PlanLimits,
    Subscription,
    SubscriptionPlan,
    SubscriptionStatus,
    get_plan_limits,
)
from landlord_ledger.domain.tax_categories import (
    OTHER_EXPENSES,
    TAX_BUCKETS,
    resolve_tax_bucket,
    suggest_tax_category,
)
from landlord_ledger.domain.transactions import Transaction
from landlord_ledger.domain.value_objects import (
    AnalyticsKind,
    DocumentType,
    MetricType,
    Period,
    PropertyType,
    ReportKind,
    ResourceKind,
    TransactionType,
    TrendWindow,
)

__all__ = [
    "AnalyticsKind",
    "AIAnalysis",
    "Document",
    "DocumentType",
    "MetricEntry",
    "MetricType",
    "OTHER_EXPENSES",
    "PLAN_LIMITS",
    "Period",
    "PlanLimits",
    "Property",
    "PropertySnapshot",
    "PropertyType",
    "ReportKind",
    "ResourceKind",
    "StatementRecord",
    "Subscription",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "TAX_BUCKETS",
    "Transaction",
    "TransactionType",
    "TrendWindow",
    "UNLIMITED",
    "get_plan_limits",
    "resolve_tax_bucket",
    "suggest_tax_category",
]
