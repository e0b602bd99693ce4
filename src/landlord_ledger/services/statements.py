"""Pure builders for the financial statements.

Every builder takes an already-scoped slice of transactions (the caller
filters by user, property and period) and returns a dataclass tree. None
of them perform I/O or re-filter by user or property, and item lists keep
the order the transactions were handed in. An empty slice produces a
zero-valued statement, never an error.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from types import MappingProxyType
from typing import ClassVar
from uuid import UUID

from dateutil.relativedelta import relativedelta  # type: ignore[import-untyped]

from landlord_ledger.domain.properties import Property
from landlord_ledger.domain.tax_categories import resolve_tax_bucket
from landlord_ledger.domain.transactions import Transaction
from landlord_ledger.domain.value_objects import (
    ZERO,
    Period,
    ReportKind,
    TransactionType,
)
from landlord_ledger.services.aggregation import (
    group_by,
    month_key,
    percentage,
    sum_where,
    total,
)

UNLINKED_PROPERTY = "N/A"
DEFAULT_PAYER = "Unknown"
DEFAULT_PAYEE = "Landlord"

RECENT_ACTIVITY_DAYS = 30
TOP_PERFORMER_COUNT = 3
PROPERTY_HISTORY_LIMIT = 20


# =============================================================================
# Statement building blocks
# =============================================================================


@dataclass
class LineItem:
    transaction_id: UUID
    date: date
    type: TransactionType
    description: str
    amount: Decimal
    category: str
    paid_by: str
    property_id: UUID | None = None
    tax_bucket: str | None = None

    @classmethod
    def from_transaction(
        cls, txn: Transaction, *, with_tax_bucket: bool = False
    ) -> LineItem:
        return cls(
            transaction_id=txn.id,
            date=txn.date,
            type=txn.type,
            description=txn.description,
            amount=txn.amount,
            category=txn.category or "",
            paid_by=txn.paid_by or (DEFAULT_PAYEE if txn.is_income else DEFAULT_PAYER),
            property_id=txn.property_id,
            tax_bucket=resolve_tax_bucket(txn.tax_category) if with_tax_bucket else None,
        )


@dataclass
class CategoryBreakdown:
    name: str
    total: Decimal
    items: list[LineItem] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return len(self.items)


@dataclass
class StatementSection:
    """One side (income or expenses) of a statement."""

    total: Decimal
    breakdown: list[CategoryBreakdown]
    items: list[LineItem]


@dataclass
class StatementSummary:
    total_income: Decimal
    total_expenses: Decimal
    net_income: Decimal

    @classmethod
    def from_totals(cls, income: Decimal, expenses: Decimal) -> StatementSummary:
        return cls(total_income=income, total_expenses=expenses, net_income=income - expenses)


@dataclass
class ProfitAndLossSummary(StatementSummary):
    profit_margin: Decimal = ZERO


@dataclass
class PropertyContext:
    id: UUID
    name: str
    address: str
    monthly_rent: Decimal
    estimated_value: Decimal

    @classmethod
    def from_property(cls, prop: Property) -> PropertyContext:
        return cls(
            id=prop.id,
            name=prop.name,
            address=prop.address,
            monthly_rent=prop.monthly_rent or ZERO,
            estimated_value=prop.estimated_value or ZERO,
        )


def _is_income(txn: Transaction) -> bool:
    return txn.is_income


def _is_expense(txn: Transaction) -> bool:
    return txn.is_expense


def _build_section(
    transactions: Sequence[Transaction],
    key: Callable[[Transaction], str],
    *,
    with_tax_bucket: bool = False,
) -> StatementSection:
    breakdown = [
        CategoryBreakdown(
            name=name,
            total=sum_where(group),
            items=[LineItem.from_transaction(t, with_tax_bucket=with_tax_bucket) for t in group],
        )
        for name, group in group_by(transactions, key).items()
    ]
    return StatementSection(
        total=sum_where(transactions),
        breakdown=breakdown,
        items=[LineItem.from_transaction(t, with_tax_bucket=with_tax_bucket) for t in transactions],
    )


def _tax_bucket_of(txn: Transaction) -> str:
    return resolve_tax_bucket(txn.tax_category)


def _category_of(txn: Transaction) -> str:
    return txn.category or ""


# =============================================================================
# Profit & Loss
# =============================================================================


@dataclass
class ProfitAndLossStatement:
    kind: ClassVar[ReportKind] = ReportKind.PL

    period: Period
    summary: ProfitAndLossSummary
    income: StatementSection
    expenses: StatementSection


def build_pl_statement(
    transactions: Sequence[Transaction],
    properties: Sequence[Property],
    period: Period,
) -> ProfitAndLossStatement:
    """Income grouped by category, expenses grouped by tax bucket."""
    income = [t for t in transactions if t.is_income]
    expenses = [t for t in transactions if t.is_expense]

    income_section = _build_section(income, _category_of)
    expense_section = _build_section(expenses, _tax_bucket_of, with_tax_bucket=True)

    net_income = income_section.total - expense_section.total
    return ProfitAndLossStatement(
        period=period,
        summary=ProfitAndLossSummary(
            total_income=income_section.total,
            total_expenses=expense_section.total,
            net_income=net_income,
            profit_margin=percentage(net_income, income_section.total),
        ),
        income=income_section,
        expenses=expense_section,
    )


# =============================================================================
# Tax report
# =============================================================================


@dataclass
class TaxCategoryTotal:
    category: str
    amount: Decimal
    item_count: int


@dataclass
class TaxReport:
    kind: ClassVar[ReportKind] = ReportKind.TAX

    tax_year: int
    period: Period
    summary: StatementSummary
    tax_expenses: list[CategoryBreakdown]
    tax_categories: list[TaxCategoryTotal]


def build_tax_report(
    transactions: Sequence[Transaction],
    properties: Sequence[Property],
    period: Period,
) -> TaxReport:
    """Expenses per tax bucket for one calendar year.

    Income is summed from the same slice; only expenses are itemized.
    """
    expenses = [t for t in transactions if t.is_expense]
    buckets = [
        CategoryBreakdown(
            name=bucket,
            total=sum_where(group),
            items=[LineItem.from_transaction(t, with_tax_bucket=True) for t in group],
        )
        for bucket, group in group_by(expenses, _tax_bucket_of).items()
    ]
    total_expenses = total(bucket.total for bucket in buckets)

    return TaxReport(
        tax_year=period.start.year,
        period=period,
        summary=StatementSummary.from_totals(sum_where(transactions, _is_income), total_expenses),
        tax_expenses=buckets,
        tax_categories=[
            TaxCategoryTotal(category=b.name, amount=b.total, item_count=b.item_count)
            for b in buckets
        ],
    )


# =============================================================================
# Cash flow
# =============================================================================


@dataclass
class MonthlyCashFlow:
    month: str
    income: Decimal
    expenses: Decimal
    net_cash_flow: Decimal
    transactions: list[LineItem]


@dataclass
class CashFlowSummary:
    total_income: Decimal
    total_expenses: Decimal
    net_cash_flow: Decimal


@dataclass
class CashFlowReport:
    kind: ClassVar[ReportKind] = ReportKind.CASH_FLOW

    period: Period
    summary: CashFlowSummary
    months: list[MonthlyCashFlow]


def build_cash_flow_report(
    transactions: Sequence[Transaction],
    properties: Sequence[Property],
    period: Period,
) -> CashFlowReport:
    """Monthly income, expenses and net; each month stands alone (not cumulative)."""
    months = []
    for month, group in group_by(transactions, lambda t: month_key(t.date)).items():
        income = sum_where(group, _is_income)
        expenses = sum_where(group, _is_expense)
        months.append(
            MonthlyCashFlow(
                month=month,
                income=income,
                expenses=expenses,
                net_cash_flow=income - expenses,
                transactions=[LineItem.from_transaction(t) for t in group],
            )
        )

    total_income = total(m.income for m in months)
    total_expenses = total(m.expenses for m in months)
    return CashFlowReport(
        period=period,
        summary=CashFlowSummary(
            total_income=total_income,
            total_expenses=total_expenses,
            net_cash_flow=total_income - total_expenses,
        ),
        months=months,
    )


# =============================================================================
# Income statement
# =============================================================================


@dataclass
class IncomeStatement:
    kind: ClassVar[ReportKind] = ReportKind.INCOME_STATEMENT

    period: Period
    summary: StatementSummary
    properties: list[PropertyContext]
    income: StatementSection
    expenses: StatementSection


def build_income_statement(
    transactions: Sequence[Transaction],
    properties: Sequence[Property],
    period: Period,
) -> IncomeStatement:
    """Both sides keyed by the ledger's own category, with property context."""
    income_section = _build_section([t for t in transactions if t.is_income], _category_of)
    expense_section = _build_section([t for t in transactions if t.is_expense], _category_of)
    return IncomeStatement(
        period=period,
        summary=StatementSummary.from_totals(income_section.total, expense_section.total),
        properties=[PropertyContext.from_property(p) for p in properties],
        income=income_section,
        expenses=expense_section,
    )


# =============================================================================
# Portfolio summary
# =============================================================================


@dataclass
class PropertyPerformance:
    property_id: UUID
    name: str
    address: str
    monthly_rent: Decimal
    estimated_value: Decimal
    rent_yield: Decimal


@dataclass
class ActivityItem:
    date: date
    type: TransactionType
    amount: Decimal
    description: str
    property_name: str


@dataclass
class PortfolioSummary:
    kind: ClassVar[ReportKind] = ReportKind.PORTFOLIO_SUMMARY

    period: Period
    total_properties: int
    total_value: Decimal
    total_monthly_rent: Decimal
    recent_income: Decimal
    recent_expenses: Decimal
    net_income: Decimal
    occupancy_rate: Decimal
    average_roi: Decimal
    top_performers: list[PropertyPerformance]
    recent_activity: list[ActivityItem]


def build_portfolio_summary(
    transactions: Sequence[Transaction],
    properties: Sequence[Property],
    as_of: date,
    recent_activity_limit: int = 10,
) -> PortfolioSummary:
    """Whole-portfolio snapshot with the last 30 days of activity.

    ``average_roi`` annualizes the trailing 30-day net against total value;
    top performers rank properties by gross rent yield.
    """
    window = Period(as_of - timedelta(days=RECENT_ACTIVITY_DAYS), as_of)
    recent = [t for t in transactions if window.contains(t.date)]
    recent_income = sum_where(recent, _is_income)
    recent_expenses = sum_where(recent, _is_expense)
    net_income = recent_income - recent_expenses

    total_value = total(p.estimated_value or ZERO for p in properties)
    total_units = sum(p.units or 0 for p in properties)
    occupied_units = sum(p.occupied_units or 0 for p in properties)

    performers = [
        PropertyPerformance(
            property_id=p.id,
            name=p.name,
            address=p.address,
            monthly_rent=p.monthly_rent or ZERO,
            estimated_value=p.estimated_value or ZERO,
            rent_yield=percentage(p.annual_rent, p.estimated_value or ZERO),
        )
        for p in properties
    ]
    performers.sort(key=lambda perf: perf.rent_yield, reverse=True)

    names = {p.id: p.name for p in properties}
    latest_first = sorted(transactions, key=lambda t: t.date, reverse=True)
    activity = [
        ActivityItem(
            date=t.date,
            type=t.type,
            amount=t.amount,
            description=t.description,
            property_name=names.get(t.property_id, UNLINKED_PROPERTY),
        )
        for t in latest_first[:recent_activity_limit]
    ]

    return PortfolioSummary(
        period=window,
        total_properties=len(properties),
        total_value=total_value,
        total_monthly_rent=total(p.monthly_rent or ZERO for p in properties),
        recent_income=recent_income,
        recent_expenses=recent_expenses,
        net_income=net_income,
        occupancy_rate=percentage(Decimal(occupied_units), Decimal(total_units)),
        average_roi=percentage(net_income * 12, total_value),
        top_performers=performers[:TOP_PERFORMER_COUNT],
        recent_activity=activity,
    )


# =============================================================================
# Property analysis
# =============================================================================


@dataclass
class PropertyAnalysis:
    kind: ClassVar[ReportKind] = ReportKind.PROPERTY_ANALYSIS

    period: Period
    property: PropertyContext
    purchase_price: Decimal
    annual_rent: Decimal
    annual_expenses: Decimal
    net_operating_income: Decimal
    cap_rate: Decimal
    cash_on_cash_return: Decimal
    transaction_history: list[LineItem]


def build_property_analysis(
    transactions: Sequence[Transaction],
    prop: Property,
    as_of: date,
) -> PropertyAnalysis:
    """Operating figures for one property over the trailing 12 months.

    ``transactions`` must already be limited to this property.
    """
    window = Period(as_of - relativedelta(months=12), as_of)
    annual_expenses = sum_where(
        transactions, lambda t: t.is_expense and window.contains(t.date)
    )
    noi = prop.annual_rent - annual_expenses
    latest_first = sorted(transactions, key=lambda t: t.date, reverse=True)

    return PropertyAnalysis(
        period=window,
        property=PropertyContext.from_property(prop),
        purchase_price=prop.purchase_price,
        annual_rent=prop.annual_rent,
        annual_expenses=annual_expenses,
        net_operating_income=noi,
        cap_rate=percentage(noi, prop.estimated_value or ZERO),
        cash_on_cash_return=percentage(noi, prop.purchase_price),
        transaction_history=[
            LineItem.from_transaction(t) for t in latest_first[:PROPERTY_HISTORY_LIMIT]
        ],
    )


Statement = (
    ProfitAndLossStatement
    | TaxReport
    | CashFlowReport
    | IncomeStatement
    | PortfolioSummary
    | PropertyAnalysis
)

PERIOD_BUILDERS: MappingProxyType[
    ReportKind,
    Callable[[Sequence[Transaction], Sequence[Property], Period], Statement],
] = MappingProxyType(
    {
        ReportKind.PL: build_pl_statement,
        ReportKind.TAX: build_tax_report,
        ReportKind.CASH_FLOW: build_cash_flow_report,
        ReportKind.INCOME_STATEMENT: build_income_statement,
    }
)
