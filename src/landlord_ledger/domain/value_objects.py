from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from dateutil.relativedelta import relativedelta  # type: ignore[import-untyped]

from landlord_ledger.exceptions import (
    InvalidAnalyticsKindError,
    InvalidPeriodError,
    InvalidReportKindError,
    InvalidTransactionTypeError,
    InvalidTrendWindowError,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @classmethod
    def parse(cls, value: TransactionType | str) -> TransactionType:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise InvalidTransactionTypeError(str(value)) from None


class PropertyType(str, Enum):
    SINGLE_FAMILY = "SINGLE_FAMILY"
    MULTI_FAMILY = "MULTI_FAMILY"
    CONDO = "CONDO"
    TOWNHOUSE = "TOWNHOUSE"
    COMMERCIAL = "COMMERCIAL"
    LAND = "LAND"


class MetricType(str, Enum):
    MONTHLY_RENT = "MONTHLY_RENT"
    OCCUPANCY_RATE = "OCCUPANCY_RATE"
    ROI = "ROI"
    CAP_RATE = "CAP_RATE"


class DocumentType(str, Enum):
    RECEIPT = "RECEIPT"
    INVOICE = "INVOICE"
    CONTRACT = "CONTRACT"
    INSURANCE = "INSURANCE"
    TAX_DOCUMENT = "TAX_DOCUMENT"
    OTHER = "OTHER"


class ResourceKind(str, Enum):
    PROPERTIES = "properties"
    TRANSACTIONS = "transactions"
    DOCUMENTS = "documents"


class ReportKind(str, Enum):
    PL = "pl"
    TAX = "tax"
    CASH_FLOW = "cash-flow"
    INCOME_STATEMENT = "income-statement"
    PORTFOLIO_SUMMARY = "portfolio-summary"
    PROPERTY_ANALYSIS = "property-analysis"

    @classmethod
    def parse(cls, value: ReportKind | str) -> ReportKind:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidReportKindError(str(value)) from None


class AnalyticsKind(str, Enum):
    OVERVIEW = "overview"
    TRENDS = "trends"
    PERFORMANCE = "performance"
    AI_HISTORY = "ai-history"
    PROPERTY_SNAPSHOTS = "property-snapshots"

    @classmethod
    def parse(cls, value: AnalyticsKind | str) -> AnalyticsKind:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidAnalyticsKindError(str(value)) from None


class TrendWindow(str, Enum):
    """Trailing window selected by a period token."""

    THREE_MONTHS = "3months"
    SIX_MONTHS = "6months"
    ONE_YEAR = "1year"

    @property
    def months(self) -> int:
        return {
            TrendWindow.THREE_MONTHS: 3,
            TrendWindow.SIX_MONTHS: 6,
            TrendWindow.ONE_YEAR: 12,
        }[self]

    @classmethod
    def parse(cls, token: TrendWindow | str) -> TrendWindow:
        if isinstance(token, cls):
            return token
        try:
            return cls(token)
        except ValueError:
            raise InvalidTrendWindowError(str(token)) from None


@dataclass(frozen=True, slots=True)
class Period:
    """An inclusive range of calendar days, ``start <= day <= end``."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidPeriodError(
                f"Period start {self.start} is after end {self.end}",
                start=self.start,
                end=self.end,
            )

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @classmethod
    def year_to_date(cls, today: date | None = None) -> Period:
        today = today or date.today()
        return cls(date(today.year, 1, 1), today)

    @classmethod
    def for_year(cls, year: int) -> Period:
        if not 1 <= year <= 9999:
            raise InvalidPeriodError(f"Invalid year: {year}", year=year)
        return cls(date(year, 1, 1), date(year, 12, 31))

    @classmethod
    def trailing(cls, window: TrendWindow | str, today: date | None = None) -> Period:
        today = today or date.today()
        months = TrendWindow.parse(window).months
        return cls(today - relativedelta(months=months), today)

    @classmethod
    def resolve(
        cls,
        start: date | None,
        end: date | None,
        today: date | None = None,
    ) -> Period:
        """Fill in missing bounds: start of the current year, and today."""
        today = today or date.today()
        return cls(start or date(today.year, 1, 1), end or today)
