"""Reporting service: fetches the scoped ledger slice and builds statements."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from landlord_ledger.domain.audit import StatementRecord
from landlord_ledger.domain.properties import Property
from landlord_ledger.domain.transactions import Transaction
from landlord_ledger.domain.value_objects import Period, ReportKind
from landlord_ledger.exceptions import MissingPropertyError
from landlord_ledger.logging_config import LogContext, get_logger
from landlord_ledger.repositories.interfaces import (
    PropertyRepository,
    StatementRepository,
    TransactionRepository,
)
from landlord_ledger.services.interfaces import ReportingService
from landlord_ledger.services.scope import resolve_property_scope
from landlord_ledger.services.serialization import to_jsonable
from landlord_ledger.services.statements import (
    PERIOD_BUILDERS,
    Statement,
    build_portfolio_summary,
    build_property_analysis,
)

logger = get_logger(__name__)


class ReportingServiceImpl(ReportingService):
    """Implementation of ReportingService for the landlord statements."""

    def __init__(
        self,
        property_repo: PropertyRepository,
        transaction_repo: TransactionRepository,
        statement_repo: StatementRepository | None = None,
        record_statements: bool = True,
        recent_activity_limit: int = 10,
    ) -> None:
        self._property_repo = property_repo
        self._transaction_repo = transaction_repo
        self._statement_repo = statement_repo
        self._record_statements = record_statements
        self._recent_activity_limit = recent_activity_limit

    def generate_report(
        self,
        kind: ReportKind | str,
        user_id: UUID,
        property_id: UUID | None = None,
        period: Period | None = None,
        year: int | None = None,
        today: date | None = None,
    ) -> Statement:
        """Generate a statement and record a copy of it.

        The tax report always covers the calendar year ``year`` (default:
        the current year) and ignores ``period``. The other period reports
        default to year-to-date.
        With ``property_id`` the tax report's income total covers that
        property only, the same scope as its expenses, rather than all of
        the user's income for the year.

        Raises:
            InvalidReportKindError: Unknown ``kind``.
            InvalidPeriodError: ``year`` out of range.
            MissingPropertyError: ``property-analysis`` without ``property_id``.
            PropertyNotFoundError: ``property_id`` is not one of the user's.
            LedgerStoreError: The ledger store failed.
        """
        report_kind = ReportKind.parse(kind)
        if report_kind == ReportKind.PROPERTY_ANALYSIS and property_id is None:
            raise MissingPropertyError(report_kind.value)

        with LogContext(user_id=user_id, report_kind=report_kind):
            statement = self._build(
                report_kind, user_id, property_id, period, year, today or date.today()
            )
            logger.info(
                "report_generated",
                property_id=property_id,
                period_start=statement.period.start,
                period_end=statement.period.end,
            )
            self.record_statement(statement, user_id, property_id)
        return statement

    def _build(
        self,
        report_kind: ReportKind,
        user_id: UUID,
        property_id: UUID | None,
        period: Period | None,
        year: int | None,
        today: date,
    ) -> Statement:
        scoped_property = resolve_property_scope(self._property_repo, user_id, property_id)

        if report_kind == ReportKind.PORTFOLIO_SUMMARY:
            return build_portfolio_summary(
                self._fetch_transactions(user_id, property_id),
                self._properties_in_scope(user_id, scoped_property),
                as_of=today,
                recent_activity_limit=self._recent_activity_limit,
            )
        if report_kind == ReportKind.PROPERTY_ANALYSIS:
            assert scoped_property is not None
            return build_property_analysis(
                self._fetch_transactions(user_id, property_id),
                scoped_property,
                as_of=today,
            )
        if report_kind == ReportKind.TAX:
            period = Period.for_year(year if year is not None else today.year)
        elif period is None:
            period = Period.year_to_date(today)
        return PERIOD_BUILDERS[report_kind](
            self._fetch_transactions(user_id, property_id, period),
            self._properties_in_scope(user_id, scoped_property),
            period,
        )

    def record_statement(
        self,
        statement: Statement,
        user_id: UUID,
        property_id: UUID | None = None,
    ) -> None:
        """Persist a copy of the statement. Failures are logged, never raised."""
        if not self._record_statements or self._statement_repo is None:
            return
        try:
            self._statement_repo.add(
                StatementRecord(
                    kind=statement.kind,
                    user_id=user_id,
                    property_id=property_id,
                    period_start=statement.period.start,
                    period_end=statement.period.end,
                    details=to_jsonable(statement),
                )
            )
        except Exception as exc:
            logger.warning(
                "statement_persist_failed",
                kind=statement.kind.value,
                user_id=str(user_id),
                error=str(exc),
            )

    def _fetch_transactions(
        self,
        user_id: UUID,
        property_id: UUID | None,
        period: Period | None = None,
    ) -> list[Transaction]:
        """Fetch the slice oldest first; ties keep the store's order."""
        transactions = self._transaction_repo.list_by_user(
            user_id,
            property_id=property_id,
            start_date=period.start if period else None,
            end_date=period.end if period else None,
        )
        return sorted(transactions, key=lambda t: t.date)

    def _properties_in_scope(
        self, user_id: UUID, scoped_property: Property | None
    ) -> list[Property]:
        if scoped_property is not None:
            return [scoped_property]
        return list(self._property_repo.list_by_user(user_id))
