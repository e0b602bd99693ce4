from collections.abc import Callable
from datetime import date
from decimal import Decimal

import pytest

from landlord_ledger.domain.properties import Property
from landlord_ledger.domain.transactions import Transaction
from landlord_ledger.domain.value_objects import Period, ReportKind, TransactionType
from landlord_ledger.services.statements import (
    PERIOD_BUILDERS,
    build_cash_flow_report,
    build_income_statement,
    build_pl_statement,
    build_portfolio_summary,
    build_property_analysis,
    build_tax_report,
)

JANUARY = Period(date(2024, 1, 1), date(2024, 1, 31))
YEAR_2024 = Period.for_year(2024)


@pytest.fixture
def mixed_transactions(
    make_transaction: Callable[..., Transaction],
) -> list[Transaction]:
    return [
        make_transaction("INCOME", "1800", date(2024, 1, 1), description="January rent"),
        make_transaction(
            "EXPENSE",
            "120",
            date(2024, 1, 4),
            description="Hydro",
            category="Utilities",
            tax_category="Utilities",
        ),
        make_transaction(
            "EXPENSE",
            "450",
            date(2024, 1, 9),
            description="Furnace service",
            category="Repairs",
            tax_category="Maintenance & Repairs",
            paid_by="Tenant",
        ),
        make_transaction("INCOME", "75", date(2024, 1, 15), category="Parking"),
        make_transaction(
            "EXPENSE",
            "60",
            date(2024, 1, 20),
            description="Water",
            category="Utilities",
            tax_category="Utilities",
        ),
        make_transaction("EXPENSE", "35.50", date(2024, 1, 28), description="Keys cut"),
    ]


class TestProfitAndLoss:
    def test_worked_example(self, make_transaction: Callable[..., Transaction]) -> None:
        txns = [
            make_transaction("INCOME", "1000", date(2024, 1, 15)),
            make_transaction(
                "EXPENSE", "300", date(2024, 1, 20), tax_category="Maintenance & Repairs"
            ),
        ]
        summary = build_pl_statement(txns, [], JANUARY).summary
        assert summary.total_income == Decimal("1000")
        assert summary.total_expenses == Decimal("300")
        assert summary.net_income == Decimal("700")
        assert summary.profit_margin == Decimal("70")

    def test_net_income_matches_sections(self, mixed_transactions: list[Transaction]) -> None:
        statement = build_pl_statement(mixed_transactions, [], JANUARY)
        assert statement.summary.net_income == statement.income.total - statement.expenses.total
        assert statement.income.total == Decimal("1875")
        assert statement.expenses.total == Decimal("665.50")

    def test_expenses_grouped_by_tax_bucket(self, mixed_transactions: list[Transaction]) -> None:
        statement = build_pl_statement(mixed_transactions, [], JANUARY)
        breakdown = {b.name: b for b in statement.expenses.breakdown}
        assert list(breakdown) == ["Utilities", "Repairs & Maintenance", "Other Expenses"]
        assert breakdown["Utilities"].total == Decimal("180")
        assert [i.description for i in breakdown["Utilities"].items] == ["Hydro", "Water"]
        assert breakdown["Other Expenses"].items[0].tax_bucket == "Other Expenses"

    def test_income_grouped_by_category(self, mixed_transactions: list[Transaction]) -> None:
        statement = build_pl_statement(mixed_transactions, [], JANUARY)
        assert [(b.name, b.total) for b in statement.income.breakdown] == [
            ("Rent", Decimal("1800")),
            ("Parking", Decimal("75")),
        ]
        assert all(item.tax_bucket is None for item in statement.income.items)

    def test_line_items_keep_input_order_and_payer(
        self, mixed_transactions: list[Transaction]
    ) -> None:
        statement = build_pl_statement(mixed_transactions, [], JANUARY)
        assert [i.date.day for i in statement.expenses.items] == [4, 9, 20, 28]
        assert [i.paid_by for i in statement.expenses.items] == [
            "Unknown",
            "Tenant",
            "Unknown",
            "Unknown",
        ]
        assert statement.income.items[0].paid_by == "Landlord"

    def test_no_income_means_zero_margin(
        self, make_transaction: Callable[..., Transaction]
    ) -> None:
        txns = [make_transaction("EXPENSE", "90", date(2024, 1, 3))]
        summary = build_pl_statement(txns, [], JANUARY).summary
        assert summary.net_income == Decimal("-90")
        assert summary.profit_margin == Decimal("0")

    def test_building_twice_gives_identical_output(
        self, mixed_transactions: list[Transaction]
    ) -> None:
        first = build_pl_statement(mixed_transactions, [], JANUARY)
        second = build_pl_statement(mixed_transactions, [], JANUARY)
        assert first == second


class TestTaxReport:
    def test_bucket_totals_partition_expenses(
        self, mixed_transactions: list[Transaction]
    ) -> None:
        report = build_tax_report(mixed_transactions, [], YEAR_2024)
        assert sum(c.amount for c in report.tax_categories) == report.summary.total_expenses
        assert report.summary.total_expenses == Decimal("665.50")

    def test_income_is_summed_but_not_itemized(
        self, mixed_transactions: list[Transaction]
    ) -> None:
        report = build_tax_report(mixed_transactions, [], YEAR_2024)
        assert report.summary.total_income == Decimal("1875")
        assert report.summary.net_income == Decimal("1209.50")
        items = [i for bucket in report.tax_expenses for i in bucket.items]
        assert all(i.type == TransactionType.EXPENSE for i in items)

    def test_missing_tax_category_lands_in_other_expenses(
        self, make_transaction: Callable[..., Transaction]
    ) -> None:
        txns = [make_transaction("EXPENSE", "40", date(2024, 7, 1))]
        report = build_tax_report(txns, [], YEAR_2024)
        assert [c.category for c in report.tax_categories] == ["Other Expenses"]

    def test_flattened_categories_in_first_seen_order(
        self, mixed_transactions: list[Transaction]
    ) -> None:
        report = build_tax_report(mixed_transactions, [], YEAR_2024)
        flattened = [(c.category, c.amount, c.item_count) for c in report.tax_categories]
        assert flattened == [
            ("Utilities", Decimal("180"), 2),
            ("Repairs & Maintenance", Decimal("450"), 1),
            ("Other Expenses", Decimal("35.50"), 1),
        ]

    def test_tax_year(self) -> None:
        assert build_tax_report([], [], Period.for_year(2023)).tax_year == 2023


class TestCashFlow:
    def test_monthly_net_is_not_cumulative(
        self, make_transaction: Callable[..., Transaction]
    ) -> None:
        txns = [
            make_transaction("INCOME", "100", date(2024, 1, 10)),
            make_transaction("EXPENSE", "50", date(2024, 2, 10)),
        ]
        report = build_cash_flow_report(txns, [], Period(date(2024, 1, 1), date(2024, 2, 29)))
        assert [(m.month, m.net_cash_flow) for m in report.months] == [
            ("2024-01", Decimal("100")),
            ("2024-02", Decimal("-50")),
        ]
        assert report.summary.net_cash_flow == Decimal("50")

    def test_month_accumulates_income_and_expenses(
        self, mixed_transactions: list[Transaction]
    ) -> None:
        report = build_cash_flow_report(mixed_transactions, [], JANUARY)
        (january,) = report.months
        assert january.income == Decimal("1875")
        assert january.expenses == Decimal("665.50")
        assert january.net_cash_flow == Decimal("1209.50")
        assert len(january.transactions) == len(mixed_transactions)

    def test_summary_matches_months(self, make_transaction: Callable[..., Transaction]) -> None:
        txns = [
            make_transaction("INCOME", "1200", date(2024, 3, 1)),
            make_transaction("EXPENSE", "200", date(2024, 3, 5)),
            make_transaction("INCOME", "1200", date(2024, 4, 1)),
            make_transaction("EXPENSE", "1500", date(2024, 4, 20)),
        ]
        report = build_cash_flow_report(txns, [], YEAR_2024)
        assert report.summary.total_income == Decimal("2400")
        assert report.summary.total_expenses == Decimal("1700")
        assert report.summary.net_cash_flow == sum(m.net_cash_flow for m in report.months)


class TestIncomeStatement:
    def test_both_sides_keyed_by_raw_category(
        self, mixed_transactions: list[Transaction]
    ) -> None:
        statement = build_income_statement(mixed_transactions, [], JANUARY)
        assert [b.name for b in statement.expenses.breakdown] == [
            "Utilities",
            "Repairs",
            "Other",
        ]
        assert [b.name for b in statement.income.breakdown] == ["Rent", "Parking"]

    def test_attaches_property_context(
        self, mixed_transactions: list[Transaction], sample_property: Property
    ) -> None:
        statement = build_income_statement(mixed_transactions, [sample_property], JANUARY)
        (context,) = statement.properties
        assert context.id == sample_property.id
        assert context.name == "Maple Street Duplex"
        assert context.monthly_rent == Decimal("3200")
        assert context.estimated_value == Decimal("480000")

    def test_summary(self, mixed_transactions: list[Transaction]) -> None:
        summary = build_income_statement(mixed_transactions, [], JANUARY).summary
        assert summary.net_income == summary.total_income - summary.total_expenses


class TestEmptyPeriod:
    @pytest.mark.parametrize(
        "kind",
        [ReportKind.PL, ReportKind.TAX, ReportKind.CASH_FLOW, ReportKind.INCOME_STATEMENT],
    )
    def test_empty_slice_gives_zero_statement(self, kind: ReportKind) -> None:
        statement = PERIOD_BUILDERS[kind]([], [], YEAR_2024)
        assert statement.kind == kind
        assert statement.summary.total_income == Decimal("0")
        assert statement.summary.total_expenses == Decimal("0")

    def test_empty_cash_flow_has_no_months(self) -> None:
        assert build_cash_flow_report([], [], YEAR_2024).months == []


class TestPortfolioSummary:
    @pytest.fixture
    def portfolio(
        self,
        make_transaction: Callable[..., Transaction],
        sample_property: Property,
        second_property: Property,
    ) -> tuple[list[Transaction], list[Property]]:
        txns = [
            make_transaction(
                "INCOME", "3200", date(2024, 4, 1), property_id=sample_property.id
            ),
            make_transaction("EXPENSE", "25", date(2024, 5, 1), description="Bank fee"),
            make_transaction(
                "INCOME", "3200", date(2024, 6, 1), property_id=sample_property.id
            ),
            make_transaction(
                "EXPENSE", "200", date(2024, 6, 15), property_id=second_property.id
            ),
        ]
        return txns, [sample_property, second_property]

    def test_metrics(self, portfolio: tuple[list[Transaction], list[Property]]) -> None:
        txns, properties = portfolio
        summary = build_portfolio_summary(txns, properties, as_of=date(2024, 6, 30))
        assert summary.total_properties == 2
        assert summary.total_value == Decimal("730000")
        assert summary.total_monthly_rent == Decimal("4700")
        assert summary.recent_income == Decimal("3200")
        assert summary.recent_expenses == Decimal("200")
        assert summary.net_income == Decimal("3000")
        assert summary.occupancy_rate == Decimal("66.67")
        assert summary.average_roi == Decimal("4.93")

    def test_top_performers_by_rent_yield(
        self, portfolio: tuple[list[Transaction], list[Property]]
    ) -> None:
        txns, properties = portfolio
        summary = build_portfolio_summary(txns, list(reversed(properties)), as_of=date(2024, 6, 30))
        assert [(p.name, p.rent_yield) for p in summary.top_performers] == [
            ("Maple Street Duplex", Decimal("8.00")),
            ("Birch Avenue Condo", Decimal("7.20")),
        ]

    def test_recent_activity_newest_first(
        self, portfolio: tuple[list[Transaction], list[Property]]
    ) -> None:
        txns, properties = portfolio
        summary = build_portfolio_summary(
            txns, properties, as_of=date(2024, 6, 30), recent_activity_limit=3
        )
        assert [(a.date, a.property_name) for a in summary.recent_activity] == [
            (date(2024, 6, 15), "Birch Avenue Condo"),
            (date(2024, 6, 1), "Maple Street Duplex"),
            (date(2024, 5, 1), "N/A"),
        ]

    def test_empty_portfolio(self) -> None:
        summary = build_portfolio_summary([], [], as_of=date(2024, 6, 30))
        assert summary.total_properties == 0
        assert summary.occupancy_rate == Decimal("0")
        assert summary.average_roi == Decimal("0")
        assert summary.top_performers == []


class TestPropertyAnalysis:
    def test_operating_figures(
        self, make_transaction: Callable[..., Transaction], sample_property: Property
    ) -> None:
        txns = [
            make_transaction("EXPENSE", "800", date(2023, 5, 1)),
            make_transaction("EXPENSE", "1200", date(2024, 1, 10)),
            make_transaction("INCOME", "3200", date(2024, 6, 1)),
        ]
        analysis = build_property_analysis(txns, sample_property, as_of=date(2024, 6, 30))
        assert analysis.annual_rent == Decimal("38400")
        assert analysis.annual_expenses == Decimal("1200")
        assert analysis.net_operating_income == Decimal("37200")
        assert analysis.cap_rate == Decimal("7.75")
        assert analysis.cash_on_cash_return == Decimal("9.30")
        assert [i.date for i in analysis.transaction_history] == [
            date(2024, 6, 1),
            date(2024, 1, 10),
            date(2023, 5, 1),
        ]

    def test_history_is_capped_at_twenty(
        self, make_transaction: Callable[..., Transaction], sample_property: Property
    ) -> None:
        txns = [make_transaction("INCOME", "10", date(2024, 1, day)) for day in range(1, 26)]
        analysis = build_property_analysis(txns, sample_property, as_of=date(2024, 1, 31))
        assert len(analysis.transaction_history) == 20
        assert analysis.transaction_history[0].date == date(2024, 1, 25)
