from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from landlord_ledger.domain.properties import Property
from landlord_ledger.domain.subscriptions import (
    PLAN_LIMITS,
    UNLIMITED,
    Subscription,
    SubscriptionPlan,
    SubscriptionStatus,
    get_plan_limits,
)
from landlord_ledger.domain.transactions import Transaction
from landlord_ledger.domain.value_objects import ResourceKind, TransactionType
from landlord_ledger.exceptions import InvalidPlanError, InvalidTransactionTypeError


class TestTransaction:
    def test_negative_amount_is_stored_as_magnitude(self) -> None:
        txn = Transaction(
            user_id=uuid4(), type="EXPENSE", amount=Decimal("-250.00"), date=date(2024, 3, 1)
        )
        assert txn.amount == Decimal("250.00")
        assert txn.signed_amount == Decimal("-250.00")

    def test_income_signed_amount_is_positive(self) -> None:
        txn = Transaction(
            user_id=uuid4(), type=TransactionType.INCOME, amount=Decimal("1000"), date=date(2024, 1, 1)
        )
        assert txn.signed_amount == Decimal("1000")
        assert txn.is_income
        assert not txn.is_expense

    def test_category_defaults_by_type(self) -> None:
        income = Transaction(user_id=uuid4(), type="INCOME", amount=1, date=date(2024, 1, 1))
        expense = Transaction(user_id=uuid4(), type="EXPENSE", amount=1, date=date(2024, 1, 1))
        assert income.category == "Rent"
        assert expense.category == "Other"

    def test_explicit_category_is_kept(self) -> None:
        txn = Transaction(
            user_id=uuid4(), type="INCOME", amount=1, date=date(2024, 1, 1), category="Parking"
        )
        assert txn.category == "Parking"

    def test_blank_tax_category_becomes_none(self) -> None:
        txn = Transaction(
            user_id=uuid4(), type="EXPENSE", amount=1, date=date(2024, 1, 1), tax_category="  "
        )
        assert txn.tax_category is None

    def test_float_amount_is_converted_without_binary_noise(self) -> None:
        txn = Transaction(user_id=uuid4(), type="INCOME", amount=0.1, date=date(2024, 1, 1))
        assert txn.amount == Decimal("0.1")

    def test_unknown_type_is_rejected(self) -> None:
        with pytest.raises(InvalidTransactionTypeError):
            Transaction(user_id=uuid4(), type="TRANSFER", amount=1, date=date(2024, 1, 1))


class TestProperty:
    def test_defaults(self) -> None:
        prop = Property(user_id=uuid4(), name="Lot 7", purchase_price=Decimal("90000"))
        assert prop.estimated_value == Decimal("90000")
        assert prop.monthly_rent == Decimal("0")
        assert prop.units == 1
        assert prop.occupied_units == 0

    def test_units_are_at_least_one(self) -> None:
        prop = Property(
            user_id=uuid4(), name="Shell", purchase_price=Decimal("1"), units=0, occupied_units=None
        )
        assert prop.units == 1
        assert prop.occupied_units == 0

    def test_occupancy_rate(self, sample_property: Property) -> None:
        assert sample_property.occupancy_rate == Decimal("100")

    def test_occupancy_rate_is_never_negative(self) -> None:
        prop = Property(
            user_id=uuid4(), name="Odd", purchase_price=Decimal("1"), units=4, occupied_units=-2
        )
        assert prop.occupancy_rate == Decimal("0")

    def test_annual_rent(self, sample_property: Property) -> None:
        assert sample_property.annual_rent == Decimal("38400")


class TestPlanLimits:
    @pytest.mark.parametrize(
        ("plan", "properties", "transactions", "documents"),
        [
            (SubscriptionPlan.FREE, 1, 10, 5),
            (SubscriptionPlan.BASIC, 5, 100, 50),
            (SubscriptionPlan.PREMIUM, 25, 1000, 500),
            (SubscriptionPlan.ENTERPRISE, UNLIMITED, UNLIMITED, UNLIMITED),
        ],
    )
    def test_plan_table(
        self, plan: SubscriptionPlan, properties: int, transactions: int, documents: int
    ) -> None:
        limits = get_plan_limits(plan)
        assert limits.max_for(ResourceKind.PROPERTIES) == properties
        assert limits.max_for(ResourceKind.TRANSACTIONS) == transactions
        assert limits.max_for(ResourceKind.DOCUMENTS) == documents

    def test_enterprise_is_unlimited(self) -> None:
        limits = get_plan_limits("ENTERPRISE")
        assert all(limits.is_unlimited(kind) for kind in ResourceKind)

    def test_plan_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            PLAN_LIMITS[SubscriptionPlan.FREE] = PLAN_LIMITS[SubscriptionPlan.ENTERPRISE]  # type: ignore[index]

    def test_plan_names_are_case_insensitive(self) -> None:
        assert get_plan_limits("premium").max_properties == 25

    def test_unknown_plan_is_invalid_input(self) -> None:
        with pytest.raises(InvalidPlanError):
            get_plan_limits("PLATINUM")


class TestSubscription:
    def test_trial_is_active(self) -> None:
        sub = Subscription(user_id=uuid4(), plan=SubscriptionPlan.BASIC, status=SubscriptionStatus.TRIAL)
        assert sub.is_active()

    def test_canceled_is_inactive(self) -> None:
        sub = Subscription(user_id=uuid4(), status=SubscriptionStatus.CANCELED)
        assert not sub.is_active()

    def test_expired_period_is_inactive(self) -> None:
        now = datetime(2024, 6, 1, tzinfo=UTC)
        sub = Subscription(
            user_id=uuid4(),
            plan=SubscriptionPlan.PREMIUM,
            current_period_end=now - timedelta(days=1),
        )
        assert not sub.is_active(now)
        assert sub.is_active(now - timedelta(days=2))
