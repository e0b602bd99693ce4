from collections.abc import Callable, Iterator
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

import pytest

from landlord_ledger.domain.metrics import MetricEntry
from landlord_ledger.domain.properties import Property
from landlord_ledger.domain.transactions import Transaction
from landlord_ledger.domain.value_objects import MetricType, PropertyType, TransactionType
from landlord_ledger.repositories.sqlite import SQLiteDatabase


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def other_user_id() -> UUID:
    return uuid4()


@pytest.fixture
def sample_property(user_id: UUID) -> Property:
    return Property(
        user_id=user_id,
        name="Maple Street Duplex",
        address="12 Maple Street",
        city="Halifax",
        state="NS",
        property_type=PropertyType.MULTI_FAMILY,
        purchase_price=Decimal("400000"),
        estimated_value=Decimal("480000"),
        monthly_rent=Decimal("3200"),
        units=2,
        occupied_units=2,
        purchase_date=date(2021, 6, 1),
    )


@pytest.fixture
def second_property(user_id: UUID) -> Property:
    return Property(
        user_id=user_id,
        name="Birch Avenue Condo",
        address="400 Birch Avenue, Unit 9",
        property_type=PropertyType.CONDO,
        purchase_price=Decimal("250000"),
        monthly_rent=Decimal("1500"),
        units=1,
        occupied_units=0,
    )


@pytest.fixture
def make_transaction(user_id: UUID) -> Callable[..., Transaction]:
    def _make(
        type: TransactionType | str,
        amount: str | Decimal,
        on: date,
        **kwargs: Any,
    ) -> Transaction:
        kwargs.setdefault("user_id", user_id)
        return Transaction(type=type, amount=Decimal(amount), date=on, **kwargs)

    return _make


@pytest.fixture
def make_metric(user_id: UUID) -> Callable[..., MetricEntry]:
    def _make(
        metric_type: MetricType, value: str | Decimal, on: date, **kwargs: Any
    ) -> MetricEntry:
        kwargs.setdefault("user_id", user_id)
        return MetricEntry(
            metric_type=metric_type, value=Decimal(value), date=on, **kwargs
        )

    return _make


@pytest.fixture
def db() -> Iterator[SQLiteDatabase]:
    """In-memory ledger store with thread checks disabled for the test client."""
    database = SQLiteDatabase(":memory:", check_same_thread=False)
    database.initialize()
    yield database
    database.close()
