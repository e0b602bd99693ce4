"""Numeric folds shared by the report and analytics builders.

All of these are pure. Divisions are zero-guarded: a ratio whose
denominator is zero is reported as ``0`` rather than raising or producing
``NaN``. That is a reporting policy, so downstream formatting never has to
special-case missing data.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol, TypeVar

from landlord_ledger.domain.value_objects import HUNDRED, ZERO

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

CENT = Decimal("0.01")


class HasAmount(Protocol):
    @property
    def amount(self) -> Decimal: ...


class DatedValue(Protocol):
    @property
    def date(self) -> date: ...

    @property
    def value(self) -> Decimal: ...


A = TypeVar("A", bound=HasAmount)


@dataclass(frozen=True)
class TrendPoint:
    month: str
    value: Decimal


def sum_where(items: Iterable[A], predicate: Callable[[A], bool] | None = None) -> Decimal:
    """Sum ``amount`` over the items matching ``predicate`` (all items if None)."""
    result = ZERO
    for item in items:
        if predicate is None or predicate(item):
            result += item.amount
    return result


def group_by(items: Iterable[T], key: Callable[[T], K]) -> dict[K, list[T]]:
    """Group items by key.

    Keys appear in first-seen order and each group keeps input order.
    """
    groups: dict[K, list[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def total(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def average(values: Iterable[Decimal]) -> Decimal:
    """Arithmetic mean, ``0`` for no values."""
    values = list(values)
    if not values:
        return ZERO
    return total(values) / len(values)


def percentage(numerator: Decimal, denominator: Decimal) -> Decimal:
    """``numerator / denominator * 100`` to the cent, ``0`` when denominator is 0."""
    if denominator == 0:
        return ZERO
    return (numerator / denominator * HUNDRED).quantize(CENT)


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def bucket_by_month(entries: Iterable[DatedValue]) -> list[TrendPoint]:
    """Roll up dated values into one point per calendar month.

    Each month's value is the mean of its entries, since the series being
    rolled up are point-in-time ratios (occupancy, ROI). Months without
    entries are absent, not zero-filled. Output order is first-seen month
    order, so callers pass entries sorted ascending by date.
    """
    buckets = group_by(entries, lambda entry: month_key(entry.date))
    return [
        TrendPoint(month=month, value=average(entry.value for entry in bucket))
        for month, bucket in buckets.items()
    ]


def growth_rate(series: Sequence[DatedValue]) -> Decimal:
    """Percent change from the first to the last point of an ascending series.

    Defined as ``0`` for fewer than two points and when the first value is
    ``0``.
    """
    if len(series) < 2:
        return ZERO
    first = series[0].value
    last = series[-1].value
    if first == 0:
        return ZERO
    return percentage(last - first, first)
