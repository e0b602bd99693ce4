"""Rental property records as read by the reporting engine.

Defaults for nullable financial fields are applied here, once, so report
builders never re-implement them.
"""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from landlord_ledger.domain.value_objects import HUNDRED, ZERO, PropertyType


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Property:
    """A rental property owned by a single user.

    ``occupied_units`` should not exceed ``units``; the engine does not
    enforce this, it only keeps the derived occupancy rate non-negative.
    """

    user_id: UUID
    name: str
    purchase_price: Decimal
    address: str = ""
    city: str = ""
    state: str = ""
    property_type: PropertyType = PropertyType.SINGLE_FAMILY
    id: UUID = field(default_factory=uuid4)
    estimated_value: Decimal | None = None
    monthly_rent: Decimal | None = None
    units: int | None = 1
    occupied_units: int | None = 0
    purchase_date: date | None = None
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        if not isinstance(self.purchase_price, Decimal):
            self.purchase_price = Decimal(str(self.purchase_price))
        if self.estimated_value is None:
            self.estimated_value = self.purchase_price
        elif not isinstance(self.estimated_value, Decimal):
            self.estimated_value = Decimal(str(self.estimated_value))
        if self.monthly_rent is None:
            self.monthly_rent = ZERO
        elif not isinstance(self.monthly_rent, Decimal):
            self.monthly_rent = Decimal(str(self.monthly_rent))
        if not self.units or self.units < 1:
            self.units = 1
        if self.occupied_units is None:
            self.occupied_units = 0
        if isinstance(self.property_type, str):
            self.property_type = PropertyType(self.property_type)

    @property
    def occupancy_rate(self) -> Decimal:
        rate = Decimal(self.occupied_units) / Decimal(self.units) * HUNDRED
        return max(rate, ZERO)

    @property
    def annual_rent(self) -> Decimal:
        return self.monthly_rent * 12
