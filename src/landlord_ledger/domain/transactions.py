from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from landlord_ledger.domain.value_objects import TransactionType

DEFAULT_INCOME_CATEGORY = "Rent"
DEFAULT_EXPENSE_CATEGORY = "Other"


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Transaction:
    """A single income or expense record.

    ``amount`` is always stored as a non-negative magnitude; the direction
    lives in ``type``. Legacy rows that stored expenses as negative numbers
    are normalized on construction.
    """

    user_id: UUID
    type: TransactionType
    amount: Decimal
    date: date
    description: str = ""
    category: str | None = None
    property_id: UUID | None = None
    tax_category: str | None = None
    paid_by: str | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        self.type = TransactionType.parse(self.type)
        if not isinstance(self.amount, Decimal):
            self.amount = Decimal(str(self.amount))
        self.amount = abs(self.amount)
        if not self.category:
            self.category = (
                DEFAULT_INCOME_CATEGORY if self.is_income else DEFAULT_EXPENSE_CATEGORY
            )
        if self.tax_category is not None and not self.tax_category.strip():
            self.tax_category = None

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def signed_amount(self) -> Decimal:
        return -self.amount if self.is_expense else self.amount
