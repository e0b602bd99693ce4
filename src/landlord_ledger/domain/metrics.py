"""Pre-computed time series consumed by the analytics builders."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from landlord_ledger.domain.value_objects import DocumentType, MetricType


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class MetricEntry:
    user_id: UUID
    date: date
    metric_type: MetricType
    value: Decimal
    property_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if isinstance(self.metric_type, str):
            self.metric_type = MetricType(self.metric_type)
        if not isinstance(self.value, Decimal):
            self.value = Decimal(str(self.value))


@dataclass
class PropertySnapshot:
    """Point-in-time financial picture of one property."""

    property_id: UUID
    date: date
    monthly_rent: Decimal
    estimated_value: Decimal
    occupancy_rate: Decimal
    cap_rate: Decimal
    roi: Decimal
    id: UUID = field(default_factory=uuid4)


@dataclass
class AIAnalysis:
    """A stored AI analysis. Produced elsewhere, only read back here."""

    user_id: UUID
    analysis_type: str
    mode: str
    summary: str
    insights: list[Any] = field(default_factory=list)
    property_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utc_now)


@dataclass
class Document:
    user_id: UUID
    name: str
    document_type: DocumentType = DocumentType.OTHER
    url: str = ""
    property_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utc_now)
