"""Audit trail of generated statements."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID, uuid4

from landlord_ledger.domain.value_objects import ReportKind


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class StatementRecord:
    """A copy of a generated statement, kept for the user's records.

    ``details`` embeds the serialized statement rather than referencing the
    transactions it was built from, so later edits do not alter history.
    """

    kind: ReportKind
    user_id: UUID
    period_start: date
    period_end: date
    details: dict[str, Any]
    property_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utc_now)
