from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date
from uuid import UUID

from landlord_ledger.domain.audit import StatementRecord
from landlord_ledger.domain.metrics import (
    AIAnalysis,
    Document,
    MetricEntry,
    PropertySnapshot,
)
from landlord_ledger.domain.properties import Property
from landlord_ledger.domain.transactions import Transaction
from landlord_ledger.domain.value_objects import MetricType, ResourceKind


class PropertyRepository(ABC):
    @abstractmethod
    def add(self, prop: Property) -> None:
        pass

    @abstractmethod
    def get(self, property_id: UUID) -> Property | None:
        pass

    @abstractmethod
    def list_by_user(self, user_id: UUID) -> Iterable[Property]:
        pass

    @abstractmethod
    def list_ids_by_user(self, user_id: UUID) -> list[UUID]:
        pass


class TransactionRepository(ABC):
    @abstractmethod
    def add(self, txn: Transaction) -> None:
        pass

    @abstractmethod
    def get(self, txn_id: UUID) -> Transaction | None:
        pass

    @abstractmethod
    def list_by_user(
        self,
        user_id: UUID,
        property_id: UUID | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Iterable[Transaction]:
        """Return matching transactions, most recent first."""


class MetricRepository(ABC):
    @abstractmethod
    def add(self, entry: MetricEntry) -> None:
        pass

    @abstractmethod
    def list_by_user(
        self,
        user_id: UUID,
        property_id: UUID | None = None,
        metric_type: MetricType | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Iterable[MetricEntry]:
        pass


class PropertySnapshotRepository(ABC):
    @abstractmethod
    def add(self, snapshot: PropertySnapshot) -> None:
        pass

    @abstractmethod
    def list_for_properties(
        self, property_ids: list[UUID], start_date: date | None = None
    ) -> Iterable[PropertySnapshot]:
        """Return snapshots for the given properties, oldest first."""


class AIAnalysisRepository(ABC):
    @abstractmethod
    def add(self, analysis: AIAnalysis) -> None:
        pass

    @abstractmethod
    def list_recent(
        self, user_id: UUID, property_id: UUID | None = None, limit: int = 20
    ) -> Iterable[AIAnalysis]:
        pass


class DocumentRepository(ABC):
    @abstractmethod
    def add(self, document: Document) -> None:
        pass


class StatementRepository(ABC):
    @abstractmethod
    def add(self, record: StatementRecord) -> None:
        pass

    @abstractmethod
    def list_by_user(self, user_id: UUID) -> Iterable[StatementRecord]:
        pass


class UsageRepository(ABC):
    @abstractmethod
    def count_resources(self, user_id: UUID, kind: ResourceKind) -> int:
        """Live count of the user's rows of the given kind."""
