"""SQLite implementations of repository interfaces."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
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
from landlord_ledger.domain.value_objects import (
    MetricType,
    PropertyType,
    ReportKind,
    ResourceKind,
    TransactionType,
)
from landlord_ledger.exceptions import LedgerStoreError
from landlord_ledger.repositories.interfaces import (
    AIAnalysisRepository,
    DocumentRepository,
    MetricRepository,
    PropertyRepository,
    PropertySnapshotRepository,
    StatementRepository,
    TransactionRepository,
    UsageRepository,
)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise LedgerStoreError(operation, str(exc)) from exc


def _opt_uuid(value: str | None) -> UUID | None:
    return UUID(value) if value else None


class SQLiteDatabase:
    """SQLite database connection manager."""

    def __init__(
        self, path: str | Path = ":memory:", check_same_thread: bool = True
    ) -> None:
        self._path = str(path)
        self._check_same_thread = check_same_thread
        self._connection: sqlite3.Connection | None = None

    @property
    def path(self) -> str:
        return self._path

    def get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(
                self._path, check_same_thread=self._check_same_thread
            )
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA foreign_keys = ON")
        return self._connection

    def initialize(self) -> None:
        """Create all database tables."""
        conn = self.get_connection()
        with _store_errors("initialize"):
            conn.executescript(
                """
                -- Properties table
                CREATE TABLE IF NOT EXISTS properties (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    address TEXT NOT NULL DEFAULT '',
                    city TEXT NOT NULL DEFAULT '',
                    state TEXT NOT NULL DEFAULT '',
                    property_type TEXT NOT NULL,
                    purchase_price TEXT NOT NULL,
                    purchase_date TEXT,
                    estimated_value TEXT,
                    monthly_rent TEXT,
                    units INTEGER,
                    occupied_units INTEGER,
                    created_at TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_properties_user ON properties(user_id);

                -- Transactions table
                CREATE TABLE IF NOT EXISTS transactions (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    property_id TEXT,
                    type TEXT NOT NULL CHECK (type IN ('INCOME', 'EXPENSE')),
                    amount TEXT NOT NULL,
                    date TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    category TEXT,
                    tax_category TEXT,
                    paid_by TEXT,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY (property_id) REFERENCES properties(id)
                );
                CREATE INDEX IF NOT EXISTS idx_transactions_user_date ON transactions(user_id, date);
                CREATE INDEX IF NOT EXISTS idx_transactions_property ON transactions(property_id);

                -- Performance metrics table
                CREATE TABLE IF NOT EXISTS performance_metrics (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    property_id TEXT,
                    metric_type TEXT NOT NULL,
                    value TEXT NOT NULL,
                    date TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_metrics_user_date ON performance_metrics(user_id, date);

                -- Property snapshots table
                CREATE TABLE IF NOT EXISTS property_snapshots (
                    id TEXT PRIMARY KEY,
                    property_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    monthly_rent TEXT NOT NULL,
                    estimated_value TEXT NOT NULL,
                    occupancy_rate TEXT NOT NULL,
                    cap_rate TEXT NOT NULL,
                    roi TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_snapshots_property_date ON property_snapshots(property_id, date);

                -- AI analyses table
                CREATE TABLE IF NOT EXISTS ai_analyses (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    property_id TEXT,
                    analysis_type TEXT NOT NULL,
                    mode TEXT NOT NULL,
                    summary TEXT NOT NULL DEFAULT '',
                    insights TEXT NOT NULL DEFAULT '[]',
                    created_at TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_ai_analyses_user ON ai_analyses(user_id, created_at);

                -- Documents table
                CREATE TABLE IF NOT EXISTS documents (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    property_id TEXT,
                    name TEXT NOT NULL,
                    document_type TEXT NOT NULL,
                    url TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_documents_user ON documents(user_id);

                -- Generated statements audit table
                CREATE TABLE IF NOT EXISTS statements (
                    id TEXT PRIMARY KEY,
                    kind TEXT NOT NULL,
                    user_id TEXT NOT NULL,
                    property_id TEXT,
                    period_start TEXT NOT NULL,
                    period_end TEXT NOT NULL,
                    details TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_statements_user ON statements(user_id, created_at);
                """
            )

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None


class SQLitePropertyRepository(PropertyRepository):
    """SQLite implementation of PropertyRepository."""

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def add(self, prop: Property) -> None:
        conn = self._db.get_connection()
        with _store_errors("add_property"):
            conn.execute(
                """
                INSERT INTO properties (id, user_id, name, address, city, state, property_type,
                                        purchase_price, purchase_date, estimated_value,
                                        monthly_rent, units, occupied_units, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(prop.id),
                    str(prop.user_id),
                    prop.name,
                    prop.address,
                    prop.city,
                    prop.state,
                    prop.property_type.value,
                    str(prop.purchase_price),
                    prop.purchase_date.isoformat() if prop.purchase_date else None,
                    str(prop.estimated_value),
                    str(prop.monthly_rent),
                    prop.units,
                    prop.occupied_units,
                    prop.created_at.isoformat(),
                ),
            )
            conn.commit()

    def get(self, property_id: UUID) -> Property | None:
        conn = self._db.get_connection()
        with _store_errors("get_property"):
            row = conn.execute(
                "SELECT * FROM properties WHERE id = ?", (str(property_id),)
            ).fetchone()
        if row is None:
            return None
        return self._row_to_property(row)

    def list_by_user(self, user_id: UUID) -> Iterable[Property]:
        conn = self._db.get_connection()
        with _store_errors("list_properties"):
            rows = conn.execute(
                "SELECT * FROM properties WHERE user_id = ? ORDER BY created_at DESC",
                (str(user_id),),
            ).fetchall()
        return [self._row_to_property(row) for row in rows]

    def list_ids_by_user(self, user_id: UUID) -> list[UUID]:
        conn = self._db.get_connection()
        with _store_errors("list_property_ids"):
            rows = conn.execute(
                "SELECT id FROM properties WHERE user_id = ?", (str(user_id),)
            ).fetchall()
        return [UUID(row["id"]) for row in rows]

    def _row_to_property(self, row: sqlite3.Row) -> Property:
        return Property(
            id=UUID(row["id"]),
            user_id=UUID(row["user_id"]),
            name=row["name"],
            address=row["address"],
            city=row["city"],
            state=row["state"],
            property_type=PropertyType(row["property_type"]),
            purchase_price=Decimal(row["purchase_price"]),
            purchase_date=date.fromisoformat(row["purchase_date"])
            if row["purchase_date"]
            else None,
            estimated_value=Decimal(row["estimated_value"])
            if row["estimated_value"] is not None
            else None,
            monthly_rent=Decimal(row["monthly_rent"])
            if row["monthly_rent"] is not None
            else None,
            units=row["units"],
            occupied_units=row["occupied_units"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class SQLiteTransactionRepository(TransactionRepository):
    """SQLite implementation of TransactionRepository."""

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def add(self, txn: Transaction) -> None:
        conn = self._db.get_connection()
        with _store_errors("add_transaction"):
            conn.execute(
                """
                INSERT INTO transactions (id, user_id, property_id, type, amount, date,
                                          description, category, tax_category, paid_by, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(txn.id),
                    str(txn.user_id),
                    str(txn.property_id) if txn.property_id else None,
                    txn.type.value,
                    str(txn.amount),
                    txn.date.isoformat(),
                    txn.description,
                    txn.category,
                    txn.tax_category,
                    txn.paid_by,
                    txn.created_at.isoformat(),
                ),
            )
            conn.commit()

    def get(self, txn_id: UUID) -> Transaction | None:
        conn = self._db.get_connection()
        with _store_errors("get_transaction"):
            row = conn.execute(
                "SELECT * FROM transactions WHERE id = ?", (str(txn_id),)
            ).fetchone()
        if row is None:
            return None
        return self._row_to_transaction(row)

    def list_by_user(
        self,
        user_id: UUID,
        property_id: UUID | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Iterable[Transaction]:
        conn = self._db.get_connection()
        query = "SELECT * FROM transactions WHERE user_id = ?"
        params: list[str] = [str(user_id)]

        if property_id is not None:
            query += " AND property_id = ?"
            params.append(str(property_id))
        if start_date is not None:
            query += " AND date >= ?"
            params.append(start_date.isoformat())
        if end_date is not None:
            query += " AND date <= ?"
            params.append(end_date.isoformat())

        query += " ORDER BY date DESC, created_at DESC"
        with _store_errors("list_transactions"):
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_transaction(row) for row in rows]

    def _row_to_transaction(self, row: sqlite3.Row) -> Transaction:
        return Transaction(
            id=UUID(row["id"]),
            user_id=UUID(row["user_id"]),
            property_id=_opt_uuid(row["property_id"]),
            type=TransactionType(row["type"]),
            amount=Decimal(row["amount"]),
            date=date.fromisoformat(row["date"]),
            description=row["description"],
            category=row["category"],
            tax_category=row["tax_category"],
            paid_by=row["paid_by"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class SQLiteMetricRepository(MetricRepository):
    """SQLite implementation of MetricRepository."""

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def add(self, entry: MetricEntry) -> None:
        conn = self._db.get_connection()
        with _store_errors("add_metric"):
            conn.execute(
                """
                INSERT INTO performance_metrics (id, user_id, property_id, metric_type, value, date)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    str(entry.id),
                    str(entry.user_id),
                    str(entry.property_id) if entry.property_id else None,
                    entry.metric_type.value,
                    str(entry.value),
                    entry.date.isoformat(),
                ),
            )
            conn.commit()

    def list_by_user(
        self,
        user_id: UUID,
        property_id: UUID | None = None,
        metric_type: MetricType | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Iterable[MetricEntry]:
        conn = self._db.get_connection()
        query = "SELECT * FROM performance_metrics WHERE user_id = ?"
        params: list[str] = [str(user_id)]

        if property_id is not None:
            query += " AND property_id = ?"
            params.append(str(property_id))
        if metric_type is not None:
            query += " AND metric_type = ?"
            params.append(metric_type.value)
        if start_date is not None:
            query += " AND date >= ?"
            params.append(start_date.isoformat())
        if end_date is not None:
            query += " AND date <= ?"
            params.append(end_date.isoformat())

        query += " ORDER BY date"
        with _store_errors("list_metrics"):
            rows = conn.execute(query, params).fetchall()
        return [
            MetricEntry(
                id=UUID(row["id"]),
                user_id=UUID(row["user_id"]),
                property_id=_opt_uuid(row["property_id"]),
                metric_type=MetricType(row["metric_type"]),
                value=Decimal(row["value"]),
                date=date.fromisoformat(row["date"]),
            )
            for row in rows
        ]


class SQLitePropertySnapshotRepository(PropertySnapshotRepository):
    """SQLite implementation of PropertySnapshotRepository."""

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def add(self, snapshot: PropertySnapshot) -> None:
        conn = self._db.get_connection()
        with _store_errors("add_snapshot"):
            conn.execute(
                """
                INSERT INTO property_snapshots (id, property_id, date, monthly_rent,
                                                estimated_value, occupancy_rate, cap_rate, roi)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(snapshot.id),
                    str(snapshot.property_id),
                    snapshot.date.isoformat(),
                    str(snapshot.monthly_rent),
                    str(snapshot.estimated_value),
                    str(snapshot.occupancy_rate),
                    str(snapshot.cap_rate),
                    str(snapshot.roi),
                ),
            )
            conn.commit()

    def list_for_properties(
        self, property_ids: list[UUID], start_date: date | None = None
    ) -> Iterable[PropertySnapshot]:
        if not property_ids:
            return []
        conn = self._db.get_connection()
        placeholders = ", ".join("?" for _ in property_ids)
        query = f"SELECT * FROM property_snapshots WHERE property_id IN ({placeholders})"
        params: list[str] = [str(pid) for pid in property_ids]
        if start_date is not None:
            query += " AND date >= ?"
            params.append(start_date.isoformat())
        query += " ORDER BY date"
        with _store_errors("list_snapshots"):
            rows = conn.execute(query, params).fetchall()
        return [
            PropertySnapshot(
                id=UUID(row["id"]),
                property_id=UUID(row["property_id"]),
                date=date.fromisoformat(row["date"]),
                monthly_rent=Decimal(row["monthly_rent"]),
                estimated_value=Decimal(row["estimated_value"]),
                occupancy_rate=Decimal(row["occupancy_rate"]),
                cap_rate=Decimal(row["cap_rate"]),
                roi=Decimal(row["roi"]),
            )
            for row in rows
        ]


class SQLiteAIAnalysisRepository(AIAnalysisRepository):
    """SQLite implementation of AIAnalysisRepository."""

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def add(self, analysis: AIAnalysis) -> None:
        conn = self._db.get_connection()
        with _store_errors("add_ai_analysis"):
            conn.execute(
                """
                INSERT INTO ai_analyses (id, user_id, property_id, analysis_type, mode,
                                         summary, insights, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(analysis.id),
                    str(analysis.user_id),
                    str(analysis.property_id) if analysis.property_id else None,
                    analysis.analysis_type,
                    analysis.mode,
                    analysis.summary,
                    json.dumps(analysis.insights),
                    analysis.created_at.isoformat(),
                ),
            )
            conn.commit()

    def list_recent(
        self, user_id: UUID, property_id: UUID | None = None, limit: int = 20
    ) -> Iterable[AIAnalysis]:
        conn = self._db.get_connection()
        query = "SELECT * FROM ai_analyses WHERE user_id = ?"
        params: list[str | int] = [str(user_id)]
        if property_id is not None:
            query += " AND property_id = ?"
            params.append(str(property_id))
        query += " ORDER BY created_at DESC LIMIT ?"
        params.append(limit)
        with _store_errors("list_ai_analyses"):
            rows = conn.execute(query, params).fetchall()
        return [
            AIAnalysis(
                id=UUID(row["id"]),
                user_id=UUID(row["user_id"]),
                property_id=_opt_uuid(row["property_id"]),
                analysis_type=row["analysis_type"],
                mode=row["mode"],
                summary=row["summary"],
                insights=json.loads(row["insights"]),
                created_at=datetime.fromisoformat(row["created_at"]),
            )
            for row in rows
        ]


class SQLiteDocumentRepository(DocumentRepository):
    """SQLite implementation of DocumentRepository."""

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def add(self, document: Document) -> None:
        conn = self._db.get_connection()
        with _store_errors("add_document"):
            conn.execute(
                """
                INSERT INTO documents (id, user_id, property_id, name, document_type, url, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(document.id),
                    str(document.user_id),
                    str(document.property_id) if document.property_id else None,
                    document.name,
                    document.document_type.value,
                    document.url,
                    document.created_at.isoformat(),
                ),
            )
            conn.commit()


class SQLiteStatementRepository(StatementRepository):
    """SQLite implementation of StatementRepository."""

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def add(self, record: StatementRecord) -> None:
        conn = self._db.get_connection()
        with _store_errors("add_statement"):
            conn.execute(
                """
                INSERT INTO statements (id, kind, user_id, property_id, period_start,
                                        period_end, details, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(record.id),
                    record.kind.value,
                    str(record.user_id),
                    str(record.property_id) if record.property_id else None,
                    record.period_start.isoformat(),
                    record.period_end.isoformat(),
                    json.dumps(record.details),
                    record.created_at.isoformat(),
                ),
            )
            conn.commit()

    def list_by_user(self, user_id: UUID) -> Iterable[StatementRecord]:
        """Read back the statement audit trail, newest first."""
        conn = self._db.get_connection()
        with _store_errors("list_statements"):
            rows = conn.execute(
                "SELECT * FROM statements WHERE user_id = ? ORDER BY created_at DESC",
                (str(user_id),),
            ).fetchall()
        return [
            StatementRecord(
                id=UUID(row["id"]),
                kind=ReportKind(row["kind"]),
                user_id=UUID(row["user_id"]),
                property_id=_opt_uuid(row["property_id"]),
                period_start=date.fromisoformat(row["period_start"]),
                period_end=date.fromisoformat(row["period_end"]),
                details=json.loads(row["details"]),
                created_at=datetime.fromisoformat(row["created_at"]),
            )
            for row in rows
        ]


class SQLiteUsageRepository(UsageRepository):
    """Counts rows per user straight from the tables, at call time."""

    _TABLES = {
        ResourceKind.PROPERTIES: "properties",
        ResourceKind.TRANSACTIONS: "transactions",
        ResourceKind.DOCUMENTS: "documents",
    }

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def count_resources(self, user_id: UUID, kind: ResourceKind) -> int:
        conn = self._db.get_connection()
        table = self._TABLES[kind]
        with _store_errors(f"count_{table}"):
            row = conn.execute(
                f"SELECT COUNT(*) AS n FROM {table} WHERE user_id = ?",
                (str(user_id),),
            ).fetchone()
        return int(row["n"])
