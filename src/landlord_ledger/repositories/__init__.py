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
from landlord_ledger.repositories.sqlite import (
    SQLiteAIAnalysisRepository,
    SQLiteDatabase,
    SQLiteDocumentRepository,
    SQLiteMetricRepository,
    SQLitePropertyRepository,
    SQLitePropertySnapshotRepository,
    SQLiteStatementRepository,
    SQLiteTransactionRepository,
    SQLiteUsageRepository,
)

__all__ = [
    "AIAnalysisRepository",
    "DocumentRepository",
    "MetricRepository",
    "PropertyRepository",
    "PropertySnapshotRepository",
    "SQLiteAIAnalysisRepository",
    "SQLiteDatabase",
    "SQLiteDocumentRepository",
    "SQLiteMetricRepository",
    "SQLitePropertyRepository",
    "SQLitePropertySnapshotRepository",
    "SQLiteStatementRepository",
    "SQLiteTransactionRepository",
    "SQLiteUsageRepository",
    "StatementRepository",
    "TransactionRepository",
    "UsageRepository",
]
