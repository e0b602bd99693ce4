"""Dependency injection container for Landlord Ledger.

Usage:
    from landlord_ledger.container import get_container

    container = get_container()
    report = container.reporting_service.generate_report("pl", user_id)
"""

from functools import cached_property, lru_cache

from landlord_ledger.config import Settings, get_settings
from landlord_ledger.logging_config import get_logger
from landlord_ledger.repositories.sqlite import (
    SQLiteAIAnalysisRepository,
    SQLiteDatabase,
    SQLiteMetricRepository,
    SQLitePropertyRepository,
    SQLitePropertySnapshotRepository,
    SQLiteStatementRepository,
    SQLiteTransactionRepository,
    SQLiteUsageRepository,
)
from landlord_ledger.services.analytics import AnalyticsServiceImpl
from landlord_ledger.services.reporting import ReportingServiceImpl
from landlord_ledger.services.usage_limits import UsageLimitServiceImpl

logger = get_logger(__name__)


def create_reporting_service(
    db: SQLiteDatabase, settings: Settings | None = None
) -> ReportingServiceImpl:
    settings = settings or get_settings()
    return ReportingServiceImpl(
        property_repo=SQLitePropertyRepository(db),
        transaction_repo=SQLiteTransactionRepository(db),
        statement_repo=SQLiteStatementRepository(db),
        record_statements=settings.enable_statement_audit,
        recent_activity_limit=settings.recent_activity_limit,
    )


def create_analytics_service(
    db: SQLiteDatabase, settings: Settings | None = None
) -> AnalyticsServiceImpl:
    settings = settings or get_settings()
    return AnalyticsServiceImpl(
        property_repo=SQLitePropertyRepository(db),
        transaction_repo=SQLiteTransactionRepository(db),
        metric_repo=SQLiteMetricRepository(db),
        snapshot_repo=SQLitePropertySnapshotRepository(db),
        ai_analysis_repo=SQLiteAIAnalysisRepository(db),
        ai_history_limit=settings.ai_history_limit,
        default_window=settings.default_trend_window,
    )


def create_usage_limit_service(db: SQLiteDatabase) -> UsageLimitServiceImpl:
    return UsageLimitServiceImpl(SQLiteUsageRepository(db))


class Container:
    """Lazily builds the ledger store and the services on top of it.

    For tests, construct one directly with custom settings:

        container = Container(settings=Settings(sqlite_path=":memory:"))
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        logger.debug(
            "container_created",
            environment=self._settings.environment.value,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @cached_property
    def database(self) -> SQLiteDatabase:
        """The SQLite ledger store, initialized on first access."""
        db_path = str(self._settings.sqlite_path)
        logger.info("initializing_sqlite_database", path=db_path)

        db = SQLiteDatabase(db_path, check_same_thread=False)
        db.initialize()
        return db

    @cached_property
    def reporting_service(self) -> ReportingServiceImpl:
        return create_reporting_service(self.database, self._settings)

    @cached_property
    def analytics_service(self) -> AnalyticsServiceImpl:
        return create_analytics_service(self.database, self._settings)

    @cached_property
    def usage_limit_service(self) -> UsageLimitServiceImpl:
        return create_usage_limit_service(self.database)

    def close(self) -> None:
        """Close the database connection if it was ever opened."""
        if "database" in self.__dict__:
            logger.info("closing_database_connection")
            self.database.close()

    def __enter__(self) -> "Container":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


_container: Container | None = None


@lru_cache
def get_container() -> Container:
    """Get the global container singleton."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Close and drop the global container."""
    global _container
    if _container is not None:
        _container.close()
        _container = None
    get_container.cache_clear()


# FastAPI dependency functions
def get_database() -> SQLiteDatabase:
    """FastAPI dependency for the ledger store."""
    return get_container().database
