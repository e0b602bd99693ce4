"""API routes for Landlord Ledger."""

from datetime import UTC, date, datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from landlord_ledger.api.schemas import (
    AnalyticsResponse,
    HealthResponse,
    PropertyCreate,
    PropertyResponse,
    ReportResponse,
    ResourceUsage,
    TransactionCreate,
    TransactionResponse,
    UsageResponse,
)
from landlord_ledger.container import (
    create_analytics_service,
    create_reporting_service,
    create_usage_limit_service,
    get_database,
)
from landlord_ledger.domain.properties import Property
from landlord_ledger.domain.tax_categories import suggest_tax_category
from landlord_ledger.domain.transactions import Transaction
from landlord_ledger.domain.value_objects import (
    AnalyticsKind,
    Period,
    PropertyType,
    ReportKind,
    ResourceKind,
)
from landlord_ledger.repositories.sqlite import (
    SQLiteDatabase,
    SQLitePropertyRepository,
    SQLiteTransactionRepository,
)
from landlord_ledger.services.scope import resolve_property_scope
from landlord_ledger.services.serialization import to_jsonable

# Create routers
health_router = APIRouter(tags=["health"])
report_router = APIRouter(prefix="/reports", tags=["reports"])
analytics_router = APIRouter(prefix="/analytics", tags=["analytics"])
usage_router = APIRouter(prefix="/usage", tags=["usage"])
property_router = APIRouter(prefix="/properties", tags=["properties"])
transaction_router = APIRouter(prefix="/transactions", tags=["transactions"])

Database = Annotated[SQLiteDatabase, Depends(get_database)]


def _property_to_response(prop: Property) -> PropertyResponse:
    return PropertyResponse(
        id=prop.id,
        user_id=prop.user_id,
        name=prop.name,
        address=prop.address,
        city=prop.city,
        state=prop.state,
        property_type=prop.property_type.value,
        purchase_price=prop.purchase_price,
        estimated_value=prop.estimated_value,
        monthly_rent=prop.monthly_rent,
        units=prop.units,
        occupied_units=prop.occupied_units,
        purchase_date=prop.purchase_date,
        created_at=prop.created_at,
    )


def _transaction_to_response(txn: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=txn.id,
        user_id=txn.user_id,
        property_id=txn.property_id,
        type=txn.type.value,
        amount=txn.amount,
        date=txn.date,
        description=txn.description,
        category=txn.category,
        tax_category=txn.tax_category,
        paid_by=txn.paid_by,
        created_at=txn.created_at,
    )


@health_router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy")


# Report endpoints
@report_router.get("/financial", response_model=ReportResponse)
def financial_report(
    db: Database,
    user_id: UUID = Query(...),
    report_type: str = Query(default=ReportKind.PL.value, alias="type"),
    property_id: UUID | None = Query(default=None),
    period_start: date | None = Query(default=None),
    period_end: date | None = Query(default=None),
    year: int | None = Query(default=None),
) -> ReportResponse:
    """Generate a financial statement for a user, optionally one property."""
    period = None
    if period_start is not None or period_end is not None:
        period = Period.resolve(period_start, period_end)

    statement = create_reporting_service(db).generate_report(
        report_type,
        user_id,
        property_id=property_id,
        period=period,
        year=year,
    )
    return ReportResponse(
        report_type=statement.kind.value,
        generated_at=datetime.now(UTC),
        data=to_jsonable(statement),
    )


# Analytics endpoints
@analytics_router.get("", response_model=AnalyticsResponse)
def analytics(
    db: Database,
    user_id: UUID = Query(...),
    analytics_type: str = Query(default=AnalyticsKind.OVERVIEW.value, alias="type"),
    property_id: UUID | None = Query(default=None),
    period: str | None = Query(default=None),
) -> AnalyticsResponse:
    """Portfolio analytics for a user."""
    kind = AnalyticsKind.parse(analytics_type)
    result = create_analytics_service(db).generate_analytics(
        kind,
        user_id,
        property_id=property_id,
        period=period,
    )
    return AnalyticsResponse(analytics_type=kind.value, data=to_jsonable(result))


# Usage endpoints
@usage_router.get("/{user_id}", response_model=UsageResponse)
def usage_limits(
    user_id: UUID,
    db: Database,
    plan: str = Query(default="FREE"),
) -> UsageResponse:
    """Check which resources the user may still create on their plan."""
    decision = create_usage_limit_service(db).check_usage_limits(user_id, plan)
    return UsageResponse(
        plan=decision.plan.value,
        can_add_property=decision.can_add_property,
        can_add_transaction=decision.can_add_transaction,
        can_add_document=decision.can_add_document,
        limits={
            snapshot.resource.value: ResourceUsage(
                current=snapshot.current,
                max=snapshot.maximum,
                can_add=snapshot.can_add,
            )
            for snapshot in decision.limits
        },
    )


# Property endpoints
@property_router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_property(
    payload: PropertyCreate,
    db: Database,
    plan: str = Query(default="FREE"),
) -> PropertyResponse:
    """Create a property if the user's plan allows another one."""
    create_usage_limit_service(db).ensure_can_add(
        payload.user_id, plan, ResourceKind.PROPERTIES
    )

    prop = Property(
        user_id=payload.user_id,
        name=payload.name,
        purchase_price=payload.purchase_price,
        address=payload.address,
        city=payload.city,
        state=payload.state,
        property_type=PropertyType(payload.property_type),
        purchase_date=payload.purchase_date,
        estimated_value=payload.estimated_value,
        monthly_rent=payload.monthly_rent,
        units=payload.units,
        occupied_units=payload.occupied_units,
    )
    SQLitePropertyRepository(db).add(prop)
    return _property_to_response(prop)


# Transaction endpoints
@transaction_router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_transaction(
    payload: TransactionCreate,
    db: Database,
    plan: str = Query(default="FREE"),
) -> TransactionResponse:
    """Record a transaction if the user's plan allows another one.

    An expense sent without a tax category gets one suggested from its
    description and category.
    """
    resolve_property_scope(SQLitePropertyRepository(db), payload.user_id, payload.property_id)
    create_usage_limit_service(db).ensure_can_add(
        payload.user_id, plan, ResourceKind.TRANSACTIONS
    )

    txn = Transaction(
        user_id=payload.user_id,
        type=payload.type,
        amount=payload.amount,
        date=payload.date,
        description=payload.description,
        category=payload.category,
        property_id=payload.property_id,
        tax_category=payload.tax_category,
        paid_by=payload.paid_by,
    )
    if txn.is_expense and txn.tax_category is None:
        txn.tax_category = suggest_tax_category(payload.description, payload.category)
    SQLiteTransactionRepository(db).add(txn)
    return _transaction_to_response(txn)
