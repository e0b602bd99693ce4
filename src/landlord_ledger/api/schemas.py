"""Pydantic v2 schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# Property Schemas
class PropertyCreate(BaseModel):
    """Schema for creating a property."""

    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    purchase_price: Decimal = Field(..., ge=0)
    address: str = ""
    city: str = ""
    state: str = ""
    property_type: str = Field(
        default="SINGLE_FAMILY",
        pattern=r"^(SINGLE_FAMILY|MULTI_FAMILY|CONDO|TOWNHOUSE|COMMERCIAL|LAND)$",
    )
    purchase_date: date | None = None
    estimated_value: Decimal | None = Field(default=None, ge=0)
    monthly_rent: Decimal | None = Field(default=None, ge=0)
    units: int = Field(default=1, ge=1)
    occupied_units: int = Field(default=0, ge=0)


class PropertyResponse(BaseModel):
    """Schema for property response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    address: str
    city: str
    state: str
    property_type: str
    purchase_price: Decimal
    estimated_value: Decimal
    monthly_rent: Decimal
    units: int
    occupied_units: int
    purchase_date: date | None
    created_at: datetime


# Transaction Schemas
class TransactionCreate(BaseModel):
    """Schema for creating a transaction.

    ``amount`` may be negative on legacy clients; it is stored as a magnitude.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: UUID
    type: str = Field(..., pattern=r"^(INCOME|EXPENSE|income|expense)$")
    amount: Decimal
    date: date
    description: str = ""
    category: str | None = None
    property_id: UUID | None = None
    tax_category: str | None = None
    paid_by: str | None = None


class TransactionResponse(BaseModel):
    """Schema for transaction response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    property_id: UUID | None
    type: str
    amount: Decimal
    date: date
    description: str
    category: str | None
    tax_category: str | None
    paid_by: str | None
    created_at: datetime


# Report Schemas
class ReportResponse(BaseModel):
    """Schema for report response."""

    report_type: str
    generated_at: datetime
    data: dict[str, Any]


class AnalyticsResponse(BaseModel):
    """Schema for analytics response."""

    analytics_type: str
    data: Any


# Usage Schemas
class ResourceUsage(BaseModel):
    """Current count and plan maximum for one resource kind."""

    current: int | None
    max: int
    can_add: bool


class UsageResponse(BaseModel):
    """Schema for usage limit check response."""

    plan: str
    can_add_property: bool
    can_add_transaction: bool
    can_add_document: bool
    limits: dict[str, ResourceUsage]


class HealthResponse(BaseModel):
    """Schema for health check response."""

    status: str
    version: str = "0.1.0"
