from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.shared.base import Amount, Count, coerce_decimal
from src.shared.time import Period

PAID_STATUS = "paid"
SALES_ROLES = ("owner", "employee")


class RevenuePaymentRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    amount: Amount = Decimal("0")
    period_month: int = Field(alias="revenue_month", ge=1, le=12)
    period_year: int = Field(alias="revenue_year")
    payment_status: str = "pending"
    booking_ref: Optional[str] = Field(default=None, alias="booking_id")
    created_at: Optional[datetime] = None

    @property
    def period(self) -> Period:
        return Period(year=self.period_year, month=self.period_month)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PAID_STATUS


class TripRef(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    category: Optional[str] = None
    price: Amount = Decimal("0")


class BookingRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    created_at: datetime
    trip: Optional[TripRef] = None


class ClientRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: str = ""
    created_at: Optional[datetime] = None
    trip_value: Optional[Decimal] = None

    @field_validator("trip_value", mode="before")
    @classmethod
    def coerce_trip_value(cls, value: Any) -> Optional[Decimal]:
        if value is None:
            return None
        return coerce_decimal(value)


class MonthlyMetricSnapshot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    metric_date: date
    total_revenue: Amount = Decimal("0")
    total_bookings: Count = 0

    @property
    def period(self) -> Period:
        return Period.containing(self.metric_date)


class CategorySnapshot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    month: int
    year: int
    category: str
    total_revenue: Amount = Decimal("0")
    total_bookings: Count = 0
    market_share: Amount = Decimal("0")


class SourceSnapshot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    month: int
    year: int
    source_type: str
    revenue_amount: Amount = Decimal("0")
    booking_count: Count = 0
    roi: Amount = Decimal("0")


class StaffRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    role: str = "other"

    @property
    def display_name(self) -> str:
        return self.email.split("@")[0]


class RevenueTargetRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    target_type: str
    target_period: str
    revenue_target: Amount = Decimal("0")
    bookings_target: Count = 0
    leads_target: Count = 0
    conversion_target: Amount = Decimal("0")
    actual_revenue: Amount = Decimal("0")
    actual_bookings: Count = 0
    actual_leads: Count = 0
    actual_conversion: Amount = Decimal("0")
    achievement_rate: Amount = Decimal("0")
    created_at: Optional[datetime] = None
