"""Pydantic schemas for the payment ledger."""

import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from fitdesk.domain.models.payment import PackageType, PaymentMethod, PaymentStatus


class PaymentCreate(BaseModel):
    user_id: int
    super_user_id: Optional[int] = None
    amount: float = Field(gt=0)
    date: Optional[datetime.date] = None
    package_type: PackageType
    session_count: int = Field(gt=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    transaction_reference: Optional[str] = Field(None, max_length=255)
    currency: str = Field("INR", min_length=3, max_length=3)
    gst: float = Field(0, ge=0)
    discount: float = Field(0, ge=0)
    notes: Optional[str] = None


class PaymentUpdate(BaseModel):
    """Editable fields of a pending/failed/cancelled payment. Status has its own endpoint."""
    user_id: Optional[int] = None
    super_user_id: Optional[int] = None
    amount: Optional[float] = Field(None, gt=0)
    date: Optional[datetime.date] = None
    package_type: Optional[PackageType] = None
    session_count: Optional[int] = Field(None, gt=0)
    payment_method: Optional[PaymentMethod] = None
    transaction_reference: Optional[str] = Field(None, max_length=255)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    gst: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus
    transaction_reference: Optional[str] = Field(None, max_length=255)


class RefundRequest(BaseModel):
    reason: Optional[str] = None


class PaymentFilter(BaseModel):
    status: Optional[PaymentStatus] = None
    package_type: Optional[PackageType] = None
    user_id: Optional[int] = None
    super_user_id: Optional[int] = None
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class PaymentRead(BaseModel):
    id: int
    payment_id: str
    user_id: int
    super_user_id: Optional[int] = None
    amount: float
    date: datetime.date
    package_type: PackageType
    session_count: int
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    transaction_reference: Optional[str] = None
    currency: str
    gst: float
    discount: float
    final_amount: float
    notes: Optional[str] = None
    invoice_number: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    model_config = {"from_attributes": True}


class UserPaymentSummary(BaseModel):
    total_payments: int
    total_spent: float


class CommissionSummary(BaseModel):
    total_referrals: int
    total_amount: float
    total_sessions: int


class StatusBreakdown(BaseModel):
    payment_status: PaymentStatus
    count: int
    total_amount: float


class PackageBreakdown(BaseModel):
    package_type: PackageType
    count: int
    total_amount: float
    total_sessions: int


class PaymentStatistics(BaseModel):
    total_revenue: float
    payments_by_status: list[StatusBreakdown]
    payments_by_package: list[PackageBreakdown]
