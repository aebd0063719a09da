"""Payment domain model — maps to the 'payments' table."""

import enum
import secrets
import time

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.sql import func

from fitdesk.infrastructure.database import Base


class PackageType(str, enum.Enum):
    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"
    CUSTOM = "custom"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    NETBANKING = "netbanking"
    WALLET = "wallet"
    OTHER = "other"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


LOCKED_STATUSES = (PaymentStatus.COMPLETED, PaymentStatus.REFUNDED)


def generate_payment_id() -> str:
    return f"PAY_{int(time.time() * 1000)}_{secrets.token_hex(4).upper()}"


def calculate_final_amount(amount: float, gst: float | None, discount: float | None) -> float:
    return round(float(amount) + float(gst or 0) - float(discount or 0), 2)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


def _enum_column(enum_cls, **kwargs):
    return Column(Enum(enum_cls, native_enum=False, values_callable=_enum_values, length=20), **kwargs)


class Payment(Base):
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("super_user_id IS NULL OR user_id <> super_user_id", name="ck_payments_user_not_referrer"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    payment_id = Column(String(40), unique=True, nullable=False, index=True, default=generate_payment_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    super_user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)  # referrer
    amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    date = Column(Date, nullable=False, index=True)
    package_type = _enum_column(PackageType, nullable=False, index=True)
    session_count = Column(Integer, nullable=False)
    payment_method = _enum_column(PaymentMethod, nullable=False, default=PaymentMethod.CASH)
    payment_status = _enum_column(PaymentStatus, nullable=False, default=PaymentStatus.PENDING, index=True)
    transaction_reference = Column(String(255), nullable=True)
    currency = Column(String(3), nullable=False, default="INR")
    gst = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    discount = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    final_amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    notes = Column(Text, nullable=True)
    invoice_number = Column(String(30), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def generate_invoice_number(self) -> str:
        """Assign INV{yyyy}{mm}{id:06d}; an existing number is kept."""
        if self.invoice_number:
            return self.invoice_number
        if self.id is None:
            raise ValueError("Payment must be persisted before an invoice number is assigned")
        self.invoice_number = f"INV{self.date.year}{self.date.month:02d}{self.id:06d}"
        return self.invoice_number

    def is_locked(self) -> bool:
        return self.payment_status in LOCKED_STATUSES

    def can_be_refunded(self) -> bool:
        return self.payment_status == PaymentStatus.COMPLETED

    def append_note(self, text: str) -> None:
        self.notes = f"{self.notes}\n{text}" if self.notes else text

    def __repr__(self):
        return f"<Payment {self.payment_id} {self.payment_status}>"
