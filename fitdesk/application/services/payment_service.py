"""Payment service — ledger rules: referrer check, derived totals, invoices, refunds."""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

import pytz
import structlog

from fitdesk.config import get_settings
from fitdesk.core.exceptions import ConflictError, NotFoundError
from fitdesk.domain.models.payment import Payment, PaymentStatus, calculate_final_amount
from fitdesk.domain.repositories.payment_repository import PaymentRepository
from fitdesk.domain.repositories.user_repository import UserRepository
from fitdesk.domain.schemas.payment import (
    PaymentCreate,
    PaymentFilter,
    PaymentStatistics,
    PaymentStatusUpdate,
    PaymentUpdate,
)

settings = get_settings()
tz = pytz.timezone(settings.TIMEZONE)
logger = structlog.get_logger(__name__)

SELF_REFERRAL_MESSAGE = "User cannot be their own super user (referrer)"
NOT_REFUNDABLE_MESSAGE = "Payment cannot be refunded. Only completed payments can be refunded."

# Columns that may not be cleared through an update
NON_NULLABLE_FIELDS = (
    "user_id",
    "amount",
    "date",
    "package_type",
    "session_count",
    "payment_method",
    "currency",
    "gst",
    "discount",
)
AMOUNT_FIELDS = ("amount", "gst", "discount")


def get_current_date() -> date:
    return datetime.now(tz).date()


def _check_referrer(user_id: int, super_user_id: Optional[int]) -> None:
    if super_user_id is not None and user_id == super_user_id:
        raise ConflictError(SELF_REFERRAL_MESSAGE)


def _ensure_user(users: UserRepository, user_id: int, message: str) -> None:
    if users.get_by_id(user_id) is None:
        raise NotFoundError(message)


def get_payment(repo: PaymentRepository, id: int) -> Payment:
    payment = repo.get_by_id(id)
    if payment is None:
        raise NotFoundError("Payment not found")
    return payment


def get_payment_by_payment_id(repo: PaymentRepository, payment_id: str) -> Payment:
    payment = repo.get_by_payment_id(payment_id)
    if payment is None:
        raise NotFoundError("Payment not found")
    return payment


def list_payments(repo: PaymentRepository, filters: PaymentFilter) -> List[Payment]:
    return repo.get_with_filters(filters)


def create_payment(repo: PaymentRepository, users: UserRepository, body: PaymentCreate) -> Payment:
    _check_referrer(body.user_id, body.super_user_id)
    _ensure_user(users, body.user_id, "User not found")
    if body.super_user_id is not None:
        _ensure_user(users, body.super_user_id, "Super user not found")

    data = body.model_dump()
    data["date"] = body.date or get_current_date()
    data["payment_status"] = PaymentStatus.PENDING
    data["final_amount"] = calculate_final_amount(body.amount, body.gst, body.discount)

    payment = repo.create(data)
    logger.info(
        "Payment created",
        payment_id=payment.payment_id,
        user_id=payment.user_id,
        final_amount=payment.final_amount,
    )
    return payment


def update_payment(repo: PaymentRepository, users: UserRepository, id: int, body: PaymentUpdate) -> Payment:
    payment = get_payment(repo, id)
    if payment.is_locked():
        raise ConflictError("Cannot update completed or refunded payments")

    changes = body.model_dump(exclude_unset=True)
    for field in NON_NULLABLE_FIELDS:
        if field in changes and changes[field] is None:
            del changes[field]

    user_id = changes.get("user_id", payment.user_id)
    super_user_id = changes["super_user_id"] if "super_user_id" in changes else payment.super_user_id
    _check_referrer(user_id, super_user_id)

    if "user_id" in changes:
        _ensure_user(users, user_id, "User not found")
    if changes.get("super_user_id") is not None:
        _ensure_user(users, super_user_id, "Super user not found")

    if any(field in changes for field in AMOUNT_FIELDS):
        changes["final_amount"] = calculate_final_amount(
            changes.get("amount", payment.amount),
            changes.get("gst", payment.gst),
            changes.get("discount", payment.discount),
        )

    return repo.update(payment, changes)


def update_payment_status(repo: PaymentRepository, id: int, body: PaymentStatusUpdate) -> Payment:
    payment = get_payment(repo, id)
    if payment.is_locked():
        raise ConflictError("Cannot change the status of completed or refunded payments")
    if body.status == PaymentStatus.REFUNDED:
        raise ConflictError(NOT_REFUNDABLE_MESSAGE)

    previous = payment.payment_status
    payment.payment_status = body.status
    if body.transaction_reference:
        payment.transaction_reference = body.transaction_reference
    if body.status == PaymentStatus.COMPLETED:
        payment.generate_invoice_number()

    payment = repo.save(payment)
    logger.info(
        "Payment status changed",
        payment_id=payment.payment_id,
        old=PaymentStatus(previous).value,
        new=body.status.value,
        invoice_number=payment.invoice_number,
    )
    return payment


def refund_payment(repo: PaymentRepository, id: int, reason: Optional[str] = None) -> Payment:
    payment = get_payment(repo, id)
    if not payment.can_be_refunded():
        raise ConflictError(NOT_REFUNDABLE_MESSAGE)

    payment.payment_status = PaymentStatus.REFUNDED
    if reason:
        payment.append_note(f"Refund Reason: {reason}")

    payment = repo.save(payment)
    logger.info("Payment refunded", payment_id=payment.payment_id)
    return payment


def delete_payment(repo: PaymentRepository, id: int) -> None:
    payment = get_payment(repo, id)
    if payment.is_locked():
        raise ConflictError("Cannot delete completed or refunded payments")

    payment_id = payment.payment_id
    repo.delete(payment.id)
    logger.info("Payment deleted", payment_id=payment_id)


def get_user_payments(repo: PaymentRepository, user_id: int) -> Dict[str, Any]:
    payments = repo.get_by_user(user_id)
    return {
        "payments": payments,
        "summary": {
            "total_payments": len(payments),
            "total_spent": repo.get_user_total_spent(user_id),
        },
    }


def get_super_user_payments(repo: PaymentRepository, super_user_id: int) -> Dict[str, Any]:
    return {
        "payments": repo.get_by_super_user(super_user_id),
        "summary": repo.get_commission_summary(super_user_id),
    }


def get_payment_statistics(
    repo: PaymentRepository,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> PaymentStatistics:
    return PaymentStatistics(
        total_revenue=repo.get_total_revenue(start, end),
        payments_by_status=repo.get_breakdown_by_status(),
        payments_by_package=repo.get_breakdown_by_package(),
    )
