"""Payment API routes — ledger entries, status, refunds and statistics."""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, status

from fitdesk.application.services.payment_service import (
    create_payment,
    delete_payment,
    get_payment,
    get_payment_by_payment_id,
    get_payment_statistics,
    get_super_user_payments,
    get_user_payments,
    list_payments,
    refund_payment,
    update_payment,
    update_payment_status,
)
from fitdesk.core.exceptions import ValidationError
from fitdesk.domain.models.payment import PackageType, PaymentStatus
from fitdesk.domain.models.user import User
from fitdesk.domain.repositories.payment_repository import PaymentRepository
from fitdesk.domain.repositories.user_repository import UserRepository
from fitdesk.domain.schemas.payment import (
    CommissionSummary,
    PaymentCreate,
    PaymentFilter,
    PaymentRead,
    PaymentStatusUpdate,
    PaymentUpdate,
    RefundRequest,
    UserPaymentSummary,
)
from fitdesk.interfaces.api.deps import require_admin, require_trainer
from fitdesk.interfaces.deps import get_payment_repository, get_user_repository

router = APIRouter(prefix="/api/payments", tags=["Payments"])


def _one(payment, message: Optional[str] = None) -> dict:
    body = {"success": True, "data": PaymentRead.model_validate(payment)}
    if message:
        body["message"] = message
    return body


def _read_all(payments) -> list:
    return [PaymentRead.model_validate(p) for p in payments]


@router.post("", status_code=status.HTTP_201_CREATED)
def new_payment(
    body: PaymentCreate,
    repo: PaymentRepository = Depends(get_payment_repository),
    users: UserRepository = Depends(get_user_repository),
    trainer: User = Depends(require_trainer),
):
    return _one(create_payment(repo, users, body), "Payment created successfully")


@router.get("")
def all_payments(
    status: Optional[PaymentStatus] = None,
    package_type: Optional[PackageType] = None,
    user_id: Optional[int] = None,
    super_user_id: Optional[int] = None,
    start_date: Optional[datetime.date] = None,
    end_date: Optional[datetime.date] = None,
    repo: PaymentRepository = Depends(get_payment_repository),
    trainer: User = Depends(require_trainer),
):
    """List payments; the date range applies only when both ends are given."""
    try:
        filters = PaymentFilter(
            status=status,
            package_type=package_type,
            user_id=user_id,
            super_user_id=super_user_id,
            start_date=start_date,
            end_date=end_date,
        )
    except ValueError:
        raise ValidationError("start_date must not be after end_date")
    payments = list_payments(repo, filters)
    return {"success": True, "count": len(payments), "data": _read_all(payments)}


@router.get("/statistics")
def payment_statistics(
    start_date: Optional[datetime.date] = None,
    end_date: Optional[datetime.date] = None,
    repo: PaymentRepository = Depends(get_payment_repository),
    admin: User = Depends(require_admin),
):
    """Revenue of completed payments plus status and package breakdowns."""
    return {"success": True, "data": get_payment_statistics(repo, start_date, end_date)}


@router.get("/payment/{payment_id}")
def payment_by_public_id(
    payment_id: str,
    repo: PaymentRepository = Depends(get_payment_repository),
    trainer: User = Depends(require_trainer),
):
    return _one(get_payment_by_payment_id(repo, payment_id))


@router.get("/user/{user_id}")
def payments_of_user(
    user_id: int,
    repo: PaymentRepository = Depends(get_payment_repository),
    trainer: User = Depends(require_trainer),
):
    result = get_user_payments(repo, user_id)
    return {
        "success": True,
        "data": {
            "payments": _read_all(result["payments"]),
            "summary": UserPaymentSummary(**result["summary"]),
        },
    }


@router.get("/super-user/{super_user_id}")
def payments_referred_by(
    super_user_id: int,
    repo: PaymentRepository = Depends(get_payment_repository),
    trainer: User = Depends(require_trainer),
):
    result = get_super_user_payments(repo, super_user_id)
    return {
        "success": True,
        "data": {
            "payments": _read_all(result["payments"]),
            "summary": CommissionSummary(**result["summary"]),
        },
    }


@router.get("/{id}")
def payment_by_id(
    id: int,
    repo: PaymentRepository = Depends(get_payment_repository),
    trainer: User = Depends(require_trainer),
):
    return _one(get_payment(repo, id))


@router.put("/{id}")
def edit_payment(
    id: int,
    body: PaymentUpdate,
    repo: PaymentRepository = Depends(get_payment_repository),
    users: UserRepository = Depends(get_user_repository),
    trainer: User = Depends(require_trainer),
):
    return _one(update_payment(repo, users, id, body), "Payment updated successfully")


@router.patch("/{id}/status")
def change_payment_status(
    id: int,
    body: PaymentStatusUpdate,
    repo: PaymentRepository = Depends(get_payment_repository),
    trainer: User = Depends(require_trainer),
):
    return _one(update_payment_status(repo, id, body), "Payment status updated successfully")


@router.post("/{id}/refund")
def refund(
    id: int,
    body: Optional[RefundRequest] = None,
    repo: PaymentRepository = Depends(get_payment_repository),
    admin: User = Depends(require_admin),
):
    reason = body.reason if body else None
    return _one(refund_payment(repo, id, reason), "Payment refunded successfully")


@router.delete("/{id}")
def remove_payment(
    id: int,
    repo: PaymentRepository = Depends(get_payment_repository),
    admin: User = Depends(require_admin),
):
    delete_payment(repo, id)
    return {"success": True, "message": "Payment deleted successfully"}
