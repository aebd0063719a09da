"""
SQLAlchemy Implementation of Payment Repository.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import func

from fitdesk.domain.models.payment import Payment, PaymentStatus
from fitdesk.domain.repositories.payment_repository import PaymentRepository
from fitdesk.domain.schemas.payment import PaymentFilter
from fitdesk.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyPaymentRepository(SQLAlchemyRepository[Payment], PaymentRepository):
    """Payment repository implementation using SQLAlchemy."""

    def _newest_first(self, query):
        return query.order_by(Payment.date.desc(), Payment.created_at.desc(), Payment.id.desc())

    def get_by_payment_id(self, payment_id: str) -> Optional[Payment]:
        return self.db.query(Payment).filter(Payment.payment_id == payment_id).first()

    def get_with_filters(self, filters: PaymentFilter) -> List[Payment]:
        query = self.db.query(Payment)

        if filters.status:
            query = query.filter(Payment.payment_status == filters.status)
        if filters.package_type:
            query = query.filter(Payment.package_type == filters.package_type)
        if filters.user_id:
            query = query.filter(Payment.user_id == filters.user_id)
        if filters.super_user_id:
            query = query.filter(Payment.super_user_id == filters.super_user_id)
        if filters.start_date and filters.end_date:
            query = query.filter(Payment.date.between(filters.start_date, filters.end_date))

        return self._newest_first(query).all()

    def get_by_user(self, user_id: int) -> List[Payment]:
        return self._newest_first(self.db.query(Payment).filter(Payment.user_id == user_id)).all()

    def get_by_super_user(self, super_user_id: int) -> List[Payment]:
        return self._newest_first(self.db.query(Payment).filter(Payment.super_user_id == super_user_id)).all()

    def get_user_total_spent(self, user_id: int) -> float:
        total = (
            self.db.query(func.coalesce(func.sum(Payment.final_amount), 0))
            .filter(Payment.user_id == user_id, Payment.payment_status == PaymentStatus.COMPLETED)
            .scalar()
        )
        return float(total)

    def get_commission_summary(self, super_user_id: int) -> Dict[str, Any]:
        row = (
            self.db.query(
                func.count(Payment.id).label("total_referrals"),
                func.coalesce(func.sum(Payment.final_amount), 0).label("total_amount"),
                func.coalesce(func.sum(Payment.session_count), 0).label("total_sessions"),
            )
            .filter(Payment.super_user_id == super_user_id, Payment.payment_status == PaymentStatus.COMPLETED)
            .one()
        )
        return {
            "total_referrals": row.total_referrals,
            "total_amount": float(row.total_amount),
            "total_sessions": int(row.total_sessions),
        }

    def get_total_revenue(self, start: Optional[date] = None, end: Optional[date] = None) -> float:
        query = self.db.query(func.coalesce(func.sum(Payment.final_amount), 0)).filter(
            Payment.payment_status == PaymentStatus.COMPLETED
        )
        if start and end:
            query = query.filter(Payment.date.between(start, end))
        return float(query.scalar())

    def get_breakdown_by_status(self) -> List[Dict[str, Any]]:
        results = (
            self.db.query(
                Payment.payment_status,
                func.count(Payment.id).label("count"),
                func.coalesce(func.sum(Payment.final_amount), 0).label("total_amount"),
            )
            .group_by(Payment.payment_status)
            .all()
        )
        return [
            {"payment_status": r.payment_status, "count": r.count, "total_amount": float(r.total_amount)}
            for r in results
        ]

    def get_breakdown_by_package(self) -> List[Dict[str, Any]]:
        results = (
            self.db.query(
                Payment.package_type,
                func.count(Payment.id).label("count"),
                func.coalesce(func.sum(Payment.final_amount), 0).label("total_amount"),
                func.coalesce(func.sum(Payment.session_count), 0).label("total_sessions"),
            )
            .filter(Payment.payment_status == PaymentStatus.COMPLETED)
            .group_by(Payment.package_type)
            .all()
        )
        return [
            {
                "package_type": r.package_type,
                "count": r.count,
                "total_amount": float(r.total_amount),
                "total_sessions": int(r.total_sessions),
            }
            for r in results
        ]
