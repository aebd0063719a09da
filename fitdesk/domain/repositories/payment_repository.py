"""
Payment Repository Interface.
Defines specific data access and aggregation operations for Payments.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from fitdesk.domain.repositories.base import BaseRepository
from fitdesk.domain.models.payment import Payment
from fitdesk.domain.schemas.payment import PaymentFilter


class PaymentRepository(BaseRepository[Payment]):
    """Interface for Payment-specific operations."""

    def get_by_payment_id(self, payment_id: str) -> Optional[Payment]:
        """Get a payment by its public PAY_ identifier."""
        ...

    def get_with_filters(self, filters: PaymentFilter) -> List[Payment]:
        """Get payments matching filters, newest first."""
        ...

    def get_by_user(self, user_id: int) -> List[Payment]:
        """Get payments made by a user, newest first."""
        ...

    def get_by_super_user(self, super_user_id: int) -> List[Payment]:
        """Get payments referred by a super user, newest first."""
        ...

    def get_user_total_spent(self, user_id: int) -> float:
        """Sum of final amounts of a user's completed payments."""
        ...

    def get_commission_summary(self, super_user_id: int) -> Dict[str, Any]:
        """Referral count, amount and sessions over completed referred payments."""
        ...

    def get_total_revenue(self, start: Optional[date] = None, end: Optional[date] = None) -> float:
        """Sum of final amounts of completed payments, optionally in a date range."""
        ...

    def get_breakdown_by_status(self) -> List[Dict[str, Any]]:
        """Count and amount grouped by payment status."""
        ...

    def get_breakdown_by_package(self) -> List[Dict[str, Any]]:
        """Count, amount and sessions of completed payments grouped by package."""
        ...
