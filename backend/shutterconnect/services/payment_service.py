"""
Earnings dashboard for a photographer.

Only COMPLETED payments count as earnings. PENDING and PROCESSING payments
are reported separately as pending.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from shutterconnect.lib.logging import get_logger
from shutterconnect.lib.pagination import offset_for
from shutterconnect.models.bookings import Booking
from shutterconnect.models.payments import Payment, PaymentStatus
from shutterconnect.models.photographers import Photographer

logger = get_logger(__name__)

PENDING_PAYMENT_STATUSES = (PaymentStatus.PENDING, PaymentStatus.PROCESSING)


@dataclass
class PaymentTotals:
    total_amount: Decimal = Decimal("0")
    total_payments: int = 0


@dataclass
class MonthlyEarnings:
    month: str  # "YYYY-MM"
    total_amount: Decimal
    payment_count: int


@dataclass
class EarningsSummary:
    period_days: int
    period: PaymentTotals
    all_time: PaymentTotals
    pending: PaymentTotals
    monthly: list[MonthlyEarnings] = field(default_factory=list)


class PaymentService:
    """Payment history and earnings summaries for one photographer."""

    def __init__(self, session: Session, photographer: Photographer):
        self.session = session
        self.photographer = photographer

    def _scoped(self, stmt):
        return stmt.join(Booking, Payment.booking_id == Booking.id).where(
            Booking.photographer_id == self.photographer.id
        )

    def _totals(self, *conditions) -> PaymentTotals:
        stmt = self._scoped(
            select(func.coalesce(func.sum(Payment.amount), 0), func.count(Payment.id))
        ).where(*conditions)
        amount, count = self.session.execute(stmt).one()
        return PaymentTotals(total_amount=Decimal(str(amount)), total_payments=count)

    def list_completed(
        self,
        since: datetime,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Payment], int]:
        """Completed payments since `since`, newest first, with booking details loaded."""
        conditions = (
            Payment.status == PaymentStatus.COMPLETED,
            Payment.created_at >= since,
        )
        total = self.session.execute(
            self._scoped(select(func.count(Payment.id))).where(*conditions)
        ).scalar_one()

        stmt = (
            self._scoped(select(Payment))
            .where(*conditions)
            .options(
                selectinload(Payment.booking).selectinload(Booking.client),
                selectinload(Payment.booking).selectinload(Booking.package),
            )
            .order_by(Payment.created_at.desc())
            .offset(offset_for(page, limit))
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars().all()), total

    def monthly_earnings(self, since: datetime) -> list[MonthlyEarnings]:
        """Completed earnings per calendar month since `since`, latest month first."""
        rows = self.session.execute(
            self._scoped(select(Payment.created_at, Payment.amount)).where(
                Payment.status == PaymentStatus.COMPLETED,
                Payment.created_at >= since,
            )
        ).all()

        buckets: dict[str, list[Decimal]] = defaultdict(list)
        for created_at, amount in rows:
            buckets[created_at.strftime("%Y-%m")].append(Decimal(str(amount)))

        return [
            MonthlyEarnings(month=month, total_amount=sum(amounts, Decimal("0")), payment_count=len(amounts))
            for month, amounts in sorted(buckets.items(), reverse=True)
        ]

    def summary(self, period_days: int = 30) -> EarningsSummary:
        since = datetime.now(timezone.utc) - timedelta(days=period_days)
        return EarningsSummary(
            period_days=period_days,
            period=self._totals(
                Payment.status == PaymentStatus.COMPLETED,
                Payment.created_at >= since,
            ),
            all_time=self._totals(Payment.status == PaymentStatus.COMPLETED),
            pending=self._totals(Payment.status.in_(PENDING_PAYMENT_STATUSES)),
            monthly=self.monthly_earnings(since),
        )

    def dashboard(
        self,
        period_days: int = 30,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Payment], int, EarningsSummary]:
        """Page of completed payments in the period plus the earnings summary."""
        since = datetime.now(timezone.utc) - timedelta(days=period_days)
        payments, total = self.list_completed(since, page, limit)
        return payments, total, self.summary(period_days)
