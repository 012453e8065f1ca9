"""Dashboard repository - Read-only aggregate queries"""

from collections import defaultdict
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ...models import Booking, BookingDecorator, Payment


class DashboardRepository:
    """Aggregates computed over the full record set on every call"""

    @staticmethod
    def bookings_by_status(db: Session, decorator_email: Optional[str] = None) -> dict[str, int]:
        query = db.query(Booking.status, func.count(Booking.id))
        if decorator_email:
            query = query.filter(
                Booking.assignments.any(BookingDecorator.decorator_email == decorator_email)
            )
        return {status: count for status, count in query.group_by(Booking.status).all()}

    @staticmethod
    def paid_revenue(db: Session) -> tuple[float, int]:
        total, count = (
            db.query(func.coalesce(func.sum(Payment.amount), 0.0), func.count(Payment.id))
            .filter(Payment.payment_status == "paid")
            .one()
        )
        return round(float(total), 2), count

    @staticmethod
    def revenue_by_month(db: Session) -> list[dict]:
        totals: dict[str, float] = defaultdict(float)
        counts: dict[str, int] = defaultdict(int)
        rows = db.query(Payment.paid_at, Payment.amount).filter(Payment.payment_status == "paid").all()
        for paid_at, amount in rows:
            month = paid_at.strftime("%Y-%m")
            totals[month] += amount
            counts[month] += 1
        return [
            {"month": month, "revenue": round(totals[month], 2), "payments": counts[month]}
            for month in sorted(totals)
        ]

    @staticmethod
    def service_demand(db: Session) -> list[dict]:
        count = func.count(Booking.id)
        rows = (
            db.query(Booking.service_name, count)
            .group_by(Booking.service_name)
            .order_by(count.desc(), Booking.service_name.asc())
            .all()
        )
        return [{"serviceName": name, "bookings": bookings} for name, bookings in rows]

    @staticmethod
    def decorator_earnings(db: Session, decorator_email: Optional[str] = None) -> dict[str, float]:
        """Completed booking cost split evenly across its assignees"""
        query = (
            db.query(Booking)
            .options(selectinload(Booking.assignments))
            .filter(Booking.status == "completed")
        )
        if decorator_email:
            query = query.filter(
                Booking.assignments.any(BookingDecorator.decorator_email == decorator_email)
            )

        earnings: dict[str, float] = defaultdict(float)
        for booking in query.all():
            if not booking.assignments:
                continue
            share = booking.cost / len(booking.assignments)
            for assignment in booking.assignments:
                earnings[assignment.decorator_email] += share
        return {email: round(total, 2) for email, total in earnings.items()}
