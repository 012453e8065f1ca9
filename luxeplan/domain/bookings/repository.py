"""Booking repository - Database operations for bookings"""

from typing import Optional

from sqlalchemy.orm import Query, Session, selectinload

from ...models import Booking, BookingDecorator


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_by_id(db: Session, booking_id: int, lock: bool = False) -> Optional[Booking]:
        query = db.query(Booking).filter(Booking.id == booking_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def create(db: Session, **booking_data) -> Booking:
        booking = Booking(**booking_data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def delete(db: Session, booking: Booking) -> None:
        db.delete(booking)
        db.commit()

    @staticmethod
    def search(
        db: Session,
        service_id: Optional[int] = None,
        date: Optional[str] = None,
        email: Optional[str] = None,
        decorator_email: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Query:
        query = db.query(Booking).options(selectinload(Booking.assignments))

        if service_id is not None:
            query = query.filter(Booking.service_id == service_id)
        if date:
            # Stored dates are ISO strings; "2026-10-19" also matches "2026-10-19T15:00"
            query = query.filter(Booking.date.startswith(date, autoescape=True))
        if email:
            query = query.filter(Booking.user_email == email)
        if decorator_email:
            query = query.filter(
                Booking.assignments.any(BookingDecorator.decorator_email == decorator_email)
            )
        if status:
            query = query.filter(Booking.status == status)

        return query.order_by(Booking.created_at.desc(), Booking.id.desc())

    @staticmethod
    def scheduled_between(
        db: Session, start: str, end: str, decorator_email: Optional[str] = None
    ) -> Query:
        """Open bookings whose ISO date falls within [start, end)"""
        query = (
            db.query(Booking)
            .options(selectinload(Booking.assignments))
            .filter(Booking.status != "completed", Booking.date >= start, Booking.date < end)
        )
        if decorator_email:
            query = query.filter(
                Booking.assignments.any(BookingDecorator.decorator_email == decorator_email)
            )
        return query.order_by(Booking.date.asc(), Booking.time.asc(), Booking.id.asc())
