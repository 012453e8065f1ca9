"""Decorator repository - Database operations for decorator profiles"""

from typing import Optional

from sqlalchemy.orm import Query, Session

from ...models import Booking, BookingDecorator, Decorator

OPEN_BOOKING_STATUSES = ("assigned", "planning")


class DecoratorRepository:
    """Repository for decorator database operations"""

    @staticmethod
    def get_by_id(db: Session, decorator_id: int) -> Optional[Decorator]:
        return db.query(Decorator).filter(Decorator.id == decorator_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[Decorator]:
        return db.query(Decorator).filter(Decorator.email == email).first()

    @staticmethod
    def get_many(db: Session, decorator_ids: list[int], lock: bool = False) -> list[Decorator]:
        query = db.query(Decorator).filter(Decorator.id.in_(decorator_ids))
        if lock:
            query = query.with_for_update()
        return query.all()

    @staticmethod
    def open_booking_ids(db: Session, decorator_id: int) -> list[int]:
        """Bookings still in progress that list this decorator as an assignee"""
        rows = (
            db.query(BookingDecorator.booking_id)
            .join(Booking, Booking.id == BookingDecorator.booking_id)
            .filter(
                BookingDecorator.decorator_id == decorator_id,
                Booking.status.in_(OPEN_BOOKING_STATUSES),
            )
            .order_by(BookingDecorator.booking_id)
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def search(
        db: Session,
        status: Optional[str] = None,
        work_status: Optional[str] = None,
        specialty: Optional[str] = None,
    ) -> Query:
        query = db.query(Decorator)
        if status:
            query = query.filter(Decorator.status == status)
        if work_status:
            query = query.filter(Decorator.work_status == work_status)
        if specialty:
            query = query.filter(Decorator.specialty.ilike(f"%{specialty}%"))
        return query.order_by(Decorator.created_at.desc(), Decorator.id.desc())

    @staticmethod
    def create(db: Session, **decorator_data) -> Decorator:
        decorator = Decorator(**decorator_data)
        db.add(decorator)
        db.commit()
        db.refresh(decorator)
        return decorator

    @staticmethod
    def delete(db: Session, decorator: Decorator) -> None:
        db.delete(decorator)
        db.commit()
