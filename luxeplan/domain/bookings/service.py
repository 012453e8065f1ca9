"""
Booking service - Booking lifecycle and decorator assignment

Lifecycle: pending -> assigned -> planning -> completed. Every transition
updates the booking and the affected decorator rows in a single commit, with
the booking row locked on engines that support ``SELECT ... FOR UPDATE``.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...auth import Principal
from ...errors import ConflictError, ForbiddenError, NotFoundError
from ...models import Booking, BookingDecorator, Decorator, utcnow
from ...shared.pagination import PageParams, paginate
from ..catalog.repository import ServiceRepository
from ..decorators.repository import DecoratorRepository
from .repository import BookingRepository
from .schemas import BookingCreate, BookingUpdate

logger = logging.getLogger(__name__)

# target status -> statuses it may be entered from
ALLOWED_TRANSITIONS = {
    "assigned": {"pending", "assigned"},
    "planning": {"assigned"},
    "completed": {"assigned", "planning"},
}


def check_transition(booking: Booking, target: str) -> None:
    if booking.status not in ALLOWED_TRANSITIONS[target]:
        raise ConflictError(
            f"Cannot move booking from {booking.status} to {target}",
            status=booking.status,
        )


def day_bounds(day: date) -> tuple[str, str]:
    """[start-of-day, start-of-next-day) as ISO date strings"""
    return day.isoformat(), (day + timedelta(days=1)).isoformat()


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()
        self.services = ServiceRepository()
        self.decorators = DecoratorRepository()

    # ------------------------------------------------------------------
    # Create / read
    # ------------------------------------------------------------------

    def create_booking(self, email: str, data: BookingCreate) -> Booking:
        service = self.services.get_by_id(self.db, data.serviceId)
        if not service:
            raise NotFoundError("Service not found")

        booking = self.repo.create(
            self.db,
            user_email=email,
            user_name=data.userName,
            phone=data.phone,
            service_id=service.id,
            service_name=service.service_name,
            service_category=service.service_category,
            date=data.date,
            time=data.time,
            location=data.location,
            cost=service.cost,
            status="pending",
            payment_status="unpaid",
            created_at=utcnow(),
        )
        logger.info(f"📅 Booking {booking.id} created by {email} for {service.service_name} on {data.date}")
        return booking

    def list_bookings(
        self,
        params: PageParams,
        service_id: Optional[int] = None,
        date: Optional[str] = None,
        email: Optional[str] = None,
        decorator_email: Optional[str] = None,
        status: Optional[str] = None,
    ):
        query = self.repo.search(self.db, service_id, date, email, decorator_email, status)
        return paginate(query, params)

    def get_booking(self, booking_id: int, lock: bool = False) -> Booking:
        booking = self.repo.get_by_id(self.db, booking_id, lock=lock)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def get_visible_booking(self, booking_id: int, principal: Principal) -> Booking:
        """Booking readable by its owner, an assigned decorator or an admin"""
        booking = self.get_booking(booking_id)
        if (
            principal.is_admin
            or booking.user_email == principal.email
            or principal.email in booking.decorator_emails
        ):
            return booking
        raise ForbiddenError("You cannot access this booking", role=principal.role)

    def _get_owned_booking(self, booking_id: int, principal: Principal, lock: bool = False) -> Booking:
        booking = self.get_booking(booking_id, lock=lock)
        if not principal.is_admin and booking.user_email != principal.email:
            raise ForbiddenError("Only the booking owner or an admin can change this booking", role=principal.role)
        return booking

    # ------------------------------------------------------------------
    # Owner / admin edits
    # ------------------------------------------------------------------

    def update_booking(self, booking_id: int, data: BookingUpdate, principal: Principal) -> Booking:
        booking = self._get_owned_booking(booking_id, principal, lock=True)
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(booking, key, value)
        booking.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def delete_booking(self, booking_id: int, principal: Principal) -> dict:
        booking = self._get_owned_booking(booking_id, principal, lock=True)
        if booking.status != "completed":
            self._release(booking.decorator_ids)
        self.repo.delete(self.db, booking)
        logger.info(f"🗑️ Booking {booking_id} deleted by {principal.email}")
        return {"message": "Booking deleted"}

    # ------------------------------------------------------------------
    # Workflow transitions
    # ------------------------------------------------------------------

    def assign(self, booking_id: int, decorator_ids: list[int]) -> Booking:
        """
        Attach an ordered list of decorators. Decorators dropped from a
        previous assignment are released; new ones must be accepted and
        available.
        """
        booking = self.get_booking(booking_id, lock=True)
        check_transition(booking, "assigned")

        decorators = {d.id: d for d in self.decorators.get_many(self.db, decorator_ids, lock=True)}
        missing = [i for i in decorator_ids if i not in decorators]
        if missing:
            raise NotFoundError("Decorator not found", decoratorIds=missing)

        current = {a.decorator_id: a for a in booking.assignments}
        for decorator_id in decorator_ids:
            decorator: Decorator = decorators[decorator_id]
            if decorator.status != "accepted":
                raise ConflictError(f"Decorator {decorator.email} is not an accepted decorator")
            if decorator_id not in current and decorator.work_status != "available":
                raise ConflictError(f"Decorator {decorator.email} is not available")

        self._release([i for i in current if i not in decorators])

        assignments = []
        for position, decorator_id in enumerate(decorator_ids):
            decorator = decorators[decorator_id]
            # Reuse rows for kept decorators so the (booking, decorator) pair is never re-inserted
            assignment = current.get(decorator_id) or BookingDecorator(decorator_id=decorator_id)
            assignment.position = position
            assignment.decorator_name = decorator.name
            assignment.decorator_email = decorator.email
            assignments.append(assignment)
            decorator.work_status = "working"
        booking.assignments = assignments

        booking.status = "assigned"
        booking.assigned_at = utcnow()
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"🧑‍🎨 Booking {booking.id} assigned to {booking.decorator_emails}")
        return booking

    def _require_assignee(self, booking: Booking, email: str) -> None:
        if email not in booking.decorator_emails:
            logger.warning(f"🚫 {email} is not assigned to booking {booking.id}")
            raise ForbiddenError("You are not assigned to this booking", role="decorator")

    def start_planning(self, booking_id: int, email: str) -> Booking:
        booking = self.get_booking(booking_id, lock=True)
        self._require_assignee(booking, email)
        check_transition(booking, "planning")

        self._set_work_status(booking.decorator_ids, "working")
        booking.status = "planning"
        booking.planning_at = utcnow()
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"🛠️ Booking {booking.id} moved to planning by {email}")
        return booking

    def complete(self, booking_id: int, email: str) -> Booking:
        booking = self.get_booking(booking_id, lock=True)
        self._require_assignee(booking, email)
        check_transition(booking, "completed")

        self._release(booking.decorator_ids)
        booking.status = "completed"
        booking.completed_at = utcnow()
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"✅ Booking {booking.id} completed by {email}")
        return booking

    def _set_work_status(self, decorator_ids: list[int], work_status: str) -> None:
        if not decorator_ids:
            return
        for decorator in self.decorators.get_many(self.db, decorator_ids, lock=True):
            decorator.work_status = work_status

    def _release(self, decorator_ids: list[int]) -> None:
        self._set_work_status(decorator_ids, "available")

    # ------------------------------------------------------------------
    # Decorator views
    # ------------------------------------------------------------------

    def assigned_to(self, email: str, params: PageParams, status: Optional[str] = None):
        return paginate(self.repo.search(self.db, decorator_email=email, status=status), params)

    def todays_schedule(self, email: Optional[str] = None, now: Optional[datetime] = None) -> list[Booking]:
        start, end = day_bounds((now or utcnow()).date())
        return self.repo.scheduled_between(self.db, start, end, decorator_email=email).all()
