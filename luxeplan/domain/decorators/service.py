"""Decorator service - Applications, approval and availability"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import ConflictError, NotFoundError
from ...models import Decorator, User, utcnow
from ...shared.pagination import PageParams, paginate
from ..users.repository import UserRepository
from .repository import DecoratorRepository
from .schemas import DecoratorApply

logger = logging.getLogger(__name__)


class DecoratorService:
    """Service layer for decorator business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DecoratorRepository()
        self.users = UserRepository()

    def apply(self, email: str, data: DecoratorApply) -> Decorator:
        if self.repo.get_by_email(self.db, email):
            raise ConflictError("You have already applied")
        try:
            decorator = self.repo.create(
                self.db,
                email=email,
                name=data.name,
                phone=data.phone,
                specialty=data.specialty,
                experience=data.experience,
                status="pending",
                work_status="available",
            )
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("You have already applied") from e
        logger.info(f"📝 Decorator application received from {email}")
        return decorator

    def list_decorators(
        self,
        params: PageParams,
        status: Optional[str] = None,
        work_status: Optional[str] = None,
        specialty: Optional[str] = None,
    ):
        return paginate(self.repo.search(self.db, status, work_status, specialty), params)

    def list_available(self, params: PageParams, specialty: Optional[str] = None):
        query = self.repo.search(self.db, status="accepted", work_status="available", specialty=specialty)
        return paginate(query, params)

    def get_decorator(self, decorator_id: int) -> Decorator:
        decorator = self.repo.get_by_id(self.db, decorator_id)
        if not decorator:
            raise NotFoundError("Decorator not found")
        return decorator

    def _ensure_not_on_open_bookings(self, decorator: Decorator, action: str) -> None:
        booking_ids = self.repo.open_booking_ids(self.db, decorator.id)
        if booking_ids:
            logger.warning(f"🚫 Decorator {decorator.email} cannot be {action} while on bookings {booking_ids}")
            raise ConflictError(
                f"Decorator is assigned to open bookings and cannot be {action}",
                bookingIds=booking_ids,
            )

    def set_status(self, decorator_id: int, status: str) -> Decorator:
        """
        Accepting promotes the applicant's user role to ``decorator``;
        rejecting demotes a decorator back to ``client``. Both rows commit together.
        A decorator still on an open booking cannot be rejected.
        """
        decorator = self.get_decorator(decorator_id)
        user: Optional[User] = self.users.get_by_email(self.db, decorator.email)
        if status == "rejected":
            self._ensure_not_on_open_bookings(decorator, "rejected")

        decorator.status = status
        decorator.reviewed_at = utcnow()
        if status == "accepted":
            if user and user.role != "admin":
                user.role = "decorator"
        else:
            decorator.work_status = "available"
            if user and user.role == "decorator":
                user.role = "client"

        self.db.commit()
        self.db.refresh(decorator)
        logger.info(f"🧑‍🎨 Decorator {decorator.email} marked {status}")
        return decorator

    def delete_decorator(self, decorator_id: int) -> dict:
        decorator = self.get_decorator(decorator_id)
        self._ensure_not_on_open_bookings(decorator, "deleted")
        user = self.users.get_by_email(self.db, decorator.email)
        if user and user.role == "decorator":
            user.role = "client"
        self.repo.delete(self.db, decorator)
        return {"message": "Decorator deleted"}
