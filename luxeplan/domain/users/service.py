"""User service - Registration and role management"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import NotFoundError
from ...models import User, utcnow
from ...shared.pagination import PageParams, paginate
from .repository import UserRepository
from .schemas import UserRegister

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def register(self, email: str, data: UserRegister) -> tuple[User, bool]:
        """
        Create the user on first sign-in, otherwise refresh ``last_login``.
        Returns (user, created). Role is never taken from the request.
        """
        now = utcnow()
        existing = self.repo.get_by_email(self.db, email)
        if existing:
            return self.repo.touch_last_login(self.db, existing, now), False

        try:
            user = self.repo.create(
                self.db,
                email=email,
                name=data.name,
                photo_url=data.photoURL,
                role="client",
                created_at=now,
                last_login=now,
            )
        except IntegrityError:
            # Concurrent first sign-in inserted the same email
            self.db.rollback()
            existing = self.repo.get_by_email(self.db, email)
            return self.repo.touch_last_login(self.db, existing, now), False

        logger.info(f"🆕 New user registered: {email}")
        return user, True

    def list_users(self, admin_email: str, params: PageParams, search=None, role=None):
        query = self.repo.search(self.db, exclude_email=admin_email, search=search, role=role)
        return paginate(query, params)

    def get_role(self, email: str) -> str:
        user = self.repo.get_by_email(self.db, email)
        return user.role if user else "client"

    def update_role(self, user_id: int, role: str) -> User:
        user = self.repo.get_by_id(self.db, user_id)
        if not user:
            raise NotFoundError("User not found")
        logger.info(f"🔑 Role change for {user.email}: {user.role} -> {role}")
        return self.repo.set_role(self.db, user, role)
