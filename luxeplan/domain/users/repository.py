"""User repository - Database operations for users"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from ...models import User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def create(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def touch_last_login(db: Session, user: User, now: datetime) -> User:
        user.last_login = now
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def search(
        db: Session,
        exclude_email: Optional[str] = None,
        search: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Query:
        query = db.query(User)
        if exclude_email:
            query = query.filter(User.email != exclude_email)
        if role:
            query = query.filter(User.role == role)
        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter((User.email.ilike(search_term)) | (User.name.ilike(search_term)))
        return query.order_by(User.created_at.desc(), User.id.desc())

    @staticmethod
    def set_role(db: Session, user: User, role: str) -> User:
        user.role = role
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def count_by_role(db: Session) -> dict[str, int]:
        rows = db.query(User.role, func.count(User.id)).group_by(User.role).all()
        return {role: count for role, count in rows}
