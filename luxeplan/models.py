from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base

ROLES = ("client", "decorator", "admin")
DECORATOR_STATUSES = ("pending", "accepted", "rejected")
WORK_STATUSES = ("available", "assigned", "working")
BOOKING_STATUSES = ("pending", "assigned", "planning", "completed")
PAYMENT_STATUSES = ("unpaid", "paid")
DISCOUNT_TYPES = ("percent", "fixed")


def utcnow() -> datetime:
    """Naive UTC timestamp; every DateTime column stores UTC without tzinfo"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    photo_url = Column(String(500), nullable=True)
    role = Column(String(20), default="client", nullable=False)  # client, decorator, admin
    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_login = Column(DateTime, default=utcnow, nullable=False)


class Service(Base):
    __tablename__ = "service"

    id = Column(Integer, primary_key=True, index=True)
    service_name = Column(String(255), nullable=False, index=True)
    service_category = Column(String(100), nullable=True, index=True)
    cost = Column(Float, nullable=False, default=0.0)
    unit = Column(String(50), nullable=True)  # e.g. "per event", "per sq-ft"
    ratings = Column(Float, nullable=False, default=0.0)
    description = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class Decorator(Base):
    __tablename__ = "decorator"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    specialty = Column(String(100), nullable=True, index=True)
    experience = Column(Text, nullable=True)
    rating = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), default="pending", nullable=False)  # pending, accepted, rejected
    work_status = Column(String(20), default="available", nullable=False)  # available, assigned, working
    created_at = Column(DateTime, default=utcnow, nullable=False)
    reviewed_at = Column(DateTime, nullable=True)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_email = Column(String(255), nullable=False, index=True)
    user_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    # Denormalized service reference, no foreign key
    service_id = Column(Integer, nullable=False, index=True)
    service_name = Column(String(255), nullable=False)
    service_category = Column(String(100), nullable=True)
    date = Column(String(32), nullable=False, index=True)  # zero-padded ISO-8601
    time = Column(String(32), nullable=True)
    location = Column(String(500), nullable=True)
    cost = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), default="pending", nullable=False, index=True)
    payment_status = Column(String(20), default="unpaid", nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True)
    assigned_at = Column(DateTime, nullable=True)
    planning_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    assignments = relationship(
        "BookingDecorator",
        back_populates="booking",
        order_by="BookingDecorator.position",
        cascade="all, delete-orphan",
    )

    @property
    def decorator_ids(self) -> list[int]:
        return [a.decorator_id for a in self.assignments]

    @property
    def decorator_names(self) -> list[str]:
        return [a.decorator_name or "" for a in self.assignments]

    @property
    def decorator_emails(self) -> list[str]:
        return [a.decorator_email for a in self.assignments]


class BookingDecorator(Base):
    """Ordered assignee list of a booking"""

    __tablename__ = "booking_decorators"
    __table_args__ = (UniqueConstraint("booking_id", "decorator_id", name="uq_booking_decorator"),)

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    decorator_id = Column(Integer, ForeignKey("decorator.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    # Copied at assignment time so history survives profile edits
    decorator_name = Column(String(255), nullable=True)
    decorator_email = Column(String(255), nullable=False, index=True)

    booking = relationship("Booking", back_populates="assignments")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    transaction_id = Column(String(255), unique=True, index=True, nullable=False)
    session_id = Column(String(255), nullable=True, index=True)
    booking_id = Column(Integer, nullable=True, index=True)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False)
    customer_email = Column(String(255), nullable=True, index=True)
    service_id = Column(Integer, nullable=True)
    service_name = Column(String(255), nullable=True)
    coupon_code = Column(String(64), nullable=True)
    payment_status = Column(String(20), default="paid", nullable=False)
    paid_at = Column(DateTime, default=utcnow, nullable=False)


class Coupon(Base):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(64), unique=True, index=True, nullable=False)  # always upper-case
    discount_type = Column(String(20), nullable=False)  # percent, fixed
    amount = Column(Float, nullable=False)
    expiry_date = Column(DateTime, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
