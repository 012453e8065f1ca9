"""Coupon service - Discount codes and their validation"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import ConflictError, ExpiredError, NotFoundError
from ...models import Coupon, utcnow
from .schemas import CouponCreate, CouponUpdate

logger = logging.getLogger(__name__)

FIELD_MAP = {
    "discountType": "discount_type",
    "amount": "amount",
    "expiryDate": "expiry_date",
    "isActive": "is_active",
}


def compute_discount(coupon: Coupon, cost: float) -> float:
    """Fixed amount or percentage of ``cost``, never more than ``cost``"""
    if coupon.discount_type == "percent":
        discount = cost * coupon.amount / 100
    else:
        discount = coupon.amount
    return round(min(max(discount, 0.0), cost), 2)


class CouponService:
    """Service layer for coupon business logic"""

    def __init__(self, db: Session):
        self.db = db

    def list_coupons(self, active: Optional[bool] = None) -> list[Coupon]:
        query = self.db.query(Coupon)
        if active is not None:
            query = query.filter(Coupon.is_active == active)
        return query.order_by(Coupon.created_at.desc(), Coupon.id.desc()).all()

    def get_coupon(self, coupon_id: int) -> Coupon:
        coupon = self.db.query(Coupon).filter(Coupon.id == coupon_id).first()
        if not coupon:
            raise NotFoundError("Coupon not found")
        return coupon

    def create_coupon(self, data: CouponCreate) -> Coupon:
        if self.db.query(Coupon).filter(Coupon.code == data.code).first():
            raise ConflictError("Coupon code already exists")

        coupon = Coupon(
            code=data.code,
            discount_type=data.discountType,
            amount=data.amount,
            expiry_date=data.expiryDate,
            is_active=data.isActive,
        )
        self.db.add(coupon)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Coupon code already exists") from e
        self.db.refresh(coupon)
        logger.info(f"🏷️ Coupon {coupon.code} created")
        return coupon

    def update_coupon(self, coupon_id: int, data: CouponUpdate) -> Coupon:
        coupon = self.get_coupon(coupon_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(coupon, FIELD_MAP[key], value)
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def delete_coupon(self, coupon_id: int) -> dict:
        coupon = self.get_coupon(coupon_id)
        self.db.delete(coupon)
        self.db.commit()
        return {"message": "Coupon deleted"}

    def validate(self, code: str, cost: float, now: Optional[datetime] = None) -> tuple[Coupon, float]:
        """
        Look up an active coupon and compute its discount for ``cost``.
        Expiry is checked before any discount math.
        """
        coupon = (
            self.db.query(Coupon)
            .filter(Coupon.code == code.strip().upper(), Coupon.is_active.is_(True))
            .first()
        )
        if not coupon:
            raise NotFoundError("Invalid coupon code")
        if (now or utcnow()) > coupon.expiry_date:
            raise ExpiredError("Coupon has expired")
        return coupon, compute_discount(coupon, cost)
