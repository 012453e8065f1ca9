"""Coupon router - FastAPI endpoints for discount codes"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Principal, get_token_email, require_admin
from ...database import get_db
from ...models import Coupon
from .schemas import CouponCreate, CouponResponse, CouponUpdate, CouponValidateRequest, DiscountResponse
from .service import CouponService

router = APIRouter(prefix="/coupons", tags=["Coupons"])


def get_coupon_service(db: Session = Depends(get_db)) -> CouponService:
    """Dependency injection for CouponService"""
    return CouponService(db)


def to_coupon_response(coupon: Coupon) -> CouponResponse:
    return CouponResponse(
        id=coupon.id,
        code=coupon.code,
        discountType=coupon.discount_type,
        amount=coupon.amount,
        expiryDate=coupon.expiry_date,
        isActive=coupon.is_active,
        createdAt=coupon.created_at,
    )


@router.post("/validate", response_model=DiscountResponse)
async def validate_coupon(
    data: CouponValidateRequest,
    _email: str = Depends(get_token_email),
    service: CouponService = Depends(get_coupon_service),
):
    coupon, discount = service.validate(data.code, data.cost)
    return DiscountResponse(
        code=coupon.code,
        discountType=coupon.discount_type,
        amount=coupon.amount,
        discount=discount,
        finalCost=round(data.cost - discount, 2),
    )


@router.get("", response_model=list[CouponResponse])
async def list_coupons(
    active: Optional[bool] = Query(None),
    _admin: Principal = Depends(require_admin),
    service: CouponService = Depends(get_coupon_service),
):
    return [to_coupon_response(c) for c in service.list_coupons(active)]


@router.post("", response_model=CouponResponse, status_code=201)
async def create_coupon(
    data: CouponCreate,
    _admin: Principal = Depends(require_admin),
    service: CouponService = Depends(get_coupon_service),
):
    return to_coupon_response(service.create_coupon(data))


@router.patch("/{coupon_id}", response_model=CouponResponse)
async def update_coupon(
    coupon_id: int,
    data: CouponUpdate,
    _admin: Principal = Depends(require_admin),
    service: CouponService = Depends(get_coupon_service),
):
    return to_coupon_response(service.update_coupon(coupon_id, data))


@router.delete("/{coupon_id}")
async def delete_coupon(
    coupon_id: int,
    _admin: Principal = Depends(require_admin),
    service: CouponService = Depends(get_coupon_service),
):
    return service.delete_coupon(coupon_id)
