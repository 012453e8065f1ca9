"""Coupon domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import to_naive_utc


def _normalize_code(v: str) -> str:
    v = (v or "").strip().upper()
    if not v:
        raise ValueError("code is required")
    return v


class CouponCreate(BaseModel):
    code: str
    discountType: Literal["percent", "fixed"]
    amount: float
    expiryDate: datetime
    isActive: bool = True

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        return _normalize_code(v)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("amount must be greater than 0")
        return v

    @field_validator("expiryDate")
    @classmethod
    def validate_expiry(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class CouponUpdate(BaseModel):
    discountType: Optional[Literal["percent", "fixed"]] = None
    amount: Optional[float] = None
    expiryDate: Optional[datetime] = None
    isActive: Optional[bool] = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("amount must be greater than 0")
        return v

    @field_validator("expiryDate")
    @classmethod
    def validate_expiry(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v) if v else v


class CouponValidateRequest(BaseModel):
    code: str
    cost: float

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        return _normalize_code(v)

    @field_validator("cost")
    @classmethod
    def validate_cost(cls, v: float) -> float:
        if v < 0:
            raise ValueError("cost must not be negative")
        return v


class CouponResponse(BaseModel):
    id: int
    code: str
    discountType: str
    amount: float
    expiryDate: datetime
    isActive: bool
    createdAt: datetime


class DiscountResponse(BaseModel):
    code: str
    discountType: str
    amount: float
    discount: float
    finalCost: float
