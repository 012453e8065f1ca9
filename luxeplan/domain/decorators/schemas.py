"""Decorator domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_phone


class DecoratorApply(BaseModel):
    """Vendor application; the email comes from the verified token"""

    name: str
    phone: Optional[str] = None
    specialty: Optional[str] = None
    experience: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_phone(v)
        return v


class DecoratorStatusUpdate(BaseModel):
    status: Literal["accepted", "rejected"]


class DecoratorResponse(BaseModel):
    id: int
    email: str
    name: Optional[str]
    phone: Optional[str]
    specialty: Optional[str]
    experience: Optional[str]
    rating: float
    status: str
    workStatus: str
    createdAt: datetime
    reviewedAt: Optional[datetime] = None


class DecoratorPage(BaseModel):
    items: list[DecoratorResponse]
    count: int
    page: int
    size: int
