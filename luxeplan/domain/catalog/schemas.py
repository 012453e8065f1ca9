"""Catalog domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class ServiceCreate(BaseModel):
    """Schema for creating a catalog service"""

    service_name: str
    service_category: Optional[str] = None
    cost: float
    unit: Optional[str] = None
    ratings: float = 0.0
    description: Optional[str] = None
    image: Optional[str] = None

    @field_validator("service_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("service_name is required")
        return v.strip()

    @field_validator("cost")
    @classmethod
    def validate_cost(cls, v: float) -> float:
        if v < 0:
            raise ValueError("cost must not be negative")
        return v

    @field_validator("ratings")
    @classmethod
    def validate_ratings(cls, v: float) -> float:
        if v < 0 or v > 5:
            raise ValueError("ratings must be between 0 and 5")
        return v


class ServiceUpdate(BaseModel):
    """Schema for updating a catalog service; omitted fields are left untouched"""

    service_name: Optional[str] = None
    service_category: Optional[str] = None
    cost: Optional[float] = None
    unit: Optional[str] = None
    ratings: Optional[float] = None
    description: Optional[str] = None
    image: Optional[str] = None

    @field_validator("cost")
    @classmethod
    def validate_cost(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("cost must not be negative")
        return v


class ServiceResponse(BaseModel):
    id: int
    service_name: str
    service_category: Optional[str]
    cost: float
    unit: Optional[str]
    ratings: float
    description: Optional[str]
    image: Optional[str]
    createdBy: Optional[str] = None
    createdAt: datetime


class ServicePage(BaseModel):
    items: list[ServiceResponse]
    count: int
    page: int
    size: int
