"""Booking domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_iso_date, validate_phone


class BookingCreate(BaseModel):
    """
    Schema for booking a catalog service. Service name and cost are read from
    the catalog, never trusted from the client.
    """

    serviceId: int
    date: str
    time: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None
    userName: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return validate_iso_date(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_phone(v)
        return v


class BookingUpdate(BaseModel):
    """Schedule fields a booking owner may change; anything else in the body is ignored"""

    date: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_iso_date(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_phone(v)
        return v


class AssignRequest(BaseModel):
    decoratorIds: list[int]

    @field_validator("decoratorIds")
    @classmethod
    def validate_ids(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("At least one decorator is required")
        if len(set(v)) != len(v):
            raise ValueError("decoratorIds must not contain duplicates")
        return v


class BookingResponse(BaseModel):
    id: int
    userEmail: str
    userName: Optional[str]
    phone: Optional[str]
    serviceId: int
    service_name: str
    serviceCategory: Optional[str]
    date: str
    time: Optional[str]
    location: Optional[str]
    cost: float
    status: str
    paymentStatus: str
    decoratorIds: list[int]
    decoratorNames: list[str]
    decoratorEmails: list[str]
    createdAt: datetime
    updatedAt: Optional[datetime] = None
    assignedAt: Optional[datetime] = None
    planningAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None


class BookingPage(BaseModel):
    items: list[BookingResponse]
    count: int
    page: int
    size: int
