"""Payment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class CheckoutRequest(BaseModel):
    """Schema for starting a hosted checkout for a booking"""

    bookingId: int
    couponCode: Optional[str] = None


class CheckoutResponse(BaseModel):
    url: str
    sessionId: str
    amount: float
    discount: float = 0.0


class ConfirmRequest(BaseModel):
    sessionId: str

    @field_validator("sessionId")
    @classmethod
    def validate_session_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("sessionId is required")
        return v.strip()


class PaymentResponse(BaseModel):
    id: int
    transactionId: str
    sessionId: Optional[str]
    bookingId: Optional[int]
    amount: float
    currency: str
    customer_email: Optional[str]
    serviceId: Optional[int]
    serviceName: Optional[str]
    couponCode: Optional[str]
    paymentStatus: str
    paidAt: datetime


class ConfirmResponse(BaseModel):
    replayed: bool
    payment: PaymentResponse


class PaymentPage(BaseModel):
    items: list[PaymentResponse]
    count: int
    page: int
    size: int
