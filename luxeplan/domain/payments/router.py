"""Payment router - FastAPI endpoints for checkout and reconciliation"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Principal, get_principal, require_admin
from ...database import get_db
from ...models import Payment
from ...shared.pagination import PageParams, page_params, page_response
from .dodo_service import DodoPaymentsService, get_payment_gateway
from .schemas import (
    CheckoutRequest,
    CheckoutResponse,
    ConfirmRequest,
    ConfirmResponse,
    PaymentPage,
    PaymentResponse,
)
from .service import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])


def get_payment_service(
    db: Session = Depends(get_db),
    gateway: DodoPaymentsService = Depends(get_payment_gateway),
) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db, gateway)


def to_payment_response(payment: Payment) -> PaymentResponse:
    return PaymentResponse(
        id=payment.id,
        transactionId=payment.transaction_id,
        sessionId=payment.session_id,
        bookingId=payment.booking_id,
        amount=payment.amount,
        currency=payment.currency,
        customer_email=payment.customer_email,
        serviceId=payment.service_id,
        serviceName=payment.service_name,
        couponCode=payment.coupon_code,
        paymentStatus=payment.payment_status,
        paidAt=payment.paid_at,
    )


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout_session(
    body: CheckoutRequest,
    principal: Principal = Depends(get_principal),
    service: PaymentService = Depends(get_payment_service),
):
    """Create a hosted checkout session and return its redirect URL"""
    session, amount, discount = await service.start_checkout(body.bookingId, principal, body.couponCode)
    return CheckoutResponse(url=session.url, sessionId=session.session_id, amount=amount, discount=discount)


@router.post("/confirm", response_model=ConfirmResponse)
async def confirm_payment(
    body: ConfirmRequest,
    _principal: Principal = Depends(get_principal),
    service: PaymentService = Depends(get_payment_service),
):
    """Reconcile a checkout session after the processor redirects back"""
    payment, replayed = await service.reconcile(body.sessionId)
    return ConfirmResponse(replayed=replayed, payment=to_payment_response(payment))


@router.get("/mine", response_model=PaymentPage)
async def get_my_payments(
    params: PageParams = Depends(page_params),
    principal: Principal = Depends(get_principal),
    service: PaymentService = Depends(get_payment_service),
):
    items, count = service.list_payments(params, email=principal.email)
    return page_response([to_payment_response(p) for p in items], count, params)


@router.get("", response_model=PaymentPage)
async def list_payments(
    email: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    _admin: Principal = Depends(require_admin),
    service: PaymentService = Depends(get_payment_service),
):
    items, count = service.list_payments(params, email=email.lower() if email else None)
    return page_response([to_payment_response(p) for p in items], count, params)
