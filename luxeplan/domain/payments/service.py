"""
Payment service - Checkout initiation and callback reconciliation

Reconciliation is idempotent per processor transaction: ``payments.transaction_id``
is unique, so a replayed or concurrent callback returns the stored record
instead of inserting a second one.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import Principal
from ...config import FRONTEND_URL, PAYMENT_CURRENCY
from ...errors import (
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    PaymentFailedError,
    ValidationError,
)
from ...models import Booking, Payment, utcnow
from ...shared.pagination import PageParams, paginate
from ..coupons.service import CouponService
from .dodo_service import CheckoutSession, DodoPaymentsService

logger = logging.getLogger(__name__)


def _int_or_none(value) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class PaymentService:
    """Service layer for booking payments"""

    def __init__(self, db: Session, gateway: DodoPaymentsService):
        self.db = db
        self.gateway = gateway

    def _get_transaction(self, transaction_id: str) -> Optional[Payment]:
        return self.db.query(Payment).filter(Payment.transaction_id == transaction_id).first()

    async def start_checkout(
        self, booking_id: int, principal: Principal, coupon_code: Optional[str] = None
    ) -> tuple[CheckoutSession, float, float]:
        """Returns (session, charged amount, discount)"""
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise NotFoundError("Booking not found")
        if booking.user_email != principal.email:
            raise ForbiddenError("Only the booking owner can pay for this booking", role=principal.role)
        if booking.payment_status == "paid":
            raise ConflictError("Booking is already paid")

        discount = 0.0
        code = None
        if coupon_code:
            coupon, discount = CouponService(self.db).validate(coupon_code, booking.cost)
            code = coupon.code
        amount = round(booking.cost - discount, 2)
        if amount <= 0:
            raise ValidationError("Nothing to charge for this booking")

        session = await self.gateway.create_session(
            line_item={"name": booking.service_name, "amount": amount},
            customer_email=booking.user_email,
            metadata={
                "bookingId": booking.id,
                "serviceId": booking.service_id,
                "serviceName": booking.service_name,
                "couponCode": code,
            },
            success_url=f"{FRONTEND_URL}/dashboard/payment-success?bookingId={booking.id}",
            cancel_url=f"{FRONTEND_URL}/dashboard/my-bookings",
        )
        return session, amount, discount

    async def reconcile(self, session_id: str) -> tuple[Payment, bool]:
        """
        Record a paid checkout session. Returns (payment, replayed).
        The booking update and the payment insert commit together.
        """
        status = await self.gateway.retrieve_session(session_id)

        if status.transaction_id:
            existing = self._get_transaction(status.transaction_id)
            if existing:
                logger.info(f"🔁 Payment callback replayed for transaction {status.transaction_id}")
                return existing, True

        if not status.is_paid or not status.transaction_id:
            logger.warning(f"⚠️ Checkout session {session_id} not paid (status={status.payment_status})")
            raise PaymentFailedError(paymentStatus=status.payment_status or "unpaid")

        metadata = status.metadata
        booking_id = _int_or_none(metadata.get("bookingId"))
        booking = None
        if booking_id is not None:
            booking = self.db.query(Booking).filter(Booking.id == booking_id).with_for_update().first()
        if booking is not None:
            booking.payment_status = "paid"
            booking.updated_at = utcnow()
        else:
            logger.warning(f"⚠️ Paid session {session_id} references unknown booking {booking_id}")

        customer_email = status.customer_email or (booking.user_email if booking else None)
        payment = Payment(
            transaction_id=status.transaction_id,
            session_id=session_id,
            booking_id=booking_id,
            amount=status.amount_total if status.amount_total is not None else (booking.cost if booking else 0.0),
            currency=(status.currency or PAYMENT_CURRENCY).upper(),
            customer_email=customer_email.lower() if customer_email else None,
            service_id=_int_or_none(metadata.get("serviceId")) or (booking.service_id if booking else None),
            service_name=metadata.get("serviceName") or (booking.service_name if booking else None),
            coupon_code=metadata.get("couponCode"),
            payment_status="paid",
            paid_at=utcnow(),
        )
        self.db.add(payment)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent callback stored this transaction first
            self.db.rollback()
            existing = self._get_transaction(status.transaction_id)
            if existing is None:
                logger.error(f"❌ Payment for transaction {status.transaction_id} could not be recorded")
                raise InternalError("Payment could not be recorded")
            logger.info(f"🔁 Payment for transaction {status.transaction_id} stored concurrently")
            return existing, True

        self.db.refresh(payment)
        logger.info(
            f"💰 Payment {payment.transaction_id} recorded: {payment.amount} {payment.currency} "
            f"for booking {booking_id}"
        )
        return payment, False

    def list_payments(self, params: PageParams, email: Optional[str] = None):
        query = self.db.query(Payment)
        if email:
            query = query.filter(Payment.customer_email == email)
        return paginate(query.order_by(Payment.paid_at.desc(), Payment.id.desc()), params)
