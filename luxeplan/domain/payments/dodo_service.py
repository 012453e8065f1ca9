"""Dodo Payments service - Hosted checkout for booking payments"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from dodopayments import AsyncDodoPayments  # type: ignore

from ...config import (
    DODO_ADHOC_PRODUCT_ID,
    DODO_PAYMENTS_API_KEY,
    DODO_PAYMENTS_ENVIRONMENT,
    OUTBOUND_TIMEOUT_SECONDS,
)
from ...errors import UpstreamError

logger = logging.getLogger(__name__)

PAID_STATUSES = {"succeeded", "paid"}


def normalize_dodo_environment(env: Optional[str]) -> str:
    """Normalize Dodo environment value to expected format"""
    value = (env or "test_mode").strip().lower()
    if value in {"live", "production", "prod"}:
        return "live_mode"
    if value in {"test", "sandbox", "staging", "dev", "development"}:
        return "test_mode"
    if value in {"test_mode", "live_mode"}:
        return value
    logger.warning(f"Unknown DODO environment '{env}', defaulting to test_mode")
    return "test_mode"


def _field(obj: Any, name: str, default=None):
    """Read a field from an SDK model or a plain dict"""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


@dataclass
class CheckoutSession:
    session_id: str
    url: str


@dataclass
class SessionStatus:
    session_id: str
    transaction_id: Optional[str]
    payment_status: Optional[str]
    amount_total: Optional[float] = None  # major currency units
    currency: Optional[str] = None
    customer_email: Optional[str] = None
    metadata: dict = field(default_factory=dict)

    @property
    def is_paid(self) -> bool:
        return (self.payment_status or "").lower() in PAID_STATUSES


class DodoPaymentsService:
    """Service for Dodo Payments API operations"""

    def __init__(self, timeout: float = OUTBOUND_TIMEOUT_SECONDS):
        self.api_key = DODO_PAYMENTS_API_KEY
        self.environment = normalize_dodo_environment(DODO_PAYMENTS_ENVIRONMENT)
        self.product_id = DODO_ADHOC_PRODUCT_ID
        self.timeout = timeout
        self.client = None

        if not self.api_key:
            logger.warning("DODO_PAYMENTS_API_KEY not set; payment endpoints will fail until configured")
        else:
            try:
                self.client = AsyncDodoPayments(
                    bearer_token=self.api_key,
                    environment=self.environment,
                )
                logger.info(f"Dodo Payments client initialized (env={self.environment})")
            except Exception as e:
                logger.error(f"Failed to initialize Dodo client (env={self.environment}): {e}")
                self.client = None

    def is_available(self) -> bool:
        """Check if Dodo Payments client is available"""
        return self.client is not None and bool(self.product_id)

    async def _call(self, description: str, awaitable):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"⏰ Dodo Payments timed out during {description}")
            raise UpstreamError("Payment processor timed out") from e
        except Exception as e:
            logger.error(f"Failed to {description}: {e}")
            raise UpstreamError("Payment processor error") from e

    async def create_session(
        self,
        line_item: dict,
        customer_email: str,
        metadata: dict,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        """
        Create a hosted checkout for a single line item
        (``{"name": str, "amount": float}`` in major units).

        Dodo redirects to ``success_url`` with the outcome in the query string,
        so ``cancel_url`` is only recorded in the session metadata.
        """
        if not self.is_available():
            raise UpstreamError("Payment processor not configured")

        amount_cents = int(round(line_item["amount"] * 100))
        response = await self._call(
            "create checkout session",
            self.client.checkout_sessions.create(
                product_cart=[{"product_id": self.product_id, "quantity": 1, "amount": amount_cents}],
                customer={"email": customer_email},
                return_url=success_url,
                metadata={
                    **{k: str(v) for k, v in metadata.items() if v is not None},
                    "item_name": line_item["name"],
                    "cancel_url": cancel_url,
                },
            ),
        )
        session_id = _field(response, "session_id")
        url = _field(response, "checkout_url")
        if not session_id or not url:
            raise UpstreamError("Payment processor returned an incomplete session")
        logger.info(f"💳 Checkout session {session_id} created for {customer_email} ({amount_cents} cents)")
        return CheckoutSession(session_id=session_id, url=url)

    async def retrieve_session(self, session_id: str) -> SessionStatus:
        if not self.client:
            raise UpstreamError("Payment processor not configured")

        session = await self._call(
            f"retrieve checkout session {session_id}",
            self.client.checkout_sessions.retrieve(session_id),
        )
        payment_id = _field(session, "payment_id")
        status = SessionStatus(
            session_id=session_id,
            transaction_id=payment_id,
            payment_status=_field(session, "payment_status"),
            customer_email=_field(session, "customer_email"),
        )
        if not payment_id:
            return status

        payment = await self._call(
            f"retrieve payment {payment_id}",
            self.client.payments.retrieve(payment_id),
        )
        total = _field(payment, "total_amount")
        status.payment_status = _field(payment, "status", status.payment_status)
        status.amount_total = total / 100 if total is not None else None
        status.currency = _field(payment, "currency")
        status.customer_email = _field(_field(payment, "customer"), "email", status.customer_email)
        status.metadata = dict(_field(payment, "metadata") or {})
        return status


_gateway: Optional[DodoPaymentsService] = None


def get_payment_gateway() -> DodoPaymentsService:
    global _gateway
    if _gateway is None:
        _gateway = DodoPaymentsService()
    return _gateway
