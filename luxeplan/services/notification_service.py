"""
SMS Notification Service
Sends best-effort booking notifications. Delivery failures are logged and
never reach the caller.
"""

import logging
from typing import Optional

import httpx

from ..config import (
    OUTBOUND_TIMEOUT_SECONDS,
    TWILIO_ACCOUNT_SID,
    TWILIO_AUTH_TOKEN,
    TWILIO_FROM_NUMBER,
)
from ..models import Booking

logger = logging.getLogger(__name__)

BOOKING_CREATED = "booking_created"
DECORATOR_ASSIGNED = "decorator_assigned"
BOOKING_COMPLETED = "booking_completed"


class SMSSender:
    """Twilio-backed sender; logs a mock delivery when Twilio is not configured"""

    def __init__(
        self,
        account_sid: Optional[str] = TWILIO_ACCOUNT_SID,
        auth_token: Optional[str] = TWILIO_AUTH_TOKEN,
        from_number: Optional[str] = TWILIO_FROM_NUMBER,
        timeout: float = OUTBOUND_TIMEOUT_SECONDS,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    async def send(self, recipient: str, message: str) -> bool:
        if not self.is_configured or not recipient.startswith("+"):
            logger.info(f"[SMS MOCK] To: {recipient}")
            logger.info(f"[SMS MOCK] Body: {message}")
            return True

        logger.info(f"🚀 Sending SMS to Twilio API for {recipient}")
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"https://api.twilio.com/2010-04-01/Accounts/{self.account_sid}/Messages.json",
                auth=(self.account_sid, self.auth_token),
                data={"To": recipient, "From": self.from_number, "Body": message},
            )
        if response.status_code not in (200, 201):
            raise RuntimeError(f"Twilio API error {response.status_code}: {response.text[:200]}")
        logger.info(f"✅ SMS accepted by Twilio: sid={response.json().get('sid')}")
        return True


_sender: Optional[SMSSender] = None


def get_sms_sender() -> SMSSender:
    global _sender
    if _sender is None:
        _sender = SMSSender()
    return _sender


def build_message(event: str, booking: Booking) -> str:
    if event == BOOKING_CREATED:
        return (
            f"Your booking for {booking.service_name} on {booking.date} is received. "
            "We will assign a decorator soon."
        )
    if event == DECORATOR_ASSIGNED:
        names = ", ".join(n for n in booking.decorator_names if n) or "our team"
        return f"{names} will decorate your {booking.service_name} event on {booking.date}."
    if event == BOOKING_COMPLETED:
        return f"Your {booking.service_name} booking is completed. Thank you for choosing LuxePlan!"
    return f"Update on your {booking.service_name} booking: {booking.status}."


async def notify(sender: SMSSender, recipient: str, event: str, message: str) -> bool:
    """
    Fire-and-forget entry point, meant to run as a background task after the
    booking write has committed.
    """
    try:
        await sender.send(recipient, message)
        logger.info(f"✅ {event} notification sent to {recipient}")
        return True
    except Exception as e:
        logger.error(f"❌ Failed to send {event} notification to {recipient}: {e}")
        return False


def booking_recipient(booking: Booking) -> str:
    return booking.phone or booking.user_email
