import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from luxeplan.domain.payments.dodo_service import SessionStatus, normalize_dodo_environment
from luxeplan.models import Booking
from luxeplan.services.notification_service import (
    BOOKING_COMPLETED,
    BOOKING_CREATED,
    SMSSender,
    booking_recipient,
    build_message,
    notify,
)
from luxeplan.shared.validators import to_naive_utc, validate_iso_date, validate_phone


class BrokenSender:
    async def send(self, recipient, message):
        raise TimeoutError("provider timed out")


def test_validate_phone():
    assert validate_phone("(555) 123-4567") == "+15551234567"
    assert validate_phone("+880 1712-345678") == "+8801712345678"
    with pytest.raises(ValueError):
        validate_phone("12345")


@pytest.mark.parametrize("value", ["2026-10-19", "2026-10-19T18:30:00", "2026-10-19T18:30:00Z"])
def test_validate_iso_date_accepts(value):
    assert validate_iso_date(value) == value


@pytest.mark.parametrize("value", ["2026-1-9", "19-10-2026", "2026-02-30", "tomorrow"])
def test_validate_iso_date_rejects(value):
    with pytest.raises(ValueError):
        validate_iso_date(value)


def test_to_naive_utc():
    aware = datetime(2026, 10, 19, 12, 0, tzinfo=timezone(timedelta(hours=6)))
    assert to_naive_utc(aware) == datetime(2026, 10, 19, 6, 0)


def test_normalize_dodo_environment():
    assert normalize_dodo_environment("production") == "live_mode"
    assert normalize_dodo_environment("sandbox") == "test_mode"
    assert normalize_dodo_environment(None) == "test_mode"
    assert normalize_dodo_environment("weird") == "test_mode"


def test_session_status_paid_flag():
    assert SessionStatus("cs_1", "pay_1", "Succeeded").is_paid
    assert not SessionStatus("cs_1", None, "processing").is_paid


def test_unconfigured_sender_logs_instead_of_sending(caplog):
    sender = SMSSender(account_sid=None, auth_token=None, from_number=None)
    with caplog.at_level("INFO"):
        assert asyncio.run(sender.send("+15551234567", "hello")) is True
    assert "[SMS MOCK]" in caplog.text


def test_notify_swallows_delivery_errors(caplog):
    assert asyncio.run(notify(BrokenSender(), "+15551234567", BOOKING_CREATED, "hello")) is False
    assert "Failed to send booking_created notification" in caplog.text


def test_messages_and_recipient():
    booking = Booking(service_name="Wedding Stage", date="2026-10-19", user_email="jane@luxeplan.test")
    assert "Wedding Stage" in build_message(BOOKING_CREATED, booking)
    assert "completed" in build_message(BOOKING_COMPLETED, booking)
    assert booking_recipient(booking) == "jane@luxeplan.test"
    booking.phone = "+15551234567"
    assert booking_recipient(booking) == "+15551234567"
