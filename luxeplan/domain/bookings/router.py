"""Booking router - FastAPI endpoints for the booking workflow"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from ...auth import DecoratorPrincipal, Principal, get_principal, require_admin, require_decorator
from ...database import get_db
from ...models import Booking
from ...services.notification_service import (
    BOOKING_COMPLETED,
    BOOKING_CREATED,
    DECORATOR_ASSIGNED,
    SMSSender,
    booking_recipient,
    build_message,
    get_sms_sender,
    notify,
)
from ...shared.pagination import PageParams, page_params, page_response
from .schemas import AssignRequest, BookingCreate, BookingPage, BookingResponse, BookingUpdate
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])

BookingStatus = Literal["pending", "assigned", "planning", "completed"]


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


def to_booking_response(booking: Booking) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        userEmail=booking.user_email,
        userName=booking.user_name,
        phone=booking.phone,
        serviceId=booking.service_id,
        service_name=booking.service_name,
        serviceCategory=booking.service_category,
        date=booking.date,
        time=booking.time,
        location=booking.location,
        cost=booking.cost,
        status=booking.status,
        paymentStatus=booking.payment_status,
        decoratorIds=booking.decorator_ids,
        decoratorNames=booking.decorator_names,
        decoratorEmails=booking.decorator_emails,
        createdAt=booking.created_at,
        updatedAt=booking.updated_at,
        assignedAt=booking.assigned_at,
        planningAt=booking.planning_at,
        completedAt=booking.completed_at,
    )


def schedule_notification(
    background_tasks: BackgroundTasks, sender: SMSSender, event: str, booking: Booking
) -> None:
    """Queue an SMS that runs after the response; the message is rendered now while the row is loaded"""
    background_tasks.add_task(
        notify, sender, booking_recipient(booking), event, build_message(event, booking)
    )


# ============================================================================
# CLIENT ROUTES
# ============================================================================


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(get_principal),
    service: BookingService = Depends(get_booking_service),
    sender: SMSSender = Depends(get_sms_sender),
):
    booking = service.create_booking(principal.email, data)
    schedule_notification(background_tasks, sender, BOOKING_CREATED, booking)
    return to_booking_response(booking)


@router.get("/mine", response_model=BookingPage)
async def get_my_bookings(
    status: Optional[BookingStatus] = Query(None),
    params: PageParams = Depends(page_params),
    principal: Principal = Depends(get_principal),
    service: BookingService = Depends(get_booking_service),
):
    items, count = service.list_bookings(params, email=principal.email, status=status)
    return page_response([to_booking_response(b) for b in items], count, params)


# ============================================================================
# DECORATOR ROUTES
# ============================================================================


@router.get("/decorator/assigned", response_model=BookingPage)
async def get_assigned_bookings(
    status: Optional[BookingStatus] = Query(None),
    params: PageParams = Depends(page_params),
    decorator: DecoratorPrincipal = Depends(require_decorator),
    service: BookingService = Depends(get_booking_service),
):
    items, count = service.assigned_to(decorator.email, params, status)
    return page_response([to_booking_response(b) for b in items], count, params)


@router.get("/decorator/today", response_model=list[BookingResponse])
async def get_todays_schedule(
    decorator: DecoratorPrincipal = Depends(require_decorator),
    service: BookingService = Depends(get_booking_service),
):
    """Open assignments dated today"""
    return [to_booking_response(b) for b in service.todays_schedule(decorator.email)]


@router.patch("/{booking_id}/progress", response_model=BookingResponse)
async def start_planning(
    booking_id: int,
    background_tasks: BackgroundTasks,
    decorator: DecoratorPrincipal = Depends(require_decorator),
    service: BookingService = Depends(get_booking_service),
    sender: SMSSender = Depends(get_sms_sender),
):
    booking = service.start_planning(booking_id, decorator.email)
    schedule_notification(background_tasks, sender, DECORATOR_ASSIGNED, booking)
    return to_booking_response(booking)


@router.patch("/{booking_id}/complete", response_model=BookingResponse)
async def complete_booking(
    booking_id: int,
    background_tasks: BackgroundTasks,
    decorator: DecoratorPrincipal = Depends(require_decorator),
    service: BookingService = Depends(get_booking_service),
    sender: SMSSender = Depends(get_sms_sender),
):
    booking = service.complete(booking_id, decorator.email)
    schedule_notification(background_tasks, sender, BOOKING_COMPLETED, booking)
    return to_booking_response(booking)


# ============================================================================
# ADMIN ROUTES
# ============================================================================


@router.get("", response_model=BookingPage)
async def list_bookings(
    serviceId: Optional[int] = Query(None),
    date: Optional[str] = Query(None, description="ISO date prefix, e.g. 2026-10 or 2026-10-19"),
    email: Optional[str] = Query(None, description="Requester email"),
    decoratorEmail: Optional[str] = Query(None),
    status: Optional[BookingStatus] = Query(None),
    params: PageParams = Depends(page_params),
    _admin: Principal = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    items, count = service.list_bookings(
        params,
        service_id=serviceId,
        date=date,
        email=email.lower() if email else None,
        decorator_email=decoratorEmail.lower() if decoratorEmail else None,
        status=status,
    )
    return page_response([to_booking_response(b) for b in items], count, params)


@router.patch("/{booking_id}/assign", response_model=BookingResponse)
async def assign_decorators(
    booking_id: int,
    data: AssignRequest,
    _admin: Principal = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    return to_booking_response(service.assign(booking_id, data.decoratorIds))


# ============================================================================
# SHARED ROUTES
# ============================================================================


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    principal: Principal = Depends(get_principal),
    service: BookingService = Depends(get_booking_service),
):
    return to_booking_response(service.get_visible_booking(booking_id, principal))


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: int,
    data: BookingUpdate,
    principal: Principal = Depends(get_principal),
    service: BookingService = Depends(get_booking_service),
):
    return to_booking_response(service.update_booking(booking_id, data, principal))


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    principal: Principal = Depends(get_principal),
    service: BookingService = Depends(get_booking_service),
):
    return service.delete_booking(booking_id, principal)
