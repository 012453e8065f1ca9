"""Dashboard router - Aggregates for the admin and decorator dashboards"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import DecoratorPrincipal, Principal, require_admin, require_decorator
from ...database import get_db
from ..bookings.service import BookingService
from ..users.repository import UserRepository
from .repository import DashboardRepository

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/admin")
async def get_admin_summary(
    _admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    repo = DashboardRepository()
    revenue, payment_count = repo.paid_revenue(db)
    earnings = repo.decorator_earnings(db)
    return {
        "usersByRole": UserRepository.count_by_role(db),
        "bookingsByStatus": repo.bookings_by_status(db),
        "revenue": revenue,
        "paymentCount": payment_count,
        "serviceDemand": repo.service_demand(db),
        "decoratorEarnings": [
            {"decoratorEmail": email, "earnings": total}
            for email, total in sorted(earnings.items(), key=lambda item: item[1], reverse=True)
        ],
    }


@router.get("/revenue")
async def get_revenue_by_month(
    _admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return DashboardRepository.revenue_by_month(db)


@router.get("/decorator")
async def get_decorator_summary(
    decorator: DecoratorPrincipal = Depends(require_decorator),
    db: Session = Depends(get_db),
):
    repo = DashboardRepository()
    by_status = repo.bookings_by_status(db, decorator_email=decorator.email)
    today = BookingService(db).todays_schedule(decorator.email)
    return {
        "todayCount": len(today),
        "assignedCount": by_status.get("assigned", 0) + by_status.get("planning", 0),
        "completedCount": by_status.get("completed", 0),
        "earnings": repo.decorator_earnings(db, decorator_email=decorator.email).get(decorator.email, 0.0),
        "workStatus": decorator.profile.work_status if decorator.profile else None,
    }
