"""Decorator router - FastAPI endpoints for decorator profiles"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import DecoratorPrincipal, Principal, get_token_email, require_admin, require_decorator
from ...database import get_db
from ...errors import NotFoundError
from ...models import Decorator
from ...shared.pagination import PageParams, page_params, page_response
from .schemas import DecoratorApply, DecoratorPage, DecoratorResponse, DecoratorStatusUpdate
from .service import DecoratorService

router = APIRouter(prefix="/decorators", tags=["Decorators"])


def get_decorator_service(db: Session = Depends(get_db)) -> DecoratorService:
    """Dependency injection for DecoratorService"""
    return DecoratorService(db)


def to_decorator_response(decorator: Decorator) -> DecoratorResponse:
    return DecoratorResponse(
        id=decorator.id,
        email=decorator.email,
        name=decorator.name,
        phone=decorator.phone,
        specialty=decorator.specialty,
        experience=decorator.experience,
        rating=decorator.rating,
        status=decorator.status,
        workStatus=decorator.work_status,
        createdAt=decorator.created_at,
        reviewedAt=decorator.reviewed_at,
    )


@router.post("", response_model=DecoratorResponse, status_code=201)
async def apply_as_decorator(
    data: DecoratorApply,
    email: str = Depends(get_token_email),
    service: DecoratorService = Depends(get_decorator_service),
):
    return to_decorator_response(service.apply(email, data))


@router.get("", response_model=DecoratorPage)
async def list_decorators(
    status: Optional[Literal["pending", "accepted", "rejected"]] = Query(None),
    workStatus: Optional[Literal["available", "assigned", "working"]] = Query(None),
    specialty: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    _admin: Principal = Depends(require_admin),
    service: DecoratorService = Depends(get_decorator_service),
):
    items, count = service.list_decorators(params, status, workStatus, specialty)
    return page_response([to_decorator_response(d) for d in items], count, params)


@router.get("/available", response_model=DecoratorPage)
async def list_available_decorators(
    specialty: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    _admin: Principal = Depends(require_admin),
    service: DecoratorService = Depends(get_decorator_service),
):
    """Accepted decorators that can take a new assignment"""
    items, count = service.list_available(params, specialty)
    return page_response([to_decorator_response(d) for d in items], count, params)


@router.get("/me", response_model=DecoratorResponse)
async def get_my_profile(decorator: DecoratorPrincipal = Depends(require_decorator)):
    if not decorator.profile:
        raise NotFoundError("Decorator profile not found")
    return to_decorator_response(decorator.profile)


@router.patch("/{decorator_id}/status", response_model=DecoratorResponse)
async def update_decorator_status(
    decorator_id: int,
    data: DecoratorStatusUpdate,
    _admin: Principal = Depends(require_admin),
    service: DecoratorService = Depends(get_decorator_service),
):
    return to_decorator_response(service.set_status(decorator_id, data.status))


@router.delete("/{decorator_id}")
async def delete_decorator(
    decorator_id: int,
    _admin: Principal = Depends(require_admin),
    service: DecoratorService = Depends(get_decorator_service),
):
    return service.delete_decorator(decorator_id)
