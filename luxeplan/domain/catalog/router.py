"""Catalog router - FastAPI endpoints for services"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Principal, require_admin
from ...database import get_db
from ...models import Service
from ...shared.pagination import PageParams, page_params, page_response
from .schemas import ServiceCreate, ServicePage, ServiceResponse, ServiceUpdate
from .service import CatalogService

router = APIRouter(prefix="/service", tags=["Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


def to_service_response(service: Service) -> ServiceResponse:
    return ServiceResponse(
        id=service.id,
        service_name=service.service_name,
        service_category=service.service_category,
        cost=service.cost,
        unit=service.unit,
        ratings=service.ratings,
        description=service.description,
        image=service.image,
        createdBy=service.created_by,
        createdAt=service.created_at,
    )


@router.get("", response_model=ServicePage)
async def list_services(
    search: Optional[str] = Query(None, description="Case-insensitive name search"),
    category: Optional[str] = Query(None),
    minCost: Optional[float] = Query(None, ge=0),
    maxCost: Optional[float] = Query(None, ge=0),
    sort: Optional[Literal["cost_asc", "cost_desc", "rating_desc", "newest"]] = Query(None),
    params: PageParams = Depends(page_params),
    service: CatalogService = Depends(get_catalog_service),
):
    items, count = service.list_services(params, search, category, minCost, maxCost, sort)
    return page_response([to_service_response(s) for s in items], count, params)


@router.get("/categories", response_model=list[str])
async def list_categories(service: CatalogService = Depends(get_catalog_service)):
    return service.categories()


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(service_id: int, service: CatalogService = Depends(get_catalog_service)):
    return to_service_response(service.get_service(service_id))


@router.post("", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    admin: Principal = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return to_service_response(service.create_service(data, admin.email))


@router.put("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    _admin: Principal = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return to_service_response(service.update_service(service_id, data))


@router.delete("/{service_id}")
async def delete_service(
    service_id: int,
    _admin: Principal = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.delete_service(service_id)
