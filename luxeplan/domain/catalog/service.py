"""Catalog service - Business logic for bookable services"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import NotFoundError
from ...models import Service
from ...shared.pagination import PageParams, paginate
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for catalog operations"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def list_services(
        self,
        params: PageParams,
        search: Optional[str] = None,
        category: Optional[str] = None,
        min_cost: Optional[float] = None,
        max_cost: Optional[float] = None,
        sort: Optional[str] = None,
    ):
        query = self.repo.search(self.db, search, category, min_cost, max_cost, sort)
        return paginate(query, params)

    def get_service(self, service_id: int) -> Service:
        service = self.repo.get_by_id(self.db, service_id)
        if not service:
            raise NotFoundError("Service not found")
        return service

    def categories(self) -> list[str]:
        return self.repo.categories(self.db)

    def create_service(self, data: ServiceCreate, created_by: str) -> Service:
        service = self.repo.create(self.db, created_by=created_by, **data.model_dump())
        logger.info(f"📦 Service created: {service.service_name} (id={service.id}) by {created_by}")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate) -> Service:
        service = self.get_service(service_id)
        return self.repo.update(self.db, service, **data.model_dump(exclude_unset=True))

    def delete_service(self, service_id: int) -> dict:
        service = self.get_service(service_id)
        self.repo.delete(self.db, service)
        logger.info(f"🗑️ Service deleted: id={service_id}")
        return {"message": "Service deleted"}
