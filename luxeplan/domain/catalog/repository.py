"""Catalog repository - Database operations for services"""

from typing import Optional

from sqlalchemy.orm import Query, Session

from ...models import Service

SORT_ORDERS = {
    "cost_asc": (Service.cost.asc(), Service.id.asc()),
    "cost_desc": (Service.cost.desc(), Service.id.asc()),
    "rating_desc": (Service.ratings.desc(), Service.id.asc()),
    "newest": (Service.created_at.desc(), Service.id.desc()),
}


class ServiceRepository:
    """Repository for catalog database operations"""

    @staticmethod
    def get_by_id(db: Session, service_id: int) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def search(
        db: Session,
        search: Optional[str] = None,
        category: Optional[str] = None,
        min_cost: Optional[float] = None,
        max_cost: Optional[float] = None,
        sort: Optional[str] = None,
    ) -> Query:
        query = db.query(Service)

        if search:
            query = query.filter(Service.service_name.ilike(f"%{search.lower()}%"))
        if category:
            query = query.filter(Service.service_category == category)
        if min_cost is not None:
            query = query.filter(Service.cost >= min_cost)
        if max_cost is not None:
            query = query.filter(Service.cost <= max_cost)

        return query.order_by(*SORT_ORDERS.get(sort or "newest", SORT_ORDERS["newest"]))

    @staticmethod
    def categories(db: Session) -> list[str]:
        rows = (
            db.query(Service.service_category)
            .filter(Service.service_category.isnot(None))
            .distinct()
            .order_by(Service.service_category)
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def create(db: Session, **service_data) -> Service:
        service = Service(**service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            if value is not None and hasattr(service, key):
                setattr(service, key, value)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete(db: Session, service: Service) -> None:
        db.delete(service)
        db.commit()
