"""User router - FastAPI endpoints for user operations"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Principal, get_token_email, require_admin
from ...database import get_db
from ...models import User
from ...shared.pagination import PageParams, page_params, page_response
from .schemas import RegisterResponse, RoleResponse, RoleUpdate, UserPage, UserRegister, UserResponse
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        photoURL=user.photo_url,
        role=user.role,
        createdAt=user.created_at,
        lastLogin=user.last_login,
    )


@router.post("", response_model=RegisterResponse)
async def register_user(
    data: UserRegister,
    email: str = Depends(get_token_email),
    service: UserService = Depends(get_user_service),
):
    """Create the caller's user record, or refresh its last login"""
    user, created = service.register(email, data)
    return RegisterResponse(created=created, user=to_user_response(user))


@router.get("", response_model=UserPage)
async def get_users(
    search: Optional[str] = Query(None),
    role: Optional[Literal["client", "decorator", "admin"]] = Query(None),
    params: PageParams = Depends(page_params),
    admin: Principal = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """List every user except the calling admin"""
    users, count = service.list_users(admin.email, params, search=search, role=role)
    return page_response([to_user_response(u) for u in users], count, params)


@router.get("/role", response_model=RoleResponse)
async def get_user_role(
    email: str = Depends(get_token_email),
    service: UserService = Depends(get_user_service),
):
    return RoleResponse(role=service.get_role(email))


@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: int,
    data: RoleUpdate,
    _admin: Principal = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return to_user_response(service.update_role(user_id, data.role))
