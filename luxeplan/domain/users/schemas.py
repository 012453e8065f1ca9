"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class UserRegister(BaseModel):
    """Profile details sent on sign-in; email and role never come from the body"""

    name: Optional[str] = None
    photoURL: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    photoURL: Optional[str] = None
    role: str
    createdAt: datetime
    lastLogin: datetime


class RegisterResponse(BaseModel):
    created: bool
    user: UserResponse


class RoleUpdate(BaseModel):
    role: Literal["client", "decorator", "admin"]


class RoleResponse(BaseModel):
    role: str


class UserPage(BaseModel):
    items: list[UserResponse]
    count: int
    page: int
    size: int
