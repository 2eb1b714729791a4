"""Pydantic schemas for API request/response serialization."""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from estate_backend.models.audit_log import AuditEvent
from estate_backend.models.user import UserStatusEnum


# ---- Auth ----
class LoginRequest(BaseModel):
    email: str = Field(..., min_length=4)
    password: str = Field(..., min_length=4)

class LoginResponse(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    user: Dict[str, Any]
    pages: List[str] = []

class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=4)
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    role: str = "customer"
    agree_to_terms: bool = False

class PrincipalOut(BaseModel):
    id: int
    email: str
    role: str
    level: int
    is_admin_tier: bool
    permissions: List[str]
    pages: List[str]

class SessionOut(BaseModel):
    authenticated: bool
    id: Optional[int] = None
    email: Optional[str] = None
    role: Optional[str] = None
    level: Optional[int] = None
    pages: List[str] = []


# ---- User ----
class UserOut(BaseModel):
    id: int
    email: str
    full_name: str
    phone: Optional[str] = None
    role: str
    status: UserStatusEnum
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserCreateRequest(BaseModel):
    email: str = Field(..., min_length=4)
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    role: str = "customer"
    status: UserStatusEnum = UserStatusEnum.active
    role_permissions: Optional[List[str]] = None

class UserUpdateRequest(BaseModel):
    full_name: Optional[str] = None
    role: Optional[str] = None
    status: Optional[UserStatusEnum] = None
    role_permissions: Optional[List[str]] = None


# ---- Role ----
class RoleCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: str = ""
    level: int = Field(1, ge=1, le=10)
    permissions: List[str] = []
    pages: List[str] = []
    is_active: bool = True

class RolePresetCreate(BaseModel):
    preset: str
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = None

class RoleUpdate(BaseModel):
    description: Optional[str] = None
    level: Optional[int] = Field(None, ge=1, le=10)
    permissions: Optional[List[str]] = None
    pages: Optional[List[str]] = None
    is_active: Optional[bool] = None

class RoleOut(BaseModel):
    id: int
    name: str
    description: str
    level: int
    permissions: List[str]
    pages: List[str]
    is_system_role: bool
    is_active: bool
    user_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_roles: int
    has_next_page: bool
    has_prev_page: bool

class RoleListResponse(BaseModel):
    roles: List[RoleOut]
    pagination: Pagination

class RoleDeleteResponse(BaseModel):
    message: str
    deleted_users: int


# ---- Audit ----
class AuditLogOut(BaseModel):
    id: int
    actor_id: Optional[int] = None
    actor_email: Optional[str] = None
    event: AuditEvent
    role_name: Optional[str] = None
    target_user_id: Optional[int] = None
    reason: Optional[str] = None
    affected_users: Optional[int] = None
    changes: Dict[str, Any] = {}
    ip_address: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---- Generic ----
class MessageResponse(BaseModel):
    message: str
    detail: Optional[Any] = None
