"""User model."""

import enum
import json
from typing import Iterable, List

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, func
from estate_backend.db.base import Base


class UserStatusEnum(str, enum.Enum):
    pending = "pending"
    active = "active"
    suspended = "suspended"
    inactive = "inactive"


class User(Base):
    """Marketplace account; ``role`` holds a role name, not a foreign key."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=True)
    status = Column(Enum(UserStatusEnum), default=UserStatusEnum.pending, nullable=False)
    role = Column(String(100), nullable=False, default="customer", index=True)
    role_permissions_json = Column(Text, nullable=True)  # legacy per-user permission grants
    last_login_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def role_permissions(self) -> List[str]:
        if not self.role_permissions_json:
            return []
        return json.loads(self.role_permissions_json)

    @role_permissions.setter
    def role_permissions(self, values: Iterable[str]) -> None:
        values = list(values or [])
        self.role_permissions_json = json.dumps(values) if values else None
