"""Role model for RBAC."""

import json
from typing import Iterable, List

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, func
from estate_backend.db.base import Base


def normalize_role_name(name: str) -> str:
    """Roles are keyed by a trimmed, lower-cased name."""
    return name.strip().lower()


def _unique(values: Iterable[str]) -> List[str]:
    seen = []
    for value in values or []:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


class Role(Base):
    """Named role with a 1-10 privilege level, permissions and visible pages.

    Users reference a role by ``name``, not by id, so the name is effectively
    immutable once users hold it.
    """
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(String(500), nullable=False, default="")
    level = Column(Integer, nullable=False, default=1)
    permissions_json = Column(Text, nullable=False, default="[]")  # JSON list of permission strings
    pages_json = Column(Text, nullable=False, default="[]")  # JSON list of UI page ids
    is_system_role = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def permissions(self) -> List[str]:
        return json.loads(self.permissions_json or "[]")

    @permissions.setter
    def permissions(self, values: Iterable[str]) -> None:
        self.permissions_json = json.dumps(_unique(values))

    @property
    def pages(self) -> List[str]:
        return json.loads(self.pages_json or "[]")

    @pages.setter
    def pages(self, values: Iterable[str]) -> None:
        self.pages_json = json.dumps(_unique(values))

    def __repr__(self) -> str:
        return f"<Role {self.name} (level={self.level})>"
