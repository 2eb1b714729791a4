"""Audit log model — append-only trail of logins and role/user changes."""

import enum
import json
from typing import Any, Dict

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, func
from estate_backend.db.base import Base


class AuditEvent(str, enum.Enum):
    login = "user.login"
    login_rejected = "user.login_rejected"
    user_created = "user.created"
    user_updated = "user.updated"
    user_deleted = "user.deleted"
    role_created = "role.created"
    role_updated = "role.updated"
    role_activated = "role.activated"
    role_deactivated = "role.deactivated"
    role_deleted = "role.deleted"


class AuditLog(Base):
    """One row per security-relevant event. Rows are never updated or deleted.

    ``actor_id`` and ``target_user_id`` are plain columns: a role cascade may
    remove the accounts they point at, and the trail has to outlive them.
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event = Column(
        Enum(AuditEvent, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    actor_id = Column(Integer, nullable=True, index=True)
    actor_email = Column(String(255), nullable=True)
    role_name = Column(String(100), nullable=True, index=True)
    target_user_id = Column(Integer, nullable=True)
    reason = Column(String(50), nullable=True)  # login rejection code
    affected_users = Column(Integer, nullable=True)  # accounts removed by a role cascade
    changes_json = Column(Text, nullable=True)  # {"field": [old, new]}
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)

    @property
    def changes(self) -> Dict[str, Any]:
        return json.loads(self.changes_json) if self.changes_json else {}
