"""Models package — import all models so table creation can discover them."""

from estate_backend.models.role import Role
from estate_backend.models.user import User, UserStatusEnum
from estate_backend.models.audit_log import AuditEvent, AuditLog

__all__ = ["Role", "User", "UserStatusEnum", "AuditEvent", "AuditLog"]
