"""Audit service — typed recorders for login and role/user lifecycle events."""

import json
import logging
from typing import Optional, Dict, Any, Iterable

from fastapi import Request
from sqlalchemy.orm import Session

from estate_backend.core.principal import Principal
from estate_backend.models.audit_log import AuditEvent, AuditLog
from estate_backend.models.role import Role
from estate_backend.models.user import User

logger = logging.getLogger("estate_platform.audit")

ROLE_AUDIT_FIELDS = ("description", "level", "permissions", "pages", "is_active")
USER_AUDIT_FIELDS = ("full_name", "role", "status", "role_permissions")


def diff_fields(
    before: Dict[str, Any], after: Dict[str, Any], fields: Iterable[str]
) -> Dict[str, list]:
    """``{field: [old, new]}`` for every listed field whose value changed."""
    return {
        f: [before.get(f), after.get(f)]
        for f in fields
        if before.get(f) != after.get(f)
    }


def user_snapshot(user: User) -> Dict[str, Any]:
    return {
        "full_name": user.full_name,
        "role": user.role,
        "status": user.status.value if user.status else None,
        "role_permissions": sorted(user.role_permissions),
    }


class AuditService:
    """Writes the audit trail; every recorder commits immediately."""

    @staticmethod
    def _record(
        db: Session,
        request: Optional[Request],
        event: AuditEvent,
        actor: Optional[Principal] = None,
        actor_email: Optional[str] = None,
        changes: Optional[Dict[str, Any]] = None,
        **fields,
    ) -> AuditLog:
        actor_id = fields.pop("actor_id", None)
        entry = AuditLog(
            event=event,
            actor_id=actor.id if actor else actor_id,
            actor_email=actor.email if actor else actor_email,
            changes_json=json.dumps(changes, default=str) if changes else None,
            **fields,
        )
        if request is not None:
            entry.ip_address = request.client.host if request.client else None
            entry.user_agent = request.headers.get("user-agent", "")[:500]
        db.add(entry)
        db.commit()
        return entry

    # ---- Authentication ----

    @staticmethod
    def login(db: Session, request: Optional[Request], user_id: int, email: str, role_name: str) -> AuditLog:
        return AuditService._record(
            db, request, AuditEvent.login,
            actor_id=user_id, actor_email=email, role_name=role_name,
        )

    @staticmethod
    def login_rejected(db: Session, request: Optional[Request], email: str, reason: str) -> AuditLog:
        """Record a refused login under the address that was tried."""
        logger.info("Login rejected for %s: %s", email, reason)
        return AuditService._record(
            db, request, AuditEvent.login_rejected,
            actor_email=email.strip().lower(), reason=reason,
        )

    # ---- Roles ----

    @staticmethod
    def role_created(db: Session, request: Optional[Request], actor: Principal, role: Role) -> AuditLog:
        after = {f: getattr(role, f) for f in ROLE_AUDIT_FIELDS}
        return AuditService._record(
            db, request, AuditEvent.role_created, actor,
            role_name=role.name,
            changes=diff_fields({}, after, ROLE_AUDIT_FIELDS),
        )

    @staticmethod
    def role_updated(
        db: Session,
        request: Optional[Request],
        actor: Principal,
        role: Role,
        before: Dict[str, Any],
    ) -> AuditLog:
        """Record a role edit; ``before`` is the role as it was prior to the patch."""
        after = {f: getattr(role, f) for f in ROLE_AUDIT_FIELDS}
        return AuditService._record(
            db, request, AuditEvent.role_updated, actor,
            role_name=role.name,
            changes=diff_fields(before, after, ROLE_AUDIT_FIELDS),
        )

    @staticmethod
    def role_toggled(db: Session, request: Optional[Request], actor: Principal, role: Role) -> AuditLog:
        event = AuditEvent.role_activated if role.is_active else AuditEvent.role_deactivated
        return AuditService._record(
            db, request, event, actor,
            role_name=role.name,
            changes={"is_active": [not role.is_active, role.is_active]},
        )

    @staticmethod
    def role_deleted(
        db: Session,
        request: Optional[Request],
        actor: Principal,
        role_name: str,
        deleted_users: int,
    ) -> AuditLog:
        return AuditService._record(
            db, request, AuditEvent.role_deleted, actor,
            role_name=role_name, affected_users=deleted_users,
        )

    # ---- Users ----

    @staticmethod
    def user_changed(
        db: Session,
        request: Optional[Request],
        actor: Principal,
        event: AuditEvent,
        user: User,
        before: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        """Record a user create or update; ``before`` is a ``user_snapshot``."""
        return AuditService._record(
            db, request, event, actor,
            role_name=user.role,
            target_user_id=user.id,
            changes=diff_fields(before or {}, user_snapshot(user), USER_AUDIT_FIELDS),
        )

    @staticmethod
    def user_deleted(
        db: Session,
        request: Optional[Request],
        actor: Principal,
        user_id: int,
        role_name: str,
    ) -> AuditLog:
        return AuditService._record(
            db, request, AuditEvent.user_deleted, actor,
            role_name=role_name, target_user_id=user_id,
        )

    # ---- Query ----

    @staticmethod
    def query_logs(
        db: Session,
        event: Optional[AuditEvent] = None,
        actor_id: Optional[int] = None,
        role_name: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> Dict[str, Any]:
        """Newest entries first, optionally filtered by event, actor or role."""
        query = db.query(AuditLog)
        if event is not None:
            query = query.filter(AuditLog.event == event)
        if actor_id is not None:
            query = query.filter(AuditLog.actor_id == actor_id)
        if role_name:
            query = query.filter(AuditLog.role_name == role_name.strip().lower())

        total = query.count()
        logs = (
            query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return {"logs": logs, "total": total, "page": page}


audit_service = AuditService()
