"""Role service — lifecycle of system and custom roles."""

import logging
from typing import Optional, Dict, Any, Iterable

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from estate_backend.core.exceptions import (
    DuplicateRoleError,
    RoleNotFoundError,
    SystemRoleProtectedError,
    ValidationError,
)
from estate_backend.core.permissions import (
    MAX_LEVEL, MIN_LEVEL, ROLE_PRESETS, STANDARD_ROLE_NAMES, SUPERADMIN,
)
from estate_backend.core.principal import Principal
from estate_backend.models.role import Role, normalize_role_name
from estate_backend.models.user import User

logger = logging.getLogger("estate_platform.roles")

UPDATABLE_FIELDS = ("description", "level", "permissions", "pages", "is_active")


def _check_level(level: int) -> None:
    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise ValidationError(f"Role level must be between {MIN_LEVEL} and {MAX_LEVEL}")


class RoleService:
    """Create, edit, toggle and delete roles.

    Callers are expected to have passed the route-level guards already; this
    class only enforces the domain rules around system roles and names.
    """

    @staticmethod
    def to_dict(role: Role, user_count: Optional[int] = None) -> Dict[str, Any]:
        data = {
            "id": role.id,
            "name": role.name,
            "description": role.description,
            "level": role.level,
            "permissions": role.permissions,
            "pages": role.pages,
            "is_system_role": role.is_system_role,
            "is_active": role.is_active,
            "created_at": role.created_at,
            "updated_at": role.updated_at,
        }
        if user_count is not None:
            data["user_count"] = user_count
        return data

    @staticmethod
    def get(db: Session, role_id: int) -> Role:
        """Get a role by id."""
        role = db.query(Role).filter(Role.id == role_id).first()
        if not role:
            raise RoleNotFoundError(f"Role {role_id} not found")
        return role

    @staticmethod
    def get_by_name(db: Session, name: str) -> Optional[Role]:
        return db.query(Role).filter(Role.name == normalize_role_name(name)).first()

    @staticmethod
    def count_users(db: Session, role_name: str) -> int:
        return db.query(User).filter(User.role == role_name).count()

    @staticmethod
    def create(
        db: Session,
        name: str,
        description: str = "",
        level: int = MIN_LEVEL,
        permissions: Optional[Iterable[str]] = None,
        pages: Optional[Iterable[str]] = None,
        is_active: bool = True,
    ) -> Role:
        """Create a custom role.

        Raises:
            DuplicateRoleError: A role with the normalized name exists or the
                name is one of the standard role names.
            ValidationError: Empty name or level outside 1-10.
        """
        normalized = normalize_role_name(name)
        if not normalized:
            raise ValidationError("Role name is required")
        _check_level(level)

        if normalized in STANDARD_ROLE_NAMES:
            raise DuplicateRoleError(f"Role name '{normalized}' is reserved")
        if RoleService.get_by_name(db, normalized):
            raise DuplicateRoleError(f"Role '{normalized}' already exists")

        role = Role(
            name=normalized,
            description=description or "",
            level=level,
            permissions=permissions or [],
            pages=pages or [],
            is_system_role=False,
            is_active=is_active,
        )
        db.add(role)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateRoleError(f"Role '{normalized}' already exists")
        db.refresh(role)
        logger.info("Created role '%s' (level %s)", role.name, role.level)
        return role

    @staticmethod
    def create_from_preset(
        db: Session,
        preset: str,
        name: str,
        description: Optional[str] = None,
    ) -> Role:
        """Create a custom role from one of ``ROLE_PRESETS``."""
        config = ROLE_PRESETS.get(preset)
        if config is None:
            raise ValidationError(
                f"Unknown preset '{preset}'. Available: {', '.join(sorted(ROLE_PRESETS))}"
            )
        return RoleService.create(
            db,
            name=name,
            description=description or config["description"],
            level=config["level"],
            permissions=config["permissions"],
            pages=[],
        )

    @staticmethod
    def list_roles(
        db: Session,
        page: int = 1,
        limit: int = 10,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """List roles, highest level first, with per-role user counts."""
        query = db.query(Role)
        if is_active is not None:
            query = query.filter(Role.is_active == is_active)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Role.name.ilike(pattern), Role.description.ilike(pattern)))

        total = query.count()
        roles = (
            query.order_by(Role.level.desc(), Role.created_at.desc(), Role.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        counts = dict(
            db.query(User.role, func.count(User.id))
            .filter(User.role.in_([r.name for r in roles]))
            .group_by(User.role)
            .all()
        ) if roles else {}

        total_pages = (total + limit - 1) // limit
        return {
            "roles": [RoleService.to_dict(r, counts.get(r.name, 0)) for r in roles],
            "pagination": {
                "current_page": page,
                "total_pages": total_pages,
                "total_roles": total,
                "has_next_page": page < total_pages,
                "has_prev_page": page > 1,
            },
        }

    @staticmethod
    def update(db: Session, role_id: int, actor: Principal, **patch) -> Role:
        """Apply a partial update.

        Raises:
            RoleNotFoundError: No role with this id.
            SystemRoleProtectedError: System role edited by a non-superadmin.
            ValidationError: Rename attempt, unknown field or bad level.
        """
        role = RoleService.get(db, role_id)

        if role.is_system_role and actor.role != SUPERADMIN:
            raise SystemRoleProtectedError("Only superadmin can modify system roles")

        if "name" in patch:
            raise ValidationError("Role names cannot be changed")
        unknown = set(patch) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown role fields: {', '.join(sorted(unknown))}")
        if patch.get("level") is not None:
            _check_level(patch["level"])

        for key, value in patch.items():
            if value is not None:
                setattr(role, key, value)
        db.commit()
        db.refresh(role)
        logger.info("Updated role '%s' by user %s", role.name, actor.id)
        return role

    @staticmethod
    def toggle_active(db: Session, role_id: int, actor: Principal) -> Role:
        """Flip ``is_active``; deactivating a system role needs superadmin."""
        role = RoleService.get(db, role_id)

        if role.is_system_role and role.is_active and actor.role != SUPERADMIN:
            raise SystemRoleProtectedError("Only superadmin can deactivate system roles")

        role.is_active = not role.is_active
        db.commit()
        db.refresh(role)
        logger.info(
            "Role '%s' is now %s", role.name, "active" if role.is_active else "inactive"
        )
        return role

    @staticmethod
    def delete(db: Session, role_id: int) -> int:
        """Delete a custom role AND every user account holding it.

        Users are removed before the role inside a single commit. Returns
        the number of deleted user accounts.

        Raises:
            RoleNotFoundError: No role with this id.
            SystemRoleProtectedError: Always, for system roles.
        """
        role = RoleService.get(db, role_id)
        if role.is_system_role:
            raise SystemRoleProtectedError("System roles cannot be deleted")

        role_name = role.name
        try:
            deleted_users = (
                db.query(User)
                .filter(User.role == role_name)
                .delete(synchronize_session=False)
            )
            db.delete(role)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.warning("Deleted role '%s' and %s user(s) holding it", role_name, deleted_users)
        return deleted_users


role_service = RoleService()
