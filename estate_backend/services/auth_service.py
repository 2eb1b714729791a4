"""Auth service — login with role validation, registration, user management."""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Iterable

from sqlalchemy.orm import Session

from estate_backend.models.user import User, UserStatusEnum
from estate_backend.models.role import Role, normalize_role_name
from estate_backend.core.permissions import AGENT, CUSTOMER, SUPERADMIN
from estate_backend.core.principal import Principal
from estate_backend.core.security import hash_password, verify_password, issue_token
from estate_backend.core.exceptions import (
    AuthorizationError,
    LoginRejectedError,
    ResourceConflictError,
    ResourceNotFoundError,
    RoleNotFoundError,
    ValidationError,
)

logger = logging.getLogger("estate_platform.auth")

SELF_SERVICE_ROLES = (CUSTOMER, AGENT)

_STATUS_REJECTIONS = {
    UserStatusEnum.suspended: ("account_suspended", "Account has been suspended. Please contact support."),
    UserStatusEnum.pending: ("account_pending", "Please verify your email before signing in."),
    UserStatusEnum.inactive: ("account_inactive", "Account is not active"),
}


class AuthService:
    """Handles authentication and user management."""

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> Dict[str, Any]:
        """Check credentials and the user's role, then issue a token.

        The role must exist and be active. Requests made with already-issued
        tokens never repeat this check.

        Raises:
            LoginRejectedError: with ``reason`` one of invalid_credentials,
                account_suspended, account_pending, account_inactive,
                role_deleted, role_inactive.
        """
        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if not user or not verify_password(password, user.hashed_password):
            raise LoginRejectedError("Invalid email or password", reason="invalid_credentials")

        rejection = _STATUS_REJECTIONS.get(user.status)
        if rejection:
            reason, message = rejection
            raise LoginRejectedError(message, reason=reason)

        role = db.query(Role).filter(Role.name == user.role).first()
        if role is None:
            logger.warning("Login refused for user %s: role '%s' no longer exists", user.id, user.role)
            raise LoginRejectedError(
                "Your role has been removed. Please contact an administrator.",
                reason="role_deleted",
            )
        if not role.is_active:
            logger.info("Login refused for user %s: role '%s' is inactive", user.id, user.role)
            raise LoginRejectedError(
                "Your role has been deactivated. Please contact an administrator.",
                reason="role_inactive",
            )

        token = issue_token(user.id, {"email": user.email})

        user.last_login_at = datetime.now(timezone.utc)
        db.commit()

        return {
            "success": True,
            "access_token": token,
            "token_type": "bearer",
            "user": {
                "id": user.id,
                "email": user.email,
                "full_name": user.full_name,
                "role": user.role,
                "level": role.level,
            },
            "pages": role.pages,
        }

    @staticmethod
    def create_user(
        db: Session,
        email: str,
        password: str,
        full_name: str,
        role_name: str = CUSTOMER,
        status: UserStatusEnum = UserStatusEnum.active,
        phone: Optional[str] = None,
        role_permissions: Optional[Iterable[str]] = None,
    ) -> User:
        """Create a new user holding an existing role."""
        email = email.strip().lower()
        existing = db.query(User).filter(User.email == email).first()
        if existing:
            raise ResourceConflictError(f"User with email {email} already exists")

        role_name = normalize_role_name(role_name)
        role = db.query(Role).filter(Role.name == role_name).first()
        if not role:
            raise RoleNotFoundError(f"Role '{role_name}' not found")

        user = User(
            email=email,
            hashed_password=hash_password(password),
            full_name=full_name,
            phone=phone,
            role=role.name,
            status=status,
        )
        user.role_permissions = role_permissions or []
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def register(
        db: Session,
        email: str,
        password: str,
        full_name: str,
        role_name: str = CUSTOMER,
        phone: Optional[str] = None,
    ) -> User:
        """Public sign-up; only end-user roles, account starts ``pending``."""
        if normalize_role_name(role_name) not in SELF_SERVICE_ROLES:
            raise ValidationError("Registration is only open to customer and agent accounts")
        return AuthService.create_user(
            db, email, password, full_name, role_name,
            status=UserStatusEnum.pending, phone=phone,
        )

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        """Get a user by id."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError(f"User {user_id} not found")
        return user

    @staticmethod
    def list_users(
        db: Session,
        page: int = 1,
        page_size: int = 20,
        role: Optional[str] = None,
        status: Optional[UserStatusEnum] = None,
    ):
        """List users with optional role/status filters."""
        query = db.query(User)
        if role:
            query = query.filter(User.role == normalize_role_name(role))
        if status:
            query = query.filter(User.status == status)
        total = query.count()
        users = (
            query.order_by(User.created_at.desc(), User.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return {"users": users, "total": total, "page": page}

    @staticmethod
    def _check_superadmin_target(user: User, actor: Principal) -> None:
        if user.role == SUPERADMIN and actor.role != SUPERADMIN:
            raise AuthorizationError("Only superadmin can modify a superadmin account")

    @staticmethod
    def check_grant(
        db: Session,
        actor: Principal,
        role_name: Optional[str] = None,
        role_permissions: Optional[Iterable[str]] = None,
    ) -> Optional[Role]:
        """Refuse role or permission grants above what ``actor`` holds.

        Outside superadmin, the granted role must sit strictly below the
        actor's own level and an override list may only contain permissions
        the actor already has. Returns the resolved role, if one was named.

        Raises:
            RoleNotFoundError: ``role_name`` does not exist.
            AuthorizationError: The grant would exceed the actor's privileges.
        """
        role = None
        if role_name:
            role_name = normalize_role_name(role_name)
            role = db.query(Role).filter(Role.name == role_name).first()
            if not role:
                raise RoleNotFoundError(f"Role '{role_name}' not found")

        if actor.role == SUPERADMIN:
            return role

        if role is not None:
            if role.name == SUPERADMIN:
                raise AuthorizationError("Only superadmin can assign the superadmin role")
            if role.level >= actor.level:
                raise AuthorizationError(
                    f"Cannot assign role '{role.name}' (level {role.level}) "
                    f"at or above your own level ({actor.level})"
                )
        if role_permissions is not None:
            not_held = sorted(set(role_permissions) - actor.permissions)
            if not_held:
                raise AuthorizationError(
                    f"Cannot grant permissions you do not hold: {', '.join(not_held)}"
                )
        return role

    @staticmethod
    def update_user(
        db: Session,
        user_id: int,
        actor: Principal,
        full_name: Optional[str] = None,
        role_name: Optional[str] = None,
        status: Optional[UserStatusEnum] = None,
        role_permissions: Optional[Iterable[str]] = None,
    ) -> User:
        """Update profile, role, status or the per-user permission override.

        Nobody changes their own role or override list, and grants are
        bounded by ``check_grant``.
        """
        user = AuthService.get_user(db, user_id)
        AuthService._check_superadmin_target(user, actor)

        granting = bool(role_name) or role_permissions is not None
        if granting and user.id == actor.id:
            raise AuthorizationError("You cannot change your own role or permissions")
        role = AuthService.check_grant(db, actor, role_name, role_permissions)

        if full_name:
            user.full_name = full_name
        if role is not None:
            user.role = role.name
        if status is not None:
            user.status = status
        if role_permissions is not None:
            user.role_permissions = role_permissions

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user_id: int, actor: Principal) -> None:
        user = AuthService.get_user(db, user_id)
        AuthService._check_superadmin_target(user, actor)
        db.delete(user)
        db.commit()


auth_service = AuthService()
