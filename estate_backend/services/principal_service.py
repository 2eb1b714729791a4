"""Principal resolver — token to user to live role lookup."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from estate_backend.core.exceptions import AuthenticationError
from estate_backend.core.principal import Principal, RoleSnapshot
from estate_backend.core.security import verify_token
from estate_backend.models.role import Role
from estate_backend.models.user import User, UserStatusEnum

logger = logging.getLogger("estate_platform.auth")


class PrincipalService:
    """Builds a fresh ``Principal`` for every request.

    The role row is fetched on each call so that edits to a role's level or
    permissions apply to all holders on their next request. Role
    ``is_active`` is intentionally not checked here; it is enforced at login.
    """

    @staticmethod
    def load_role_snapshot(db: Session, role_name: str) -> Optional[RoleSnapshot]:
        role = db.query(Role).filter(Role.name == role_name).first()
        return RoleSnapshot.from_role(role) if role else None

    @staticmethod
    def principal_for_user(db: Session, user: User) -> Principal:
        role_object = PrincipalService.load_role_snapshot(db, user.role)
        if role_object is None:
            logger.warning("User %s holds unknown role '%s'", user.id, user.role)
        return Principal.build(
            id=user.id,
            email=user.email,
            role=user.role,
            role_object=role_object,
            user_permissions=user.role_permissions,
        )

    @staticmethod
    def resolve(db: Session, token: str) -> Principal:
        """Resolve a bearer token into a principal.

        Raises:
            AuthenticationError: Bad/expired token, unknown user, or a user
                whose status is not ``active``.
        """
        user_id = verify_token(token)

        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise AuthenticationError("Invalid token or user not found")
        if user.status != UserStatusEnum.active:
            raise AuthenticationError("Account is not active")

        return PrincipalService.principal_for_user(db, user)

    @staticmethod
    def resolve_optional(db: Session, token: Optional[str]) -> Optional[Principal]:
        """Like ``resolve`` but returns None for a missing or unusable token."""
        if not token:
            return None
        try:
            return PrincipalService.resolve(db, token)
        except AuthenticationError as e:
            logger.debug("Ignoring unusable optional credential: %s", e.message)
            return None


principal_service = PrincipalService()
