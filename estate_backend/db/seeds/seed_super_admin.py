"""Seed the super-admin user from env vars."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from estate_backend.core.config import settings
from estate_backend.core.permissions import SUPERADMIN
from estate_backend.core.security import hash_password
from estate_backend.models.role import Role
from estate_backend.models.user import User, UserStatusEnum

logger = logging.getLogger("estate_platform.seed")


def seed_super_admin(db: Session) -> Optional[User]:
    """Create the super-admin user if not already present."""
    if not db.query(Role).filter(Role.name == SUPERADMIN).first():
        logger.warning("superadmin role not found. Run seed_roles first.")
        return None

    email = settings.SUPER_ADMIN_EMAIL.lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        logger.info("Super admin '%s' already exists, skipping.", email)
        return existing

    admin = User(
        email=email,
        hashed_password=hash_password(settings.SUPER_ADMIN_PASSWORD),
        full_name="Super Admin",
        status=UserStatusEnum.active,
        role=SUPERADMIN,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Created super admin: %s", email)
    return admin
