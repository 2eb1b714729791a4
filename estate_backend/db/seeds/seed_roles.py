"""Seed the built-in system roles into the database."""

import logging
from sqlalchemy.orm import Session

from estate_backend.core.permissions import SYSTEM_ROLES
from estate_backend.models.role import Role

logger = logging.getLogger("estate_platform.seed")


def seed_roles(db: Session) -> int:
    """Insert missing system roles; existing rows are left untouched.

    Returns the number of roles created.
    """
    created = 0
    for role_data in SYSTEM_ROLES:
        existing = db.query(Role).filter(Role.name == role_data["name"]).first()
        if existing:
            continue
        db.add(Role(
            name=role_data["name"],
            description=role_data["description"],
            level=role_data["level"],
            permissions=role_data["permissions"],
            pages=role_data["pages"],
            is_system_role=True,
            is_active=True,
        ))
        created += 1

    db.commit()
    logger.info("Seeded %s system role(s)", created)
    return created
