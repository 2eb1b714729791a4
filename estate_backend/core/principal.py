"""Request-scoped principal and role classification."""

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from estate_backend.core.permissions import (
    AGENT, BUILDER, CUSTOMER, VENDOR, STANDARD_ROLE_NAMES,
)


class RoleTier(str, enum.Enum):
    """Coarse classification of a role name, resolved once per principal.

    Only the four end-user roles are recognised as non-admin; every other
    name, including unknown custom roles, lands in ``admin_tier``.
    """
    customer = "customer"
    agent = "agent"
    vendor = "vendor"
    builder = "builder"
    admin_tier = "admin_tier"


_NON_ADMIN_TIERS = {
    CUSTOMER: RoleTier.customer,
    AGENT: RoleTier.agent,
    VENDOR: RoleTier.vendor,
    BUILDER: RoleTier.builder,
}


def classify_role(role_name: str) -> RoleTier:
    return _NON_ADMIN_TIERS.get(role_name, RoleTier.admin_tier)


def is_custom_role_name(role_name: str) -> bool:
    return role_name not in STANDARD_ROLE_NAMES


@dataclass(frozen=True)
class RoleSnapshot:
    """Immutable copy of a Role row, detached from the DB session."""
    name: str
    level: int
    permissions: FrozenSet[str] = frozenset()
    pages: Tuple[str, ...] = ()
    is_system_role: bool = False
    is_active: bool = True
    description: str = ""

    @classmethod
    def from_role(cls, role) -> "RoleSnapshot":
        return cls(
            name=role.name,
            level=role.level,
            permissions=frozenset(role.permissions),
            pages=tuple(role.pages),
            is_system_role=bool(role.is_system_role),
            is_active=bool(role.is_active),
            description=role.description or "",
        )


@dataclass(frozen=True)
class Principal:
    """Authenticated identity plus everything the guards need."""
    id: int
    email: str
    role: str
    permissions: FrozenSet[str] = frozenset()
    role_object: Optional[RoleSnapshot] = None
    tier: RoleTier = field(default=RoleTier.admin_tier)

    @classmethod
    def build(
        cls,
        id: int,
        email: str,
        role: str,
        role_object: Optional[RoleSnapshot] = None,
        user_permissions=(),
    ) -> "Principal":
        """Assemble a principal; permissions are role grants plus user overrides."""
        permissions = set(user_permissions or ())
        if role_object is not None:
            permissions |= role_object.permissions
        return cls(
            id=id,
            email=email,
            role=role,
            permissions=frozenset(permissions),
            role_object=role_object,
            tier=classify_role(role),
        )

    @property
    def level(self) -> int:
        return self.role_object.level if self.role_object else 0

    @property
    def is_custom_role(self) -> bool:
        return is_custom_role_name(self.role)
