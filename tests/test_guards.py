"""Authorization predicate tests — pure functions, no database."""

import pytest

from estate_backend.core import guards
from estate_backend.core.principal import Principal, RoleSnapshot, RoleTier, classify_role


def make_principal(role, level=None, permissions=(), user_permissions=()):
    snapshot = None
    if level is not None:
        snapshot = RoleSnapshot(name=role, level=level, permissions=frozenset(permissions))
    return Principal.build(
        id=1, email=f"{role}@example.com", role=role,
        role_object=snapshot, user_permissions=user_permissions,
    )


class TestHasPermission:
    @pytest.mark.parametrize("permission", ["users.delete", "roles.edit", "no.such.permission", ""])
    def test_superadmin_holds_every_permission(self, permission):
        principal = make_principal("superadmin", level=10, permissions=[])
        assert guards.has_permission(principal, permission)

    def test_superadmin_without_role_document_still_passes(self):
        assert guards.has_permission(make_principal("superadmin"), "anything.at.all")

    def test_support_agent_scenario(self):
        principal = make_principal(
            "support_agent", level=6,
            permissions=["supportTickets.read", "supportTickets.reply"],
        )
        assert guards.has_permission(principal, "supportTickets.reply")
        assert not guards.has_permission(principal, "users.delete")
        assert not guards.is_at_least_level(principal, 7, ("subadmin", "admin", "superadmin"))

    def test_user_override_grants_permission(self):
        principal = make_principal("agent", level=5, permissions=[], user_permissions=["vendors.view"])
        assert guards.has_permission(principal, "vendors.view")

    def test_falls_back_to_role_object_permissions(self):
        snapshot = RoleSnapshot(name="auditor", level=3, permissions=frozenset({"logs.view"}))
        principal = Principal(id=1, email="a@example.com", role="auditor", role_object=snapshot)
        assert principal.permissions == frozenset()
        assert guards.has_permission(principal, "logs.view")

    def test_admin_and_subadmin_have_no_blanket_bypass(self):
        assert not guards.has_permission(make_principal("admin"), "users.delete")
        assert not guards.has_permission(make_principal("subadmin", level=7), "users.delete")

    def test_missing_principal(self):
        assert not guards.has_permission(None, "users.view")


class TestPermissionComposition:
    def test_any_and_all(self):
        principal = make_principal("editor", level=4, permissions=["a.read", "a.write"])
        assert guards.has_any_permission(principal, ["x.none", "a.read"])
        assert not guards.has_any_permission(principal, ["x.none", "y.none"])
        assert guards.has_all_permissions(principal, ["a.read", "a.write"])
        assert not guards.has_all_permissions(principal, ["a.read", "x.none"])

    def test_superadmin_short_circuits(self):
        principal = make_principal("superadmin")
        assert guards.has_any_permission(principal, [])
        assert guards.has_all_permissions(principal, ["x.none", "y.none"])

    def test_empty_any_is_false_for_regular_roles(self):
        assert not guards.has_any_permission(make_principal("customer", level=1), [])


class TestAdminTier:
    @pytest.mark.parametrize("role", ["superadmin", "admin", "subadmin"])
    def test_admin_names(self, role):
        assert guards.is_admin_tier(make_principal(role))

    @pytest.mark.parametrize("role", ["customer", "agent", "vendor", "builder"])
    def test_end_user_roles_are_not_admin_tier(self, role):
        assert not guards.is_admin_tier(make_principal(role, level=1))

    def test_unknown_custom_role_is_admin_tier(self):
        principal = make_principal("intern", level=1)
        assert principal.tier == RoleTier.admin_tier
        assert guards.is_admin_tier(principal)

    def test_classification(self):
        assert classify_role("customer") == RoleTier.customer
        assert classify_role("builder") == RoleTier.builder
        assert classify_role("superadmin") == RoleTier.admin_tier

    def test_none(self):
        assert not guards.is_admin_tier(None)


class TestLevelThresholds:
    @pytest.mark.parametrize("level", range(1, 11))
    def test_custom_role_admin_gate(self, level):
        principal = make_principal("regional_manager", level=level)
        assert guards.meets_admin_threshold(principal) is (level >= 8)

    @pytest.mark.parametrize("level", range(1, 11))
    def test_custom_role_subadmin_gate(self, level):
        principal = make_principal("regional_manager", level=level)
        assert guards.meets_subadmin_threshold(principal) is (level >= 7)

    def test_named_roles_pass_by_name(self):
        assert guards.meets_admin_threshold(make_principal("admin"))
        assert guards.meets_admin_threshold(make_principal("superadmin"))
        assert guards.meets_subadmin_threshold(make_principal("subadmin"))

    def test_subadmin_is_not_admin_even_with_high_level(self):
        principal = make_principal("subadmin", level=9)
        assert not guards.meets_admin_threshold(principal)

    def test_standard_roles_never_use_level(self):
        # a tampered agent row with a high level must not unlock admin routes
        principal = make_principal("agent", level=10)
        assert not guards.meets_admin_threshold(principal)
        assert not guards.meets_subadmin_threshold(principal)

    def test_custom_role_without_role_document(self):
        assert not guards.meets_subadmin_threshold(make_principal("ghost"))


class TestAuthorizeRoles:
    def test_exact_name(self):
        assert guards.authorize_roles(make_principal("agent", level=5), ["agent", "customer"])

    def test_custom_role_admitted_by_level(self):
        assert guards.authorize_roles(make_principal("ops_lead", level=8), ["admin"])
        assert guards.authorize_roles(make_principal("ops_lead", level=7), ["subadmin"])
        assert not guards.authorize_roles(make_principal("ops_lead", level=7), ["admin"])

    def test_custom_role_not_admitted_to_end_user_lists(self):
        assert not guards.authorize_roles(make_principal("ops_lead", level=10), ["agent"])

    def test_superadmin_passes_any_list(self):
        assert guards.authorize_roles(make_principal("superadmin"), ["customer"])
