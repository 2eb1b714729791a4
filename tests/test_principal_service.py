"""Principal resolver tests."""

from datetime import timedelta

import pytest

from estate_backend.core import guards
from estate_backend.core.exceptions import AuthenticationError, ExpiredTokenError
from estate_backend.core.security import issue_token
from estate_backend.models.user import UserStatusEnum
from estate_backend.services.principal_service import principal_service
from estate_backend.services.role_service import role_service


def test_resolves_active_user(db, make_user):
    user = make_user("agent")
    principal = principal_service.resolve(db, issue_token(user.id))
    assert principal.id == user.id
    assert principal.role == "agent"
    assert principal.level == 5
    assert "properties.create" in principal.permissions
    assert principal.role_object.is_system_role


def test_unknown_user(db):
    with pytest.raises(AuthenticationError, match="user not found"):
        principal_service.resolve(db, issue_token(9999))


@pytest.mark.parametrize(
    "status", [UserStatusEnum.pending, UserStatusEnum.suspended, UserStatusEnum.inactive]
)
def test_non_active_user(db, make_user, status):
    user = make_user("customer", status=status)
    with pytest.raises(AuthenticationError, match="not active"):
        principal_service.resolve(db, issue_token(user.id))


def test_expired_token_is_authentication_error(db, make_user):
    user = make_user("customer")
    token = issue_token(user.id, expires_delta=timedelta(seconds=-1))
    with pytest.raises(ExpiredTokenError):
        principal_service.resolve(db, token)


def test_role_edits_apply_on_next_request(db, make_user, make_role, superadmin, principal_for):
    role = make_role("field_ops", level=6, permissions=["properties.view"])
    user = make_user("field_ops")
    token = issue_token(user.id)

    before = principal_service.resolve(db, token)
    assert not guards.meets_subadmin_threshold(before)
    assert not guards.has_permission(before, "vendors.approve")

    role_service.update(
        db, role.id, principal_for(superadmin),
        level=7, permissions=["properties.view", "vendors.approve"],
    )

    after = principal_service.resolve(db, token)
    assert guards.meets_subadmin_threshold(after)
    assert guards.has_permission(after, "vendors.approve")


def test_deactivated_role_still_resolves(db, make_user, make_role, superadmin, principal_for):
    role = make_role("night_shift", level=4, permissions=["supportTickets.read"])
    user = make_user("night_shift")
    token = issue_token(user.id)

    role_service.toggle_active(db, role.id, principal_for(superadmin))

    principal = principal_service.resolve(db, token)
    assert principal.role == "night_shift"
    assert principal.role_object is not None
    assert not principal.role_object.is_active
    assert guards.has_permission(principal, "supportTickets.read")


def test_missing_role_yields_powerless_principal(db, make_user, make_role):
    role = make_role("temp_staff", level=5, permissions=["properties.view"])
    user = make_user("temp_staff")
    db.delete(role)
    db.commit()

    principal = principal_service.resolve(db, issue_token(user.id))
    assert principal.role_object is None
    assert principal.permissions == frozenset()
    assert principal.level == 0


def test_user_override_is_merged(db, make_user):
    user = make_user("customer", permissions=["reviews.manage"])
    principal = principal_service.resolve(db, issue_token(user.id))
    assert "reviews.manage" in principal.permissions
    assert "properties.view" in principal.permissions


def test_resolve_optional(db, make_user):
    user = make_user("customer")
    assert principal_service.resolve_optional(db, None) is None
    assert principal_service.resolve_optional(db, "garbage") is None
    assert principal_service.resolve_optional(db, issue_token(user.id)).id == user.id
