"""Login-time role validation, registration and user management tests."""

import pytest

from estate_backend.core.exceptions import (
    AuthorizationError,
    LoginRejectedError,
    ResourceConflictError,
    RoleNotFoundError,
    ValidationError,
)
from estate_backend.core.security import verify_token
from estate_backend.models.role import Role
from estate_backend.models.user import User, UserStatusEnum
from estate_backend.services.auth_service import auth_service
from estate_backend.services.principal_service import principal_service
from estate_backend.services.role_service import role_service

PASSWORD = "secret123"


def rejection_reason(db, email, password=PASSWORD):
    with pytest.raises(LoginRejectedError) as exc_info:
        auth_service.authenticate(db, email, password)
    return exc_info.value.reason


class TestAuthenticate:
    def test_success_returns_token_level_and_pages(self, db, make_role, make_user):
        make_role("support_agent", level=6, permissions=["supportTickets.read"], pages=["support_tickets"])
        user = make_user("support_agent", email="Helpdesk@Example.com")

        result = auth_service.authenticate(db, "helpdesk@example.com", PASSWORD)

        assert result["success"] is True
        assert verify_token(result["access_token"]) == user.id
        assert result["user"]["role"] == "support_agent"
        assert result["user"]["level"] == 6
        assert result["pages"] == ["support_tickets"]
        db.refresh(user)
        assert user.last_login_at is not None

    def test_wrong_password(self, db, make_user):
        user = make_user("customer")
        assert rejection_reason(db, user.email, "wrong-password") == "invalid_credentials"

    def test_unknown_email(self, db):
        assert rejection_reason(db, "nobody@example.com") == "invalid_credentials"

    @pytest.mark.parametrize(
        "status, reason",
        [
            (UserStatusEnum.suspended, "account_suspended"),
            (UserStatusEnum.pending, "account_pending"),
            (UserStatusEnum.inactive, "account_inactive"),
        ],
    )
    def test_account_status(self, db, make_user, status, reason):
        user = make_user("customer", status=status)
        assert rejection_reason(db, user.email) == reason

    def test_deleted_role_is_rejected(self, db, make_role, make_user):
        role = make_role("temp_staff", level=3)
        user = make_user("temp_staff")
        db.delete(role)
        db.commit()

        assert rejection_reason(db, user.email) == "role_deleted"

    def test_inactive_role_is_rejected(self, db, make_role, make_user, superadmin, principal_for):
        role = make_role("seasonal", level=3)
        user = make_user("seasonal")
        role_service.toggle_active(db, role.id, principal_for(superadmin))

        assert rejection_reason(db, user.email) == "role_inactive"

    def test_inactive_system_role_is_rejected(self, db, make_user, superadmin, principal_for):
        user = make_user("customer")
        customer = db.query(Role).filter(Role.name == "customer").one()
        role_service.toggle_active(db, customer.id, principal_for(superadmin))

        assert rejection_reason(db, user.email) == "role_inactive"

    def test_existing_token_survives_role_deactivation(self, db, make_role, make_user, superadmin, principal_for):
        role = make_role("seasonal", level=3, permissions=["properties.view"])
        user = make_user("seasonal")
        token = auth_service.authenticate(db, user.email, PASSWORD)["access_token"]

        role_service.toggle_active(db, role.id, principal_for(superadmin))

        assert rejection_reason(db, user.email) == "role_inactive"
        assert principal_service.resolve(db, token).id == user.id


class TestRegister:
    def test_register_customer_is_pending(self, db):
        user = auth_service.register(db, "New@Example.com", PASSWORD, "New Buyer")
        assert user.email == "new@example.com"
        assert user.role == "customer"
        assert user.status == UserStatusEnum.pending

    def test_register_agent(self, db):
        user = auth_service.register(db, "agent@example.com", PASSWORD, "Field Agent", role_name="agent")
        assert user.role == "agent"

    @pytest.mark.parametrize("role", ["subadmin", "superadmin", "admin"])
    def test_register_admin_roles_refused(self, db, role):
        with pytest.raises(ValidationError):
            auth_service.register(db, "x@example.com", PASSWORD, "X", role_name=role)
        assert db.query(User).count() == 0

    def test_duplicate_email(self, db, make_user):
        make_user("customer", email="taken@example.com")
        with pytest.raises(ResourceConflictError):
            auth_service.register(db, "TAKEN@example.com", PASSWORD, "Again")


class TestUserManagement:
    def test_create_user_with_unknown_role(self, db):
        with pytest.raises(RoleNotFoundError):
            auth_service.create_user(db, "x@example.com", PASSWORD, "X", role_name="ghost")

    def test_change_role(self, db, make_role, make_user, subadmin, principal_for):
        make_role("field_ops", level=6)
        user = make_user("agent")
        updated = auth_service.update_user(db, user.id, principal_for(subadmin), role_name="Field_Ops")
        assert updated.role == "field_ops"

    def test_only_superadmin_assigns_superadmin(self, db, make_user, subadmin, superadmin, principal_for):
        user = make_user("agent")
        with pytest.raises(AuthorizationError):
            auth_service.update_user(db, user.id, principal_for(subadmin), role_name="superadmin")

        updated = auth_service.update_user(db, user.id, principal_for(superadmin), role_name="superadmin")
        assert updated.role == "superadmin"

    def test_superadmin_account_is_protected(self, db, subadmin, superadmin, principal_for):
        with pytest.raises(AuthorizationError):
            auth_service.update_user(
                db, superadmin.id, principal_for(subadmin), status=UserStatusEnum.suspended
            )
        with pytest.raises(AuthorizationError):
            auth_service.delete_user(db, superadmin.id, principal_for(subadmin))

    def test_override_permissions(self, db, make_user, superadmin, principal_for):
        user = make_user("customer")
        auth_service.update_user(
            db, user.id, principal_for(superadmin), role_permissions=["reviews.manage"]
        )
        principal = principal_for(db.get(User, user.id))
        assert "reviews.manage" in principal.permissions

    def test_nobody_changes_own_role_or_override(self, db, subadmin, superadmin, principal_for):
        with pytest.raises(AuthorizationError):
            auth_service.update_user(db, subadmin.id, principal_for(subadmin), role_name="customer")
        with pytest.raises(AuthorizationError):
            auth_service.update_user(
                db, superadmin.id, principal_for(superadmin), role_permissions=["reviews.manage"]
            )
        renamed = auth_service.update_user(
            db, subadmin.id, principal_for(subadmin), full_name="Still Subadmin"
        )
        assert renamed.role == "subadmin"
        assert renamed.full_name == "Still Subadmin"

    def test_grant_bounded_by_actor_level(self, db, make_role, make_user, principal_for):
        make_role("hr_lead", level=3, permissions=["users.view", "users.edit", "users.promote"])
        make_role("desk", level=2)
        actor = principal_for(make_user("hr_lead"))

        assert auth_service.check_grant(db, actor, "Desk").name == "desk"
        with pytest.raises(AuthorizationError):
            auth_service.check_grant(db, actor, "hr_lead")
        with pytest.raises(AuthorizationError):
            auth_service.check_grant(db, actor, "subadmin")
        with pytest.raises(RoleNotFoundError):
            auth_service.check_grant(db, actor, "ghost")

    def test_grant_bounded_by_actor_permissions(self, db, make_role, make_user, principal_for):
        make_role("hr_lead", level=3, permissions=["users.view", "users.edit", "users.promote"])
        actor = principal_for(make_user("hr_lead"))

        assert auth_service.check_grant(db, actor, role_permissions=["users.view"]) is None
        with pytest.raises(AuthorizationError):
            auth_service.check_grant(db, actor, role_permissions=["users.view", "roles.delete"])

    def test_superadmin_grants_anything(self, db, make_user, superadmin, principal_for):
        actor = principal_for(superadmin)
        assert auth_service.check_grant(db, actor, "superadmin", ["x.custom"]).name == "superadmin"

    def test_list_users_filters(self, db, make_user):
        make_user("agent")
        make_user("agent", status=UserStatusEnum.suspended)
        make_user("customer")

        assert auth_service.list_users(db, role="agent")["total"] == 2
        assert auth_service.list_users(db, status=UserStatusEnum.suspended)["total"] == 1
        assert auth_service.list_users(db, page_size=2)["total"] == 3
        assert len(auth_service.list_users(db, page_size=2)["users"]) == 2
