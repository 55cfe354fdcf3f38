import pytest

from app.core.authorization import authorize
from app.core.exceptions import Forbidden
from app.models.user import User, UserRole


def principal(role):
    return User(id="user-1", email="user@example.com", role=role, is_active=True)


@pytest.mark.parametrize("role", list(UserRole))
def test_role_in_allowed_set_passes(role):
    authorize(principal(role), [role])


def test_role_outside_allowed_set_is_forbidden():
    with pytest.raises(Forbidden) as exc_info:
        authorize(principal(UserRole.employee), [UserRole.company_admin, UserRole.superadmin])

    assert exc_info.value.status_code == 403
    assert "employee" in exc_info.value.message


def test_superadmin_does_not_inherit_company_admin_routes():
    with pytest.raises(Forbidden):
        authorize(principal(UserRole.superadmin), [UserRole.company_admin])


def test_allowed_roles_accept_plain_values():
    authorize(principal(UserRole.company_admin), ["company_admin"])
