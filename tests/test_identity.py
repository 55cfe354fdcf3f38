from datetime import timedelta

import pytest

from app.core.exceptions import TenantSuspended, Unauthenticated
from app.core.security import credential_service
from app.dependencies import IdentityResolver, extract_bearer_token
from app.models.company import CompanyStatus
from app.models.user import UserRole


@pytest.fixture
def resolver():
    return IdentityResolver(credential_service)


class TestExtractBearerToken:

    def test_bearer_header(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        assert extract_bearer_token("bearer abc") == "abc"

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Basic dXNlcjpwYXNz", "abc"])
    def test_missing_or_other_scheme(self, header):
        with pytest.raises(Unauthenticated) as exc_info:
            extract_bearer_token(header)
        assert exc_info.value.message == "Not authorized, no token provided"


class TestIdentityResolver:

    def test_active_member_of_active_company(self, db, resolver, acme_admin):
        user = resolver.resolve(db, credential_service.issue(acme_admin.id))

        assert user.id == acme_admin.id
        assert user.company.name == "Acme"

    def test_invalid_token(self, db, resolver):
        with pytest.raises(Unauthenticated) as exc_info:
            resolver.resolve(db, "not-a-token")
        assert exc_info.value.message == "Invalid token"

    def test_expired_token(self, db, resolver, acme_admin):
        token = credential_service.issue(acme_admin.id, expires_delta=timedelta(seconds=-1))

        with pytest.raises(Unauthenticated):
            resolver.resolve(db, token)

    def test_unknown_principal(self, db, resolver):
        token = credential_service.issue("00000000-0000-4000-8000-000000000000")

        with pytest.raises(Unauthenticated) as exc_info:
            resolver.resolve(db, token)
        assert exc_info.value.message == "User not found"

    @pytest.mark.parametrize("role", list(UserRole))
    def test_inactive_principal_is_rejected_for_every_role(self, db, resolver, make_user, acme, role):
        user = make_user(f"{role.value}@acme.com", role=role, company=acme, is_active=False)

        with pytest.raises(Unauthenticated) as exc_info:
            resolver.resolve(db, credential_service.issue(user.id))
        assert exc_info.value.message == "Account disabled"

    def test_member_of_suspended_company(self, db, resolver, make_company, make_user):
        company = make_company("Initech", status=CompanyStatus.suspended)
        user = make_user("admin@initech.com", role=UserRole.company_admin, company=company)

        with pytest.raises(TenantSuspended):
            resolver.resolve(db, credential_service.issue(user.id))

    def test_superadmin_bound_to_suspended_company_is_not_blocked(self, db, resolver, make_company, make_user):
        company = make_company("Initech", status=CompanyStatus.suspended)
        user = make_user("root@initech.com", role=UserRole.superadmin, company=company)

        assert resolver.resolve(db, credential_service.issue(user.id)).id == user.id

    def test_unbound_principal_skips_tenant_check(self, db, resolver, make_user):
        user = make_user("loner@example.com", role=UserRole.employee)

        assert resolver.resolve(db, credential_service.issue(user.id)).id == user.id

    def test_suspension_applies_to_existing_tokens(self, db, resolver, acme, acme_admin):
        token = credential_service.issue(acme_admin.id)
        assert resolver.resolve(db, token).id == acme_admin.id

        acme.status = CompanyStatus.suspended
        db.commit()

        with pytest.raises(TenantSuspended):
            resolver.resolve(db, token)
