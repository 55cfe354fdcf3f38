from app.models.company import CompanyStatus
from app.models.user import UserRole

from tests.conftest import PASSWORD, auth_header


def test_login_returns_token_and_user(client, acme_admin):
    response = client.post("/api/auth/login", json={"email": "admin@acme.com", "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["id"] == acme_admin.id
    assert body["user"]["company"]["name"] == "Acme"
    assert "hashed_password" not in body["user"]


def test_login_email_is_case_insensitive(client, acme_admin):
    response = client.post("/api/auth/login", json={"email": "ADMIN@acme.com", "password": PASSWORD})

    assert response.status_code == 200


def test_wrong_password_and_unknown_email_are_indistinguishable(client, acme_admin):
    unknown = client.post("/api/auth/login", json={"email": "ghost@acme.com", "password": PASSWORD})
    wrong = client.post("/api/auth/login", json={"email": "admin@acme.com", "password": "not-it"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {"success": False, "message": "Incorrect email or password"}


def test_login_disabled_account(client, make_user):
    make_user("gone@example.com", is_active=False)

    response = client.post("/api/auth/login", json={"email": "gone@example.com", "password": PASSWORD})

    assert response.status_code == 401
    assert response.json()["message"] == "Account disabled"


def test_login_suspended_company(client, make_company, make_user):
    company = make_company("Initech", status=CompanyStatus.suspended)
    make_user("admin@initech.com", role=UserRole.company_admin, company=company)

    response = client.post("/api/auth/login", json={"email": "admin@initech.com", "password": PASSWORD})

    assert response.status_code == 403
    assert "suspended" in response.json()["message"]


def test_login_validation_error_shape(client):
    response = client.post("/api/auth/login", json={"email": "not-an-email"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    fields = {error["field"] for error in body["errors"]}
    assert {"email", "password"} <= fields


def test_register_creates_unbound_employee(client):
    response = client.post(
        "/api/auth/register",
        json={"email": "New@Example.com", "password": "secret123", "first_name": "New"},
    )

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["email"] == "new@example.com"
    assert user["role"] == "employee"
    assert user["company_id"] is None

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {response.json()['token']}"})
    assert me.status_code == 200
    assert me.json()["user"]["id"] == user["id"]


def test_register_duplicate_email(client, acme_admin):
    response = client.post("/api/auth/register", json={"email": "admin@acme.com", "password": "secret123"})

    assert response.status_code == 400
    assert response.json()["message"] == "Email already in use"


def test_me_returns_user_with_company(client, acme_admin):
    response = client.get("/api/auth/me", headers=auth_header(acme_admin))

    assert response.status_code == 200
    assert response.json()["user"]["company"]["id"] == acme_admin.company_id


def test_me_without_token(client):
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json() == {"success": False, "message": "Not authorized, no token provided"}


def test_me_with_invalid_token(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_me_after_company_suspension(client, acme, acme_admin, superadmin):
    headers = auth_header(acme_admin)
    assert client.get("/api/auth/me", headers=headers).status_code == 200

    toggled = client.patch(f"/api/companies/{acme.id}/status", headers=auth_header(superadmin))
    assert toggled.json()["data"]["status"] == "suspended"

    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == 403
    assert response.json()["success"] is False
    assert "suspended" in response.json()["message"]


def test_me_after_deactivation(client, db, acme_admin):
    headers = auth_header(acme_admin)
    acme_admin.is_active = False
    db.commit()

    response = client.get("/api/auth/me", headers=headers)

    assert response.status_code == 401
    assert response.json()["message"] == "Account disabled"
