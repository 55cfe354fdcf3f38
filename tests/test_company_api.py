from app.models.company import Company, CompanyStatus
from app.models.employee import Employee
from app.models.user import User, UserRole

from tests.conftest import PASSWORD, auth_header

LOGO_URL = "https://res.cloudinary.com/demo/image/upload/v1/be-smart/companies/logos/old.png"
AVATAR_URL = "https://res.cloudinary.com/demo/image/upload/v1/be-smart/employees/avatars/ann.png"
BACKGROUND_URL = "https://res.cloudinary.com/demo/image/upload/v1/be-smart/employees/backgrounds/ann.png"


def test_superadmin_lists_every_company(client, acme, globex, superadmin):
    response = client.get("/api/companies", headers=auth_header(superadmin))

    assert response.status_code == 200
    assert response.json()["count"] == 2
    assert {c["name"] for c in response.json()["data"]} == {"Acme", "Globex"}


def test_company_admin_lists_only_own_company(client, acme, globex, acme_admin):
    response = client.get("/api/companies", headers=auth_header(acme_admin))

    assert [c["id"] for c in response.json()["data"]] == [acme.id]


def test_unbound_employee_lists_nothing(client, acme, make_user):
    loner = make_user("loner@example.com")

    response = client.get("/api/companies", headers=auth_header(loner))

    assert response.json()["count"] == 0


def test_get_other_company_is_forbidden(client, globex, acme_admin):
    response = client.get(f"/api/companies/{globex.id}", headers=auth_header(acme_admin))

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Access denied"}


def test_get_unknown_company(client, superadmin):
    response = client.get("/api/companies/00000000-0000-4000-8000-000000000000", headers=auth_header(superadmin))

    assert response.status_code == 404


def test_employee_reads_own_company(client, acme, acme_employee_user):
    response = client.get(f"/api/companies/{acme.id}", headers=auth_header(acme_employee_user))

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Acme"


def test_public_signup_creates_company_and_admin(client, db):
    response = client.post(
        "/api/companies/public",
        json={"name": "Hooli", "email": "Hello@Hooli.com", "password": "secret123"},
    )

    assert response.status_code == 201
    body = response.json()
    company, admin = body["data"]["company"], body["data"]["user"]
    assert company["email"] == "hello@hooli.com"
    assert company["status"] == "active"
    assert company["created_by"] == admin["id"]
    assert admin["role"] == "company_admin"
    assert admin["company_id"] == company["id"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.json()["user"]["company"]["id"] == company["id"]


def test_public_signup_duplicate_email(client, acme):
    response = client.post(
        "/api/companies/public",
        json={"name": "Acme 2", "email": acme.email, "password": "secret123"},
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "email"


def test_create_company_requires_superadmin(client, acme_admin):
    response = client.post(
        "/api/companies",
        json={"name": "Umbrella", "email": "contact@umbrella.com"},
        headers=auth_header(acme_admin),
    )

    assert response.status_code == 403


def test_superadmin_creates_company(client, superadmin):
    response = client.post(
        "/api/companies",
        json={"name": "Umbrella", "email": "contact@umbrella.com", "sector": "Santé"},
        headers=auth_header(superadmin),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["sector"] == "Santé"
    assert data["country"] == "France"
    assert data["created_by"] == superadmin.id


def test_company_admin_updates_own_company_but_not_status(client, acme, acme_admin):
    response = client.put(
        f"/api/companies/{acme.id}",
        json={"city": "Lyon", "status": "suspended"},
        headers=auth_header(acme_admin),
    )

    assert response.status_code == 200
    assert response.json()["data"]["city"] == "Lyon"
    assert response.json()["data"]["status"] == "active"


def test_company_admin_cannot_update_other_company(client, globex, acme_admin):
    response = client.put(f"/api/companies/{globex.id}", json={"city": "Lyon"}, headers=auth_header(acme_admin))

    assert response.status_code == 403


def test_employee_cannot_update_company(client, acme, acme_employee_user):
    response = client.put(f"/api/companies/{acme.id}", json={"city": "Lyon"}, headers=auth_header(acme_employee_user))

    assert response.status_code == 403


def test_superadmin_can_set_status_through_update(client, acme, superadmin):
    response = client.put(f"/api/companies/{acme.id}", json={"status": "suspended"}, headers=auth_header(superadmin))

    assert response.json()["data"]["status"] == "suspended"


def test_toggle_status_round_trip(client, acme, superadmin):
    headers = auth_header(superadmin)

    first = client.patch(f"/api/companies/{acme.id}/status", headers=headers)
    second = client.patch(f"/api/companies/{acme.id}/status", headers=headers)

    assert first.json()["data"]["status"] == "suspended"
    assert second.json()["data"]["status"] == "active"


def test_toggle_status_requires_superadmin(client, acme, acme_admin):
    response = client.patch(f"/api/companies/{acme.id}/status", headers=auth_header(acme_admin))

    assert response.status_code == 403


def test_replace_logo(client, media, make_company, make_user):
    company = make_company("Acme", logo=LOGO_URL)
    admin = make_user("admin@acme.com", role=UserRole.company_admin, company=company)

    response = client.put(
        f"/api/companies/{company.id}/logo",
        files={"logo": ("logo.png", b"\x89PNG-new", "image/png")},
        headers=auth_header(admin),
    )

    assert response.status_code == 200
    assert response.json()["data"]["logo"] == media.uploads[0][2]
    assert media.deleted == [LOGO_URL]
    assert media.on_event_loop == [False, False]


def test_replace_logo_rejects_non_images(client, media, acme, acme_admin):
    response = client.put(
        f"/api/companies/{acme.id}/logo",
        files={"logo": ("notes.txt", b"hello", "text/plain")},
        headers=auth_header(acme_admin),
    )

    assert response.status_code == 400
    assert media.uploads == []


def test_failed_logo_upload_keeps_old_logo(client, db, media, make_company, make_user):
    company = make_company("Acme", logo=LOGO_URL)
    admin = make_user("admin@acme.com", role=UserRole.company_admin, company=company)
    media.fail_upload = True

    response = client.put(
        f"/api/companies/{company.id}/logo",
        files={"logo": ("logo.png", b"\x89PNG-new", "image/png")},
        headers=auth_header(admin),
    )

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Logo upload failed"}
    assert media.deleted == []
    db.expire_all()
    assert db.get(Company, company.id).logo == LOGO_URL


def test_delete_company_with_failing_media_delete(client, db, media, make_company, make_user, make_employee, superadmin):
    company = make_company("Acme", logo=LOGO_URL)
    admin = make_user("admin@acme.com", role=UserRole.company_admin, company=company)
    employee = make_employee(company)
    company_id, admin_id, employee_id = company.id, admin.id, employee.id
    media.fail_delete = True

    response = client.delete(f"/api/companies/{company_id}", headers=auth_header(superadmin))

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Company deleted"}
    assert media.deleted == [LOGO_URL]

    db.expire_all()
    assert db.get(Company, company_id) is None
    assert db.get(Employee, employee_id) is None
    assert db.get(User, admin_id).company_id is None


def test_delete_company_removes_employee_images(client, db, media, make_company, make_employee, superadmin):
    company = make_company("Acme", logo=LOGO_URL)
    make_employee(company, name="Ann", avatar=AVATAR_URL, background=BACKGROUND_URL)
    make_employee(company, name="Bob")
    company_id = company.id

    response = client.delete(f"/api/companies/{company_id}", headers=auth_header(superadmin))

    assert response.status_code == 200
    assert sorted(media.deleted) == sorted([LOGO_URL, AVATAR_URL, BACKGROUND_URL])
    assert not any(media.on_event_loop)


def test_delete_company_requires_superadmin(client, acme, acme_admin):
    response = client.delete(f"/api/companies/{acme.id}", headers=auth_header(acme_admin))

    assert response.status_code == 403


def test_suspended_company_admin_is_locked_out(client, make_company, make_user):
    company = make_company("Initech", status=CompanyStatus.suspended)
    admin = make_user("admin@initech.com", role=UserRole.company_admin, company=company)

    response = client.get("/api/companies", headers=auth_header(admin))

    assert response.status_code == 403

    login = client.post("/api/auth/login", json={"email": "admin@initech.com", "password": PASSWORD})
    assert login.status_code == 403
