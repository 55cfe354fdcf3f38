"""
Pytest fixtures for the directory API.

The app reads DATABASE_URL and SECRET_KEY at import time, so they are set
here before anything from app/ is imported. Tests run against an in-memory
SQLite database and a fake media host.
"""

import asyncio
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "10080"

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, engine
from app.core.security import credential_service, get_password_hash
from app.models.company import Company, CompanyStatus
from app.models.employee import Employee
from app.models.user import User, UserRole
from app.services.media import MediaHost, MediaHostError, get_media_host
from main import app


PASSWORD = "secret123"
_PASSWORD_HASH = get_password_hash(PASSWORD)


class FakeMediaHost(MediaHost):
    """In-memory media host recording every call."""

    def __init__(self):
        self.uploads = []
        self.deleted = []
        self.fail_upload = False
        self.fail_delete = False
        self.on_event_loop = []

    def _record_thread(self):
        try:
            asyncio.get_running_loop()
            self.on_event_loop.append(True)
        except RuntimeError:
            self.on_event_loop.append(False)

    def upload(self, content, *, filename, content_type, field):
        self._record_thread()
        if self.fail_upload:
            raise MediaHostError("upload refused")
        url = f"https://res.cloudinary.com/demo/image/upload/v1/be-smart/{field}/{field}-{len(self.uploads)}.png"
        self.uploads.append((field, filename, url))
        return url

    def delete(self, image_url):
        self._record_thread()
        self.deleted.append(image_url)
        if self.fail_delete:
            raise MediaHostError("destroy refused")


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def media():
    return FakeMediaHost()


@pytest.fixture
def client(media):
    app.dependency_overrides[get_media_host] = lambda: media
    # Unexpected errors must come back as 500 responses, not test crashes
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =============================================================================
# Factories
# =============================================================================

@pytest.fixture
def make_company(db):
    def _make(name="Acme", email=None, status=CompanyStatus.active, logo=None):
        company = Company(
            name=name,
            email=email or f"{name.lower().replace(' ', '')}@example.com",
            status=status,
            logo=logo,
        )
        db.add(company)
        db.commit()
        db.refresh(company)
        return company
    return _make


@pytest.fixture
def make_user(db):
    def _make(email, role=UserRole.employee, company=None, is_active=True):
        user = User(
            email=email,
            hashed_password=_PASSWORD_HASH,
            role=role,
            company_id=company.id if company is not None else None,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_employee(db):
    def _make(company, name="Jane", surname="Doe", user=None, avatar=None, background=None):
        employee = Employee(
            company_id=company.id,
            user_id=user.id if user is not None else None,
            name=name,
            surname=surname,
            email=f"{name.lower()}.{surname.lower()}@example.com",
            avatar=avatar,
            background=background,
        )
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee
    return _make


def auth_header(user):
    return {"Authorization": f"Bearer {credential_service.issue(user.id)}"}


# =============================================================================
# Common scenario: two tenants, each with an admin and an employee
# =============================================================================

@pytest.fixture
def acme(make_company):
    return make_company("Acme")


@pytest.fixture
def globex(make_company):
    return make_company("Globex")


@pytest.fixture
def superadmin(make_user):
    return make_user("root@example.com", role=UserRole.superadmin)


@pytest.fixture
def acme_admin(make_user, acme):
    return make_user("admin@acme.com", role=UserRole.company_admin, company=acme)


@pytest.fixture
def globex_admin(make_user, globex):
    return make_user("admin@globex.com", role=UserRole.company_admin, company=globex)


@pytest.fixture
def acme_employee_user(make_user, acme):
    return make_user("staff@acme.com", role=UserRole.employee, company=acme)
