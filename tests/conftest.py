"""
Shared fixtures.

Settings are read once and cached, so the test environment is configured
before anything from farm_api is imported.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from farm_api.config import get_settings
from farm_api.core.security import create_user_token, get_password_hash
from farm_api.database import Database
from farm_api.main import create_app
from farm_api.models.tenant import Tenant
from farm_api.models.user import User, UserRole

PASSWORD = "secreto123"


@pytest.fixture
def database():
    database = Database("sqlite://")
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture
def session(database):
    db = database.session()
    yield db
    db.close()


@pytest.fixture
def app(database):
    return create_app(settings=get_settings(), database=database)


@pytest.fixture
def client(app):
    # Unhandled errors are rendered by the 500 handler instead of re-raised
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def make_tenant(session):
    def _make_tenant(nombre="Granja Uno", activo=True):
        tenant = Tenant(nombre=nombre, activo=activo)
        session.add(tenant)
        session.commit()
        return tenant
    return _make_tenant


@pytest.fixture
def make_user(session):
    def _make_user(tenant, email, rol=UserRole.ADMIN, activo=True, password=PASSWORD):
        user = User(
            tenant_id=tenant.id,
            nombre=email.split("@")[0].title(),
            apellido="Prueba",
            email=email,
            password_hash=get_password_hash(password),
            rol=rol,
            activo=activo,
        )
        session.add(user)
        session.commit()
        return user
    return _make_user


@pytest.fixture
def tenant(make_tenant):
    return make_tenant("Granja Uno")


@pytest.fixture
def other_tenant(make_tenant):
    return make_tenant("Granja Dos")


@pytest.fixture
def admin(make_user, tenant):
    return make_user(tenant, "admin@uno.com")


@pytest.fixture
def other_admin(make_user, other_tenant):
    return make_user(other_tenant, "admin@dos.com")


def auth_headers(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def headers(admin):
    return auth_headers(admin)


@pytest.fixture
def other_headers(other_admin):
    return auth_headers(other_admin)


@pytest.fixture
def api():
    return get_settings().API_PREFIX
