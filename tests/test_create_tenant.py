from farm_api.core.security import verify_password
from farm_api.models.tenant import Tenant
from farm_api.models.user import User, UserRole

from scripts.create_tenant import create_tenant_with_admin, email_taken


def test_creates_tenant_and_admin(session):
    admin = create_tenant_with_admin(session, "Granja Nueva", "jefe@nueva.com", "clave123", "Jefe")

    tenant = session.get(Tenant, admin.tenant_id)
    assert tenant.nombre == "Granja Nueva"
    assert tenant.activo is True
    assert tenant.correo == "jefe@nueva.com"

    stored = session.query(User).filter(User.email == "jefe@nueva.com").one()
    assert stored.rol == UserRole.ADMIN
    assert verify_password("clave123", stored.password_hash)


def test_new_admin_can_log_in(client, api, session):
    create_tenant_with_admin(session, "Granja Nueva", "jefe@nueva.com", "clave123", "Jefe")

    response = client.post(f"{api}/auth/login", json={"email": "jefe@nueva.com", "password": "clave123"})

    assert response.status_code == 200


def test_email_is_stored_lower_case(session):
    admin = create_tenant_with_admin(session, "Granja Nueva", " Jefe@Nueva.COM ", "clave123", "Jefe")

    assert admin.email == "jefe@nueva.com"


def test_existing_email_detected_ignoring_case(session, admin):
    assert email_taken(session, "ADMIN@Uno.com")
    assert not email_taken(session, "otro@uno.com")
