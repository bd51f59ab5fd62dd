from farm_api.models.user import User

from tests.conftest import PASSWORD

NEW_USER = {"nombre": "Carla", "email": "carla@uno.com", "password": "clave123", "rol": "supervisor"}


def test_create_user_in_own_tenant(client, api, headers, tenant):
    response = client.post(f"{api}/usuarios", json=NEW_USER, headers=headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["tenant_id"] == tenant.id
    assert data["rol"] == "supervisor"
    assert "password_hash" not in data

    login = client.post(f"{api}/auth/login", json={"email": "carla@uno.com", "password": "clave123"})
    assert login.status_code == 200


def test_email_is_unique_across_tenants(client, api, headers, other_admin):
    response = client.post(f"{api}/usuarios", json={**NEW_USER, "email": other_admin.email}, headers=headers)

    assert response.status_code == 409


def test_list_only_own_tenant(client, api, headers, other_admin):
    body = client.get(f"{api}/usuarios", headers=headers).json()["data"]

    assert [u["email"] for u in body["data"]] == ["admin@uno.com"]


def test_partial_update(client, api, headers, session):
    created = client.post(f"{api}/usuarios", json=NEW_USER, headers=headers).json()["data"]

    response = client.put(f"{api}/usuarios/{created['id']}", json={"activo": False}, headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["activo"] is False
    assert response.json()["data"]["nombre"] == "Carla"


def test_password_update_is_hashed(client, api, headers, session):
    created = client.post(f"{api}/usuarios", json=NEW_USER, headers=headers).json()["data"]

    client.put(f"{api}/usuarios/{created['id']}", json={"password": "otra-clave"}, headers=headers)

    session.expire_all()
    assert session.get(User, created["id"]).password_hash != "otra-clave"
    login = client.post(f"{api}/auth/login", json={"email": "carla@uno.com", "password": "otra-clave"})
    assert login.status_code == 200


def test_cannot_delete_self(client, api, headers, admin):
    response = client.delete(f"{api}/usuarios/{admin.id}", headers=headers)

    assert response.status_code == 400
    assert response.json()["error"] == "No puedes eliminar tu propia cuenta"


def test_delete_user(client, api, headers):
    created = client.post(f"{api}/usuarios", json=NEW_USER, headers=headers).json()["data"]

    assert client.delete(f"{api}/usuarios/{created['id']}", headers=headers).status_code == 200
    assert client.post(
        f"{api}/auth/login", json={"email": "carla@uno.com", "password": "clave123"}
    ).status_code == 401


def test_user_of_other_tenant_is_not_found(client, api, headers, other_admin):
    response = client.get(f"{api}/usuarios/{other_admin.id}", headers=headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Usuario no encontrado"


def test_admin_password_still_works(client, api, admin):
    response = client.post(f"{api}/auth/login", json={"email": admin.email, "password": PASSWORD})

    assert response.status_code == 200


def test_email_stored_lower_case_and_unique_ignoring_case(client, api, headers):
    response = client.post(f"{api}/usuarios", json={**NEW_USER, "email": "Carla@Uno.COM"}, headers=headers)

    assert response.status_code == 201
    assert response.json()["data"]["email"] == "carla@uno.com"

    duplicate = client.post(f"{api}/usuarios", json={**NEW_USER, "email": "CARLA@uno.com"}, headers=headers)
    assert duplicate.status_code == 409
