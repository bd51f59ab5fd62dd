"""Request validation errors use the domain error envelope."""


def test_missing_required_fields_are_listed(client, api, headers):
    response = client.post(f"{api}/empleados", json={"nombre": "Ana"}, headers=headers)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["statusCode"] == 400
    assert body["error"].startswith("Campos requeridos: ")
    for field in ("apellido", "puesto", "salario", "fecha_contratacion"):
        assert field in body["error"]
    assert "nombre" not in body["error"]


def test_empty_string_counts_as_missing(client, api, headers):
    response = client.post(f"{api}/clientes", json={"nombre": ""}, headers=headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Campos requeridos: nombre"


def test_null_counts_as_missing(client, api, headers):
    response = client.post(f"{api}/clientes", json={"nombre": None}, headers=headers)

    assert response.json()["error"] == "Campos requeridos: nombre"


def test_wrong_type_is_generic_validation_error(client, api, headers):
    response = client.post(
        f"{api}/productos", json={"nombre": "Huevo", "precio": "caro"}, headers=headers
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Error de validación de datos"


def test_negative_number_rejected(client, api, headers):
    response = client.post(f"{api}/productos", json={"nombre": "Huevo", "precio": -1}, headers=headers)

    assert response.status_code == 400


def test_non_numeric_id_in_path(client, api, headers):
    response = client.get(f"{api}/productos/abc", headers=headers)

    assert response.status_code == 400


def test_missing_fields_reported_alongside_type_errors(client, api, headers):
    response = client.post(
        f"{api}/empleados", json={"nombre": "Ana", "salario": "mucho"}, headers=headers
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Campos requeridos: apellido, puesto, fecha_contratacion"


def test_null_on_required_column_in_update(client, api, headers):
    batch = client.post(
        f"{api}/lotes",
        json={"tipo": "Engorde", "fecha_inicio": "2024-01-10", "cantidad": 200, "galera": "G3"},
        headers=headers,
    ).json()["data"]

    response = client.put(f"{api}/lotes/{batch['id']}", json={"galera": None}, headers=headers)

    assert response.status_code == 400
    assert response.json()["error"] == "galera no puede ser nulo"
    current = client.get(f"{api}/lotes/{batch['id']}", headers=headers).json()["data"]
    assert current["galera"] == "G3"
