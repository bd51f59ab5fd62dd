PRODUCT = {"nombre": "Huevo AA", "precio": 4.5, "stock": 20, "categoria": "Huevos"}


def _create(client, api, headers, **overrides):
    response = client.post(f"{api}/productos", json={**PRODUCT, **overrides}, headers=headers)
    assert response.status_code == 201
    return response.json()["data"]


def test_stock_alias_sets_value(client, api, headers):
    product = _create(client, api, headers)

    response = client.patch(f"{api}/productos/{product['id']}/stock", json={"stock": 7}, headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["stock"] == 7


def test_stock_salida(client, api, headers):
    product = _create(client, api, headers)

    response = client.patch(
        f"{api}/productos/{product['id']}/stock",
        json={"operacion": "salida", "cantidad": 5},
        headers=headers,
    )

    assert response.json()["data"]["stock"] == 15


def test_stock_never_negative(client, api, headers):
    product = _create(client, api, headers)

    response = client.patch(
        f"{api}/productos/{product['id']}/stock",
        json={"operacion": "salida", "cantidad": 21},
        headers=headers,
    )

    assert response.status_code == 400
    assert client.get(f"{api}/productos/{product['id']}", headers=headers).json()["data"]["stock"] == 20


def test_categories_route_is_not_an_id(client, api, headers):
    _create(client, api, headers)

    response = client.get(f"{api}/productos/categorias", headers=headers)

    assert response.status_code == 200


def test_partial_update_keeps_other_fields(client, api, headers):
    product = _create(client, api, headers)

    response = client.put(f"{api}/productos/{product['id']}", json={"precio": 5}, headers=headers)

    data = response.json()["data"]
    assert data["precio"] == 5
    assert data["nombre"] == "Huevo AA"
    assert data["stock"] == 20


def test_update_rejects_null_required_field(client, api, headers):
    product = _create(client, api, headers)

    response = client.put(f"{api}/productos/{product['id']}", json={"nombre": None}, headers=headers)

    assert response.status_code == 400
    assert response.json()["error"] == "nombre no puede ser nulo"


def test_unknown_stock_operation(client, api, headers):
    product = _create(client, api, headers)

    response = client.patch(
        f"{api}/productos/{product['id']}/stock",
        json={"operacion": "robar", "cantidad": 1},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Operación inválida. Use: entrada, salida o ajuste"
    assert client.get(f"{api}/productos/{product['id']}", headers=headers).json()["data"]["stock"] == 20


def test_unknown_product(client, api, headers):
    response = client.get(f"{api}/productos/999", headers=headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Producto no encontrado"
