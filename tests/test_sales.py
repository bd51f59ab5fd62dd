"""Sales write header, lines and stock decrements atomically."""
from farm_api.models.sale import Sale, SaleLine


def _product(client, api, headers, nombre, stock, precio=2.0):
    response = client.post(
        f"{api}/productos",
        json={"nombre": nombre, "precio": precio, "stock": stock},
        headers=headers,
    )
    return response.json()["data"]["id"]


def _stock(client, api, headers, product_id):
    return client.get(f"{api}/productos/{product_id}", headers=headers).json()["data"]["stock"]


def test_sale_decrements_stock_and_computes_total(client, api, headers):
    eggs = _product(client, api, headers, "Huevos", stock=100, precio=0.25)
    hens = _product(client, api, headers, "Gallina", stock=10, precio=8)
    client_id = client.post(f"{api}/clientes", json={"nombre": "Tienda"}, headers=headers).json()["data"]["id"]

    response = client.post(
        f"{api}/ventas",
        json={
            "id_cliente": client_id,
            "fecha": "2024-03-01",
            "detalles": [
                {"id_producto": eggs, "cantidad": 30, "precio_unitario": 0.25},
                {"id_producto": hens, "cantidad": 2, "precio_unitario": 8},
            ],
        },
        headers=headers,
    )

    assert response.status_code == 201
    sale = response.json()["data"]
    assert sale["total"] == 23.5
    assert sale["estado"] == "Completada"
    assert sale["cliente_nombre"] == "Tienda"
    assert [line["subtotal"] for line in sale["detalles"]] == [7.5, 16]
    assert _stock(client, api, headers, eggs) == 70
    assert _stock(client, api, headers, hens) == 8


def test_insufficient_stock_rolls_back_everything(client, api, headers, session):
    eggs = _product(client, api, headers, "Huevos", stock=100)
    hens = _product(client, api, headers, "Gallina", stock=1)

    response = client.post(
        f"{api}/ventas",
        json={
            "fecha": "2024-03-01",
            "detalles": [
                {"id_producto": eggs, "cantidad": 30, "precio_unitario": 1},
                {"id_producto": hens, "cantidad": 2, "precio_unitario": 8},
            ],
        },
        headers=headers,
    )

    assert response.status_code == 400
    assert "Stock insuficiente" in response.json()["error"]
    assert _stock(client, api, headers, eggs) == 100
    assert _stock(client, api, headers, hens) == 1
    assert session.query(Sale).count() == 0
    assert session.query(SaleLine).count() == 0


def test_unknown_product_is_404_and_nothing_stored(client, api, headers, session):
    eggs = _product(client, api, headers, "Huevos", stock=100)

    response = client.post(
        f"{api}/ventas",
        json={
            "fecha": "2024-03-01",
            "detalles": [
                {"id_producto": eggs, "cantidad": 1, "precio_unitario": 1},
                {"id_producto": 999, "cantidad": 1, "precio_unitario": 1},
            ],
        },
        headers=headers,
    )

    assert response.status_code == 404
    assert session.query(Sale).count() == 0
    assert _stock(client, api, headers, eggs) == 100


def test_sale_needs_lines(client, api, headers):
    response = client.post(f"{api}/ventas", json={"fecha": "2024-03-01", "detalles": []}, headers=headers)

    assert response.status_code == 400


def test_cancel_sale_keeps_stock(client, api, headers):
    eggs = _product(client, api, headers, "Huevos", stock=10)
    sale = client.post(
        f"{api}/ventas",
        json={"fecha": "2024-03-01", "detalles": [{"id_producto": eggs, "cantidad": 4, "precio_unitario": 1}]},
        headers=headers,
    ).json()["data"]

    response = client.patch(f"{api}/ventas/{sale['id']}/estado", json={"estado": "Cancelada"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["estado"] == "Cancelada"
    assert _stock(client, api, headers, eggs) == 6


def test_sale_of_other_tenant(client, api, headers, other_headers):
    eggs = _product(client, api, headers, "Huevos", stock=10)
    sale = client.post(
        f"{api}/ventas",
        json={"fecha": "2024-03-01", "detalles": [{"id_producto": eggs, "cantidad": 1, "precio_unitario": 1}]},
        headers=headers,
    ).json()["data"]

    response = client.get(f"{api}/ventas/{sale['id']}", headers=other_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Venta no encontrada"


def test_product_of_other_tenant_cannot_be_sold(client, api, headers, other_headers):
    foreign = _product(client, api, other_headers, "Huevos", stock=10)

    response = client.post(
        f"{api}/ventas",
        json={"fecha": "2024-03-01", "detalles": [{"id_producto": foreign, "cantidad": 1, "precio_unitario": 1}]},
        headers=headers,
    )

    assert response.status_code == 404
    assert _stock(client, api, other_headers, foreign) == 10


def test_statistics(client, api, headers):
    eggs = _product(client, api, headers, "Huevos", stock=100)
    for fecha, cantidad in (("2024-03-01", 2), ("2024-03-01", 3), ("2024-03-02", 5)):
        client.post(
            f"{api}/ventas",
            json={"fecha": fecha, "detalles": [{"id_producto": eggs, "cantidad": cantidad, "precio_unitario": 2}]},
            headers=headers,
        )

    stats = client.get(f"{api}/ventas/estadisticas", headers=headers).json()["data"]

    assert stats["total_ventas"] == {"cantidad": 3, "suma": 20.0, "promedio": 20 / 3}
    assert stats["ventas_por_dia"][0] == {"fecha": "2024-03-02", "cantidad": 1, "total": 10.0}


def test_client_sales_history(client, api, headers):
    eggs = _product(client, api, headers, "Huevos", stock=100)
    client_id = client.post(f"{api}/clientes", json={"nombre": "Tienda"}, headers=headers).json()["data"]["id"]
    client.post(
        f"{api}/ventas",
        json={
            "id_cliente": client_id,
            "fecha": "2024-03-01",
            "detalles": [{"id_producto": eggs, "cantidad": 1, "precio_unitario": 1}],
        },
        headers=headers,
    )

    history = client.get(f"{api}/clientes/{client_id}/ventas", headers=headers).json()["data"]
    assert history["pagination"]["total"] == 1

    blocked = client.delete(f"{api}/clientes/{client_id}", headers=headers)
    assert blocked.status_code == 409
