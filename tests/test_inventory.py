import pytest

from farm_api.core.exceptions import InvalidOperation, ValidationError
from farm_api.services.inventory import apply_stock_operation, stock_status

ITEM = {"nombre": "Maíz", "cantidad": 10, "unidad": "kg", "categoria": "Alimento", "minimo_stock": 5}


@pytest.mark.parametrize(
    "cantidad, minimo, expected",
    [
        (5, 5, "Crítico"),
        (0, 0, "Crítico"),
        (7.5, 5, "Bajo"),
        (8, 5, "Normal"),
        (8, None, "Sin mínimo definido"),
    ],
)
def test_stock_status(cantidad, minimo, expected):
    assert stock_status(cantidad, minimo) == expected


def test_stock_operations():
    assert apply_stock_operation(10, "entrada", 5) == 15
    assert apply_stock_operation(10, "salida", 10) == 0
    assert apply_stock_operation(10, "ajuste", 3) == 3


def test_salida_below_zero_rejected():
    with pytest.raises(InvalidOperation):
        apply_stock_operation(10, "salida", 15)


def test_negative_quantity_rejected():
    with pytest.raises(ValidationError):
        apply_stock_operation(10, "entrada", -1)


def test_unknown_operation_rejected():
    with pytest.raises(InvalidOperation):
        apply_stock_operation(10, "regalo", 1)


def _create(client, api, headers, **overrides):
    response = client.post(f"{api}/inventario", json={**ITEM, **overrides}, headers=headers)
    assert response.status_code == 201
    return response.json()["data"]


def test_item_reports_stock_status(client, api, headers):
    item = _create(client, api, headers)

    assert item["estado_stock"] == "Normal"


def test_unknown_operation_over_http(client, api, headers):
    item = _create(client, api, headers)

    response = client.patch(
        f"{api}/inventario/{item['id']}/stock",
        json={"operacion": "robar", "cantidad": 1},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Operación inválida. Use: entrada, salida o ajuste"


def test_salida_larger_than_stock_changes_nothing(client, api, headers):
    item = _create(client, api, headers)

    response = client.patch(
        f"{api}/inventario/{item['id']}/stock",
        json={"operacion": "salida", "cantidad": 15},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "La cantidad resultante no puede ser negativa"
    current = client.get(f"{api}/inventario/{item['id']}", headers=headers).json()["data"]
    assert current["cantidad"] == 10


def test_salida_to_zero(client, api, headers):
    item = _create(client, api, headers)

    response = client.patch(
        f"{api}/inventario/{item['id']}/stock",
        json={"operacion": "salida", "cantidad": 10},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["cantidad"] == 0
    assert response.json()["data"]["estado_stock"] == "Crítico"


def test_entrada_adds(client, api, headers):
    item = _create(client, api, headers)

    response = client.patch(
        f"{api}/inventario/{item['id']}/stock",
        json={"operacion": "entrada", "cantidad": 2.5},
        headers=headers,
    )

    assert response.json()["data"]["cantidad"] == 12.5


def test_alerts_most_urgent_first(client, api, headers):
    _create(client, api, headers, nombre="Normal", cantidad=100, minimo_stock=5)
    _create(client, api, headers, nombre="Bajo", cantidad=7, minimo_stock=5)
    _create(client, api, headers, nombre="Critico", cantidad=1, minimo_stock=5)
    _create(client, api, headers, nombre="Sin minimo", cantidad=0, minimo_stock=None)

    alerts = client.get(f"{api}/inventario/alertas", headers=headers).json()["data"]

    assert [a["nombre"] for a in alerts] == ["Critico", "Bajo"]
    assert [a["estado_stock"] for a in alerts] == ["Crítico", "Bajo"]


def test_low_stock_filter(client, api, headers):
    _create(client, api, headers, nombre="Lleno", cantidad=100)
    _create(client, api, headers, nombre="Vacío", cantidad=2)

    body = client.get(f"{api}/inventario?stock_bajo=true", headers=headers).json()["data"]

    assert [i["nombre"] for i in body["data"]] == ["Vacío"]


def test_categories(client, api, headers):
    _create(client, api, headers, categoria="Alimento")
    _create(client, api, headers, nombre="Vacuna", categoria="Medicina")

    categories = client.get(f"{api}/inventario/categorias", headers=headers).json()["data"]

    assert categories == [
        {"categoria": "Alimento", "cantidad": 1},
        {"categoria": "Medicina", "cantidad": 1},
    ]
