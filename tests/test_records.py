"""Health, mortality and egg production records."""
import pytest

BIRD = {"tipo": "Ponedoras", "edad": 30, "estado": "Viva", "fecha_ingreso": "2024-01-10"}


@pytest.fixture
def bird_id(client, api, headers):
    return client.post(f"{api}/aves", json=BIRD, headers=headers).json()["data"]["id"]


def test_health_record_needs_existing_bird(client, api, headers):
    response = client.post(
        f"{api}/salud-aves",
        json={"id_ave": 999, "fecha": "2024-02-01", "tipo_tratamiento": "Vacuna"},
        headers=headers,
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Ave no encontrada"


def test_health_stats(client, api, headers, bird_id, admin):
    for tipo, costo in (("Vacuna", 10), ("Vacuna", 15), ("Desparasitación", 5)):
        created = client.post(
            f"{api}/salud-aves",
            json={"id_ave": bird_id, "fecha": "2024-02-01", "tipo_tratamiento": tipo, "costo": costo},
            headers=headers,
        )
        assert created.status_code == 201
        assert created.json()["data"]["id_usuario"] == admin.id

    stats = client.get(f"{api}/salud-aves/stats", headers=headers).json()["data"]

    assert stats["total_registros"] == 3
    assert stats["costo_total"] == 30
    assert stats["tratamientos_por_tipo"][0] == {"tipo_tratamiento": "Vacuna", "cantidad": 2}


def test_mortality_stats(client, api, headers):
    for fecha, muertes, causa in (
        ("2024-02-02", 3, "Calor"),
        ("2024-02-01", 1, "Enfermedad"),
        ("2024-02-02", 2, "Calor"),
    ):
        client.post(
            f"{api}/control-muertes",
            json={"fecha": fecha, "cantidad_muertes": muertes, "causa_principal": causa},
            headers=headers,
        )

    stats = client.get(f"{api}/control-muertes/stats", headers=headers).json()["data"]

    assert stats["total_muertes"] == 6
    assert stats["causas_principales"][0] == {"causa_principal": "Calor", "cantidad": 2, "total": 5.0}
    assert [day["fecha"] for day in stats["muertes_por_dia"]] == ["2024-02-01", "2024-02-02"]


def test_egg_stats_with_date_range(client, api, headers, bird_id):
    for fecha, huevos, calidad in (
        ("2024-02-01", 100, "Excelente"),
        ("2024-02-02", 80, "Buena"),
        ("2024-03-01", 50, "Buena"),
    ):
        client.post(
            f"{api}/control-huevos",
            json={"id_ave": bird_id, "fecha": fecha, "cantidad_huevos": huevos, "calidad": calidad},
            headers=headers,
        )

    stats = client.get(
        f"{api}/control-huevos/stats?fecha_desde=2024-02-01&fecha_hasta=2024-02-28", headers=headers
    ).json()["data"]

    assert stats["total_registros"] == 2
    assert stats["total_huevos"] == 180
    assert stats["promedio_huevos_por_registro"] == 90
    assert {row["calidad"] for row in stats["huevos_por_calidad"]} == {"Excelente", "Buena"}


def test_invalid_egg_quality(client, api, headers):
    response = client.post(
        f"{api}/control-huevos",
        json={"fecha": "2024-02-01", "cantidad_huevos": 10, "calidad": "Dorada"},
        headers=headers,
    )

    assert response.status_code == 400


def test_records_are_tenant_scoped(client, api, headers, other_headers):
    record = client.post(
        f"{api}/control-muertes", json={"fecha": "2024-02-01", "cantidad_muertes": 1}, headers=headers
    ).json()["data"]

    assert client.get(f"{api}/control-muertes/{record['id']}", headers=other_headers).status_code == 404
    stats = client.get(f"{api}/control-muertes/stats", headers=other_headers).json()["data"]
    assert stats["total_muertes"] == 0
