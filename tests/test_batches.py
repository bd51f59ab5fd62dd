BATCH = {"tipo": "Engorde", "fecha_inicio": "2024-01-10", "cantidad": 200, "galera": "G3"}
BIRD = {"tipo": "Engorde", "edad": 3, "estado": "Viva", "fecha_ingreso": "2024-01-10", "peso": 1.5}


def _batch(client, api, headers, **overrides):
    return client.post(f"{api}/lotes", json={**BATCH, **overrides}, headers=headers).json()["data"]


def test_batch_with_birds_cannot_be_deleted(client, api, headers):
    batch = _batch(client, api, headers)
    client.post(f"{api}/aves", json={**BIRD, "id_lote": batch["id"]}, headers=headers)

    response = client.delete(f"{api}/lotes/{batch['id']}", headers=headers)

    assert response.status_code == 409
    assert response.json()["error"] == "No se puede eliminar el lote porque tiene aves asociadas"
    assert client.get(f"{api}/lotes/{batch['id']}", headers=headers).status_code == 200


def test_empty_batch_is_deleted(client, api, headers):
    batch = _batch(client, api, headers)

    response = client.delete(f"{api}/lotes/{batch['id']}", headers=headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Lote eliminado exitosamente"
    assert client.get(f"{api}/lotes/{batch['id']}", headers=headers).status_code == 404


def test_batch_detail_lists_birds(client, api, headers):
    batch = _batch(client, api, headers)
    for _ in range(2):
        client.post(f"{api}/aves", json={**BIRD, "id_lote": batch["id"]}, headers=headers)

    detail = client.get(f"{api}/lotes/{batch['id']}", headers=headers).json()["data"]
    listed = client.get(f"{api}/lotes", headers=headers).json()["data"]["data"][0]

    assert detail["total_aves"] == 2
    assert len(detail["aves"]) == 2
    assert listed["total_aves"] == 2


def test_batch_filters(client, api, headers):
    _batch(client, api, headers, estado="Activo", fecha_inicio="2024-01-01")
    _batch(client, api, headers, estado="Inactivo", fecha_inicio="2024-06-01")

    inactive = client.get(f"{api}/lotes?estado=Inactivo", headers=headers).json()["data"]
    recent = client.get(f"{api}/lotes?fecha_desde=2024-03-01", headers=headers).json()["data"]

    assert [b["estado"] for b in inactive["data"]] == ["Inactivo"]
    assert [b["fecha_inicio"] for b in recent["data"]] == ["2024-06-01"]


def test_invalid_enum_value(client, api, headers):
    response = client.post(f"{api}/lotes", json={**BATCH, "tipo": "Patos"}, headers=headers)

    assert response.status_code == 400


def test_bird_not_found_message(client, api, headers):
    response = client.get(f"{api}/aves/999", headers=headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Ave no encontrada"


def test_bird_statistics(client, api, headers):
    client.post(f"{api}/aves", json={**BIRD, "tipo": "Ponedoras", "produccion_huevos": 12}, headers=headers)
    client.post(f"{api}/aves", json={**BIRD, "tipo": "Ponedoras", "produccion_huevos": 8}, headers=headers)
    client.post(f"{api}/aves", json={**BIRD, "estado": "Muerta"}, headers=headers)

    stats = client.get(f"{api}/aves/estadisticas", headers=headers).json()["data"]

    assert stats["total_aves"] == 3
    assert stats["total_produccion_huevos"] == 20
    groups = {(g["estado"], g["tipo"]): g["cantidad"] for g in stats["estadisticas"]}
    assert groups == {("Viva", "Ponedoras"): 2, ("Muerta", "Engorde"): 1}


def test_bird_with_records_cannot_be_deleted(client, api, headers):
    bird = client.post(f"{api}/aves", json=BIRD, headers=headers).json()["data"]
    client.post(
        f"{api}/control-huevos",
        json={"id_ave": bird["id"], "fecha": "2024-02-01", "cantidad_huevos": 1},
        headers=headers,
    )

    response = client.delete(f"{api}/aves/{bird['id']}", headers=headers)

    assert response.status_code == 409
