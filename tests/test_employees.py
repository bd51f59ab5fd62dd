EMPLOYEE = {
    "nombre": "Ana",
    "apellido": "López",
    "puesto": "Galponero",
    "salario": 1200,
    "fecha_contratacion": "2023-05-01",
}
ATTENDANCE = {"fecha": "2024-04-01", "hora_entrada": "07:00:00"}


def _employee(client, api, headers, **overrides):
    return client.post(f"{api}/empleados", json={**EMPLOYEE, **overrides}, headers=headers).json()["data"]


def test_register_attendance_for_employee(client, api, headers):
    employee = _employee(client, api, headers)

    response = client.post(f"{api}/empleados/{employee['id']}/asistencia", json=ATTENDANCE, headers=headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["id_empleado"] == employee["id"]
    assert data["estado"] == "Presente"


def test_duplicate_attendance_same_day(client, api, headers):
    employee = _employee(client, api, headers)
    client.post(f"{api}/empleados/{employee['id']}/asistencia", json=ATTENDANCE, headers=headers)

    response = client.post(
        f"{api}/asistencias", json={**ATTENDANCE, "id_empleado": employee["id"]}, headers=headers
    )

    assert response.status_code == 409
    assert response.json()["error"] == "Ya existe un registro de asistencia para esta fecha"


def test_attendance_for_unknown_employee(client, api, headers):
    response = client.post(f"{api}/empleados/999/asistencia", json=ATTENDANCE, headers=headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Empleado no encontrado"


def test_moving_attendance_onto_taken_day(client, api, headers):
    employee = _employee(client, api, headers)
    client.post(f"{api}/asistencias", json={**ATTENDANCE, "id_empleado": employee["id"]}, headers=headers)
    second = client.post(
        f"{api}/asistencias",
        json={**ATTENDANCE, "fecha": "2024-04-02", "id_empleado": employee["id"]},
        headers=headers,
    ).json()["data"]

    response = client.put(f"{api}/asistencias/{second['id']}", json={"fecha": "2024-04-01"}, headers=headers)

    assert response.status_code == 409


def test_attendance_stats(client, api, headers):
    employee = _employee(client, api, headers)
    client.post(f"{api}/asistencias", json={**ATTENDANCE, "id_empleado": employee["id"]}, headers=headers)
    client.post(
        f"{api}/asistencias",
        json={**ATTENDANCE, "fecha": "2024-04-02", "estado": "Tardanza", "id_empleado": employee["id"]},
        headers=headers,
    )

    stats = client.get(f"{api}/asistencias/stats", headers=headers).json()["data"]

    assert stats["total_registros"] == 2
    assert {row["estado"]: row["cantidad"] for row in stats["asistencias_por_estado"]} == {
        "Presente": 1,
        "Tardanza": 1,
    }


def test_employee_with_attendance_cannot_be_deleted(client, api, headers):
    employee = _employee(client, api, headers)
    client.post(f"{api}/empleados/{employee['id']}/asistencia", json=ATTENDANCE, headers=headers)

    assert client.delete(f"{api}/empleados/{employee['id']}", headers=headers).status_code == 409


def test_employee_without_records_is_deleted(client, api, headers):
    employee = _employee(client, api, headers)

    assert client.delete(f"{api}/empleados/{employee['id']}", headers=headers).status_code == 200


def test_positions(client, api, headers):
    _employee(client, api, headers)
    _employee(client, api, headers, nombre="Luis")
    _employee(client, api, headers, puesto="Chofer")

    positions = client.get(f"{api}/empleados/puestos", headers=headers).json()["data"]

    assert positions == [{"puesto": "Chofer", "cantidad": 1}, {"puesto": "Galponero", "cantidad": 2}]


def test_loans(client, api, headers):
    employee = _employee(client, api, headers)
    for monto in (100, 300):
        created = client.post(
            f"{api}/prestamos-empleados",
            json={"id_empleado": employee["id"], "fecha": "2024-04-01", "monto": monto},
            headers=headers,
        )
        assert created.status_code == 201

    stats = client.get(f"{api}/prestamos-empleados/stats", headers=headers).json()["data"]

    assert stats["total_prestamos"] == 2
    assert stats["monto_total"] == 400
