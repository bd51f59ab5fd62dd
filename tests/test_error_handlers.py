import pytest
from fastapi import APIRouter
from sqlalchemy import exc as sa_exc

from farm_api.core.error_handlers import missing_fields, normalize_db_error
from farm_api.models.vehicle import Vehicle


class _PgError(Exception):
    def __init__(self, message, pgcode=None):
        super().__init__(message)
        self.pgcode = pgcode


def _integrity(message, pgcode=None):
    return sa_exc.IntegrityError("INSERT ...", {}, _PgError(message, pgcode))


@pytest.mark.parametrize(
    "error, status_code",
    [
        (_integrity("duplicate key value", "23505"), 409),
        (_integrity("UNIQUE constraint failed: vehiculos.placa"), 409),
        (_integrity("violates foreign key", "23503"), 400),
        (_integrity("NOT NULL constraint failed"), 400),
        (sa_exc.NoResultFound(), 404),
        (sa_exc.OperationalError("SELECT 1", {}, _PgError("connection refused")), 503),
        (sa_exc.DataError("SELECT 1", {}, _PgError("invalid input")), 400),
        (sa_exc.ProgrammingError("SELECT 1", {}, _PgError("syntax error")), 500),
        (RuntimeError("boom"), 500),
    ],
)
def test_normalize_db_error(error, status_code):
    assert normalize_db_error(error)[0] == status_code


def test_missing_fields_only_for_missing_errors():
    missing = [
        {"type": "missing", "loc": ("body", "nombre"), "input": {}},
        {"type": "string_too_short", "loc": ("body", "placa"), "input": ""},
    ]
    mixed = missing + [{"type": "int_parsing", "loc": ("body", "anio"), "input": "x"}]

    assert missing_fields(missing) == ["nombre", "placa"]
    assert missing_fields(mixed) == []


@pytest.fixture
def failing_app(app, api):
    router = APIRouter()

    @router.get("/fallo-db")
    def db_failure():
        raise sa_exc.OperationalError("SELECT 1", {}, _PgError("server closed the connection"))

    @router.get("/fallo")
    def crash():
        raise RuntimeError("boom")

    app.include_router(router, prefix=api)
    return app


def test_database_error_envelope(failing_app, client, api):
    response = client.get(f"{api}/fallo-db")

    assert response.status_code == 503
    body = response.json()
    assert body["error"] == "Error de conexión a la base de datos"
    assert body["path"] == f"{api}/fallo-db"
    assert body["method"] == "GET"
    assert "timestamp" in body
    # Not production: diagnostic fields are included
    assert "stack" in body
    assert "details" in body


def test_unhandled_error_is_500(failing_app, client, api):
    response = client.get(f"{api}/fallo")

    assert response.status_code == 500
    assert response.json()["error"] == "Error interno del servidor"


def test_unique_constraint_maps_to_conflict(session, tenant):
    session.add(Vehicle(tenant_id=tenant.id, tipo="Camión", placa="ABC-123"))
    session.commit()
    session.add(Vehicle(tenant_id=tenant.id, tipo="Camión", placa="ABC-123"))

    with pytest.raises(sa_exc.IntegrityError) as excinfo:
        session.commit()
    session.rollback()

    assert normalize_db_error(excinfo.value)[0] == 409
