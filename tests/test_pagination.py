import pytest

from farm_api.utils.pagination import Pagination, paginated

CLIENT = {"nombre": "Cliente"}


@pytest.mark.parametrize(
    "page, limit, expected",
    [
        (None, None, (1, 10)),
        ("0", "0", (1, 10)),
        ("-3", "5", (1, 5)),
        ("2", "1000", (2, 100)),
        ("abc", "x", (1, 10)),
        ("3", "-1", (3, 1)),
    ],
)
def test_parse_is_lenient(page, limit, expected):
    pagination = Pagination.parse(page, limit)

    assert (pagination.page, pagination.limit) == expected


def test_offset():
    assert Pagination(page=3, limit=20).offset == 40


def test_paginated_envelope():
    body = paginated([1, 2, 3], 21, Pagination(page=1, limit=10))

    assert body == {
        "data": [1, 2, 3],
        "pagination": {"page": 1, "limit": 10, "total": 21, "totalPages": 3},
    }


def test_paginated_empty():
    assert paginated([], 0, Pagination())["pagination"]["totalPages"] == 0


def test_limit_is_clamped_in_requests(client, api, headers):
    for i in range(3):
        client.post(f"{api}/clientes", json={"nombre": f"Cliente {i}"}, headers=headers)

    body = client.get(f"{api}/clientes?limit=1000&page=0", headers=headers).json()["data"]

    assert body["pagination"] == {"page": 1, "limit": 100, "total": 3, "totalPages": 1}
    assert len(body["data"]) == 3


def test_pages_split_results(client, api, headers):
    for i in range(5):
        client.post(f"{api}/clientes", json={"nombre": f"Cliente {i}"}, headers=headers)

    page_2 = client.get(f"{api}/clientes?limit=2&page=2", headers=headers).json()["data"]
    page_3 = client.get(f"{api}/clientes?limit=2&page=3", headers=headers).json()["data"]

    assert [c["nombre"] for c in page_2["data"]] == ["Cliente 2", "Cliente 3"]
    assert [c["nombre"] for c in page_3["data"]] == ["Cliente 4"]
    assert page_3["pagination"]["totalPages"] == 3


def test_search_filter(client, api, headers):
    client.post(f"{api}/clientes", json={"nombre": "Supermercado Norte"}, headers=headers)
    client.post(f"{api}/clientes", json={"nombre": "Tienda Sur"}, headers=headers)

    body = client.get(f"{api}/clientes?search=norte", headers=headers).json()["data"]

    assert [c["nombre"] for c in body["data"]] == ["Supermercado Norte"]
