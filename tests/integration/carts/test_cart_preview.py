import pytest

pytestmark = pytest.mark.integration

URL = "/api/v1/cart/preview"


def test_preview_lines_and_total(customer_client, make_cart):
    make_cart(7, [(1, 2, "12.50"), (2, 1, "30.00")])

    response = customer_client.get(URL, {"usuarioId": 7})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == "55.00"
    assert [line["productoId"] for line in data["items"]] == [1, 2]
    assert data["items"][0]["subtotal"] == "25.00"


def test_no_open_cart_is_empty(customer_client):
    response = customer_client.get(URL, {"usuarioId": 7})

    assert response.json() == {"items": [], "total": "0.00"}


def test_usuario_id_required(customer_client):
    response = customer_client.get(URL)

    assert response.status_code == 400
    assert "usuarioId" in response.json()["details"]
