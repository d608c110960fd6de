"""JWT login and the ``/api/v1/me`` identity endpoint."""

import pytest

pytestmark = pytest.mark.integration

TOKEN_URL = "/api/v1/auth/token/"
ME_URL = "/api/v1/me"


def test_me_requires_token(api_client):
    assert api_client.get(ME_URL).status_code == 401


def test_bad_token_rejected(api_client):
    api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")

    assert api_client.get(ME_URL).status_code == 401


def test_token_login_and_roles(api_client, operator_user):
    token = api_client.post(
        TOKEN_URL, {"username": "operador", "password": "testpass123"}, format="json"
    )
    assert token.status_code == 200

    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.json()['access']}")
    response = api_client.get(ME_URL)

    assert response.status_code == 200
    assert response.json() == {
        "usuarioId": operator_user.pk,
        "username": "operador",
        "roles": ["operador"],
    }


def test_wrong_password(api_client, operator_user):
    response = api_client.post(
        TOKEN_URL, {"username": "operador", "password": "nope"}, format="json"
    )

    assert response.status_code == 401
