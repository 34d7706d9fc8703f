"""Login, logout, session cookie and protected route behaviour."""

from __future__ import annotations

from datetime import timedelta
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from config import SESSION_COOKIE_NAME, Settings
from conftest import ADMIN_PASSWORD, FakeMongoClient
from main import create_app
from utils import utc_now

HOTEL = {
    "title": "Open House",
    "location": "Almaty",
    "price_per_night": 30000,
    "stars": 3,
    "rooms": 5,
}


def _sessions(fake_client: FakeMongoClient):
    return fake_client["easybooking"]["sessions"]


def test_login_page_renders_for_anonymous(client: TestClient) -> None:
    response = client.get("/login")

    assert response.status_code == 200
    assert 'name="password"' in response.text


def test_login_sets_http_only_session_cookie(client: TestClient, fake_client: FakeMongoClient) -> None:
    response = client.post(
        "/login", data={"username": "admin", "password": ADMIN_PASSWORD}, follow_redirects=False
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/hotels"
    set_cookie = response.headers["set-cookie"].lower()
    assert set_cookie.startswith(f"{SESSION_COOKIE_NAME}=")
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie
    assert "max-age=21600" in set_cookie
    assert "secure" not in set_cookie

    token = client.cookies.get(SESSION_COOKIE_NAME)
    stored = _sessions(fake_client).documents
    assert len(stored) == 1
    assert stored[0]["_id"] != token
    assert stored[0]["user"]["username"] == "admin"


@pytest.mark.parametrize(
    ("username", "password"),
    [("admin", "wrong-password"), ("nobody", ADMIN_PASSWORD)],
)
def test_login_failures_do_not_reveal_which_part_was_wrong(
    client: TestClient, username: str, password: str
) -> None:
    response = client.post("/login", data={"username": username, "password": password})

    assert response.status_code == 401
    assert response.text == "Invalid credentials"
    assert SESSION_COOKIE_NAME not in client.cookies


def test_login_with_blank_field_is_rejected(client: TestClient) -> None:
    response = client.post("/login", data={"username": "admin", "password": ""})

    assert response.status_code == 400
    assert response.text == "Invalid credentials"


def test_login_page_redirects_when_already_signed_in(admin_client: TestClient) -> None:
    response = admin_client.get("/login", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/hotels"


def test_login_again_replaces_active_session(
    admin_client: TestClient, fake_client: FakeMongoClient
) -> None:
    old_token = admin_client.cookies.get(SESSION_COOKIE_NAME)

    response = admin_client.post(
        "/login", data={"username": "admin", "password": ADMIN_PASSWORD}, follow_redirects=False
    )

    set_cookies = response.headers.get_list("set-cookie")
    assert response.status_code == 302
    assert len(set_cookies) == 1
    new_token = admin_client.cookies.get(SESSION_COOKIE_NAME)
    assert new_token != old_token
    assert set_cookies[0].startswith(f"{SESSION_COOKIE_NAME}={new_token}")
    assert len(_sessions(fake_client).documents) == 1
    assert admin_client.post("/api/hotels", json=HOTEL).status_code == 201


def test_session_cookie_is_reissued_and_expiry_slides(
    admin_client: TestClient, fake_client: FakeMongoClient
) -> None:
    session = _sessions(fake_client).documents[0]
    session["expires_at"] = utc_now() + timedelta(minutes=1)

    response = admin_client.get("/hotels")

    assert SESSION_COOKIE_NAME in response.headers.get("set-cookie", "")
    assert session["expires_at"] > utc_now() + timedelta(hours=5)


def test_expired_session_is_anonymous(admin_client: TestClient, fake_client: FakeMongoClient) -> None:
    _sessions(fake_client).documents[0]["expires_at"] = utc_now() - timedelta(seconds=1)

    response = admin_client.post("/api/hotels", json=HOTEL)

    assert response.status_code == 401


def test_logout_destroys_session(admin_client: TestClient, fake_client: FakeMongoClient) -> None:
    token = admin_client.cookies.get(SESSION_COOKIE_NAME)

    response = admin_client.post("/logout", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/login"
    assert _sessions(fake_client).documents == []

    admin_client.cookies.set(SESSION_COOKIE_NAME, token)
    assert admin_client.post("/api/hotels", json=HOTEL).status_code == 401


def test_forged_cookie_is_ignored(client: TestClient) -> None:
    client.cookies.set(SESSION_COOKIE_NAME, "forged-token")

    assert client.post("/api/hotels", json=HOTEL).status_code == 401


@pytest.fixture()
def open_client() -> Iterator[TestClient]:
    settings = Settings(admin_password=ADMIN_PASSWORD, auth_enabled=False)
    app = create_app(settings, client=FakeMongoClient())  # type: ignore[arg-type]
    with TestClient(app) as test_client:
        yield test_client


def test_disabled_auth_leaves_routes_open(open_client: TestClient) -> None:
    created = open_client.post("/api/hotels", json=HOTEL)
    login = open_client.get("/login", follow_redirects=False)
    listing = open_client.get("/hotels").text

    assert created.status_code == 201
    assert login.status_code == 302
    assert "/edit" in listing
    assert 'class="btn" href="/login"' not in listing
