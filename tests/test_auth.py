import pytest

from conftest import DEFAULT_PASSWORD, sign_in, sign_up_and_in

pytestmark = pytest.mark.anyio


async def test_sign_up_creates_active_account(client):
    response = await client.post("/auth/sign-up", json={"email": "New@Example.com", "password": DEFAULT_PASSWORD})

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "new@example.com"
    assert body["is_active"] is True
    assert "password_hash" not in body


async def test_duplicate_sign_up_is_a_conflict(client):
    await client.post("/auth/sign-up", json={"email": "dup@example.com", "password": DEFAULT_PASSWORD})

    response = await client.post("/auth/sign-up", json={"email": "DUP@example.com", "password": DEFAULT_PASSWORD})

    assert response.status_code == 409
    assert response.json()["message"] == "User already registered"


async def test_sign_in_sets_cookie_and_points_to_dashboard(client):
    await client.post("/auth/sign-up", json={"email": "a@example.com", "password": DEFAULT_PASSWORD})

    response = await client.post("/auth/sign-in", json={"email": "a@example.com", "password": DEFAULT_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["redirect"] == "/dashboard"
    assert body["token_type"] == "bearer"
    assert "access_token" in response.cookies


async def test_cookie_session_is_recognised(client):
    await client.post("/auth/sign-up", json={"email": "c@example.com", "password": DEFAULT_PASSWORD})
    await client.post("/auth/sign-in", json={"email": "c@example.com", "password": DEFAULT_PASSWORD})

    response = await client.get("/auth/session")

    body = response.json()
    assert body["authenticated"] is True
    assert body["email"] == "c@example.com"
    assert body["expires_at"]


@pytest.mark.parametrize("email, password", [
    ("a@example.com", "wrong-password"),
    ("nobody@example.com", DEFAULT_PASSWORD),
])
async def test_bad_credentials_are_rejected(client, email, password):
    await client.post("/auth/sign-up", json={"email": "a@example.com", "password": DEFAULT_PASSWORD})

    response = await client.post("/auth/sign-in", json={"email": email, "password": password})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid login credentials"
    assert response.json()["error_code"] == "INVALID_CREDENTIALS"


async def test_session_without_token_is_anonymous(client):
    response = await client.get("/auth/session")

    assert response.status_code == 200
    assert response.json()["authenticated"] is False


async def test_malformed_token_is_anonymous(client):
    response = await client.get("/auth/session", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.json()["authenticated"] is False


async def test_guard_rejects_anonymous_dashboard_with_redirect_hint(client):
    response = await client.get("/dashboard/students")

    assert response.status_code == 401
    body = response.json()
    assert body["error_code"] == "SESSION_REQUIRED"
    assert body["details"] == {"redirect": "/auth"}


async def test_sign_out_revokes_the_session(client):
    headers = await sign_up_and_in(client, "out@example.com")

    response = await client.post("/auth/sign-out", headers=headers)

    assert response.status_code == 200
    assert response.json()["redirect"] == "/auth"
    session = await client.get("/auth/session", headers=headers)
    assert session.json()["authenticated"] is False
    guarded = await client.get("/dashboard", headers=headers)
    assert guarded.status_code == 401


async def test_password_reset_round_trip(client, mailer):
    await client.post("/auth/sign-up", json={"email": "forgot@example.com", "password": DEFAULT_PASSWORD})

    response = await client.post("/auth/password-reset", json={"email": "forgot@example.com"})
    assert response.status_code == 200
    assert len(mailer.reset_mails) == 1
    email, token = mailer.reset_mails[0]
    assert email == "forgot@example.com"

    confirm = await client.post(
        "/auth/password-reset/confirm",
        json={"token": token, "new_password": "brand-new-pw"}
    )
    assert confirm.status_code == 200

    await sign_in(client, "forgot@example.com", "brand-new-pw")
    old = await client.post("/auth/sign-in", json={"email": "forgot@example.com", "password": DEFAULT_PASSWORD})
    assert old.status_code == 401

    reused = await client.post(
        "/auth/password-reset/confirm",
        json={"token": token, "new_password": "another-pw"}
    )
    assert reused.status_code == 401
    assert reused.json()["error_code"] == "TOKEN_ERROR"


async def test_password_reset_does_not_reveal_unknown_accounts(client, mailer):
    known = await client.post("/auth/sign-up", json={"email": "k@example.com", "password": DEFAULT_PASSWORD})
    assert known.status_code == 201

    unknown = await client.post("/auth/password-reset", json={"email": "ghost@example.com"})
    existing = await client.post("/auth/password-reset", json={"email": "k@example.com"})

    assert unknown.status_code == existing.status_code == 200
    assert unknown.json() == existing.json()
    assert [mail[0] for mail in mailer.reset_mails] == ["k@example.com"]


async def test_access_token_cannot_reset_password(client):
    headers = await sign_up_and_in(client, "x@example.com")
    token = headers["Authorization"].split(" ", 1)[1]

    response = await client.post("/auth/password-reset/confirm", json={"token": token, "new_password": "nope-nope"})

    assert response.status_code == 401
