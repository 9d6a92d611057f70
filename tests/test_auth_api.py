TEST_PASSWORD = "s3cure-password"


def test_health(client):
    assert client.get("/").json() == {"status": "ok"}


def test_register_and_me(client, auth_headers):
    response = client.get("/api/auth/me", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "writer@example.com"
    assert body["plan"] == "free"


def test_duplicate_registration(client, auth_headers):
    response = client.post(
        "/api/auth/register",
        json={"email": "writer@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 400


def test_validation_errors_are_400(client):
    response = client.post("/api/auth/register", json={"email": "not-an-email", "password": "short"})

    assert response.status_code == 400
    assert response.json()["errors"]


def test_missing_token_is_401(client):
    assert client.get("/api/users/me").status_code == 401
    assert client.get("/api/prompts/history").status_code == 401


def test_bad_token_is_401(client):
    headers = {"Authorization": "Bearer not-a-token"}
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_lockout_after_repeated_failures(client, auth_headers):
    for _ in range(5):
        response = client.post(
            "/api/auth/login",
            json={"email": "writer@example.com", "password": "wrong-password"},
        )
        assert response.status_code == 401

    response = client.post(
        "/api/auth/login",
        json={"email": "writer@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 401


def test_refresh_rotation_and_reuse(client, register):
    register("rotate@example.com")
    login = client.post(
        "/api/auth/login",
        json={"email": "rotate@example.com", "password": TEST_PASSWORD},
    ).json()

    first = client.post("/api/auth/refresh", params={"refresh_token": login["refresh_token"]})
    assert first.status_code == 200
    assert first.json()["refresh_token"] != login["refresh_token"]

    reused = client.post("/api/auth/refresh", params={"refresh_token": login["refresh_token"]})
    assert reused.status_code == 401

    # reuse revoked the whole family
    rotated = client.post("/api/auth/refresh", params={"refresh_token": first.json()["refresh_token"]})
    assert rotated.status_code == 401


def test_onboarding_sets_role(client, register):
    headers = register("new@example.com")

    assert client.get("/api/users/me", headers=headers).json()["role"] == "writer"

    response = client.post("/api/users/onboarding", json={"role": "marketer"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["role"] == "marketer"

    assert client.post("/api/users/onboarding", json={"role": "pilot"}, headers=headers).status_code == 400
