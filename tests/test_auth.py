def test_register_login_and_me(client):
    r = client.post(
        "/auth/register",
        json={
            "email": "new.teacher@example.com",
            "password": "longenough1",
            "full_name": "New Teacher",
            "role": "teacher",
        },
    )
    assert r.status_code == 201, r.text
    assert r.json()["success"] is True
    assert r.json()["user"]["role"] == "teacher"

    r = client.post("/auth/login", json={"email": "new.teacher@example.com", "password": "longenough1"})
    assert r.status_code == 200, r.text
    token = r.json()["access_token"]

    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "new.teacher@example.com"


def test_register_duplicate_email_is_rejected(client):
    r = client.post(
        "/auth/register",
        json={"email": "student1@example.com", "password": "password123"},
    )
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Email already registered"}


def test_login_with_wrong_password(client):
    r = client.post("/auth/login", json={"email": "student1@example.com", "password": "wrong-password"})
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_missing_token_is_401_envelope(client, seed):
    r = client.get(f"/assignments/{seed['assignment']}")
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "No authentication token provided"}


def test_garbage_token_is_401(client, seed):
    r = client.get(
        f"/assignments/{seed['assignment']}",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert r.status_code == 401


def test_invalid_payload_is_400_envelope(client):
    r = client.post("/auth/register", json={"email": "not-an-email", "password": "password123"})
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_register_accepts_name_for_full_name(client):
    r = client.post(
        "/auth/register",
        json={"name": "Named Student", "email": "named@example.com", "password": "longenough1"},
    )
    assert r.status_code == 201, r.text
    user = r.json()["user"]
    assert user["full_name"] == "Named Student"
    assert user["role"] == "student"
