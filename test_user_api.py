from conftest import auth_headers


def test_login_returns_token(client, users):
    response = client.post("/auth/login", json={"email": "carol@loandesk.in", "password": "password123"})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["name"] == "Carol"

    me = client.get("/users/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.json()["email"] == "carol@loandesk.in"


def test_login_with_wrong_password(client, users):
    response = client.post("/auth/login", json={"email": "carol@loandesk.in", "password": "nope"})
    assert response.status_code == 401


def test_login_of_deactivated_user(client, make_user):
    make_user("Gone", is_active=False)
    response = client.post("/auth/login", json={"email": "gone@loandesk.in", "password": "password123"})
    assert response.status_code == 401


def test_invalid_token(client):
    response = client.get("/users/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_directory_lists_active_users(client, make_user, users):
    make_user("Gone", is_active=False)
    response = client.get("/users/", headers=auth_headers(users["carol"]))
    assert [u["name"] for u in response.json()] == ["Alice", "Bob", "Carol", "Dave"]


def test_get_user(client, users):
    response = client.get(f"/users/{users['bob'].id}", headers=auth_headers(users["carol"]))
    assert response.json()["name"] == "Bob"

    missing = client.get("/users/9999", headers=auth_headers(users["carol"]))
    assert missing.status_code == 404
    assert missing.json()["code"] == "UNKNOWN_USER"


def test_admin_creates_user(client, admin):
    response = client.post(
        "/users/",
        json={"name": "Nina", "email": "nina@loandesk.in", "password": "secret", "role": "manager"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    assert response.json()["role"] == "manager"

    duplicate = client.post(
        "/users/",
        json={"name": "Nina", "email": "nina@loandesk.in", "password": "secret"},
        headers=auth_headers(admin),
    )
    assert duplicate.status_code == 400


def test_create_user_rejects_unknown_role(client, admin):
    response = client.post(
        "/users/",
        json={"name": "Nina", "email": "nina@loandesk.in", "password": "secret", "role": "ceo"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 422


def test_only_admin_creates_users(client, users):
    response = client.post(
        "/users/",
        json={"name": "Nina", "email": "nina@loandesk.in", "password": "secret"},
        headers=auth_headers(users["alice"]),
    )
    assert response.status_code == 403
