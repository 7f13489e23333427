from datetime import datetime, timedelta

import jwt


def login(client, email, password="secret123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_login_returns_token_and_user(client, employee_user):
    res = login(client, "Sara@Example.com")

    assert res.status_code == 200
    body = res.get_json()
    assert body["token"]
    assert body["user"]["email"] == "sara@example.com"
    assert body["user"]["role"] == "employee"
    assert body["user"]["permissions"] == ["change_requests:submit"]


def test_login_wrong_password(client, employee_user):
    res = login(client, "sara@example.com", "nope")
    assert res.status_code == 401
    assert res.get_json()["error"] == "Invalid email or password"


def test_login_missing_fields(client):
    res = client.post("/api/auth/login", json={"email": "x@example.com"})
    assert res.status_code == 400
    assert res.get_json()["missing_fields"] == ["password"]


def test_login_inactive_account(client, make_user):
    make_user("gone@example.com", is_active=False)
    assert login(client, "gone@example.com").status_code == 401


def test_me(client, auth_headers, make_user):
    user = make_user("acting@example.com", role="employee", roles=["manager"])

    res = client.get("/api/auth/me", headers=auth_headers(user))

    assert res.status_code == 200
    body = res.get_json()["user"]
    assert body["roles"] == ["manager"]
    assert body["effectiveRole"] == "employee"


def test_me_with_unknown_role_falls_back_to_employee(client, auth_headers, make_user):
    user = make_user("odd@example.com", role="superuser")
    res = client.get("/api/auth/me", headers=auth_headers(user))
    assert res.get_json()["user"]["role"] == "employee"


def test_me_without_token(client):
    res = client.get("/api/auth/me")
    assert res.status_code == 401
    assert res.get_json()["error"] == "Token is missing"


def test_expired_token(app, client, employee_user):
    token = jwt.encode(
        {"user_id": employee_user.id, "exp": datetime.utcnow() - timedelta(minutes=1)},
        app.config["SECRET_KEY"], algorithm="HS256",
    )
    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.get_json()["error"] == "Token expired"


def test_token_for_deactivated_user(db, client, auth_headers, employee_user):
    headers = auth_headers(employee_user)
    employee_user.is_active = False
    db.session.commit()

    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json()["data"] == {"status": "up"}
