from fastapi import status

from tests.conftest import PASSWORD


def test_register_creates_user_and_welcome_notification(client):
    response = client.post("/api/auth/register", json={
        "full_name": "Sara Benali",
        "email": "sara@forsalink.com",
        "password": PASSWORD,
        "role": "student",
    })
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["role"] == "student"
    assert data["message"] == "Registration successful"

    login = client.post("/api/auth/login", json={"email": "sara@forsalink.com", "password": PASSWORD}).json()
    headers = {"Authorization": f"Bearer {login['access_token']}"}
    notifications = client.get("/api/notifications", headers=headers).json()
    assert len(notifications) == 1
    assert notifications[0]["message"] == "Welcome to ForsaLink! Start exploring opportunities."
    assert notifications[0]["is_read"] is False


def test_register_duplicate_email(client, student):
    response = client.post("/api/auth/register", json={
        "full_name": "Someone Else",
        "email": "sara@forsalink.com",
        "password": PASSWORD,
        "role": "company",
    })
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Email already registered"


def test_register_rejects_short_password_and_unknown_role(client):
    base = {"full_name": "Sara Benali", "email": "sara@forsalink.com"}
    assert client.post("/api/auth/register", json={**base, "password": "123", "role": "student"}).status_code == 422
    assert client.post("/api/auth/register", json={**base, "password": PASSWORD, "role": "admin"}).status_code == 422


def test_login_returns_token_and_user_without_password(client, student):
    response = client.post("/api/auth/login", json={"email": "  sara@forsalink.com ", "password": f" {PASSWORD} "})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["email"] == "sara@forsalink.com"
    assert data["user"]["level_of_study"] == "Master 1"
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]


def test_login_invalid_credentials(client, student):
    wrong_password = client.post("/api/auth/login", json={"email": "sara@forsalink.com", "password": "nope-nope"})
    unknown_email = client.post("/api/auth/login", json={"email": "ghost@forsalink.com", "password": PASSWORD})
    assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
    assert unknown_email.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_requires_valid_token(client, student):
    assert client.get("/api/auth/me", headers=student["headers"]).json()["id"] == student["id"]

    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    assert client.get("/api/auth/me").status_code in (401, 403)


def test_change_password(client, student):
    response = client.put("/api/auth/change-password", headers=student["headers"], json={
        "old_password": "wrong-one", "new_password": "brandnew1",
    })
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = client.put("/api/auth/change-password", headers=student["headers"], json={
        "old_password": PASSWORD, "new_password": "brandnew1",
    })
    assert response.status_code == status.HTTP_200_OK

    assert client.post("/api/auth/login", json={"email": "sara@forsalink.com", "password": PASSWORD}).status_code == 401
    assert client.post("/api/auth/login", json={"email": "sara@forsalink.com", "password": "brandnew1"}).status_code == 200


def test_change_password_minimum_length(client, student):
    response = client.put("/api/auth/change-password", headers=student["headers"], json={
        "old_password": PASSWORD, "new_password": "abc",
    })
    assert response.status_code == 422


def test_login_with_mixed_case_domain_as_registered(client):
    client.post("/api/auth/register", json={
        "full_name": "Sara Benali",
        "email": "Sara@ForsaLink.COM",
        "password": PASSWORD,
        "role": "student",
    })
    response = client.post("/api/auth/login", json={"email": "Sara@ForsaLink.COM", "password": PASSWORD})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["email"] == "Sara@forsalink.com"


def test_register_unique_constraint_maps_to_400(client, monkeypatch):
    """A concurrent registration passes the pre-check; the unique email catches it."""
    from sqlalchemy import text
    from app.db.postgres import get_db_session

    with get_db_session() as db:
        db.execute(
            text("INSERT INTO users (full_name, email, password_hash, role) VALUES ('Sara', :email, 'x', 'student')"),
            {"email": "sara@forsalink.com"}
        )

    from app.api.routes import auth_routes
    original_text = auth_routes.text

    def skip_precheck(sql):
        if sql.startswith("SELECT id FROM users WHERE email"):
            sql = "SELECT id FROM users WHERE 1 = 0 AND email = :email"
        return original_text(sql)

    monkeypatch.setattr(auth_routes, "text", skip_precheck)

    response = client.post("/api/auth/register", json={
        "full_name": "Sara Benali",
        "email": "sara@forsalink.com",
        "password": PASSWORD,
        "role": "student",
    })
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Email already registered"
