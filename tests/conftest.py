import os

import pytest

# Set env before importing app components
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["LOG_JSON"] = "false"

from fastapi.testclient import TestClient

from app.db.postgres import engine
from app.db.schema import init_db, drop_db
from app.main import app

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def database():
    """Fresh tables for every test function."""
    init_db(engine)
    yield
    drop_db(engine)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(client):
    """Register and log in a user, returning its id, token headers and login payload."""
    def _make_user(role: str, email: str, full_name: str, **extra):
        body = {"full_name": full_name, "email": email, "password": PASSWORD, "role": role, **extra}
        response = client.post("/api/auth/register", json=body)
        assert response.status_code == 201, response.text

        response = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
        assert response.status_code == 200, response.text
        data = response.json()
        return {
            "id": data["user"]["id"],
            "full_name": full_name,
            "headers": {"Authorization": f"Bearer {data['access_token']}"},
        }
    return _make_user


@pytest.fixture
def student(make_user):
    return make_user("student", "sara@forsalink.com", "Sara Benali", level_of_study="Master 1")


@pytest.fixture
def other_student(make_user):
    return make_user("student", "youssef@forsalink.com", "Youssef Amrani")


@pytest.fixture
def company(make_user):
    return make_user("company", "hr@atlasdigital.com", "Atlas Digital", company_description="Software studio")


@pytest.fixture
def other_company(make_user):
    return make_user("company", "jobs@medtech.com", "MedTech")


@pytest.fixture
def make_job(client):
    def _make_job(company, **overrides):
        body = {
            "title": "Backend Intern",
            "description": "Build REST APIs",
            "job_type": "internship",
            "location": "Casablanca",
            "salary": "4000 MAD",
            "requirements": "Python, SQL",
            **overrides,
        }
        response = client.post("/api/jobs", json=body, headers=company["headers"])
        assert response.status_code == 201, response.text
        return response.json()["job_id"]
    return _make_job


@pytest.fixture
def job(company, make_job):
    return make_job(company)


@pytest.fixture
def application(client, student, company, job):
    """The student's pending application to the company's job, looked up by id."""
    response = client.post(f"/api/jobs/{job}/apply", headers=student["headers"])
    assert response.status_code == 201, response.text
    applicants = client.get(f"/api/jobs/{job}/applications", headers=company["headers"]).json()
    return applicants[0]["id"]
