import pytest
from fastapi import status


@pytest.fixture
def accepted(client, company, application):
    client.put(f"/api/applications/{application}/status", headers=company["headers"], json={"status": "accepted"})


@pytest.fixture
def conversation(client, student, company, job, accepted):
    response = client.post("/api/conversations", headers=company["headers"], json={
        "student_id": student["id"], "company_id": company["id"], "job_id": job,
    })
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["conversation_id"]


def test_cannot_open_before_acceptance(client, student, company, job, application):
    response = client.post("/api/conversations", headers=student["headers"], json={
        "student_id": student["id"], "company_id": company["id"], "job_id": job,
    })
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Cannot create conversation. Application must be accepted first."


def test_open_is_idempotent(client, student, company, job, conversation):
    response = client.post("/api/conversations", headers=student["headers"], json={
        "student_id": student["id"], "company_id": company["id"], "job_id": job,
    })
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Conversation already exists", "conversation_id": conversation}


def test_open_race_returns_existing_conversation(client, student, company, job, conversation, monkeypatch):
    """A concurrent request misses the existing row; the constraint hands back its id."""
    from app.api.routes import conversation_routes
    original_find = conversation_routes.find_conversation
    calls = []

    def miss_first_lookup(db, data):
        calls.append(data)
        if len(calls) == 1:
            return None
        return original_find(db, data)

    monkeypatch.setattr(conversation_routes, "find_conversation", miss_first_lookup)

    response = client.post("/api/conversations", headers=student["headers"], json={
        "student_id": student["id"], "company_id": company["id"], "job_id": job,
    })
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Conversation already exists", "conversation_id": conversation}
    assert len(client.get("/api/conversations", headers=student["headers"]).json()) == 1


def test_company_must_own_the_job(client, student, other_company, job, accepted):
    response = client.post("/api/conversations", headers=other_company["headers"], json={
        "student_id": student["id"], "company_id": other_company["id"], "job_id": job,
    })
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_outsider_cannot_open_for_others(client, student, company, other_student, job, accepted):
    response = client.post("/api/conversations", headers=other_student["headers"], json={
        "student_id": student["id"], "company_id": company["id"], "job_id": job,
    })
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_messaging_round_trip(client, student, company, conversation):
    response = client.post(
        f"/api/conversations/{conversation}/messages", headers=student["headers"], json={"message": "  Hello!  "}
    )
    assert response.status_code == status.HTTP_201_CREATED
    client.post(f"/api/conversations/{conversation}/messages", headers=company["headers"], json={"message": "Welcome aboard"})

    messages = client.get(f"/api/conversations/{conversation}/messages", headers=company["headers"]).json()
    assert [m["message"] for m in messages] == ["Hello!", "Welcome aboard"]
    assert messages[0]["sender_name"] == "Sara Benali"
    assert messages[0]["sender_role"] == "student"
    assert messages[1]["sender_role"] == "company"

    conversations = client.get("/api/conversations", headers=student["headers"]).json()
    assert len(conversations) == 1
    assert conversations[0]["last_message"] == "Welcome aboard"
    assert conversations[0]["job_title"] == "Backend Intern"
    assert conversations[0]["company_name"] == "Atlas Digital"
    assert conversations[0]["student_name"] == "Sara Benali"


def test_polling_with_after_id(client, student, company, conversation):
    first = client.post(
        f"/api/conversations/{conversation}/messages", headers=student["headers"], json={"message": "one"}
    ).json()["message_id"]
    client.post(f"/api/conversations/{conversation}/messages", headers=company["headers"], json={"message": "two"})

    newer = client.get(
        f"/api/conversations/{conversation}/messages", headers=student["headers"], params={"after_id": first}
    ).json()
    assert [m["message"] for m in newer] == ["two"]


def test_empty_message_rejected(client, student, conversation):
    response = client.post(f"/api/conversations/{conversation}/messages", headers=student["headers"], json={"message": "   "})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Message cannot be empty"


def test_outsiders_cannot_read_or_write(client, other_student, conversation):
    headers = other_student["headers"]
    assert client.get(f"/api/conversations/{conversation}/messages", headers=headers).status_code == 403
    response = client.post(f"/api/conversations/{conversation}/messages", headers=headers, json={"message": "hi"})
    assert response.status_code == 403
    assert client.put(f"/api/conversations/{conversation}/read", headers=headers).status_code == 403
    assert client.get("/api/conversations", headers=headers).json() == []


def test_unread_count_and_mark_read(client, student, company, conversation):
    client.post(f"/api/conversations/{conversation}/messages", headers=company["headers"], json={"message": "a"})
    client.post(f"/api/conversations/{conversation}/messages", headers=company["headers"], json={"message": "b"})
    client.post(f"/api/conversations/{conversation}/messages", headers=student["headers"], json={"message": "c"})

    assert client.get("/api/conversations", headers=student["headers"]).json()[0]["unread_count"] == 2
    assert client.get("/api/conversations", headers=company["headers"]).json()[0]["unread_count"] == 1

    response = client.put(f"/api/conversations/{conversation}/read", headers=student["headers"])
    assert response.status_code == status.HTTP_200_OK
    assert client.get("/api/conversations", headers=student["headers"]).json()[0]["unread_count"] == 0
    # The student's own message stays unread for the company
    assert client.get("/api/conversations", headers=company["headers"]).json()[0]["unread_count"] == 1


def test_listing_hides_conversation_after_rejection(client, student, company, application, conversation):
    client.put(f"/api/applications/{application}/status", headers=company["headers"], json={"status": "rejected"})
    assert client.get("/api/conversations", headers=student["headers"]).json() == []
