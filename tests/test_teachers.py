import pytest

from conftest import sign_in

pytestmark = pytest.mark.anyio


async def test_create_teacher_parses_comma_separated_lists(client, owner_headers):
    response = await client.post(
        "/dashboard/teachers",
        json={
            "name": "Grace",
            "email": "Grace@Example.com",
            "subjects": "Math, Physics",
            "classes": "",
        },
        headers=owner_headers
    )

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "grace@example.com"
    assert body["subjects"] == ["Math", "Physics"]
    assert body["subjects_display"] == "Math, Physics"
    assert body["classes"] == []
    assert body["classes_display"] == ""


@pytest.mark.parametrize("payload", [
    {"name": "Grace"},
    {"email": "grace@example.com"},
    {"name": " ", "email": "grace@example.com"},
])
async def test_name_and_email_are_required(client, owner_headers, payload):
    response = await client.post("/dashboard/teachers", json=payload, headers=owner_headers)

    assert response.status_code == 422
    assert response.json()["message"] == "Please fill in all required fields"


async def test_password_creates_a_sign_in_account(client, owner_headers):
    response = await client.post(
        "/dashboard/teachers",
        json={"name": "Ivy", "email": "ivy@example.com", "password": "ivy-secret"},
        headers=owner_headers
    )
    assert response.status_code == 201
    assert "password" not in response.json()

    headers = await sign_in(client, "ivy@example.com", "ivy-secret")
    session = await client.get("/auth/session", headers=headers)
    assert session.json()["email"] == "ivy@example.com"


async def test_password_on_update_creates_a_sign_in_account(client, owner_headers):
    created = await client.post(
        "/dashboard/teachers",
        json={"name": "Jon", "email": "jon@example.com"},
        headers=owner_headers
    )

    response = await client.patch(
        f"/dashboard/teachers/{created.json()['id']}",
        json={"password": "jon-secret"},
        headers=owner_headers
    )
    assert response.status_code == 200
    assert "password" not in response.json()

    headers = await sign_in(client, "jon@example.com", "jon-secret")
    session = await client.get("/auth/session", headers=headers)
    assert session.json()["email"] == "jon@example.com"


async def test_update_and_delete_teacher(client, owner_headers):
    created = await client.post(
        "/dashboard/teachers",
        json={"name": "Jon", "email": "jon@example.com", "subjects": "Art"},
        headers=owner_headers
    )
    teacher_id = created.json()["id"]

    updated = await client.patch(
        f"/dashboard/teachers/{teacher_id}",
        json={"subjects": "Art, Design", "classes": "7A"},
        headers=owner_headers
    )
    assert updated.status_code == 200
    assert updated.json()["subjects"] == ["Art", "Design"]
    assert updated.json()["classes"] == ["7A"]
    assert updated.json()["name"] == "Jon"

    refused = await client.delete(f"/dashboard/teachers/{teacher_id}", headers=owner_headers)
    assert refused.status_code == 428

    deleted = await client.delete(f"/dashboard/teachers/{teacher_id}?confirm=true", headers=owner_headers)
    assert deleted.json()["message"] == "Teacher deleted successfully"
    listing = await client.get("/dashboard/teachers", headers=owner_headers)
    assert listing.json() == {"items": [], "total": 0, "message": "No teachers found"}


async def test_deleted_teacher_disappears_from_class_assignments(client, owner_headers):
    created = await client.post(
        "/dashboard/teachers",
        json={"name": "Kim", "email": "kim@example.com"},
        headers=owner_headers
    )
    teacher_id = created.json()["id"]
    klass = await client.post(
        "/dashboard/classes",
        json={"name": "Room 1", "grade": "2", "section": "A", "teacher_ids": [teacher_id]},
        headers=owner_headers
    )

    await client.delete(f"/dashboard/teachers/{teacher_id}?confirm=true", headers=owner_headers)

    response = await client.get(f"/dashboard/classes/{klass.json()['id']}", headers=owner_headers)
    assert response.json()["teachers"] == []
    assert response.json()["teachers_display"] == "Not assigned"
