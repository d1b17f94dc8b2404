import pytest

from conftest import add_teacher, create_school, sign_up_and_in

pytestmark = pytest.mark.anyio


async def test_overview_without_profile(client):
    headers = await sign_up_and_in(client, "solo@example.com")

    response = await client.get("/dashboard", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"email": "solo@example.com", "school": None}


async def test_profile_needs_a_name_on_first_save(client):
    headers = await sign_up_and_in(client, "solo@example.com")

    response = await client.put("/dashboard/school", json={"address": "1 Main St"}, headers=headers)

    assert response.status_code == 422
    missing = await client.get("/dashboard/school", headers=headers)
    assert missing.status_code == 404


async def test_counters_are_stored_as_typed(client, owner_headers):
    # Two real students, but the counter keeps what staff typed in
    klass = await client.post("/dashboard/classes", json={"name": "A", "grade": "1", "section": "A"}, headers=owner_headers)
    for roll_no in ("1", "2"):
        await client.post(
            "/dashboard/students",
            json={"name": "S", "roll_no": roll_no, "class_id": klass.json()["id"]},
            headers=owner_headers
        )

    response = await client.get("/dashboard/school", headers=owner_headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Maple Grove Academy"
    assert response.json()["total_students"] == 120


async def test_profile_update_parses_numeric_strings(client, owner_headers):
    response = await client.put(
        "/dashboard/school",
        json={"total_students": "", "total_teachers": "15", "established_year": 1998, "principal": "Dr. Ode"},
        headers=owner_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total_students"] is None
    assert body["total_teachers"] == 15
    assert body["established_year"] == 1998
    assert body["principal"] == "Dr. Ode"
    assert body["name"] == "Maple Grove Academy"


async def test_non_numeric_counter_is_rejected(client, owner_headers):
    response = await client.put("/dashboard/school", json={"total_teachers": "a dozen"}, headers=owner_headers)

    assert response.status_code == 422


async def test_overview_includes_owned_profile(client, owner_headers):
    response = await client.get("/dashboard", headers=owner_headers)

    assert response.json()["school"]["name"] == "Maple Grove Academy"


async def test_tenant_profile_read_and_update(client):
    school_id = await create_school("Oakridge")
    await add_teacher(school_id, "Olive", "olive@example.com")
    headers = await sign_up_and_in(client, "olive@example.com")

    response = await client.put(
        "/oakridge/dashboard/school",
        json={"phone": "555-0100", "total_students": "300"},
        headers=headers
    )
    assert response.status_code == 200
    assert response.json()["total_students"] == 300

    profile = await client.get("/oakridge/dashboard/school", headers=headers)
    assert profile.json()["id"] == school_id
    assert profile.json()["phone"] == "555-0100"
