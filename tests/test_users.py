import pytest

from conftest import random_phone


@pytest.mark.asyncio
async def test_create_driver_is_pending_and_raises_alert(client, leader_headers):
    response = await client.post(
        "/api/v1/users/drivers",
        json={"phone": "+33600000000", "first_name": "Luc", "last_name": "Moreau"},
        headers=leader_headers,
    )
    assert response.status_code == 201
    driver = response.json()["data"]
    assert driver["is_approved"] is False
    assert driver["is_active"] is True
    assert driver["role"] == "driver"

    response = await client.get("/api/v1/alerts", params={"type": "driver_pending"}, headers=leader_headers)
    alerts = [a for a in response.json()["data"] if a["payload"]["driver_id"] == driver["id"]]
    assert len(alerts) == 1
    assert alerts[0]["payload"]["phone"] == "+33600000000"


@pytest.mark.asyncio
async def test_duplicate_phone_conflicts(client, leader_headers):
    payload = {"phone": random_phone(), "first_name": "Luc", "last_name": "Moreau"}
    response = await client.post("/api/v1/users/drivers", json=payload, headers=leader_headers)
    assert response.status_code == 201

    response = await client.post("/api/v1/users/drivers", json=payload, headers=leader_headers)
    assert response.status_code == 409
    assert response.json()["errorCode"] == "CONFLICT"


@pytest.mark.asyncio
async def test_create_driver_requires_fields(client, leader_headers):
    response = await client.post(
        "/api/v1/users/drivers", json={"phone": random_phone(), "first_name": ""}, headers=leader_headers
    )
    assert response.status_code == 400
    assert response.json()["errorCode"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_driver_roster_groups(client, make_driver, leader_headers):
    pending = await make_driver(approve=False)
    active = await make_driver()
    revoked = await make_driver()
    await client.put(f"/api/v1/users/drivers/{revoked['id']}/revoke", headers=leader_headers)

    response = await client.get("/api/v1/users/drivers", headers=leader_headers)
    assert response.status_code == 200
    groups = {name: {d["id"] for d in drivers} for name, drivers in response.json()["data"].items()}
    assert pending["id"] in groups["pending"]
    assert active["id"] in groups["active"]
    assert revoked["id"] in groups["deleted"]


@pytest.mark.asyncio
async def test_restore_driver_allows_sign_in_again(client, make_driver, leader_headers):
    driver = await make_driver()
    await client.put(f"/api/v1/users/drivers/{driver['id']}/revoke", headers=leader_headers)

    response = await client.put(f"/api/v1/users/drivers/{driver['id']}/restore", headers=leader_headers)
    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is True

    response = await client.post("/api/v1/auth/sign-in/phone", json={"phone": driver["phone"]})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_approve_unknown_driver(client, leader_headers):
    response = await client.put("/api/v1/users/drivers/no-such-driver/approve", headers=leader_headers)
    assert response.status_code == 404
    assert response.json()["errorCode"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_team_leader_is_not_a_driver(client, admin_headers):
    from fleetops.seed import SEED_LEADER_ID

    response = await client.put(f"/api/v1/users/drivers/{SEED_LEADER_ID}/revoke", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_duplicate_team_leader_email(client, admin_headers):
    from conftest import LEADER_EMAIL

    response = await client.post(
        "/api/v1/users/team-leaders",
        json={"email": LEADER_EMAIL, "password": "another-pass", "first_name": "X", "last_name": "Y"},
        headers=admin_headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_blank_driver_fields_are_rejected(client, leader_headers):
    for payload in (
        {"phone": "   ", "first_name": "Luc", "last_name": "Moreau"},
        {"phone": random_phone(), "first_name": "  ", "last_name": "Moreau"},
        {"phone": random_phone(), "first_name": "Luc", "last_name": "\t"},
    ):
        response = await client.post("/api/v1/users/drivers", json=payload, headers=leader_headers)
        assert response.status_code == 400, payload
        assert response.json()["errorCode"] == "INVALID_INPUT"

    response = await client.get("/api/v1/users/drivers", headers=leader_headers)
    phones = {d["phone"] for group in response.json()["data"].values() for d in group}
    assert "" not in phones


@pytest.mark.asyncio
async def test_driver_fields_are_stored_trimmed(client, leader_headers):
    phone = random_phone()
    response = await client.post(
        "/api/v1/users/drivers",
        json={"phone": f"  {phone} ", "first_name": " Luc ", "last_name": "Moreau "},
        headers=leader_headers,
    )
    assert response.status_code == 201
    driver = response.json()["data"]
    assert (driver["phone"], driver["first_name"], driver["last_name"]) == (phone, "Luc", "Moreau")
