import pytest


async def _open(client, headers, vehicle_id, description="Remplacement plaquettes"):
    response = await client.post(
        "/api/v1/maintenance",
        json={"vehicle_id": vehicle_id, "description": description, "cost": 180.5},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def _vehicle_status(client, headers, vehicle_id):
    response = await client.get(f"/api/v1/vehicles/{vehicle_id}", headers=headers)
    return response.json()["data"]["status"]


@pytest.mark.asyncio
async def test_maintenance_lifecycle_raises_repair_alert(client, make_vehicle, leader_headers):
    vehicle = await make_vehicle(with_qr=False)
    record = await _open(client, leader_headers, vehicle["id"])
    assert record["status"] == "pending"
    assert await _vehicle_status(client, leader_headers, vehicle["id"]) == "maintenance"

    response = await client.put(
        f"/api/v1/maintenance/{record['id']}/status", json={"status": "in_progress"}, headers=leader_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["completed_at"] is None

    response = await client.put(
        f"/api/v1/maintenance/{record['id']}/status", json={"status": "done"}, headers=leader_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["completed_at"] is not None
    assert await _vehicle_status(client, leader_headers, vehicle["id"]) == "available"

    response = await client.get("/api/v1/alerts", params={"type": "repair_completed"}, headers=leader_headers)
    alerts = [a for a in response.json()["data"] if a["payload"]["maintenance_id"] == record["id"]]
    assert len(alerts) == 1
    assert alerts[0]["payload"]["vehicle_id"] == vehicle["id"]


@pytest.mark.asyncio
async def test_vehicle_stays_in_maintenance_while_records_are_open(client, make_vehicle, leader_headers):
    vehicle = await make_vehicle(with_qr=False)
    first = await _open(client, leader_headers, vehicle["id"], "Freins")
    await _open(client, leader_headers, vehicle["id"], "Pneus")

    await client.put(f"/api/v1/maintenance/{first['id']}/status", json={"status": "done"}, headers=leader_headers)
    assert await _vehicle_status(client, leader_headers, vehicle["id"]) == "maintenance"


@pytest.mark.asyncio
async def test_done_is_terminal(client, make_vehicle, leader_headers):
    vehicle = await make_vehicle(with_qr=False)
    record = await _open(client, leader_headers, vehicle["id"])
    await client.put(f"/api/v1/maintenance/{record['id']}/status", json={"status": "done"}, headers=leader_headers)

    response = await client.put(
        f"/api/v1/maintenance/{record['id']}/status", json={"status": "done"}, headers=leader_headers
    )
    assert response.status_code == 200

    response = await client.put(
        f"/api/v1/maintenance/{record['id']}/status", json={"status": "pending"}, headers=leader_headers
    )
    assert response.status_code == 409
    assert response.json()["errorCode"] == "MAINTENANCE_CLOSED"


@pytest.mark.asyncio
async def test_maintenance_listings(client, make_vehicle, leader_headers):
    vehicle = await make_vehicle(with_qr=False)
    record = await _open(client, leader_headers, vehicle["id"])

    response = await client.get(f"/api/v1/maintenance/vehicle/{vehicle['id']}", headers=leader_headers)
    assert [r["id"] for r in response.json()["data"]] == [record["id"]]

    response = await client.get("/api/v1/maintenance/recent", headers=leader_headers)
    assert record["id"] in {r["id"] for r in response.json()["data"]}


@pytest.mark.asyncio
async def test_maintenance_errors(client, make_driver, leader_headers):
    response = await client.post(
        "/api/v1/maintenance", json={"vehicle_id": "no-such-vehicle", "description": "x"}, headers=leader_headers
    )
    assert response.status_code == 404
    assert response.json()["errorCode"] == "VEHICLE_NOT_FOUND"

    response = await client.put(
        "/api/v1/maintenance/no-such-record/status", json={"status": "done"}, headers=leader_headers
    )
    assert response.status_code == 404
    assert response.json()["errorCode"] == "MAINTENANCE_NOT_FOUND"

    driver = await make_driver()
    response = await client.get("/api/v1/maintenance/recent", headers=driver["headers"])
    assert response.status_code == 403
