import pytest

from conftest import inspection_payload
from fleetops.seed import SEED_VEHICLES


@pytest.mark.asyncio
async def test_get_vehicles_returns_seed_data(client, leader_headers):
    response = await client.get("/api/v1/vehicles", headers=leader_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    plates = {v["license_plate"] for v in data["data"]}
    assert {v["license_plate"] for v in SEED_VEHICLES} <= plates


@pytest.mark.asyncio
async def test_vehicle_has_expected_fields(client, leader_headers):
    response = await client.get("/api/v1/vehicles", headers=leader_headers)
    vehicle = response.json()["data"][0]
    assert "id" in vehicle
    assert "name" in vehicle
    assert "license_plate" in vehicle
    assert "qr_code" in vehicle
    assert "status" in vehicle


@pytest.mark.asyncio
async def test_drivers_can_list_vehicles(client, make_driver):
    driver = await make_driver()
    response = await client.get("/api/v1/vehicles", headers=driver["headers"])
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_create_vehicle_normalizes_plate(client, leader_headers):
    response = await client.post(
        "/api/v1/vehicles", json={"name": "Trafic", "license_plate": " ab-123-cd "}, headers=leader_headers
    )
    assert response.status_code == 201
    vehicle = response.json()["data"]
    assert vehicle["license_plate"] == "AB-123-CD"
    assert vehicle["status"] == "available"
    assert vehicle["qr_code"] is None

    response = await client.post(
        "/api/v1/vehicles", json={"name": "Trafic bis", "license_plate": "AB-123-CD"}, headers=leader_headers
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_driver_cannot_create_vehicle(client, make_driver):
    driver = await make_driver()
    response = await client.post(
        "/api/v1/vehicles", json={"name": "Trafic", "license_plate": "ZZ-999-ZZ"}, headers=driver["headers"]
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_vehicle(client, make_vehicle, leader_headers):
    vehicle = await make_vehicle(with_qr=False)
    response = await client.put(
        f"/api/v1/vehicles/{vehicle['id']}",
        json={"name": "Kangoo 2", "has_spare_wheel": False},
        headers=leader_headers,
    )
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["name"] == "Kangoo 2"
    assert updated["has_spare_wheel"] is False
    assert updated["license_plate"] == vehicle["license_plate"]


@pytest.mark.asyncio
async def test_get_unknown_vehicle(client, leader_headers):
    response = await client.get("/api/v1/vehicles/no-such-vehicle", headers=leader_headers)
    assert response.status_code == 404
    assert response.json()["errorCode"] == "VEHICLE_NOT_FOUND"


@pytest.mark.asyncio
async def test_generate_qr_is_stable(client, make_vehicle, leader_headers):
    vehicle = await make_vehicle(with_qr=False)

    response = await client.post(f"/api/v1/vehicles/{vehicle['id']}/qr", headers=leader_headers)
    assert response.status_code == 200
    qr_code = response.json()["data"]["qr_code"]
    assert qr_code.startswith("VEH-")

    response = await client.post(f"/api/v1/vehicles/{vehicle['id']}/qr", headers=leader_headers)
    assert response.json()["data"]["qr_code"] == qr_code


@pytest.mark.asyncio
async def test_qr_lookup_without_inspection_is_ok(client, make_vehicle, make_driver):
    vehicle = await make_vehicle()
    driver = await make_driver()

    response = await client.get(f"/api/v1/vehicles/qr/{vehicle['qr_code']}", headers=driver["headers"])
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["vehicle"]["id"] == vehicle["id"]
    assert data["latest_inspection"] is None
    assert data["safety_status"] == "ok"


@pytest.mark.asyncio
async def test_qr_lookup_reflects_latest_inspection(client, make_vehicle, make_driver, start_shift, leader_headers):
    vehicle = await make_vehicle()
    driver = await make_driver()
    shift = await start_shift(driver, vehicle["id"])

    await client.post("/api/v1/inspections", json=inspection_payload(shift["id"]), headers=driver["headers"])
    response = await client.get(f"/api/v1/vehicles/qr/{vehicle['qr_code']}", headers=leader_headers)
    data = response.json()["data"]
    assert data["safety_status"] == "ok"
    assert data["latest_inspection"]["type"] == "departure"

    await client.post(
        "/api/v1/inspections",
        json=inspection_payload(shift["id"], "return", absent=("trousse_secours",)),
        headers=driver["headers"],
    )
    response = await client.get(f"/api/v1/vehicles/qr/{vehicle['qr_code']}", headers=leader_headers)
    data = response.json()["data"]
    assert data["vehicle"]["id"] == vehicle["id"]
    assert data["safety_status"] == "issues"
    assert data["latest_inspection"]["type"] == "return"
    assert data["latest_inspection"]["trousse_secours"] is False


@pytest.mark.asyncio
async def test_unknown_qr_code(client, leader_headers):
    response = await client.get("/api/v1/vehicles/qr/VEH-DOESNOTEXIST", headers=leader_headers)
    assert response.status_code == 404
    assert response.json()["errorCode"] == "VEHICLE_NOT_FOUND"


@pytest.mark.asyncio
async def test_blank_plate_is_rejected(client, leader_headers):
    response = await client.post(
        "/api/v1/vehicles", json={"name": "Trafic", "license_plate": "   "}, headers=leader_headers
    )
    assert response.status_code == 400
    assert response.json()["errorCode"] == "INVALID_INPUT"
