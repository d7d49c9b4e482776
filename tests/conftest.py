import asyncio
import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

TEST_DB_PATH = os.path.join(os.path.dirname(__file__), "test_fleetops.sqlite3")

LEADER_EMAIL = "leader@fleetops.test"
LEADER_PASSWORD = "leader-password"
ADMIN_EMAIL = "admin@fleetops.test"
ADMIN_PASSWORD = "admin-password"
ADMIN_ID = str(uuid.uuid5(uuid.NAMESPACE_DNS, "user-admin-test"))

# Must be set before fleetops.config is imported anywhere.
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["BOOTSTRAP_LEADER_EMAIL"] = LEADER_EMAIL
os.environ["BOOTSTRAP_LEADER_PASSWORD"] = LEADER_PASSWORD
os.environ["API_KEY"] = ""


@pytest.fixture(autouse=True, scope="session")
def setup_test_db():
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)

    from fleetops.database import create_tables, async_session
    from fleetops.models.user import User, UserRole
    from fleetops.seed import seed_data
    from fleetops.services.auth_service import hash_password
    from fleetops.utils.timestamps import utcnow_iso

    async def _setup():
        await create_tables()
        async with async_session() as session:
            await seed_data(session)
            now = utcnow_iso()
            session.add(User(
                id=ADMIN_ID,
                email=ADMIN_EMAIL,
                password_hash=hash_password(ADMIN_PASSWORD),
                first_name="Ada",
                last_name="Admin",
                role=UserRole.ADMIN.value,
                is_approved=True,
                is_active=True,
                created_at=now,
                updated_at=now,
            ))
            await session.commit()

    asyncio.run(_setup())
    yield
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def random_phone() -> str:
    return f"+336{uuid.uuid4().int % 10**8:08d}"


@pytest_asyncio.fixture
async def client():
    from fleetops.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def _sign_in_email(client, email: str, password: str) -> str:
    response = await client.post("/api/v1/auth/sign-in/email", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return response.json()["data"]["session_token"]


@pytest_asyncio.fixture
async def leader_headers(client):
    return bearer(await _sign_in_email(client, LEADER_EMAIL, LEADER_PASSWORD))


@pytest_asyncio.fixture
async def admin_headers(client):
    return bearer(await _sign_in_email(client, ADMIN_EMAIL, ADMIN_PASSWORD))


@pytest.fixture
def make_driver(client, leader_headers):
    """Create a driver through the API; approved drivers come back signed in."""

    async def _make(approve: bool = True) -> dict:
        phone = random_phone()
        response = await client.post(
            "/api/v1/users/drivers",
            json={"phone": phone, "first_name": "Jean", "last_name": f"Test-{phone[-4:]}"},
            headers=leader_headers,
        )
        assert response.status_code == 201, response.text
        driver = response.json()["data"]
        driver["headers"] = None

        if approve:
            response = await client.put(f"/api/v1/users/drivers/{driver['id']}/approve", headers=leader_headers)
            assert response.status_code == 200, response.text
            response = await client.post("/api/v1/auth/sign-in/phone", json={"phone": phone})
            assert response.status_code == 200, response.text
            client.cookies.clear()
            driver["token"] = response.json()["data"]["session_token"]
            driver["headers"] = bearer(driver["token"])
        return driver

    return _make


@pytest.fixture
def make_vehicle(client, leader_headers):
    async def _make(with_qr: bool = True) -> dict:
        plate = f"T-{uuid.uuid4().hex[:8].upper()}"
        response = await client.post(
            "/api/v1/vehicles", json={"name": "Kangoo", "license_plate": plate}, headers=leader_headers
        )
        assert response.status_code == 201, response.text
        vehicle = response.json()["data"]
        if with_qr:
            response = await client.post(f"/api/v1/vehicles/{vehicle['id']}/qr", headers=leader_headers)
            vehicle = response.json()["data"]
        return vehicle

    return _make


def inspection_payload(shift_id: str, kind: str = "departure", absent: tuple[str, ...] = (), **overrides) -> dict:
    payload = {"shift_id": shift_id, "type": kind}
    if kind == "departure":
        payload["video_url"] = "uploads/videos/walkaround.mp4"
    for item in ("trousse_secours", "roue_secours", "extincteur", "booster_batterie"):
        if item in absent:
            payload[item] = False
            payload[f"{item}_comment"] = f"{item} manquant"
        else:
            payload[item] = True
            payload[f"{item}_photo"] = f"uploads/photos/{item}.jpg"
    payload.update(overrides)
    return payload


def battery_payload(shift_id: str, kind: str = "departure", **overrides) -> dict:
    payload = {
        "shift_id": shift_id,
        "type": kind,
        "count": 12,
        "photo_url": "uploads/photos/batteries.jpg",
        "comment": "RAS",
        "driver_signature": "uploads/signatures/driver.png",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def start_shift(client):
    async def _start(driver: dict, vehicle_id: str | None = None) -> dict:
        body = {"vehicle_id": vehicle_id} if vehicle_id else {}
        response = await client.post("/api/v1/shifts/start", json=body, headers=driver["headers"])
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _start
