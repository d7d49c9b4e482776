import pytest
from httpx import AsyncClient, ASGITransport

from fleetops.main import app
from fleetops.models.shift import Shift
from fleetops.services.auth_service import AuthSession
from fleetops.services.role_gate import Capability, authorize, ensure_shift_access, is_fleet_manager
from fleetops.utils.exceptions import Forbidden


def _session(role: str, user_id: str = "u-1") -> AuthSession:
    return AuthSession(
        token="t", user_id=user_id, role=role, first_name="A", last_name="B", email=None, phone=None,
        is_approved=True, is_active=True, created_at="2026-03-02T07:30:00+00:00",
    )


@pytest.mark.parametrize(
    "role,capability,allowed",
    [
        ("driver", Capability.DRIVER, True),
        ("team_leader", Capability.DRIVER, False),
        ("admin", Capability.DRIVER, False),
        ("driver", Capability.TEAM_LEADER_OR_ADMIN, False),
        ("team_leader", Capability.TEAM_LEADER_OR_ADMIN, True),
        ("admin", Capability.TEAM_LEADER_OR_ADMIN, True),
        ("team_leader", Capability.ADMIN, False),
        ("admin", Capability.ADMIN, True),
        ("driver", Capability.ANY_AUTHENTICATED, True),
    ],
)
def test_authorize(role, capability, allowed):
    session = _session(role)
    if allowed:
        assert authorize(session, capability) is session
    else:
        with pytest.raises(Forbidden) as exc_info:
            authorize(session, capability)
        assert exc_info.value.error_code == "FORBIDDEN"
        assert exc_info.value.status_code == 403


def test_is_fleet_manager():
    assert is_fleet_manager(_session("team_leader"))
    assert is_fleet_manager(_session("admin"))
    assert not is_fleet_manager(_session("driver"))


def test_ensure_shift_access():
    shift = Shift(id="s-1", driver_id="u-1", start_time="2026-03-02T07:30:00+00:00", status="active")
    ensure_shift_access(_session("driver", "u-1"), shift)
    ensure_shift_access(_session("team_leader", "u-9"), shift)
    with pytest.raises(Forbidden):
        ensure_shift_access(_session("driver", "u-2"), shift)


@pytest.mark.asyncio
async def test_team_leader_cannot_start_shift(client, leader_headers):
    response = await client.post("/api/v1/shifts/start", json={}, headers=leader_headers)
    assert response.status_code == 403
    assert response.json()["errorCode"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_driver_cannot_read_alerts(client, make_driver):
    driver = await make_driver()
    response = await client.get("/api/v1/alerts", headers=driver["headers"])
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_driver_cannot_manage_drivers(client, make_driver):
    driver = await make_driver()
    response = await client.get("/api/v1/users/drivers", headers=driver["headers"])
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_only_admin_creates_team_leaders(client, leader_headers, admin_headers):
    payload = {
        "email": "new-leader@fleetops.test",
        "password": "leader-pass-2",
        "first_name": "Claire",
        "last_name": "Bernard",
    }
    response = await client.post("/api/v1/users/team-leaders", json=payload, headers=leader_headers)
    assert response.status_code == 403

    response = await client.post("/api/v1/users/team-leaders", json=payload, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["data"]["role"] == "team_leader"

    response = await client.post(
        "/api/v1/auth/sign-in/email", json={"email": payload["email"], "password": payload["password"]}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_unauthenticated_request_is_rejected_before_role_check():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as fresh:
        response = await fresh.get("/api/v1/alerts")
    assert response.status_code == 401
    assert response.json()["errorCode"] == "NO_SESSION"
