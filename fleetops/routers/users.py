from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.database import get_db
from fleetops.dependencies import get_session_store, require
from fleetops.schemas.user import DriverCreate, TeamLeaderCreate, UserResponse
from fleetops.services import user_service
from fleetops.services.auth_service import SessionStore
from fleetops.services.role_gate import Capability
from fleetops.utils.response import success_response

router = APIRouter(prefix="/users", tags=["users"])

_managers = [Depends(require(Capability.TEAM_LEADER_OR_ADMIN))]


def _user(user) -> dict:
    return UserResponse.model_validate(user).model_dump()


@router.post("/drivers", status_code=201, dependencies=_managers)
async def create_driver(payload: DriverCreate, db: AsyncSession = Depends(get_db)):
    driver = await user_service.create_driver(db, payload.phone, payload.first_name, payload.last_name)
    return success_response(data=_user(driver))


@router.get("/drivers", dependencies=_managers)
async def list_drivers(db: AsyncSession = Depends(get_db)):
    groups = await user_service.list_drivers(db)
    return success_response(data={name: [_user(d) for d in drivers] for name, drivers in groups.items()})


@router.put("/drivers/{driver_id}/approve", dependencies=_managers)
async def approve_driver(driver_id: str, db: AsyncSession = Depends(get_db)):
    driver = await user_service.approve_driver(db, driver_id)
    return success_response(data=_user(driver))


@router.put("/drivers/{driver_id}/revoke", dependencies=_managers)
async def revoke_driver(
    driver_id: str,
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    driver = await user_service.revoke_driver(db, store, driver_id)
    return success_response(data=_user(driver))


@router.put("/drivers/{driver_id}/restore", dependencies=_managers)
async def restore_driver(driver_id: str, db: AsyncSession = Depends(get_db)):
    driver = await user_service.restore_driver(db, driver_id)
    return success_response(data=_user(driver))


@router.post("/team-leaders", status_code=201, dependencies=[Depends(require(Capability.ADMIN))])
async def create_team_leader(payload: TeamLeaderCreate, db: AsyncSession = Depends(get_db)):
    leader = await user_service.create_team_leader(
        db, payload.email, payload.password, payload.first_name, payload.last_name
    )
    return success_response(data=_user(leader))
