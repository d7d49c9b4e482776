from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.database import get_db
from fleetops.dependencies import require
from fleetops.schemas.location import LocationCreate, LocationResponse
from fleetops.services import location_service
from fleetops.services.auth_service import AuthSession
from fleetops.services.role_gate import Capability
from fleetops.utils.response import success_response

router = APIRouter(prefix="/location", tags=["location"])


@router.post("/update", status_code=201)
async def update_location(
    payload: LocationCreate,
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(require(Capability.DRIVER)),
):
    point = await location_service.record_location(db, payload, session.user_id)
    return success_response(data=LocationResponse.model_validate(point).model_dump())


@router.get("/fleet", dependencies=[Depends(require(Capability.TEAM_LEADER_OR_ADMIN))])
async def fleet_locations(db: AsyncSession = Depends(get_db)):
    return success_response(data=await location_service.fleet_positions(db))


@router.get("/driver/{driver_id}", dependencies=[Depends(require(Capability.TEAM_LEADER_OR_ADMIN))])
async def driver_location(driver_id: str, db: AsyncSession = Depends(get_db)):
    point = await location_service.driver_position(db, driver_id)
    return success_response(data=LocationResponse.model_validate(point).model_dump())
