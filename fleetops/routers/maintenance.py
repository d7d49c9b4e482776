from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.database import get_db
from fleetops.dependencies import require
from fleetops.schemas.maintenance import MaintenanceCreate, MaintenanceResponse, MaintenanceStatusUpdate
from fleetops.services import maintenance_service
from fleetops.services.auth_service import AuthSession
from fleetops.services.role_gate import Capability
from fleetops.utils.response import success_response

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


def _records(records) -> list[dict]:
    return [MaintenanceResponse.model_validate(r).model_dump() for r in records]


@router.post("", status_code=201)
async def create_maintenance(
    payload: MaintenanceCreate,
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(require(Capability.TEAM_LEADER_OR_ADMIN)),
):
    record = await maintenance_service.create_record(db, payload, session.user_id)
    return success_response(data=MaintenanceResponse.model_validate(record).model_dump())


@router.put("/{record_id}/status", dependencies=[Depends(require(Capability.TEAM_LEADER_OR_ADMIN))])
async def update_maintenance_status(
    record_id: str,
    payload: MaintenanceStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    record = await maintenance_service.update_status(db, record_id, payload.status)
    return success_response(data=MaintenanceResponse.model_validate(record).model_dump())


@router.get("/vehicle/{vehicle_id}", dependencies=[Depends(require(Capability.TEAM_LEADER_OR_ADMIN))])
async def vehicle_maintenance(vehicle_id: str, db: AsyncSession = Depends(get_db)):
    records = await maintenance_service.list_for_vehicle(db, vehicle_id)
    return success_response(data=_records(records))


@router.get("/recent", dependencies=[Depends(require(Capability.TEAM_LEADER_OR_ADMIN))])
async def recent_maintenance(db: AsyncSession = Depends(get_db)):
    records = await maintenance_service.list_recent(db)
    return success_response(data=_records(records))
