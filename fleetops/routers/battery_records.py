from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.database import get_db
from fleetops.dependencies import require
from fleetops.schemas.battery_record import BatteryRecordCreate, BatteryRecordResponse, BatteryRecordSign
from fleetops.services import battery_service
from fleetops.services.auth_service import AuthSession
from fleetops.services.role_gate import Capability
from fleetops.utils.response import success_response

router = APIRouter(prefix="/battery-records", tags=["battery-records"])


@router.post("", status_code=201)
async def create_battery_record(
    payload: BatteryRecordCreate,
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(require(Capability.DRIVER)),
):
    record = await battery_service.create_battery_record(db, payload, session.user_id)
    return success_response(data=BatteryRecordResponse.model_validate(record).model_dump())


@router.put("/{record_id}/sign")
async def sign_battery_record(
    record_id: str,
    payload: BatteryRecordSign,
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(require(Capability.TEAM_LEADER_OR_ADMIN)),
):
    record = await battery_service.sign_battery_record(
        db, record_id, payload.team_leader_signature, session.user_id
    )
    return success_response(data=BatteryRecordResponse.model_validate(record).model_dump())


@router.get("/{shift_id}")
async def list_battery_records(
    shift_id: str,
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(require(Capability.ANY_AUTHENTICATED)),
):
    records = await battery_service.list_battery_records(db, session, shift_id)
    return success_response(data=[BatteryRecordResponse.model_validate(r).model_dump() for r in records])
