from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.database import get_db
from fleetops.dependencies import require
from fleetops.schemas.shift import ShiftResponse, ShiftStart
from fleetops.services import shift_service
from fleetops.services.auth_service import AuthSession
from fleetops.services.role_gate import Capability
from fleetops.utils.response import success_response

router = APIRouter(prefix="/shifts", tags=["shifts"])


@router.post("/start", status_code=201)
async def start_shift(
    payload: ShiftStart | None = None,
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(require(Capability.DRIVER)),
):
    vehicle_id = payload.vehicle_id if payload else None
    shift = await shift_service.start_shift(db, session.user_id, vehicle_id)
    return success_response(data=ShiftResponse.model_validate(shift).model_dump())


@router.put("/{shift_id}/end")
async def end_shift(
    shift_id: str,
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(require(Capability.DRIVER)),
):
    shift = await shift_service.end_shift(db, shift_id, session.user_id)
    return success_response(data=ShiftResponse.model_validate(shift).model_dump())


@router.get("/active")
async def active_shift(
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(require(Capability.DRIVER)),
):
    shift = await shift_service.get_active_shift(db, session.user_id)
    data = ShiftResponse.model_validate(shift).model_dump() if shift else None
    return success_response(data=data)


@router.get("/history")
async def shift_history(
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(require(Capability.ANY_AUTHENTICATED)),
):
    shifts = await shift_service.get_shift_history(db, session.user_id, session.role)
    return success_response(data=[ShiftResponse.model_validate(s).model_dump() for s in shifts])
