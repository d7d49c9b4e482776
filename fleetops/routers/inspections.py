from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.database import get_db
from fleetops.dependencies import require
from fleetops.schemas.inspection import InspectionCreate, InspectionResponse
from fleetops.services import inspection_service
from fleetops.services.auth_service import AuthSession
from fleetops.services.role_gate import Capability
from fleetops.utils.response import success_response

router = APIRouter(prefix="/inspections", tags=["inspections"])


@router.post("", status_code=201)
async def create_inspection(
    payload: InspectionCreate,
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(require(Capability.DRIVER)),
):
    inspection, alert_raised = await inspection_service.create_inspection(db, payload, session.user_id)
    data = InspectionResponse.model_validate(inspection).model_dump()
    data["alert_raised"] = alert_raised
    return success_response(data=data)


@router.get("/{shift_id}")
async def list_inspections(
    shift_id: str,
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(require(Capability.ANY_AUTHENTICATED)),
):
    inspections = await inspection_service.list_inspections(db, session, shift_id)
    return success_response(data=[InspectionResponse.model_validate(i).model_dump() for i in inspections])
