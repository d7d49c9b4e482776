from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.database import get_db
from fleetops.dependencies import require
from fleetops.models.alert import AlertType
from fleetops.schemas.alert import AlertResponse
from fleetops.services import alert_service
from fleetops.services.role_gate import Capability
from fleetops.utils.response import success_response
from fleetops.utils.timestamps import to_utc_iso

router = APIRouter(
    prefix="/alerts",
    tags=["alerts"],
    dependencies=[Depends(require(Capability.TEAM_LEADER_OR_ADMIN))],
)


@router.get("")
async def list_alerts(
    type: AlertType | None = None,
    start_date: datetime | None = None,
    unread_only: bool = False,
    db: AsyncSession = Depends(get_db),
):
    alerts = await alert_service.list_alerts(
        db,
        alert_type=type,
        start_date=to_utc_iso(start_date) if start_date else None,
        unread_only=unread_only,
    )
    return success_response(data=[AlertResponse.model_validate(a).model_dump() for a in alerts])


@router.put("/{alert_id}/read")
async def mark_alert_read(alert_id: str, db: AsyncSession = Depends(get_db)):
    alert = await alert_service.mark_read(db, alert_id)
    return success_response(data=AlertResponse.model_validate(alert).model_dump())
