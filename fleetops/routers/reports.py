from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.database import get_db
from fleetops.dependencies import require
from fleetops.services import report_service
from fleetops.services.role_gate import Capability
from fleetops.utils.response import success_response
from fleetops.utils.timestamps import to_utc_iso

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
    dependencies=[Depends(require(Capability.TEAM_LEADER_OR_ADMIN))],
)


def _filters(start_date: datetime | None, end_date: datetime | None, driver_id: str | None) -> dict:
    return {
        "start_date": to_utc_iso(start_date) if start_date else None,
        "end_date": to_utc_iso(end_date) if end_date else None,
        "driver_id": driver_id,
    }


@router.get("/failed-inspections")
async def failed_inspections(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    driver_id: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    reports = await report_service.failed_inspections(db, **_filters(start_date, end_date, driver_id))
    return success_response(data=reports)


@router.get("/failed-inspections/export")
async def export_failed_inspections(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    driver_id: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    export = await report_service.export_failed_inspections(db, **_filters(start_date, end_date, driver_id))
    return success_response(data=export)
