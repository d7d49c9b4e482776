import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.models.inspection import Inspection
from fleetops.models.shift import Shift
from fleetops.models.user import User
from fleetops.services.compliance import SAFETY_ITEMS, describe_failed_items
from fleetops.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)


async def failed_inspections(
    db: AsyncSession,
    start_date: str | None = None,
    end_date: str | None = None,
    driver_id: str | None = None,
) -> list[dict]:
    """Inspections with at least one absent safety item, newest first."""
    any_absent = [getattr(Inspection, item).is_(False) for item in SAFETY_ITEMS]
    query = (
        select(Inspection, Shift, User)
        .join(Shift, Shift.id == Inspection.shift_id)
        .join(User, User.id == Shift.driver_id)
        .where(or_(*any_absent))
    )
    if start_date:
        query = query.where(Inspection.completed_at >= start_date)
    if end_date:
        query = query.where(Inspection.completed_at <= end_date)
    if driver_id:
        query = query.where(Shift.driver_id == driver_id)

    result = await db.execute(query.order_by(Inspection.completed_at.desc()))
    reports = [
        {
            "inspection_id": inspection.id,
            "shift_id": shift.id,
            "driver_id": shift.driver_id,
            "driver_name": f"{driver.first_name} {driver.last_name}",
            "vehicle_id": shift.vehicle_id,
            "type": inspection.type,
            "completed_at": inspection.completed_at,
            "failed_items": describe_failed_items(inspection),
            "video_url": inspection.video_url,
        }
        for inspection, shift, driver in result.all()
    ]
    logger.info("Failed inspection report built with %d entries", len(reports))
    return reports


async def export_failed_inspections(db: AsyncSession, **filters) -> dict:
    reports = await failed_inspections(db, **filters)
    return {"data": reports, "exported_at": utcnow_iso(), "total_records": len(reports)}
