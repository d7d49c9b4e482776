"""Alerts derived from state transitions.

The ``*_alert`` helpers only ``add`` the alert to the caller's session; the
caller commits it together with the mutation that triggered it, so an alert
exists if and only if that mutation was persisted.
"""
import logging
import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.models.alert import Alert, AlertType
from fleetops.models.inspection import Inspection
from fleetops.models.maintenance import MaintenanceRecord
from fleetops.models.shift import Shift
from fleetops.models.user import User
from fleetops.models.vehicle import Vehicle
from fleetops.services.compliance import SAFETY_ITEMS, failed_items
from fleetops.utils.exceptions import NotFound
from fleetops.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)


def _add_alert(db: AsyncSession, alert_type: AlertType, title: str, message: str, payload: dict) -> Alert:
    alert = Alert(
        id=str(uuid.uuid4()),
        type=alert_type.value,
        title=title,
        message=message,
        payload=payload,
        created_at=utcnow_iso(),
    )
    db.add(alert)
    logger.info("Queued %s alert %s", alert_type.value, alert.id)
    return alert


def driver_pending_alert(db: AsyncSession, driver: User) -> Alert:
    return _add_alert(
        db,
        AlertType.DRIVER_PENDING,
        "Nouveau conducteur en attente d'approbation",
        f"{driver.first_name} {driver.last_name} ({driver.phone}) nécessite une approbation.",
        {
            "driver_id": driver.id,
            "phone": driver.phone,
            "first_name": driver.first_name,
            "last_name": driver.last_name,
        },
    )


def inspection_failed_alert(db: AsyncSession, inspection: Inspection, shift: Shift) -> Alert | None:
    """Queue an alert when at least one safety item is absent, else do nothing."""
    missing = failed_items(inspection)
    if not missing:
        return None
    labels = ", ".join(SAFETY_ITEMS[item] for item in missing)
    return _add_alert(
        db,
        AlertType.INSPECTION_FAILED,
        "Inspection non conforme",
        f"Inspection de {'départ' if inspection.type == 'departure' else 'retour'} : équipement manquant ({labels}).",
        {
            "shift_id": shift.id,
            "inspection_id": inspection.id,
            "inspection_type": inspection.type,
            "driver_id": shift.driver_id,
            "failed_items": missing,
        },
    )


def repair_completed_alert(db: AsyncSession, record: MaintenanceRecord, vehicle: Vehicle | None) -> Alert:
    vehicle_label = vehicle.name if vehicle else record.vehicle_id
    return _add_alert(
        db,
        AlertType.REPAIR_COMPLETED,
        "Réparation terminée",
        f"La maintenance « {record.description} » sur {vehicle_label} est terminée.",
        {"vehicle_id": record.vehicle_id, "maintenance_id": record.id},
    )


async def list_alerts(
    db: AsyncSession,
    alert_type: AlertType | None = None,
    start_date: str | None = None,
    unread_only: bool = False,
) -> list[Alert]:
    query = select(Alert)
    if alert_type is not None:
        query = query.where(Alert.type == alert_type.value)
    if start_date is not None:
        query = query.where(Alert.created_at >= start_date)
    if unread_only:
        query = query.where(Alert.read_at.is_(None))
    result = await db.execute(query.order_by(Alert.created_at.desc()))
    return list(result.scalars().all())


async def mark_read(db: AsyncSession, alert_id: str) -> Alert:
    """Set ``read_at`` the first time; later calls leave it untouched."""
    alert = await db.get(Alert, alert_id)
    if alert is None:
        raise NotFound("Alerte introuvable", "ALERT_NOT_FOUND")

    if alert.read_at is None:
        # Conditional update so concurrent calls cannot move read_at twice.
        await db.execute(
            update(Alert)
            .where(Alert.id == alert_id, Alert.read_at.is_(None))
            .values(read_at=utcnow_iso())
        )
        await db.commit()
        await db.refresh(alert)
        logger.info("Alert %s marked as read", alert_id)
    return alert
