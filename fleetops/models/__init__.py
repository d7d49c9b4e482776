from fleetops.models.user import User, UserRole
from fleetops.models.vehicle import Vehicle, VehicleStatus
from fleetops.models.shift import Shift, ShiftStatus
from fleetops.models.inspection import Inspection, SubmissionType
from fleetops.models.battery_record import BatteryRecord
from fleetops.models.alert import Alert, AlertType
from fleetops.models.location import LocationUpdate
from fleetops.models.maintenance import MaintenanceRecord, MaintenanceStatus

__all__ = [
    "User", "UserRole",
    "Vehicle", "VehicleStatus",
    "Shift", "ShiftStatus",
    "Inspection", "SubmissionType",
    "BatteryRecord",
    "Alert", "AlertType",
    "LocationUpdate",
    "MaintenanceRecord", "MaintenanceStatus",
]
