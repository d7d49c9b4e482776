from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

from fleetops.models.maintenance import MaintenanceStatus


class MaintenanceCreate(BaseModel):
    vehicle_id: str
    description: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    cost: float | None = Field(default=None, ge=0)
    notes: str | None = None


class MaintenanceStatusUpdate(BaseModel):
    status: MaintenanceStatus


class MaintenanceResponse(BaseModel):
    id: str
    vehicle_id: str
    description: str
    status: str
    performed_by: str
    performed_at: str
    cost: float | None = None
    notes: str | None = None
    completed_at: str | None = None

    model_config = {"from_attributes": True}
