from datetime import datetime

from pydantic import BaseModel, Field


class LocationCreate(BaseModel):
    shift_id: str
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    accuracy: float | None = Field(default=None, ge=0)
    timestamp: datetime | None = None


class LocationResponse(BaseModel):
    id: str
    shift_id: str
    driver_id: str
    latitude: float
    longitude: float
    accuracy: float | None = None
    timestamp: str

    model_config = {"from_attributes": True}
