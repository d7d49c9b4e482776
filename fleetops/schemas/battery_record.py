from pydantic import BaseModel, StrictInt

from fleetops.models.inspection import SubmissionType


class BatteryRecordCreate(BaseModel):
    shift_id: str
    type: SubmissionType
    # Presence and shape are checked by the compliance rules, not here.
    count: StrictInt | None = None
    photo_url: str | None = None
    comment: str | None = None
    driver_signature: str | None = None


class BatteryRecordSign(BaseModel):
    team_leader_signature: str = ""


class BatteryRecordResponse(BaseModel):
    id: str
    shift_id: str
    type: str
    count: int
    photo_url: str
    comment: str
    driver_signature: str
    team_leader_signature: str | None = None
    signed_by: str | None = None
    signed_at: str | None = None
    created_at: str

    model_config = {"from_attributes": True}
