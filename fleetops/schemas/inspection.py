from pydantic import BaseModel

from fleetops.models.inspection import SubmissionType


class InspectionCreate(BaseModel):
    shift_id: str
    type: SubmissionType
    video_url: str | None = None
    trousse_secours: bool
    trousse_secours_photo: str | None = None
    trousse_secours_comment: str | None = None
    roue_secours: bool
    roue_secours_photo: str | None = None
    roue_secours_comment: str | None = None
    extincteur: bool
    extincteur_photo: str | None = None
    extincteur_comment: str | None = None
    booster_batterie: bool
    booster_batterie_photo: str | None = None
    booster_batterie_comment: str | None = None


class InspectionResponse(BaseModel):
    id: str
    shift_id: str
    type: str
    video_url: str | None = None
    trousse_secours: bool
    trousse_secours_photo: str | None = None
    trousse_secours_comment: str | None = None
    roue_secours: bool
    roue_secours_photo: str | None = None
    roue_secours_comment: str | None = None
    extincteur: bool
    extincteur_photo: str | None = None
    extincteur_comment: str | None = None
    booster_batterie: bool
    booster_batterie_photo: str | None = None
    booster_batterie_comment: str | None = None
    completed_at: str

    model_config = {"from_attributes": True}
