"""Business rules for inspection and battery-count submissions.

Every function here is pure: it reads attributes off a submission (a request
schema or a stored row) and returns the list of problems found, in a fixed
order. An empty list means the submission is acceptable.
"""
from dataclasses import dataclass
from typing import Any

from fleetops.models.inspection import SubmissionType

# Field prefix -> label shown to team leaders.
SAFETY_ITEMS: dict[str, str] = {
    "trousse_secours": "Trousse de secours",
    "roue_secours": "Roue de secours",
    "extincteur": "Extincteur",
    "booster_batterie": "Booster batterie",
}


@dataclass(frozen=True)
class ComplianceIssue:
    field: str
    reason: str

    def to_dict(self) -> dict:
        return {"field": self.field, "reason": self.reason}


def _filled(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _type_value(submission: Any) -> str:
    value = getattr(submission, "type", None)
    return value.value if isinstance(value, SubmissionType) else value


def validate_inspection(submission: Any) -> list[ComplianceIssue]:
    issues: list[ComplianceIssue] = []
    for item in SAFETY_ITEMS:
        present = getattr(submission, item)
        if present:
            if not _filled(getattr(submission, f"{item}_photo", None)):
                issues.append(ComplianceIssue(item, "photo requise lorsque l'équipement est présent"))
        elif not _filled(getattr(submission, f"{item}_comment", None)):
            issues.append(ComplianceIssue(item, "commentaire requis lorsque l'équipement est absent"))

    if _type_value(submission) == SubmissionType.DEPARTURE.value and not _filled(
        getattr(submission, "video_url", None)
    ):
        issues.append(ComplianceIssue("video_url", "vidéo requise pour l'inspection de départ"))
    return issues


def validate_battery_record(submission: Any) -> list[ComplianceIssue]:
    issues: list[ComplianceIssue] = []
    count = getattr(submission, "count", None)
    if count is None or isinstance(count, bool) or not isinstance(count, int) or count < 0:
        issues.append(ComplianceIssue("count", "nombre de batteries entier positif requis"))
    if not _filled(getattr(submission, "photo_url", None)):
        issues.append(ComplianceIssue("photo_url", "photo requise"))
    if not _filled(getattr(submission, "comment", None)):
        issues.append(ComplianceIssue("comment", "commentaire requis"))
    if not _filled(getattr(submission, "driver_signature", None)):
        issues.append(ComplianceIssue("driver_signature", "signature du chauffeur requise"))
    return issues


def failed_items(inspection: Any) -> list[str]:
    """Safety items reported absent, in fixed order."""
    return [item for item in SAFETY_ITEMS if not getattr(inspection, item)]


def describe_failed_items(inspection: Any) -> list[dict]:
    return [
        {
            "item": item,
            "item_name": SAFETY_ITEMS[item],
            "comment": getattr(inspection, f"{item}_comment"),
            "photo_url": getattr(inspection, f"{item}_photo"),
        }
        for item in failed_items(inspection)
    ]
