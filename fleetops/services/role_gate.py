"""Capability checks shared by every endpoint."""
import enum
import logging

from fleetops.models.shift import Shift
from fleetops.models.user import UserRole
from fleetops.services.auth_service import AuthSession
from fleetops.utils.exceptions import Forbidden

logger = logging.getLogger(__name__)


class Capability(str, enum.Enum):
    DRIVER = "driver"
    TEAM_LEADER_OR_ADMIN = "team_leader_or_admin"
    ADMIN = "admin"
    ANY_AUTHENTICATED = "any_authenticated"


ALLOWED_ROLES: dict[Capability, frozenset[str]] = {
    Capability.DRIVER: frozenset({UserRole.DRIVER.value}),
    Capability.TEAM_LEADER_OR_ADMIN: frozenset({UserRole.TEAM_LEADER.value, UserRole.ADMIN.value}),
    Capability.ADMIN: frozenset({UserRole.ADMIN.value}),
    Capability.ANY_AUTHENTICATED: frozenset(role.value for role in UserRole),
}

_DENIED_MESSAGES = {
    Capability.DRIVER: "Accès refusé. Rôle chauffeur requis",
    Capability.TEAM_LEADER_OR_ADMIN: "Accès refusé. Rôle chef d'équipe ou administrateur requis",
    Capability.ADMIN: "Accès refusé. Rôle administrateur requis",
    Capability.ANY_AUTHENTICATED: "Accès refusé",
}


def authorize(session: AuthSession, capability: Capability) -> AuthSession:
    if session.role not in ALLOWED_ROLES[capability]:
        logger.warning("User %s (role=%s) lacks capability %s", session.user_id, session.role, capability.value)
        raise Forbidden(_DENIED_MESSAGES[capability])
    return session


def is_fleet_manager(session: AuthSession) -> bool:
    return session.role in ALLOWED_ROLES[Capability.TEAM_LEADER_OR_ADMIN]


def ensure_shift_access(session: AuthSession, shift: Shift) -> None:
    """Drivers only see their own shifts; leaders and admins see all of them."""
    if is_fleet_manager(session):
        return
    if shift.driver_id != session.user_id:
        logger.warning("User %s denied access to shift %s", session.user_id, shift.id)
        raise Forbidden("Accès refusé. Ce service ne vous appartient pas")
