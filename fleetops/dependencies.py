from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.config import settings
from fleetops.database import get_db
from fleetops.services.auth_service import AuthSession, SessionStore, resolve_session
from fleetops.services.role_gate import Capability, authorize
from fleetops.utils.exceptions import Forbidden

bearer = HTTPBearer(auto_error=False)


async def verify_api_key(x_api_key: str = Header(default="")) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise Forbidden("Clé API invalide ou manquante", "INVALID_API_KEY")


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def extract_token(request: Request, creds: HTTPAuthorizationCredentials | None) -> str | None:
    """Bearer header first, then the session cookie."""
    if creds is not None and creds.credentials:
        return creds.credentials
    return request.cookies.get(settings.session_cookie_name) or None


async def get_token(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> str | None:
    return extract_token(request, creds)


async def get_current_session(
    token: str | None = Depends(get_token),
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
) -> AuthSession:
    return await resolve_session(db, store, token)


def require(capability: Capability):
    async def _guard(session: AuthSession = Depends(get_current_session)) -> AuthSession:
        return authorize(session, capability)

    return _guard
