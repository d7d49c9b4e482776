from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.config import settings
from fleetops.database import get_db
from fleetops.dependencies import get_current_session, get_session_store, get_token
from fleetops.schemas.auth import EmailSignInRequest, PhoneSignInRequest
from fleetops.services import auth_service
from fleetops.services.auth_service import AuthSession, SessionStore
from fleetops.utils.response import success_response

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_cookie_max_age,
        path="/",
        httponly=True,
        samesite="lax",
    )


def _signed_in(response: Response, session: AuthSession) -> dict:
    _set_session_cookie(response, session.token)
    return success_response(data={
        "user": auth_service.session_to_dict(session),
        "session_token": session.token,
    })


@router.post("/sign-in/email")
async def sign_in_email(
    payload: EmailSignInRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    session = await auth_service.sign_in_with_password(db, store, payload.email.strip().lower(), payload.password)
    return _signed_in(response, session)


@router.post("/sign-in/phone")
async def sign_in_phone(
    payload: PhoneSignInRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    session = await auth_service.sign_in_with_phone(db, store, payload.phone.strip())
    return _signed_in(response, session)


@router.get("/session")
async def current_session(session: AuthSession = Depends(get_current_session)):
    return success_response(data={"user": auth_service.session_to_dict(session)})


@router.post("/sign-out")
async def sign_out(
    response: Response,
    token: str | None = Depends(get_token),
    store: SessionStore = Depends(get_session_store),
):
    auth_service.sign_out(store, token)
    response.delete_cookie(settings.session_cookie_name, path="/", samesite="lax")
    return success_response(message="Déconnexion réussie")
