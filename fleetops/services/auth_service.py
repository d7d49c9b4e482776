"""Session tokens for the two login modes.

Team leaders and admins sign in with email + password, approved drivers with
their phone number only. A successful sign-in mints a random token bound to a
snapshot of the user's identity; the snapshot lives in a ``SessionStore``
owned by the application instance. There is no server-side expiry: a token
stays valid until sign-out, or until the user it points to is gone or
deactivated.
"""
import dataclasses
import logging
import secrets
import threading
from dataclasses import dataclass

import bcrypt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.models.user import User, UserRole
from fleetops.utils.exceptions import Forbidden, InvalidInput, NotFound, Unauthorized
from fleetops.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)

PASSWORD_LOGIN_ROLES = frozenset({UserRole.TEAM_LEADER.value, UserRole.ADMIN.value})


@dataclass(frozen=True)
class AuthSession:
    token: str
    user_id: str
    role: str
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    is_approved: bool
    is_active: bool
    created_at: str


class SessionStore:
    """Token -> AuthSession map shared by every request of one app instance."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sessions: dict[str, AuthSession] = {}

    def put(self, session: AuthSession) -> None:
        with self._lock:
            self._sessions[session.token] = session

    def get(self, token: str) -> AuthSession | None:
        with self._lock:
            return self._sessions.get(token)

    def delete(self, token: str) -> AuthSession | None:
        with self._lock:
            return self._sessions.pop(token, None)

    def delete_for_user(self, user_id: str) -> int:
        with self._lock:
            tokens = [t for t, s in self._sessions.items() if s.user_id == user_id]
            for token in tokens:
                del self._sessions[token]
            return len(tokens)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    return bcrypt.checkpw(password.encode(), password_hash.encode())


def generate_token() -> str:
    return secrets.token_urlsafe(32)


def _snapshot(user: User, token: str, created_at: str | None = None) -> AuthSession:
    return AuthSession(
        token=token,
        user_id=user.id,
        role=user.role,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        phone=user.phone,
        is_approved=bool(user.is_approved),
        is_active=bool(user.is_active),
        created_at=created_at or utcnow_iso(),
    )


def _open_session(store: SessionStore, user: User) -> AuthSession:
    session = _snapshot(user, generate_token())
    store.put(session)
    return session


async def sign_in_with_password(
    db: AsyncSession, store: SessionStore, email: str, password: str
) -> AuthSession:
    if not email or not password:
        raise InvalidInput("Email et mot de passe requis")

    result = await db.execute(select(User).where(User.email == email))
    user = result.scalars().first()

    if user is None:
        logger.warning("Password sign-in for unknown email")
        raise Unauthorized("Email ou mot de passe incorrect", "INVALID_CREDENTIALS")

    if user.role not in PASSWORD_LOGIN_ROLES:
        logger.warning("Password sign-in refused for role %s (user %s)", user.role, user.id)
        raise Forbidden(
            "Accès refusé. Veuillez utiliser la connexion par téléphone",
            "FORBIDDEN_LOGIN_METHOD",
        )

    if not verify_password(password, user.password_hash):
        logger.warning("Invalid password for user %s", user.id)
        raise Unauthorized("Email ou mot de passe incorrect", "INVALID_CREDENTIALS")

    if not user.is_active:
        logger.warning("Inactive user %s attempted password sign-in", user.id)
        raise Forbidden("Votre compte a été désactivé", "NOT_ACTIVE")

    session = _open_session(store, user)
    logger.info("User %s signed in with password (role=%s)", user.id, user.role)
    return session


async def sign_in_with_phone(db: AsyncSession, store: SessionStore, phone: str) -> AuthSession:
    if not phone:
        raise InvalidInput("Numéro de téléphone requis")

    result = await db.execute(select(User).where(User.phone == phone))
    user = result.scalars().first()

    if user is None:
        logger.warning("Phone sign-in for unknown number")
        raise NotFound("Numéro de téléphone non reconnu", "USER_NOT_FOUND")

    if user.role != UserRole.DRIVER.value:
        logger.warning("Phone sign-in refused for role %s (user %s)", user.role, user.id)
        raise Forbidden(
            "Accès refusé. Veuillez utiliser la connexion par email",
            "FORBIDDEN_LOGIN_METHOD",
        )

    if not user.is_approved:
        logger.warning("Driver %s is not approved yet", user.id)
        raise Forbidden("Votre compte est en attente d'approbation", "NOT_APPROVED")

    if not user.is_active:
        logger.warning("Driver %s is not active", user.id)
        raise Forbidden("Votre compte a été désactivé", "NOT_ACTIVE")

    session = _open_session(store, user)
    logger.info("Driver %s signed in by phone", user.id)
    return session


async def resolve_session(db: AsyncSession, store: SessionStore, token: str | None) -> AuthSession:
    """Return the live session for ``token``.

    The snapshot is refreshed from the current user row. A token whose user
    was deleted or deactivated is dropped from the store.
    """
    session = store.get(token) if token else None
    if session is None:
        raise Unauthorized("Aucune session active", "NO_SESSION")

    user = await db.get(User, session.user_id)
    if user is None or not user.is_active:
        store.delete(session.token)
        logger.warning("Invalidated session of missing or inactive user %s", session.user_id)
        raise Unauthorized("Authentification invalide", "INVALID_SESSION")

    refreshed = _snapshot(user, session.token, created_at=session.created_at)
    if refreshed != session:
        store.put(refreshed)
    return refreshed


def sign_out(store: SessionStore, token: str | None) -> AuthSession | None:
    if not token:
        return None
    session = store.delete(token)
    if session is not None:
        logger.info("User %s signed out", session.user_id)
    return session


def session_to_dict(session: AuthSession) -> dict:
    data = dataclasses.asdict(session)
    data.pop("token")
    return data
