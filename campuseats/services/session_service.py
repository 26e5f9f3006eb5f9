import logging
import secrets
from typing import Awaitable, Callable, List, Optional, Tuple

from tortoise.exceptions import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from campuseats.models.auth import Session, User

log = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

AuthListener = Callable[[str, Optional[User], str], Awaitable[None]]


class AuthenticationError(Exception):
    """Missing, unknown or revoked credentials."""


class SessionProvider:
    """
    Owns the authenticated identity of a request and tells interested parties
    when a session starts or ends. Injected into routes, never imported as state.
    """

    def __init__(self):
        self._listeners: List[AuthListener] = []

    def on_auth_change(self, callback: AuthListener) -> Callable[[], None]:
        """Registers `callback(event, user, token)`; returns a function that removes it."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def _emit(self, event: str, user: Optional[User], token: str) -> None:
        for listener in list(self._listeners):
            try:
                await listener(event, user, token)
            except Exception as e:
                log.error(f"Auth listener failed on {event}: {e}")

    async def sign_up(self, email: str, password: str) -> User:
        email = email.strip().lower()
        if await User.filter(email=email).exists():
            raise ValueError("An account with this email already exists.")
        try:
            user = await User.create(email=email, password_hash=generate_password_hash(password))
        except IntegrityError:
            raise ValueError("An account with this email already exists.")
        log.info(f"User {user.id} signed up.")
        return user

    async def sign_in(self, email: str, password: str) -> Tuple[str, User]:
        user = await User.get_or_none(email=email.strip().lower())
        if not user or not check_password_hash(user.password_hash, password):
            raise AuthenticationError("Invalid email or password.")
        token = secrets.token_hex(32)
        await Session.create(token=token, user=user)
        log.info(f"User {user.id} signed in.")
        await self._emit(SIGNED_IN, user, token)
        return token, user

    async def sign_out(self, token: str) -> None:
        session = await Session.get_or_none(token=token).prefetch_related("user")
        if not session:
            return
        user = session.user
        await session.delete()
        log.info(f"User {user.id} signed out.")
        await self._emit(SIGNED_OUT, user, token)

    async def get_current_user(self, token: Optional[str]) -> Optional[User]:
        if not token:
            return None
        session = await Session.get_or_none(token=token).prefetch_related("user")
        return session.user if session else None


provider = SessionProvider()


def get_session_provider() -> SessionProvider:
    return provider
