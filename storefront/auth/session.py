"""Password auth session over the records backend."""
from dataclasses import dataclass
from typing import Callable, Optional

from storefront.errors import (
    ERROR_LOGIN_FAILED,
    ERROR_PASSWORD_MISMATCH,
    ERROR_PASSWORD_RESET_FAILED,
    ERROR_PASSWORD_TOO_SHORT,
    ERROR_SIGNUP_FAILED,
    RecordsError,
)
from storefront.logging import get_logger, sanitize_id_for_logging, sanitize_text_for_logging
from storefront.services.models import User
from storefront.services.records import RecordsClient

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 8

UserListener = Callable[[Optional[User]], None]


@dataclass
class AuthResult:
    """Outcome of an auth action."""

    success: bool
    user: Optional[User] = None
    error: Optional[str] = None


class AuthSession:
    """
    Current user state for the storefront.

    Mirrors the client's auth store; call close() on teardown to drop the
    store subscription.
    """

    def __init__(self, client: RecordsClient):
        self.client = client
        self.current_user: Optional[User] = None
        self._listeners: list[UserListener] = []

        store = client.auth_store
        if store.is_valid and store.record:
            self.current_user = User(**store.record)
        self._unsubscribe_store = store.on_change(self._on_store_change)

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def _on_store_change(self, token: str, record: Optional[dict]) -> None:
        user = User(**record) if token and record else None
        self._set_user(user)

    def _set_user(self, user: Optional[User]) -> None:
        self.current_user = user
        for listener in list(self._listeners):
            try:
                listener(user)
            except Exception as e:
                logger.warning(f"Auth session listener failed: {e}", exc_info=True)

    def subscribe(self, listener: UserListener) -> Callable[[], None]:
        """Observe user changes; call the returned function on teardown."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._unsubscribe_store()
        self._listeners.clear()

    async def login(self, email: str, password: str) -> AuthResult:
        try:
            data = await self.client.auth_with_password(email, password)
        except RecordsError as e:
            logger.warning(f"Login error: {sanitize_text_for_logging(e)}")
            return AuthResult(success=False, error=e.message or ERROR_LOGIN_FAILED)
        return AuthResult(success=True, user=User(**data["record"]))

    async def signup(self, name: str, email: str, password: str, password_confirm: str) -> AuthResult:
        """Create an account and log in with it."""
        if password != password_confirm:
            return AuthResult(success=False, error=ERROR_PASSWORD_MISMATCH)
        if len(password) < MIN_PASSWORD_LENGTH:
            return AuthResult(success=False, error=ERROR_PASSWORD_TOO_SHORT)

        try:
            record = await self.client.create(
                "users",
                {
                    "name": name,
                    "email": email,
                    "password": password,
                    "passwordConfirm": password_confirm,
                    "emailVisibility": True,
                },
            )
            await self.client.auth_with_password(email, password)
        except RecordsError as e:
            logger.warning(f"Signup error: {sanitize_text_for_logging(e)}")
            return AuthResult(success=False, error=e.message or ERROR_SIGNUP_FAILED)

        logger.info(f"User {sanitize_id_for_logging(record.get('id'))} signed up")
        return AuthResult(success=True, user=User(**record))

    def logout(self) -> None:
        self.client.auth_store.clear()

    async def request_password_reset(self, email: str) -> AuthResult:
        try:
            await self.client.request_password_reset(email)
        except RecordsError as e:
            logger.warning(f"Password reset error: {sanitize_text_for_logging(e)}")
            return AuthResult(success=False, error=e.message or ERROR_PASSWORD_RESET_FAILED)
        return AuthResult(success=True)
