"""
Session/Auth Gate

Holds the identity of the current user and decides whether the main
screens are reachable. It performs no per-operation authorization: any
logged-in session has full access to the single local account.

Login accepts the configured demo credentials. Registration establishes
a session for any well-formed email and long-enough password; there is
no local account registry, since user storage and password hashing
belong to a server this app does not run.
"""

import hmac
from typing import Optional

from pydantic import ValidationError

from mywallet.audit import AuditLogger
from mywallet.config import AuthSettings
from mywallet.exceptions import AuthenticationError
from mywallet.models.wallet import Session, StoreKey
from mywallet.services.storage import KeyValueStore, StorageError


LOGIN_FAILED_MESSAGE = "Invalid email or password."
SESSION_SAVE_FAILED_MESSAGE = "We could not save your session. Please try again."


class AuthGate:
    """Owns the current Session and its persisted copy."""

    def __init__(
        self,
        store: KeyValueStore,
        settings: Optional[AuthSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._settings = settings or AuthSettings()
        self._audit_logger = audit_logger
        self._session: Optional[Session] = None

    def current_session(self) -> Optional[Session]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    async def authenticate(self, email: str, password: str) -> Session:
        """
        Log in with email and password.

        Raises:
            AuthenticationError: Credentials do not match, or the session
                could not be saved
        """
        email = (email or "").strip()
        expected_password = self._settings.demo_password.get_secret_value()

        email_ok = hmac.compare_digest(email.encode(), self._settings.demo_email.encode())
        password_ok = hmac.compare_digest((password or "").encode(), expected_password.encode())

        if not (email_ok and password_ok):
            if self._audit_logger:
                self._audit_logger.log_login(email, succeeded=False)
            raise AuthenticationError(LOGIN_FAILED_MESSAGE)

        session = await self._start(Session(email=email))
        if self._audit_logger:
            self._audit_logger.log_login(email, succeeded=True)
        return session

    async def register(self, email: str, password: str) -> Session:
        """
        Register and log in.

        Raises:
            AuthenticationError: Email missing/malformed, password too short,
                or the session could not be saved
        """
        email = (email or "").strip()
        password = password or ""
        minimum = self._settings.min_password_length

        if not email or "@" not in email or len(password) < minimum:
            raise AuthenticationError(
                "Please enter a valid email and a password of at least "
                f"{minimum} characters."
            )

        session = await self._start(Session(email=email))
        if self._audit_logger:
            self._audit_logger.log_registered(email)
        return session

    async def restore(self) -> Optional[Session]:
        """
        Pick up the session persisted by a previous run, if any.

        An unreadable record counts as logged out.
        """
        try:
            raw = await self._store.get(StoreKey.CURRENT_USER.value)
        except StorageError:
            raw = None

        if raw is None:
            self._session = None
            return None

        try:
            self._session = Session.model_validate_json(raw)
        except ValidationError:
            self._session = None
        return self._session

    async def logout(self) -> None:
        """End the session and forget the persisted copy."""
        email = self._session.email if self._session else None
        self._session = None
        try:
            await self._store.remove(StoreKey.CURRENT_USER.value)
        except StorageError as e:
            # The stale record lets restore() bring the session back on the next start.
            if self._audit_logger:
                self._audit_logger.log_persist_failed(StoreKey.CURRENT_USER.value, str(e))
        if self._audit_logger:
            self._audit_logger.log_logged_out(email)

    async def _start(self, session: Session) -> Session:
        try:
            await self._store.set(StoreKey.CURRENT_USER.value, session.model_dump_json())
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_persist_failed(StoreKey.CURRENT_USER.value, str(e))
            raise AuthenticationError(SESSION_SAVE_FAILED_MESSAGE) from e
        self._session = session
        return session
