"""
Main Orchestrator for My Wallet

This module ties together all the components:
1. Auth gate (who is logged in, are the main screens reachable)
2. Financial state engine (balance, spending, vaults, transcript)
3. Intent responder + chat session (the scripted assistant)

DESIGN DECISION: The presentation layer receives one WalletApp and talks
only to it. The engine is injected, never imported as a global, so a test
or a different front end can build its own instance over any store.
"""

from typing import Optional

from mywallet.assistant import ChatSession, IntentResponder
from mywallet.audit import AuditLogger
from mywallet.config import Settings, StorageSettings, get_settings
from mywallet.engine import FinancialStateEngine
from mywallet.exceptions import AuthenticationError
from mywallet.models.wallet import ChatMessage, DashboardSummary, Session
from mywallet.services.auth import AuthGate
from mywallet.services.storage import InMemoryStore, JsonFileStore, KeyValueStore


class WalletApp:
    """
    One user session's worth of wiring.

    The gate only decides which screens are reachable; engine operations
    themselves never check the session.
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: Optional[Settings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        settings = settings or get_settings()
        assistant_settings = settings.assistant
        app_settings = settings.app

        self._store = store
        self._audit_logger = audit_logger or AuditLogger()
        self._currency = app_settings.currency_code

        self.auth = AuthGate(store, settings.auth, self._audit_logger)
        self.engine = FinancialStateEngine(store, self._audit_logger)
        self.responder = IntentResponder(assistant_settings, currency_code=self._currency)
        self.chat = ChatSession(
            self.engine,
            self.responder,
            reply_delay_seconds=assistant_settings.reply_delay_seconds,
            audit_logger=self._audit_logger,
        )

    @property
    def currency_code(self) -> str:
        return self._currency

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    @property
    def is_unlocked(self) -> bool:
        """Whether the main screens may be shown."""
        return self.auth.is_authenticated

    async def start(self) -> Optional[Session]:
        """Restore a previous session and load financial state."""
        session = await self.auth.restore()
        await self.engine.load_from_store()
        return session

    def require_session(self) -> Session:
        """
        Current session, for screens that need one.

        Raises:
            AuthenticationError: Nobody is logged in
        """
        session = self.auth.current_session()
        if session is None:
            raise AuthenticationError("Please log in to continue.")
        return session

    async def ask(self, text: str) -> Optional[ChatMessage]:
        """Send a chat message, wait for the reply and persist the transcript."""
        try:
            return await self.chat.send(text)
        finally:
            await self.engine.flush()

    def dashboard(self) -> DashboardSummary:
        session = self.auth.current_session()
        return DashboardSummary(
            email=session.email if session else None,
            balance=self.engine.balance,
            total_spending=self.engine.total_spending,
            monthly_spending=self.engine.monthly_spending,
        )


def create_store(settings: StorageSettings) -> KeyValueStore:
    """Build the configured key-value store backend."""
    if settings.backend == "memory":
        return InMemoryStore()
    return JsonFileStore(settings.data_file, write_attempts=settings.write_attempts)


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
) -> WalletApp:
    """
    Factory function to create the application.

    Args:
        settings: Settings to use; defaults to the cached environment settings
        store: Store to use; defaults to the configured backend

    Returns:
        A WalletApp that still needs `await app.start()`
    """
    settings = settings or get_settings()
    store = store or create_store(settings.storage)
    return WalletApp(store, settings)
