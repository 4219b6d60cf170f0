"""
Financial State Engine

DESIGN DECISION: One explicitly owned container holds balance, spending
categories, vaults and the chat transcript. Screens receive the engine
and call its mutation API; nothing reads or writes ambient globals.

Every mutation follows the same order:
1. Validate (a rejected input changes nothing)
2. Update memory (memory is authoritative from this point)
3. Queue the changed field for the store (latest value per key wins)

Persistence is fire-and-forget relative to the caller. When an event loop
is running a background drain task is scheduled; `flush()` is the explicit,
awaitable durable write. A crash before the write lands loses only that
one mutation.
"""

import asyncio
from decimal import Decimal
from typing import Callable, Optional
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError

from mywallet.audit import AuditLogger
from mywallet.exceptions import InvalidInputError, VaultNotFoundError
from mywallet.models.defaults import (
    default_chat_history,
    default_monthly_spending,
    default_state,
)
from mywallet.models.wallet import (
    ChatMessage,
    FinancialSnapshot,
    MonthlySpending,
    SpendingShare,
    StoreKey,
    Vault,
    WalletState,
)
from mywallet.services.storage import KeyValueStore, StorageError
from mywallet.validation import (
    validate_new_vault,
    validate_spending,
    validate_vault_amount,
)


_BALANCE = TypeAdapter(Decimal)
_CATEGORIES = TypeAdapter(dict[str, Decimal])
_VAULTS = TypeAdapter(list[Vault])
_CHAT_HISTORY = TypeAdapter(list[ChatMessage])


def generate_vault_id() -> str:
    return f"vault-{uuid4().hex[:12]}"


class FinancialStateEngine:
    """
    Owns all financial state of the single local account.

    GUARANTEES:
    - Category totals only ever grow, by exactly the recorded amount
    - Balance may go negative (overspending is allowed, never corrected)
    - Vault ids are unique within the collection
    - A failed operation leaves every field unchanged
    """

    def __init__(
        self,
        store: KeyValueStore,
        audit_logger: Optional[AuditLogger] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._id_factory = id_factory or generate_vault_id
        self._state: WalletState = default_state()

        self._pending: dict[StoreKey, str] = {}
        self._drain_task: Optional[asyncio.Task] = None

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def balance(self) -> Decimal:
        return self._state.balance

    @property
    def spending_categories(self) -> dict[str, Decimal]:
        return dict(self._state.spending_categories)

    @property
    def total_spending(self) -> Decimal:
        return sum(self._state.spending_categories.values(), Decimal(0))

    @property
    def vaults(self) -> list[Vault]:
        return [vault.model_copy() for vault in self._state.vaults]

    @property
    def chat_history(self) -> list[ChatMessage]:
        return list(self._state.chat_history)

    @property
    def monthly_spending(self) -> MonthlySpending:
        return self._state.monthly_spending.model_copy(deep=True)

    def get_vault(self, vault_id: str) -> Vault:
        """Return a copy of one vault, or raise VaultNotFoundError."""
        return self._find_vault(vault_id)[1].model_copy()

    def snapshot(self) -> FinancialSnapshot:
        """Deep, read-only copy of the state the assistant reasons over."""
        return FinancialSnapshot(
            balance=self._state.balance,
            spending_categories=dict(self._state.spending_categories),
            vaults=tuple(vault.model_copy() for vault in self._state.vaults),
        )

    def spending_breakdown(self) -> list[SpendingShare]:
        """Each category's amount and share of total, in insertion order."""
        total = self.total_spending
        if total == 0:
            return []
        return [
            SpendingShare.build(category, amount, total)
            for category, amount in self._state.spending_categories.items()
        ]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def record_spending(self, category: str, amount) -> Decimal:
        """
        Add `amount` to a category and subtract it from the balance.

        The category is created when absent. There is no floor check
        against the balance.

        Returns:
            The category's new total

        Raises:
            InvalidInputError: Empty category or non-positive/non-finite amount
        """
        try:
            name, value = validate_spending(category, amount)
        except InvalidInputError as e:
            self._audit_rejected("record_spending", e)
            raise

        categories = self._state.spending_categories
        categories[name] = categories.get(name, Decimal(0)) + value
        self._state.balance -= value

        self._queue(StoreKey.SPENDING_CATEGORIES, _CATEGORIES.dump_json(categories).decode())
        self._queue(StoreKey.BALANCE, str(self._state.balance))

        if self._audit_logger:
            self._audit_logger.log_spending_recorded(name, str(value), str(categories[name]))

        return categories[name]

    def create_vault(self, name: str, goal) -> Vault:
        """
        Create a vault with `current = 0` and append it to the collection.

        Raises:
            InvalidInputError: Empty name or non-positive/non-finite goal
        """
        try:
            vault_name, vault_goal = validate_new_vault(name, goal)
        except InvalidInputError as e:
            self._audit_rejected("create_vault", e)
            raise

        existing = {vault.id for vault in self._state.vaults}
        vault_id = self._id_factory()
        while vault_id in existing:
            vault_id = generate_vault_id()

        vault = Vault(id=vault_id, name=vault_name, current=Decimal(0), goal=vault_goal)
        self._state.vaults.append(vault)
        self._queue_vaults()

        if self._audit_logger:
            self._audit_logger.log_vault_created(vault.id, vault.name, str(vault.goal))

        return vault.model_copy()

    def set_vault_amount(self, vault_id: str, new_amount) -> Vault:
        """
        Replace a vault's `current` amount. This is not a delta.

        Raises:
            VaultNotFoundError: No vault has `vault_id`
            InvalidInputError: Negative or non-finite amount
        """
        index, vault = self._find_vault(vault_id)
        try:
            amount = validate_vault_amount(new_amount)
        except InvalidInputError as e:
            self._audit_rejected("set_vault_amount", e)
            raise

        updated = vault.model_copy(update={"current": amount})
        self._state.vaults[index] = updated
        self._queue_vaults()

        if self._audit_logger:
            self._audit_logger.log_vault_amount_set(vault_id, str(vault.current), str(amount))

        return updated.model_copy()

    def append_chat_message(self, message: ChatMessage) -> None:
        """Append to the transcript. Messages are never edited or removed."""
        self._state.chat_history.append(message)
        self._queue_chat_history()

    def reset_chat_history(self) -> None:
        """Start a fresh transcript holding only the assistant greeting."""
        self._state.chat_history = default_chat_history()
        self._queue_chat_history()

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load_from_store(self) -> None:
        """
        Replace in-memory state with what the store holds.

        Any field that is absent, unreadable or fails to parse keeps its
        documented default. This is a recovery policy, not an error.
        """
        state = default_state()
        defaulted: list[str] = []

        async def read(key: StoreKey, parse):
            try:
                raw = await self._store.get(key.value)
            except StorageError as e:
                self._audit_defaulted(key, f"store unavailable: {e}")
                defaulted.append(key.value)
                return None
            if raw is None:
                defaulted.append(key.value)
                return None
            try:
                return parse(raw)
            except (ValidationError, ValueError, ArithmeticError) as e:
                self._audit_defaulted(key, f"unparseable value: {e}")
                defaulted.append(key.value)
                return None

        balance = await read(StoreKey.BALANCE, _parse_balance)
        if balance is not None:
            state.balance = balance

        categories = await read(StoreKey.SPENDING_CATEGORIES, _parse_categories)
        if categories is not None:
            state.spending_categories = categories

        vaults = await read(StoreKey.VAULTS, _parse_vaults)
        if vaults is not None:
            state.vaults = vaults

        chat_history = await read(StoreKey.CHAT_HISTORY, _CHAT_HISTORY.validate_json)
        if chat_history is not None:
            state.chat_history = chat_history

        monthly = await read(StoreKey.MONTHLY_SPENDING, MonthlySpending.model_validate_json)
        if monthly is not None:
            state.monthly_spending = monthly

        self._state = state
        self._pending.clear()

        if self._audit_logger:
            self._audit_logger.log_state_loaded(defaulted)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    @property
    def has_pending_writes(self) -> bool:
        return bool(self._pending)

    async def flush(self) -> bool:
        """
        Write every pending field to the store.

        Returns True when nothing is left pending. Failed writes are logged
        and stay queued for the next flush; they are never raised.
        """
        loop = asyncio.get_running_loop()
        task = self._drain_task
        if task is None or task.done() or task.get_loop() is not loop:
            # A task left on a closed loop never ran; its keys are still pending.
            task = loop.create_task(self._drain())
            self._drain_task = task
        return await task

    async def _drain(self) -> bool:
        while self._pending:
            key = next(iter(self._pending))
            payload = self._pending.pop(key)
            try:
                await self._store.set(key.value, payload)
            except StorageError as e:
                # A newer value may have been queued while we were writing.
                self._pending.setdefault(key, payload)
                if self._audit_logger:
                    self._audit_logger.log_persist_failed(key.value, str(e))
                return False
        return True

    def _queue(self, key: StoreKey, payload: str) -> None:
        self._pending[key] = payload
        self._schedule_drain()

    def _queue_vaults(self) -> None:
        self._queue(StoreKey.VAULTS, _VAULTS.dump_json(self._state.vaults).decode())

    def _queue_chat_history(self) -> None:
        self._queue(StoreKey.CHAT_HISTORY, _CHAT_HISTORY.dump_json(self._state.chat_history).decode())

    def _schedule_drain(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (e.g. a synchronous UI callback): wait for flush().
            return
        task = self._drain_task
        if task is None or task.done() or task.get_loop() is not loop:
            self._drain_task = loop.create_task(self._drain())

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _find_vault(self, vault_id: str) -> tuple[int, Vault]:
        for index, vault in enumerate(self._state.vaults):
            if vault.id == vault_id:
                return index, vault
        if self._audit_logger:
            self._audit_logger.log_vault_not_found(str(vault_id))
        raise VaultNotFoundError(vault_id)

    def _audit_rejected(self, operation: str, error: InvalidInputError) -> None:
        if self._audit_logger:
            self._audit_logger.log_input_rejected(operation, error.field, error.message)

    def _audit_defaulted(self, key: StoreKey, reason: str) -> None:
        if self._audit_logger:
            self._audit_logger.log_state_field_defaulted(key.value, reason)


def _parse_balance(raw: str) -> Decimal:
    value = _BALANCE.validate_python(raw.strip())
    if not value.is_finite():
        raise ValueError(f"balance is not finite: {raw!r}")
    return value


def _parse_categories(raw: str) -> dict[str, Decimal]:
    categories = _CATEGORIES.validate_json(raw)
    for name, amount in categories.items():
        if amount < 0:
            raise ValueError(f"category {name!r} has a negative total")
    return categories


def _parse_vaults(raw: str) -> list[Vault]:
    vaults = _VAULTS.validate_json(raw)
    ids = [vault.id for vault in vaults]
    if len(ids) != len(set(ids)):
        raise ValueError("duplicate vault ids")
    return vaults
