"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of every change to balance, spending and vaults
2. Debugging capability for load/persist problems
3. A correlation trail for each chat exchange

The audit logger:
- Logs locally through structlog (JSON lines)
- Never raises into the caller
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from mywallet.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Keeps the last `history_size` events in memory so the settings screen
    (and tests) can show what happened recently.
    """

    def __init__(self, history_size: int = 200):
        self._logger = structlog.get_logger("mywallet.audit")
        self._history: list[AuditEvent] = []
        self._history_size = history_size

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Most recent events, oldest first."""
        return list(self._history)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[0]

        log_dict = event.to_log_dict()
        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_spending_recorded(self, category: str, amount: str, new_total: str) -> None:
        self.log(AuditEventBuilder.spending_recorded(category, amount, new_total))

    def log_vault_created(self, vault_id: str, name: str, goal: str) -> None:
        self.log(AuditEventBuilder.vault_created(vault_id, name, goal))

    def log_vault_amount_set(self, vault_id: str, previous: str, current: str) -> None:
        self.log(AuditEventBuilder.vault_amount_set(vault_id, previous, current))

    def log_input_rejected(self, operation: str, field: Optional[str], message: str) -> None:
        self.log(AuditEventBuilder.input_rejected(operation, field, message))

    def log_vault_not_found(self, vault_id: str) -> None:
        self.log(AuditEventBuilder.vault_not_found(vault_id))

    def log_state_loaded(self, defaulted_keys: list[str]) -> None:
        self.log(AuditEventBuilder.state_loaded(defaulted_keys))

    def log_state_field_defaulted(self, key: str, reason: str) -> None:
        self.log(AuditEventBuilder.state_field_defaulted(key, reason))

    def log_persist_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.persist_failed(key, error_message))

    def log_chat_message_received(self, length: int, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.chat_message_received(length, correlation_id))

    def log_chat_reply_delivered(self, intent: str, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.chat_reply_delivered(intent, correlation_id))

    def log_chat_reply_cancelled(self, correlation_id: Optional[UUID]) -> None:
        self.log(AuditEventBuilder.chat_reply_cancelled(correlation_id))

    def log_chat_reset(self) -> None:
        self.log(AuditEventBuilder.chat_reset())

    def log_login(self, email: str, succeeded: bool) -> None:
        self.log(AuditEventBuilder.login(email, succeeded))

    def log_registered(self, email: str) -> None:
        self.log(AuditEventBuilder.registered(email))

    def log_logged_out(self, email: Optional[str]) -> None:
        self.log(AuditEventBuilder.logged_out(email))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., one chat message).
    Pass it through all subsequent operations.
    """
    return uuid4()
