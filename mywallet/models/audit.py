"""
Audit Models for My Wallet

Every significant action in the system is logged for audit purposes:
1. Traceability of every balance, spending and vault change
2. Debugging information when persistence or loading goes wrong
3. A record of which replies the assistant gave and why

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Financial state
    SPENDING_RECORDED = "spending_recorded"
    VAULT_CREATED = "vault_created"
    VAULT_AMOUNT_SET = "vault_amount_set"
    INPUT_REJECTED = "input_rejected"
    VAULT_NOT_FOUND = "vault_not_found"

    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_FIELD_DEFAULTED = "state_field_defaulted"
    PERSIST_FAILED = "persist_failed"

    # Assistant
    CHAT_MESSAGE_RECEIVED = "chat_message_received"
    CHAT_REPLY_DELIVERED = "chat_reply_delivered"
    CHAT_REPLY_CANCELLED = "chat_reply_cancelled"
    CHAT_RESET = "chat_reset"

    # Session
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    REGISTERED = "registered"
    LOGGED_OUT = "logged_out"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'vault', 'category', 'chat')"
    )
    entity_id: Optional[str] = None

    # Correlation - ties together the events of one chat exchange
    correlation_id: Optional[UUID] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.spending_recorded("Food", "50000", "3050000")
        event = AuditEventBuilder.chat_reply_delivered("balance", correlation_id)
    """

    @staticmethod
    def spending_recorded(category: str, amount: str, new_total: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPENDING_RECORDED,
            entity_type="category",
            entity_id=category,
            description=f"Spending recorded: {category} +{amount}",
            details={
                "amount": amount,
                "category_total": new_total,
            },
            is_user_action=True,
        )

    @staticmethod
    def vault_created(vault_id: str, name: str, goal: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VAULT_CREATED,
            entity_type="vault",
            entity_id=vault_id,
            description=f"Vault created: {name}",
            details={
                "name": name,
                "goal": goal,
            },
            is_user_action=True,
        )

    @staticmethod
    def vault_amount_set(vault_id: str, previous: str, current: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VAULT_AMOUNT_SET,
            entity_type="vault",
            entity_id=vault_id,
            description=f"Vault amount set to {current}",
            details={
                "previous": previous,
                "current": current,
            },
            is_user_action=True,
        )

    @staticmethod
    def input_rejected(operation: str, field: Optional[str], message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INPUT_REJECTED,
            severity=AuditSeverity.WARNING,
            description=f"Invalid input for {operation}",
            details={
                "operation": operation,
                "field": field,
            },
            error_message=message,
            is_user_action=True,
        )

    @staticmethod
    def vault_not_found(vault_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VAULT_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            entity_type="vault",
            entity_id=vault_id,
            description=f"Vault not found: {vault_id}",
            is_user_action=True,
        )

    @staticmethod
    def state_loaded(defaulted_keys: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            description=f"State loaded ({len(defaulted_keys)} fields defaulted)",
            details={
                "defaulted_keys": defaulted_keys,
            },
        )

    @staticmethod
    def state_field_defaulted(key: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_FIELD_DEFAULTED,
            severity=AuditSeverity.WARNING,
            entity_type="store_key",
            entity_id=key,
            description=f"Stored value for {key} unusable, default applied",
            error_message=reason,
        )

    @staticmethod
    def persist_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSIST_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="store_key",
            entity_id=key,
            description=f"Failed to persist {key}",
            error_message=error_message,
        )

    @staticmethod
    def chat_message_received(length: int, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHAT_MESSAGE_RECEIVED,
            entity_type="chat",
            correlation_id=correlation_id,
            description="Chat message received",
            details={
                "length": length,
            },
            is_user_action=True,
        )

    @staticmethod
    def chat_reply_delivered(intent: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHAT_REPLY_DELIVERED,
            entity_type="chat",
            correlation_id=correlation_id,
            description=f"Assistant replied ({intent})",
            details={
                "intent": intent,
            },
        )

    @staticmethod
    def chat_reply_cancelled(correlation_id: Optional[UUID]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHAT_REPLY_CANCELLED,
            entity_type="chat",
            correlation_id=correlation_id,
            description="Pending assistant reply cancelled",
        )

    @staticmethod
    def chat_reset() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHAT_RESET,
            entity_type="chat",
            description="Chat transcript reset",
            is_user_action=True,
        )

    @staticmethod
    def login(email: str, succeeded: bool) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.LOGIN_SUCCEEDED
                if succeeded
                else AuditEventType.LOGIN_FAILED
            ),
            severity=AuditSeverity.INFO if succeeded else AuditSeverity.WARNING,
            entity_type="session",
            entity_id=email,
            description="Login succeeded" if succeeded else "Login failed",
            is_user_action=True,
        )

    @staticmethod
    def registered(email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTERED,
            entity_type="session",
            entity_id=email,
            description="New account registered",
            is_user_action=True,
        )

    @staticmethod
    def logged_out(email: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGGED_OUT,
            entity_type="session",
            entity_id=email,
            description="User logged out",
            is_user_action=True,
        )
