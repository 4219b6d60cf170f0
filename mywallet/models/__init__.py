"""
Data Models Package

This package contains all Pydantic models used in My Wallet.
All state flowing through the system must conform to these schemas.
"""

from mywallet.models.wallet import (
    ChatMessage,
    ChatRole,
    DashboardSummary,
    FinancialSnapshot,
    MonthlySpending,
    Session,
    SpendingShare,
    StoreKey,
    Vault,
    WalletState,
)
from mywallet.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Wallet models
    "ChatMessage",
    "ChatRole",
    "DashboardSummary",
    "FinancialSnapshot",
    "MonthlySpending",
    "Session",
    "SpendingShare",
    "StoreKey",
    "Vault",
    "WalletState",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
