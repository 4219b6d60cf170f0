"""
Core Data Models for My Wallet

These models define the schemas for all financial state:
1. Enforce type safety at runtime
2. Be serializable for the persistent store
3. Give the assistant a read-only view of the data

DESIGN DECISION: Money is Decimal everywhere. Amounts arrive as user text
and are rendered back with thousands separators; binary floats would leak
rounding noise into both directions.
"""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================

class ChatRole(str, Enum):
    """Who wrote a chat message."""
    USER = "user"
    ASSISTANT = "assistant"


class StoreKey(str, Enum):
    """
    Logical keys in the persistent store.

    One value per key; each is written as a full snapshot of its field.
    """
    CURRENT_USER = "current_user"
    BALANCE = "user_balance"
    SPENDING_CATEGORIES = "spending_categories"
    VAULTS = "vaults"
    CHAT_HISTORY = "chat_history"
    MONTHLY_SPENDING = "monthly_spending"


# =============================================================================
# VAULTS
# =============================================================================

class Vault(BaseModel):
    """
    A named savings goal.

    `current` may legitimately exceed `goal`; only the displayed progress
    is clamped.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Stable unique identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name"
    )
    current: Decimal = Field(
        default=Decimal(0),
        ge=0,
        description="Amount saved so far"
    )
    goal: Decimal = Field(
        ...,
        gt=0,
        description="Target amount"
    )

    @property
    def completion(self) -> Decimal:
        """Unclamped percent of goal reached."""
        return self.current / self.goal * 100

    @property
    def progress(self) -> Decimal:
        """Percent of goal reached, clamped to [0, 100] for progress bars."""
        return max(Decimal(0), min(Decimal(100), self.completion))


# =============================================================================
# CHAT
# =============================================================================

class ChatMessage(BaseModel):
    """A single transcript entry. Transcripts are append-only."""
    model_config = ConfigDict(frozen=True)

    role: ChatRole
    text: str


# =============================================================================
# SESSION
# =============================================================================

class Session(BaseModel):
    """
    Identity of the logged-in user.

    Only read for display; it never gates individual financial operations.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    email: str = Field(..., min_length=1)
    name: Optional[str] = None
    contact: Optional[str] = None
    user_id: Optional[str] = None


# =============================================================================
# DASHBOARD
# =============================================================================

class MonthlySpending(BaseModel):
    """Spending per month as shown on the dashboard chart."""

    labels: list[str] = Field(default_factory=list)
    data: list[Decimal] = Field(default_factory=list)

    def points(self) -> list[tuple[str, Decimal]]:
        return list(zip(self.labels, self.data))


class SpendingShare(BaseModel):
    """One category's slice of total spending."""

    category: str
    amount: Decimal
    percent: Decimal

    @classmethod
    def build(cls, category: str, amount: Decimal, total: Decimal) -> "SpendingShare":
        percent = (amount / total * 100) if total else Decimal(0)
        return cls(
            category=category,
            amount=amount,
            percent=percent.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP),
        )


class DashboardSummary(BaseModel):
    """What the home screen renders."""

    email: Optional[str] = None
    balance: Decimal
    total_spending: Decimal
    monthly_spending: MonthlySpending


# =============================================================================
# STATE CONTAINER + SNAPSHOT
# =============================================================================

class WalletState(BaseModel):
    """
    All mutable financial state of the single local account.

    Owned by the FinancialStateEngine; never shared directly.
    """

    balance: Decimal
    spending_categories: dict[str, Decimal]
    vaults: list[Vault]
    chat_history: list[ChatMessage]
    monthly_spending: MonthlySpending


class FinancialSnapshot(BaseModel):
    """
    Read-only copy of financial state handed to the assistant.

    Taken at query time; later mutations do not show through.
    Categories are exposed as a read-only mapping.
    """
    model_config = ConfigDict(frozen=True)

    balance: Decimal
    spending_categories: Mapping[str, Decimal] = Field(default_factory=dict, validate_default=True)
    vaults: tuple[Vault, ...] = ()

    @field_validator("spending_categories")
    @classmethod
    def read_only_categories(cls, v: Mapping[str, Decimal]) -> Mapping[str, Decimal]:
        return MappingProxyType(dict(v))

    @property
    def total_spending(self) -> Decimal:
        return sum(self.spending_categories.values(), Decimal(0))
