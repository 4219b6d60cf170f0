"""
Seed state for a fresh install.

These values are also the recovery defaults: any store key that is missing
or unreadable at startup falls back to its entry here.
"""

from decimal import Decimal

from mywallet.models.wallet import (
    ChatMessage,
    ChatRole,
    MonthlySpending,
    Vault,
    WalletState,
)

DEFAULT_BALANCE = Decimal("29370000")

ASSISTANT_GREETING = "Hey, how can I assist you?"


def default_spending_categories() -> dict[str, Decimal]:
    return {
        "Food": Decimal("3000000"),
        "Transport": Decimal("1500000"),
        "Bills": Decimal("2000000"),
        "Entertainment": Decimal("1000000"),
    }


def default_vaults() -> list[Vault]:
    return [
        Vault(id="rent", name="Rent", current=Decimal("500000"), goal=Decimal("1000000")),
        Vault(id="emergency", name="Emergency Funds", current=Decimal("200000"), goal=Decimal("500000")),
    ]


def default_chat_history() -> list[ChatMessage]:
    return [ChatMessage(role=ChatRole.ASSISTANT, text=ASSISTANT_GREETING)]


def default_monthly_spending() -> MonthlySpending:
    return MonthlySpending(
        labels=["Jan", "Feb", "Mar", "Apr"],
        data=[Decimal("5000000"), Decimal("7000000"), Decimal("4500000"), Decimal("6000000")],
    )


def default_state() -> WalletState:
    """Build a fresh state. Every call returns new, unshared containers."""
    return WalletState(
        balance=DEFAULT_BALANCE,
        spending_categories=default_spending_categories(),
        vaults=default_vaults(),
        chat_history=default_chat_history(),
        monthly_spending=default_monthly_spending(),
    )
