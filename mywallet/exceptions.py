"""
Wallet Exceptions

Every error a user can trigger carries a human-readable message that the
presentation layer shows as-is in a message box.
"""

from typing import Optional


class WalletError(Exception):
    """Base exception for user-facing wallet errors."""

    title = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(WalletError):
    """A required field is empty or an amount is not acceptable."""

    title = "Invalid Input"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class VaultNotFoundError(WalletError):
    """Operation references a vault id that does not exist."""

    title = "Vault Not Found"

    def __init__(self, vault_id: str):
        super().__init__("That vault no longer exists. Please refresh and try again.")
        self.vault_id = vault_id


class AuthenticationError(WalletError):
    """Login or registration was refused."""

    title = "Authentication Failed"


class AssistantBusyError(WalletError):
    """A chat message was sent while the previous reply is still pending."""

    title = "Please Wait"

    def __init__(self):
        super().__init__("The assistant is still replying to your last message.")
