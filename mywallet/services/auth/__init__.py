"""Session/Auth gate package."""

from mywallet.services.auth.gate import LOGIN_FAILED_MESSAGE, AuthGate

__all__ = ["AuthGate", "LOGIN_FAILED_MESSAGE"]
