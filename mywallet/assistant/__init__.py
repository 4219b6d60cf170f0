"""Scripted assistant package."""

from mywallet.assistant.chat import ChatSession
from mywallet.assistant.responder import (
    INTENT_RULES,
    AssistantReply,
    ExpenseMention,
    Intent,
    IntentResponder,
    IntentRule,
    extract_expense,
    normalize_query,
)

__all__ = [
    "INTENT_RULES",
    "AssistantReply",
    "ChatSession",
    "ExpenseMention",
    "Intent",
    "IntentResponder",
    "IntentRule",
    "extract_expense",
    "normalize_query",
]
