"""
Chat Session

Runs one exchange with the scripted assistant:
1. Snapshot the financial state (taken now, read later)
2. Append the user's message to the transcript
3. Compute the reply from the snapshot
4. After a simulated "typing" delay, append the reply

The delay is a cancellable asyncio task, not a real computation. While it
is pending the session refuses new messages, but other screens may keep
mutating the engine: the reply describes the state at the moment the
question was asked.
"""

import asyncio
from typing import Optional
from uuid import UUID

from mywallet.assistant.responder import IntentResponder
from mywallet.audit import AuditLogger, create_correlation_id
from mywallet.engine import FinancialStateEngine
from mywallet.exceptions import AssistantBusyError
from mywallet.models.wallet import ChatMessage, ChatRole


class ChatSession:
    """Transcript-backed conversation with the IntentResponder."""

    def __init__(
        self,
        engine: FinancialStateEngine,
        responder: Optional[IntentResponder] = None,
        reply_delay_seconds: float = 1.5,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._engine = engine
        self._responder = responder or IntentResponder()
        self._reply_delay = reply_delay_seconds
        self._audit_logger = audit_logger

        self._pending_reply: Optional[asyncio.Task] = None
        self._pending_correlation_id: Optional[UUID] = None

    @property
    def transcript(self) -> list[ChatMessage]:
        return self._engine.chat_history

    @property
    def is_typing(self) -> bool:
        """True while an assistant reply is waiting to be delivered."""
        return self._pending_reply is not None and not self._pending_reply.done()

    async def send(self, text: str) -> Optional[ChatMessage]:
        """
        Send a user message and wait for the assistant's reply.

        Returns:
            The assistant message, or None if the input was blank or the
            reply was cancelled before delivery

        Raises:
            AssistantBusyError: A previous reply is still pending
        """
        message_text = text.strip() if isinstance(text, str) else ""
        if not message_text:
            return None
        if self.is_typing:
            raise AssistantBusyError()

        correlation_id = create_correlation_id()
        snapshot = self._engine.snapshot()

        self._engine.append_chat_message(ChatMessage(role=ChatRole.USER, text=message_text))
        if self._audit_logger:
            self._audit_logger.log_chat_message_received(len(message_text), correlation_id)

        reply = self._responder.reply(message_text, snapshot)

        task = asyncio.ensure_future(self._deliver(reply.text))
        self._pending_reply = task
        self._pending_correlation_id = correlation_id
        try:
            await asyncio.wait({task})
        finally:
            if not task.done():
                task.cancel()
            if self._pending_reply is task:
                self._pending_reply = None
                self._pending_correlation_id = None

        if task.cancelled():
            return None

        message = task.result()
        if self._audit_logger:
            self._audit_logger.log_chat_reply_delivered(reply.intent.value, correlation_id)
        return message

    async def _deliver(self, text: str) -> ChatMessage:
        if self._reply_delay > 0:
            await asyncio.sleep(self._reply_delay)
        message = ChatMessage(role=ChatRole.ASSISTANT, text=text)
        self._engine.append_chat_message(message)
        return message

    def cancel_pending(self) -> bool:
        """Cancel a pending reply so it is never appended. Returns True if one was pending."""
        if not self.is_typing:
            return False
        self._pending_reply.cancel()
        if self._audit_logger:
            self._audit_logger.log_chat_reply_cancelled(self._pending_correlation_id)
        return True

    async def reset(self) -> None:
        """Drop any pending reply and start a fresh transcript."""
        task = self._pending_reply
        if self.cancel_pending():
            # Let the cancellation land before touching the transcript.
            await asyncio.wait({task})
        self._engine.reset_chat_history()
        if self._audit_logger:
            self._audit_logger.log_chat_reset()
