"""Tests for the chat session: transcript updates, typing delay and cancellation."""

import asyncio
import json

import pytest

from mywallet.assistant import ChatSession
from mywallet.exceptions import AssistantBusyError
from mywallet.models.audit import AuditEventType
from mywallet.models.wallet import ChatRole, StoreKey


class TestSend:
    """Tests for sending messages."""

    @pytest.mark.asyncio
    async def test_send_appends_question_and_reply(self, chat, engine):
        """Test both sides of the exchange land in the transcript."""
        message = await chat.send("What's my balance?")

        assert message.role == ChatRole.ASSISTANT
        assert message.text == "Your current balance is UGX 29,370,000."
        history = engine.chat_history
        assert [m.role for m in history] == [ChatRole.ASSISTANT, ChatRole.USER, ChatRole.ASSISTANT]
        assert history[1].text == "What's my balance?"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", None])
    async def test_blank_message_ignored(self, chat, engine, text):
        """Test blank input changes nothing."""
        assert await chat.send(text) is None
        assert len(engine.chat_history) == 1

    @pytest.mark.asyncio
    async def test_message_is_trimmed(self, chat, engine):
        """Test surrounding whitespace is dropped."""
        await chat.send("  hello  ")
        assert engine.chat_history[1].text == "hello"

    @pytest.mark.asyncio
    async def test_transcript_is_persisted(self, chat, engine, store):
        """Test the transcript reaches the store after a flush."""
        await chat.send("thanks")
        await engine.flush()
        stored = json.loads(store.dump()[StoreKey.CHAT_HISTORY.value])
        assert [m["role"] for m in stored] == ["assistant", "user", "assistant"]

    @pytest.mark.asyncio
    async def test_exchange_is_audited(self, chat, audit_logger):
        """Test receipt and delivery share a correlation id."""
        await chat.send("hello")
        events = [
            e for e in audit_logger.recent_events
            if e.event_type in (AuditEventType.CHAT_MESSAGE_RECEIVED, AuditEventType.CHAT_REPLY_DELIVERED)
        ]
        assert len(events) == 2
        assert events[0].correlation_id == events[1].correlation_id


class TestTypingDelay:
    """Tests that need a reply to stay pending."""

    @pytest.fixture
    def slow_chat(self, engine, responder, audit_logger):
        return ChatSession(engine, responder, reply_delay_seconds=5, audit_logger=audit_logger)

    @pytest.mark.asyncio
    async def test_busy_while_typing(self, slow_chat):
        """Test a second message is refused while a reply is pending."""
        first = asyncio.ensure_future(slow_chat.send("hello"))
        await asyncio.sleep(0)
        assert slow_chat.is_typing

        with pytest.raises(AssistantBusyError):
            await slow_chat.send("again")

        assert slow_chat.cancel_pending() is True
        assert await first is None
        assert not slow_chat.is_typing

    @pytest.mark.asyncio
    async def test_cancelled_reply_never_appended(self, slow_chat, engine):
        """Test a cancelled reply leaves only the user's message."""
        first = asyncio.ensure_future(slow_chat.send("hello"))
        await asyncio.sleep(0)
        slow_chat.cancel_pending()
        await first

        history = engine.chat_history
        assert len(history) == 2
        assert history[-1].role == ChatRole.USER

    @pytest.mark.asyncio
    async def test_reset_cancels_pending_reply(self, slow_chat, engine, audit_logger):
        """Test a reset drops the pending reply and restarts the transcript."""
        first = asyncio.ensure_future(slow_chat.send("hello"))
        await asyncio.sleep(0)

        await slow_chat.reset()
        assert await first is None
        assert len(engine.chat_history) == 1
        types = [e.event_type for e in audit_logger.recent_events]
        assert AuditEventType.CHAT_REPLY_CANCELLED in types
        assert types[-1] == AuditEventType.CHAT_RESET

    @pytest.mark.asyncio
    async def test_caller_cancellation_drops_reply(self, slow_chat, engine):
        """Test cancelling the send itself also cancels the reply."""
        first = asyncio.ensure_future(slow_chat.send("hello"))
        await asyncio.sleep(0)
        first.cancel()
        with pytest.raises(asyncio.CancelledError):
            await first
        await asyncio.sleep(0)

        assert not slow_chat.is_typing
        assert len(engine.chat_history) == 2

    def test_cancel_when_idle(self, slow_chat):
        """Test cancelling with nothing pending."""
        assert slow_chat.cancel_pending() is False

    @pytest.mark.asyncio
    async def test_reply_uses_state_at_question_time(self, engine, responder):
        """Test mutations during the delay do not change the reply."""
        chat = ChatSession(engine, responder, reply_delay_seconds=0.05)
        pending = asyncio.ensure_future(chat.send("What's my balance?"))
        await asyncio.sleep(0)

        engine.record_spending("Food", "1000000")
        message = await pending

        assert "UGX 29,370,000" in message.text
        assert engine.balance == 28370000


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
