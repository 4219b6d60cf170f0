"""
Tests for the Intent Responder

Replies are checked against the seed figures so the expected text is
stable.
"""

import pytest
from decimal import Decimal

from mywallet.assistant import Intent, IntentResponder, extract_expense, normalize_query
from mywallet.assistant.responder import (
    ADVICE_GENERAL_REPLY,
    ADVICE_INVEST_REPLY,
    ADVICE_REVIEW_REPLY,
    CAPABILITY_REPLY,
    FALLBACK_REPLY,
    GREETING_REPLY,
    IDENTITY_REPLY,
    LOG_EXPENSE_REPLY,
    NO_SPENDING_REPLY,
    NO_VAULTS_REPLY,
    THANKS_REPLY,
)
from mywallet.models.wallet import FinancialSnapshot


class TestClassification:
    """Tests for first-match-wins classification."""

    @pytest.mark.parametrize(
        "query, intent",
        [
            ("What's my balance?", Intent.BALANCE),
            ("What’s my balance?", Intent.BALANCE),
            ("CHECK MY WALLET please", Intent.BALANCE),
            ("Break down my spending", Intent.SPENDING),
            ("I spent too much", Intent.SPENDING),
            ("Any suggestions?", Intent.ADVICE),
            ("Vaults status", Intent.VAULT_STATUS),
            ("Add new expense", Intent.LOG_EXPENSE),
            ("Hello", Intent.GREETING),
            ("thank you", Intent.THANKS),
            ("Who are you?", Intent.IDENTITY),
            ("What can you help with?", Intent.CAPABILITY),
            ("tell me a joke", Intent.FALLBACK),
        ],
    )
    def test_classify(self, responder, query, intent):
        """Test each rule group is reachable."""
        assert responder.classify(query) == intent

    def test_balance_beats_spending(self, responder):
        """Test an earlier group wins when two groups match."""
        assert responder.classify("what's my balance? I spent a lot") == Intent.BALANCE

    def test_spending_beats_greeting(self, responder):
        """Test 'spent' wins over a greeting in the same message."""
        assert responder.classify("hi, how much have i spent this month?") == Intent.SPENDING

    def test_substring_match(self, responder):
        """Test triggers match inside longer words."""
        assert responder.classify("is this on") == Intent.GREETING

    @pytest.mark.parametrize("query", [None, "", 42])
    def test_non_text_falls_back(self, responder, query):
        """Test empty or non-text queries get the fallback."""
        assert responder.classify(query) == Intent.FALLBACK

    def test_normalize_query(self):
        """Test lowercasing and apostrophe mapping."""
        assert normalize_query("What’S ‘up") == "what's 'up"
        assert normalize_query(None) == ""


class TestReplies:
    """Golden replies for the seed snapshot."""

    def test_balance_reply(self, responder, seed_snapshot):
        """Test the balance is formatted with separators."""
        assert responder.respond("What's my balance?", seed_snapshot) == (
            "Your current balance is UGX 29,370,000."
        )

    def test_spending_reply_sorted_descending(self, responder, seed_snapshot):
        """Test categories are listed from largest to smallest."""
        text = responder.respond("Break down my spending", seed_snapshot)
        lines = text.split("\n")
        assert lines[0] == (
            "Your total spending is UGX 7,500,000. Here's a breakdown by category:"
        )
        assert lines[1:] == [
            "- Food: UGX 3,000,000",
            "- Bills: UGX 2,000,000",
            "- Transport: UGX 1,500,000",
            "- Entertainment: UGX 1,000,000",
        ]

    def test_spending_ties_keep_insertion_order(self, responder):
        """Test equal amounts keep their original order."""
        snapshot = FinancialSnapshot(
            balance=Decimal("100"),
            spending_categories={"B": Decimal("5"), "A": Decimal("5"), "C": Decimal("9")},
        )
        lines = responder.respond("spent", snapshot).split("\n")
        assert [line.split(":")[0] for line in lines[1:]] == ["- C", "- B", "- A"]

    def test_no_spending(self, responder):
        """Test the reply when nothing has been spent."""
        snapshot = FinancialSnapshot(balance=Decimal("100"))
        assert responder.respond("show me my expenses", snapshot) == NO_SPENDING_REPLY

    def test_vault_reply(self, responder, seed_snapshot):
        """Test each vault is listed with its completion."""
        text = responder.respond("Progress on savings?", seed_snapshot)
        assert "- Rent: UGX 500,000 of UGX 1,000,000 (50.0% complete)." in text
        assert "- Emergency Funds: UGX 200,000 of UGX 500,000 (40.0% complete)." in text

    def test_no_vaults(self, responder):
        """Test the reply when no vaults exist."""
        snapshot = FinancialSnapshot(balance=Decimal("100"))
        assert responder.respond("goal achievements", snapshot) == NO_VAULTS_REPLY

    def test_advice_high_balance(self, responder, seed_snapshot):
        """Test a balance above the threshold suggests investing."""
        assert responder.respond("Any suggestions?", seed_snapshot) == ADVICE_INVEST_REPLY

    def test_advice_high_spending(self, responder):
        """Test heavy spending relative to balance suggests a review."""
        snapshot = FinancialSnapshot(
            balance=Decimal("10000000"),
            spending_categories={"Food": Decimal("5000000")},
        )
        assert responder.respond("advise me financially", snapshot) == ADVICE_REVIEW_REPLY

    def test_advice_general(self, responder):
        """Test the general advice branch."""
        snapshot = FinancialSnapshot(
            balance=Decimal("10000000"),
            spending_categories={"Food": Decimal("1000000")},
        )
        assert responder.respond("recommend a savings plan", snapshot) == ADVICE_GENERAL_REPLY

    @pytest.mark.parametrize(
        "query, expected",
        [
            ("Hello!", GREETING_REPLY),
            ("Thanks", THANKS_REPLY),
            ("who are you?", IDENTITY_REPLY),
            ("what can you help with?", CAPABILITY_REPLY),
            ("quantum physics", FALLBACK_REPLY),
            (None, FALLBACK_REPLY),
            ("", FALLBACK_REPLY),
        ],
    )
    def test_canned_replies(self, responder, seed_snapshot, query, expected):
        """Test replies that do not depend on the snapshot."""
        assert responder.respond(query, seed_snapshot) == expected

    def test_replies_with_huge_amounts(self, responder, engine):
        """Test amounts beyond 28 digits still produce replies."""
        engine.record_spending("Yacht", "1" + "0" * 26)
        engine.set_vault_amount("rent", "1" + "0" * 30)
        snapshot = engine.snapshot()

        assert responder.respond("What's my balance?", snapshot) == (
            f"Your current balance is UGX {29370000 - 10**26:,}."
        )
        spending = responder.respond("Break down my spending", snapshot)
        assert spending.split("\n")[1] == f"- Yacht: UGX {10**26:,}"
        assert "Rent: UGX" in responder.respond("vaults status", snapshot)

    def test_responder_does_not_mutate(self, responder, seed_snapshot):
        """Test the snapshot is unchanged after replying."""
        categories = dict(seed_snapshot.spending_categories)
        vaults = seed_snapshot.vaults
        responder.respond("log my spending: I bought shoes for UGX 120,000", seed_snapshot)
        assert dict(seed_snapshot.spending_categories) == categories
        assert seed_snapshot.vaults == vaults
        assert seed_snapshot.balance == Decimal("29370000")


class TestExpenseMention:
    """Tests for 'I bought X for UGX N'."""

    def test_extract_expense(self):
        """Test item and amount are pulled out."""
        expense = extract_expense("I bought shoes for UGX 120,000")
        assert expense.item == "shoes"
        assert expense.amount == Decimal("120000")

    def test_no_mention(self):
        """Test text without the pattern."""
        assert extract_expense("I like shoes") is None

    def test_other_currency(self):
        """Test the configured currency is matched."""
        assert extract_expense("i bought rice for KES 900", "KES").amount == Decimal("900")
        assert extract_expense("i bought rice for KES 900") is None

    def test_log_expense_reply_mentions_purchase(self, responder, seed_snapshot):
        """Test the purchase is reflected back without being recorded."""
        reply = responder.reply("log my spending: I bought shoes for UGX 120,000", seed_snapshot)
        assert reply.intent == Intent.LOG_EXPENSE
        assert reply.expense.item == "shoes"
        assert reply.text.startswith(LOG_EXPENSE_REPLY)
        assert 'I can see you mentioned buying "shoes" for UGX 120,000.' in reply.text

    def test_log_expense_reply_without_purchase(self, responder, seed_snapshot):
        """Test the plain log-expense reply."""
        reply = responder.reply("scan this bill", seed_snapshot)
        assert reply.text == LOG_EXPENSE_REPLY
        assert reply.expense is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
