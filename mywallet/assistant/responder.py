"""
Intent Responder

DESIGN DECISION: The assistant is DETERMINISTIC keyword matching.
A query is lowercased and checked against an ordered table of rule
groups; the FIRST group with a trigger contained in the query wins.

Rule order is load-bearing. Triggers overlap ("spent" is a spending
trigger but also appears in advice-style questions, "hi" is contained in
"this"), so reordering the table changes answers. Do not replace this with
best-match or scored matching without treating it as a behaviour change.

The responder only ever reads a FinancialSnapshot. It never mutates state:
even the "I bought X for UGX N" pattern is reflected back to the user,
not recorded.
"""

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from mywallet.config import AssistantSettings
from mywallet.formatting import DEFAULT_CURRENCY, format_currency, format_percent
from mywallet.models.wallet import FinancialSnapshot


class Intent(str, Enum):
    """What a query is classified as."""
    BALANCE = "balance"
    SPENDING = "spending"
    ADVICE = "advice"
    VAULT_STATUS = "vault_status"
    LOG_EXPENSE = "log_expense"
    GREETING = "greeting"
    THANKS = "thanks"
    IDENTITY = "identity"
    CAPABILITY = "capability"
    FALLBACK = "fallback"


class IntentRule(BaseModel):
    """A set of substring triggers that classify a query as one intent."""
    model_config = ConfigDict(frozen=True)

    intent: Intent
    triggers: tuple[str, ...]

    def matches(self, normalized_query: str) -> bool:
        return any(trigger in normalized_query for trigger in self.triggers)


# Evaluated top to bottom, first match wins.
INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(
        intent=Intent.BALANCE,
        triggers=(
            "what's my balance?",
            "how much money do i have?",
            "check my wallet",
            "total funds available",
            "show me my cash",
            "my current balance",
        ),
    ),
    IntentRule(
        intent=Intent.SPENDING,
        triggers=(
            "how much have i spent this month?",
            "break down my spending",
            "what did i spend the most on?",
            "show me my expenses",
            "where is most of my money going?",
            "spent",
        ),
    ),
    IntentRule(
        intent=Intent.ADVICE,
        triggers=(
            "recommend a savings plan",
            "what should i do with my money?",
            "any suggestions?",
            "advise me financially",
        ),
    ),
    IntentRule(
        intent=Intent.VAULT_STATUS,
        triggers=(
            "what's my rent vault status?",
            "how much saved for emergencies?",
            "progress on savings?",
            "vaults status",
            "goal achievements",
        ),
    ),
    IntentRule(
        intent=Intent.LOG_EXPENSE,
        triggers=(
            "upload this receipt",
            "add new expense",
            "scan this bill",
            "log my spending",
        ),
    ),
    IntentRule(intent=Intent.GREETING, triggers=("hello", "hi")),
    IntentRule(intent=Intent.THANKS, triggers=("thanks", "thank you")),
    IntentRule(intent=Intent.IDENTITY, triggers=("who are you?",)),
    IntentRule(intent=Intent.CAPABILITY, triggers=("what can you help with?",)),
)


GREETING_REPLY = "Hello there! How can I help you with your finances today?"
THANKS_REPLY = "You're most welcome! Is there anything else I can assist you with?"
IDENTITY_REPLY = "I am My Wallet AI, your smart finance partner, here to help you manage your money."
CAPABILITY_REPLY = (
    "I can tell you your balance, summarize your spending, update you on your "
    "savings goals, and offer financial advice. Just ask!"
)
FALLBACK_REPLY = (
    "I'm not sure how to respond to that. Can you ask about your balance, "
    "spending, vaults, or for financial advice?"
)
NO_SPENDING_REPLY = "You haven't recorded any spending yet this month."
NO_VAULTS_REPLY = (
    "You haven't set up any vaults yet. Go to the 'Wallet' section to create "
    "some savings goals!"
)
ADVICE_INVEST_REPLY = (
    "With your current balance, I recommend exploring investment opportunities "
    "or setting up a new, ambitious savings goal in your 'My Vault' section!"
)
ADVICE_REVIEW_REPLY = (
    "It seems your spending is quite high relative to your balance. Consider "
    "reviewing your 'XSpend' categories to identify areas where you can cut "
    "back, especially on non-essentials."
)
ADVICE_GENERAL_REPLY = (
    "To improve your finances, always track your spending diligently and try "
    "to allocate a portion of your income to your savings vaults regularly."
)
LOG_EXPENSE_REPLY = (
    "To add an expense or upload a receipt, please navigate to the 'XSpend' "
    "tab. You can manually add spending there."
)


class ExpenseMention(BaseModel):
    """An item and amount recognised in 'I bought <item> for UGX <amount>'."""
    model_config = ConfigDict(frozen=True)

    item: str
    amount: Decimal


class AssistantReply(BaseModel):
    """The classified intent, the reply text and any recognised expense."""
    model_config = ConfigDict(frozen=True)

    intent: Intent
    text: str
    expense: Optional[ExpenseMention] = None


_APOSTROPHES = str.maketrans({"’": "'", "‘": "'"})


def normalize_query(query) -> str:
    """Lowercase a query and map typographic apostrophes to plain ones."""
    if not isinstance(query, str):
        return ""
    return query.lower().translate(_APOSTROPHES)


def extract_expense(query, currency_code: str = DEFAULT_CURRENCY) -> Optional[ExpenseMention]:
    """
    Find 'i bought <item> for <currency> <amount>' in a query.

    The amount may contain thousands separators. Returns None when the
    pattern is absent or the amount is not a positive number.
    """
    pattern = re.compile(
        r"i bought (.+) for " + re.escape(currency_code.lower()) + r" ([\d,]+)"
    )
    match = pattern.search(normalize_query(query))
    if not match:
        return None

    item = match.group(1).strip()
    try:
        amount = Decimal(match.group(2).replace(",", ""))
    except InvalidOperation:
        return None
    if not item or amount <= 0:
        return None
    return ExpenseMention(item=item, amount=amount)


class IntentResponder:
    """
    Maps a free-text query plus a snapshot to a reply.

    GUARANTEES:
    - Pure: same query and snapshot always give the same reply
    - Never raises: anything unrecognised gets the fallback reply
    - Never mutates the snapshot or any engine state
    """

    def __init__(
        self,
        settings: Optional[AssistantSettings] = None,
        currency_code: str = DEFAULT_CURRENCY,
        rules: tuple[IntentRule, ...] = INTENT_RULES,
    ):
        settings = settings or AssistantSettings()
        self._high_balance = settings.high_balance_threshold
        self._spending_ratio = settings.spending_ratio_threshold
        self._currency = currency_code
        self._rules = rules

    def classify(self, query) -> Intent:
        """Return the intent of the first rule group that matches."""
        normalized = normalize_query(query)
        for rule in self._rules:
            if rule.matches(normalized):
                return rule.intent
        return Intent.FALLBACK

    def respond(self, query, snapshot: FinancialSnapshot) -> str:
        """Reply text for a query."""
        return self.reply(query, snapshot).text

    def reply(self, query, snapshot: FinancialSnapshot) -> AssistantReply:
        """Classify a query and build the full reply."""
        intent = self.classify(query)

        if intent == Intent.BALANCE:
            text = self._reply_balance(snapshot)
        elif intent == Intent.SPENDING:
            text = self._reply_spending(snapshot)
        elif intent == Intent.ADVICE:
            text = self._reply_advice(snapshot)
        elif intent == Intent.VAULT_STATUS:
            text = self._reply_vaults(snapshot)
        elif intent == Intent.LOG_EXPENSE:
            expense = extract_expense(query, self._currency)
            return AssistantReply(
                intent=intent,
                text=self._reply_log_expense(expense),
                expense=expense,
            )
        elif intent == Intent.GREETING:
            text = GREETING_REPLY
        elif intent == Intent.THANKS:
            text = THANKS_REPLY
        elif intent == Intent.IDENTITY:
            text = IDENTITY_REPLY
        elif intent == Intent.CAPABILITY:
            text = CAPABILITY_REPLY
        else:
            text = FALLBACK_REPLY

        return AssistantReply(intent=intent, text=text)

    def _money(self, amount) -> str:
        return format_currency(amount, self._currency)

    def _reply_balance(self, snapshot: FinancialSnapshot) -> str:
        return f"Your current balance is {self._money(snapshot.balance)}."

    def _reply_spending(self, snapshot: FinancialSnapshot) -> str:
        total = snapshot.total_spending
        if total <= 0:
            return NO_SPENDING_REPLY

        # sorted() is stable: equal amounts keep insertion order
        ranked = sorted(
            snapshot.spending_categories.items(),
            key=lambda entry: entry[1],
            reverse=True,
        )
        lines = [f"Your total spending is {self._money(total)}. Here's a breakdown by category:"]
        lines.extend(f"- {category}: {self._money(amount)}" for category, amount in ranked)
        return "\n".join(lines)

    def _reply_advice(self, snapshot: FinancialSnapshot) -> str:
        if snapshot.balance > self._high_balance:
            return ADVICE_INVEST_REPLY
        if snapshot.total_spending > snapshot.balance * self._spending_ratio:
            return ADVICE_REVIEW_REPLY
        return ADVICE_GENERAL_REPLY

    def _reply_vaults(self, snapshot: FinancialSnapshot) -> str:
        if not snapshot.vaults:
            return NO_VAULTS_REPLY

        lines = ["Here's the status of your vaults:"]
        for vault in snapshot.vaults:
            lines.append(
                f"- {vault.name}: {self._money(vault.current)} of {self._money(vault.goal)} "
                f"({format_percent(vault.completion)}% complete)."
            )
        return "\n".join(lines)

    def _reply_log_expense(self, expense: Optional[ExpenseMention]) -> str:
        if expense is None:
            return LOG_EXPENSE_REPLY
        return (
            f"{LOG_EXPENSE_REPLY} I can see you mentioned buying \"{expense.item}\" "
            f"for {self._money(expense.amount)}. You can add this in the XSpend section!"
        )
