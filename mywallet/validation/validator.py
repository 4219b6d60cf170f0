"""
Input Validation

DESIGN DECISION: Validation happens before any state is touched.
A rejected input leaves balance, categories and vaults exactly as they
were, and the caller gets a message it can show the user verbatim.

IMPORTANT: Validation NEVER silently fixes issues. The only coercions are
trimming surrounding whitespace and turning numeric text into Decimal.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from mywallet.exceptions import InvalidInputError


SPENDING_MESSAGE = "Please enter a valid category and a positive amount."
SPENDING_EMPTY_MESSAGE = "Please enter a category and amount."
SPENDING_FORMAT_MESSAGE = "Please use format: Category, Amount (e.g., Food, 50000)"
VAULT_NAME_MESSAGE = "Please enter a name for the vault."
VAULT_GOAL_MESSAGE = "Please enter a valid positive goal amount for the vault."
VAULT_AMOUNT_MESSAGE = "Please enter a valid amount of zero or more."


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert user or caller input to a finite Decimal.

    Returns None for anything that is not a finite number: booleans,
    None, NaN, infinities and unparseable text.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None

    if not amount.is_finite():
        return None
    return amount


def require_text(value: Any, field: str, message: str) -> str:
    """Return the trimmed text, or raise if it is missing or blank."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(message, field=field)
    return value.strip()


def require_positive_amount(value: Any, field: str, message: str) -> Decimal:
    """Return the amount as Decimal, or raise unless it is finite and > 0."""
    amount = to_decimal(value)
    if amount is None or amount <= 0:
        raise InvalidInputError(message, field=field)
    return amount


def require_non_negative_amount(value: Any, field: str, message: str) -> Decimal:
    """Return the amount as Decimal, or raise unless it is finite and >= 0."""
    amount = to_decimal(value)
    if amount is None or amount < 0:
        raise InvalidInputError(message, field=field)
    return amount


def validate_spending(category: Any, amount: Any) -> tuple[str, Decimal]:
    """Validate a (category, amount) pair for recording spending."""
    name = require_text(category, "category", SPENDING_MESSAGE)
    value = require_positive_amount(amount, "amount", SPENDING_MESSAGE)
    return name, value


def validate_new_vault(name: Any, goal: Any) -> tuple[str, Decimal]:
    """Validate the name and goal of a vault about to be created."""
    vault_name = require_text(name, "name", VAULT_NAME_MESSAGE)
    vault_goal = require_positive_amount(goal, "goal", VAULT_GOAL_MESSAGE)
    return vault_name, vault_goal


def validate_vault_amount(amount: Any) -> Decimal:
    """Validate a replacement `current` amount for a vault."""
    return require_non_negative_amount(amount, "amount", VAULT_AMOUNT_MESSAGE)


def parse_spending_entry(text: Optional[str]) -> tuple[str, Decimal]:
    """
    Parse the spending screen's free-text entry, "Category, Amount".

    Examples:
        "Food, 50000"        -> ("Food", Decimal("50000"))
        "Eating out,12500.5" -> ("Eating out", Decimal("12500.5"))

    Raises InvalidInputError with the message the user should see.
    Amounts cannot contain thousands separators here because the comma
    separates the two parts.
    """
    if not text or not text.strip():
        raise InvalidInputError(SPENDING_EMPTY_MESSAGE, field="entry")

    parts = [part.strip() for part in text.split(",")]
    if len(parts) != 2:
        raise InvalidInputError(SPENDING_FORMAT_MESSAGE, field="entry")

    return validate_spending(parts[0], parts[1])
