"""Input validation package."""

from mywallet.validation.validator import (
    parse_spending_entry,
    to_decimal,
    validate_new_vault,
    validate_spending,
    validate_vault_amount,
)

__all__ = [
    "parse_spending_entry",
    "to_decimal",
    "validate_new_vault",
    "validate_spending",
    "validate_vault_amount",
]
