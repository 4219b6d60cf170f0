"""Financial state engine package."""

from mywallet.engine.state_engine import FinancialStateEngine, generate_vault_id

__all__ = ["FinancialStateEngine", "generate_vault_id"]
