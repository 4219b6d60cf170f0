"""Shared fixtures: in-memory store, engine, responder and a zero-delay chat."""

from decimal import Decimal

import pytest

from mywallet.assistant import ChatSession, IntentResponder
from mywallet.audit import AuditLogger
from mywallet.config import AssistantSettings, AuthSettings
from mywallet.engine import FinancialStateEngine
from mywallet.models.wallet import FinancialSnapshot, Vault
from mywallet.services.storage import InMemoryStore


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def engine(store, audit_logger):
    return FinancialStateEngine(store, audit_logger)


@pytest.fixture
def assistant_settings():
    return AssistantSettings(
        reply_delay_seconds=0,
        high_balance_threshold=Decimal("20000000"),
        spending_ratio_threshold=Decimal("0.4"),
    )


@pytest.fixture
def auth_settings():
    return AuthSettings(
        demo_email="user@example.com",
        demo_password="password123",
        min_password_length=6,
    )


@pytest.fixture
def responder(assistant_settings):
    return IntentResponder(assistant_settings, currency_code="UGX")


@pytest.fixture
def chat(engine, responder, audit_logger):
    return ChatSession(engine, responder, reply_delay_seconds=0, audit_logger=audit_logger)


@pytest.fixture
def seed_snapshot():
    """The app's seed figures, as used by the golden replies."""
    return FinancialSnapshot(
        balance=Decimal("29370000"),
        spending_categories={
            "Food": Decimal("3000000"),
            "Transport": Decimal("1500000"),
            "Bills": Decimal("2000000"),
            "Entertainment": Decimal("1000000"),
        },
        vaults=(
            Vault(id="rent", name="Rent", current=Decimal("500000"), goal=Decimal("1000000")),
            Vault(id="emergency", name="Emergency Funds", current=Decimal("200000"), goal=Decimal("500000")),
        ),
    )
