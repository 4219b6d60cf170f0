"""Tests for the application wiring and configuration."""

import pytest
from decimal import Decimal

from mywallet.config import Settings, get_settings, validate_all_settings
from mywallet.exceptions import AuthenticationError
from mywallet.models.wallet import StoreKey
from mywallet.orchestrator import WalletApp, create_app_components, create_store
from mywallet.services.storage import InMemoryStore, JsonFileStore


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setenv("MYWALLET_ASSISTANT_REPLY_DELAY_SECONDS", "0")
    monkeypatch.setenv("MYWALLET_STORAGE_BACKEND", "memory")
    return Settings()


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test documented defaults."""
        monkeypatch.delenv("MYWALLET_ASSISTANT_REPLY_DELAY_SECONDS", raising=False)
        settings = Settings()
        assert settings.assistant.reply_delay_seconds == 1.5
        assert settings.assistant.high_balance_threshold == Decimal("20000000")
        assert settings.auth.min_password_length == 6
        assert settings.app.currency_code == "UGX"

    def test_env_override(self, settings):
        """Test values come from the environment."""
        assert settings.assistant.reply_delay_seconds == 0
        assert settings.storage.backend == "memory"

    def test_log_level_uppercased(self, monkeypatch):
        """Test log level is case-insensitive."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings().app.log_level == "DEBUG"

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        """Test a bad group is reported rather than raised."""
        monkeypatch.setenv("MYWALLET_STORAGE_BACKEND", "postgres")
        get_settings.cache_clear()
        try:
            status = validate_all_settings()
        finally:
            get_settings.cache_clear()
        assert status["storage"] is False
        assert "storage_error" in status
        assert status["auth"] is True

    def test_create_store(self, tmp_path, monkeypatch):
        """Test the backend setting picks the store."""
        monkeypatch.setenv("MYWALLET_STORAGE_BACKEND", "memory")
        assert isinstance(create_store(Settings().storage), InMemoryStore)

        monkeypatch.setenv("MYWALLET_STORAGE_BACKEND", "json_file")
        monkeypatch.setenv("MYWALLET_STORAGE_DATA_FILE", str(tmp_path / "w.json"))
        store = create_store(Settings().storage)
        assert isinstance(store, JsonFileStore)
        assert store.path == tmp_path / "w.json"


class TestWalletApp:
    """Tests for the assembled application."""

    @pytest.mark.asyncio
    async def test_start_locked(self, settings):
        """Test a fresh app has no session and seed data."""
        app = create_app_components(settings)
        assert isinstance(app, WalletApp)
        assert await app.start() is None
        assert not app.is_unlocked
        with pytest.raises(AuthenticationError):
            app.require_session()
        assert app.dashboard().balance == Decimal("29370000")

    @pytest.mark.asyncio
    async def test_login_then_dashboard(self, settings):
        """Test the dashboard after logging in."""
        app = create_app_components(settings, InMemoryStore())
        await app.start()
        await app.auth.authenticate("user@example.com", "password123")

        summary = app.dashboard()
        assert app.require_session().email == "user@example.com"
        assert summary.email == "user@example.com"
        assert summary.total_spending == Decimal("7500000")
        assert [label for label, _ in summary.monthly_spending.points()] == ["Jan", "Feb", "Mar", "Apr"]

    @pytest.mark.asyncio
    async def test_ask_persists_transcript(self, settings):
        """Test asking the assistant writes the transcript."""
        store = InMemoryStore()
        app = create_app_components(settings, store)
        await app.start()

        reply = await app.ask("Who are you?")
        assert "My Wallet AI" in reply.text
        assert StoreKey.CHAT_HISTORY.value in store.dump()
        assert not app.engine.has_pending_writes

    @pytest.mark.asyncio
    async def test_state_restored_on_start(self, settings):
        """Test a second app sees the first app's session and spending."""
        store = InMemoryStore()
        first = create_app_components(settings, store)
        await first.start()
        await first.auth.authenticate("user@example.com", "password123")
        first.engine.record_spending("Food", "70000")
        await first.engine.flush()

        second = create_app_components(settings, store)
        session = await second.start()
        assert session.email == "user@example.com"
        assert second.engine.balance == Decimal("29300000")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
