"""
Streamlit Frontend for My Wallet

Screens:
1. Login / Register (shown until a session exists)
2. Home - balance and monthly spending
3. Wallet - savings vaults
4. XSpend - category spending
5. Chat - the scripted assistant

Every screen talks to one WalletApp. Mutations update memory first and
are flushed to the store before the page reruns.
"""

import asyncio
import logging

import streamlit as st

from mywallet.config import get_settings, validate_all_settings
from mywallet.exceptions import WalletError
from mywallet.formatting import format_currency, format_percent
from mywallet.models.wallet import ChatRole
from mywallet.orchestrator import WalletApp, create_app_components
from mywallet.validation import parse_spending_entry


# Page configuration
st.set_page_config(
    page_title="My Wallet",
    page_icon="💰",
    layout="centered",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .balance-box {
        padding: 20px;
        background-color: #2563EB;
        color: #FFFFFF;
        border-radius: 10px;
        margin: 10px 0;
    }
    .insight-box {
        padding: 20px;
        background-color: #F3F4F6;
        border-radius: 10px;
        border-left: 5px solid #22C55E;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_app() -> WalletApp:
    """Get or create the application (cached across reruns)."""
    logging.basicConfig(level=get_settings().app.log_level)
    app = create_app_components()
    run_async(app.start())
    return app


def show_error(error: WalletError):
    st.error(f"**{error.title}:** {error.message}")


def main():
    """Main application entry point."""
    app = get_app()

    if not app.is_unlocked:
        render_auth_page(app)
        return

    session = app.require_session()

    st.sidebar.title("💰 My Wallet")
    st.sidebar.markdown(f"Signed in as **{session.email}**")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Home", "👛 Wallet", "📊 XSpend", "💬 Chat", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    if st.sidebar.button("Logout"):
        run_async(app.auth.logout())
        st.rerun()

    if page == "🏠 Home":
        render_home_page(app)
    elif page == "👛 Wallet":
        render_wallet_page(app)
    elif page == "📊 XSpend":
        render_xspend_page(app)
    elif page == "💬 Chat":
        render_chat_page(app)
    elif page == "⚙️ Settings":
        render_settings_page(app)


def render_auth_page(app: WalletApp):
    """Render login and registration."""
    st.title("💰 My Wallet")
    login_tab, register_tab = st.tabs(["Login", "Register"])

    with login_tab:
        email = st.text_input("Email or Phone number", key="login_email")
        password = st.text_input("Password", type="password", key="login_password")
        if st.button("Login", type="primary"):
            try:
                run_async(app.auth.authenticate(email, password))
                st.rerun()
            except WalletError as e:
                show_error(e)

    with register_tab:
        email = st.text_input("Email", key="register_email")
        password = st.text_input("Password", type="password", key="register_password")
        if st.button("Create Account", type="primary"):
            try:
                run_async(app.auth.register(email, password))
                st.rerun()
            except WalletError as e:
                show_error(e)


def render_home_page(app: WalletApp):
    """Render the dashboard."""
    summary = app.dashboard()

    st.title("🏠 Home")
    st.markdown(f"""
    <div class="balance-box">
        <p>Total Balance</p>
        <p class="big-number">{format_currency(summary.balance, app.currency_code)}</p>
    </div>
    """, unsafe_allow_html=True)

    st.subheader("Monthly Spending")
    points = summary.monthly_spending.points()
    if points:
        st.bar_chart({label: float(amount) for label, amount in points})
    else:
        st.info("No monthly spending recorded yet.")

    st.metric("Spending this month", format_currency(summary.total_spending, app.currency_code))


def render_wallet_page(app: WalletApp):
    """Render savings vaults."""
    st.title("👛 My Vault")

    vaults = app.engine.vaults
    if not vaults:
        st.info("No vaults yet. Add one below!")

    for vault in vaults:
        with st.container(border=True):
            st.markdown(f"**{vault.name}**")
            st.progress(float(vault.progress) / 100)
            st.caption(
                f"{format_currency(vault.current, app.currency_code)} of "
                f"{format_currency(vault.goal, app.currency_code)} "
                f"({format_percent(vault.progress)}%)"
            )
            new_amount = st.number_input(
                "Saved amount",
                value=float(vault.current),
                min_value=0.0,
                step=1000.0,
                key=f"vault_amount_{vault.id}",
            )
            if st.button("Update", key=f"vault_update_{vault.id}"):
                try:
                    app.engine.set_vault_amount(vault.id, str(new_amount))
                    run_async(app.engine.flush())
                    st.rerun()
                except WalletError as e:
                    show_error(e)

    st.markdown("---")
    st.subheader("Add New Vault")
    name = st.text_input("Vault name")
    goal = st.text_input("Goal amount", placeholder="e.g. 1000000")
    if st.button("➕ Add Vault", type="primary"):
        try:
            app.engine.create_vault(name, goal)
            run_async(app.engine.flush())
            st.rerun()
        except WalletError as e:
            show_error(e)


def render_xspend_page(app: WalletApp):
    """Render category spending."""
    st.title("📊 XSpend")

    breakdown = app.engine.spending_breakdown()
    st.subheader("Spending by Category")
    if not breakdown:
        st.info("No spending recorded yet.")
    for share in breakdown:
        st.markdown(
            f"- **{share.category}:** {format_currency(share.amount, app.currency_code)} "
            f"({share.percent}%)"
        )

    st.markdown("---")
    st.subheader("Add New Spending")
    entry = st.text_input("Category and amount", placeholder="Food, 50000")
    if st.button("➕ Add Spending", type="primary"):
        try:
            category, amount = parse_spending_entry(entry)
            app.engine.record_spending(category, amount)
            run_async(app.engine.flush())
            st.rerun()
        except WalletError as e:
            show_error(e)


def render_chat_page(app: WalletApp):
    """Render the assistant chat."""
    st.title("💬 My Wallet AI")

    for message in app.chat.transcript:
        role = "user" if message.role == ChatRole.USER else "assistant"
        with st.chat_message(role):
            st.markdown(message.text)

    prompt = st.chat_input("Type your message...", disabled=app.chat.is_typing)
    if prompt:
        with st.spinner("Typing..."):
            try:
                run_async(app.ask(prompt))
            except WalletError as e:
                show_error(e)
        st.rerun()

    if st.button("Clear conversation"):
        run_async(app.chat.reset())
        run_async(app.engine.flush())
        st.rerun()


def render_settings_page(app: WalletApp):
    """Render settings and recent activity."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")
    status = validate_all_settings()
    for name in ("app", "storage", "assistant", "auth"):
        if status.get(name, False):
            st.success(f"✅ {name.title()} settings loaded")
        else:
            st.error(f"❌ {name.title()} - {status.get(f'{name}_error', 'Not configured')}")

    st.markdown("### Recent Activity")
    events = app.audit_logger.recent_events[-10:]
    if not events:
        st.info("No activity yet.")
    for event in reversed(events):
        st.caption(f"{event.timestamp:%H:%M:%S} · {event.description}")


if __name__ == "__main__":
    main()
