"""
Streamlit Console for Chat Ledger

An operator console next to the chat bot. It feeds typed messages through
exactly the same flow the bot uses, so a command can be tried out before
it is sent from the phone.

DESIGN PRINCIPLES:
1. Same engine as the bot, no console-only shortcuts
2. Clear reply for every recognised message
3. Demo mode when Google Sheets isn't configured

Without Google Sheets settings the console runs against an in-memory
ledger, so nothing written here reaches the real spreadsheet.
"""

import asyncio

import streamlit as st

from chatledger.audit import configure_logging, create_correlation_id
from chatledger.config import get_settings, validate_all_settings
from chatledger.orchestrator import LedgerCommandFlow, create_app_components
from chatledger.services.storage import BoundedLedgerStore, InMemoryLedgerStore


st.set_page_config(
    page_title="Chat Ledger",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    configure_logging(get_settings().app.log_level)
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.warning(f"Google Sheets not configured, running in demo mode: {e}")
        return create_app_components(use_storage=False)


def is_demo(store) -> bool:
    inner = store.inner if isinstance(store, BoundedLedgerStore) else store
    return isinstance(inner, InMemoryLedgerStore)


def main():
    """Main application entry point."""
    command_flow, _, store = get_components()

    st.sidebar.title("📒 Chat Ledger")
    if is_demo(store):
        st.sidebar.info("Demo mode: in-memory ledger")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["💬 Chat", "📊 Ledger", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Commands:**
        - `venta Carlos persianas fecha 18 pago 2800 venta 5200 anticipo 2000`
        - `gastos 850 gasolina semana`
        - `facturado 1200 renta`
        - `sin facturar 500 papeleria`
        """
    )

    if page == "💬 Chat":
        render_chat_page(command_flow)
    elif page == "📊 Ledger":
        render_ledger_page(command_flow, store)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_chat_page(command_flow: LedgerCommandFlow):
    """Render the chat page."""
    st.title("💬 Chat")

    if "history" not in st.session_state:
        st.session_state.history = []

    for role, text in st.session_state.history:
        with st.chat_message(role):
            st.markdown(text)

    text = st.chat_input("Escribe un comando...")
    if not text:
        return

    st.session_state.history.append(("user", text))
    with st.chat_message("user"):
        st.markdown(text)

    with st.spinner("Updating ledger..."):
        reply = run_async(
            command_flow.handle_message(
                text,
                sender="console",
                correlation_id=create_correlation_id(),
            )
        )

    if reply is None:
        st.caption("Not a ledger command - ignored.")
        return

    st.session_state.history.append(("assistant", reply))
    with st.chat_message("assistant"):
        st.markdown(reply)


def render_ledger_page(command_flow: LedgerCommandFlow, store):
    """Render a read-only view of one ledger sheet."""
    st.title("📊 Ledger")

    try:
        names = run_async(store.list_sheet_names())
    except Exception as e:
        st.error(f"Could not list sheets: {e}")
        return

    if not names:
        st.info("The ledger has no sheets yet.")
        return

    default = command_flow.locator.month_sheet_name()
    index = names.index(default) if default in names else 0
    sheet_name = st.selectbox("Sheet", names, index=index)

    try:
        grid = run_async(store.read_range(sheet_name, "A1:L200"))
    except Exception as e:
        st.error(f"Could not read {sheet_name}: {e}")
        return

    if not grid:
        st.info(f"{sheet_name} is empty.")
        return

    width = max(len(row) for row in grid)
    st.dataframe(
        [row + [""] * (width - len(row)) for row in grid],
        use_container_width=True,
    )


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Google Sheets (Ledger)", "google_sheets"),
        ("Ledger layout", "ledger"),
        ("Telegram (Bot)", "telegram"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file with your credentials. "
        "See `.env.example` for the required variables."
    )


if __name__ == "__main__":
    main()
