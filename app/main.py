"""
Streamlit Frontend for Beanbot

A browser alternative to the chat bot: type a transaction line the same
way you would in a chat message, preview the ledger entry, then save it.

DESIGN PRINCIPLES:
1. Preview before save
2. Clear error messages naming the field that failed
3. The rendered ledger text is always shown, even if saving fails
"""

import streamlit as st

from beanbot.audit import configure_logging
from beanbot.config import ConfigurationError, get_settings, validate_all_settings
from beanbot.orchestrator import TransactionFlow, create_app_components


# Page configuration
st.set_page_config(
    page_title="Beanbot",
    page_icon="🫘",
    layout="centered",
)


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    configure_logging(get_settings().app.log_level)
    return create_app_components(use_storage=True)


def main():
    """Main application entry point."""
    st.sidebar.title("🫘 Beanbot")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["✍️ New Transaction", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Write transactions like:**
        - `2021-09-08 @KFC hamburger 12.40 AUD cba > food`
        - `@Costco lunch 8.97 cba>food`
        - `22.34 USD @KFL cba > food`
        """
    )

    if page == "⚙️ Settings":
        render_settings_page()
        return

    try:
        flow, _ = get_components()
    except ConfigurationError as e:
        st.error(f"Failed to initialize: {e}")
        st.stop()

    render_transaction_page(flow)


def render_transaction_page(flow: TransactionFlow):
    """Render the transaction entry page."""
    st.title("✍️ New Transaction")

    text = st.text_input(
        "Transaction",
        placeholder="@KFC hamburger 12.40 AUD cba > food",
        help="Fields may appear in any order; the two accounts are written as `from > to`.",
    )

    col1, col2 = st.columns(2)
    with col1:
        preview_clicked = st.button("🔍 Preview", disabled=not text)
    with col2:
        save_clicked = st.button("💾 Save", type="primary", disabled=not text)

    if preview_clicked:
        result = flow.preview(text)
        if result.success:
            st.code(result.ledger_text, language="text")
        else:
            st.error(result.error_message)

    if save_clicked:
        with st.spinner("Saving to ledger..."):
            result = flow.process(text)
        if result.success:
            st.success("Saved")
            st.code(result.ledger_text, language="text")
        else:
            st.error(result.error_message)
            if result.error_kind == "ConcurrentModification":
                st.warning("The ledger changed while saving. Nothing was written; save again.")
            if result.ledger_text:
                st.code(result.ledger_text, language="text")


def render_settings_page():
    """Render the settings / status page."""
    st.title("⚙️ Settings")

    status = validate_all_settings()

    sections = [
        ("Ledger (accounts and currency)", "ledger"),
        ("GitHub (storage)", "github"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "Accounts live in `config.toml` (or the file named by `BEANBOT_CONFIG_FILE`). "
        "GitHub access is configured with `GITHUB_OWNER`, `GITHUB_REPO` and `GITHUB_TOKEN`."
    )


if __name__ == "__main__":
    main()
