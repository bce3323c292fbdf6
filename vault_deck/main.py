"""main.py

Streamlit **entry-point** for the Vault Deck dashboard.

Responsibilities
----------------
* Define global page layout (wide view, expanded sidebar, title).
* Render the wallet identity field and a **navigation radio**
  (Dashboard / Vaults / Create).
* Poll URL query-params so a direct link such as ``...?vault_id=42``
  opens the *Vault Details* sub-page immediately.
* Trigger an **auto-refresh** every *REFRESH_SECONDS* so the UI stays
  live without manual reloads.

Run with ``streamlit run vault_deck/main.py``.
"""

from __future__ import annotations

from datetime import datetime, timezone

import streamlit as st
from streamlit_autorefresh import st_autorefresh

from vault_deck import APP_ICON, APP_NAME

# -----------------------------------------------------------------------------
# 0) Global page configuration – must run before any other Streamlit call
# -----------------------------------------------------------------------------
st.set_page_config(
    page_title=APP_NAME,
    page_icon=APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded",
)

# -----------------------------------------------------------------------------
# Local imports (after Streamlit initialisation)
# -----------------------------------------------------------------------------
from vault_deck.config import settings  # noqa: E402
from vault_deck.logger import setup_logging  # noqa: E402
from vault_deck._pages import registry, vault_details  # noqa: E402
from vault_deck._pages._helpers import (  # noqa: E402
    PAGES,
    TS_FMT,
    convert_to_local_time,
    get_vault_store,
    update_page,
    wallet_identity,
)


@st.cache_resource
def _init_logging() -> None:
    setup_logging()


_init_logging()

# -----------------------------------------------------------------------------
# 1) Sidebar – identity + navigation radio
# -----------------------------------------------------------------------------
if settings()["APP_TITLE"]:
    st.sidebar.title(settings()["APP_TITLE"])

owner = wallet_identity()

params = st.query_params
vault_id = params.get("vault_id")

# A page switch requested by a button on the previous run
if "pending_page" in st.session_state:
    st.session_state.sidebar_page = st.session_state.pop("pending_page")

if "sidebar_page" not in st.session_state:
    initial_page = params.get("page", "Dashboard")
    st.session_state.sidebar_page = initial_page if initial_page in PAGES else "Dashboard"

# value comes from session_state["sidebar_page"]
page = st.sidebar.radio("Navigate", PAGES, key="sidebar_page", on_change=update_page)

if st.sidebar.button("Refresh vaults"):
    get_vault_store().invalidate(owner)

# -----------------------------------------------------------------------------
# 2) Auto-refresh – keeps data up-to-date without F5
# -----------------------------------------------------------------------------
st_autorefresh(interval=settings()["REFRESH_SECONDS"] * 1000, key="refresh")

# -----------------------------------------------------------------------------
# 3) Routing logic – vault details page has priority
# -----------------------------------------------------------------------------
if vault_id:
    vault_details.render(vault_id=vault_id)
else:
    registry[page](owner)

st.sidebar.markdown("---")
st.sidebar.metric(
    label="🕒 Last refresh:",
    value=convert_to_local_time(datetime.now(timezone.utc), TS_FMT),
    delta=settings()["LOCAL_TZ"],
    delta_color="off",
)
