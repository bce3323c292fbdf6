"""_helpers.py

Utility helpers shared by multiple Streamlit pages.

The module groups four kinds of helpers:

1. **Navigation** – `update_page` / `go_to` keep the ``?page=`` and
   ``?vault_id=`` query-params in sync with the sidebar.
2. **Session resources** – the process-wide `VaultStore`, the cached
   price / yield snapshots and the wallet identity widget.
3. **Formatting helpers** – `_format_significant_float`,
   `convert_to_local_time`.
4. **DataFrame helpers** – `vaults_frame` flattens vault rows into a
   table, `_add_details_column` links each row to its details page and
   `vaults_per_target` feeds the dashboard donut.
"""

from __future__ import annotations

# Third-party -----------------------------------------------------------------
import math
from datetime import datetime, timezone
from zoneinfo import ZoneInfo
import pandas as pd
import streamlit as st

# Project ---------------------------------------------------------------------
from vault_deck.config import settings
from vault_deck.services import (
    TokenPrice,
    VaultRecord,
    VaultStore,
    YieldOption,
    get_staking_yields,
    get_token_prices,
)

PAGES = ("Dashboard", "Vaults", "Create")

# -----------------------------------------------------------------------------
# 0) Navigation
# -----------------------------------------------------------------------------
def update_page(page: None | str = None) -> None:
    """Update the ?page=... query-parameter in the URL.

    Parameters
    ----------
    page : None | str
        The new page value to set or None to take it from the sidebar radio.
    """
    if page is None:
        st.query_params.update(page=st.session_state.sidebar_page)
    else:
        st.query_params.update(page=page)


def go_to(page: str) -> None:
    """Leave any details view, switch the sidebar to *page* and rerun."""
    if "vault_id" in st.query_params:
        del st.query_params["vault_id"]
    st.session_state.pending_page = page
    update_page(page)
    st.rerun()

# -----------------------------------------------------------------------------
# 1) Session resources
# -----------------------------------------------------------------------------

@st.cache_resource
def get_vault_store() -> VaultStore:
    """One store (and HTTP session) per server process."""
    return VaultStore.from_settings()


@st.cache_data(ttl=settings()["REFRESH_SECONDS"], show_spinner=False)
def load_token_prices() -> list[TokenPrice]:
    return get_token_prices()


@st.cache_data(ttl=settings()["REFRESH_SECONDS"], show_spinner=False)
def load_staking_yields() -> list[YieldOption]:
    return get_staking_yields()


def wallet_identity() -> str | None:
    """Render the sidebar wallet field and return the address (or ``None``).

    Seeded from ``?wallet=`` or ``DEFAULT_WALLET`` on first run.
    """
    if "wallet" not in st.session_state:
        st.session_state.wallet = st.query_params.get("wallet", settings()["DEFAULT_WALLET"])

    address = st.sidebar.text_input(
        "Wallet address", key="wallet", placeholder="Connect a wallet…"
    ).strip()

    if address:
        st.query_params.update(wallet=address)
    elif "wallet" in st.query_params:
        del st.query_params["wallet"]
    return address or None


def connect_wallet_prompt() -> None:
    st.info("Connect a wallet (sidebar) to see and create your automations.")

# -----------------------------------------------------------------------------
# 2) Formatting helpers
# -----------------------------------------------------------------------------

LOCAL_TZ = ZoneInfo(settings()["LOCAL_TZ"])
TS_FMT = "%d/%m %H:%M:%S"  # Timestamp format for human-readable dates
ZERO_DISPLAY = "--"  # Default display for zero values


def convert_to_local_time(ts: int | float | datetime | None, fmt: str = TS_FMT) -> str:
    """
    Convert a UTC timestamp (seconds or ms) or datetime to the local time zone.

    Parameters
    ----------
    ts : int | float | datetime | None
        The UTC instant to convert. Naive datetimes are taken as UTC.
    fmt : str
        The format string to use for formatting the local time.

    Returns
    -------
    str
        The formatted local time, or ``ZERO_DISPLAY`` for anything else.
    """
    if isinstance(ts, (int, float)) and not isinstance(ts, bool):
        # improbably large for seconds → milliseconds
        if ts > 1e11:
            ts = ts / 1000.0
        ts = datetime.fromtimestamp(ts, tz=timezone.utc)
    elif isinstance(ts, datetime):
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
    else:
        return ZERO_DISPLAY

    return ts.astimezone(LOCAL_TZ).strftime(fmt)


def _format_significant_float(value: float | int | None, unity: str | None = None) -> str:
    """
    Format a float into a human-readable string with dynamic precision.

    - abs >= 1: thousands separator and 2 decimals (1234.6565 → "1,234.66")
    - abs < 1: first 2 significant digits (0.006565 → "0.0066")
    - zero / None / NaN: ``ZERO_DISPLAY``

    Args:
        value (float | int | None): The number to format.
        unity (str | None): Optional unit suffix (e.g. "SOL").
    """
    if value is None or pd.isna(value) or value == 0.0:
        return ZERO_DISPLAY

    is_negative = value < 0
    abs_value = abs(value)

    if abs_value >= 1:
        formatted = f"{abs_value:,.2f}"
    else:
        # floor(log10(x)) is the exponent of the leading significant digit
        exp = math.floor(math.log10(abs_value))
        decimals = 2 - exp - 1
        rounded = round(abs_value, decimals)
        formatted = f"{rounded:.{decimals}f}"

    if is_negative:
        formatted = "-" + formatted
    if unity:
        formatted += f" {unity}"

    return formatted

# -----------------------------------------------------------------------------
# 3) DataFrame helpers
# -----------------------------------------------------------------------------

VAULT_COLUMNS = [
    "id",
    "created_at",
    "source_symbol",
    "source_amount",
    "target_name",
    "target_symbol",
    "target_amount",
    "duration",
    "executions",
    "percentage",
    "time_left",
]


def vaults_frame(vaults: list[VaultRecord]) -> pd.DataFrame:
    """Flatten vault rows (data + metadata) into one DataFrame, order preserved."""
    records = []
    for v in vaults:
        meta = v.data.metadata
        records.append(
            {
                "id": v.id,
                "created_at": v.created_at,
                "source_symbol": meta.source_symbol,
                "source_amount": v.data.source_amount,
                "target_name": meta.target_name,
                "target_symbol": meta.target_symbol,
                "target_amount": meta.target_amount,
                "duration": f"{v.data.duration.value} {v.data.duration.unit}",
                "executions": v.data.executions,
                "percentage": meta.percentage,
                "time_left": meta.time_left,
            }
        )
    return pd.DataFrame(records, columns=VAULT_COLUMNS)


def _add_details_column(
    df: pd.DataFrame,
    *,
    vault_id_col: str = "id",
    new_col: str = "Details",
    path_template: str = "?vault_id={vid}",
) -> pd.DataFrame:
    """Return a copy of *df* with a relative link to each vault's details page."""
    df = df.copy()
    if not df.empty:
        df[new_col] = df[vault_id_col].astype(str).map(lambda vid: path_template.format(vid=vid))
    return df


def vaults_per_target(df: pd.DataFrame) -> pd.DataFrame:
    """Number of vaults per target, largest first (donut chart input).

    Counts rather than sums: source amounts are in different tokens.
    """
    counts = df.groupby("target_name", sort=False).size().rename("vaults").reset_index()
    return counts.sort_values("vaults", ascending=False, kind="stable").reset_index(drop=True)
