"""vaults.py

Streamlit page listing the **vaults** (DCA automations) owned by the
connected wallet.

* Without a wallet only the connect prompt is shown – the store is not
  queried.
* Shows an "N active automations" counter and a table of every vault,
  newest first, with a 🔍 link to the *Vault Details* view.
"""

from __future__ import annotations

# Third‑party ------------------------------------------------------------------
import streamlit as st

# First‑party ------------------------------------------------------------------
from vault_deck.services import VaultStoreError
from ._helpers import (
    _add_details_column,
    _format_significant_float,
    connect_wallet_prompt,
    convert_to_local_time,
    get_vault_store,
    go_to,
    vaults_frame,
)


def _count_label(n: int) -> str:
    if n == 0:
        return "No active automations yet"
    return f"{n} active automation{'' if n == 1 else 's'}"


def render(owner: str | None) -> None:  # noqa: D401
    """Render the **Vaults** page for wallet *owner*."""
    st.title("Your Vaults")
    st.caption(
        "Each vault is an automation that buys tokens at scheduled intervals "
        "and deploys them into a yield-bearing protocol."
    )

    if not owner:
        connect_wallet_prompt()
        return

    try:
        vaults = get_vault_store().list_vaults(owner)
    except VaultStoreError as exc:
        st.error(f"Could not load vaults:\n```\n{exc}\n```")
        return

    c1, c2 = st.columns([3, 1])
    with c1:
        st.markdown(f"**{_count_label(len(vaults))}**")
    with c2:
        if st.button("Create New Automation", use_container_width=True):
            go_to("Create")

    if not vaults:
        st.info(
            "You don't have any automated DCA strategies running yet. "
            "Create your first automation to start earning yield automatically."
        )
        return

    # ------------------------------------------------------------------
    # Table – numbers formatted, units inline
    # ------------------------------------------------------------------
    df = vaults_frame(vaults).pipe(_add_details_column)
    df["Created"] = df["created_at"].map(convert_to_local_time)
    df["Amount"] = df.apply(
        lambda r: _format_significant_float(r["source_amount"], r["source_symbol"]), axis=1
    )
    df["Estimated"] = df.apply(
        lambda r: _format_significant_float(r["target_amount"], r["target_symbol"]), axis=1
    )
    df["Progress"] = df["percentage"].map(lambda p: f"{p:,.0f}%")

    # Dynamic height: ~35 px per row, capped at 800 px.
    height_calc = min(35 * (1 + len(df)) + 5, 800)

    st.dataframe(
        df,
        hide_index=True,
        use_container_width=True,
        height=height_calc,
        column_order=[
            "Details",
            "Created",
            "Amount",
            "target_name",
            "Estimated",
            "duration",
            "executions",
            "time_left",
            "Progress",
        ],
        column_config={
            "Details": st.column_config.LinkColumn(
                label=" ",
                display_text="🔍",
                max_chars=1,
                help="View vault details",
            ),
            "target_name": st.column_config.TextColumn("Target"),
            "duration": st.column_config.TextColumn("Duration"),
            "executions": st.column_config.NumberColumn("Executions"),
            "time_left": st.column_config.TextColumn("Time left"),
        },
    )
