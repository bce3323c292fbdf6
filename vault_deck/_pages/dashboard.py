"""dashboard.py

Landing page: a short explanation of the DCA-into-yield flow, headline
numbers for the connected wallet and one card per active automation.
"""

from __future__ import annotations

import plotly.express as px
import streamlit as st

from vault_deck.services import VaultStoreError
from ._helpers import (
    _format_significant_float,
    connect_wallet_prompt,
    get_vault_store,
    go_to,
    vaults_frame,
    vaults_per_target,
)

CARDS_PER_ROW = 3


def render(owner: str | None) -> None:  # noqa: D401
    """Draw the **Dashboard** page for wallet *owner*."""
    st.title("Automated DCA into yield")
    st.markdown(
        "Set up automated dollar-cost averaging that directly invests into "
        "yield-bearing protocols.\n\n"
        "1. **Configure** – choose a source token, target protocol and schedule.\n"
        "2. **Automate** – purchases execute at the scheduled intervals.\n"
        "3. **Earn** – each purchase starts earning yield immediately."
    )

    if not owner:
        connect_wallet_prompt()
        return

    try:
        vaults = get_vault_store().list_vaults(owner)
    except VaultStoreError as exc:
        st.error(f"Could not load vaults:\n```\n{exc}\n```")
        return

    head, action = st.columns([3, 1])
    with head:
        st.subheader("Active automations")
    with action:
        if st.button("Create New Automation", use_container_width=True, key="dash_create"):
            go_to("Create")

    if not vaults:
        st.info("No active automations yet.")
        return

    df = vaults_frame(vaults)

    # ------------------------------------------------------------------
    # 1) Headline metrics + allocation donut
    # ------------------------------------------------------------------
    left, right = st.columns([1, 2])
    with left:
        st.metric("Vaults", len(vaults))
        committed = df.groupby("source_symbol", sort=True)["source_amount"].sum()
        for symbol, amount in committed.items():
            st.metric(f"Committed ▶ {symbol or '?'}", _format_significant_float(amount, symbol))
    with right:
        fig = px.pie(vaults_per_target(df), names="target_name", values="vaults", hole=0.4)
        fig.update_layout(autosize=True, height=320, margin=dict(t=20, b=20, l=20, r=20))
        st.plotly_chart(fig, use_container_width=True)

    # ------------------------------------------------------------------
    # 2) One card per vault
    # ------------------------------------------------------------------
    for start in range(0, len(vaults), CARDS_PER_ROW):
        cols = st.columns(CARDS_PER_ROW)
        for col, vault in zip(cols, vaults[start : start + CARDS_PER_ROW]):
            meta = vault.data.metadata
            with col.container(border=True):
                st.markdown(f"**{vault.pair_label}**")
                st.write(f"Amount: {_format_significant_float(vault.data.source_amount)}")
                st.write(f"Target: {_format_significant_float(meta.target_amount)}")
                st.write(f"Time Left: {meta.time_left}")
                st.write(f"Percentage: {meta.percentage:,.0f}")
                st.markdown(f"[🔍 Details](?vault_id={vault.id})")
