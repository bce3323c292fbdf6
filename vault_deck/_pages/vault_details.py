"""vault_details.py

Streamlit sub‑page that shows a **single vault** in depth.

Opened through the 🔍 link of the Vaults table (``?vault_id=...``).
Shows the configuration the user submitted and the preview that was
frozen into the record at creation time.
"""

from __future__ import annotations

import streamlit as st

from vault_deck.services import VaultStoreError
from ._helpers import _format_significant_float, convert_to_local_time, get_vault_store, go_to


def render(vault_id: str) -> None:  # noqa: D401
    """Render the *Vault Details* page for ``vault_id``."""
    if st.button("← Back to Vaults"):
        go_to("Vaults")

    try:
        vault = get_vault_store().get_vault(vault_id)
    except VaultStoreError as exc:
        st.error(f"Could not load vault:\n```\n{exc}\n```")
        return

    if vault is None:
        st.info(f"No vault found with ID {vault_id}.")
        return

    data, meta = vault.data, vault.data.metadata
    st.header(f"Vault #{vault.id} [{vault.pair_label}]")

    c1, c2, c3 = st.columns(3)

    with c1:
        st.metric("Investment", _format_significant_float(data.source_amount, meta.source_symbol))
        st.metric("Executions", data.executions)

    with c2:
        st.metric("Target", meta.target_name or "--")
        st.metric(
            "Estimated output", _format_significant_float(meta.target_amount, meta.target_symbol)
        )

    with c3:
        st.metric("Created", convert_to_local_time(vault.created_at))
        st.metric("Time left", meta.time_left or "--")

    st.progress(min(max(meta.percentage, 0), 100) / 100, text=f"{meta.percentage:,.0f}% complete")

    st.markdown("---")
    st.subheader("Configuration")
    st.dataframe(
        [
            {"Field": "Owner", "Value": vault.owner_pubkey},
            {"Field": "Source token", "Value": data.source_token},
            {"Field": "Target mint", "Value": data.target},
            {"Field": "Duration", "Value": f"{data.duration.value} {data.duration.unit}"},
            {"Field": "Submitted", "Value": convert_to_local_time(data.submission_datetime)},
        ],
        hide_index=True,
        use_container_width=True,
    )
