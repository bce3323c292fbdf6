"""vault_create.py

Streamlit page to **create a vault** (DCA automation).

Workflow
--------
1. Load the price and staking-yield snapshots (cached for
   ``REFRESH_SECONDS``) and derive the source / target choices.
2. The user fills the form and presses *Preview Automation*; the raw
   values are validated and field errors are shown under each input.
3. A valid draft is turned into a preview (estimated output through USD
   prices) and shown next to the form.
4. *Create Automation* persists draft + preview for the connected wallet
   and returns to the Vaults page. Failures show a generic retry notice.
"""

from __future__ import annotations

import requests
import streamlit as st

from vault_deck.logger import get_logger
from vault_deck.services import (
    VaultDraft,
    VaultPreview,
    VaultStoreError,
    compute_preview,
    format_target_option,
    source_options,
    target_options,
    validate_draft,
)
from vault_deck.services.model import DURATION_UNITS
from ._helpers import (
    _format_significant_float,
    connect_wallet_prompt,
    get_vault_store,
    go_to,
    load_staking_yields,
    load_token_prices,
)

logger = get_logger(__name__)

# session-state keys
_ERRORS = "create_errors"
_DRAFT = "create_draft"
_PREVIEW = "create_preview"
_FAILED = "create_failed"


def _field_error(field: str) -> None:
    msg = st.session_state.get(_ERRORS, {}).get(field)
    if msg:
        st.caption(f":red[{msg}]")


def _preview_card(preview: VaultPreview) -> None:
    with st.container(border=True):
        st.markdown(f"**{preview.source_symbol} -> {preview.target_symbol}**")
        st.caption(preview.target_name)
        c1, c2 = st.columns(2)
        c1.metric("Investment", _format_significant_float(preview.source_amount, preview.source_symbol))
        c2.metric(
            "Estimated output",
            _format_significant_float(preview.target_amount, preview.target_symbol),
        )
        c1.metric("Time left", preview.time_left)
        c2.metric("Progress", f"{preview.percentage:,.0f}%")


def _create(owner: str, draft: VaultDraft, preview: VaultPreview) -> None:
    try:
        get_vault_store().create_vault(owner, draft, preview)
    except VaultStoreError as exc:
        logger.error("Failed to create vault: %s", exc)
        st.session_state[_FAILED] = True
        return

    for key in (_ERRORS, _DRAFT, _PREVIEW, _FAILED):
        st.session_state.pop(key, None)
    go_to("Vaults")


def render(owner: str | None) -> None:  # noqa: D401
    """Render the **Create Automation** page for wallet *owner*."""
    st.title("Create New Automation")
    st.caption(
        "Set up an automated DCA strategy that purchases tokens at scheduled "
        "intervals and immediately deploys them into yield-bearing protocols."
    )

    # ------------------------------------------------------------------
    # 1) Feeds → choices
    # ------------------------------------------------------------------
    try:
        with st.spinner("Loading vault options..."):
            prices = load_token_prices()
            yields = load_staking_yields()
    except (requests.RequestException, ValueError) as exc:
        st.error(f"Could not load prices or yields:\n```\n{exc}\n```")
        return

    sources = source_options(prices)
    targets = target_options(yields, prices)
    source_labels = {o.value: o.label for o in sources}
    target_labels = {o.value: format_target_option(o) for o in targets}

    if st.session_state.get(_FAILED):
        st.error("Failed to create vault. Please try again.")

    form_col, preview_col = st.columns(2)

    # ------------------------------------------------------------------
    # 2) Form
    # ------------------------------------------------------------------
    with form_col, st.form("vault_form"):
        st.subheader("Automation Configuration")

        source_token = st.selectbox(
            "Source Token",
            options=list(source_labels),
            index=None,
            format_func=source_labels.get,
            placeholder="Select token",
            help="The token you invest with at each interval.",
        )
        _field_error("sourceToken")

        source_amount = st.text_input("Investment Amount", placeholder="Enter amount")
        _field_error("sourceAmount")

        target = st.selectbox(
            "Target Yield Protocol",
            options=list(target_labels),
            index=None,
            format_func=target_labels.get,
            placeholder="Select target protocol",
        )
        _field_error("target")

        d1, d2 = st.columns(2)
        with d1:
            duration_value = st.text_input("Duration", placeholder="Enter duration")
            _field_error("durationValue")
        with d2:
            duration_unit = st.selectbox(
                "Unit", options=list(DURATION_UNITS), index=DURATION_UNITS.index("Days")
            )
            _field_error("durationUnit")

        executions = st.number_input("Number of Executions", value=1, step=1)
        _field_error("executions")

        submitted = st.form_submit_button("Preview Automation", use_container_width=True)

    if submitted:
        draft, errors = validate_draft(
            {
                "sourceToken": source_token,
                "sourceAmount": source_amount,
                "target": target,
                "durationValue": duration_value,
                "durationUnit": duration_unit,
                "executions": executions,
            }
        )
        st.session_state[_ERRORS] = errors
        st.session_state[_FAILED] = False
        if draft is None:
            st.session_state.pop(_DRAFT, None)
            st.session_state.pop(_PREVIEW, None)
        else:
            st.session_state[_DRAFT] = draft
            st.session_state[_PREVIEW] = compute_preview(draft, prices, targets)
        st.rerun()

    # ------------------------------------------------------------------
    # 3) Preview + confirm
    # ------------------------------------------------------------------
    with preview_col:
        st.subheader("Automation Preview")
        draft = st.session_state.get(_DRAFT)
        preview = st.session_state.get(_PREVIEW)

        if preview is None:
            st.info("Fill out the form to see a preview of your automation.")
        else:
            _preview_card(preview)
            if not owner:
                connect_wallet_prompt()
            elif st.button("Create Automation", type="primary", use_container_width=True):
                with st.spinner("Creating automation..."):
                    _create(owner, draft, preview)
                st.rerun()

        st.caption(
            "The preview shows estimated values that may change based on market conditions."
        )
