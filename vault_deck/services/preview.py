"""preview.py

Client-side estimate of what a vault will buy, computed once per draft
before the user confirms. The result is stored verbatim as the vault's
``metadata`` and never recomputed.
"""

from __future__ import annotations

from typing import Sequence

from .model import Duration, TargetChoice, TokenPrice, VaultData, VaultDraft, VaultPreview
from .options import find_price

UNKNOWN_SOURCE_SYMBOL = "Unknown"
UNKNOWN_TARGET_SYMBOL = "TOKEN"
UNKNOWN_TARGET_NAME = "Unknown Target"


def estimate_target_amount(
    source_amount: float,
    source_price: TokenPrice | None,
    target_price: TokenPrice | None,
    same_token: bool = False,
) -> float:
    """Convert through USD: source → USD → target.

    Falls back to *source_amount* unchanged when the tokens are the same or
    either USD price is unavailable.
    """
    source_usd = source_price.usd_value if source_price else None
    target_usd = target_price.usd_value if target_price else None
    if same_token or source_usd is None or target_usd is None:
        return source_amount
    return source_amount * source_usd / target_usd


def compute_preview(
    draft: VaultDraft,
    prices: Sequence[TokenPrice],
    target_choices: Sequence[TargetChoice],
) -> VaultPreview:
    """Build the :class:`VaultPreview` for *draft*. Never raises."""
    target_info = next((t for t in target_choices if t.value == draft.target), None)

    source_price = find_price(prices, draft.source_token)
    target_price = find_price(prices, draft.target)

    target_amount = estimate_target_amount(
        draft.source_amount,
        source_price,
        target_price,
        same_token=draft.source_token == draft.target,
    )

    return VaultPreview(
        source_token=draft.source_token,
        source_amount=draft.source_amount,
        source_symbol=source_price.symbol if source_price else UNKNOWN_SOURCE_SYMBOL,
        target_name=f"{target_info.symbol} Yield" if target_info else UNKNOWN_TARGET_NAME,
        target_amount=target_amount,
        target_symbol=target_price.symbol if target_price else UNKNOWN_TARGET_SYMBOL,
        percentage=0,  # progress is not tracked yet
        time_left=f"{draft.duration_value} {draft.duration_unit}",
    )


def build_vault_data(draft: VaultDraft, preview: VaultPreview) -> VaultData:
    """Raw input plus the preview, in the shape stored in the ``data`` column."""
    return VaultData(
        source_token=draft.source_token,
        source_amount=draft.source_amount,
        target=draft.target,
        duration=Duration(value=draft.duration_value, unit=draft.duration_unit),
        executions=draft.executions,
        submission_datetime=draft.submission_datetime,
        metadata=preview,
    )
