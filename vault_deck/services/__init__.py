"""Public service API."""
from .api import get_staking_yields, get_token_prices
from .model import (
    SourceTokenChoice,
    TargetChoice,
    TokenPrice,
    VaultData,
    VaultDraft,
    VaultPreview,
    VaultRecord,
    YieldOption,
)
from .options import format_target_option, source_options, target_options
from .preview import build_vault_data, compute_preview
from .store import MissingIdentityError, VaultStore, VaultStoreError
from .validation import validate_draft

__all__ = [
    "get_staking_yields",
    "get_token_prices",
    "SourceTokenChoice",
    "TargetChoice",
    "TokenPrice",
    "VaultData",
    "VaultDraft",
    "VaultPreview",
    "VaultRecord",
    "YieldOption",
    "format_target_option",
    "source_options",
    "target_options",
    "build_vault_data",
    "compute_preview",
    "MissingIdentityError",
    "VaultStore",
    "VaultStoreError",
    "validate_draft",
]
