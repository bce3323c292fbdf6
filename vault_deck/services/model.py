"""model.py

Pydantic **domain models** shared across UI layers.

Feed records, form drafts, previews and persisted vault rows all live here
so pages and services agree on one shape. Python attributes are
snake_case; the camelCase names used on the wire are declared as aliases
and accepted on input alongside the attribute names.
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
import math
from datetime import datetime, timezone
from typing import Any, Literal, Optional

# Third-party
from pydantic import BaseModel, ConfigDict, Field, field_validator

DurationUnit = Literal["Hours", "Days", "Weeks"]
DURATION_UNITS: tuple[str, ...] = ("Hours", "Days", "Weeks")


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict using the wire (alias) names."""
        return self.model_dump(by_alias=True, mode="json")


# -----------------------------------------------------------------------------
# Feed models (read-only snapshots from the price / yield providers)
# -----------------------------------------------------------------------------

class TokenPrice(_WireModel):
    """One row of the price feed: ``{mint, token, usdPrice}``."""

    mint: str
    symbol: str = Field(alias="token")
    usd_price: Optional[str] = Field(default=None, alias="usdPrice")  # decimal string

    @field_validator("usd_price", mode="before")
    @classmethod
    def _price_as_text(cls, v):
        # some feeds send numbers instead of decimal strings
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def usd_value(self) -> float | None:
        """Parsed USD price, or ``None`` when missing, unparseable or not > 0."""
        if not self.usd_price:
            return None
        try:
            value = float(self.usd_price)
        except ValueError:
            return None
        if not math.isfinite(value) or value <= 0:
            return None
        return value


class YieldOption(_WireModel):
    """One row of the staking-yield feed: ``{tokenMint, apy}`` (apy as fraction)."""

    token_mint: str = Field(alias="tokenMint")
    apy: float


# -----------------------------------------------------------------------------
# Derived choices (form select options)
# -----------------------------------------------------------------------------

class SourceTokenChoice(BaseModel):
    value: str   # mint
    label: str   # token symbol


class TargetChoice(BaseModel):
    value: str        # mint, used as the select value
    token_mint: str
    apy: float        # percent, e.g. 7.25
    symbol: str


# -----------------------------------------------------------------------------
# Vault models
# -----------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VaultDraft(_WireModel):
    """Validated form input. See ``validation.validate_draft`` for messages."""

    source_token: str = Field(alias="sourceToken", min_length=1)
    source_amount: float = Field(alias="sourceAmount", gt=0)
    target: str = Field(min_length=1)
    duration_value: int = Field(alias="durationValue", gt=0)
    duration_unit: DurationUnit = Field(default="Days", alias="durationUnit")
    executions: int = Field(default=1, ge=1, le=100)
    submission_datetime: datetime = Field(default_factory=_utcnow, alias="submissionDatetime")


class VaultPreview(_WireModel):
    """Client-side estimate embedded as ``metadata`` in every vault row.

    Defaults only matter when reading legacy rows that lack a field.
    """

    source_token: str = Field(default="", alias="sourceToken")
    source_amount: float = Field(default=0.0, alias="sourceAmount")
    source_symbol: str = Field(default="", alias="sourceSymbol")
    target_name: str = Field(default="", alias="targetName")
    target_amount: float = Field(default=0.0, alias="targetAmount")
    target_symbol: str = Field(default="", alias="targetSymbol")
    percentage: float = 0
    time_left: str = Field(default="", alias="timeLeft")


class Duration(_WireModel):
    value: int
    unit: DurationUnit


class VaultData(_WireModel):
    """The ``data`` column of a persisted vault row."""

    source_token: str = Field(alias="sourceToken")
    source_amount: float = Field(alias="sourceAmount")
    target: str
    duration: Duration
    executions: int = Field(ge=1, le=100)
    submission_datetime: Optional[datetime] = Field(default=None, alias="submissionDatetime")
    metadata: VaultPreview = Field(default_factory=VaultPreview)


class VaultRecord(_WireModel):
    """A persisted vault row as returned by the store."""

    id: str
    owner_pubkey: str
    created_at: datetime
    data: VaultData

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v):
        # bigint / uuid primary keys both surface as strings
        return str(v) if v is not None else v

    @property
    def pair_label(self) -> str:  # noqa: D401 – short property description fine
        """``"USDC -> SOL"`` style heading used on cards."""
        meta = self.data.metadata
        return f"{meta.source_symbol or '?'} -> {meta.target_symbol or '?'}"
