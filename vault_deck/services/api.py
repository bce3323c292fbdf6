"""api.py

Thin synchronous wrapper around the external price and staking-yield
feeds.

* Centralises URL + timeout handling so pages can simply call
  `get_token_prices()` / `get_staking_yields()`.
* Normalises the varying payload shapes (bare list, or a list wrapped
  under a key) into lists of pydantic models.
* Rows that do not validate are skipped; a payload of an unknown shape
  raises ``ValueError`` so pages fail early.
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Standard library & 3rd-party imports
# -----------------------------------------------------------------------------
from typing import TypeVar

import requests
from pydantic import BaseModel, ValidationError

from vault_deck.config import settings
from vault_deck.logger import get_logger

from .model import TokenPrice, YieldOption

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

# -----------------------------------------------------------------------------
# Internal convenience helpers
# -----------------------------------------------------------------------------

def _get(url: str):  # noqa: D401 – short desc fine
    """Perform a **GET** request to *url*.

    Raises ``requests.exceptions.HTTPError`` on non-2xx responses so the
    caller can handle it explicitly.
    """
    r = requests.get(url, timeout=settings()["REQUEST_TIMEOUT"])
    r.raise_for_status()
    return r.json()


def _extract_rows(raw, keys: tuple[str, ...]) -> list:
    """Return the list of records from *raw*.

    Accepts a bare list or a dict holding the list under one of *keys*.
    """
    if isinstance(raw, list):
        return raw

    if isinstance(raw, dict):
        for key in keys:
            if key in raw and isinstance(raw[key], list):
                return raw[key]

    raise ValueError(f"Unrecognised feed payload shape: {type(raw).__name__}")


def _parse_rows(rows: list, model: type[M]) -> list[M]:
    parsed: list[M] = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as exc:
            logger.debug("Skipping malformed %s row %r: %s", model.__name__, row, exc)
    return parsed

# -----------------------------------------------------------------------------
# Public API helpers (called by Streamlit pages)
# -----------------------------------------------------------------------------

def get_token_prices() -> list[TokenPrice]:
    """Spot USD prices as ``TokenPrice`` rows (``{mint, token, usdPrice}``)."""
    raw = _get(settings()["PRICE_API_URL"])
    return _parse_rows(_extract_rows(raw, ("data", "prices", "tokens")), TokenPrice)


def get_staking_yields() -> list[YieldOption]:
    """Staking yields as ``YieldOption`` rows (``{tokenMint, apy}``)."""
    raw = _get(settings()["YIELD_API_URL"])
    return _parse_rows(_extract_rows(raw, ("data", "yields")), YieldOption)
