"""store.py

Thin REST wrapper around the hosted vault table (PostgREST / Supabase
``/rest/v1/<table>`` interface).

* Every call takes the wallet identity explicitly – nothing is read from
  page state here.
* Successful list reads are cached per owner for ``cache_ttl`` seconds,
  or until :meth:`VaultStore.invalidate` or a create for the same owner.
  Mock answers are never cached.
* When the remote call fails the store answers with mock data instead of
  raising (``mock_fallback=True``, the default). Callers cannot tell a
  faked answer from a real one, so this is meant for development setups
  without a configured backend. Turn it off with ``MOCK_FALLBACK=false``
  to get :class:`VaultStoreError` instead.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any

import requests

from vault_deck.config import settings
from vault_deck.logger import get_logger

from .model import VaultData, VaultDraft, VaultPreview, VaultRecord
from .preview import build_vault_data

logger = get_logger(__name__)


class VaultStoreError(RuntimeError):
    """Remote vault store call failed and no fallback was allowed."""


class MissingIdentityError(VaultStoreError):
    """A write was attempted without a connected wallet address."""


def _mock_vaults() -> list[VaultRecord]:
    return [
        VaultRecord(
            id="1",
            owner_pubkey="mock-address",
            created_at=datetime.now(timezone.utc),
            data=VaultData(
                source_token="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
                source_amount=100,
                target="mock-target",
                duration={"value": 7, "unit": "Days"},
                executions=4,
                metadata=VaultPreview(
                    source_token="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
                    source_amount=100,
                    source_symbol="USDC",
                    target_symbol="SOL",
                    target_amount=0.5,
                    percentage=25,
                    time_left="5 days",
                    target_name="Solana Yield",
                ),
            ),
        )
    ]


def _rows(payload: Any) -> list[dict]:
    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list):
        return payload
    raise ValueError(f"Unexpected vault payload type: {type(payload)}")


class VaultStore:
    """List / get / create vault rows for a wallet owner."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        table: str = "vaults",
        session: requests.Session | None = None,
        timeout: float = 10.0,
        mock_fallback: bool = True,
        cache_ttl: float = 60.0,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.timeout = timeout
        self.mock_fallback = mock_fallback
        self._session = session or requests.Session()
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
        self.cache_ttl = cache_ttl
        # owner -> (monotonic fetch time, vaults); only real store answers are kept
        self._cache: dict[str, tuple[float, list[VaultRecord]]] = {}

    @classmethod
    def from_settings(cls, session: requests.Session | None = None) -> "VaultStore":
        cfg = settings()
        return cls(
            cfg["VAULT_API_URL"],
            cfg["VAULT_API_KEY"],
            table=cfg["VAULT_TABLE"],
            session=session,
            timeout=cfg["REQUEST_TIMEOUT"],
            mock_fallback=cfg["MOCK_FALLBACK"],
            cache_ttl=cfg["REFRESH_SECONDS"],
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        *,
        params: dict[str, str] | None = None,
        json: dict | None = None,
        headers: dict[str, str] | None = None,
    ) -> list[dict]:
        logger.debug("%s %s params=%s", method, self.url, params)
        r = self._session.request(
            method,
            self.url,
            params=params,
            json=json,
            headers={**self._headers, **(headers or {})},
            timeout=self.timeout,
        )
        r.raise_for_status()
        return _rows(r.json())

    def _fallback(self, op: str, exc: Exception, value):
        if not self.mock_fallback:
            raise VaultStoreError(f"Vault {op} failed: {exc}") from exc
        logger.warning("Vault store unavailable during %s, returning mock data: %s", op, exc)
        return value

    def _prune(self) -> None:
        cutoff = time.monotonic() - self.cache_ttl
        for owner in [o for o, (ts, _) in self._cache.items() if ts <= cutoff]:
            del self._cache[owner]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def invalidate(self, owner_address: str | None = None) -> None:
        """Forget the cached list for one owner, or for everybody."""
        if owner_address is None:
            self._cache.clear()
        else:
            self._cache.pop(owner_address, None)

    def list_vaults(self, owner_address: str | None) -> list[VaultRecord]:
        """Vaults owned by *owner_address*, newest first.

        Without an identity nothing is requested and the list is empty.
        """
        if not owner_address:
            logger.debug("No wallet address, skipping vault list")
            return []

        self._prune()
        if owner_address in self._cache:
            return list(self._cache[owner_address][1])

        try:
            rows = self._request(
                "GET",
                params={
                    "select": "*",
                    "owner_pubkey": f"eq.{owner_address}",
                    "order": "created_at.desc",
                },
            )
            vaults = [VaultRecord.model_validate(row) for row in rows]
        except (requests.RequestException, ValueError) as exc:
            return self._fallback("list", exc, _mock_vaults())

        self._cache[owner_address] = (time.monotonic(), vaults)
        return list(vaults)

    def get_vault(self, vault_id: str | None) -> VaultRecord | None:
        """Single vault by id, or ``None`` when it does not exist."""
        if not vault_id:
            return None

        try:
            rows = self._request("GET", params={"select": "*", "id": f"eq.{vault_id}"})
            return VaultRecord.model_validate(rows[0]) if rows else None
        except (requests.RequestException, ValueError) as exc:
            mock = next((v for v in _mock_vaults() if v.id == str(vault_id)), None)
            return self._fallback("get", exc, mock)

    def create_vault(
        self, owner_address: str | None, draft: VaultDraft, preview: VaultPreview
    ) -> VaultRecord:
        """Persist *draft* with *preview* embedded as metadata.

        Raises
        ------
        MissingIdentityError
            If *owner_address* is empty; no request is made.
        """
        if not owner_address:
            raise MissingIdentityError("Wallet address is not available")

        data = build_vault_data(draft, preview)
        payload = {"owner_pubkey": owner_address, "data": data.to_wire()}

        try:
            rows = self._request(
                "POST", json=payload, headers={"Prefer": "return=representation"}
            )
            if not rows:
                raise ValueError("Vault insert returned no row")
            record = VaultRecord.model_validate(rows[0])
        except (requests.RequestException, ValueError) as exc:
            simulated = VaultRecord(
                id=str(int(time.time() * 1000)),
                owner_pubkey=owner_address,
                created_at=datetime.now(timezone.utc),
                data=data,
            )
            record = self._fallback("create", exc, simulated)

        self.invalidate(owner_address)
        logger.info("Vault %s created for %s", record.id, owner_address)
        return record
