"""Tests for the vault store adapter (REST transport mocked)."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from vault_deck.services.model import VaultDraft, VaultPreview
from vault_deck.services.store import MissingIdentityError, VaultStore, VaultStoreError

OWNER = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"


def row(vault_id="42", owner=OWNER, created="2025-03-01T12:00:00+00:00"):
    return {
        "id": vault_id,
        "owner_pubkey": owner,
        "created_at": created,
        "data": {
            "sourceToken": "USDC",
            "sourceAmount": 100,
            "target": "SOL",
            "duration": {"value": 7, "unit": "Days"},
            "executions": 4,
            "submissionDatetime": "2025-03-01T11:59:00Z",
            "metadata": {
                "sourceToken": "USDC",
                "sourceAmount": 100,
                "sourceSymbol": "USDC",
                "targetName": "SOL Yield",
                "targetAmount": 0.5,
                "targetSymbol": "SOL",
                "percentage": 0,
                "timeLeft": "7 Days",
            },
        },
    }


def respond(session: MagicMock, payload) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    session.request.return_value = response
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def store(session):
    return VaultStore("https://db.example/", "anon-key", session=session, timeout=3)


@pytest.fixture
def draft():
    return VaultDraft(
        source_token="USDC",
        source_amount=100,
        target="SOL",
        duration_value=7,
        duration_unit="Days",
        executions=4,
        submission_datetime=datetime(2025, 3, 1, 11, 59, tzinfo=timezone.utc),
    )


@pytest.fixture
def preview():
    return VaultPreview(
        source_token="USDC",
        source_amount=100,
        source_symbol="USDC",
        target_name="SOL Yield",
        target_amount=0.5,
        target_symbol="SOL",
        percentage=0,
        time_left="7 Days",
    )


class TestListVaults:
    def test_queries_owner_newest_first(self, store, session):
        respond(session, [row("2"), row("1")])

        vaults = store.list_vaults(OWNER)

        assert [v.id for v in vaults] == ["2", "1"]
        method, url = session.request.call_args.args
        kwargs = session.request.call_args.kwargs
        assert method == "GET"
        assert url == "https://db.example/rest/v1/vaults"
        assert kwargs["params"] == {
            "select": "*",
            "owner_pubkey": f"eq.{OWNER}",
            "order": "created_at.desc",
        }
        assert kwargs["headers"]["apikey"] == "anon-key"
        assert kwargs["headers"]["Authorization"] == "Bearer anon-key"
        assert kwargs["timeout"] == 3

    def test_parses_embedded_metadata(self, store, session):
        respond(session, [row()])

        vault = store.list_vaults(OWNER)[0]

        assert vault.data.metadata.target_amount == 0.5
        assert vault.data.duration.unit == "Days"
        assert vault.pair_label == "USDC -> SOL"

    @pytest.mark.parametrize("owner", [None, ""])
    def test_without_identity_makes_no_request(self, store, session, owner):
        assert store.list_vaults(owner) == []
        session.request.assert_not_called()

    def test_cached_until_invalidated(self, store, session):
        respond(session, [row()])

        store.list_vaults(OWNER)
        store.list_vaults(OWNER)
        assert session.request.call_count == 1

        store.invalidate(OWNER)
        store.list_vaults(OWNER)
        assert session.request.call_count == 2

    def test_cache_expires_after_ttl(self, store, session, monkeypatch):
        import vault_deck.services.store as store_module

        clock = MagicMock(return_value=1000.0)
        monkeypatch.setattr(store_module.time, "monotonic", clock)
        store.cache_ttl = 30
        respond(session, [row()])

        store.list_vaults(OWNER)
        clock.return_value = 1029.0
        store.list_vaults(OWNER)
        assert session.request.call_count == 1

        clock.return_value = 1031.0
        store.list_vaults(OWNER)
        assert session.request.call_count == 2

    def test_expired_owners_are_dropped(self, store, session, monkeypatch):
        import vault_deck.services.store as store_module

        clock = MagicMock(return_value=0.0)
        monkeypatch.setattr(store_module.time, "monotonic", clock)
        store.cache_ttl = 10
        respond(session, [row()])

        store.list_vaults("owner-a")
        store.list_vaults("owner-b")
        clock.return_value = 20.0
        store.list_vaults(OWNER)

        assert set(store._cache) == {OWNER}

    def test_recovers_after_transient_failure(self, store, session):
        session.request.side_effect = requests.ConnectionError("blip")
        assert [v.id for v in store.list_vaults(OWNER)] == ["1"]

        session.request.side_effect = None
        respond(session, [row("42")])

        assert [v.id for v in store.list_vaults(OWNER)] == ["42"]
        assert session.request.call_count == 2

    def test_failure_returns_mock_record(self, store, session):
        session.request.side_effect = requests.ConnectionError("no backend")

        vaults = store.list_vaults(OWNER)

        assert len(vaults) == 1
        assert vaults[0].id == "1"
        assert vaults[0].owner_pubkey == "mock-address"

    def test_http_error_returns_mock_record(self, store, session):
        response = respond(session, [])
        response.raise_for_status.side_effect = requests.HTTPError("401")

        assert [v.id for v in store.list_vaults(OWNER)] == ["1"]

    def test_malformed_rows_return_mock_record(self, store, session):
        respond(session, [{"id": "x"}])
        assert [v.id for v in store.list_vaults(OWNER)] == ["1"]

    def test_failure_raises_when_fallback_disabled(self, session):
        store = VaultStore("https://db.example", "k", session=session, mock_fallback=False)
        session.request.side_effect = requests.Timeout("slow")

        with pytest.raises(VaultStoreError, match="list"):
            store.list_vaults(OWNER)


class TestGetVault:
    def test_returns_first_row(self, store, session):
        respond(session, [row("42")])

        vault = store.get_vault("42")

        assert vault.id == "42"
        assert session.request.call_args.kwargs["params"] == {"select": "*", "id": "eq.42"}

    def test_missing_row_is_none(self, store, session):
        respond(session, [])
        assert store.get_vault("404") is None

    def test_numeric_ids_become_text(self, store, session):
        respond(session, [row(vault_id=7)])
        assert store.get_vault("7").id == "7"

    def test_empty_id_makes_no_request(self, store, session):
        assert store.get_vault("") is None
        session.request.assert_not_called()

    def test_failure_returns_matching_mock(self, store, session):
        session.request.side_effect = requests.ConnectionError()

        assert store.get_vault("1").id == "1"
        assert store.get_vault("2") is None


class TestCreateVault:
    def test_posts_owner_and_payload(self, store, session, draft, preview):
        respond(session, [row("99")])

        record = store.create_vault(OWNER, draft, preview)

        assert record.id == "99"
        method, _ = session.request.call_args.args
        kwargs = session.request.call_args.kwargs
        assert method == "POST"
        assert kwargs["headers"]["Prefer"] == "return=representation"
        body = kwargs["json"]
        assert body["owner_pubkey"] == OWNER
        assert body["data"]["duration"] == {"value": 7, "unit": "Days"}
        assert body["data"]["submissionDatetime"].startswith("2025-03-01T11:59:00")
        assert body["data"]["metadata"]["targetAmount"] == 0.5
        assert body["data"]["metadata"]["timeLeft"] == "7 Days"

    def test_create_invalidates_owner_list(self, store, session, draft, preview):
        respond(session, [row("1")])
        store.list_vaults(OWNER)

        respond(session, [row("2")])
        store.create_vault(OWNER, draft, preview)

        respond(session, [row("2"), row("1")])
        assert [v.id for v in store.list_vaults(OWNER)] == ["2", "1"]
        assert session.request.call_count == 3

    def test_failure_is_masked_with_local_record(self, store, session, draft, preview):
        session.request.side_effect = requests.ConnectionError("no backend")

        record = store.create_vault(OWNER, draft, preview)

        # nothing was persisted, yet the caller gets a normal-looking record
        assert record.id
        assert record.id.isdigit()
        assert record.owner_pubkey == OWNER
        assert record.data.source_token == "USDC"
        assert record.data.metadata == preview

    def test_empty_insert_response_is_masked(self, store, session, draft, preview):
        respond(session, [])
        assert store.create_vault(OWNER, draft, preview).owner_pubkey == OWNER

    @pytest.mark.parametrize("owner", [None, ""])
    def test_requires_identity(self, store, session, draft, preview, owner):
        with pytest.raises(MissingIdentityError):
            store.create_vault(owner, draft, preview)
        session.request.assert_not_called()

    def test_failure_raises_when_fallback_disabled(self, session, draft, preview):
        store = VaultStore("https://db.example", "k", session=session, mock_fallback=False)
        session.request.side_effect = requests.ConnectionError()

        with pytest.raises(VaultStoreError, match="create"):
            store.create_vault(OWNER, draft, preview)


def test_from_settings_uses_config(monkeypatch, session):
    import vault_deck.services.store as store_module

    monkeypatch.setattr(
        store_module,
        "settings",
        lambda: {
            "VAULT_API_URL": "https://cfg.example",
            "VAULT_API_KEY": "cfg-key",
            "VAULT_TABLE": "dca_vaults",
            "REQUEST_TIMEOUT": 5.0,
            "MOCK_FALLBACK": False,
            "REFRESH_SECONDS": 30,
        },
    )

    store = VaultStore.from_settings(session=session)

    assert store.url == "https://cfg.example/rest/v1/dca_vaults"
    assert store.timeout == 5.0
    assert store.mock_fallback is False
    assert store.cache_ttl == 30
