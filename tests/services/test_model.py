import pytest

from vault_deck.services.model import TokenPrice, VaultData, VaultRecord


@pytest.mark.parametrize(
    "raw, expected",
    [("200.00", 200.0), (1.5, 1.5), ("0", None), ("-1", None), ("abc", None), ("nan", None), (None, None)],
)
def test_token_price_usd_value(raw, expected):
    assert TokenPrice(mint="m", token="T", usdPrice=raw).usd_value == expected


def test_token_price_accepts_attribute_names():
    price = TokenPrice(mint="m", symbol="SOL", usd_price="3")
    assert price.to_wire() == {"mint": "m", "token": "SOL", "usdPrice": "3"}


def test_legacy_row_without_submission_time_or_full_metadata():
    record = VaultRecord.model_validate(
        {
            "id": 1,
            "owner_pubkey": "owner",
            "created_at": "2025-01-01T00:00:00Z",
            "data": {
                "sourceToken": "USDC",
                "sourceAmount": 100,
                "target": "SOL",
                "duration": {"value": 7, "unit": "Days"},
                "executions": 4,
                "metadata": {"sourceSymbol": "USDC", "targetSymbol": "SOL", "percentage": 25},
                "someOldKey": True,
            },
        }
    )

    assert record.id == "1"
    assert record.data.submission_datetime is None
    assert record.data.metadata.time_left == ""
    assert record.data.metadata.percentage == 25
    assert "someOldKey" not in record.data.to_wire()


def test_vault_data_wire_shape_uses_camel_case():
    data = VaultData(
        source_token="USDC",
        source_amount=10,
        target="SOL",
        duration={"value": 2, "unit": "Hours"},
        executions=1,
    )
    wire = data.to_wire()

    assert set(wire) == {
        "sourceToken",
        "sourceAmount",
        "target",
        "duration",
        "executions",
        "submissionDatetime",
        "metadata",
    }
    assert set(wire["metadata"]) == {
        "sourceToken",
        "sourceAmount",
        "sourceSymbol",
        "targetName",
        "targetAmount",
        "targetSymbol",
        "percentage",
        "timeLeft",
    }


def test_pair_label_placeholders():
    record = VaultRecord(
        id="1",
        owner_pubkey="o",
        created_at="2025-01-01T00:00:00Z",
        data=VaultData(
            source_token="a", source_amount=1, target="b", duration={"value": 1, "unit": "Days"}, executions=1
        ),
    )
    assert record.pair_label == "? -> ?"
