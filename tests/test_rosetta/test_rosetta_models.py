"""Tests for Rosetta data models."""

from __future__ import annotations

import dataclasses

import pytest

from rosetta_wallet.rosetta.models import (
    Amount,
    Coin,
    CoinAction,
    Currency,
    CurveType,
    MetadataResponse,
    Operation,
    OperationType,
    PayloadsResponse,
    Signature,
    SignatureType,
    SigningPayload,
    TransferResult,
    operations_from_list,
    operations_to_list,
)

_INPUT_JSON = {
    "operation_identifier": {"index": 0},
    "type": "INPUT",
    "account": {"address": "tb1qsender"},
    "amount": {"value": "-150000000", "currency": {"symbol": "tBTC", "decimals": 8}},
    "coin_change": {
        "coin_identifier": {"identifier": "abcd:1"},
        "coin_action": "coin_spent",
    },
}

_OUTPUT_JSON = {
    "operation_identifier": {"index": 1},
    "type": "OUTPUT",
    "account": {"address": "tb1qrecipient"},
    "amount": {"value": "10000000", "currency": {"symbol": "tBTC", "decimals": 8}},
}


class TestEnums:
    def test_values(self) -> None:
        assert OperationType.INPUT == "INPUT"
        assert OperationType.OUTPUT == "OUTPUT"
        assert CoinAction.COIN_SPENT == "coin_spent"
        assert CurveType.SECP256K1 == "secp256k1"
        assert SignatureType.ECDSA == "ecdsa"


class TestAmount:
    def test_int_value(self) -> None:
        assert Amount("-42", Currency("tBTC")).int_value == -42

    def test_from_dict_keeps_string(self) -> None:
        amount = Amount.from_dict({"value": "0010", "currency": {"symbol": "tBTC", "decimals": 8}})
        assert amount.value == "0010"
        assert amount.currency == Currency("tBTC", 8)

    def test_missing_value_is_not_zero(self) -> None:
        amount = Amount.from_dict({"currency": {"symbol": "tBTC", "decimals": 8}})
        assert amount.value == ""
        assert amount != Amount("0", Currency("tBTC", 8))

    def test_frozen(self) -> None:
        amount = Amount("1", Currency("tBTC"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            amount.value = "2"  # type: ignore[misc]


class TestCoin:
    def test_from_dict(self) -> None:
        coin = Coin.from_dict(
            {
                "coin_identifier": {"identifier": "abcd:0"},
                "amount": {"value": "150000000", "currency": {"symbol": "tBTC", "decimals": 8}},
            }
        )
        assert coin.identifier == "abcd:0"
        assert coin.value == 150_000_000
        assert coin.amount.currency.symbol == "tBTC"

    def test_to_dict(self) -> None:
        coin = Coin("abcd:0", Amount("5", Currency("tBTC", 8)))
        assert coin.to_dict() == {
            "coin_identifier": {"identifier": "abcd:0"},
            "amount": {"value": "5", "currency": {"symbol": "tBTC", "decimals": 8}},
        }


class TestOperation:
    def test_input_from_dict(self) -> None:
        op = Operation.from_dict(_INPUT_JSON)
        assert op.index == 0
        assert op.type == "INPUT"
        assert op.address == "tb1qsender"
        assert op.amount.value == "-150000000"
        assert op.coin_change.coin_identifier == "abcd:1"
        assert op.coin_change.coin_action == CoinAction.COIN_SPENT

    def test_output_from_dict(self) -> None:
        op = Operation.from_dict(_OUTPUT_JSON)
        assert op.coin_change is None
        assert op.amount.int_value == 10_000_000

    def test_missing_optional_fields(self) -> None:
        op = Operation.from_dict({"operation_identifier": {"index": 3}, "type": "OUTPUT"})
        assert op.address is None
        assert op.amount is None
        assert op.coin_change is None
        assert op.to_dict() == {"operation_identifier": {"index": 3}, "type": "OUTPUT"}

    def test_to_dict_matches_wire(self) -> None:
        assert Operation.from_dict(_INPUT_JSON).to_dict() == _INPUT_JSON
        assert Operation.from_dict(_OUTPUT_JSON).to_dict() == _OUTPUT_JSON

    def test_with_index(self) -> None:
        op = Operation.from_dict(_OUTPUT_JSON)
        moved = op.with_index(7)
        assert moved.index == 7
        assert op.index == 1

    def test_list_helpers(self) -> None:
        ops = operations_from_list([_INPUT_JSON, _OUTPUT_JSON])
        assert isinstance(ops, tuple)
        assert operations_to_list(ops) == [_INPUT_JSON, _OUTPUT_JSON]


class TestConstructionResponses:
    def test_metadata_response(self) -> None:
        resp = MetadataResponse.from_dict(
            {
                "metadata": {"script_pub_keys": []},
                "suggested_fee": [{"value": "2000", "currency": {"symbol": "tBTC", "decimals": 8}}],
            }
        )
        assert resp.metadata == {"script_pub_keys": []}
        assert resp.suggested_fee[0].int_value == 2000

    def test_metadata_response_without_fee(self) -> None:
        resp = MetadataResponse.from_dict({"metadata": {}})
        assert resp.suggested_fee == ()

    def test_metadata_response_null_fee(self) -> None:
        resp = MetadataResponse.from_dict({"metadata": None, "suggested_fee": None})
        assert resp.metadata == {}
        assert resp.suggested_fee == ()

    def test_payloads_response(self) -> None:
        resp = PayloadsResponse.from_dict(
            {
                "unsigned_transaction": "0100abcd",
                "payloads": [
                    {
                        "hex_bytes": "ab" * 32,
                        "account_identifier": {"address": "tb1qsender"},
                        "signature_type": "ecdsa",
                    }
                ],
            }
        )
        assert resp.unsigned_transaction == "0100abcd"
        assert resp.payloads[0].hex_bytes == "ab" * 32
        assert resp.payloads[0].address == "tb1qsender"

    def test_signing_payload_legacy_address(self) -> None:
        payload = SigningPayload.from_dict({"hex_bytes": "00", "address": "tb1qold"})
        assert payload.address == "tb1qold"


class TestSignature:
    def test_to_dict(self) -> None:
        payload = SigningPayload(hex_bytes="ab" * 32, address="tb1qsender", signature_type="ecdsa")
        sig = Signature(hex_bytes="cd" * 64, signing_payload=payload, public_key="02" + "ef" * 32)
        assert sig.to_dict() == {
            "hex_bytes": "cd" * 64,
            "signing_payload": {
                "hex_bytes": "ab" * 32,
                "account_identifier": {"address": "tb1qsender"},
                "signature_type": "ecdsa",
            },
            "public_key": {"hex_bytes": "02" + "ef" * 32, "curve_type": "secp256k1"},
            "signature_type": "ecdsa",
        }


class TestTransferResult:
    def test_to_dict(self) -> None:
        assert TransferResult("ff", 10).to_dict() == {"hash": "ff", "amount": 10}
