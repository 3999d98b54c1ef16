"""Shared test fixtures for rosetta-wallet test suite."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

import pytest

from rosetta_wallet.errors.construction_errors import ProtocolError
from rosetta_wallet.rosetta.models import (
    Amount,
    Coin,
    Currency,
    MetadataResponse,
    Operation,
    PayloadsResponse,
    Signature,
    SigningPayload,
    TransferRequest,
)
from rosetta_wallet.signing.signer import KeyPairSigner

SENDER = "tb1qsender0000000000000000000000000000000"
RECIPIENT = "tb1qm5tfegjevj27yvvna9elym9lnzcf0zraxgl8z2"
TBTC = Currency(symbol="tBTC", decimals=8)
TX_HASH = "f" * 64

# Deterministic test key; WIF 5HueCGU8rMjxEXxiPuD5BDku4MkFqeZyd4dp1WL7u3AMVfMihTH
PRIVATE_KEY_HEX = "0c28fca386c7a227600b2fe50b7cae11ec86d3bf1fbe471be89827e19d72aa1d"


def make_coin(value: int, index: int = 0, currency: Currency = TBTC) -> Coin:
    return Coin(
        identifier=f"{'a' * 64}:{index}",
        amount=Amount(value=str(value), currency=currency),
    )


class FakeRosetta:
    """In-memory Rosetta construction endpoint.

    Echoes the operations it was given from ``parse`` so the happy path
    verifies; tests tamper with it through the ``*_hook`` attributes.
    """

    def __init__(
        self,
        *,
        coins: list[Coin] | None = None,
        suggested_fee: list[Amount] | None = None,
        payload_count: int = 1,
    ) -> None:
        self.coins = coins if coins is not None else [make_coin(150_000_000)]
        self.suggested_fee = (
            suggested_fee if suggested_fee is not None else [Amount("2000", TBTC)]
        )
        self.payload_count = payload_count
        self.hash_id = TX_HASH
        self.submit_id = TX_HASH
        self.address = SENDER
        self.balances = [Amount("150000000", TBTC)]

        self.calls: list[str] = []
        self.preprocessed: tuple[Operation, ...] = ()
        self.payload_operations: tuple[Operation, ...] = ()
        self.signatures: list[Signature] = []
        self.submitted: list[str] = []

        self.unsigned_parse_hook: Any = None
        self.signed_parse_hook: Any = None
        self.fail_on: str | None = None

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise ProtocolError(f"Rosetta {name} failed (500): boom", call=name, status_code=500)

    async def derive(self, public_key: bytes) -> str:
        self._call("derive")
        return self.address

    async def account_balance(self, address: str) -> list[Amount]:
        self._call("account_balance")
        return list(self.balances)

    async def account_coins(self, address: str) -> list[Coin]:
        self._call("account_coins")
        return list(self.coins)

    async def preprocess(self, operations: tuple[Operation, ...]) -> dict[str, Any]:
        self._call("preprocess")
        self.preprocessed = operations
        return {"estimated_size": 225}

    async def metadata(self, options: dict[str, Any]) -> MetadataResponse:
        self._call("metadata")
        return MetadataResponse(
            metadata={"options": options},
            suggested_fee=tuple(self.suggested_fee),
        )

    async def payloads(
        self, operations: tuple[Operation, ...], metadata: dict[str, Any]
    ) -> PayloadsResponse:
        self._call("payloads")
        self.payload_operations = operations
        return PayloadsResponse(
            unsigned_transaction="unsigned-tx",
            payloads=tuple(
                SigningPayload(hex_bytes=f"{i:02x}" * 32, address=SENDER)
                for i in range(1, self.payload_count + 1)
            ),
        )

    async def parse(self, transaction: str, *, signed: bool) -> tuple[Operation, ...]:
        self._call("parse_signed" if signed else "parse_unsigned")
        operations = self.payload_operations
        hook = self.signed_parse_hook if signed else self.unsigned_parse_hook
        if hook is not None:
            operations = hook(operations)
        return operations

    async def combine(self, unsigned_transaction: str, signatures: list[Signature]) -> str:
        self._call("combine")
        self.signatures = signatures
        return "signed-tx"

    async def hash(self, signed_transaction: str) -> str:
        self._call("hash")
        return self.hash_id

    async def submit(self, signed_transaction: str) -> str:
        self._call("submit")
        self.submitted.append(signed_transaction)
        return self.submit_id


def bump_change(operations: tuple[Operation, ...]) -> tuple[Operation, ...]:
    """Return ``operations`` with the last (change) output raised by one unit."""
    *head, change = operations
    assert change.amount is not None
    bumped = replace(
        change,
        amount=replace(change.amount, value=str(change.amount.int_value + 1)),
    )
    return (*head, bumped)


@pytest.fixture
def fake_rosetta() -> FakeRosetta:
    return FakeRosetta()


@pytest.fixture
def signer() -> KeyPairSigner:
    return KeyPairSigner(bytes.fromhex(PRIVATE_KEY_HEX))


@pytest.fixture
def transfer_request() -> TransferRequest:
    return TransferRequest(
        sender=SENDER,
        recipient=RECIPIENT,
        amount=10_000_000,
        currency=TBTC,
    )


@pytest.fixture
def app_config():
    """Provide a test AppConfig with safe defaults."""
    from rosetta_wallet.config.settings import AppConfig, RosettaConfig

    return AppConfig(
        debug=True,
        explorer_url="https://blockstream.info/testnet/tx",
        rosetta=RosettaConfig(url="https://rosetta.test", api_key="test-key"),
    )
