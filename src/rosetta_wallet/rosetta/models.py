"""Rosetta data models — operations, coins, payloads, signatures.

Data classes representing the Rosetta Data/Construction API objects used by
the wallet. All models are immutable; operation lists are tuples so a built
intent can never be edited in place.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class OperationType(enum.StrEnum):
    """UTXO operation types used by Bitcoin-style Rosetta implementations."""

    INPUT = "INPUT"
    OUTPUT = "OUTPUT"


class CoinAction(enum.StrEnum):
    """Coin change actions."""

    COIN_CREATED = "coin_created"
    COIN_SPENT = "coin_spent"


class CurveType(enum.StrEnum):
    SECP256K1 = "secp256k1"


class SignatureType(enum.StrEnum):
    ECDSA = "ecdsa"


# ---------------------------------------------------------------------------
# Amounts and coins
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Currency:
    """Currency symbol and number of minor-unit decimals."""

    symbol: str
    decimals: int = 8

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Currency:
        return cls(symbol=data.get("symbol", ""), decimals=data.get("decimals", 0))

    def to_dict(self) -> dict[str, Any]:
        return {"symbol": self.symbol, "decimals": self.decimals}


@dataclass(frozen=True)
class Amount:
    """A signed amount in minor units.

    ``value`` stays a decimal-integer string exactly as it travels on the
    wire. Use :attr:`int_value` for arithmetic.
    """

    value: str
    currency: Currency

    @property
    def int_value(self) -> int:
        """The value as an integer number of minor units."""
        return int(self.value)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Amount:
        """Create an Amount; a missing ``value`` stays ``""``, never zero."""
        value = data.get("value")
        return cls(
            value="" if value is None else str(value),
            currency=Currency.from_dict(data.get("currency", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "currency": self.currency.to_dict()}


@dataclass(frozen=True)
class Coin:
    """An unspent coin owned by an account.

    Attributes:
        identifier: Coin identifier (``txid:vout`` for Bitcoin).
        amount: Coin value.
    """

    identifier: str
    amount: Amount

    @property
    def value(self) -> int:
        return self.amount.int_value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Coin:
        """Create a Coin from a Rosetta ``Coin`` object."""
        return cls(
            identifier=data.get("coin_identifier", {}).get("identifier", ""),
            amount=Amount.from_dict(data.get("amount", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "coin_identifier": {"identifier": self.identifier},
            "amount": self.amount.to_dict(),
        }


@dataclass(frozen=True)
class CoinChange:
    """Coin created or spent by an operation."""

    coin_identifier: str
    coin_action: CoinAction

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CoinChange:
        return cls(
            coin_identifier=data.get("coin_identifier", {}).get("identifier", ""),
            coin_action=CoinAction(data.get("coin_action", CoinAction.COIN_SPENT)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "coin_identifier": {"identifier": self.coin_identifier},
            "coin_action": self.coin_action.value,
        }


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Operation:
    """A single debit (INPUT) or credit (OUTPUT) of a transaction.

    ``type`` is kept as the raw string so operations parsed from an
    untrusted endpoint are compared exactly as received.

    Attributes:
        index: ``operation_identifier.index``; contiguous from 0 in a list.
        type: ``"INPUT"`` or ``"OUTPUT"``.
        address: ``account.address`` (``None`` when absent).
        amount: Signed amount (``None`` when absent).
        coin_change: Coin spent by an INPUT; ``None`` for outputs.
    """

    index: int
    type: str
    address: str | None = None
    amount: Amount | None = None
    coin_change: CoinChange | None = None

    def with_index(self, index: int) -> Operation:
        """Return a copy of this operation at a different position."""
        return replace(self, index=index)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Operation:
        """Create an Operation from a Rosetta ``Operation`` object."""
        account = data.get("account")
        amount = data.get("amount")
        coin_change = data.get("coin_change")
        return cls(
            index=data.get("operation_identifier", {}).get("index", 0),
            type=data.get("type", ""),
            address=account.get("address") if account else None,
            amount=Amount.from_dict(amount) if amount else None,
            coin_change=CoinChange.from_dict(coin_change) if coin_change else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to Rosetta JSON, omitting absent optional fields."""
        data: dict[str, Any] = {
            "operation_identifier": {"index": self.index},
            "type": self.type,
        }
        if self.address is not None:
            data["account"] = {"address": self.address}
        if self.amount is not None:
            data["amount"] = self.amount.to_dict()
        if self.coin_change is not None:
            data["coin_change"] = self.coin_change.to_dict()
        return data


def operations_from_list(items: list[dict[str, Any]]) -> tuple[Operation, ...]:
    """Parse a JSON list of operations."""
    return tuple(Operation.from_dict(item) for item in items)


def operations_to_list(operations: tuple[Operation, ...] | list[Operation]) -> list[dict[str, Any]]:
    """Serialize operations to a JSON list."""
    return [op.to_dict() for op in operations]


# ---------------------------------------------------------------------------
# Construction responses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MetadataResponse:
    """``/construction/metadata`` result.

    Attributes:
        metadata: Opaque metadata passed to ``/construction/payloads``.
        suggested_fee: Suggested fee amounts (may be empty).
    """

    metadata: dict[str, Any] = field(default_factory=dict)
    suggested_fee: tuple[Amount, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MetadataResponse:
        return cls(
            metadata=data.get("metadata") or {},
            suggested_fee=tuple(Amount.from_dict(a) for a in data.get("suggested_fee") or []),
        )


@dataclass(frozen=True)
class SigningPayload:
    """A byte string that must be signed to authorize an input."""

    hex_bytes: str
    address: str = ""
    signature_type: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SigningPayload:
        account = data.get("account_identifier") or {}
        return cls(
            hex_bytes=data.get("hex_bytes", ""),
            address=data.get("address", account.get("address", "")),
            signature_type=data.get("signature_type", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"hex_bytes": self.hex_bytes}
        if self.address:
            data["account_identifier"] = {"address": self.address}
        if self.signature_type:
            data["signature_type"] = self.signature_type
        return data


@dataclass(frozen=True)
class PayloadsResponse:
    """``/construction/payloads`` result."""

    unsigned_transaction: str
    payloads: tuple[SigningPayload, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PayloadsResponse:
        return cls(
            unsigned_transaction=data.get("unsigned_transaction", ""),
            payloads=tuple(SigningPayload.from_dict(p) for p in data.get("payloads") or []),
        )


@dataclass(frozen=True)
class Signature:
    """A signature over one signing payload, bound to the signer's public key."""

    hex_bytes: str
    signing_payload: SigningPayload
    public_key: str
    curve_type: CurveType = CurveType.SECP256K1
    signature_type: SignatureType = SignatureType.ECDSA

    def to_dict(self) -> dict[str, Any]:
        return {
            "hex_bytes": self.hex_bytes,
            "signing_payload": self.signing_payload.to_dict(),
            "public_key": {
                "hex_bytes": self.public_key,
                "curve_type": self.curve_type.value,
            },
            "signature_type": self.signature_type.value,
        }


# ---------------------------------------------------------------------------
# Pipeline request / result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TransferRequest:
    """A single-asset transfer from ``sender`` to ``recipient``.

    Attributes:
        sender: Address whose coins are spent and which receives change.
        recipient: Destination address.
        amount: Amount to send in minor units.
        currency: Currency of every output.
    """

    sender: str
    recipient: str
    amount: int
    currency: Currency


@dataclass(frozen=True)
class TransferResult:
    """A successfully submitted transfer."""

    transaction_hash: str
    amount: int

    def to_dict(self) -> dict[str, Any]:
        return {"hash": self.transaction_hash, "amount": self.amount}
