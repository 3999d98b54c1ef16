"""Rosetta — data models and the HTTP construction client."""

from rosetta_wallet.rosetta.client import RosettaClient
from rosetta_wallet.rosetta.models import (
    Amount,
    Coin,
    CoinAction,
    CoinChange,
    Currency,
    MetadataResponse,
    Operation,
    OperationType,
    PayloadsResponse,
    Signature,
    SigningPayload,
    TransferRequest,
    TransferResult,
)
from rosetta_wallet.rosetta.protocol import ConstructionClient

__all__ = [
    "Amount",
    "Coin",
    "CoinAction",
    "CoinChange",
    "ConstructionClient",
    "Currency",
    "MetadataResponse",
    "Operation",
    "OperationType",
    "PayloadsResponse",
    "RosettaClient",
    "Signature",
    "SigningPayload",
    "TransferRequest",
    "TransferResult",
]
