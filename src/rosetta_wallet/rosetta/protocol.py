"""ConstructionClient — the Rosetta calls consumed by the construction pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from rosetta_wallet.rosetta.models import (
        Coin,
        MetadataResponse,
        Operation,
        PayloadsResponse,
        Signature,
    )


class ConstructionClient(Protocol):
    """Protocol for Rosetta construction clients.

    Implementations raise :class:`~rosetta_wallet.errors.construction_errors.ProtocolError`
    when a call fails.
    """

    async def account_coins(self, address: str) -> list[Coin]: ...
    async def preprocess(self, operations: tuple[Operation, ...]) -> dict[str, Any]: ...
    async def metadata(self, options: dict[str, Any]) -> MetadataResponse: ...
    async def payloads(
        self, operations: tuple[Operation, ...], metadata: dict[str, Any]
    ) -> PayloadsResponse: ...
    async def parse(self, transaction: str, *, signed: bool) -> tuple[Operation, ...]: ...
    async def combine(self, unsigned_transaction: str, signatures: list[Signature]) -> str: ...
    async def hash(self, signed_transaction: str) -> str: ...
    async def submit(self, signed_transaction: str) -> str: ...
