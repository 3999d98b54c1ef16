"""Rosetta HTTP client — account and construction endpoints.

Provides an async HTTP client for the Rosetta API. Every call is a JSON
``POST`` scoped by the configured ``network_identifier``:

- /account/coins, /account/balance
- /construction/derive
- /construction/preprocess, /construction/metadata, /construction/payloads
- /construction/parse, /construction/combine
- /construction/hash, /construction/submit
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

from rosetta_wallet.errors.construction_errors import ProtocolError
from rosetta_wallet.rosetta.models import (
    Amount,
    Coin,
    CurveType,
    MetadataResponse,
    PayloadsResponse,
    operations_from_list,
    operations_to_list,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from rosetta_wallet.config.settings import RosettaConfig
    from rosetta_wallet.rosetta.models import Operation, Signature

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class RosettaClient:
    """Async HTTP client for a Rosetta API implementation.

    Usage::

        rosetta = RosettaClient(config)
        await rosetta.connect()
        try:
            coins = await rosetta.account_coins("tb1q...")
        finally:
            await rosetta.close()
    """

    def __init__(self, config: RosettaConfig) -> None:
        """Initialize the Rosetta client.

        Args:
            config: Rosetta configuration (url, api key, network identifier).
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        headers: dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._config.api_key:
            headers["X-Api-Key"] = self._config.api_key

        self._client = httpx.AsyncClient(
            base_url=self._config.url.rstrip("/"),
            headers=headers,
            timeout=self._config.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    @property
    def network_identifier(self) -> dict[str, str]:
        return self._config.network_identifier

    # ------------------------------------------------------------------
    # Account API
    # ------------------------------------------------------------------

    async def account_coins(self, address: str) -> list[Coin]:
        """List the unspent coins of an account.

        Args:
            address: Account address.

        Returns:
            Coins in the order returned by the endpoint.

        Raises:
            ProtocolError: On HTTP or API errors.
        """
        data = await self._post(
            "/account/coins",
            {
                "account_identifier": {"address": address},
                "include_mempool": self._config.include_mempool,
            },
        )
        return self._decode(
            "account/coins",
            lambda: [Coin.from_dict(c) for c in data.get("coins") or []],
        )

    async def account_balance(self, address: str) -> list[Amount]:
        """Get the balances of an account.

        Returns:
            One amount per currency held by the account.
        """
        data = await self._post(
            "/account/balance",
            {"account_identifier": {"address": address}},
        )
        return self._decode("account/balance", lambda: _balances(data))

    # ------------------------------------------------------------------
    # Construction API
    # ------------------------------------------------------------------

    async def derive(self, public_key: bytes) -> str:
        """Derive the account address of a secp256k1 public key."""
        data = await self._post(
            "/construction/derive",
            {
                "public_key": {
                    "hex_bytes": public_key.hex(),
                    "curve_type": CurveType.SECP256K1.value,
                },
                "metadata": {},
            },
        )
        address = data.get("address")
        if address is None:
            address = (data.get("account_identifier") or {}).get("address")
        return self._require(address, "construction/derive", "address")

    async def preprocess(self, operations: tuple[Operation, ...]) -> dict[str, Any]:
        """Return the options needed to fetch construction metadata."""
        data = await self._post(
            "/construction/preprocess",
            {"operations": operations_to_list(operations)},
        )
        return data.get("options") or {}

    async def metadata(self, options: dict[str, Any]) -> MetadataResponse:
        """Fetch construction metadata and the suggested fee."""
        data = await self._post("/construction/metadata", {"options": options})
        return self._decode("construction/metadata", lambda: MetadataResponse.from_dict(data))

    async def payloads(
        self,
        operations: tuple[Operation, ...],
        metadata: dict[str, Any],
    ) -> PayloadsResponse:
        """Build the unsigned transaction and its signing payloads."""
        data = await self._post(
            "/construction/payloads",
            {
                "operations": operations_to_list(operations),
                "metadata": metadata,
            },
        )
        payloads = self._decode(
            "construction/payloads", lambda: PayloadsResponse.from_dict(data)
        )
        self._require(
            payloads.unsigned_transaction, "construction/payloads", "unsigned_transaction"
        )
        return payloads

    async def parse(self, transaction: str, *, signed: bool) -> tuple[Operation, ...]:
        """Parse an unsigned or signed transaction back into operations."""
        data = await self._post(
            "/construction/parse",
            {"signed": signed, "transaction": transaction},
        )
        return self._decode(
            "construction/parse",
            lambda: operations_from_list(data.get("operations") or []),
        )

    async def combine(self, unsigned_transaction: str, signatures: list[Signature]) -> str:
        """Attach signatures to an unsigned transaction.

        Returns:
            The signed transaction.
        """
        data = await self._post(
            "/construction/combine",
            {
                "unsigned_transaction": unsigned_transaction,
                "signatures": [s.to_dict() for s in signatures],
            },
        )
        return self._require(
            data.get("signed_transaction"), "construction/combine", "signed_transaction"
        )

    async def hash(self, signed_transaction: str) -> str:
        """Return the network transaction identifier of a signed transaction."""
        data = await self._post(
            "/construction/hash",
            {"signed_transaction": signed_transaction},
        )
        return self._transaction_hash(data, "construction/hash")

    async def submit(self, signed_transaction: str) -> str:
        """Broadcast a signed transaction.

        Returns:
            The transaction identifier reported by the network.
        """
        data = await self._post(
            "/construction/submit",
            {"signed_transaction": signed_transaction},
        )
        return self._transaction_hash(data, "construction/submit")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_connected(self) -> httpx.AsyncClient:
        """Return the HTTP client, raising if not connected."""
        if self._client is None:
            msg = "Rosetta client not connected. Call connect() first."
            raise ProtocolError(msg)
        return self._client

    async def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST a request scoped by the network identifier and return its JSON body."""
        client = self._ensure_connected()
        call = path.lstrip("/")
        payload = {"network_identifier": self.network_identifier, **body}

        logger.debug("Rosetta request %s", call)
        try:
            response = await client.post(path, json=payload)
        except httpx.HTTPError as exc:
            raise ProtocolError(f"Rosetta {call} failed: {exc}", call=call) from exc

        if response.status_code != 200:
            self._raise_for_status(response, call)

        try:
            data = response.json()
        except ValueError as exc:
            raise ProtocolError(
                f"Rosetta {call} returned invalid JSON",
                call=call,
                status_code=response.status_code,
            ) from exc
        if not isinstance(data, dict):
            raise ProtocolError(
                f"Rosetta {call} returned an unexpected body",
                call=call,
                status_code=response.status_code,
            )
        return data

    @classmethod
    def _transaction_hash(cls, data: dict[str, Any], call: str) -> str:
        identifier = data.get("transaction_identifier")
        value = identifier.get("hash") if isinstance(identifier, dict) else None
        return cls._require(value, call, "transaction_identifier.hash")

    @staticmethod
    def _require(value: Any, call: str, name: str) -> str:
        """Return a non-empty string field, raising ProtocolError otherwise."""
        if not isinstance(value, str) or not value:
            msg = f"Rosetta {call} returned no {name}"
            raise ProtocolError(msg, call=call)
        return value

    @staticmethod
    def _decode(call: str, decode: Callable[[], _T]) -> _T:
        """Run a model decoder over a response body.

        Malformed bodies (wrong types, unknown enum values, null objects)
        are reported as ProtocolError.
        """
        try:
            return decode()
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            msg = f"Rosetta {call} returned a malformed body: {exc}"
            raise ProtocolError(msg, call=call) from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, call: str) -> None:
        """Raise a ProtocolError from a non-200 response.

        Rosetta error bodies carry ``code``, ``message`` and ``retriable``.
        """
        status = response.status_code
        error_code: int | None = None
        retriable = False
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            error_code = body.get("code")
            retriable = bool(body.get("retriable", False))
            detail = body.get("message", response.text)
            details = body.get("details")
            if isinstance(details, dict) and details.get("error"):
                detail = f"{detail}: {details['error']}"
        else:
            detail = response.text

        raise ProtocolError(
            f"Rosetta {call} failed ({status}): {detail}",
            call=call,
            status_code=status,
            error_code=error_code,
            retriable=retriable,
        )


def _balances(data: dict[str, Any]) -> list[Amount]:
    """Decode ``balances``, rejecting values that are not integers."""
    balances = [Amount.from_dict(b) for b in data.get("balances") or []]
    for balance in balances:
        if not balance.value.lstrip("-").isdigit():
            msg = f"balance value is not an integer: {balance.value!r}"
            raise ValueError(msg)
    return balances
