"""Construction pipeline — build, verify, sign and submit one transfer.

Drives the Rosetta construction flow for a single transfer attempt::

    VALIDATE → FETCH_COINS → ESTIMATE_OPS → PREPROCESS → METADATA → BUILD_OPS
    → PAYLOADS → VERIFY_UNSIGNED → SIGN → COMBINE → VERIFY_SIGNED → HASH → SUBMIT
    → VERIFY_HASH → DONE

Any failing stage ends the attempt in ``FAILED``. The endpoint is not
trusted: the unsigned and the signed transaction are both parsed back and
compared with the locally built intent before anything is broadcast, and the
identifier returned by submit must equal the one returned by hash.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from rosetta_wallet.construction.equivalence import first_difference
from rosetta_wallet.construction.operations import build_intent
from rosetta_wallet.errors.construction_errors import (
    ConstructionError,
    HashMismatch,
    InsufficientFunds,
    IntentMismatch,
    InvalidAmount,
    InvalidRecipient,
    MissingFeeEstimate,
    NoAddress,
    ProtocolError,
)
from rosetta_wallet.rosetta.models import Signature, TransferResult

if TYPE_CHECKING:
    from rosetta_wallet.rosetta.models import (
        Coin,
        MetadataResponse,
        Operation,
        PayloadsResponse,
        TransferRequest,
    )
    from rosetta_wallet.rosetta.protocol import ConstructionClient
    from rosetta_wallet.signing.signer import Signer

logger = logging.getLogger(__name__)


class PipelineStage(enum.StrEnum):
    """Stages of a transfer attempt, in execution order."""

    IDLE = "idle"
    VALIDATE = "validate"
    FETCH_COINS = "fetch_coins"
    ESTIMATE_OPS = "estimate_ops"
    PREPROCESS = "preprocess"
    METADATA = "metadata"
    BUILD_OPS = "build_ops"
    PAYLOADS = "payloads"
    VERIFY_UNSIGNED = "verify_unsigned"
    SIGN = "sign"
    COMBINE = "combine"
    VERIFY_SIGNED = "verify_signed"
    HASH = "hash"
    SUBMIT = "submit"
    VERIFY_HASH = "verify_hash"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineContext:
    """Everything produced during one attempt.

    A new context is created for every attempt and dropped when it ends.
    """

    request: TransferRequest
    coins: tuple[Coin, ...] = ()
    estimate: tuple[Operation, ...] = ()
    options: dict[str, Any] = field(default_factory=dict)
    metadata: MetadataResponse | None = None
    fee: int = 0
    intent: tuple[Operation, ...] = ()
    payloads: PayloadsResponse | None = None
    signatures: list[Signature] = field(default_factory=list)
    signed_transaction: str = ""
    hash_identifier: str = ""
    submitted_identifier: str = ""


@dataclass(frozen=True)
class PipelineOutcome:
    """Result of :meth:`ConstructionPipeline.submit`.

    Exactly one of ``result`` / ``error`` is set.

    Attributes:
        stage: ``DONE`` on success, otherwise the stage that failed.
        result: The submitted transfer.
        error: The reason the attempt failed.
    """

    stage: PipelineStage
    result: TransferResult | None = None
    error: ConstructionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def broadcast(self) -> bool:
        """Whether the transaction reached the network."""
        return self.ok or isinstance(self.error, HashMismatch)


class ConstructionPipeline:
    """Sequences the Rosetta calls for one transfer and enforces the checks.

    Usage::

        pipeline = ConstructionPipeline(rosetta, signer)
        outcome = await pipeline.submit(request)
        if outcome.ok:
            print(outcome.result.transaction_hash)
    """

    def __init__(self, client: ConstructionClient, signer: Signer) -> None:
        """Initialize the pipeline.

        Args:
            client: Rosetta construction client.
            signer: Signing capability of the sending key.
        """
        self._client = client
        self._signer = signer
        self._stage = PipelineStage.IDLE
        self._failed_stage = PipelineStage.IDLE

    @property
    def stage(self) -> PipelineStage:
        """Stage of the current (or last) attempt."""
        return self._stage

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def submit(self, request: TransferRequest) -> PipelineOutcome:
        """Run one transfer attempt and report its outcome.

        Construction errors are returned in the outcome rather than raised.
        """
        try:
            result = await self.run(request)
        except ConstructionError as exc:
            return PipelineOutcome(stage=self._failed_stage, error=exc)
        return PipelineOutcome(stage=PipelineStage.DONE, result=result)

    async def run(self, request: TransferRequest) -> TransferResult:
        """Run one transfer attempt.

        Returns:
            The submitted transaction hash and amount.

        Raises:
            ConstructionError: The first failure, after which nothing else runs.
        """
        self._stage = PipelineStage.IDLE
        self._failed_stage = PipelineStage.IDLE
        ctx = PipelineContext(request=request)
        try:
            self._validate(request)
            await self._fetch_coins(ctx)
            self._estimate_ops(ctx)
            await self._preprocess(ctx)
            await self._metadata(ctx)
            self._build_ops(ctx)
            await self._payloads(ctx)
            await self._verify_unsigned(ctx)
            self._sign(ctx)
            await self._combine(ctx)
            await self._verify_signed(ctx)
            await self._hash(ctx)
            await self._submit(ctx)
            self._verify_hash(ctx)
        except ConstructionError as exc:
            self._failed_stage = self._stage
            self._stage = PipelineStage.FAILED
            logger.warning("Transfer failed at %s: %s", self._failed_stage, exc.message)
            raise

        self._enter(PipelineStage.DONE)
        logger.info(
            "Transfer submitted: %s (%d %s to %s)",
            ctx.hash_identifier,
            request.amount,
            request.currency.symbol,
            request.recipient,
        )
        return TransferResult(transaction_hash=ctx.hash_identifier, amount=request.amount)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _validate(self, request: TransferRequest) -> None:
        self._enter(PipelineStage.VALIDATE)
        if request.amount <= 0:
            msg = f"amount must be positive, got {request.amount}"
            raise InvalidAmount(msg)
        if not request.recipient:
            raise InvalidRecipient

    async def _fetch_coins(self, ctx: PipelineContext) -> None:
        self._enter(PipelineStage.FETCH_COINS)
        sender = ctx.request.sender
        if not sender:
            raise NoAddress("No user address found")

        coins = await self._client.account_coins(sender)
        if not coins:
            raise InsufficientFunds("no account coins found", required=ctx.request.amount)
        for coin in coins:
            try:
                int(coin.amount.value)
            except ValueError as exc:
                msg = f"Coin {coin.identifier} has a non-integer value: {coin.amount.value!r}"
                raise ProtocolError(msg, call="account/coins") from exc
        ctx.coins = tuple(coins)
        logger.debug("Fetched %d coins for %s", len(ctx.coins), sender)

    def _estimate_ops(self, ctx: PipelineContext) -> None:
        # Fee-less operations, only used to ask the endpoint for a fee.
        self._enter(PipelineStage.ESTIMATE_OPS)
        ctx.estimate = self._build(ctx, fee=0)

    async def _preprocess(self, ctx: PipelineContext) -> None:
        self._enter(PipelineStage.PREPROCESS)
        ctx.options = await self._client.preprocess(ctx.estimate)

    async def _metadata(self, ctx: PipelineContext) -> None:
        self._enter(PipelineStage.METADATA)
        ctx.metadata = await self._client.metadata(ctx.options)
        if not ctx.metadata.suggested_fee:
            raise MissingFeeEstimate

        suggested = ctx.metadata.suggested_fee[0]
        try:
            fee = suggested.int_value
        except ValueError as exc:
            msg = f"Suggested fee is not an integer: {suggested.value!r}"
            raise ProtocolError(msg, call="construction/metadata") from exc
        if fee < 0:
            msg = f"Suggested fee is negative: {fee}"
            raise ProtocolError(msg, call="construction/metadata")
        ctx.fee = fee
        logger.debug("Suggested fee: %d %s", fee, suggested.currency.symbol)

    def _build_ops(self, ctx: PipelineContext) -> None:
        self._enter(PipelineStage.BUILD_OPS)
        ctx.intent = self._build(ctx, fee=ctx.fee)

    async def _payloads(self, ctx: PipelineContext) -> None:
        self._enter(PipelineStage.PAYLOADS)
        metadata = ctx.metadata.metadata if ctx.metadata is not None else {}
        ctx.payloads = await self._client.payloads(ctx.intent, metadata)

    async def _verify_unsigned(self, ctx: PipelineContext) -> None:
        self._enter(PipelineStage.VERIFY_UNSIGNED)
        assert ctx.payloads is not None
        parsed = await self._client.parse(ctx.payloads.unsigned_transaction, signed=False)
        self._check_intent(ctx, parsed, "unsigned")

    def _sign(self, ctx: PipelineContext) -> None:
        self._enter(PipelineStage.SIGN)
        assert ctx.payloads is not None
        public_key = self._signer.public_key().hex()
        ctx.signatures = [
            Signature(
                hex_bytes=self._signer.sign(bytes.fromhex(payload.hex_bytes)).hex(),
                signing_payload=payload,
                public_key=public_key,
            )
            for payload in ctx.payloads.payloads
        ]

    async def _combine(self, ctx: PipelineContext) -> None:
        self._enter(PipelineStage.COMBINE)
        assert ctx.payloads is not None
        ctx.signed_transaction = await self._client.combine(
            ctx.payloads.unsigned_transaction, ctx.signatures
        )

    async def _verify_signed(self, ctx: PipelineContext) -> None:
        self._enter(PipelineStage.VERIFY_SIGNED)
        parsed = await self._client.parse(ctx.signed_transaction, signed=True)
        self._check_intent(ctx, parsed, "signed")

    async def _hash(self, ctx: PipelineContext) -> None:
        self._enter(PipelineStage.HASH)
        ctx.hash_identifier = await self._client.hash(ctx.signed_transaction)

    async def _submit(self, ctx: PipelineContext) -> None:
        self._enter(PipelineStage.SUBMIT)
        ctx.submitted_identifier = await self._client.submit(ctx.signed_transaction)

    def _verify_hash(self, ctx: PipelineContext) -> None:
        self._enter(PipelineStage.VERIFY_HASH)
        if ctx.submitted_identifier != ctx.hash_identifier:
            raise HashMismatch(ctx.hash_identifier, ctx.submitted_identifier)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _enter(self, stage: PipelineStage) -> None:
        self._stage = stage
        logger.debug("Construction stage: %s", stage)

    @staticmethod
    def _build(ctx: PipelineContext, *, fee: int) -> tuple[Operation, ...]:
        request = ctx.request
        return build_intent(
            ctx.coins,
            amount=request.amount,
            fee=fee,
            recipient=request.recipient,
            sender=request.sender,
            currency=request.currency,
        )

    @staticmethod
    def _check_intent(ctx: PipelineContext, parsed: tuple[Operation, ...], stage: str) -> None:
        difference = first_difference(ctx.intent, parsed)
        if difference is not None:
            raise IntentMismatch(stage, difference)
