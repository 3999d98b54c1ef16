"""WalletSession — the caller side of a transfer.

Holds what a wallet screen needs between transfers: the signer's derived
address, the last fetched balance, a single-flight ``submitting`` flag and
the transactions sent during the session. Each send runs a fresh
:class:`~rosetta_wallet.construction.pipeline.ConstructionPipeline` attempt.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rosetta_wallet.construction.pipeline import ConstructionPipeline
from rosetta_wallet.construction.units import format_amount, to_minor_units
from rosetta_wallet.errors.construction_errors import SubmissionInProgress
from rosetta_wallet.rosetta.models import Currency, TransferRequest

if TYPE_CHECKING:
    from decimal import Decimal

    from rosetta_wallet.config.settings import AppConfig
    from rosetta_wallet.construction.pipeline import PipelineOutcome
    from rosetta_wallet.rosetta.client import RosettaClient
    from rosetta_wallet.signing.signer import Signer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SentTransaction:
    """A transaction successfully submitted during this session."""

    hash: str
    amount: int
    decimals: int
    symbol: str
    explorer_url: str = ""

    @property
    def display_amount(self) -> str:
        return f"{format_amount(self.amount, self.decimals)} {self.symbol}"

    @property
    def link(self) -> str:
        if not self.explorer_url:
            return ""
        return f"{self.explorer_url.rstrip('/')}/{self.hash}"


class WalletSession:
    """One signer talking to one Rosetta endpoint.

    Usage::

        session = WalletSession(config, rosetta, signer)
        await session.load()
        outcome = await session.send("tb1q...", "0.1")
    """

    def __init__(self, config: AppConfig, client: RosettaClient, signer: Signer) -> None:
        self._config = config
        self._client = client
        self._signer = signer
        self._address = ""
        self._balance = 0
        self._submitting = False
        self._sent: list[SentTransaction] = []

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def address(self) -> str:
        """Address derived from the signer's public key ("" until loaded)."""
        return self._address

    @property
    def balance(self) -> int:
        """Last fetched balance in minor units."""
        return self._balance

    @property
    def submitting(self) -> bool:
        """True while a transfer attempt is in flight."""
        return self._submitting

    @property
    def sent(self) -> list[SentTransaction]:
        """Transactions sent during this session, oldest first."""
        return list(self._sent)

    @property
    def currency(self) -> Currency:
        return Currency(
            symbol=self._config.currency.symbol,
            decimals=self._config.currency.decimals,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Derive the address and fetch its balance."""
        await self.derive_address()
        await self.refresh_balance()

    async def derive_address(self) -> str:
        self._address = await self._client.derive(self._signer.public_key())
        logger.info("Wallet address: %s", self._address)
        return self._address

    async def refresh_balance(self) -> int:
        """Fetch the balance of the session address.

        Returns:
            The first balance reported, in minor units (0 when none).
        """
        if not self._address:
            return self._balance
        balances = await self._client.account_balance(self._address)
        self._balance = balances[0].int_value if balances else 0
        return self._balance

    async def send(self, recipient: str, amount: str | int | Decimal) -> PipelineOutcome:
        """Send ``amount`` whole coins to ``recipient``.

        Only one send may be in flight at a time; the flag is cleared on
        every exit path.

        Raises:
            SubmissionInProgress: If another send has not finished yet.
            InvalidAmount: If ``amount`` cannot be expressed in minor units.
        """
        if self._submitting:
            raise SubmissionInProgress

        currency = self.currency
        request = TransferRequest(
            sender=self._address,
            recipient=recipient.strip(),
            amount=to_minor_units(amount, currency.decimals),
            currency=currency,
        )

        self._submitting = True
        try:
            outcome = await ConstructionPipeline(self._client, self._signer).submit(request)
        finally:
            self._submitting = False

        if outcome.result is not None:
            self._sent.append(
                SentTransaction(
                    hash=outcome.result.transaction_hash,
                    amount=outcome.result.amount,
                    decimals=currency.decimals,
                    symbol=currency.symbol,
                    explorer_url=self._config.explorer_url,
                )
            )
        return outcome
