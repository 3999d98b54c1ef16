"""Construction pipeline errors.

Every failure of a transfer attempt is reported as exactly one of these.
"""

from __future__ import annotations

from rosetta_wallet.errors.wallet_errors import WalletError


class ConstructionError(WalletError):
    """Base error for a failed transfer construction attempt."""

    def __init__(self, message: str, *, code: str = "construction-error") -> None:
        super().__init__(message, code=code)


class NoAddress(ConstructionError):
    """The sending address is unknown (not yet derived or empty)."""

    def __init__(self, message: str = "no sender address") -> None:
        super().__init__(message, code="no-address")


class InsufficientFunds(ConstructionError):
    """Available coins cannot cover amount + fee."""

    def __init__(
        self,
        message: str = "not enough funds",
        *,
        required: int = 0,
        available: int = 0,
    ) -> None:
        super().__init__(message, code="insufficient-funds")
        self.required = required
        self.available = available


class MissingFeeEstimate(ConstructionError):
    """The metadata call returned no suggested fee."""

    def __init__(self, message: str = "no suggested fee found") -> None:
        super().__init__(message, code="missing-fee-estimate")


class ProtocolError(ConstructionError):
    """A Rosetta API call failed at the transport or API level.

    Attributes:
        call: Name of the failed call (e.g. ``construction/payloads``).
        status_code: HTTP status, or 0 when no response was received.
        error_code: Rosetta error code from the response body, if any.
        retriable: Rosetta ``retriable`` hint (informational only).
    """

    def __init__(
        self,
        message: str,
        *,
        call: str = "",
        status_code: int = 0,
        error_code: int | None = None,
        retriable: bool = False,
    ) -> None:
        super().__init__(message, code="protocol-error")
        self.call = call
        self.status_code = status_code
        self.error_code = error_code
        self.retriable = retriable


class IntentMismatch(ConstructionError):
    """Parsed operations disagree with the locally built intent.

    Attributes:
        stage: ``"unsigned"`` or ``"signed"``.
        detail: First difference found, if known.
    """

    def __init__(self, stage: str, detail: str = "") -> None:
        message = f"{stage.capitalize()} parsed operations do not match intent"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, code="intent-mismatch")
        self.stage = stage
        self.detail = detail


class HashMismatch(ConstructionError):
    """Submit and Hash returned different transaction identifiers.

    The transaction has already been broadcast when this is raised.
    """

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            "Submitted transaction identifier does not match construction hash "
            f"(hash={expected}, submitted={actual}); the transaction was broadcast",
            code="hash-mismatch",
        )
        self.expected = expected
        self.actual = actual


class InvalidAmount(ConstructionError):
    """The requested amount is not a positive whole number of minor units."""

    def __init__(self, message: str = "invalid amount") -> None:
        super().__init__(message, code="invalid-amount")


class InvalidRecipient(ConstructionError):
    """The destination address is empty."""

    def __init__(self, message: str = "no recipient address") -> None:
        super().__init__(message, code="invalid-recipient")


class SubmissionInProgress(ConstructionError):
    """Another transfer is already in flight for this session."""

    def __init__(self, message: str = "a transfer is already being submitted") -> None:
        super().__init__(message, code="submission-in-progress")
