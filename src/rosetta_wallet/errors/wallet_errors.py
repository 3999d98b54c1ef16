"""WalletError — base exception class for all rosetta-wallet errors."""

from __future__ import annotations


class WalletError(Exception):
    """Base error for all wallet operations.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code string.
    """

    def __init__(self, message: str, *, code: str = "wallet-error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code
