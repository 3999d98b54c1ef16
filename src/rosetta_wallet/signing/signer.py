"""Signing capability — the only component that touches the private key.

The construction pipeline depends on :class:`Signer` alone, so where and how
the key is stored or derived stays outside of it.
"""

from __future__ import annotations

import hashlib
from typing import Protocol, Self

from ecdsa import SECP256k1, SigningKey
from ecdsa.util import sigencode_string_canonize

from rosetta_wallet.signing.keys import parse_private_key

_CURVE = SECP256k1


class Signer(Protocol):
    """Signing capability bound to one secp256k1 keypair."""

    def sign(self, payload: bytes) -> bytes: ...
    def public_key(self) -> bytes: ...


class KeyPairSigner:
    """In-memory secp256k1 keypair.

    Signatures are deterministic (RFC 6979), low-S and encoded as the 64-byte
    ``r || s`` string Rosetta expects for ``ecdsa`` signatures.
    """

    def __init__(self, private_key: bytes) -> None:
        """Initialize from a 32-byte private key scalar."""
        self._sk = SigningKey.from_string(private_key, curve=_CURVE)
        self._public_key = self._sk.get_verifying_key().to_string("compressed")

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Load a key given as hex or WIF."""
        return cls(parse_private_key(value))

    @classmethod
    def generate(cls) -> Self:
        """Create a signer for a fresh random key."""
        return cls(SigningKey.generate(curve=_CURVE).to_string())

    def sign(self, payload: bytes) -> bytes:
        """Sign a 32-byte signing payload (a transaction digest).

        Raises:
            ValueError: If the payload is not 32 bytes.
        """
        if len(payload) != 32:
            msg = f"Signing payload must be 32 bytes, got {len(payload)}"
            raise ValueError(msg)
        return self._sk.sign_digest_deterministic(
            payload,
            hashfunc=hashlib.sha256,
            sigencode=sigencode_string_canonize,
        )

    def public_key(self) -> bytes:
        """Return the 33-byte compressed public key."""
        return self._public_key

    def export_private_key(self) -> bytes:
        """Return the 32-byte private key scalar."""
        return self._sk.to_string()

    def __repr__(self) -> str:
        return f"KeyPairSigner(public_key={self._public_key.hex()})"
