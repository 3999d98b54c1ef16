"""Private key import — hex and WIF decoding.

Only what is needed to load an existing secp256k1 private key:
- Base58Check decoding (WIF)
- Hex / WIF private key parsing
"""

from __future__ import annotations

import hashlib

from ecdsa import SECP256k1

_CURVE_ORDER = SECP256k1.order

_MAINNET_WIF = b"\x80"
_TESTNET_WIF = b"\xef"

_B58_ALPHABET = b"123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def _sha256d(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def base58_decode(s: str) -> bytes:
    """Decode a Base58 string to raw bytes (no checksum)."""
    n = 0
    for char in s:
        try:
            n = n * 58 + _B58_ALPHABET.index(char.encode("ascii"))
        except ValueError as exc:
            msg = f"Invalid Base58 character: {char!r}"
            raise ValueError(msg) from exc
    result = n.to_bytes((n.bit_length() + 7) // 8, "big") if n > 0 else b""
    # Leading '1' chars are 0x00 bytes
    pad_count = len(s) - len(s.lstrip("1"))
    return b"\x00" * pad_count + result


def base58check_decode(s: str) -> bytes:
    """Decode a Base58Check string, verifying the checksum.

    Raises:
        ValueError: If the checksum is invalid.
    """
    raw = base58_decode(s)
    if len(raw) < 4:
        msg = "Base58Check string too short"
        raise ValueError(msg)
    payload, checksum = raw[:-4], raw[-4:]
    if checksum != _sha256d(payload)[:4]:
        msg = "Base58Check checksum mismatch"
        raise ValueError(msg)
    return payload


def wif_to_privkey(wif: str) -> tuple[bytes, bool]:
    """Decode a WIF string to a private key.

    Returns:
        Tuple of (privkey_bytes, testnet).
    """
    payload = base58check_decode(wif)
    if len(payload) not in (33, 34):
        msg = f"Invalid WIF payload length: {len(payload)}"
        raise ValueError(msg)
    version = payload[0:1]
    if version not in (_MAINNET_WIF, _TESTNET_WIF):
        msg = f"Invalid WIF version byte: {version.hex()}"
        raise ValueError(msg)
    return payload[1:33], version == _TESTNET_WIF


def parse_private_key(value: str) -> bytes:
    """Parse a 32-byte private key given as 64 hex chars or WIF.

    Raises:
        ValueError: If the value is neither, or the scalar is out of range.
    """
    value = value.strip()
    if len(value) == 64:
        try:
            key = bytes.fromhex(value)
        except ValueError:
            key, _ = wif_to_privkey(value)
    else:
        key, _ = wif_to_privkey(value)

    scalar = int.from_bytes(key, "big")
    if not 0 < scalar < _CURVE_ORDER:
        msg = "Private key out of range for secp256k1"
        raise ValueError(msg)
    return key
