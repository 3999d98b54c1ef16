#!/usr/bin/env python3
"""Rosetta Wallet Tool — address, balance, coins and verified transfers.

A standalone CLI for sending through a Rosetta endpoint:

    # Generate a fresh private key
    python -m rosetta_wallet.tools.wallet_tool generate

    # Show the address derived for ROSETTAWALLET_PRIVATE_KEY
    python -m rosetta_wallet.tools.wallet_tool address

    # Check the balance of the wallet address (or any address)
    python -m rosetta_wallet.tools.wallet_tool balance [address]

    # List spendable coins of the wallet address (or any address)
    python -m rosetta_wallet.tools.wallet_tool coins [address]

    # Send an amount in whole coins (e.g. 0.1)
    python -m rosetta_wallet.tools.wallet_tool send <recipient> <amount>

The private key (hex or WIF) is read from ``ROSETTAWALLET_PRIVATE_KEY``;
endpoint and network settings come from ``ROSETTAWALLET_*`` variables or the
YAML file named by ``ROSETTAWALLET_CONFIG_PATH``.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rosetta_wallet.config.settings import AppConfig
    from rosetta_wallet.signing.signer import KeyPairSigner

_PRIVATE_KEY_ENV = "ROSETTAWALLET_PRIVATE_KEY"


def _load_config() -> AppConfig:
    from rosetta_wallet.config.settings import AppConfig

    cfg = AppConfig()
    logging.basicConfig(
        level=cfg.effective_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return cfg


def _load_signer() -> KeyPairSigner:
    from rosetta_wallet.signing.signer import KeyPairSigner

    key = os.environ.get(_PRIVATE_KEY_ENV, "")
    if not key:
        print(f"Set {_PRIVATE_KEY_ENV} to a hex or WIF private key")
        sys.exit(1)
    try:
        return KeyPairSigner.from_string(key)
    except ValueError as exc:
        print(f"Invalid private key: {exc}")
        sys.exit(1)


def _cmd_generate() -> None:
    """Generate a new private key and print it with its public key."""
    from rosetta_wallet.signing.signer import KeyPairSigner

    signer = KeyPairSigner.generate()
    print(f"Private key: {signer.export_private_key().hex()}")
    print(f"Public key:  {signer.public_key().hex()}")
    print()
    print(f"export {_PRIVATE_KEY_ENV}=<private key>")


def _cmd_address() -> None:
    """Derive the wallet address through the endpoint."""
    from rosetta_wallet.rosetta.client import RosettaClient

    cfg = _load_config()
    signer = _load_signer()

    async def _run() -> None:
        rosetta = RosettaClient(cfg.rosetta)
        await rosetta.connect()
        try:
            address = await rosetta.derive(signer.public_key())
            print(f"Address: {address}")
        finally:
            await rosetta.close()

    asyncio.run(_run())


def _cmd_balance(address: str | None) -> None:
    """Print the balance of an address."""
    from rosetta_wallet.construction.units import format_amount
    from rosetta_wallet.rosetta.client import RosettaClient

    cfg = _load_config()
    signer = _load_signer() if address is None else None

    async def _run() -> None:
        rosetta = RosettaClient(cfg.rosetta)
        await rosetta.connect()
        try:
            target = address or await rosetta.derive(signer.public_key())
            balances = await rosetta.account_balance(target)
            print(f"Address: {target}")
            if not balances:
                print("  No balance")
            for b in balances:
                shown = format_amount(b.int_value, b.currency.decimals)
                print(f"  {b.int_value:>16,}  ({shown} {b.currency.symbol})")
        finally:
            await rosetta.close()

    asyncio.run(_run())


def _cmd_coins(address: str | None) -> None:
    """List the spendable coins of an address."""
    from rosetta_wallet.construction.units import format_amount
    from rosetta_wallet.rosetta.client import RosettaClient

    cfg = _load_config()
    signer = _load_signer() if address is None else None

    async def _run() -> None:
        rosetta = RosettaClient(cfg.rosetta)
        await rosetta.connect()
        try:
            target = address or await rosetta.derive(signer.public_key())
            coins = await rosetta.account_coins(target)
            if not coins:
                print(f"No coins found for {target}")
                return
            print(f"Coins for {target}:")
            print("-" * 80)
            total = 0
            for c in coins:
                print(f"  {c.identifier}  {c.value:>16,}")
                total += c.value
            print("-" * 80)
            shown = format_amount(total, cfg.currency.decimals)
            print(f"  Total: {total:>16,}  ({shown} {cfg.currency.symbol})  [{len(coins)} coins]")
        finally:
            await rosetta.close()

    asyncio.run(_run())


def _cmd_send(recipient: str, amount: str) -> int:
    """Send ``amount`` whole coins to ``recipient``.

    Returns:
        Process exit code.
    """
    from rosetta_wallet.errors.construction_errors import ConstructionError
    from rosetta_wallet.rosetta.client import RosettaClient
    from rosetta_wallet.session import WalletSession

    cfg = _load_config()
    signer = _load_signer()

    async def _run() -> int:
        rosetta = RosettaClient(cfg.rosetta)
        await rosetta.connect()
        try:
            session = WalletSession(cfg, rosetta, signer)
            await session.load()
            try:
                outcome = await session.send(recipient, amount)
            except ConstructionError as exc:
                print(f"Send failed [{exc.code}]: {exc.message}")
                return 1
            if outcome.error is not None:
                print(f"Send failed at {outcome.stage} [{outcome.error.code}]: {outcome.error.message}")
                if outcome.broadcast:
                    print("WARNING: the transaction was broadcast")
                return 1
            sent = session.sent[-1]
            print(f"Sent {sent.display_amount} to {recipient}")
            print(f"Transaction: {sent.hash}")
            if sent.link:
                print(f"Explorer:    {sent.link}")
            return 0
        finally:
            await rosetta.close()

    return asyncio.run(_run())


def main() -> None:
    """CLI entry point."""
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    cmd = sys.argv[1].lower()
    arg = sys.argv[2] if len(sys.argv) > 2 else None

    if cmd == "generate":
        _cmd_generate()
    elif cmd == "address":
        _cmd_address()
    elif cmd == "balance":
        _cmd_balance(arg)
    elif cmd == "coins":
        _cmd_coins(arg)
    elif cmd == "send":
        if len(sys.argv) < 4:
            print("Usage: wallet_tool send <recipient> <amount>")
            sys.exit(1)
        sys.exit(_cmd_send(sys.argv[2], sys.argv[3]))
    else:
        print(f"Unknown command: {cmd}")
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main()
