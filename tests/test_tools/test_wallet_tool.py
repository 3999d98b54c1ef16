"""Tests for the wallet_tool command line."""

from __future__ import annotations

import sys

import pytest
from conftest import PRIVATE_KEY_HEX, RECIPIENT, SENDER, TX_HASH, FakeRosetta

from rosetta_wallet.tools import wallet_tool


class _CliRosetta(FakeRosetta):
    def __init__(self) -> None:
        super().__init__()
        self.closed = False

    async def connect(self) -> None:
        pass

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def cli_rosetta(monkeypatch) -> _CliRosetta:
    fake = _CliRosetta()
    monkeypatch.setattr("rosetta_wallet.rosetta.client.RosettaClient", lambda config: fake)
    return fake


@pytest.fixture
def with_key(monkeypatch) -> None:
    monkeypatch.setenv("ROSETTAWALLET_PRIVATE_KEY", PRIVATE_KEY_HEX)


def _run(monkeypatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["wallet_tool", *args])
    with pytest.raises(SystemExit) as exc_info:
        wallet_tool.main()
    return exc_info.value.code


class TestUsage:
    def test_no_arguments(self, monkeypatch, capsys) -> None:
        assert _run(monkeypatch) == 1
        assert "Rosetta Wallet Tool" in capsys.readouterr().out

    def test_unknown_command(self, monkeypatch, capsys) -> None:
        assert _run(monkeypatch, "bogus") == 1
        assert "Unknown command: bogus" in capsys.readouterr().out

    def test_send_requires_two_arguments(self, monkeypatch, capsys) -> None:
        assert _run(monkeypatch, "send", RECIPIENT) == 1
        assert "Usage: wallet_tool send" in capsys.readouterr().out


class TestGenerate:
    def test_prints_new_key(self, monkeypatch, capsys) -> None:
        monkeypatch.setattr(sys, "argv", ["wallet_tool", "generate"])
        wallet_tool.main()
        out = capsys.readouterr().out
        line = next(ln for ln in out.splitlines() if ln.startswith("Private key:"))
        assert len(line.split(":", 1)[1].strip()) == 64
        assert "ROSETTAWALLET_PRIVATE_KEY" in out


class TestPrivateKey:
    def test_missing_key(self, monkeypatch, capsys) -> None:
        monkeypatch.delenv("ROSETTAWALLET_PRIVATE_KEY", raising=False)
        assert _run(monkeypatch, "address") == 1
        assert "Set ROSETTAWALLET_PRIVATE_KEY" in capsys.readouterr().out

    def test_invalid_key(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("ROSETTAWALLET_PRIVATE_KEY", "not-a-key")
        assert _run(monkeypatch, "send", RECIPIENT, "0.1") == 1
        assert "Invalid private key" in capsys.readouterr().out


class TestEndpointCommands:
    def test_address(self, monkeypatch, capsys, cli_rosetta, with_key) -> None:
        monkeypatch.setattr(sys, "argv", ["wallet_tool", "address"])
        wallet_tool.main()
        assert f"Address: {SENDER}" in capsys.readouterr().out
        assert cli_rosetta.closed

    def test_balance_of_address(self, monkeypatch, capsys, cli_rosetta) -> None:
        monkeypatch.setattr(sys, "argv", ["wallet_tool", "balance", RECIPIENT])
        wallet_tool.main()
        out = capsys.readouterr().out
        assert f"Address: {RECIPIENT}" in out
        assert "150,000,000" in out
        assert "1.50000000 tBTC" in out
        assert "derive" not in cli_rosetta.calls

    def test_coins(self, monkeypatch, capsys, cli_rosetta, with_key) -> None:
        monkeypatch.setattr(sys, "argv", ["wallet_tool", "coins"])
        wallet_tool.main()
        out = capsys.readouterr().out
        assert f"Coins for {SENDER}:" in out
        assert "[1 coins]" in out

    def test_no_coins(self, monkeypatch, capsys, cli_rosetta) -> None:
        cli_rosetta.coins = []
        monkeypatch.setattr(sys, "argv", ["wallet_tool", "coins", RECIPIENT])
        wallet_tool.main()
        assert f"No coins found for {RECIPIENT}" in capsys.readouterr().out


class TestSend:
    def test_success(self, monkeypatch, capsys, cli_rosetta, with_key) -> None:
        assert _run(monkeypatch, "send", RECIPIENT, "0.1") == 0
        out = capsys.readouterr().out
        assert f"Sent 0.10000000 tBTC to {RECIPIENT}" in out
        assert f"Transaction: {TX_HASH}" in out
        assert f"/tx/{TX_HASH}" in out
        assert cli_rosetta.closed

    def test_hash_mismatch_warns_broadcast(
        self, monkeypatch, capsys, cli_rosetta, with_key
    ) -> None:
        cli_rosetta.submit_id = "e" * 64
        assert _run(monkeypatch, "send", RECIPIENT, "0.1") == 1
        out = capsys.readouterr().out
        assert "Send failed at verify_hash [hash-mismatch]" in out
        assert "WARNING: the transaction was broadcast" in out

    def test_invalid_amount(self, monkeypatch, capsys, cli_rosetta, with_key) -> None:
        assert _run(monkeypatch, "send", RECIPIENT, "lots") == 1
        assert "Send failed [invalid-amount]" in capsys.readouterr().out
        assert "account_coins" not in cli_rosetta.calls
