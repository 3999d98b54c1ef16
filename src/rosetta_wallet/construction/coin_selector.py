"""Coin selection — greedy, in the order the coins were listed."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rosetta_wallet.errors.construction_errors import InsufficientFunds
from rosetta_wallet.rosetta.models import (
    Amount,
    CoinAction,
    CoinChange,
    Operation,
    OperationType,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rosetta_wallet.rosetta.models import Coin


def select_coins(
    coins: Sequence[Coin],
    *,
    amount: int,
    fee: int,
    address: str,
) -> tuple[Operation, ...]:
    """Select coins covering ``amount + fee`` and return them as INPUT operations.

    The first coin is always taken; every following coin is taken only while
    the total of the coins already taken is below ``amount + fee``.

    Args:
        coins: Available coins, in preference order.
        amount: Amount to send (minor units).
        fee: Fee (minor units); 0 for the estimation pass.
        address: Owner of the coins.

    Returns:
        INPUT operations with indices ``0..n-1`` spending the selected coins.

    Raises:
        InsufficientFunds: If there are no coins or all of them together
            fall short of ``amount + fee``.
    """
    required = amount + fee
    if not coins:
        raise InsufficientFunds("no account coins found", required=required)

    selected: list[Coin] = []
    total = 0
    for coin in coins:
        if selected and total >= required:
            break
        selected.append(coin)
        total += abs(coin.value)

    if total < required:
        raise InsufficientFunds(
            f"coins total {total} below required {required}",
            required=required,
            available=total,
        )

    return tuple(_spend(coin, index, address) for index, coin in enumerate(selected))


def _spend(coin: Coin, index: int, address: str) -> Operation:
    return Operation(
        index=index,
        type=OperationType.INPUT.value,
        address=address,
        amount=Amount(value=str(-abs(coin.value)), currency=coin.amount.currency),
        coin_change=CoinChange(
            coin_identifier=coin.identifier,
            coin_action=CoinAction.COIN_SPENT,
        ),
    )
