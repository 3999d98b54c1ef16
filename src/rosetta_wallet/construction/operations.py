"""Operation building — turns selected inputs into a complete transfer intent.

Building is a pure function of its arguments: a fee change means building a
new tuple, never editing a previous one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rosetta_wallet.construction.coin_selector import select_coins
from rosetta_wallet.errors.construction_errors import InsufficientFunds
from rosetta_wallet.rosetta.models import Amount, Operation, OperationType

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from rosetta_wallet.rosetta.models import Coin, Currency


def total_input_value(operations: Iterable[Operation]) -> int:
    """Sum of the absolute values of all INPUT operations."""
    return sum(
        abs(op.amount.int_value)
        for op in operations
        if op.type == OperationType.INPUT and op.amount is not None
    )


def build_operations(
    inputs: Sequence[Operation],
    *,
    amount: int,
    fee: int,
    recipient: str,
    sender: str,
    currency: Currency,
) -> tuple[Operation, ...]:
    """Build ``[*inputs, recipient_output, change_output]``.

    Args:
        inputs: INPUT operations from :func:`select_coins`.
        amount: Amount paid to ``recipient`` (minor units).
        fee: Network fee (minor units).
        recipient: Destination address.
        sender: Change address.
        currency: Currency of both outputs.

    Returns:
        Operations with contiguous indices ``0..len(inputs)+1``.

    Raises:
        InsufficientFunds: If the change output would be negative.
    """
    total = total_input_value(inputs)
    change = total - amount - fee
    if change < 0:
        raise InsufficientFunds(
            f"inputs total {total} below required {amount + fee}",
            required=amount + fee,
            available=total,
        )

    n = len(inputs)
    recipient_output = Operation(
        index=n,
        type=OperationType.OUTPUT.value,
        address=recipient,
        amount=Amount(value=str(amount), currency=currency),
    )
    change_output = Operation(
        index=n + 1,
        type=OperationType.OUTPUT.value,
        address=sender,
        amount=Amount(value=str(change), currency=currency),
    )
    return (
        *(op.with_index(i) for i, op in enumerate(inputs)),
        recipient_output,
        change_output,
    )


def build_intent(
    coins: Sequence[Coin],
    *,
    amount: int,
    fee: int,
    recipient: str,
    sender: str,
    currency: Currency,
) -> tuple[Operation, ...]:
    """Select coins for ``amount + fee`` and build the full operation list."""
    inputs = select_coins(coins, amount=amount, fee=fee, address=sender)
    return build_operations(
        inputs,
        amount=amount,
        fee=fee,
        recipient=recipient,
        sender=sender,
        currency=currency,
    )
