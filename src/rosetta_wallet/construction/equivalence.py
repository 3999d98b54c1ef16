"""Positional comparison of two operation lists.

Operations are compared index by index, so a list that carries the same
operations in a different order is reported as different.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rosetta_wallet.rosetta.models import Operation


def _fields(op: Operation) -> tuple[tuple[str, object], ...]:
    return (
        ("address", op.address),
        ("amount", op.amount.value if op.amount is not None else None),
        ("currency", op.amount.currency.symbol if op.amount is not None else None),
        ("type", op.type),
    )


def first_difference(intent: Sequence[Operation], parsed: Sequence[Operation]) -> str | None:
    """Describe the first difference between two operation lists.

    Returns:
        ``None`` when the lists are equivalent.
    """
    if len(intent) != len(parsed):
        return f"expected {len(intent)} operations, got {len(parsed)}"

    for position, (expected, observed) in enumerate(zip(intent, parsed, strict=True)):
        for (name, want), (_, got) in zip(_fields(expected), _fields(observed), strict=True):
            if want != got:
                return f"operation {position} {name}: expected {want!r}, got {got!r}"
    return None


def operations_equal(intent: Sequence[Operation], parsed: Sequence[Operation]) -> bool:
    """Check that ``parsed`` matches ``intent`` position by position.

    Compares account address, amount value (as a string), currency symbol and
    operation type. Indices, coin changes and decimals are not compared.
    """
    return first_difference(intent, parsed) is None
