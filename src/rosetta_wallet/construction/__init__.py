"""Construction — coin selection, intent building and the verified submit pipeline."""

from rosetta_wallet.construction.coin_selector import select_coins
from rosetta_wallet.construction.equivalence import first_difference, operations_equal
from rosetta_wallet.construction.operations import (
    build_intent,
    build_operations,
    total_input_value,
)
from rosetta_wallet.construction.pipeline import (
    ConstructionPipeline,
    PipelineContext,
    PipelineOutcome,
    PipelineStage,
)

__all__ = [
    "ConstructionPipeline",
    "PipelineContext",
    "PipelineOutcome",
    "PipelineStage",
    "build_intent",
    "build_operations",
    "first_difference",
    "operations_equal",
    "select_coins",
    "total_input_value",
]
