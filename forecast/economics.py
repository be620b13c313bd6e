import math
from fractions import Fraction

from forecast.config import (
    INITIAL_TARGET_FCT,
    BLOCKS_PER_HALVING,
)
from forecast.errors import OutOfRangeInput


def round_half_up(value) -> int:
    """
    Round to the nearest integer, ties going up (2.5 -> 3, 0.5 -> 1).
    The value is converted to an exact fraction first so float noise never decides a tie.
    """
    return math.floor(Fraction(value) + Fraction(1, 2))


def halving_period(block_height: int, blocks_per_halving: int = None) -> int:
    """
    Number of halvings that have happened at the given height (genesis is 0).
    """
    interval = BLOCKS_PER_HALVING if blocks_per_halving is None else blocks_per_halving

    if block_height < 0:
        raise OutOfRangeInput(f"Block height must be non-negative, got {block_height}")
    if interval <= 0:
        raise OutOfRangeInput(f"Blocks per halving must be positive, got {interval}")

    return block_height // interval


def compute_target(block_height: int, initial_target: int = None, blocks_per_halving: int = None) -> int:
    """
    Compute the FCT issuance target for the adjustment period containing block_height.
    The target halves (floor) every blocks_per_halving blocks and reaches 0 once
    2 ** halvings exceeds the initial target.
    """
    start = INITIAL_TARGET_FCT if initial_target is None else initial_target

    if start < 0:
        raise OutOfRangeInput(f"Initial target must be non-negative, got {start}")

    return start >> halving_period(block_height, blocks_per_halving)
