from typing import NamedTuple, Optional

from forecast.config import PERIOD_LENGTH_BLOCKS
from forecast.economics import compute_target, halving_period
from forecast.errors import OutOfRangeInput


class PeriodPosition(NamedTuple):
    period_index: int
    start_block: int
    end_block: int
    blocks_elapsed: int
    blocks_remaining: int
    percent_complete: float


class AdjustmentPeriod(NamedTuple):
    """
    Read-only view of the adjustment period containing the snapshot height.
    """
    period_index: int
    start_block: int
    end_block: int
    block_height: int
    blocks_elapsed: int
    blocks_remaining: int
    percent_complete: float
    halving_period: int
    target_fct: int
    minted_so_far: float
    current_mint_rate_gwei: float
    percent_of_target: Optional[float]

    def to_json(self):
        return self._asdict()


def compute_period_position(block_height: int, period_length_blocks: int = PERIOD_LENGTH_BLOCKS) -> PeriodPosition:
    """
    Locate block_height inside its adjustment period.
    Periods are 1-based and the current block counts as elapsed, so
    0 < blocks_elapsed <= period_length_blocks always holds.
    """
    if block_height < 0:
        raise OutOfRangeInput(f"Block height must be non-negative, got {block_height}")
    if period_length_blocks <= 0:
        raise OutOfRangeInput(f"Period length must be positive, got {period_length_blocks}")

    period_index = block_height // period_length_blocks + 1
    start_block = (period_index - 1) * period_length_blocks
    end_block = start_block + period_length_blocks - 1
    blocks_elapsed = block_height - start_block + 1

    return PeriodPosition(
        period_index=period_index,
        start_block=start_block,
        end_block=end_block,
        blocks_elapsed=blocks_elapsed,
        blocks_remaining=period_length_blocks - blocks_elapsed,
        percent_complete=blocks_elapsed * 100 / period_length_blocks,
    )


def build_adjustment_period(
    block_height: int,
    minted_so_far,
    current_mint_rate_gwei,
    period_length_blocks: int = PERIOD_LENGTH_BLOCKS,
    initial_target: int = None,
    blocks_per_halving: int = None,
) -> AdjustmentPeriod:
    position = compute_period_position(block_height, period_length_blocks)
    target_fct = compute_target(block_height, initial_target, blocks_per_halving)

    # A fully halved-out target has no meaningful percentage.
    percent_of_target = float(minted_so_far * 100 / target_fct) if target_fct > 0 else None

    return AdjustmentPeriod(
        period_index=position.period_index,
        start_block=position.start_block,
        end_block=position.end_block,
        block_height=block_height,
        blocks_elapsed=position.blocks_elapsed,
        blocks_remaining=position.blocks_remaining,
        percent_complete=position.percent_complete,
        halving_period=halving_period(block_height, blocks_per_halving),
        target_fct=target_fct,
        minted_so_far=minted_so_far,
        current_mint_rate_gwei=current_mint_rate_gwei,
        percent_of_target=percent_of_target,
    )
