import math
from decimal import Decimal
from typing import NamedTuple

from forecast.adjustment.period import AdjustmentPeriod, build_adjustment_period
from forecast.adjustment.prediction import (
    Prediction,
    assemble_prediction,
    forecast_issuance,
    forecast_mint_rate,
)
from forecast.config import (
    PERIOD_LENGTH_BLOCKS,
    INITIAL_TARGET_FCT,
    BLOCKS_PER_HALVING,
    MAX_MINT_RATE_GWEI,
    MIN_RATE_MULTIPLIER,
    MAX_RATE_MULTIPLIER,
)
from forecast.errors import OutOfRangeInput


class ForecastSettings(NamedTuple):
    period_length_blocks: int = PERIOD_LENGTH_BLOCKS
    initial_target: int = INITIAL_TARGET_FCT
    blocks_per_halving: int = BLOCKS_PER_HALVING
    max_rate_gwei: int = MAX_MINT_RATE_GWEI
    min_multiplier: float = MIN_RATE_MULTIPLIER
    max_multiplier: float = MAX_RATE_MULTIPLIER


DEFAULT_SETTINGS = ForecastSettings()


def _is_number(value) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _is_finite(value) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


class ChainSnapshot(NamedTuple):
    """
    Chain state captured at calculation time. Build it with create() so the
    values are validated.
    """
    block_height: int
    period_minted_fct: float
    current_mint_rate_gwei: float

    @staticmethod
    def create(block_height, period_minted_fct, current_mint_rate_gwei):
        if not isinstance(block_height, int) or isinstance(block_height, bool):
            raise OutOfRangeInput(f"Block height must be an integer, got {block_height!r}")
        if block_height < 0:
            raise OutOfRangeInput(f"Block height must be non-negative, got {block_height}")

        for name, value in (
            ("Period minted FCT", period_minted_fct),
            ("Mint rate", current_mint_rate_gwei),
        ):
            if not _is_number(value):
                raise OutOfRangeInput(f"{name} must be a number, got {value!r}")
            if not _is_finite(value):
                raise OutOfRangeInput(f"{name} must be finite, got {value}")
            if value < 0:
                raise OutOfRangeInput(f"{name} must be non-negative, got {value}")

        return ChainSnapshot(block_height, period_minted_fct, current_mint_rate_gwei)

    def to_json(self):
        return {
            "block_height": self.block_height,
            "period_minted_fct": self.period_minted_fct,
            "current_mint_rate_gwei": self.current_mint_rate_gwei,
        }


class ForecastReport(NamedTuple):
    snapshot: ChainSnapshot
    adjustment_period: AdjustmentPeriod
    prediction: Prediction

    def to_json(self):
        return {
            "snapshot": self.snapshot.to_json(),
            "adjustment_period": self.adjustment_period.to_json(),
            "prediction": self.prediction.to_json(),
        }


def forecast(snapshot: ChainSnapshot, settings: ForecastSettings = DEFAULT_SETTINGS) -> ForecastReport:
    """
    Turn one chain snapshot into the period report and the mint rate prediction.
    Pure: the same snapshot and settings always give an equal report.
    """
    minted = snapshot.period_minted_fct
    rate = snapshot.current_mint_rate_gwei

    period = build_adjustment_period(
        snapshot.block_height,
        minted,
        rate,
        period_length_blocks=settings.period_length_blocks,
        initial_target=settings.initial_target,
        blocks_per_halving=settings.blocks_per_halving,
    )

    forecasted = forecast_issuance(minted, period.blocks_elapsed, settings.period_length_blocks)
    new_rate = forecast_mint_rate(
        rate,
        period.target_fct,
        forecasted,
        max_rate_gwei=settings.max_rate_gwei,
        min_multiplier=settings.min_multiplier,
        max_multiplier=settings.max_multiplier,
    )

    return ForecastReport(
        snapshot=snapshot,
        adjustment_period=period,
        prediction=assemble_prediction(period, minted, rate, new_rate),
    )
