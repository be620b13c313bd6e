from fractions import Fraction
from typing import NamedTuple

from forecast.adjustment.period import AdjustmentPeriod
from forecast.config import (
    PERIOD_LENGTH_BLOCKS,
    MAX_MINT_RATE_GWEI,
    MIN_RATE_MULTIPLIER,
    MAX_RATE_MULTIPLIER,
)
from forecast.economics import round_half_up
from forecast.errors import DivisionByZero, OutOfRangeInput


class Prediction(NamedTuple):
    forecasted_issuance: int
    target_difference: int
    new_mint_rate_gwei: float
    percent_change_in_rate: float

    def to_json(self):
        return self._asdict()


def _require_non_negative(name, value):
    if value < 0:
        raise OutOfRangeInput(f"{name} must be non-negative, got {value}")


def _as_number(value: Fraction):
    if value.denominator == 1:
        return value.numerator
    return float(value)


def forecast_issuance(minted_so_far, blocks_elapsed: int, period_length_blocks: int = PERIOD_LENGTH_BLOCKS) -> int:
    """
    Extrapolate the period's total issuance assuming the current pace holds.
    """
    _require_non_negative("Minted FCT", minted_so_far)
    _require_non_negative("Blocks elapsed", blocks_elapsed)
    if blocks_elapsed == 0:
        raise DivisionByZero("Cannot forecast issuance with zero blocks elapsed")

    return round_half_up(Fraction(minted_so_far) / blocks_elapsed * period_length_blocks)


def forecast_mint_rate(
    current_rate_gwei,
    target_fct: int,
    forecasted_issuance: int,
    max_rate_gwei=MAX_MINT_RATE_GWEI,
    min_multiplier=MIN_RATE_MULTIPLIER,
    max_multiplier=MAX_RATE_MULTIPLIER,
):
    """
    Predict the rate the protocol will set at the end of the period.

    The rate moves inversely with forecast / target, then is clamped to
    [round(rate * min_multiplier), min(max_rate_gwei, rate * max_multiplier)].
    """
    _require_non_negative("Mint rate", current_rate_gwei)
    _require_non_negative("Target FCT", target_fct)
    _require_non_negative("Forecasted issuance", forecasted_issuance)
    if forecasted_issuance == 0:
        raise DivisionByZero("Cannot forecast mint rate from a zero issuance forecast")

    current = Fraction(current_rate_gwei)
    raw = round_half_up(current * target_fct / forecasted_issuance)

    upper_bound = min(Fraction(max_rate_gwei), current * Fraction(max_multiplier))
    lower_bound = round_half_up(current * Fraction(min_multiplier))

    return _as_number(Fraction(min(max(raw, lower_bound), upper_bound)))


def assemble_prediction(period: AdjustmentPeriod, minted_so_far, current_rate_gwei, new_rate_gwei) -> Prediction:
    _require_non_negative("Mint rate", current_rate_gwei)
    if current_rate_gwei == 0:
        raise DivisionByZero("Cannot compute a rate change from a zero mint rate")

    period_length_blocks = period.end_block - period.start_block + 1
    forecasted = forecast_issuance(minted_so_far, period.blocks_elapsed, period_length_blocks)
    change = (Fraction(new_rate_gwei) - Fraction(current_rate_gwei)) / Fraction(current_rate_gwei) * 100

    return Prediction(
        forecasted_issuance=forecasted,
        target_difference=period.target_fct - forecasted,
        new_mint_rate_gwei=new_rate_gwei,
        percent_change_in_rate=float(change),
    )
