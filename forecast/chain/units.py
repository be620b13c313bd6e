from decimal import Decimal
from fractions import Fraction

from forecast.config import GWEI_DECIMALS, WEI_PER_GWEI, WEI_PER_FCT
from forecast.economics import round_half_up


def format_units(value: int, decimals: int) -> Decimal:
    """
    Scale an integer amount of the smallest unit into a unit with the given decimals,
    e.g. format_units(1_500_000_000, 9) == Decimal("1.5").
    """
    return Decimal(int(value)).scaleb(-decimals)


def wei_to_gwei(value: int) -> Decimal:
    return format_units(value, GWEI_DECIMALS)


def minted_fct(period_l1_data_gas: int, mint_rate_wei: int) -> int:
    """
    Whole FCT minted in the period: every unit of L1 data gas mints mint_rate_wei.
    """
    minted_wei = int(period_l1_data_gas) * int(mint_rate_wei)
    return round_half_up(Fraction(minted_wei, WEI_PER_FCT))


def mint_rate_gwei(mint_rate_wei: int) -> int:
    return round_half_up(Fraction(int(mint_rate_wei), WEI_PER_GWEI))
