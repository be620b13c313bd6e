import pytest

from forecast.chain.reader import ChainReader, MintState

WEI_PER_GWEI = 10 ** 9


class FakeReader(ChainReader):
    """
    In-memory chain reader. Values may be exceptions, which are raised instead.
    """

    def __init__(self, height=12_345, period_l1_data_gas=0, mint_rate_gwei=1000):
        self.height = height
        self.period_l1_data_gas = period_l1_data_gas
        self.mint_rate_gwei = mint_rate_gwei
        self.height_reads = 0
        self.state_reads = 0

    def latest_block_height(self):
        self.height_reads += 1
        if isinstance(self.height, Exception):
            raise self.height
        return self.height

    def mint_state(self):
        self.state_reads += 1
        if isinstance(self.period_l1_data_gas, Exception):
            raise self.period_l1_data_gas
        return MintState(self.period_l1_data_gas, self.mint_rate_gwei * WEI_PER_GWEI)


def gas_for_fct(fct, mint_rate_gwei):
    """
    L1 data gas that mints exactly `fct` whole tokens at the given rate.
    """
    return fct * 10 ** 18 // (mint_rate_gwei * WEI_PER_GWEI)


@pytest.fixture
def fake_reader():
    # 50,000 FCT minted at 1,000 gwei, 2,500 blocks into period 2
    return FakeReader(
        height=12_499,
        period_l1_data_gas=gas_for_fct(50_000, 1000),
        mint_rate_gwei=1000,
    )
