# Chain time
PERIOD_LENGTH_BLOCKS = 10_000

# Coin denomination
COIN_NAME = "FCT"
WEI_PER_GWEI = 10 ** 9
WEI_PER_FCT = 10 ** 18
GWEI_DECIMALS = 9

# Monetary policy
# Target issuance per adjustment period, halved every BLOCKS_PER_HALVING blocks
INITIAL_TARGET_FCT = 400_000
BLOCKS_PER_HALVING = 2_630_000

# Mint rate bounds (gwei). A single adjustment may at most halve or double the rate.
MAX_MINT_RATE_GWEI = 10_000_000
MIN_RATE_MULTIPLIER = 0.5
MAX_RATE_MULTIPLIER = 2.0

# Upstream sources
EXPLORER_URL = "https://explorer.facet.org"
EXPLORER_BLOCKS_PATH = "/api/v2/main-page/blocks"
RPC_URL = "https://mainnet.facet.org/"
MINT_CONTRACT_ADDRESS = "0x4200000000000000000000000000000000000015"
MINT_PERIOD_GAS_SIGNATURE = "fctMintPeriodL1DataGas()"
MINT_RATE_SIGNATURE = "fctMintRate()"
# keccak-256 selectors of the getters above
MINT_SELECTORS = {
    MINT_PERIOD_GAS_SIGNATURE: "0x6e69101b",
    MINT_RATE_SIGNATURE: "0x14ea9f1f",
}
REQUEST_TIMEOUT_SECONDS = 10

# HTTP
API_PORT = 5000

UPSTREAM_ERROR_MESSAGE = "Failed to fetch data. Please try again."
