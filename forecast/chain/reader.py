import itertools
import threading
import time
from typing import NamedTuple

import requests

from forecast.adjustment.forecaster import ChainSnapshot
from forecast.chain.units import minted_fct, mint_rate_gwei, wei_to_gwei
from forecast.config import (
    EXPLORER_URL,
    EXPLORER_BLOCKS_PATH,
    RPC_URL,
    MINT_CONTRACT_ADDRESS,
    MINT_PERIOD_GAS_SIGNATURE,
    MINT_RATE_SIGNATURE,
    MINT_SELECTORS,
    REQUEST_TIMEOUT_SECONDS,
)
from forecast.errors import ForecastError, UpstreamUnavailable
from forecast.util.log import log_debug, log_info


class MintState(NamedTuple):
    period_l1_data_gas: int
    mint_rate_wei: int


class ChainReader:
    """
    The two chain reads a forecast needs. Implementations raise
    UpstreamUnavailable when the data cannot be fetched or is malformed.
    """

    def latest_block_height(self) -> int:
        raise NotImplementedError

    def mint_state(self) -> MintState:
        raise NotImplementedError


def _parse_uint(value, label: str) -> int:
    if not isinstance(value, str) or not value.startswith("0x") or len(value) <= 2:
        raise UpstreamUnavailable(f"Invalid {label}: {value!r}")
    try:
        return int(value, 16)
    except ValueError:
        raise UpstreamUnavailable(f"Invalid {label}: {value!r}")


class FacetChainReader(ChainReader):
    """
    Reads the block height from the Facet explorer API and the mint counters
    from the L1 block predeploy over JSON-RPC.
    """

    def __init__(
        self,
        explorer_url: str = EXPLORER_URL,
        rpc_url: str = RPC_URL,
        contract_address: str = MINT_CONTRACT_ADDRESS,
        session=None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        selectors=None,
    ):
        self.explorer_url = explorer_url.rstrip("/")
        self.rpc_url = rpc_url
        self.contract_address = contract_address
        self.session = session or requests.Session()
        self.timeout = timeout
        # signature -> 4-byte selector; unknown signatures are resolved via web3_sha3
        self.selectors = dict(MINT_SELECTORS if selectors is None else selectors)
        self._request_ids = itertools.count(1)

    def latest_block_height(self) -> int:
        url = f"{self.explorer_url}{EXPLORER_BLOCKS_PATH}"
        try:
            res = self.session.get(url, timeout=self.timeout)
            res.raise_for_status()
            blocks = res.json()
        except (requests.RequestException, ValueError) as exc:
            raise UpstreamUnavailable(f"Explorer request failed: {exc}") from exc

        try:
            height = blocks[0]["height"]
        except (TypeError, KeyError, IndexError):
            raise UpstreamUnavailable("Explorer returned no blocks")

        if isinstance(height, bool):
            raise UpstreamUnavailable(f"Invalid block height: {height!r}")
        try:
            return int(str(height).strip(), 10)
        except ValueError:
            raise UpstreamUnavailable(f"Invalid block height: {height!r}")

    def rpc_call(self, method: str, params=None):
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params or [],
        }
        try:
            res = self.session.post(self.rpc_url, json=payload, timeout=self.timeout)
            res.raise_for_status()
            reply = res.json()
        except (requests.RequestException, ValueError) as exc:
            raise UpstreamUnavailable(f"RPC {method} failed: {exc}") from exc

        if not isinstance(reply, dict):
            raise UpstreamUnavailable(f"RPC {method} returned a malformed reply")
        if reply.get("error"):
            raise UpstreamUnavailable(f"RPC {method} error: {reply['error']}")
        if reply.get("result") is None:
            raise UpstreamUnavailable(f"RPC {method} returned no result")
        return reply["result"]

    def selector(self, signature: str) -> str:
        """
        4-byte function selector (keccak-256 of the signature), as 0x-prefixed hex.
        """
        if signature not in self.selectors:
            digest = self.rpc_call("web3_sha3", ["0x" + signature.encode("utf-8").hex()])
            if not isinstance(digest, str) or len(digest) != 66:
                raise UpstreamUnavailable(f"Invalid keccak digest for {signature}: {digest!r}")
            self.selectors[signature] = digest[:10].lower()
            log_debug(f"[CHAIN] Resolved selector {signature} -> {self.selectors[signature]}")
        return self.selectors[signature]

    def call_uint(self, signature: str) -> int:
        call = {"to": self.contract_address, "data": self.selector(signature)}
        return _parse_uint(self.rpc_call("eth_call", [call, "latest"]), signature)

    def mint_state(self) -> MintState:
        return MintState(
            period_l1_data_gas=self.call_uint(MINT_PERIOD_GAS_SIGNATURE),
            mint_rate_wei=self.call_uint(MINT_RATE_SIGNATURE),
        )


def read_snapshot(reader: ChainReader, timeout: float = REQUEST_TIMEOUT_SECONDS * 2) -> ChainSnapshot:
    """
    Issue both chain reads concurrently and convert them into a validated snapshot.
    """
    results = {}
    errors = {}

    def _run(name, read):
        try:
            results[name] = read()
        except Exception as exc:
            errors[name] = exc

    threads = [
        threading.Thread(target=_run, args=("block height", reader.latest_block_height), daemon=True),
        threading.Thread(target=_run, args=("mint state", reader.mint_state), daemon=True),
    ]
    for thread in threads:
        thread.start()

    deadline = time.monotonic() + timeout
    for thread in threads:
        thread.join(max(0.0, deadline - time.monotonic()))
        if thread.is_alive():
            raise UpstreamUnavailable(f"Timed out after {timeout}s waiting for chain data")

    for name in ("block height", "mint state"):
        exc = errors.get(name)
        if exc is None:
            continue
        if isinstance(exc, ForecastError):
            raise exc
        raise UpstreamUnavailable(f"Could not read {name}: {exc}") from exc

    height = results["block height"]
    state = results["mint state"]
    if not isinstance(height, int) or isinstance(height, bool):
        raise UpstreamUnavailable(f"Invalid block height: {height!r}")

    log_debug(
        f"[CHAIN] Raw mint state l1_data_gas={state.period_l1_data_gas} "
        f"rate={wei_to_gwei(state.mint_rate_wei)}gwei"
    )
    snapshot = ChainSnapshot.create(
        height,
        minted_fct(state.period_l1_data_gas, state.mint_rate_wei),
        mint_rate_gwei(state.mint_rate_wei),
    )
    log_info(
        f"[CHAIN] Snapshot height={snapshot.block_height} "
        f"minted={snapshot.period_minted_fct} rate={snapshot.current_mint_rate_gwei}gwei"
    )
    return snapshot
