"""
Pytest fixtures for the Sonic plugin tests.

The web3 client, host runtime and intent extractor are all replaced with
mocks; signing uses a throwaway key so no test touches the network.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from eth_account import Account
from hexbytes import HexBytes
from web3 import Web3

from sonic_plugin.config import SonicSettings
from sonic_plugin.wallet.chains import MAINNET_RPC_URL, TESTNET_RPC_URL
from sonic_plugin.wallet.manager import SonicChainReader, SonicWalletManager

PRIVATE_KEY = "0x" + "11" * 32
WALLET_ADDRESS = Account.from_key(PRIVATE_KEY).address
RECIPIENT = Web3.to_checksum_address("0x5c951583ceb79828b1fab7257fe497a9dc5896e6")
TX_HASH = HexBytes(b"\xab" * 32)
ONE_S = 10**18


class _Awaitable:
    """Stands in for awaitable properties such as ``w3.eth.gas_price``."""

    def __init__(self, value):
        self.value = value

    async def _get(self):
        return self.value

    def __await__(self):
        return self._get().__await__()


def make_w3(
    balance: int = ONE_S,
    base_fee: int | None = 10**9,
    receipt_status: int = 1,
) -> Mock:
    """Build a mock ``AsyncWeb3`` exposing the ``eth`` calls the wallet uses."""
    eth = Mock()
    eth.get_balance = AsyncMock(return_value=balance)
    eth.get_transaction_count = AsyncMock(return_value=7)
    block = {"number": 100}
    if base_fee is not None:
        block["baseFeePerGas"] = base_fee
    eth.get_block = AsyncMock(return_value=block)
    eth.estimate_gas = AsyncMock(return_value=21000)
    eth.send_raw_transaction = AsyncMock(return_value=TX_HASH)
    eth.wait_for_transaction_receipt = AsyncMock(
        return_value={"status": receipt_status, "blockNumber": 101}
    )
    eth.gas_price = _Awaitable(2 * 10**9)
    w3 = Mock()
    w3.eth = eth
    return w3


@pytest.fixture
def w3():
    return make_w3()


@pytest.fixture
def settings():
    return SonicSettings.from_mapping(
        {
            "SONIC_WALLET_PRIVATE_KEY": PRIVATE_KEY,
            "SONIC_RPC_URL": TESTNET_RPC_URL,
        }
    )


@pytest.fixture
def keyless_settings():
    return SonicSettings.from_mapping({"SONIC_RPC_URL": MAINNET_RPC_URL})


@pytest.fixture
def wallet_factory(w3):
    """Factory handing every action a wallet wired to the mock client."""

    def _factory(config, **kwargs):
        return SonicWalletManager(config, w3=w3, **kwargs)

    return _factory


@pytest.fixture
def reader_factory(w3):
    def _factory(rpc_url):
        return SonicChainReader.from_rpc_url(rpc_url, w3=w3)

    return _factory


@pytest.fixture
def runtime():
    rt = Mock()
    rt.compose_state = AsyncMock(return_value={"recentMessages": "composed"})
    rt.update_recent_message_state = AsyncMock(return_value={"recentMessages": "updated"})
    rt.get_setting = Mock(return_value=None)
    return rt


@pytest.fixture
def extractor():
    ext = Mock()
    ext.extract = AsyncMock(return_value={})
    return ext


@pytest.fixture
def callback():
    return Mock()
