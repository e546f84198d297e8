"""Chain definitions for the supported Sonic networks.

Chains are looked up by RPC URL only; parameters are never discovered from
the endpoint itself.
"""

from __future__ import annotations

from dataclasses import dataclass

from sonic_plugin.errors import UnsupportedChainError

MAINNET_RPC_URL = "https://rpc.soniclabs.com"
TESTNET_RPC_URL = "https://rpc.blaze.soniclabs.com"


@dataclass(frozen=True)
class Chain:
    """An EVM-compatible Sonic network."""

    name: str | None
    chain_id: int
    rpc_url: str
    native_currency_name: str
    native_symbol: str
    explorer_url: str


CHAINS: dict[str, Chain] = {
    MAINNET_RPC_URL: Chain(
        name="Sonic",
        chain_id=146,
        rpc_url=MAINNET_RPC_URL,
        native_currency_name="Sonic",
        native_symbol="S",
        explorer_url="https://sonicscan.org",
    ),
    TESTNET_RPC_URL: Chain(
        name="Sonic Blaze Testnet",
        chain_id=57054,
        rpc_url=TESTNET_RPC_URL,
        native_currency_name="Sonic",
        native_symbol="S",
        explorer_url="https://testnet.sonicscan.org",
    ),
}


def resolve_chain(rpc_url: str) -> Chain:
    """Get a chain by RPC URL. Raises ``UnsupportedChainError`` if not registered."""
    key = (rpc_url or "").strip()
    if key not in CHAINS:
        raise UnsupportedChainError(rpc_url, list_rpc_urls())
    return CHAINS[key]


def list_rpc_urls() -> list[str]:
    """Return the RPC URLs of all supported chains."""
    return list(CHAINS.keys())
