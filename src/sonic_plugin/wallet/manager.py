"""Wallet manager and read-only chain client for Sonic networks."""

from __future__ import annotations

import logging
import re

from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from sonic_plugin.config import WalletConfig
from sonic_plugin.errors import (
    ConfigurationError,
    KeyFormatError,
    RpcQueryError,
    TransferError,
)
from sonic_plugin.models import TransferReceipt
from sonic_plugin.wallet.chains import Chain, resolve_chain
from sonic_plugin.wallet.units import format_native, parse_native

logger = logging.getLogger("sonic_plugin.wallet.manager")

UNKNOWN_NETWORK = "Unknown Network"

_PRIVATE_KEY_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def normalize_private_key(private_key: str) -> str:
    """Return the key with a ``0x`` prefix, or raise ``KeyFormatError``."""
    key = private_key.strip()
    if not key.startswith("0x"):
        key = "0x" + key
    if not _PRIVATE_KEY_RE.match(key):
        raise KeyFormatError("Private key must be a 32-byte hex string")
    return key


def _build_web3(chain: Chain) -> AsyncWeb3:
    return AsyncWeb3(AsyncHTTPProvider(chain.rpc_url))


class SonicChainReader:
    """Key-less, read-only access to one Sonic network."""

    def __init__(self, chain: Chain, *, w3: AsyncWeb3 | None = None) -> None:
        self.chain = chain
        self.w3 = w3 if w3 is not None else _build_web3(chain)

    @classmethod
    def from_rpc_url(cls, rpc_url: str, *, w3: AsyncWeb3 | None = None) -> SonicChainReader:
        return cls(resolve_chain(rpc_url), w3=w3)

    def network(self) -> str:
        """Human-readable network name."""
        return self.chain.name or UNKNOWN_NETWORK

    async def balance_of(self, address: str) -> str:
        """Get the native balance of *address* in human-readable units (e.g. S)."""
        try:
            checksum = Web3.to_checksum_address(address)
            balance_wei = await self.w3.eth.get_balance(checksum)
        except Exception as exc:
            raise RpcQueryError(f"Failed to fetch balance: {exc}", exc) from exc
        return format_native(balance_wei)


class SonicWalletManager:
    """Owns a signing key and exposes balance and transfer operations.

    Construction is all-or-nothing: an invalid key, an unsupported RPC URL or
    a client creation failure raises before any object is returned.

    Parameters
    ----------
    config:
        Private key and RPC URL.
    wait_for_confirmation:
        If *True*, :meth:`send_native` waits for the transaction to be mined
        before returning.
    w3:
        Pre-built client, mainly for tests.
    """

    def __init__(
        self,
        config: WalletConfig,
        *,
        wait_for_confirmation: bool = False,
        w3: AsyncWeb3 | None = None,
    ) -> None:
        key = normalize_private_key(config.private_key)
        chain = resolve_chain(config.rpc_url)
        try:
            self._account = Account.from_key(key)
            self._reader = SonicChainReader(chain, w3=w3)
        except Exception as exc:
            raise ConfigurationError(f"Failed to initialize wallet: {exc}", exc) from exc
        self.chain = chain
        self.wait_for_confirmation = wait_for_confirmation

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def address(self) -> str:
        """The checksummed wallet address."""
        return self._account.address

    @property
    def reader(self) -> SonicChainReader:
        return self._reader

    @property
    def w3(self) -> AsyncWeb3:
        return self._reader.w3

    def network(self) -> str:
        return self._reader.network()

    def explorer_tx_url(self, tx_hash: str) -> str:
        return f"{self.chain.explorer_url}/tx/{tx_hash}"

    # ------------------------------------------------------------------
    # Balances
    # ------------------------------------------------------------------

    async def balance(self) -> str:
        """Get this wallet's native balance as a decimal string."""
        return await self._reader.balance_of(self.address)

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    async def send_native(
        self,
        to_address: str,
        amount: str,
        data: bytes | None = None,
    ) -> TransferReceipt:
        """Build, sign, and send a native-token transfer.

        Uses EIP-1559 fee parameters with a legacy gas price fallback.
        A failed submission is never resubmitted.
        """
        try:
            value = parse_native(amount)
            checksum_to = Web3.to_checksum_address(to_address)
        except ValueError as exc:
            raise TransferError(f"Failed to transfer tokens: {exc}", exc) from exc

        w3 = self.w3
        try:
            nonce = await w3.eth.get_transaction_count(self.address, "pending")
            tx: dict = {
                "from": self.address,
                "to": checksum_to,
                "value": value,
                "nonce": nonce,
                "chainId": self.chain.chain_id,
            }
            if data:
                tx["data"] = data

            # Try EIP-1559 first, fall back to legacy gas price
            try:
                latest = await w3.eth.get_block("latest")
                base_fee = latest.get("baseFeePerGas")
                if base_fee is None:
                    raise ValueError("No baseFeePerGas")
                max_priority = Web3.to_wei(1, "gwei")
                tx["maxFeePerGas"] = base_fee * 2 + max_priority
                tx["maxPriorityFeePerGas"] = max_priority
                tx["gas"] = await w3.eth.estimate_gas(tx)
            except Exception as exc:
                logger.debug(f"EIP-1559 fees unavailable, using legacy gas price: {exc}")
                for field in ("maxFeePerGas", "maxPriorityFeePerGas"):
                    tx.pop(field, None)
                tx["gasPrice"] = await w3.eth.gas_price
                tx["gas"] = await w3.eth.estimate_gas(tx)

            signed = self._account.sign_transaction(tx)
            raw_hash = await w3.eth.send_raw_transaction(signed.raw_transaction)
            tx_hash = Web3.to_hex(raw_hash)
            logger.info(f"Transaction submitted: {tx_hash} ({amount} S to {checksum_to})")

            confirmed = False
            if self.wait_for_confirmation:
                receipt = await w3.eth.wait_for_transaction_receipt(raw_hash)
                if receipt.get("status") != 1:
                    raise TransferError(f"Transaction {tx_hash} reverted")
                confirmed = True
                logger.info(f"Transaction {tx_hash} mined in block {receipt.get('blockNumber')}")
        except TransferError:
            raise
        except Exception as exc:
            logger.error(f"Transaction failed: {exc}")
            raise TransferError(f"Failed to transfer tokens: {exc}", exc) from exc

        return TransferReceipt(
            transaction_hash=tx_hash,
            from_address=self.address,
            to_address=checksum_to,
            amount_wei=value,
            explorer_url=self.explorer_tx_url(tx_hash),
            confirmed=confirmed,
        )
