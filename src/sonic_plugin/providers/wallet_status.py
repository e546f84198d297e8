"""Wallet status block injected into the agent's context."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from sonic_plugin.config import SonicSettings, WalletConfig
from sonic_plugin.runtime import AgentRuntime, Memory, State
from sonic_plugin.wallet.manager import SonicWalletManager

logger = logging.getLogger("sonic_plugin.providers.wallet_status")

_RULE = "-" * 21


class SonicWalletStatusProvider:
    """Renders address, balance and network of the plugin wallet.

    :meth:`get` never raises; any failure is rendered as an error block so
    context assembly in the host is never interrupted.
    """

    name = "SONIC_WALLET_STATUS"

    def __init__(
        self,
        settings: SonicSettings,
        wallet_factory: Callable[[WalletConfig], SonicWalletManager] | None = None,
    ) -> None:
        self.settings = settings
        self._wallet_factory = wallet_factory or SonicWalletManager

    async def get(self, runtime: AgentRuntime, message: Memory, state: State | None = None) -> str:
        try:
            wallet = self._wallet_factory(self.settings.wallet_config())
        except Exception as exc:
            logger.error(f"Sonic wallet initialization failed: {exc}")
            return "\n".join(
                [
                    "Sonic Wallet Error:",
                    _RULE,
                    "Unable to initialize wallet.",
                    f"Error: {exc}",
                    "Please check your wallet configuration:",
                    "- Ensure SONIC_WALLET_PRIVATE_KEY is configured",
                    "- Verify the private key format is correct",
                    "- Check RPC URL configuration",
                    _RULE,
                ]
            )

        async def _address() -> str:
            return wallet.address

        try:
            address, balance = await asyncio.gather(_address(), wallet.balance())
        except Exception as exc:
            logger.error(f"Sonic wallet operation failed: {exc}")
            return "\n".join(
                [
                    "Sonic Wallet Error:",
                    _RULE,
                    "Unable to access wallet information.",
                    f"Error: {exc}",
                    "Please check your wallet configuration and try again.",
                    _RULE,
                ]
            )

        network = wallet.network()
        logger.info(f"Sonic wallet status: {address} {balance} S on {network}")
        return "\n".join(
            [
                "Sonic Wallet Status:",
                _RULE,
                f"Address: {address}",
                f"Balance: {balance} {wallet.chain.native_symbol}",
                f"Network: {network}",
                _RULE,
            ]
        )
