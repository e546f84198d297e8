"""GET_BALANCE action: look up the native balance of an address."""

from __future__ import annotations

import logging
from typing import Any, Callable

from sonic_plugin.actions.base import Action, WalletFactory
from sonic_plugin.config import SonicSettings
from sonic_plugin.errors import ConfigurationError, ExtractionError, SonicPluginError
from sonic_plugin.models import BalanceQuery, BalanceResult
from sonic_plugin.requests import ShapeError, decode_balance_query
from sonic_plugin.runtime import (
    BALANCE_TEMPLATE_ID,
    AgentRuntime,
    HandlerCallback,
    IntentExtractor,
    Memory,
    State,
    emit,
    prepare_state,
)
from sonic_plugin.wallet.manager import SonicChainReader

logger = logging.getLogger("sonic_plugin.actions.balance")

ReaderFactory = Callable[[str], SonicChainReader]


class GetBalanceAction(Action):
    """Reports the balance of the address named in conversation.

    The plugin's own address is read through the wallet manager; any other
    address is read with a key-less chain reader.

    Parameters
    ----------
    detailed:
        If *True* the payload is ``{address, balance, network}``, otherwise
        just ``{balance}``.
    """

    name = "GET_BALANCE"
    description = "Get the balance of a specific address on the Sonic blockchain"
    similes = (
        "CHECK_BALANCE",
        "CHECK_BALANCE_OF",
        "CHECK_BALANCE_OF_ADDRESS",
        "LOOKUP_BALANCE",
        "LOOKUP_BALANCE_OF",
        "LOOKUP_BALANCE_OF_ADDRESS",
        "LIST_BALANCE",
        "LIST_BALANCE_OF",
        "LIST_BALANCE_OF_ADDRESS",
        "GET_BALANCE_OF",
        "GET_BALANCE_OF_ADDRESS",
        "GET_BALANCE_OF_WALLET",
        "GET_BALANCE_OF_WALLET_ADDRESS",
    )
    examples = [
        [
            {"user": "{{user1}}", "content": {"text": "Check my balance of SONIC"}},
            {
                "user": "{{agent}}",
                "content": {
                    "text": "I'll help you check your balance of SONIC",
                    "action": "GET_BALANCE",
                },
            },
        ],
        [
            {
                "user": "{{user1}}",
                "content": {
                    "text": "What is the balance of 0x5C951583CEb79828b1fAB7257FE497A9Dc5896e6?",
                },
            },
            {
                "user": "{{agent}}",
                "content": {
                    "text": "Let me look up that address on Sonic",
                    "action": "GET_BALANCE",
                },
            },
        ],
    ]

    def __init__(
        self,
        settings: SonicSettings,
        extractor: IntentExtractor,
        *,
        detailed: bool = True,
        wallet_factory: WalletFactory | None = None,
        reader_factory: ReaderFactory | None = None,
    ) -> None:
        super().__init__(settings, extractor, wallet_factory)
        self.detailed = detailed
        self._reader_factory = reader_factory or SonicChainReader.from_rpc_url

    async def validate(self, runtime: AgentRuntime, message: Memory) -> bool:
        logger.info("Validating get balance action")
        try:
            self.build_wallet()
        except SonicPluginError as exc:
            logger.error(f"Failed to initialize Sonic wallet: {exc}")
            return False
        return True

    async def extract_query(self, state: State) -> BalanceQuery:
        try:
            raw = await self.extractor.extract(state, BALANCE_TEMPLATE_ID)
        except Exception as exc:
            raise ExtractionError(f"Could not understand the balance request: {exc}", exc) from exc

        decoded = decode_balance_query(raw)
        if isinstance(decoded, ShapeError):
            logger.warning(f"Rejected balance fields: {decoded.reason}")
            raise decoded.to_exception()
        return decoded.value

    async def query(self, query: BalanceQuery) -> BalanceResult:
        """Read the balance, using the signing wallet only for its own address."""
        if self.settings.has_private_key:
            try:
                wallet = self.build_wallet()
            except ConfigurationError as exc:
                logger.warning(f"Wallet unavailable, reading balance without it: {exc}")
            else:
                if wallet.address.lower() == query.address.lower():
                    return BalanceResult(
                        address=wallet.address,
                        balance=await wallet.balance(),
                        network=wallet.network(),
                        symbol=wallet.chain.native_symbol,
                    )

        reader = self._reader_factory(self.settings.rpc_url)
        return BalanceResult(
            address=query.address,
            balance=await reader.balance_of(query.address),
            network=reader.network(),
            symbol=reader.chain.native_symbol,
        )

    async def handler(
        self,
        runtime: AgentRuntime,
        message: Memory,
        state: State | None = None,
        options: dict[str, Any] | None = None,
        callback: HandlerCallback | None = None,
    ) -> bool:
        logger.info("Getting balance")
        try:
            current = await prepare_state(runtime, message, state)
            result = await self.query(await self.extract_query(current))
        except SonicPluginError as exc:
            logger.error(f"Error getting balance: {exc}")
            text = exc.message if getattr(exc, "reason", None) else f"Error getting balance: {exc}"
            return await self._fail(callback, text, exc)
        except Exception as exc:
            logger.exception("Error getting balance")
            return await self._fail(callback, f"Error getting balance: {exc}", str(exc) or type(exc).__name__)

        if self.detailed:
            text = "\n".join(
                [
                    f"Address: {result.address}",
                    f"Balance: {result.balance} {result.symbol}",
                    f"Network: {result.network}",
                ]
            )
            content = {
                "address": result.address,
                "balance": result.balance,
                "network": result.network,
            }
        else:
            text = f"Balance: {result.balance} {result.symbol}"
            content = {"balance": result.balance}

        await emit(callback, text, content)
        return True
