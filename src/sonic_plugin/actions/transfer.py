"""TRANSFER_TOKEN action: send native S to an address named in conversation."""

from __future__ import annotations

import functools
import logging
from typing import Any

from sonic_plugin.actions.base import Action, WalletFactory
from sonic_plugin.config import SonicSettings
from sonic_plugin.errors import ExtractionError, SonicPluginError
from sonic_plugin.models import TransferReceipt, TransferRequest
from sonic_plugin.requests import ShapeError, decode_transfer_request
from sonic_plugin.runtime import (
    TRANSFER_TEMPLATE_ID,
    AgentRuntime,
    HandlerCallback,
    IntentExtractor,
    Memory,
    State,
    emit,
    prepare_state,
)
from sonic_plugin.wallet.manager import SonicWalletManager
from sonic_plugin.wallet.units import format_native

logger = logging.getLogger("sonic_plugin.actions.transfer")


def format_receipt(receipt: TransferReceipt, symbol: str = "S") -> str:
    return "\n".join(
        [
            "Transaction Receipt",
            "------------------------",
            "Status: " + ("Confirmed" if receipt.confirmed else "Submitted"),
            f"Amount: {format_native(receipt.amount_wei)} {symbol}",
            f"To: {receipt.to_address}",
            f"From: {receipt.from_address}",
            f"Transaction Hash: {receipt.transaction_hash}",
            f"Explorer: {receipt.explorer_url}",
            "------------------------",
        ]
    )


class TransferTokenAction(Action):
    """Extracts a recipient and amount, then submits one native transfer.

    Each invocation makes at most one submission and does not deduplicate:
    two invocations with the same extracted fields send twice. A failed
    submission is reported, never retried.

    Parameters
    ----------
    settings:
        Plugin settings; a private key is required.
    extractor:
        Turns conversation state into raw transfer fields.
    wait_for_confirmation:
        Wait for the transaction to be mined before reporting.
    wallet_factory:
        Builds the wallet handle; defaults to :class:`SonicWalletManager`.
    """

    name = "TRANSFER_TOKEN"
    description = "Transfer SONIC token to a specific address"
    similes = ("TRANSFER_TOKENS", "SEND_TOKENS", "SEND_TOKEN", "SEND_TOKENS_TO_ADDRESS")
    examples = [
        [
            {
                "user": "{{user1}}",
                "content": {
                    "text": "Transfer 0.1 S token to 0x5C951583CEb79828b1fAB7257FE497A9Dc5896e6",
                    "action": "TRANSFER_TOKEN",
                },
            },
            {
                "user": "{{agent}}",
                "content": {
                    "text": "I'll send 0.1 S to 0x5C951583CEb79828b1fAB7257FE497A9Dc5896e6",
                    "action": "TRANSFER_TOKEN",
                },
            },
        ],
        [
            {
                "user": "{{user1}}",
                "content": {
                    "text": "I want to transfer 1 SONIC token to 0x5C951583CEb79828b1fAB7257FE497A9Dc5896e6",
                },
            },
            {
                "user": "{{agent}}",
                "content": {
                    "text": "Sending 1 S to 0x5C951583CEb79828b1fAB7257FE497A9Dc5896e6",
                    "action": "TRANSFER_TOKEN",
                },
            },
        ],
    ]

    def __init__(
        self,
        settings: SonicSettings,
        extractor: IntentExtractor,
        *,
        wait_for_confirmation: bool = False,
        wallet_factory: WalletFactory | None = None,
    ) -> None:
        if wallet_factory is None:
            wallet_factory = functools.partial(
                SonicWalletManager, wait_for_confirmation=wait_for_confirmation
            )
        super().__init__(settings, extractor, wallet_factory)
        self.wait_for_confirmation = wait_for_confirmation

    async def validate(self, runtime: AgentRuntime, message: Memory) -> bool:
        if not self.settings.has_private_key:
            logger.error("Validation failed: missing SONIC_WALLET_PRIVATE_KEY")
            return False
        return True

    async def extract_request(self, state: State) -> TransferRequest:
        """Ask the extractor for transfer fields and decode them."""
        try:
            raw = await self.extractor.extract(state, TRANSFER_TEMPLATE_ID)
        except Exception as exc:
            raise ExtractionError(f"Could not understand the transfer request: {exc}", exc) from exc

        decoded = decode_transfer_request(raw)
        if isinstance(decoded, ShapeError):
            logger.warning(f"Rejected transfer fields: {decoded.message}")
            raise decoded.to_exception()
        return decoded.value

    async def handler(
        self,
        runtime: AgentRuntime,
        message: Memory,
        state: State | None = None,
        options: dict[str, Any] | None = None,
        callback: HandlerCallback | None = None,
    ) -> bool:
        logger.info("Transferring token")
        try:
            current = await prepare_state(runtime, message, state)
            wallet = self.build_wallet()
            request = await self.extract_request(current)
            receipt = await wallet.send_native(
                request.recipient_address, request.amount, request.extra_data
            )
        except SonicPluginError as exc:
            logger.error(f"Transfer failed: {exc}")
            return await self._fail(callback, f"Transaction failed: {exc}", exc)
        except Exception as exc:
            logger.exception("Transfer failed unexpectedly")
            return await self._fail(callback, f"Transaction failed: {exc}", str(exc) or type(exc).__name__)

        logger.info(f"Transfer complete: {receipt.transaction_hash}")
        await emit(
            callback,
            format_receipt(receipt, wallet.chain.native_symbol),
            {
                "success": True,
                "signature": receipt.transaction_hash,
                "amount": format_native(receipt.amount_wei),
                "recipient": receipt.to_address,
                "explorerTxnUrl": receipt.explorer_url,
            },
        )
        return True
