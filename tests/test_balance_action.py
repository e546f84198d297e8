"""Tests for the GET_BALANCE action."""

import pytest

from conftest import RECIPIENT, WALLET_ADDRESS
from sonic_plugin.actions.balance import GetBalanceAction
from sonic_plugin.config import SonicSettings
from sonic_plugin.requests import MISSING_ADDRESS_MESSAGE
from sonic_plugin.runtime import BALANCE_TEMPLATE_ID


@pytest.fixture
def action(settings, extractor, wallet_factory, reader_factory):
    return GetBalanceAction(
        settings, extractor, wallet_factory=wallet_factory, reader_factory=reader_factory
    )


class TestValidate:
    @pytest.mark.asyncio
    async def test_valid_wallet(self, action, runtime):
        assert await action.validate(runtime, {}) is True

    @pytest.mark.asyncio
    async def test_missing_key(self, keyless_settings, extractor, runtime):
        action = GetBalanceAction(keyless_settings, extractor)
        assert await action.validate(runtime, {}) is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "values",
        [
            {"SONIC_WALLET_PRIVATE_KEY": "not-a-key"},
            {"SONIC_WALLET_PRIVATE_KEY": "11" * 32, "SONIC_RPC_URL": "https://polygon-rpc.com"},
        ],
    )
    async def test_unbuildable_wallet(self, values, extractor, runtime):
        action = GetBalanceAction(SonicSettings.from_mapping(values), extractor)
        assert await action.validate(runtime, {}) is False
        extractor.extract.assert_not_awaited()


class TestMissingAddress:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw",
        [
            {"address": ""},
            {"address": "{{walletAddress}}"},
            {"address": "  "},
            {"address": None},
            {"address": "null"},
            {},
            {"address": 42},
        ],
    )
    async def test_rejected_without_rpc_call(self, action, runtime, extractor, callback, w3, raw):
        extractor.extract.return_value = raw

        assert await action.handler(runtime, {}, None, {}, callback) is False

        callback.assert_called_once_with(
            {
                "text": MISSING_ADDRESS_MESSAGE,
                "content": {"error": "Missing wallet address"},
            }
        )
        w3.eth.get_balance.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_address(self, action, runtime, extractor, callback, w3):
        extractor.extract.return_value = {"address": "B62qkGSBuLmqYApYoWTmAzUtwFVx6Fe9ZStJVPzCwLjWZ5NQDYTiqEU"}
        assert await action.handler(runtime, {}, None, {}, callback) is False
        assert callback.call_args.args[0]["content"] == {"error": "Invalid wallet address"}
        w3.eth.get_balance.assert_not_awaited()


class TestQuery:
    @pytest.mark.asyncio
    async def test_own_wallet(self, action, runtime, extractor, callback, w3):
        extractor.extract.return_value = {"address": WALLET_ADDRESS.lower()}

        assert await action.handler(runtime, {}, None, {}, callback) is True

        extractor.extract.assert_awaited_once_with({"recentMessages": "composed"}, BALANCE_TEMPLATE_ID)
        w3.eth.get_balance.assert_awaited_once_with(WALLET_ADDRESS)
        payload = callback.call_args.args[0]
        assert payload["content"] == {
            "address": WALLET_ADDRESS,
            "balance": "1.0",
            "network": "Sonic Blaze Testnet",
        }
        assert "Balance: 1.0 S" in payload["text"]
        assert "Network: Sonic Blaze Testnet" in payload["text"]

    @pytest.mark.asyncio
    async def test_other_address_needs_no_key(self, keyless_settings, extractor, runtime, callback, w3, reader_factory):
        action = GetBalanceAction(keyless_settings, extractor, reader_factory=reader_factory)
        extractor.extract.return_value = {"address": RECIPIENT}

        assert await action.handler(runtime, {}, None, {}, callback) is True

        w3.eth.get_balance.assert_awaited_once_with(RECIPIENT)
        assert callback.call_args.args[0]["content"] == {
            "address": RECIPIENT,
            "balance": "1.0",
            "network": "Sonic",
        }

    @pytest.mark.asyncio
    async def test_compact_variant(self, settings, extractor, runtime, callback, wallet_factory, reader_factory):
        action = GetBalanceAction(
            settings,
            extractor,
            detailed=False,
            wallet_factory=wallet_factory,
            reader_factory=reader_factory,
        )
        extractor.extract.return_value = {"address": RECIPIENT}

        assert await action.handler(runtime, {}, None, {}, callback) is True

        callback.assert_called_once_with({"text": "Balance: 1.0 S", "content": {"balance": "1.0"}})

    @pytest.mark.asyncio
    async def test_rpc_failure(self, action, runtime, extractor, callback, w3):
        w3.eth.get_balance.side_effect = ConnectionError("rpc unreachable")
        extractor.extract.return_value = {"address": RECIPIENT}

        assert await action.handler(runtime, {}, None, {}, callback) is False

        payload = callback.call_args.args[0]
        assert payload["text"].startswith("Error getting balance: Failed to fetch balance")
        assert "rpc unreachable" in payload["content"]["error"]

    @pytest.mark.asyncio
    async def test_zero_balance(self, action, runtime, extractor, callback, w3):
        w3.eth.get_balance.return_value = 0
        extractor.extract.return_value = {"address": RECIPIENT}
        assert await action.handler(runtime, {}, None, {}, callback) is True
        assert callback.call_args.args[0]["content"]["balance"] == "0.0"
