"""Unit tests for wallet clients."""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from swipe_trader.wallet.client import (
    HttpWalletClient, InMemoryWalletClient, WalletClientError,
)


@pytest.fixture
def ledger():
    return InMemoryWalletClient("alice")


class TestInMemoryWalletClient:
    @pytest.mark.asyncio
    async def test_requires_identity(self):
        client = InMemoryWalletClient()
        assert not client.is_authenticated()
        with pytest.raises(WalletClientError):
            await client.get_balance()

    @pytest.mark.asyncio
    async def test_deposit_and_swap(self, ledger):
        await ledger.deposit(1000)

        result = await ledger.swap_base_to_token("DOGE", 300)

        assert result.success
        assert result.new_balance == 700
        assert result.new_token_balance == 300
        portfolio = await ledger.get_portfolio()
        assert portfolio.total_deposits == 1000
        assert portfolio.total_swaps == 300
        assert portfolio.token_balances == [("DOGE", 300)]

    @pytest.mark.asyncio
    async def test_insufficient_balance(self, ledger):
        await ledger.deposit(100)

        result = await ledger.swap_base_to_token("DOGE", 300)

        assert not result.success
        assert result.message == "Insufficient ICP balance. Available: 100, Required: 300"
        assert await ledger.get_balance() == 100

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["deposit", "swap"])
    async def test_zero_amount_rejected(self, ledger, method):
        if method == "deposit":
            result = await ledger.deposit(0)
        else:
            result = await ledger.swap_base_to_token("DOGE", 0)
        assert not result.success
        assert "greater than 0" in result.message

    @pytest.mark.asyncio
    async def test_sell_back(self, ledger):
        await ledger.deposit(500)
        await ledger.swap_base_to_token("PEPE", 200)

        partial = await ledger.swap_token_to_base("PEPE", 50)
        assert partial.new_balance == 350
        assert partial.new_token_balance == 150

        await ledger.swap_token_to_base("PEPE", 150)
        portfolio = await ledger.get_portfolio()
        assert portfolio.token_balances == []
        assert portfolio.base_balance == 500

    @pytest.mark.asyncio
    async def test_sell_more_than_held(self, ledger):
        result = await ledger.swap_token_to_base("PEPE", 1)
        assert not result.success
        assert result.message.startswith("Insufficient PEPE token balance")

    @pytest.mark.asyncio
    async def test_accounts_are_per_principal(self, ledger):
        await ledger.set_default_trade_size(250)
        await ledger.deposit(1000)

        ledger.login("bob")
        assert await ledger.get_balance() == 0
        assert await ledger.get_default_trade_size() == 0

        ledger.login("alice")
        assert await ledger.get_balance() == 1000
        assert await ledger.get_default_trade_size() == 250

    @pytest.mark.asyncio
    async def test_logout(self, ledger):
        ledger.logout()
        assert ledger.principal is None
        with pytest.raises(WalletClientError):
            await ledger.deposit(10)


@pytest.fixture
def http_client():
    return HttpWalletClient({
        'base_url': 'http://wallet.test/',
        'api_token': 'secret',
        'principal': 'alice',
    })


class TestHttpWalletClient:
    def test_authentication_needs_token_and_principal(self, http_client):
        assert http_client.is_authenticated()
        assert http_client.base_url == 'http://wallet.test'
        assert not HttpWalletClient({'principal': 'alice'}).is_authenticated()
        assert not HttpWalletClient({'api_token': 'secret'}).is_authenticated()

    @pytest.mark.asyncio
    async def test_get_balance(self, http_client):
        http_client._request = AsyncMock(return_value={'balance': '1200'})

        assert await http_client.get_balance() == 1200
        http_client._request.assert_awaited_once_with("GET", "/balance")

    @pytest.mark.asyncio
    async def test_missing_amount_raises(self, http_client):
        http_client._request = AsyncMock(return_value={'unexpected': True})
        with pytest.raises(WalletClientError):
            await http_client.get_default_trade_size()

    @pytest.mark.asyncio
    async def test_swap_accepts_legacy_balance_key(self, http_client):
        http_client._request = AsyncMock(return_value={
            'success': True, 'new_icp_balance': 480, 'new_token_balance': 20,
        })

        result = await http_client.swap_base_to_token("DOGE", 20)

        assert result.success
        assert result.new_balance == 480
        http_client._request.assert_awaited_once_with(
            "POST", "/swaps/base-to-token", {"symbol": "DOGE", "amount": 20}
        )

    @pytest.mark.asyncio
    async def test_malformed_trade_result_raises(self, http_client):
        http_client._request = AsyncMock(return_value={'success': True})
        with pytest.raises(WalletClientError):
            await http_client.swap_base_to_token("DOGE", 20)

    @pytest.mark.asyncio
    async def test_portfolio(self, http_client):
        http_client._request = AsyncMock(return_value={
            'base_balance': 900,
            'default_trade_size': 100,
            'token_balances': [['DOGE', 100]],
        })

        portfolio = await http_client.get_portfolio()

        assert portfolio.token_balance("DOGE") == 100

    @pytest.mark.asyncio
    async def test_timeout_becomes_client_error(self, http_client):
        context = MagicMock()
        context.__aenter__ = AsyncMock(side_effect=asyncio.TimeoutError())
        context.__aexit__ = AsyncMock(return_value=False)
        session = MagicMock()
        session.request.return_value = context
        http_client._get_session = AsyncMock(return_value=session)

        with pytest.raises(WalletClientError, match="timed out"):
            await http_client.get_portfolio()

    @pytest.mark.asyncio
    async def test_close_without_session(self, http_client):
        await http_client.close()
