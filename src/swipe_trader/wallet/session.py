"""Wallet session: explicit owner of the cached wallet state."""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from ..core.models import WalletState, TradeResult, Portfolio
from ..core.formatting import format_base
from .client import WalletClient, WalletClientError

logger = logging.getLogger(__name__)


class WalletSession:
    """Owns a wallet client and the session-local copy of its state.

    The cached balance is only ever overwritten with values the wallet
    service returned; it is never adjusted locally.
    """

    def __init__(self, client: WalletClient):
        """Initialize wallet session."""
        self.client = client
        self.state = WalletState(principal=client.principal)
        self._closed = False
        # Bumped whenever a trade or write lands; refreshes started earlier are stale.
        self._generation = 0
        logger.info("Wallet session initialized")

    @property
    def is_authenticated(self) -> bool:
        return not self._closed and self.client.is_authenticated()

    @property
    def closed(self) -> bool:
        return self._closed

    async def authenticate(self) -> bool:
        """Load wallet state for the current identity."""
        if not self.client.is_authenticated():
            logger.warning("Wallet client has no authenticated identity")
            self.state = WalletState()
            return False
        return await self.refresh()

    async def refresh(self) -> bool:
        """Fetch balance and default trade size. Returns False on failure."""
        if not self.is_authenticated:
            return False
        generation = self._generation
        try:
            balance, default_size = await asyncio.gather(
                self.client.get_balance(),
                self.client.get_default_trade_size(),
            )
        except Exception as e:
            logger.error(f"Error refreshing wallet state: {e}")
            return False

        if generation != self._generation:
            logger.info("Discarding wallet refresh read before a later trade")
            return False

        self.state = WalletState(
            principal=self.client.principal,
            icp_balance=int(balance),
            default_trade_size=int(default_size),
            last_refreshed=datetime.now(),
        )
        logger.info(
            f"Wallet state refreshed: balance={format_base(self.state.icp_balance)} "
            f"default={format_base(self.state.default_trade_size)}"
        )
        return True

    def apply_trade_result(self, result: TradeResult) -> int:
        """Overwrite the cached balance with the one a trade reported."""
        if result.success and result.new_balance is not None:
            previous = self.state.icp_balance
            self._generation += 1
            self.state = self.state.model_copy(update={'icp_balance': result.new_balance})
            logger.info(
                f"Balance reconciled: {format_base(previous)} -> {format_base(result.new_balance)}"
            )
        return self.state.icp_balance

    async def set_default_trade_size(self, amount: int) -> int:
        """Set the default trade size and verify it was stored."""
        if amount <= 0:
            raise ValueError("Default trade size must be greater than 0")
        await self.client.set_default_trade_size(amount)
        stored = await self.client.get_default_trade_size()
        if stored != amount:
            raise WalletClientError(
                f"Default trade size verification failed: sent {amount}, stored {stored}"
            )
        self._generation += 1
        self.state = self.state.model_copy(update={'default_trade_size': stored})
        logger.info(f"Default trade size set to {format_base(stored)}")
        return stored

    async def deposit(self, amount: int) -> TradeResult:
        """Deposit base currency and adopt the reported balance."""
        result = await self.client.deposit(amount)
        if result.success:
            self.apply_trade_result(result)
        else:
            logger.warning(f"Deposit rejected: {result.message}")
        return result

    async def sell(self, symbol: str, amount: int) -> TradeResult:
        """Swap a held token back into base currency."""
        result = await self.client.swap_token_to_base(symbol, amount)
        if result.success:
            self.apply_trade_result(result)
            logger.info(f"Sold {amount} {symbol}")
        else:
            logger.warning(f"Sell of {symbol} rejected: {result.message}")
        return result

    async def portfolio(self) -> Portfolio:
        """Fetch the portfolio and adopt its balance and default size."""
        snapshot = await self.client.get_portfolio()
        self._generation += 1
        self.state = self.state.model_copy(update={
            'icp_balance': snapshot.base_balance,
            'default_trade_size': snapshot.default_trade_size,
            'last_refreshed': datetime.now(),
        })
        return snapshot

    async def close(self):
        """Tear down the session and its client."""
        if self._closed:
            return
        self._closed = True
        await self.client.close()
        logger.info("Wallet session closed")
