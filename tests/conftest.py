"""Pytest configuration and fixtures."""

import pytest
import random

from swipe_trader.catalog.catalog import TokenCatalog
from swipe_trader.catalog.queue import CandidateQueue
from swipe_trader.core.models import Candidate, TradeResult, Portfolio, WalletState
from swipe_trader.decision.engine import SwipeDecisionEngine
from swipe_trader.notifications.channel import NotificationChannel
from swipe_trader.wallet.client import WalletClient
from swipe_trader.wallet.session import WalletSession


class FakeWalletClient(WalletClient):
    """Scriptable wallet client for tests.

    ``swap_results`` is consumed in order; an Exception entry is raised.
    """

    def __init__(self, principal="user-1", balance=1000, default_trade_size=500):
        self._principal = principal
        self.balance = balance
        self.default_trade_size = default_trade_size
        self.swap_results = []
        self.swap_calls = []
        self.sell_calls = []
        self.closed = False

    @property
    def principal(self):
        return self._principal

    async def get_balance(self):
        return self.balance

    async def get_default_trade_size(self):
        return self.default_trade_size

    async def set_default_trade_size(self, amount):
        self.default_trade_size = amount
        return amount

    async def swap_base_to_token(self, symbol, amount):
        self.swap_calls.append((symbol, amount))
        if self.swap_results:
            outcome = self.swap_results.pop(0)
        else:
            outcome = TradeResult(success=True, new_balance=self.balance - amount)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome.success:
            self.balance = outcome.new_balance
        return outcome

    async def swap_token_to_base(self, symbol, amount):
        self.sell_calls.append((symbol, amount))
        self.balance += amount
        return TradeResult(success=True, new_balance=self.balance, new_token_balance=0)

    async def get_portfolio(self):
        return Portfolio(
            base_balance=self.balance,
            default_trade_size=self.default_trade_size,
            token_balances=[("DOGE", 200)],
        )

    async def deposit(self, amount):
        self.balance += amount
        return TradeResult(success=True, new_balance=self.balance)

    async def close(self):
        self.closed = True


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_candidate(index, **overrides):
    fields = {
        "id": f"tok-{index}",
        "symbol": f"TK{index}",
        "name": f"Token {index}",
        "price": 0.01 * index,
        "price_change_percent": 1.5,
        "market_cap_usd": 1_000_000.0,
        "liquidity_usd": 50_000.0,
    }
    fields.update(overrides)
    return Candidate(**fields)


@pytest.fixture
def three_candidates():
    return [make_candidate(i) for i in range(1, 4)]


@pytest.fixture
def queue(three_candidates):
    return CandidateQueue(three_candidates, source="test")


@pytest.fixture
def fake_client():
    return FakeWalletClient()


@pytest.fixture
def session(fake_client):
    """Authenticated session with balance 1000 and default trade size 500."""
    wallet_session = WalletSession(fake_client)
    wallet_session.state = WalletState(
        principal=fake_client.principal,
        icp_balance=fake_client.balance,
        default_trade_size=fake_client.default_trade_size,
    )
    return wallet_session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def channel(clock):
    return NotificationChannel(clock=clock)


@pytest.fixture
def catalog():
    return TokenCatalog(rng=random.Random(7))


@pytest.fixture
def engine(catalog, session, channel, queue):
    """Engine with the three-candidate queue loaded and refreshes disabled."""
    swipe_engine = SwipeDecisionEngine(
        catalog, session, channel, config={'refresh_after_trade': False}
    )
    swipe_engine.load(queue)
    return swipe_engine
