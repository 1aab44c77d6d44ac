"""End-to-end swipe sessions across catalog, engine, wallet and notifications."""

import pytest
import random
from unittest.mock import AsyncMock

from swipe_trader.catalog.catalog import TokenCatalog
from swipe_trader.catalog.generator import GeminiTokenGenerator
from swipe_trader.core.enums import EngineState, NotificationKind, OriginTag, OutcomeStatus
from swipe_trader.core.models import TradeResult
from swipe_trader.decision.engine import SwipeDecisionEngine
from swipe_trader.notifications.channel import NotificationChannel
from swipe_trader.wallet.client import InMemoryWalletClient
from swipe_trader.wallet.session import WalletSession


class TestThreeCandidateSession:
    @pytest.mark.asyncio
    async def test_reject_buy_then_failed_buy(self, engine, session, fake_client, channel):
        fake_client.swap_results = [
            TradeResult(success=True, new_balance=500),
            TradeResult(success=False, message="slippage"),
        ]

        await engine.reject()
        assert engine.queue.cursor == 1
        assert channel.current.kind == NotificationKind.INFO

        await engine.accept()
        assert engine.queue.cursor == 2
        assert session.state.icp_balance == 500
        assert channel.current.kind == NotificationKind.SUCCESS

        await engine.accept()
        assert engine.queue.cursor == 3
        assert engine.state == EngineState.EXHAUSTED
        assert channel.current.kind == NotificationKind.ERROR
        assert channel.current.message == "slippage"
        assert session.state.icp_balance == 500

        assert fake_client.swap_calls == [("TK2", 500), ("TK3", 500)]


class TestGeneratedSession:
    @pytest.mark.asyncio
    async def test_network_error_still_yields_generated_queue(self, session, channel):
        generator = GeminiTokenGenerator({'enabled': True, 'api_key': 'k'})
        generator._get_session = AsyncMock(side_effect=OSError("network unreachable"))
        engine = SwipeDecisionEngine(TokenCatalog(generator), session, channel)

        queue = await engine.load_prompt("ai tokens")

        assert 1 <= len(queue) <= 5
        assert all(c.origin == OriginTag.AI_GENERATED for c in queue)
        assert engine.state == EngineState.READY


class TestSandboxLedger:
    @pytest.mark.asyncio
    async def test_full_session_against_in_memory_wallet(self):
        client = InMemoryWalletClient("alice")
        session = WalletSession(client)
        await session.set_default_trade_size(300)
        await session.deposit(700)
        assert await session.authenticate()

        channel = NotificationChannel()
        catalog = TokenCatalog(rng=random.Random(3))
        engine = SwipeDecisionEngine(
            catalog, session, channel, config={'refresh_after_trade': False}
        )
        engine.load_category("meme-coins")

        outcomes = [await engine.on_drag_end(250) for _ in range(3)]

        statuses = [o.status for o in outcomes]
        assert statuses == [
            OutcomeStatus.FILLED,
            OutcomeStatus.FILLED,
            OutcomeStatus.BLOCKED,
        ]
        assert session.state.icp_balance == 100
        assert engine.queue.cursor == 2
        assert channel.current.title == "Insufficient Balance"

        portfolio = await session.portfolio()
        assert portfolio.token_balances == [("DOGE", 300), ("SHIB", 300)]

        # Skip the rest once funds run out.
        while engine.state == EngineState.READY:
            await engine.on_drag_end(-250)
        assert engine.state == EngineState.EXHAUSTED
        assert engine.get_decision_stats()['total_decisions'] == 6

        await engine.close()
        channel.close()
        await session.close()
