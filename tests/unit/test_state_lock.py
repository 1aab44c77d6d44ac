"""Unit tests for the trading lock."""

import pytest
import asyncio
from swipe_trader.core.state_lock import TradingLock, TradingBusyError


class TestTradingLock:
    """Tests for TradingLock class."""

    @pytest.mark.asyncio
    async def test_acquire_release(self):
        lock = TradingLock("test_lock")

        await lock.acquire()
        assert lock.held

        lock.release()
        assert not lock.held

    @pytest.mark.asyncio
    async def test_hold_context_manager(self):
        lock = TradingLock("test_lock")

        async with lock.hold():
            assert lock.held

        assert not lock.held
        assert lock.hold_count() == 1

    @pytest.mark.asyncio
    async def test_second_holder_refused_not_queued(self):
        lock = TradingLock("test_lock")

        async with lock.hold():
            with pytest.raises(TradingBusyError):
                await lock.acquire()

        assert lock.hold_count() == 1

    @pytest.mark.asyncio
    async def test_released_on_exception(self):
        lock = TradingLock("test_lock")

        with pytest.raises(ValueError):
            async with lock.hold():
                raise ValueError("boom")

        assert not lock.held

    @pytest.mark.asyncio
    async def test_concurrent_trades_one_wins(self):
        lock = TradingLock("test_lock")
        results = []

        async def trade(trade_id):
            try:
                async with lock.hold():
                    results.append(f"start_{trade_id}")
                    await asyncio.sleep(0.01)
                    results.append(f"end_{trade_id}")
            except TradingBusyError:
                results.append(f"refused_{trade_id}")

        await asyncio.gather(trade(1), trade(2))

        assert results == ["start_1", "refused_2", "end_1"]

    def test_release_when_not_held_is_noop(self):
        lock = TradingLock("test_lock")
        lock.release()
        assert not lock.held
