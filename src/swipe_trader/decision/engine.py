"""Swipe decision engine: gesture -> decision -> trade -> notification -> advance."""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Set

from ..catalog.catalog import TokenCatalog
from ..catalog.queue import CandidateQueue
from ..core.enums import Direction, EngineState, OutcomeStatus
from ..core.formatting import format_base
from ..core.models import Candidate, DecisionOutcome, Notification, TradeResult
from ..core.state_lock import TradingLock, TradingBusyError
from ..notifications.channel import NotificationChannel
from ..wallet.session import WalletSession
from .gesture import (
    CardAnimator, InstantCardAnimator, REST, SWIPE_THRESHOLD_PX, EXIT_OFFSET_PX,
    classify_drag, exit_transform,
)

logger = logging.getLogger(__name__)


class TradePreconditionError(Exception):
    """A buy was refused locally before reaching the wallet."""

    title = "Trade Blocked"
    ttl_ms = 4000


class NotAuthenticatedError(TradePreconditionError):
    title = "Authentication Required"

    def __init__(self):
        super().__init__("Please log in to purchase tokens")


class NoDefaultAmountError(TradePreconditionError):
    title = "Default Amount Not Set"

    def __init__(self):
        super().__init__("Please set your default trade amount before buying")


class InsufficientBalanceError(TradePreconditionError):
    title = "Insufficient Balance"
    ttl_ms = 5000

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        self.shortfall = required - available
        super().__init__(
            f"You need {format_base(required)} but only have {format_base(available)} "
            f"({format_base(self.shortfall)} short). Please deposit more."
        )


class SwapError(Exception):
    """The swap call itself failed (transport or unexpected error)."""
    pass


class SwipeDecisionEngine:
    """Drives one candidate queue through swipe decisions.

    Buys advance the queue before the swap settles and reconcile the
    balance afterwards. While a swap is in flight every other decision on
    the queue is ignored.
    """

    def __init__(
        self,
        catalog: TokenCatalog,
        session: WalletSession,
        notifications: NotificationChannel,
        animator: Optional[CardAnimator] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        """Initialize swipe decision engine."""
        self.catalog = catalog
        self.session = session
        self.notifications = notifications
        self.animator = animator or InstantCardAnimator()

        self.config = config or {}
        self.threshold_px = float(self.config.get('threshold_px', SWIPE_THRESHOLD_PX))
        self.exit_offset_px = float(self.config.get('exit_offset_px', EXIT_OFFSET_PX))
        self.refresh_after_trade = self.config.get('refresh_after_trade', True)
        self.skip_ttl_ms = self.config.get('skip_ttl_ms', 2000)
        self.success_ttl_ms = self.config.get('success_ttl_ms', 5000)
        self.error_ttl_ms = self.config.get('error_ttl_ms', 4000)

        self._queue: Optional[CandidateQueue] = None
        self._lock = TradingLock("swipe-trade")
        self._closed = False
        self._pending_decisions: Set[asyncio.Task] = set()
        self._refresh_tasks: Set[asyncio.Task] = set()

        # Decision history
        self.decision_history: List[DecisionOutcome] = []

        logger.info(f"Swipe decision engine initialized (threshold: {self.threshold_px}px)")

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------

    @property
    def queue(self) -> Optional[CandidateQueue]:
        return self._queue

    @property
    def is_trading(self) -> bool:
        return self._lock.held

    @property
    def state(self) -> EngineState:
        if self._queue is None:
            return EngineState.LOADING
        if self._lock.held:
            return EngineState.DECIDING
        if self._queue.exhausted:
            return EngineState.EXHAUSTED
        return EngineState.READY

    @property
    def remaining(self) -> int:
        return self._queue.remaining if self._queue else 0

    def load(self, queue: CandidateQueue) -> CandidateQueue:
        """Replace the active queue."""
        if self._lock.held:
            raise TradingBusyError("Cannot replace the queue while a trade is in flight")
        self._queue = queue
        self.animator.set(REST)
        logger.info(f"Loaded queue {queue!r}")
        return queue

    def load_category(self, category: str) -> CandidateQueue:
        return self.load(self.catalog.load_static(category))

    async def load_prompt(self, prompt: str) -> CandidateQueue:
        return self.load(await self.catalog.load_generated(prompt))

    def current_candidate(self) -> Optional[Candidate]:
        """Candidate awaiting a decision, or None when exhausted or not loaded."""
        if self._queue is None:
            return None
        return self._queue.current()

    # ------------------------------------------------------------------
    # Gestures and buttons
    # ------------------------------------------------------------------

    async def on_drag_end(self, offset_x: float) -> Optional[DecisionOutcome]:
        """Handle a drag release at ``offset_x`` pixels from rest."""
        direction = classify_drag(offset_x, self.threshold_px)
        if direction is None or not self._accepting_decisions():
            await self.animator.animate_to(REST)
            return None

        candidate = self.current_candidate()
        await self.animator.animate_to(exit_transform(direction, self.exit_offset_px))
        try:
            # Another decision may have landed while the card was flying out.
            if self.current_candidate() is not candidate:
                logger.debug(f"Dropping stale {direction.value} swipe on {candidate.symbol}")
                return None
            return await self.decide(direction)
        finally:
            self.animator.set(REST)

    async def accept(self) -> Optional[DecisionOutcome]:
        return await self.decide(Direction.ACCEPT)

    async def reject(self) -> Optional[DecisionOutcome]:
        return await self.decide(Direction.REJECT)

    def submit(self, direction: Direction) -> asyncio.Task:
        """Schedule a decision without waiting for it (button handlers)."""
        task = asyncio.create_task(self.decide(direction))
        self._pending_decisions.add(task)
        task.add_done_callback(self._pending_decisions.discard)
        return task

    def _accepting_decisions(self) -> bool:
        return (
            not self._closed
            and self._queue is not None
            and not self._queue.exhausted
            and not self._lock.held
        )

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    async def decide(self, direction: Direction) -> Optional[DecisionOutcome]:
        """Apply a decision to the current candidate.

        Returns None when no decision can be taken (no queue, exhausted,
        closed, or a trade is already in flight).
        """
        if not self._accepting_decisions():
            logger.debug(f"Ignoring {direction.value} decision in state {self.state.value}")
            return None

        candidate = self._queue.current()
        if direction == Direction.REJECT:
            outcome = self._skip(candidate)
        else:
            outcome = await self._buy(candidate)

        self._record_decision(outcome)
        return outcome

    def _skip(self, candidate: Candidate) -> DecisionOutcome:
        """Pass on a candidate. No wallet interaction."""
        self._queue.advance()
        notification = self._post_info(
            "Token Skipped", f"Passed on {candidate.name}", self.skip_ttl_ms
        )
        logger.info(f"Skipped {candidate.symbol} (cursor: {self._queue.cursor})")
        return DecisionOutcome(
            direction=Direction.REJECT,
            candidate=candidate,
            status=OutcomeStatus.SKIPPED,
            notification=notification,
            balance_before=self.session.state.icp_balance,
            balance_after=self.session.state.icp_balance,
        )

    def _check_preconditions(self) -> int:
        """Return the trade size, or raise the first failed precondition."""
        if not self.session.is_authenticated:
            raise NotAuthenticatedError()

        state = self.session.state
        if state.default_trade_size <= 0:
            raise NoDefaultAmountError()

        if state.icp_balance < state.default_trade_size:
            raise InsufficientBalanceError(state.default_trade_size, state.icp_balance)

        return state.default_trade_size

    async def _buy(self, candidate: Candidate) -> DecisionOutcome:
        """Buy the candidate with the default trade size."""
        balance_before = self.session.state.icp_balance

        try:
            amount = self._check_preconditions()
        except TradePreconditionError as e:
            logger.warning(f"Buy of {candidate.symbol} blocked: {e}")
            notification = self._post_error(e.title, str(e), e.ttl_ms)
            return DecisionOutcome(
                direction=Direction.ACCEPT,
                candidate=candidate,
                status=OutcomeStatus.BLOCKED,
                notification=notification,
                balance_before=balance_before,
                balance_after=balance_before,
            )

        async with self._lock.hold():
            # Advance first; the swap result is reconciled when it lands.
            self._queue.advance()
            outcome = await self._execute_swap(candidate, amount, balance_before)

        if self.refresh_after_trade and outcome.status != OutcomeStatus.ERRORED:
            self._schedule_refresh()
        return outcome

    async def _call_swap(self, candidate: Candidate, amount: int) -> TradeResult:
        try:
            return await self.session.client.swap_base_to_token(candidate.symbol, amount)
        except Exception as e:
            raise SwapError(f"Swap of {format_base(amount)} into {candidate.symbol} failed: {e}") from e

    async def _execute_swap(
        self, candidate: Candidate, amount: int, balance_before: int
    ) -> DecisionOutcome:
        """Run the swap and reconcile local state with its result."""
        logger.info(f"Buying {candidate.symbol} for {format_base(amount)}")
        try:
            result = await self._call_swap(candidate, amount)
        except SwapError as e:
            logger.error(f"Error executing swap: {e}")
            notification = self._post_error(
                "Swap Error", "Failed to execute swap. Please try again.", self.error_ttl_ms
            )
            return DecisionOutcome(
                direction=Direction.ACCEPT,
                candidate=candidate,
                status=OutcomeStatus.ERRORED,
                notification=notification,
                balance_before=balance_before,
                balance_after=self.session.state.icp_balance,
            )

        if result.success:
            new_balance = self.session.apply_trade_result(result)
            notification = self._post_success(
                "Token Purchased!",
                f"Swapped {format_base(amount)} for {candidate.name}. "
                f"Balance: {format_base(balance_before)} -> {format_base(new_balance)}",
            )
            status = OutcomeStatus.FILLED
        else:
            logger.warning(f"Swap for {candidate.symbol} rejected: {result.message}")
            notification = self._post_error(
                "Swap Failed", result.message or "Failed to swap tokens", self.error_ttl_ms
            )
            status = OutcomeStatus.REJECTED

        return DecisionOutcome(
            direction=Direction.ACCEPT,
            candidate=candidate,
            status=status,
            trade_result=result,
            notification=notification,
            balance_before=balance_before,
            balance_after=self.session.state.icp_balance,
        )

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _post(self, post, title: str, message: str, ttl_ms: Optional[int]) -> Optional[Notification]:
        if self._closed:
            logger.info(f"Engine closed, dropping notification: {title}: {message}")
            return None
        return post(title, message, ttl_ms)

    def _post_info(self, title: str, message: str, ttl_ms: Optional[int] = None):
        return self._post(self.notifications.info, title, message, ttl_ms)

    def _post_success(self, title: str, message: str):
        return self._post(self.notifications.success, title, message, self.success_ttl_ms)

    def _post_error(self, title: str, message: str, ttl_ms: Optional[int] = None):
        return self._post(self.notifications.error, title, message, ttl_ms)

    # ------------------------------------------------------------------
    # Background refresh and teardown
    # ------------------------------------------------------------------

    def _schedule_refresh(self):
        if self._closed:
            return
        task = asyncio.create_task(self.session.refresh())
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)

    async def close(self):
        """Tear down the engine.

        In-flight swaps are left to finish on their own: the wallet state is
        still reconciled but no further notifications are shown.
        """
        if self._closed:
            return
        self._closed = True
        for task in list(self._refresh_tasks):
            task.cancel()
        if self._refresh_tasks:
            await asyncio.gather(*self._refresh_tasks, return_exceptions=True)
        if self._pending_decisions or self._lock.held:
            logger.info("Engine closed with a swap in flight; result will not be shown")
        logger.info("Swipe decision engine closed")

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def _record_decision(self, outcome: DecisionOutcome):
        """Record decision for later inspection."""
        self.decision_history.append(outcome)
        if len(self.decision_history) > 1000:
            self.decision_history = self.decision_history[-1000:]

    def get_decision_stats(self) -> Dict[str, Any]:
        """Get decision statistics."""
        if not self.decision_history:
            return {'total_decisions': 0}

        status_counts: Dict[str, int] = {}
        for outcome in self.decision_history:
            status_counts[outcome.status.value] = status_counts.get(outcome.status.value, 0) + 1

        total = len(self.decision_history)
        buys = [o for o in self.decision_history if o.direction == Direction.ACCEPT]
        filled = status_counts.get(OutcomeStatus.FILLED.value, 0)
        return {
            'total_decisions': total,
            'accepts': len(buys),
            'rejects': total - len(buys),
            'fill_rate': filled / len(buys) if buys else 0,
            'status_distribution': status_counts,
        }
