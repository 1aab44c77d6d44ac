"""Core module for the swipe trading engine."""

from .models import (
    Candidate, TradeResult, Portfolio, WalletState, Notification, DecisionOutcome
)
from .enums import (
    Direction, OriginTag, RiskLevel, NotificationKind, EngineState, OutcomeStatus, TokenIcon
)
from .state_lock import TradingLock, TradingBusyError

__all__ = [
    "Candidate",
    "TradeResult",
    "Portfolio",
    "WalletState",
    "Notification",
    "DecisionOutcome",
    "Direction",
    "OriginTag",
    "RiskLevel",
    "NotificationKind",
    "EngineState",
    "OutcomeStatus",
    "TokenIcon",
    "TradingLock",
    "TradingBusyError",
]
