"""
Swipe Trading Engine

Swipe through token candidates and buy the ones you like against a remote
wallet service. Buys are gated on local balance checks and the wallet's
reported balance is always authoritative.
"""

__version__ = "0.1.0"
__author__ = "Swipe Trader Team"

from .core.models import Candidate, TradeResult, WalletState, Notification
from .core.enums import Direction, EngineState, NotificationKind, OriginTag
from .catalog.catalog import TokenCatalog
from .decision.engine import SwipeDecisionEngine
from .notifications.channel import NotificationChannel
from .wallet.session import WalletSession

__all__ = [
    "Candidate",
    "TradeResult",
    "WalletState",
    "Notification",
    "Direction",
    "EngineState",
    "NotificationKind",
    "OriginTag",
    "TokenCatalog",
    "SwipeDecisionEngine",
    "NotificationChannel",
    "WalletSession",
]
