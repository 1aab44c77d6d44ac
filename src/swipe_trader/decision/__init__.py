"""Swipe decision module."""

from .engine import (
    SwipeDecisionEngine,
    TradePreconditionError,
    NotAuthenticatedError,
    NoDefaultAmountError,
    InsufficientBalanceError,
    SwapError,
)
from .gesture import CardTransform, CardAnimator, InstantCardAnimator, classify_drag

__all__ = [
    "SwipeDecisionEngine",
    "TradePreconditionError",
    "NotAuthenticatedError",
    "NoDefaultAmountError",
    "InsufficientBalanceError",
    "SwapError",
    "CardTransform",
    "CardAnimator",
    "InstantCardAnimator",
    "classify_drag",
]
