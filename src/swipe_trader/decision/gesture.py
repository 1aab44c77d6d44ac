"""Drag gesture interpretation and card transforms."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import List, Optional

from ..core.enums import Direction

logger = logging.getLogger(__name__)

SWIPE_THRESHOLD_PX = 100.0
EXIT_OFFSET_PX = 500.0


@dataclass(frozen=True)
class CardTransform:
    """Horizontal offset and opacity of the active card."""
    x: float = 0.0
    opacity: float = 1.0


REST = CardTransform()


def classify_drag(offset_x: float, threshold_px: float = SWIPE_THRESHOLD_PX) -> Optional[Direction]:
    """Turn a drag release offset into a decision.

    Offsets at or under the threshold are not decisions.
    """
    if abs(offset_x) <= threshold_px:
        return None
    return Direction.ACCEPT if offset_x > 0 else Direction.REJECT


def exit_transform(direction: Direction, exit_offset_px: float = EXIT_OFFSET_PX) -> CardTransform:
    """Off-screen position a card flies to for a decision."""
    x = exit_offset_px if direction == Direction.ACCEPT else -exit_offset_px
    return CardTransform(x=x, opacity=0.0)


class CardAnimator(ABC):
    """Drives the visual position of the active card."""

    @abstractmethod
    async def animate_to(self, transform: CardTransform):
        """Animate to a transform and return once it settles."""
        pass

    @abstractmethod
    def set(self, transform: CardTransform):
        """Jump to a transform without animating."""
        pass

    @property
    @abstractmethod
    def transform(self) -> CardTransform:
        pass


class InstantCardAnimator(CardAnimator):
    """Headless animator: every animation settles immediately."""

    def __init__(self):
        self._transform = REST
        self.frames: List[CardTransform] = []

    @property
    def transform(self) -> CardTransform:
        return self._transform

    async def animate_to(self, transform: CardTransform):
        self._transform = transform
        self.frames.append(transform)

    def set(self, transform: CardTransform):
        self._transform = transform
        self.frames.append(transform)
