"""Core enumerations for the swipe trading engine."""

from enum import Enum


class Direction(str, Enum):
    """Swipe decision directions."""
    ACCEPT = "accept"
    REJECT = "reject"


class OriginTag(str, Enum):
    """Where a candidate came from."""
    STATIC = "static"
    AI_GENERATED = "ai_generated"


class RiskLevel(str, Enum):
    """Risk levels attached to generated candidates."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NotificationKind(str, Enum):
    """Notification kinds."""
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class EngineState(str, Enum):
    """Swipe engine lifecycle states."""
    LOADING = "loading"
    READY = "ready"
    DECIDING = "deciding"
    EXHAUSTED = "exhausted"


class OutcomeStatus(str, Enum):
    """Result of a single swipe decision."""
    SKIPPED = "skipped"
    FILLED = "filled"
    REJECTED = "rejected"
    ERRORED = "errored"
    BLOCKED = "blocked"


class TokenIcon(str, Enum):
    """Icon variants a card can render."""
    DOGE = "DOGE"
    SHIB = "SHIB"
    PEPE = "PEPE"
    FLOKI = "FLOKI"
    BABYDOGE = "BABYDOGE"
    BTC = "BTC"
    ETH = "ETH"
    AI = "AI"
    DEFAULT = "DEFAULT"
