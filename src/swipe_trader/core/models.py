"""Core data models for the swipe trading engine."""

from datetime import datetime
from typing import Optional, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import (
    Direction, OriginTag, RiskLevel, NotificationKind, OutcomeStatus, TokenIcon
)

DEFAULT_NOTIFICATION_TTL_MS = 3000


class Candidate(BaseModel):
    """Token proposed to the user for an accept/reject decision."""

    model_config = ConfigDict(frozen=True)

    # Identity
    id: str = Field(description="Identifier, unique within a queue")
    symbol: str = Field(min_length=1, description="Trade routing key")
    name: str = Field(description="Display name")

    # Market data (display only)
    price: float = Field(ge=0.0, description="Price in USD")
    price_change_percent: float = Field(default=0.0, description="24h price change %")
    market_cap_usd: Optional[float] = Field(default=None, ge=0.0, description="Market cap")
    liquidity_usd: Optional[float] = Field(default=None, ge=0.0, description="Pool liquidity")
    fully_diluted_value_usd: Optional[float] = Field(default=None, ge=0.0, description="FDV")
    volume_24h_usd: Optional[float] = Field(default=None, ge=0.0, description="24h volume")
    holders: Optional[int] = Field(default=None, ge=0, description="Holder count")
    pair_created_at: Optional[int] = Field(default=None, description="Pair creation (unix seconds)")
    description: Optional[str] = Field(default=None, description="Short pitch")
    icon: Optional[TokenIcon] = Field(default=None, description="Explicit icon variant")

    # Origin
    origin: OriginTag = Field(default=OriginTag.STATIC, description="Static table or AI generated")
    reasoning: Optional[str] = Field(default=None, description="Why the generator picked it")
    category: Optional[str] = Field(default=None, description="Generator category")
    risk_level: Optional[RiskLevel] = Field(default=None, description="Generator risk level")
    ai_score: Optional[int] = Field(default=None, ge=0, le=100, description="AI analysis score")

    @model_validator(mode="after")
    def check_generated_fields(self):
        if self.origin == OriginTag.AI_GENERATED:
            missing = [
                f for f in ("reasoning", "category", "risk_level")
                if getattr(self, f) is None
            ]
            if missing:
                raise ValueError(f"AI generated candidate missing fields: {', '.join(missing)}")
        return self

    @property
    def is_generated(self) -> bool:
        return self.origin == OriginTag.AI_GENERATED


class TradeResult(BaseModel):
    """Result of a swap reported by the wallet service."""

    success: bool = Field(description="Whether the swap settled")
    new_balance: Optional[int] = Field(default=None, ge=0, description="Base balance after swap (minor units)")
    new_token_balance: Optional[int] = Field(default=None, ge=0, description="Token balance after swap")
    message: Optional[str] = Field(default=None, description="Failure reason or confirmation")

    @model_validator(mode="after")
    def check_consistency(self):
        if self.success and self.new_balance is None:
            raise ValueError("Successful trade result requires new_balance")
        if not self.success and not self.message:
            raise ValueError("Failed trade result requires message")
        return self


class Portfolio(BaseModel):
    """Wallet portfolio snapshot."""

    base_balance: int = Field(ge=0, description="Base currency balance (minor units)")
    default_trade_size: int = Field(default=0, ge=0, description="Default trade size (minor units)")
    total_deposits: int = Field(default=0, ge=0, description="Lifetime deposits")
    total_swaps: int = Field(default=0, ge=0, description="Lifetime swapped volume")
    token_balances: List[Tuple[str, int]] = Field(default_factory=list, description="(symbol, amount)")

    def token_balance(self, symbol: str) -> int:
        return dict(self.token_balances).get(symbol, 0)


class WalletState(BaseModel):
    """Session-local cache of the remote wallet state."""

    principal: Optional[str] = Field(default=None, description="Authenticated identity")
    icp_balance: int = Field(default=0, ge=0, description="Base balance (minor units)")
    default_trade_size: int = Field(default=0, ge=0, description="Default trade size, 0 means unset")
    last_refreshed: Optional[datetime] = Field(default=None, description="Last successful refresh")

    @property
    def has_default_trade_size(self) -> bool:
        return self.default_trade_size > 0


class Notification(BaseModel):
    """User-facing message with a bounded display time."""

    model_config = ConfigDict(frozen=True)

    kind: NotificationKind = Field(description="Notification kind")
    title: str = Field(description="Headline")
    message: str = Field(description="Body text")
    ttl_ms: int = Field(default=DEFAULT_NOTIFICATION_TTL_MS, gt=0, description="Display duration")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation time")

    @field_validator("ttl_ms", mode="before")
    @classmethod
    def default_ttl(cls, v):
        if v is None:
            return DEFAULT_NOTIFICATION_TTL_MS
        return v


class DecisionOutcome(BaseModel):
    """Record of one swipe decision and its side effects."""

    direction: Direction = Field(description="Accept or reject")
    candidate: Candidate = Field(description="Candidate the decision applied to")
    status: OutcomeStatus = Field(description="Outcome")
    trade_result: Optional[TradeResult] = Field(default=None, description="Remote result, if any")
    notification: Optional[Notification] = Field(default=None, description="Posted notification")
    balance_before: Optional[int] = Field(default=None, description="Cached balance before")
    balance_after: Optional[int] = Field(default=None, description="Cached balance after")
    timestamp: datetime = Field(default_factory=datetime.now, description="Decision time")

    @property
    def advanced(self) -> bool:
        """Whether the decision consumed the candidate."""
        return self.status != OutcomeStatus.BLOCKED
