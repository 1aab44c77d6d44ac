"""Static token tables keyed by browsing category."""

import random
import time
from typing import Callable, Dict, List, Optional

from ..core.enums import TokenIcon
from ..core.models import Candidate

DEFAULT_CATEGORY = "meme-coins"

CATEGORY_TITLES: Dict[str, str] = {
    "meme-coins": "Meme Coins",
    "risky-degens": "Risky Degens",
    "newly-launched": "Newly Launched",
    "blue-chips": "Blue Chips",
    "ai-analyzed": "AI Analyzed",
}

_WEEK_SECONDS = 86400 * 7


class UnknownCategoryError(KeyError):
    """Raised when a category key has no static table."""

    def __init__(self, category: str):
        super().__init__(category)
        self.category = category

    def __str__(self) -> str:
        return f"Unknown category: {self.category!r}"


_BASE_TOKENS: List[dict] = [
    {
        "symbol": "DOGE",
        "name": "Dogecoin",
        "price": 0.072345,
        "price_change_percent": 5.67,
        "market_cap_usd": 10_500_000_000,
        "liquidity_usd": 45_000_000,
        "fully_diluted_value_usd": 10_600_000_000,
        "pair_created_at": 1640995200,
        "icon": TokenIcon.DOGE,
    },
    {
        "symbol": "SHIB",
        "name": "Shiba Inu",
        "price": 0.000008234,
        "price_change_percent": -2.34,
        "market_cap_usd": 4_800_000_000,
        "liquidity_usd": 28_000_000,
        "fully_diluted_value_usd": 4_850_000_000,
        "pair_created_at": 1629936000,
        "icon": TokenIcon.SHIB,
    },
    {
        "symbol": "PEPE",
        "name": "Pepe",
        "price": 0.00000123,
        "price_change_percent": 12.45,
        "market_cap_usd": 520_000_000,
        "liquidity_usd": 15_000_000,
        "fully_diluted_value_usd": 520_000_000,
        "pair_created_at": 1681776000,
        "icon": TokenIcon.PEPE,
    },
    {
        "symbol": "FLOKI",
        "name": "Floki Inu",
        "price": 0.00003456,
        "price_change_percent": 8.92,
        "market_cap_usd": 330_000_000,
        "liquidity_usd": 12_000_000,
        "fully_diluted_value_usd": 340_000_000,
        "pair_created_at": 1625097600,
        "icon": TokenIcon.FLOKI,
    },
    {
        "symbol": "BABYDOGE",
        "name": "Baby Doge Coin",
        "price": 0.0000000023,
        "price_change_percent": -1.23,
        "market_cap_usd": 160_000_000,
        "liquidity_usd": 8_000_000,
        "fully_diluted_value_usd": 165_000_000,
        "pair_created_at": 1623456000,
        "icon": TokenIcon.BABYDOGE,
    },
]

_BLUE_CHIPS: List[dict] = [
    {
        **_BASE_TOKENS[0],
        "symbol": "BTC",
        "name": "Bitcoin",
        "price": 43250.67,
        "market_cap_usd": 850_000_000_000,
        "liquidity_usd": 2_000_000_000,
        "icon": TokenIcon.BTC,
    },
    {
        **_BASE_TOKENS[1],
        "symbol": "ETH",
        "name": "Ethereum",
        "price": 2650.43,
        "market_cap_usd": 320_000_000_000,
        "liquidity_usd": 1_500_000_000,
        "icon": TokenIcon.ETH,
    },
]


def _meme_coins(rng: random.Random, now: float) -> List[dict]:
    return [dict(t) for t in _BASE_TOKENS]


def _risky_degens(rng: random.Random, now: float) -> List[dict]:
    return [
        {
            **t,
            "price_change_percent": round(rng.uniform(-100, 100), 2),
            "liquidity_usd": t["liquidity_usd"] * 0.3,
        }
        for t in _BASE_TOKENS
    ]


def _newly_launched(rng: random.Random, now: float) -> List[dict]:
    return [
        {
            **t,
            "pair_created_at": int(now - rng.random() * _WEEK_SECONDS),
            "market_cap_usd": t["market_cap_usd"] * 0.1,
        }
        for t in _BASE_TOKENS
    ]


def _blue_chips(rng: random.Random, now: float) -> List[dict]:
    return [dict(t) for t in _BLUE_CHIPS]


def _ai_analyzed(rng: random.Random, now: float) -> List[dict]:
    return [{**t, "ai_score": rng.randint(60, 99)} for t in _BASE_TOKENS]


_TABLE_BUILDERS: Dict[str, Callable[[random.Random, float], List[dict]]] = {
    "meme-coins": _meme_coins,
    "risky-degens": _risky_degens,
    "newly-launched": _newly_launched,
    "blue-chips": _blue_chips,
    "ai-analyzed": _ai_analyzed,
}


def category_keys() -> List[str]:
    return list(_TABLE_BUILDERS)


def category_title(category: str) -> str:
    return CATEGORY_TITLES.get(category, "Tokens")


def build_category(category: str, now: Optional[float] = None) -> List[Candidate]:
    """Build the candidate list for a category.

    Variations are drawn from an RNG seeded with the category key, so a
    category always yields the same table for a given ``now``.

    Raises:
        UnknownCategoryError: If the key has no table.
    """
    builder = _TABLE_BUILDERS.get(category)
    if builder is None:
        raise UnknownCategoryError(category)

    rng = random.Random(category)
    now = time.time() if now is None else now
    rows = builder(rng, now)
    return [
        Candidate(id=f"{category}-{index + 1}", **row)
        for index, row in enumerate(rows)
    ]
