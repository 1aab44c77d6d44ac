"""Token catalog: builds candidate queues from static tables or the AI generator."""

import logging
import random
import time
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..core.enums import OriginTag, RiskLevel, TokenIcon
from ..core.models import Candidate
from .generator import TokenGenerator, fallback_payloads
from .queue import CandidateQueue
from .static import (
    DEFAULT_CATEGORY, UnknownCategoryError, build_category, category_keys, category_title
)

logger = logging.getLogger(__name__)

MIN_GENERATED = 1
MAX_GENERATED = 5


def _number(value: Any, allow_negative: bool = False) -> Optional[float]:
    """Parse a numeric payload value; None when absent or unusable."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    if not allow_negative and number < 0:
        return None
    return number


def _nested(payload: Dict[str, Any], key: str, inner: str) -> Any:
    value = payload.get(key)
    if isinstance(value, dict):
        return value.get(inner)
    return value


def _risk_level(value: Any) -> RiskLevel:
    try:
        return RiskLevel(str(value).strip().lower())
    except ValueError:
        return RiskLevel.MEDIUM


class TokenCatalog:
    """Produces candidate queues for a category key or a generation prompt."""

    def __init__(
        self,
        generator: Optional[TokenGenerator] = None,
        rng: Optional[random.Random] = None,
        default_category: str = DEFAULT_CATEGORY,
    ):
        """Initialize token catalog."""
        self.generator = generator
        self._rng = rng or random.Random()
        self.default_category = default_category
        logger.info(
            f"Token catalog initialized (generator: {type(generator).__name__ if generator else None})"
        )

    def categories(self) -> Dict[str, str]:
        """Available category keys mapped to display titles."""
        return {key: category_title(key) for key in category_keys()}

    def load_static(self, category: str) -> CandidateQueue:
        """Load the static table for a category, falling back to the default one."""
        try:
            candidates = build_category(category)
        except UnknownCategoryError as e:
            logger.warning(f"{e}, falling back to '{self.default_category}'")
            category = self.default_category
            candidates = build_category(category)

        logger.info(f"Loaded {len(candidates)} static candidates for '{category}'")
        return CandidateQueue(candidates, source=category)

    async def load_generated(self, prompt: str) -> CandidateQueue:
        """Generate candidates for a prompt. Never raises; falls back to local picks."""
        candidates: List[Candidate] = []
        if self.generator is None:
            logger.warning("No token generator configured, using fallback tokens")
        else:
            try:
                payloads = await self.generator.generate(prompt)
                candidates = self.normalize_generated(payloads, prompt)
                if not candidates:
                    logger.warning("Generator returned no usable tokens, using fallback tokens")
            except Exception as e:
                logger.warning(f"Token generation failed, using fallback tokens: {e}")

        if not candidates:
            candidates = self.normalize_generated(fallback_payloads(prompt), prompt)

        logger.info(f"Loaded {len(candidates)} generated candidates for prompt: {prompt!r}")
        return CandidateQueue(candidates, source=f"prompt:{prompt}")

    def normalize_generated(self, payloads: Any, prompt: str) -> List[Candidate]:
        """Clamp payloads to at most five and back-fill missing fields."""
        if not isinstance(payloads, list):
            return []

        candidates: List[Candidate] = []
        used_ids = set()
        for payload in payloads:
            if len(candidates) >= MAX_GENERATED:
                break
            if not isinstance(payload, dict):
                logger.debug(f"Skipping non-object token payload: {payload!r}")
                continue
            index = len(candidates)
            try:
                candidate = self._build_generated(payload, index, prompt, used_ids)
            except ValidationError as e:
                logger.debug(f"Skipping invalid token payload: {e}")
                continue
            used_ids.add(candidate.id)
            candidates.append(candidate)

        return candidates

    def _build_generated(
        self,
        payload: Dict[str, Any],
        index: int,
        prompt: str,
        used_ids: set,
    ) -> Candidate:
        """Build one AI generated candidate with bounded random defaults."""
        rng = self._rng
        position = index + 1

        raw_id = payload.get("id")
        candidate_id = str(raw_id) if raw_id not in (None, "") else f"ai-{position}"
        while candidate_id in used_ids:
            candidate_id = f"{candidate_id}-{position}"

        name = str(payload.get("name") or f"AI Token {position}")
        symbol = str(payload.get("symbol") or f"AI{position}").strip() or f"AI{position}"

        price = _number(payload.get("price"))
        if price is None:
            price = rng.random() * 0.001

        change = _number(_nested(payload, "priceChange", "h24"), allow_negative=True)
        if change is None:
            change = _number(payload.get("price_change_percent"), allow_negative=True)
        if change is None:
            change = round(rng.uniform(-100, 100), 2)

        market_cap = _number(payload.get("marketCap", payload.get("market_cap_usd")))
        if market_cap is None:
            market_cap = float(rng.randint(100_000, 10_100_000))

        liquidity = _number(_nested(payload, "liquidity", "usd"))
        if liquidity is None:
            liquidity = float(rng.randint(10_000, 110_000))

        fdv = _number(payload.get("fdv", payload.get("fully_diluted_value_usd")))
        if fdv is None:
            fdv = market_cap + rng.randint(0, 1_000_000)

        volume = _number(payload.get("volume24h", payload.get("volume_24h_usd")))
        if volume is None:
            volume = float(rng.randint(50_000, 550_000))

        holders = _number(payload.get("holders"))
        holders = int(holders) if holders is not None else rng.randint(100, 5_100)

        created = _number(payload.get("pairCreatedAt", payload.get("pair_created_at")))
        if created is None:
            created = time.time() - rng.randint(0, 86400 * 90)

        return Candidate(
            id=candidate_id,
            symbol=symbol,
            name=name,
            price=price,
            price_change_percent=change,
            market_cap_usd=market_cap,
            liquidity_usd=liquidity,
            fully_diluted_value_usd=fdv,
            volume_24h_usd=volume,
            holders=holders,
            pair_created_at=int(created),
            description=payload.get("description") or f"AI-generated token for {prompt}",
            icon=TokenIcon.AI,
            origin=OriginTag.AI_GENERATED,
            reasoning=payload.get("aiReasoning") or payload.get("reasoning") or (
                f'This token matches your search for "{prompt}" based on its innovative features.'
            ),
            category=str(payload.get("category") or "AI"),
            risk_level=_risk_level(payload.get("riskLevel", payload.get("risk_level"))),
        )
