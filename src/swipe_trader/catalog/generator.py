"""AI token generation for prompt-driven browsing."""

from abc import ABC, abstractmethod
import json
import logging
import re
import time
from typing import Any, Dict, List, Optional

import aiohttp

logger = logging.getLogger(__name__)

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


class TokenGenerationError(Exception):
    """Raised when the generator cannot produce usable token payloads."""
    pass


class TokenGenerator(ABC):
    """Abstract base class for token generators.

    Generators return raw candidate payloads (dicts); the catalog clamps and
    back-fills them into candidates.
    """

    @abstractmethod
    async def generate(self, prompt: str) -> List[Dict[str, Any]]:
        """Generate candidate payloads for a prompt."""
        pass

    async def close(self):
        """Release any held resources."""
        pass


class GeminiTokenGenerator(TokenGenerator):
    """Token generator backed by the Gemini generateContent API."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize Gemini token generator."""
        self.config = config or {}
        self.enabled = self.config.get('enabled', False)
        self.api_key = self.config.get('api_key', '')
        self.model = self.config.get('model', 'gemini-2.0-flash')
        self.base_url = self.config.get(
            'base_url', 'https://generativelanguage.googleapis.com/v1beta/models'
        )
        self.timeout = self.config.get('timeout', 30)
        self._session: Optional[aiohttp.ClientSession] = None
        logger.info(f"Gemini token generator initialized (enabled: {self.enabled})")

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def generate(self, prompt: str) -> List[Dict[str, Any]]:
        """Ask Gemini for 4-5 tokens matching the prompt."""
        if not self.enabled or not self.api_key:
            raise TokenGenerationError("Gemini generator disabled or missing API key")

        session = await self._get_session()
        payload = {"contents": [{"parts": [{"text": self._build_prompt(prompt)}]}]}

        async with session.post(
            f"{self.base_url}/{self.model}:generateContent",
            params={"key": self.api_key},
            json=payload,
            headers={"Content-Type": "application/json"},
        ) as response:
            if response.status != 200:
                error_text = await response.text()
                raise TokenGenerationError(f"Gemini API error {response.status}: {error_text}")
            data = await response.json()

        tokens = self._extract_tokens(data)
        logger.info(f"Generated {len(tokens)} token payloads for prompt: {prompt!r}")
        return tokens

    def _extract_tokens(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Pull the JSON token array out of a generateContent response."""
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise TokenGenerationError("No content generated")
        if not text:
            raise TokenGenerationError("No content generated")

        match = _JSON_ARRAY.search(text)
        if not match:
            raise TokenGenerationError("No JSON array in generated content")

        try:
            tokens = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise TokenGenerationError(f"Malformed JSON in generated content: {e}")

        if not isinstance(tokens, list) or not tokens:
            raise TokenGenerationError("Generated token list is empty")
        return tokens

    def _build_prompt(self, prompt: str) -> str:
        """Build the generation prompt."""
        week_ago = int(time.time()) - 86400 * 7
        return (
            f'Based on the user\'s request: "{prompt}"\n\n'
            f"Generate exactly 4-5 realistic cryptocurrency tokens that match their criteria. "
            f"Return ONLY a valid JSON array with no additional text. Each token must have:\n"
            f'{{"id": 1, "name": "Token Name", "symbol": "SYMBOL", "price": 0.00001234, '
            f'"priceChange": {{"h24": "45.67"}}, "marketCap": 1500000, '
            f'"liquidity": {{"usd": 25000}}, "fdv": 1600000, "pairCreatedAt": {week_ago}, '
            f'"description": "...", "aiReasoning": "...", "category": "AI/DeFi/Gaming/Meme", '
            f'"riskLevel": "Low/Medium/High", "volume24h": 150000, "holders": 2500}}\n\n'
            f"Guidelines:\n"
            f"- Vary market caps: micro ($50K-$500K), small ($500K-$10M), mid ($10M-$100M)\n"
            f"- Include positive and negative price changes (-80% to +300%)\n"
            f"- Use unique names and 3-5 character symbols\n"
            f"- Explain in aiReasoning why each token matches the request\n"
        )


def fallback_payloads(prompt: str) -> List[Dict[str, Any]]:
    """Pre-authored token payloads used whenever generation fails."""
    now = int(time.time())
    return [
        {
            "id": "ai-fallback-1",
            "name": "Neural Network Protocol",
            "symbol": "NEURAL",
            "price": 0.000234,
            "priceChange": {"h24": "67.89"},
            "marketCap": 2_400_000,
            "liquidity": {"usd": 45_000},
            "fdv": 2_500_000,
            "pairCreatedAt": now - 86400 * 14,
            "description": "AI-powered decentralized trading algorithm with machine learning capabilities",
            "aiReasoning": f'Matches your search for "{prompt}" with advanced AI and neural network technology',
            "category": "AI",
            "riskLevel": "Medium",
            "volume24h": 180_000,
            "holders": 1250,
        },
        {
            "id": "ai-fallback-2",
            "name": "Quantum Leap Finance",
            "symbol": "QLAP",
            "price": 0.000567,
            "priceChange": {"h24": "-23.45"},
            "marketCap": 1_800_000,
            "liquidity": {"usd": 32_000},
            "fdv": 1_900_000,
            "pairCreatedAt": now - 86400 * 21,
            "description": "Next-generation quantum computing for DeFi optimization and yield farming",
            "aiReasoning": f'Perfect for "{prompt}" as it represents cutting-edge quantum technology in finance',
            "category": "DeFi",
            "riskLevel": "High",
            "volume24h": 95_000,
            "holders": 890,
        },
        {
            "id": "ai-fallback-3",
            "name": "Smart Contract AI",
            "symbol": "SCAI",
            "price": 0.00123,
            "priceChange": {"h24": "145.67"},
            "marketCap": 5_600_000,
            "liquidity": {"usd": 89_000},
            "fdv": 5_800_000,
            "pairCreatedAt": now - 86400 * 7,
            "description": "Automated smart contract deployment and optimization using artificial intelligence",
            "aiReasoning": f'Ideal match for "{prompt}" combining AI with blockchain automation technology',
            "category": "AI",
            "riskLevel": "Low",
            "volume24h": 320_000,
            "holders": 2100,
        },
        {
            "id": "ai-fallback-4",
            "name": "MetaVerse Builder",
            "symbol": "MVBLD",
            "price": 0.00089,
            "priceChange": {"h24": "78.23"},
            "marketCap": 3_200_000,
            "liquidity": {"usd": 67_000},
            "fdv": 3_300_000,
            "pairCreatedAt": now - 86400 * 35,
            "description": "AI-powered metaverse construction toolkit for creating immersive virtual worlds",
            "aiReasoning": f'Aligns with "{prompt}" through innovative AI-driven virtual world creation',
            "category": "Gaming",
            "riskLevel": "Medium",
            "volume24h": 210_000,
            "holders": 1680,
        },
    ]
