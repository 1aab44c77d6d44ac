"""Wallet service clients."""

from abc import ABC, abstractmethod
import asyncio
from dataclasses import dataclass, field
import logging
from typing import Any, Dict, Optional

import aiohttp
from pydantic import ValidationError

from ..core.models import TradeResult, Portfolio
from ..core.formatting import BASE_SYMBOL

logger = logging.getLogger(__name__)


class WalletClientError(Exception):
    """Raised when the wallet service cannot be reached or answers garbage."""
    pass


class WalletClient(ABC):
    """Abstract base class for wallet service clients.

    Amounts are integer minor units of the base currency.
    """

    @property
    @abstractmethod
    def principal(self) -> Optional[str]:
        """Authenticated identity, or None."""
        pass

    def is_authenticated(self) -> bool:
        """Whether an identity is present."""
        return self.principal is not None

    @abstractmethod
    async def get_balance(self) -> int:
        """Get base currency balance."""
        pass

    @abstractmethod
    async def get_default_trade_size(self) -> int:
        """Get configured default trade size (0 means unset)."""
        pass

    @abstractmethod
    async def set_default_trade_size(self, amount: int) -> int:
        """Set default trade size; returns the acknowledged amount."""
        pass

    @abstractmethod
    async def swap_base_to_token(self, symbol: str, amount: int) -> TradeResult:
        """Spend base currency on a token."""
        pass

    @abstractmethod
    async def swap_token_to_base(self, symbol: str, amount: int) -> TradeResult:
        """Sell a token back into base currency."""
        pass

    @abstractmethod
    async def get_portfolio(self) -> Portfolio:
        """Get full portfolio snapshot."""
        pass

    @abstractmethod
    async def deposit(self, amount: int) -> TradeResult:
        """Register a base currency deposit."""
        pass

    async def close(self):
        """Release any held resources."""
        pass


@dataclass
class _Account:
    default_trade_size: int = 0
    balance: int = 0
    total_deposits: int = 0
    total_swaps: int = 0
    tokens: Dict[str, int] = field(default_factory=dict)


class InMemoryWalletClient(WalletClient):
    """Sandbox ledger kept in process memory.

    Swaps settle 1:1 between base currency and tokens, which is enough to
    drive the engine locally and in tests.
    """

    def __init__(self, principal: Optional[str] = None):
        """Initialize in-memory wallet client."""
        self._principal = principal
        self._accounts: Dict[str, _Account] = {}
        logger.info(f"In-memory wallet client initialized (principal: {principal})")

    @property
    def principal(self) -> Optional[str]:
        return self._principal

    def login(self, principal: str):
        """Switch to an identity; accounts persist across logins."""
        self._principal = principal
        logger.info(f"Logged in as {principal}")

    def logout(self):
        self._principal = None
        logger.info("Logged out")

    def _account(self) -> _Account:
        if self._principal is None:
            raise WalletClientError("Not authenticated")
        return self._accounts.setdefault(self._principal, _Account())

    async def get_balance(self) -> int:
        return self._account().balance

    async def get_default_trade_size(self) -> int:
        return self._account().default_trade_size

    async def set_default_trade_size(self, amount: int) -> int:
        if amount < 0:
            raise WalletClientError("Default trade size cannot be negative")
        self._account().default_trade_size = amount
        return amount

    async def deposit(self, amount: int) -> TradeResult:
        account = self._account()
        if amount <= 0:
            return TradeResult(
                success=False,
                message="Deposit amount must be greater than 0",
                new_balance=account.balance,
            )
        account.balance += amount
        account.total_deposits += amount
        return TradeResult(
            success=True,
            message=f"Successfully deposited {amount} {BASE_SYMBOL}",
            new_balance=account.balance,
        )

    async def swap_base_to_token(self, symbol: str, amount: int) -> TradeResult:
        account = self._account()
        if amount <= 0:
            return TradeResult(
                success=False,
                message="Swap amount must be greater than 0",
                new_balance=account.balance,
            )
        if account.balance < amount:
            return TradeResult(
                success=False,
                message=(
                    f"Insufficient {BASE_SYMBOL} balance. "
                    f"Available: {account.balance}, Required: {amount}"
                ),
                new_balance=account.balance,
            )

        account.balance -= amount
        account.total_swaps += amount
        account.tokens[symbol] = account.tokens.get(symbol, 0) + amount
        return TradeResult(
            success=True,
            message=f"Successfully swapped {amount} {BASE_SYMBOL} to {amount} {symbol} tokens",
            new_balance=account.balance,
            new_token_balance=account.tokens[symbol],
        )

    async def swap_token_to_base(self, symbol: str, amount: int) -> TradeResult:
        account = self._account()
        held = account.tokens.get(symbol, 0)
        if amount <= 0:
            return TradeResult(
                success=False,
                message="Swap amount must be greater than 0",
                new_balance=account.balance,
            )
        if held < amount:
            return TradeResult(
                success=False,
                message=(
                    f"Insufficient {symbol} token balance. "
                    f"Available: {held}, Required: {amount}"
                ),
                new_balance=account.balance,
                new_token_balance=held,
            )

        account.balance += amount
        remaining = held - amount
        if remaining > 0:
            account.tokens[symbol] = remaining
        else:
            account.tokens.pop(symbol, None)
        return TradeResult(
            success=True,
            message=f"Successfully swapped {amount} {symbol} tokens to {amount} {BASE_SYMBOL}",
            new_balance=account.balance,
            new_token_balance=remaining,
        )

    async def get_portfolio(self) -> Portfolio:
        account = self._account()
        return Portfolio(
            base_balance=account.balance,
            default_trade_size=account.default_trade_size,
            total_deposits=account.total_deposits,
            total_swaps=account.total_swaps,
            token_balances=sorted(account.tokens.items()),
        )


class HttpWalletClient(WalletClient):
    """JSON-over-HTTP wallet gateway client."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize HTTP wallet client."""
        self.config = config or {}
        self.base_url = self.config.get('base_url', 'http://127.0.0.1:8080').rstrip('/')
        self.api_token = self.config.get('api_token') or ''
        self._principal = self.config.get('principal') or None
        self.timeout = self.config.get('timeout', 30)
        self._session: Optional[aiohttp.ClientSession] = None
        logger.info(f"HTTP wallet client initialized for {self.base_url}")

    @property
    def principal(self) -> Optional[str]:
        return self._principal

    def is_authenticated(self) -> bool:
        return bool(self._principal and self.api_token)

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

    async def _request(
        self, method: str, path: str, payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body."""
        session = await self._get_session()
        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "X-Principal": self._principal or "",
            "Content-Type": "application/json",
        }
        try:
            async with session.request(
                method, f"{self.base_url}{path}", json=payload, headers=headers
            ) as response:
                if response.status >= 400:
                    error_text = await response.text()
                    raise WalletClientError(
                        f"Wallet API error {response.status} on {method} {path}: {error_text}"
                    )
                data = await response.json()
        except asyncio.TimeoutError as e:
            raise WalletClientError(f"Wallet API request {method} {path} timed out") from e
        except aiohttp.ClientError as e:
            raise WalletClientError(f"Wallet API request {method} {path} failed: {e}") from e

        if not isinstance(data, dict):
            raise WalletClientError(f"Unexpected wallet response for {path}: {data!r}")
        return data

    def _parse_trade_result(self, data: Dict[str, Any]) -> TradeResult:
        if 'new_balance' not in data and 'new_icp_balance' in data:
            data = {**data, 'new_balance': data['new_icp_balance']}
        try:
            return TradeResult.model_validate(data)
        except ValidationError as e:
            raise WalletClientError(f"Malformed trade result: {e}")

    def _parse_amount(self, data: Dict[str, Any], key: str) -> int:
        try:
            return int(data[key])
        except (KeyError, TypeError, ValueError):
            raise WalletClientError(f"Wallet response missing integer '{key}': {data!r}")

    async def get_balance(self) -> int:
        data = await self._request("GET", "/balance")
        return self._parse_amount(data, "balance")

    async def get_default_trade_size(self) -> int:
        data = await self._request("GET", "/default-trade-size")
        return self._parse_amount(data, "amount")

    async def set_default_trade_size(self, amount: int) -> int:
        data = await self._request("PUT", "/default-trade-size", {"amount": amount})
        return self._parse_amount(data, "amount")

    async def swap_base_to_token(self, symbol: str, amount: int) -> TradeResult:
        data = await self._request(
            "POST", "/swaps/base-to-token", {"symbol": symbol, "amount": amount}
        )
        return self._parse_trade_result(data)

    async def swap_token_to_base(self, symbol: str, amount: int) -> TradeResult:
        data = await self._request(
            "POST", "/swaps/token-to-base", {"symbol": symbol, "amount": amount}
        )
        return self._parse_trade_result(data)

    async def deposit(self, amount: int) -> TradeResult:
        data = await self._request("POST", "/deposits", {"amount": amount})
        return self._parse_trade_result(data)

    async def get_portfolio(self) -> Portfolio:
        data = await self._request("GET", "/portfolio")
        try:
            return Portfolio.model_validate(data)
        except ValidationError as e:
            raise WalletClientError(f"Malformed portfolio: {e}")
