"""Console swipe trading application."""

import asyncio
import logging
import os
import sys
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()

from .catalog.catalog import TokenCatalog
from .catalog.generator import GeminiTokenGenerator
from .catalog.icons import icon_glyph
from .catalog.static import category_title
from .core.enums import Direction, EngineState
from .core.formatting import format_base, format_usd, major_to_minor
from .core.models import Candidate, Notification
from .decision.engine import SwipeDecisionEngine
from .notifications.channel import NotificationChannel
from .wallet.client import HttpWalletClient, InMemoryWalletClient, WalletClientError
from .wallet.session import WalletSession

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler('swipe_trader.log'),
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Commands: a/buy, r/skip, d <px> (drag), b (refresh balance), "
    "p (portfolio), s <SYMBOL> <amount> (sell), x (dismiss), q (quit)"
)


class SwipeApp:
    """Wires the catalog, wallet session, notifications and engine together."""

    def __init__(self, config: Optional[Dict] = None):
        """Initialize swipe app."""
        defaults = self._default_config()
        if config:
            for key, val in config.items():
                if isinstance(val, dict) and key in defaults and isinstance(defaults[key], dict):
                    defaults[key].update(val)
                else:
                    defaults[key] = val
        self.config = defaults
        self._running = False

        self._init_components()

        logger.info("Swipe app initialized")

    def _default_config(self) -> Dict:
        """Default configuration."""
        return {
            'wallet': {
                'base_url': None,       # None uses the in-memory sandbox ledger
                'api_token': os.getenv('WALLET_API_TOKEN'),
                'principal': os.getenv('WALLET_PRINCIPAL', 'sandbox-user'),
                'timeout': 30,
                'sandbox_deposit': 1000,        # minor units
                'default_trade_size': 100,      # minor units
            },
            'generator': {
                'enabled': False,
                'api_key': os.getenv('GEMINI_API_KEY', ''),
                'model': 'gemini-2.0-flash',
            },
            'engine': {
                'threshold_px': 100,
                'refresh_after_trade': True,
            },
            'notifications': {
                'default_ttl_ms': 3000,
            },
            'browse': {
                'category': 'meme-coins',
                'prompt': None,
            },
        }

    def _init_components(self):
        """Initialize all app components."""
        try:
            wallet_config = self.config['wallet']
            if wallet_config.get('base_url'):
                self.wallet_client = HttpWalletClient(wallet_config)
                self.sandbox = False
            else:
                self.wallet_client = InMemoryWalletClient(wallet_config.get('principal'))
                self.sandbox = True
            self.session = WalletSession(self.wallet_client)

            self.notifications = NotificationChannel(
                default_ttl_ms=self.config['notifications']['default_ttl_ms']
            )
            self.notifications.subscribe(self._render_notification)

            self.generator = GeminiTokenGenerator(self.config['generator'])
            self.catalog = TokenCatalog(self.generator)

            self.engine = SwipeDecisionEngine(
                self.catalog,
                self.session,
                self.notifications,
                config=self.config['engine'],
            )

            logger.info("All components initialized successfully")

        except Exception as e:
            logger.error(f"Error initializing components: {e}")
            raise

    async def start(self):
        """Authenticate, load a queue and run the console loop."""
        logger.info("Starting swipe app...")
        if self.sandbox:
            await self._seed_sandbox()
        await self.session.authenticate()

        browse = self.config['browse']
        if browse.get('prompt'):
            await self.engine.load_prompt(browse['prompt'])
            title = f"AI picks for {browse['prompt']!r}"
        else:
            self.engine.load_category(browse['category'])
            title = category_title(self.engine.queue.source)

        print(f"\n=== {title} ===\n{HELP_TEXT}")
        self._running = True
        await self._run_console()

    async def _seed_sandbox(self):
        """Give the sandbox identity a default trade size and some funds."""
        wallet_config = self.config['wallet']
        await self.wallet_client.set_default_trade_size(wallet_config['default_trade_size'])
        await self.wallet_client.deposit(wallet_config['sandbox_deposit'])
        logger.info(
            f"Sandbox seeded: deposit={format_base(wallet_config['sandbox_deposit'])} "
            f"default={format_base(wallet_config['default_trade_size'])}"
        )

    async def _run_console(self):
        """Read commands until the queue is exhausted or the user quits."""
        while self._running:
            candidate = self.engine.current_candidate()
            if self.engine.state == EngineState.EXHAUSTED or candidate is None:
                print("No more tokens to swipe!")
                break

            print(self._render_card(candidate))
            raw = await asyncio.to_thread(input, "> ")
            await self._handle_command(raw.strip())

    async def _handle_command(self, raw: str):
        """Dispatch one console command."""
        parts = raw.split()
        if not parts:
            return
        command, args = parts[0].lower(), parts[1:]

        try:
            if command in ('a', 'buy'):
                await self.engine.decide(Direction.ACCEPT)
            elif command in ('r', 'skip'):
                await self.engine.decide(Direction.REJECT)
            elif command == 'd' and args:
                await self.engine.on_drag_end(float(args[0]))
            elif command == 'b':
                await self.session.refresh()
                print(f"Balance: {format_base(self.session.state.icp_balance)}")
            elif command == 'p':
                portfolio = await self.session.portfolio()
                holdings = ", ".join(f"{s}={a}" for s, a in portfolio.token_balances) or "none"
                print(f"Balance: {format_base(portfolio.base_balance)} | Holdings: {holdings}")
            elif command == 's' and len(args) == 2:
                result = await self.session.sell(args[0].upper(), major_to_minor(args[1]))
                print(result.message)
            elif command == 'x':
                self.notifications.dismiss()
            elif command == 'q':
                self._running = False
            else:
                print(HELP_TEXT)
        except (ValueError, WalletClientError) as e:
            logger.error(f"Command '{raw}' failed: {e}")

    def _render_card(self, candidate: Candidate) -> str:
        """Text rendering of a token card."""
        queue = self.engine.queue
        lines = [
            f"\n[{queue.cursor + 1}/{len(queue)}] {icon_glyph(candidate)} {candidate.name} ({candidate.symbol})",
            f"  Price: ${candidate.price:.10g}  24h: {candidate.price_change_percent:+.2f}%",
        ]
        if candidate.market_cap_usd is not None:
            lines.append(f"  Market cap: {format_usd(candidate.market_cap_usd)}")
        if candidate.liquidity_usd is not None:
            lines.append(f"  Liquidity: {format_usd(candidate.liquidity_usd)}")
        if candidate.is_generated:
            lines.append(f"  AI ({candidate.category}, {candidate.risk_level.value} risk): {candidate.reasoning}")
        return "\n".join(lines)

    def _render_notification(self, notification: Optional[Notification]):
        if notification is not None:
            print(f"\n  ** {notification.title}: {notification.message}")

    async def stop(self):
        """Stop the app and release resources."""
        self._running = False
        await self.engine.close()
        self.notifications.close()
        await self.generator.close()
        await self.session.close()
        logger.info("Swipe app stopped")

    def get_status(self) -> Dict:
        """Get app status."""
        return {
            'running': self._running,
            'state': self.engine.state.value,
            'remaining': self.engine.remaining,
            'balance': self.session.state.icp_balance,
            'default_trade_size': self.session.state.default_trade_size,
            'decisions': self.engine.get_decision_stats(),
        }


def _config_from_env() -> Dict:
    """Build config dict from environment variables."""
    config: Dict = {}

    # Wallet
    base_url = os.getenv('WALLET_BASE_URL', '').strip()
    sandbox_deposit = os.getenv('SANDBOX_DEPOSIT', '').strip()
    default_size = os.getenv('DEFAULT_TRADE_SIZE', '').strip()
    if base_url or sandbox_deposit or default_size:
        config['wallet'] = {}
        if base_url:
            config['wallet']['base_url'] = base_url
        if sandbox_deposit:
            config['wallet']['sandbox_deposit'] = int(sandbox_deposit)
        if default_size:
            config['wallet']['default_trade_size'] = int(default_size)

    # Generator
    generator_enabled = os.getenv('GENERATOR_ENABLED', '').strip().lower()
    if generator_enabled in ('1', 'true', 'yes'):
        config['generator'] = {'enabled': True, 'api_key': os.getenv('GEMINI_API_KEY', '')}

    # Engine
    threshold = os.getenv('SWIPE_THRESHOLD_PX', '').strip()
    if threshold:
        config['engine'] = {'threshold_px': float(threshold)}

    # Notifications
    ttl = os.getenv('NOTIFICATION_TTL_MS', '').strip()
    if ttl:
        config['notifications'] = {'default_ttl_ms': int(ttl)}

    # Browse
    category = os.getenv('SWIPE_CATEGORY', '').strip()
    prompt = os.getenv('SWIPE_PROMPT', '').strip()
    if category or prompt:
        config['browse'] = {}
        if category:
            config['browse']['category'] = category
        if prompt:
            config['browse']['prompt'] = prompt

    return config


async def main():
    """Main entry point."""
    config = _config_from_env()

    app = SwipeApp(config if config else None)

    try:
        await app.start()
    except (KeyboardInterrupt, EOFError):
        logger.info("Received interrupt")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
    finally:
        await app.stop()


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
