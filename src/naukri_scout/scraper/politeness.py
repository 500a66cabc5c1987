"""Politeness policy: randomized delays and browser fingerprint rotation.

One :class:`PolitenessPolicy` instance is shared by the browser session,
the pagination driver and the detail enricher, so every wait and every new
browser context follows the same settings.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field

from playwright.async_api import Browser, BrowserContext

USER_AGENTS = [
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:121.0) Gecko/20100101 Firefox/121.0",
]

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--disable-gpu",
    "--window-size=1920,1080",
    "--disable-blink-features=AutomationControlled",
]

# Runs before any page script in every context we create.
STEALTH_INIT_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => undefined,
});
Object.defineProperty(navigator, 'plugins', {
    get: () => [1, 2, 3, 4, 5],
});
Object.defineProperty(navigator, 'languages', {
    get: () => ['en-US', 'en'],
});
"""

Delay = tuple[float, float]


@dataclass
class PolitenessPolicy:
    """Delay ranges (seconds) and fingerprint settings.

    Attributes:
        user_agents: Pool to draw a user agent from for each new context.
        viewport: Fixed viewport for every context.
        page_settle: Wait after a results page has loaded.
        between_pages: Wait before requesting the next results page.
        detail_settle: Wait after a detail page has loaded.
        login_settle: Wait after the login page has loaded.
        field_pause: Wait between filling login form fields.
        login_submit: Wait after submitting the login form.
        keystroke_delay_ms: Per-character typing delay.
    """

    user_agents: list[str] = field(default_factory=lambda: list(USER_AGENTS))
    viewport: dict[str, int] = field(default_factory=lambda: {"width": 1920, "height": 1080})
    page_settle: Delay = (2.0, 4.0)
    between_pages: Delay = (3.0, 5.0)
    detail_settle: Delay = (1.0, 2.0)
    login_settle: Delay = (1.5, 2.5)
    field_pause: Delay = (0.5, 1.0)
    login_submit: Delay = (3.0, 5.0)
    keystroke_delay_ms: int = 50
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @classmethod
    def immediate(cls, **kwargs) -> "PolitenessPolicy":
        """A policy that never waits. Useful for tests and local fixtures."""
        zero = (0.0, 0.0)
        defaults = dict(
            page_settle=zero,
            between_pages=zero,
            detail_settle=zero,
            login_settle=zero,
            field_pause=zero,
            login_submit=zero,
            keystroke_delay_ms=0,
        )
        defaults.update(kwargs)
        return cls(**defaults)

    def pick_user_agent(self) -> str:
        return self.rng.choice(self.user_agents)

    async def pause(self, delay: Delay) -> None:
        """Sleep for a random duration within ``delay``."""
        low, high = delay
        if high <= 0:
            return
        await asyncio.sleep(self.rng.uniform(low, max(low, high)))

    async def new_context(self, browser: Browser) -> BrowserContext:
        """Open a browser context with a fresh fingerprint."""
        context = await browser.new_context(
            user_agent=self.pick_user_agent(),
            viewport=self.viewport,
            locale="en-US",
        )
        await context.add_init_script(STEALTH_INIT_SCRIPT)
        return context
