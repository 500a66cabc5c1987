"""Browser session lifecycle and Naukri login."""

from __future__ import annotations

import enum
import logging
from typing import Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    ElementHandle,
    Error as PlaywrightError,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeout,
    async_playwright,
)

from ..config import Credentials
from ..errors import BrowserError
from .politeness import LAUNCH_ARGS, PolitenessPolicy
from .site import (
    LOGIN_FORM_TIMEOUT_MS,
    LOGIN_MARKER_TIMEOUT_MS,
    LOGIN_URL,
    NAVIGATION_TIMEOUT_MS,
)

logger = logging.getLogger(__name__)

EMAIL_INPUT_SELECTORS = ["#usernameField", "input[placeholder*='Email']", "input[type='text']"]
PASSWORD_INPUT_SELECTORS = ["#passwordField", "input[type='password']"]
SUBMIT_SELECTORS = ["button[type='submit']", ".loginButton", "button:has-text('Login')"]
LOGGED_IN_MARKERS = ".nI-gNb-drawer, .user-name, [class*='profile'], .view-all-link"
LOGIN_ERROR_MARKERS = ".error-msg, .error, [class*='error']"


class AuthStatus(str, enum.Enum):
    """Outcome of :meth:`BrowserSession.authenticate`."""

    NOT_ATTEMPTED = "not_attempted"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class BrowserSession:
    """Owns the Playwright process, the browser and the primary page.

    Use it as an async context manager so the browser is released on every
    exit path::

        async with BrowserSession(headless=True) as session:
            await session.authenticate(credentials)
            ...
    """

    def __init__(self, headless: bool = True, policy: Optional[PolitenessPolicy] = None):
        self.headless = headless
        self.policy = policy or PolitenessPolicy()
        self._playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self.is_authenticated = False

    async def __aenter__(self) -> "BrowserSession":
        try:
            await self.initialize()
        except PlaywrightError as e:
            await self.shutdown()
            raise BrowserError(f"Failed to start browser: {e}") from e
        except BaseException:
            await self.shutdown()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()

    async def initialize(self) -> None:
        """Launch Chromium and open the primary page."""
        logger.info("Launching headless browser")
        self._playwright = await async_playwright().start()
        self.browser = await self._playwright.chromium.launch(headless=self.headless, args=LAUNCH_ARGS)
        self.context = await self.policy.new_context(self.browser)
        self.page = await self.context.new_page()
        logger.info("Browser initialized with anti-detection measures")

    async def shutdown(self) -> None:
        """Close the browser and stop Playwright. Safe to call repeatedly."""
        browser, self.browser = self.browser, None
        playwright, self._playwright = self._playwright, None
        self.context = None
        self.page = None
        try:
            if browser is not None:
                await browser.close()
                logger.info("Browser closed")
        finally:
            if playwright is not None:
                await playwright.stop()

    def require_page(self) -> Page:
        if self.page is None:
            raise RuntimeError("Browser session is not initialized")
        return self.page

    async def _first_element(self, selectors: list[str]) -> Optional[ElementHandle]:
        page = self.require_page()
        for selector in selectors:
            element = await page.query_selector(selector)
            if element is not None:
                return element
        return None

    async def authenticate(self, credentials: Optional[Credentials]) -> AuthStatus:
        """Log into Naukri.com.

        Missing credentials skip the login. A failed login is logged and
        reported, never raised: scraping continues unauthenticated.
        """
        if credentials is None:
            logger.info("No Naukri credentials provided, continuing without login")
            return AuthStatus.NOT_ATTEMPTED

        page = self.require_page()
        policy = self.policy
        logger.info("Logging into Naukri.com")
        try:
            await page.goto(LOGIN_URL, wait_until="networkidle", timeout=NAVIGATION_TIMEOUT_MS)
            await policy.pause(policy.login_settle)
            await page.wait_for_selector(", ".join(EMAIL_INPUT_SELECTORS), timeout=LOGIN_FORM_TIMEOUT_MS)

            email_input = await self._first_element(EMAIL_INPUT_SELECTORS)
            if email_input:
                await email_input.click(click_count=3)
                await email_input.type(credentials.email, delay=policy.keystroke_delay_ms)
            await policy.pause(policy.field_pause)

            password_input = await self._first_element(PASSWORD_INPUT_SELECTORS)
            if password_input:
                await password_input.click()
                await password_input.type(credentials.password, delay=policy.keystroke_delay_ms)
            await policy.pause(policy.field_pause)

            submit = await self._first_element(SUBMIT_SELECTORS)
            if submit:
                await submit.click()
            else:
                await page.keyboard.press("Enter")
            await policy.pause(policy.login_submit)

            try:
                await page.wait_for_selector(LOGGED_IN_MARKERS, timeout=LOGIN_MARKER_TIMEOUT_MS)
            except PlaywrightTimeout:
                error = await page.query_selector(LOGIN_ERROR_MARKERS)
                if error:
                    message = (await error.text_content() or "").strip()
                    logger.warning("Login failed: %s", message)
                else:
                    logger.warning("Login status uncertain, continuing anyway")
                return AuthStatus.FAILED
        except PlaywrightError as e:
            logger.warning("Error during login: %s", e)
            return AuthStatus.FAILED

        logger.info("Successfully logged into Naukri.com")
        self.is_authenticated = True
        return AuthStatus.AUTHENTICATED
