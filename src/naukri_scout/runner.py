"""Scrape-and-save orchestration across keywords."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Sequence

from .config import Credentials, ScrapeConfig, Settings
from .db.store import JobStore, SaveResult
from .errors import ScrapeError
from .scraper.naukri import NaukriScraper, ScrapeOptions
from .scraper.politeness import PolitenessPolicy
from .scraper.session import BrowserSession

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


async def scrape_and_save(
    scraper: NaukriScraper,
    store: JobStore,
    keyword: str,
    pages: int,
    config: ScrapeConfig,
) -> SaveResult:
    """Scrape ``keyword`` and save each results page as it arrives."""
    options = ScrapeOptions.from_config(config)
    total = SaveResult()
    async for batch in scraper.iter_pages(keyword, pages, options):
        total = total + store.save_jobs(batch)
    logger.info(
        "Keyword '%s' done found=%s saved=%s duplicates=%s matched=%s",
        keyword,
        total.found,
        total.saved,
        total.duplicates,
        total.matched,
    )
    return total


async def run_keywords(
    scraper: NaukriScraper,
    store: JobStore,
    keywords: Sequence[str],
    config: ScrapeConfig,
    pages: Optional[int] = None,
    on_keyword: Optional[ProgressCallback] = None,
) -> tuple[SaveResult, list[str]]:
    """Scrape keywords one after another.

    A keyword whose first page cannot be loaded is logged and skipped; the
    remaining keywords are still scraped.

    Returns:
        Combined counts and the keywords that failed.
    """
    pages = pages if pages is not None else config.scraping.pages_per_keyword
    delay_s = config.scraping.delay_between_keywords / 1000
    total = SaveResult()
    failed: list[str] = []

    for index, keyword in enumerate(keywords, 1):
        if on_keyword is not None:
            on_keyword(index, len(keywords), keyword)
        try:
            total = total + await scrape_and_save(scraper, store, keyword, pages, config)
        except ScrapeError as e:
            logger.error("%s", e)
            failed.append(keyword)

        if index < len(keywords) and delay_s > 0:
            logger.info("Waiting %ss before next keyword", delay_s)
            await asyncio.sleep(delay_s)

    return total, failed


async def run_scrape(
    settings: Settings,
    store: JobStore,
    keywords: Sequence[str],
    config: ScrapeConfig,
    pages: Optional[int] = None,
    credentials: Optional[Credentials] = None,
    policy: Optional[PolitenessPolicy] = None,
    on_keyword: Optional[ProgressCallback] = None,
) -> tuple[SaveResult, list[str]]:
    """Open a browser session, optionally log in, and scrape ``keywords``.

    The browser is shut down on every exit path.
    """
    async with BrowserSession(headless=settings.headless, policy=policy) as session:
        await session.authenticate(credentials)
        scraper = NaukriScraper.from_session(session, config)
        return await run_keywords(scraper, store, keywords, config, pages, on_keyword)
