"""Detail-page enrichment for single jobs."""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Browser

from .extract import DetailSelectors, parse_detail
from .models import JobDetail
from .politeness import PolitenessPolicy
from .site import NAVIGATION_TIMEOUT_MS

logger = logging.getLogger(__name__)


class DetailEnricher:
    """Scrapes a job's detail page in its own browser context.

    Each job gets a fresh context (and so a fresh fingerprint), leaving the
    results page untouched. Any failure yields an all-default
    :class:`JobDetail`.
    """

    def __init__(
        self,
        browser: Browser,
        policy: Optional[PolitenessPolicy] = None,
        selectors: Optional[DetailSelectors] = None,
    ):
        self.browser = browser
        self.policy = policy or PolitenessPolicy()
        self.selectors = selectors or DetailSelectors()

    async def enrich(self, job_url: str) -> JobDetail:
        context = None
        try:
            context = await self.policy.new_context(self.browser)
            page = await context.new_page()
            await page.goto(job_url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS)
            await self.policy.pause(self.policy.detail_settle)
            html = await page.content()
            return parse_detail(html, self.selectors)
        except Exception as e:
            logger.warning("Could not scrape details for %s: %s", job_url, e)
            return JobDetail()
        finally:
            if context is not None:
                try:
                    await context.close()
                except Exception as e:
                    logger.debug("Error closing detail context for %s: %s", job_url, e)
