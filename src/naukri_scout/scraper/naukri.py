"""Naukri.com search scraper.

Drives the primary browser page through the paginated results for one
keyword at a time. Each results page goes through the same steps: navigate,
wait for job cards, extract the cards, enrich each card from its detail page
(optional), then move on to the next page or stop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional

from playwright.async_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeout

from ..config import ExperienceRange, ScrapeConfig
from ..errors import ScrapeError
from .detail import DetailEnricher
from .extract import ListingSelectors, build_selectors, parse_listings
from .models import EnrichedJob, JobListing
from .politeness import PolitenessPolicy
from .session import BrowserSession
from .site import CONTENT_TIMEOUT_MS, NAVIGATION_TIMEOUT_MS, build_search_url
from .skills import match_skills

logger = logging.getLogger(__name__)


@dataclass
class ScrapeOptions:
    """What to do with each keyword's results.

    Attributes:
        skills: Configured skills to match job skills against.
        experience: Experience bounds applied to the search URL.
        scrape_job_details: Visit each job's detail page.
    """

    skills: list[str] = field(default_factory=list)
    experience: Optional[ExperienceRange] = None
    scrape_job_details: bool = True

    @classmethod
    def from_config(cls, config: ScrapeConfig) -> "ScrapeOptions":
        return cls(
            skills=list(config.skills),
            experience=config.experience,
            scrape_job_details=config.scraping.scrape_job_details,
        )

    @property
    def experience_label(self) -> str:
        return self.experience.label() if self.experience else ""


class NaukriScraper:
    """Paginated keyword search on Naukri.com."""

    def __init__(
        self,
        page: Page,
        enricher: Optional[DetailEnricher] = None,
        policy: Optional[PolitenessPolicy] = None,
        selectors: Optional[ListingSelectors] = None,
    ):
        """Initialize the scraper.

        Args:
            page: Primary browser page used for results pages.
            enricher: Detail-page enricher; without one, detail scraping is skipped.
            policy: Delay policy between and after page loads.
            selectors: Listing selector chains.
        """
        self.page = page
        self.enricher = enricher
        self.policy = policy or PolitenessPolicy()
        self.selectors = selectors or ListingSelectors()

    @classmethod
    def from_session(cls, session: BrowserSession, config: Optional[ScrapeConfig] = None) -> "NaukriScraper":
        """Build a scraper that shares ``session``'s page, browser and policy."""
        overrides = config.selectors if config is not None else None
        listing_selectors, detail_selectors = build_selectors(overrides)
        enricher = None
        if session.browser is not None:
            enricher = DetailEnricher(session.browser, session.policy, detail_selectors)
        return cls(session.require_page(), enricher, session.policy, listing_selectors)

    async def _fetch_results(self, url: str) -> Optional[str]:
        """Load a results page and return its HTML.

        Returns None when no job card shows up in time. Navigation faults
        propagate.
        """
        await self.page.goto(url, wait_until="networkidle", timeout=NAVIGATION_TIMEOUT_MS)
        await self.policy.pause(self.policy.page_settle)
        try:
            await self.page.wait_for_selector(
                self.selectors.card_selector, state="attached", timeout=CONTENT_TIMEOUT_MS
            )
        except PlaywrightTimeout:
            return None
        return await self.page.content()

    async def _enrich(self, listing: JobListing, options: ScrapeOptions) -> EnrichedJob:
        job = EnrichedJob.from_listing(listing, options.experience_label)
        if options.scrape_job_details and self.enricher is not None:
            job.apply_detail(await self.enricher.enrich(job.job_url))
        job.matched_skills = match_skills(job.all_skills(), options.skills)
        return job

    async def iter_pages(
        self,
        keyword: str,
        max_pages: int = 3,
        options: Optional[ScrapeOptions] = None,
    ) -> AsyncIterator[list[EnrichedJob]]:
        """Yield one batch of enriched jobs per results page.

        Raises:
            ScrapeError: If the first results page cannot be loaded.
        """
        options = options or ScrapeOptions()
        logger.info("Searching for '%s' jobs on Naukri.com", keyword)

        for page_num in range(1, max_pages + 1):
            url = build_search_url(keyword, page_num, options.experience)
            logger.info("Scraping page %s/%s: %s", page_num, max_pages, url)

            try:
                html = await self._fetch_results(url)
            except PlaywrightError as e:
                if page_num == 1:
                    raise ScrapeError(keyword, str(e)) from e
                logger.info("Error loading page %s for '%s', stopping pagination: %s", page_num, keyword, e)
                break

            if html is None:
                logger.info("No job cards found on page %s, might be end of results", page_num)
                break

            listings = parse_listings(html, keyword, url, self.selectors)
            if not listings:
                logger.info("No jobs extracted from page %s, stopping pagination", page_num)
                break
            logger.info("Found %s jobs on page %s", len(listings), page_num)

            batch = []
            for index, listing in enumerate(listings, 1):
                if options.scrape_job_details and self.enricher is not None:
                    logger.debug("Fetching details %s/%s: %s", index, len(listings), listing.job_url)
                batch.append(await self._enrich(listing, options))
            yield batch

            if page_num < max_pages:
                await self.policy.pause(self.policy.between_pages)

    async def scrape_jobs(
        self,
        keyword: str,
        max_pages: int = 3,
        options: Optional[ScrapeOptions] = None,
    ) -> list[EnrichedJob]:
        """Scrape every page for ``keyword`` and return all jobs."""
        jobs: list[EnrichedJob] = []
        async for batch in self.iter_pages(keyword, max_pages, options):
            jobs.extend(batch)
        logger.info("Total jobs found for '%s': %s", keyword, len(jobs))
        return jobs
