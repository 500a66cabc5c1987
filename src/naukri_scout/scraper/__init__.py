"""Scraper module for naukri-scout.

- Browser session lifecycle and login (``session``)
- Paginated keyword search (``naukri``)
- Detail-page enrichment (``detail``)
- Selector-chain extraction from rendered HTML (``extract``)
- Skill matching (``skills``)
"""

from .detail import DetailEnricher
from .extract import DetailSelectors, ListingSelectors, build_selectors, parse_detail, parse_listings
from .models import EnrichedJob, JobDetail, JobListing
from .naukri import NaukriScraper, ScrapeOptions
from .politeness import PolitenessPolicy
from .session import AuthStatus, BrowserSession
from .site import build_search_url
from .skills import match_skills

__all__ = [
    # Records
    "JobListing",
    "JobDetail",
    "EnrichedJob",
    # Browser-driven scraping
    "BrowserSession",
    "AuthStatus",
    "NaukriScraper",
    "ScrapeOptions",
    "DetailEnricher",
    "PolitenessPolicy",
    "build_search_url",
    # Pure extraction and matching
    "ListingSelectors",
    "DetailSelectors",
    "build_selectors",
    "parse_listings",
    "parse_detail",
    "match_skills",
]
