"""Field extraction from rendered Naukri pages.

Naukri serves several markup variants at once, so no field is read from a
single fixed location. Each field has an ordered chain of extractors (plain
functions from a parsed node to an optional string); the first extractor
that yields plausible content wins. The chains are built from selector
lists held in :class:`ListingSelectors` and :class:`DetailSelectors`, which
can be replaced per field from the scrape configuration.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, fields, replace
from typing import Callable, Iterable, Iterator, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from ..config import SelectorOverrides
from ..errors import ConfigError
from .models import NOT_DISCLOSED, NOT_SPECIFIED, JobDetail, JobListing

logger = logging.getLogger(__name__)

Extractor = Callable[[Tag], Optional[str]]

# Detail descriptions shorter than this are treated as empty containers.
MIN_DESCRIPTION_LENGTH = 50

# Only short text nodes are scanned for an "N openings" phrase.
MAX_VACANCY_TEXT_LENGTH = 40

OPENINGS_RGX = re.compile(r"\b(\d+)\s*(?:openings?|vacanc(?:y|ies))\b", re.I)


@dataclass
class ListingSelectors:
    """Ordered selector chains for search-result cards."""

    cards: list[str] = field(default_factory=lambda: [
        ".srp-jobtuple-wrapper",
        ".jobTuple",
        "[data-job-id]",
        ".cust-job-tuple",
    ])
    title: list[str] = field(default_factory=lambda: [".title", ".jobTitle", "a.title", "[class*='title']"])
    url: list[str] = field(default_factory=lambda: ["a.title", "a[class*='title']", ".title a"])
    company: list[str] = field(default_factory=lambda: [".comp-name", ".companyInfo", "[class*='company']", ".subTitle"])
    location: list[str] = field(default_factory=lambda: [".loc-wrap", ".location", "[class*='location']", ".locWdth"])
    experience: list[str] = field(default_factory=lambda: [".exp-wrap", ".experience", "[class*='exp']", ".expwdth"])
    salary: list[str] = field(default_factory=lambda: [".sal-wrap", ".salary", "[class*='salary']", ".salWrap"])
    skills: list[str] = field(default_factory=lambda: [".tag-li", ".skill", "[class*='skill']", ".tags-gt li"])
    description: list[str] = field(default_factory=lambda: [".job-desc", ".description", "[class*='desc']", ".row2"])
    posted: list[str] = field(default_factory=lambda: [".job-post-day", ".date", "[class*='date']", ".fleft.grey-text"])

    @property
    def card_selector(self) -> str:
        """All card selectors as one CSS group, for readiness polling."""
        return ", ".join(self.cards)


@dataclass
class DetailSelectors:
    """Ordered selector chains for a job's detail page."""

    description: list[str] = field(default_factory=lambda: [
        "[class*='dang-inner-html']",
        "section[class*='job-desc']",
        ".job-desc",
        "[class*='job-desc']",
        "#job_description",
    ])
    key_skills: list[str] = field(default_factory=lambda: [
        "[class*='key-skill'] a",
        "[class*='key-skill'] span",
        ".key-skill a",
        ".chip-container .chip",
        "[class*='chip'] span",
    ])
    salary: list[str] = field(default_factory=lambda: [
        "[class*='salary'] span",
        "[class*='salary']",
        ".salary",
    ])
    labels: list[str] = field(default_factory=lambda: ["label", ".label", "[class*='label']", "dt"])


_FIELD_ALIASES = {"keySkills": "key_skills"}


def _apply_overrides(selectors, overrides: dict[str, list[str]], section: str):
    known = {f.name for f in fields(selectors)}
    changes = {}
    for key, chain in overrides.items():
        name = _FIELD_ALIASES.get(key, key)
        if name not in known:
            raise ConfigError(f"Unknown {section} selector field '{key}'")
        if not chain:
            raise ConfigError(f"Selector chain for {section}.{key} is empty")
        changes[name] = list(chain)
    return replace(selectors, **changes)


def build_selectors(overrides: Optional[SelectorOverrides] = None) -> tuple[ListingSelectors, DetailSelectors]:
    """Build selector chains, replacing any field named in ``overrides``."""
    listing, detail = ListingSelectors(), DetailSelectors()
    if overrides is None:
        return listing, detail
    return (
        _apply_overrides(listing, overrides.listing, "listing"),
        _apply_overrides(detail, overrides.detail, "detail"),
    )


def clean_text(text: Optional[str]) -> Optional[str]:
    """Collapse whitespace; return None for empty text."""
    if not text:
        return None
    text = re.sub(r"\s+", " ", text.strip())
    return text or None


def select_text(selector: str) -> Extractor:
    def extract(node: Tag) -> Optional[str]:
        elem = node.select_one(selector)
        return clean_text(elem.get_text(" ")) if elem else None
    return extract


def select_block_text(selector: str) -> Extractor:
    """Like :func:`select_text` but keeps one line per text block."""
    def extract(node: Tag) -> Optional[str]:
        elem = node.select_one(selector)
        if not elem:
            return None
        return elem.get_text("\n", strip=True) or None
    return extract


def select_attr(selector: str, attr: str) -> Extractor:
    def extract(node: Tag) -> Optional[str]:
        elem = node.select_one(selector)
        if not elem:
            return None
        value = elem.get(attr)
        return value.strip() if isinstance(value, str) and value.strip() else None
    return extract


def first_match(
    node: Tag,
    extractors: Iterable[Extractor],
    accept: Callable[[str], bool] = bool,
) -> Optional[str]:
    """Run extractors in order and return the first accepted value."""
    for extractor in extractors:
        value = extractor(node)
        if value is not None and accept(value):
            return value
    return None


def first_group(node: Tag, selectors: Iterable[str]) -> list[str]:
    """Texts of the first selector group that matches anything.

    Groups are not merged; duplicates inside the winning group are dropped
    while keeping order.
    """
    for selector in selectors:
        values: list[str] = []
        for elem in node.select(selector):
            text = clean_text(elem.get_text(" "))
            if text and text not in values:
                values.append(text)
        if values:
            return values
    return []


def resolve_url(href: Optional[str], base_url: str) -> Optional[str]:
    """Absolute http(s) URL for ``href``, or None if it is not navigable."""
    if not href or href.startswith(("#", "javascript:")):
        return None
    url = urljoin(base_url, href)
    if urlparse(url).scheme not in ("http", "https"):
        return None
    return url


def find_cards(soup: BeautifulSoup, selectors: ListingSelectors) -> list[Tag]:
    """Cards from the first card selector that matches anything."""
    for selector in selectors.cards:
        cards = soup.select(selector)
        if cards:
            return cards
    return []


def parse_card(card: Tag, keyword: str, base_url: str, selectors: ListingSelectors) -> Optional[JobListing]:
    """Parse one search-result card.

    Returns None unless the card has a title, a company and a URL.
    """
    title = first_match(card, map(select_text, selectors.title))
    company = first_match(card, map(select_text, selectors.company))
    href = first_match(card, (select_attr(s, "href") for s in selectors.url))
    job_url = resolve_url(href, base_url)
    if not title or not company or not job_url:
        return None

    return JobListing(
        title=title,
        company=company,
        job_url=job_url,
        search_keyword=keyword,
        location=first_match(card, map(select_text, selectors.location)) or NOT_SPECIFIED,
        experience_range=first_match(card, map(select_text, selectors.experience)) or NOT_SPECIFIED,
        salary_disclosed=first_match(card, map(select_text, selectors.salary)) or NOT_DISCLOSED,
        posted_date=first_match(card, map(select_text, selectors.posted)) or NOT_SPECIFIED,
        skills=first_group(card, selectors.skills),
        description=first_match(card, map(select_text, selectors.description)) or "",
    )


def parse_listings(
    html: str,
    keyword: str,
    base_url: str,
    selectors: Optional[ListingSelectors] = None,
) -> list[JobListing]:
    """Parse every valid job card on a search-results page."""
    selectors = selectors or ListingSelectors()
    soup = BeautifulSoup(html, "html.parser")
    cards = find_cards(soup, selectors)

    jobs: list[JobListing] = []
    seen_urls: set[str] = set()
    dropped = 0
    for card in cards:
        job = parse_card(card, keyword, base_url, selectors)
        if job is None:
            dropped += 1
            continue
        if job.job_url in seen_urls:
            continue
        seen_urls.add(job.job_url)
        jobs.append(job)

    logger.debug("Listing parse stats cards=%s kept=%s dropped=%s", len(cards), len(jobs), dropped)
    return jobs


def _label_pairs(soup: BeautifulSoup, label_selectors: list[str]) -> Iterator[tuple[str, Tag]]:
    """Yield (label name, value element) for label-like elements.

    The value is the label's next element sibling.
    """
    for label in soup.select(", ".join(label_selectors)):
        name = clean_text(label.get_text(" "))
        value = label.find_next_sibling()
        if not name or value is None:
            continue
        yield name.rstrip(":").strip().lower(), value


def _value_items(value: Tag) -> list[str]:
    links = [clean_text(a.get_text(" ")) for a in value.find_all("a")]
    items = [link for link in links if link]
    if not items:
        text = clean_text(value.get_text(" ")) or ""
        items = [part.strip() for part in text.split(",") if part.strip()]
    deduped: list[str] = []
    for item in items:
        if item not in deduped:
            deduped.append(item)
    return deduped


def scan_openings(soup: BeautifulSoup) -> Optional[str]:
    """Find an "N openings" phrase in short span texts."""
    for span in soup.find_all("span"):
        text = clean_text(span.get_text(" "))
        if not text or len(text) > MAX_VACANCY_TEXT_LENGTH:
            continue
        m = OPENINGS_RGX.search(text)
        if m:
            return m.group(1)
    return None


def parse_detail(html: str, selectors: Optional[DetailSelectors] = None) -> JobDetail:
    """Parse a job detail page. Unresolved fields keep their defaults."""
    selectors = selectors or DetailSelectors()
    soup = BeautifulSoup(html, "html.parser")
    detail = JobDetail()

    description = first_match(
        soup,
        map(select_block_text, selectors.description),
        accept=lambda text: len(text) > MIN_DESCRIPTION_LENGTH,
    )
    if description:
        detail.full_description = description

    detail.key_skills = first_group(soup, selectors.key_skills)

    salary = first_match(soup, map(select_text, selectors.salary))
    if salary:
        detail.salary_offered = salary

    for name, value in _label_pairs(soup, selectors.labels):
        if "industry" in name and not detail.industry_types:
            detail.industry_types = _value_items(value)
        elif name.startswith("posted") and detail.job_posted_at == NOT_SPECIFIED:
            detail.job_posted_at = clean_text(value.get_text(" ")) or NOT_SPECIFIED
        elif ("opening" in name or "vacanc" in name) and detail.total_vacancy == NOT_SPECIFIED:
            detail.total_vacancy = clean_text(value.get_text(" ")) or NOT_SPECIFIED

    # The span scan runs second and wins whenever it finds something.
    openings = scan_openings(soup)
    if openings:
        detail.total_vacancy = openings

    return detail
