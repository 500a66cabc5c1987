"""Shared fixtures and fake Playwright objects for the test suite."""

from typing import Optional, Union

import pytest
from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from naukri_scout.scraper.politeness import PolitenessPolicy


def card_html(
    index: int,
    *,
    title: Optional[str] = "Node JS Developer",
    company: Optional[str] = "TechCorp",
    href: Optional[str] = None,
    skills: tuple = ("Node.js", "MongoDB"),
) -> str:
    """Render one search-result card in Naukri's current markup."""
    if href is None:
        href = f"https://www.naukri.com/job-listings-node-js-developer-{index}"
    title_html = f'<a class="title" href="{href}">{title} {index}</a>' if title else ""
    company_html = f'<span class="comp-name">{company} {index}</span>' if company else ""
    skills_html = "".join(f'<li class="tag-li">{skill}</li>' for skill in skills)
    return f"""
    <div class="srp-jobtuple-wrapper" data-job-id="{index}">
        <div class="row1">{title_html}</div>
        <div class="row2">{company_html}</div>
        <div class="row3">
            <span class="exp-wrap"><span class="expwdth">2-5 Yrs</span></span>
            <span class="sal-wrap"><span>10-15 Lacs PA</span></span>
            <span class="loc-wrap"><span class="locWdth">Bengaluru</span></span>
        </div>
        <div class="row4"><span class="job-desc">Build REST APIs with Node.js and Express</span></div>
        <ul class="tags-gt">{skills_html}</ul>
        <span class="job-post-day">3 Days Ago</span>
    </div>
    """


def results_html(*cards: str) -> str:
    return f"<html><body><div class='list'>{''.join(cards)}</div></body></html>"


EMPTY_RESULTS_HTML = "<html><body><div class='no-result'>No results found</div></body></html>"


DETAIL_HTML = """
<html><body>
<section class="styles_job-desc-container__txpYf">
    <div class="styles_JDC__dang-inner-html__h0K4t">
        <p>We are looking for a Node.js developer to build scalable backend services.</p>
        <p>You will own REST APIs end to end.</p>
    </div>
    <div class="styles_other-details__oEN4O">
        <div class="styles_details__Y424J"><label>Role: </label><span><a>Back End Developer</a></span></div>
        <div class="styles_details__Y424J"><label>Industry Type: </label><span><a>IT Services &amp; Consulting</a></span></div>
    </div>
    <div class="styles_key-skill__GIPn_">
        <div class="styles_heading__veHpg">Key Skills</div>
        <a><span>Node.js</span></a><a><span>Express</span></a><a><span>AWS</span></a><a><span>Node.js</span></a>
    </div>
</section>
<div class="styles_jhc__jd-stats__KrId0">
    <span class="styles_jhc__stat__PgY67"><label>Posted: </label><span>3 days ago</span></span>
    <span class="styles_jhc__stat__PgY67"><label>Openings: </label><span>2</span></span>
</div>
<div class="styles_jhc__salary__jdfEC"><span>10-15 Lacs P.A.</span></div>
</body></html>
"""

Route = Union[str, Exception]


class FakeElement:
    """Element handle stand-in recording interactions."""

    def __init__(self, text: str = ""):
        self.text = text
        self.clicks: list[dict] = []
        self.typed: list[tuple[str, int]] = []

    async def click(self, **kwargs):
        self.clicks.append(kwargs)

    async def type(self, text: str, delay: int = 0):
        self.typed.append((text, delay))

    async def text_content(self):
        return self.text


class FakeKeyboard:
    def __init__(self):
        self.pressed: list[str] = []

    async def press(self, key: str):
        self.pressed.append(key)


class FakePage:
    """Page stand-in serving canned HTML per URL.

    ``wait_for_selector`` succeeds only when the current HTML matches the
    selector, otherwise it raises Playwright's timeout like the real page.
    """

    def __init__(self, routes: Optional[dict[str, Route]] = None, elements: Optional[dict[str, FakeElement]] = None):
        self.routes = routes or {}
        self.elements = elements or {}
        self.visited: list[str] = []
        self.wait_states: list[Optional[str]] = []
        self.html = ""
        self.keyboard = FakeKeyboard()

    async def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[int] = None):
        self.visited.append(url)
        route = self.routes.get(url, EMPTY_RESULTS_HTML)
        if isinstance(route, Exception):
            raise route
        self.html = route

    async def wait_for_selector(self, selector: str, state: Optional[str] = None, timeout: Optional[int] = None):
        self.wait_states.append(state)
        if selector in self.elements:
            return self.elements[selector]
        found = BeautifulSoup(self.html, "html.parser").select(selector) if self.html else []
        if not found:
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded waiting for {selector}")
        return FakeElement()

    async def query_selector(self, selector: str):
        return self.elements.get(selector)

    async def content(self) -> str:
        return self.html


class FakeContext:
    def __init__(self, browser: "FakeBrowser", **options):
        self.browser = browser
        self.options = options
        self.init_scripts: list[str] = []
        self.closed = False

    async def add_init_script(self, script: str):
        self.init_scripts.append(script)

    async def new_page(self) -> FakePage:
        return FakePage(self.browser.routes)

    async def close(self):
        self.closed = True


class FakeBrowser:
    """Browser stand-in whose contexts serve ``routes``."""

    def __init__(self, routes: Optional[dict[str, Route]] = None):
        self.routes = routes or {}
        self.contexts: list[FakeContext] = []
        self.closed = False

    async def new_context(self, **options) -> FakeContext:
        context = FakeContext(self, **options)
        self.contexts.append(context)
        return context

    async def close(self):
        self.closed = True


def navigation_error(url: str) -> PlaywrightError:
    return PlaywrightError(f"net::ERR_CONNECTION_RESET at {url}")


@pytest.fixture
def policy() -> PolitenessPolicy:
    """A politeness policy that never sleeps."""
    return PolitenessPolicy.immediate()
