"""Tests for selector-chain extraction of listing and detail pages."""

import pytest

from conftest import DETAIL_HTML, EMPTY_RESULTS_HTML, card_html, results_html
from naukri_scout.config import SelectorOverrides
from naukri_scout.errors import ConfigError
from naukri_scout.scraper.extract import (
    ListingSelectors,
    build_selectors,
    clean_text,
    first_match,
    parse_detail,
    parse_listings,
    resolve_url,
    select_text,
)
from naukri_scout.scraper.models import JobDetail

BASE_URL = "https://www.naukri.com/node-js-developer-jobs?k=node%20js%20developer"


class TestHelpers:
    """Tests for the small extraction helpers."""

    def test_clean_text(self):
        """Test whitespace collapsing and empty text handling."""
        assert clean_text("  Hello   World  ") == "Hello World"
        assert clean_text("Line1\n\n\nLine2") == "Line1 Line2"
        assert clean_text(None) is None
        assert clean_text("   ") is None

    def test_resolve_url(self):
        """Test that hrefs resolve against the page URL and non-links are rejected."""
        assert resolve_url("/job-listings-1", BASE_URL) == "https://www.naukri.com/job-listings-1"
        assert resolve_url("https://www.naukri.com/x", BASE_URL) == "https://www.naukri.com/x"
        assert resolve_url("#", BASE_URL) is None
        assert resolve_url("javascript:void(0)", BASE_URL) is None
        assert resolve_url(None, BASE_URL) is None

    def test_first_match_respects_order(self):
        """Test that extractors are tried in order."""
        from bs4 import BeautifulSoup

        soup = BeautifulSoup('<div><span class="b">second</span><span class="a">first</span></div>', "html.parser")
        extractors = [select_text(".missing"), select_text(".a"), select_text(".b")]
        assert first_match(soup, extractors) == "first"

    def test_first_match_accept_predicate(self):
        """Test that rejected values fall through to the next extractor."""
        from bs4 import BeautifulSoup

        soup = BeautifulSoup('<p class="a">x</p><p class="b">long enough</p>', "html.parser")
        value = first_match(soup, [select_text(".a"), select_text(".b")], accept=lambda t: len(t) > 3)
        assert value == "long enough"


class TestParseListings:
    """Tests for the listing (search results) pass."""

    def test_parse_full_card(self):
        """Test parsing every field of a current-markup card."""
        jobs = parse_listings(results_html(card_html(1)), "node js developer", BASE_URL)

        assert len(jobs) == 1
        job = jobs[0]
        assert job.title == "Node JS Developer 1"
        assert job.company == "TechCorp 1"
        assert job.job_url == "https://www.naukri.com/job-listings-node-js-developer-1"
        assert job.location == "Bengaluru"
        assert job.experience_range == "2-5 Yrs"
        assert job.salary_disclosed == "10-15 Lacs PA"
        assert job.posted_date == "3 Days Ago"
        assert job.skills == ["Node.js", "MongoDB"]
        assert job.description == "Build REST APIs with Node.js and Express"
        assert job.search_keyword == "node js developer"
        assert job.scraped_at is not None

    def test_parse_multiple_cards_in_order(self):
        """Test that cards keep page order."""
        html = results_html(*(card_html(i) for i in range(1, 6)))
        jobs = parse_listings(html, "node", BASE_URL)
        assert [job.title for job in jobs] == [f"Node JS Developer {i}" for i in range(1, 6)]

    def test_fallback_markup_variant(self):
        """Older card markup resolves through later selectors in each chain."""
        html = """
        <html><body>
        <article class="jobTuple" data-job-id="77">
            <div class="jobTupleHeader">
                <a class="title ellipsis" href="/job-listings-python-dev-77">Python Developer</a>
                <a class="subTitle ellipsis">Acme Labs</a>
            </div>
            <ul><li class="fleft br2 placeHolderLi location"><span class="ellipsis">Pune</span></li></ul>
        </article>
        </body></html>
        """
        jobs = parse_listings(html, "python", BASE_URL)

        assert len(jobs) == 1
        job = jobs[0]
        assert job.title == "Python Developer"
        assert job.company == "Acme Labs"
        assert job.location == "Pune"
        assert job.job_url == "https://www.naukri.com/job-listings-python-dev-77"

    def test_missing_fields_use_sentinels(self):
        """Test that unresolved optional fields get sentinel values."""
        html = """
        <div class="cust-job-tuple">
            <a class="title" href="https://www.naukri.com/job-listings-9">Tester</a>
            <span class="comp-name">QA Inc</span>
        </div>
        """
        job = parse_listings(html, "qa", BASE_URL)[0]
        assert job.location == "Not specified"
        assert job.experience_range == "Not specified"
        assert job.salary_disclosed == "Not disclosed"
        assert job.posted_date == "Not specified"
        assert job.skills == []
        assert job.description == ""

    def test_card_without_company_is_dropped(self):
        """Test that a card without a company is skipped."""
        html = results_html(card_html(1), card_html(2, company=None), card_html(3))
        jobs = parse_listings(html, "node", BASE_URL)
        assert [job.job_url[-1] for job in jobs] == ["1", "3"]

    def test_card_without_title_is_dropped(self):
        """Test that a card without a title is skipped."""
        html = results_html(card_html(1, title=None), card_html(2))
        jobs = parse_listings(html, "node", BASE_URL)
        assert len(jobs) == 1
        assert jobs[0].title == "Node JS Developer 2"

    def test_card_without_resolvable_url_is_dropped(self):
        """Test that a card whose link is not navigable is skipped."""
        html = results_html(card_html(1, href="javascript:void(0)"), card_html(2))
        jobs = parse_listings(html, "node", BASE_URL)
        assert [job.title for job in jobs] == ["Node JS Developer 2"]

    def test_duplicate_urls_collapsed(self):
        """Test that repeated job URLs on one page keep the first card."""
        same = "https://www.naukri.com/job-listings-same"
        html = results_html(card_html(1, href=same), card_html(2, href=same))
        jobs = parse_listings(html, "node", BASE_URL)
        assert len(jobs) == 1
        assert jobs[0].title == "Node JS Developer 1"

    def test_no_cards(self):
        """Test that a page without cards yields nothing."""
        assert parse_listings(EMPTY_RESULTS_HTML, "node", BASE_URL) == []

    def test_custom_selectors(self):
        """Test parsing with caller-supplied selector chains."""
        html = """
        <div class="job-card">
            <h2 class="name"><a href="/job-listings-42">Data Engineer</a></h2>
            <p class="org">DataCo</p>
        </div>
        """
        selectors = ListingSelectors(
            cards=[".job-card"],
            title=[".name"],
            url=[".name a"],
            company=[".org"],
        )
        jobs = parse_listings(html, "data", BASE_URL, selectors)
        assert len(jobs) == 1
        assert jobs[0].company == "DataCo"
        assert jobs[0].job_url == "https://www.naukri.com/job-listings-42"


class TestBuildSelectors:
    """Tests for configured selector overrides."""

    def test_defaults(self):
        """Test that no overrides gives the built-in chains."""
        listing, detail = build_selectors()
        assert listing.cards[0] == ".srp-jobtuple-wrapper"
        assert detail.key_skills

    def test_override_replaces_only_named_fields(self):
        """Test that overrides replace only the fields they name."""
        overrides = SelectorOverrides(listing={"title": [".job-name"]}, detail={"keySkills": [".skills a"]})
        listing, detail = build_selectors(overrides)
        assert listing.title == [".job-name"]
        assert listing.company == ListingSelectors().company
        assert detail.key_skills == [".skills a"]

    def test_unknown_field_rejected(self):
        """Test that an unknown selector field is a config error."""
        with pytest.raises(ConfigError):
            build_selectors(SelectorOverrides(listing={"headline": [".x"]}))

    def test_empty_chain_rejected(self):
        """Test that an empty selector chain is a config error."""
        with pytest.raises(ConfigError):
            build_selectors(SelectorOverrides(detail={"salary": []}))

    def test_card_selector_group(self):
        """Test that card selectors join into one CSS group."""
        assert ListingSelectors(cards=[".a", ".b"]).card_selector == ".a, .b"


class TestParseDetail:
    """Tests for the detail page pass."""

    def test_parse_full_detail(self):
        """Test parsing every field of a detail page."""
        detail = parse_detail(DETAIL_HTML)

        assert detail.full_description.startswith("We are looking for a Node.js developer")
        assert "You will own REST APIs end to end." in detail.full_description
        assert detail.key_skills == ["Node.js", "Express", "AWS"]
        assert detail.industry_types == ["IT Services & Consulting"]
        assert detail.job_posted_at == "3 days ago"
        assert detail.salary_offered == "10-15 Lacs P.A."
        assert detail.total_vacancy == "2"

    def test_empty_page_keeps_defaults(self):
        """Test that an empty detail page yields the default record."""
        assert parse_detail("<html><body></body></html>") == JobDetail()

    def test_short_description_skipped(self):
        """Test that a too-short description container is passed over."""
        long_text = "Own the data platform, build pipelines and mentor two junior engineers."
        html = f"""
        <div class="dang-inner-html">Short</div>
        <section class="job-desc">{long_text}</section>
        """
        assert parse_detail(html).full_description == long_text

    def test_description_too_short_everywhere(self):
        """Test that the description stays empty when every candidate is short."""
        html = '<div class="dang-inner-html">Short</div><div class="job-desc">Also short</div>'
        assert parse_detail(html).full_description == ""

    def test_key_skills_first_non_empty_group_only(self):
        """Test that key skills come from the first non-empty group only."""
        html = """
        <div class="key-skill-list"><span>Go</span><span>Rust</span><span>Go</span></div>
        <div class="chip-container"><span class="chip">Docker</span></div>
        """
        assert parse_detail(html).key_skills == ["Go", "Rust"]

    def test_openings_text_overrides_label_value(self):
        """Test that an "N openings" phrase overrides the labelled value."""
        html = DETAIL_HTML.replace("</body>", "<span>5 Openings</span></body>")
        assert parse_detail(html).total_vacancy == "5"

    def test_openings_text_without_label(self):
        """Test that an "N openings" phrase is found without a label."""
        html = '<div><span class="stat">12 openings</span></div>'
        assert parse_detail(html).total_vacancy == "12"

    def test_long_text_not_scanned_for_openings(self):
        """Test that long text is not scanned for an openings count."""
        html = "<span>" + "We expect to have 3 openings this quarter across several teams." + "</span>"
        assert parse_detail(html).total_vacancy == "Not specified"

    def test_definition_list_labels(self):
        """Test that dt/dd pairs are read as labels and values."""
        html = """
        <dl>
            <dt>Industry</dt><dd>Banking, Fintech</dd>
            <dt>Vacancies</dt><dd>4</dd>
        </dl>
        """
        detail = parse_detail(html)
        assert detail.industry_types == ["Banking", "Fintech"]
        assert detail.total_vacancy == "4"
