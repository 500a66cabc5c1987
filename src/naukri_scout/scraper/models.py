"""Job records produced by the scraper.

A :class:`JobListing` comes out of a search-results card, a
:class:`JobDetail` out of the job's own page. :class:`EnrichedJob` is the
superset that is persisted: it starts as a copy of the listing and is
enriched in place with detail fields and matched skills.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field, fields
from typing import Any

NOT_SPECIFIED = "Not specified"
NOT_DISCLOSED = "Not disclosed"


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass
class JobListing:
    """A job as shown on a search-results card."""

    title: str
    company: str
    job_url: str
    search_keyword: str
    location: str = NOT_SPECIFIED
    experience_range: str = NOT_SPECIFIED
    salary_disclosed: str = NOT_DISCLOSED
    posted_date: str = NOT_SPECIFIED
    skills: list[str] = field(default_factory=list)
    description: str = ""
    scraped_at: datetime.datetime = field(default_factory=_utcnow)


@dataclass
class JobDetail:
    """Fields scraped from a job's detail page.

    Every field has a default, so ``JobDetail()`` is the record returned
    when the detail page could not be scraped.
    """

    full_description: str = ""
    key_skills: list[str] = field(default_factory=list)
    industry_types: list[str] = field(default_factory=list)
    job_posted_at: str = NOT_SPECIFIED
    salary_offered: str = NOT_DISCLOSED
    total_vacancy: str = NOT_SPECIFIED


@dataclass
class EnrichedJob(JobListing):
    """A listing merged with its detail fields and derived fields."""

    full_description: str = ""
    key_skills: list[str] = field(default_factory=list)
    industry_types: list[str] = field(default_factory=list)
    job_posted_at: str = NOT_SPECIFIED
    salary_offered: str = NOT_DISCLOSED
    total_vacancy: str = NOT_SPECIFIED
    matched_skills: list[str] = field(default_factory=list)
    experience_filter_label: str = ""

    @classmethod
    def from_listing(cls, listing: JobListing, experience_filter_label: str = "") -> "EnrichedJob":
        values = {f.name: getattr(listing, f.name) for f in fields(JobListing)}
        values["skills"] = list(listing.skills)
        return cls(**values, experience_filter_label=experience_filter_label)

    def apply_detail(self, detail: JobDetail) -> None:
        """Copy every detail field onto this job."""
        for f in fields(JobDetail):
            value = getattr(detail, f.name)
            setattr(self, f.name, list(value) if isinstance(value, list) else value)

    def all_skills(self) -> list[str]:
        """Listing skills followed by key skills not already listed."""
        combined = list(self.skills)
        combined.extend(skill for skill in self.key_skills if skill not in combined)
        return combined

    def to_document(self) -> dict[str, Any]:
        """Convert the job to its persisted (camelCase) document form."""
        return {
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "experienceRange": self.experience_range,
            "salaryDisclosed": self.salary_disclosed,
            "salaryOffered": self.salary_offered,
            "skills": list(self.skills),
            "keySkills": list(self.key_skills),
            "description": self.description,
            "fullDescription": self.full_description,
            "jobUrl": self.job_url,
            "postedDate": self.posted_date,
            "jobPostedAt": self.job_posted_at,
            "industryTypes": list(self.industry_types),
            "totalVacancy": self.total_vacancy,
            "matchedSkills": list(self.matched_skills),
            "experienceFilterLabel": self.experience_filter_label,
            "searchKeyword": self.search_keyword,
            "scrapedAt": self.scraped_at.isoformat(),
        }
