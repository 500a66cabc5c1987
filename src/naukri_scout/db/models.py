"""Database models for naukri-scout.

One table, ``jobs``, keyed by the job URL. Each row is the persisted form
of an :class:`~naukri_scout.scraper.models.EnrichedJob`.
"""

import datetime
import uuid

from sqlalchemy import JSON, DateTime, String, Text, create_engine, func
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from naukri_scout.scraper.models import NOT_DISCLOSED, NOT_SPECIFIED, EnrichedJob


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class Job(Base):
    """Model representing a scraped Naukri job.

    Attributes:
        id: Surrogate primary key.
        job_url: Natural key; one row per job URL.
        title, company, location: Basic listing info.
        experience_range, salary_disclosed, posted_date: Listing card fields.
        skills: Skill tags from the listing card.
        description: Listing card snippet.
        full_description, key_skills, industry_types, job_posted_at,
        salary_offered, total_vacancy: Detail page fields.
        matched_skills: Job skills matching the configured skills.
        experience_filter_label: Experience filter used for the search.
        search_keyword: Keyword that produced the job.
        scraped_at: When the job was last scraped.
        created_at, updated_at: Row bookkeeping.
    """

    __tablename__ = "jobs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    job_url: Mapped[str] = mapped_column(String(2048), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    location: Mapped[str] = mapped_column(String(255), default=NOT_SPECIFIED, nullable=False)
    experience_range: Mapped[str] = mapped_column(String(100), default=NOT_SPECIFIED, nullable=False)
    salary_disclosed: Mapped[str] = mapped_column(String(255), default=NOT_DISCLOSED, nullable=False)
    posted_date: Mapped[str] = mapped_column(String(100), default=NOT_SPECIFIED, nullable=False)
    skills: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    full_description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    key_skills: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    industry_types: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    job_posted_at: Mapped[str] = mapped_column(String(100), default=NOT_SPECIFIED, nullable=False)
    salary_offered: Mapped[str] = mapped_column(String(255), default=NOT_DISCLOSED, nullable=False)
    total_vacancy: Mapped[str] = mapped_column(String(50), default=NOT_SPECIFIED, nullable=False)
    matched_skills: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    experience_filter_label: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    search_keyword: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    scraped_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default=func.now(), nullable=False, index=True
    )
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=func.now(), nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime, default=func.now(), onupdate=func.now(), nullable=False
    )

    def update_from(self, job: EnrichedJob) -> None:
        """Overwrite every scraped field with the values from ``job``."""
        self.job_url = job.job_url
        self.title = job.title
        self.company = job.company
        self.location = job.location
        self.experience_range = job.experience_range
        self.salary_disclosed = job.salary_disclosed
        self.posted_date = job.posted_date
        self.skills = list(job.skills)
        self.description = job.description
        self.full_description = job.full_description
        self.key_skills = list(job.key_skills)
        self.industry_types = list(job.industry_types)
        self.job_posted_at = job.job_posted_at
        self.salary_offered = job.salary_offered
        self.total_vacancy = job.total_vacancy
        self.matched_skills = list(job.matched_skills)
        self.experience_filter_label = job.experience_filter_label
        self.search_keyword = job.search_keyword
        self.scraped_at = job.scraped_at

    @classmethod
    def from_enriched(cls, job: EnrichedJob) -> "Job":
        row = cls()
        row.update_from(job)
        return row

    def to_document(self) -> dict:
        """Convert the row to the camelCase job document."""
        return {
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "experienceRange": self.experience_range,
            "salaryDisclosed": self.salary_disclosed,
            "salaryOffered": self.salary_offered,
            "skills": list(self.skills or []),
            "keySkills": list(self.key_skills or []),
            "description": self.description,
            "fullDescription": self.full_description,
            "jobUrl": self.job_url,
            "postedDate": self.posted_date,
            "jobPostedAt": self.job_posted_at,
            "industryTypes": list(self.industry_types or []),
            "totalVacancy": self.total_vacancy,
            "matchedSkills": list(self.matched_skills or []),
            "experienceFilterLabel": self.experience_filter_label,
            "searchKeyword": self.search_keyword,
            "scrapedAt": self.scraped_at.isoformat() if self.scraped_at else None,
        }


def get_engine(database_url: str) -> Engine:
    """Create database engine."""
    return create_engine(database_url, echo=False)


def init_db(database_url: str) -> Engine:
    """Initialize the database, creating tables if needed."""
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)
    return engine

