"""Job store: upsert scraped jobs by URL, list them, summarize them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from sqlalchemy import String, cast, func, or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from naukri_scout.errors import StoreError
from naukri_scout.scraper.models import EnrichedJob

from .models import Job, init_db

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    """Counts reported back after saving a batch of jobs."""

    found: int = 0
    saved: int = 0
    duplicates: int = 0
    matched: int = 0

    def __add__(self, other: "SaveResult") -> "SaveResult":
        return SaveResult(
            found=self.found + other.found,
            saved=self.saved + other.saved,
            duplicates=self.duplicates + other.duplicates,
            matched=self.matched + other.matched,
        )


@dataclass
class StoreStats:
    total_jobs: int = 0
    unique_companies: int = 0
    keywords_searched: list[str] = field(default_factory=list)
    jobs_with_matched_skills: int = 0


class JobStore:
    """SQLAlchemy-backed job store keyed by job URL."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine)

    @classmethod
    def connect(cls, database_url: str) -> "JobStore":
        """Open the store at ``database_url``, creating tables if needed."""
        try:
            store = cls(init_db(database_url))
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to connect to job store: {e}") from e
        logger.info("Connected to job store %s", store.engine.url.render_as_string(hide_password=True))
        return store

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Job store connection closed")

    def save_jobs(self, jobs: Iterable[EnrichedJob]) -> SaveResult:
        """Insert new jobs and update known ones.

        A job whose URL is already stored is updated in place and counted as
        a duplicate. A unique-key conflict on commit is also counted as a
        duplicate.
        """
        result = SaveResult()
        with self._session_factory() as session:
            for job in jobs:
                result.found += 1
                if job.matched_skills:
                    result.matched += 1
                try:
                    row = session.query(Job).filter(Job.job_url == job.job_url).first()
                    if row is None:
                        session.add(Job.from_enriched(job))
                        is_new = True
                    else:
                        row.update_from(job)
                        is_new = False
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    logger.debug("Duplicate job on save: %s", job.job_url)
                    result.duplicates += 1
                    continue
                except SQLAlchemyError as e:
                    session.rollback()
                    logger.error("Error saving job %s: %s", job.job_url, e)
                    continue

                if is_new:
                    result.saved += 1
                else:
                    logger.debug("Updated existing job %s", job.job_url)
                    result.duplicates += 1
        return result

    def get_job(self, job_url: str) -> Optional[dict]:
        with self._session_factory() as session:
            row = session.query(Job).filter(Job.job_url == job_url).first()
            return row.to_document() if row else None

    def count(self) -> int:
        with self._session_factory() as session:
            return session.query(func.count(Job.id)).scalar() or 0

    def list_jobs(self, keyword: Optional[str] = None, limit: int = 20) -> list[dict]:
        """Most recently scraped jobs, optionally filtered by ``keyword``.

        The keyword matches (case-insensitively) the search keyword, the
        title, or any listing, key or matched skill.
        """
        with self._session_factory() as session:
            query = session.query(Job)
            if keyword:
                pattern = f"%{keyword}%"
                query = query.filter(
                    or_(
                        Job.search_keyword.ilike(pattern),
                        Job.title.ilike(pattern),
                        cast(Job.skills, String).ilike(pattern),
                        cast(Job.key_skills, String).ilike(pattern),
                        cast(Job.matched_skills, String).ilike(pattern),
                    )
                )
            rows = query.order_by(Job.scraped_at.desc()).limit(limit).all()
            return [row.to_document() for row in rows]

    def stats(self) -> StoreStats:
        with self._session_factory() as session:
            total = session.query(func.count(Job.id)).scalar() or 0
            companies = session.query(func.count(func.distinct(Job.company))).scalar() or 0
            keywords = [k for (k,) in session.query(Job.search_keyword).distinct().order_by(Job.search_keyword)]
            matched = sum(1 for (skills,) in session.query(Job.matched_skills) if skills)
        return StoreStats(
            total_jobs=total,
            unique_companies=companies,
            keywords_searched=keywords,
            jobs_with_matched_skills=matched,
        )
