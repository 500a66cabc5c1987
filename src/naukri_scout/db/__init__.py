"""Persistence for scraped jobs."""

from .models import Job, get_engine, init_db
from .store import JobStore, SaveResult, StoreStats

__all__ = ["Job", "JobStore", "SaveResult", "StoreStats", "get_engine", "init_db"]
