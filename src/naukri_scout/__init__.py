"""naukri-scout: scrape Naukri.com job listings into a local job store."""

__version__ = "1.0.0"
