"""Exception types raised by naukri-scout."""


class NaukriScoutError(Exception):
    """Base class for all naukri-scout errors."""


class ConfigError(NaukriScoutError):
    """Raised when required configuration is missing or unusable."""


class ScrapeError(NaukriScoutError):
    """Raised when a keyword cannot be scraped at all.

    Only the first results page of a keyword raises this; failures on later
    pages end pagination quietly.
    """

    def __init__(self, keyword: str, message: str):
        super().__init__(f"Failed to scrape jobs for '{keyword}': {message}")
        self.keyword = keyword


class StoreError(NaukriScoutError):
    """Raised when the job store cannot be opened."""


class BrowserError(NaukriScoutError):
    """Raised when the browser cannot be launched or set up."""
