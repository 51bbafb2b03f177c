"""
breed_scraper/errors.py

Exception hierarchy for the Breed Scraper Suite.

    BreedScraperError
    ├── PaginationNotFound    fatal for one category
    ├── ExtractionFailure     expected node missing on a page
    ├── FetchError            page could not be fetched after all attempts
    └── SerializationIOError  JSON/CSV could not be read or written
"""

from typing import Optional


class BreedScraperError(Exception):
    """Base class for all suite errors."""
    pass


class PaginationNotFound(BreedScraperError):
    """The category root has no usable "last page" link."""

    def __init__(self, url: str, message: str = "Can't find last breed page index"):
        super().__init__(f"{message}: {url}")
        self.url = url


class ExtractionFailure(BreedScraperError):
    """An expected name or attribute node is missing."""

    def __init__(self, selector: str, url: Optional[str] = None):
        where = f" on {url}" if url else ""
        super().__init__(f"Missing node '{selector}'{where}")
        self.selector = selector
        self.url = url


class FetchError(BreedScraperError):
    """A page could not be fetched or rendered."""

    def __init__(self, url: str, reason: str = ""):
        super().__init__(f"Failed to fetch {url}" + (f": {reason}" if reason else ""))
        self.url = url
        self.reason = reason


class SerializationIOError(BreedScraperError):
    """A report file could not be written (or read back)."""

    def __init__(self, path: str, reason: str = ""):
        super().__init__(f"Could not access {path}" + (f": {reason}" if reason else ""))
        self.path = path
        self.reason = reason
