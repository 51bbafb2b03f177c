"""
Breed detail-page scraping for www.purina.com.

A breed page has a heading with the breed name and a stats table whose rows
each hold a label and a value. This module turns one such page into a record:

    {"name": "Abyssinian", "size": "Medium", "weight": "8-12 lbs", ...}

Functions:
    - get_breed_name: Heading text without the category suffix tokens.
    - get_breed_attributes: Ordered (label, value) rows of the stats table.
    - scrape_breed: Fetch a detail page and return its normalized record.
"""

from typing import Dict, Iterable, List, Tuple

from breed_scraper.logging import get_logger
from breed_scraper.normalize import normalize_attributes
from breed_scraper.utils import clean_label, clean_value, strip_tokens

logger = get_logger(__name__)

NAME_SELECTOR = ".statsDef-content-list-hd"
ROW_SELECTOR = ".statsDef-content-list-item"
LABEL_SELECTOR = ".statsDef-content-list-item-label"
VALUE_SELECTOR = ".statsDef-content-list-item-value"

def get_breed_name(page, suffixes: Iterable[str]) -> str:
    """Breed heading with the category suffixes ("Cat Breed", "Cat", ...) removed."""
    return strip_tokens(page.select_text(NAME_SELECTOR), suffixes)

def get_breed_attributes(page) -> List[Tuple[str, str]]:
    """
    Raw stats rows in page order. Raises ExtractionFailure if a row lacks
    its label or value node.
    """
    return [
        (clean_label(row.select_text(LABEL_SELECTOR)), clean_value(row.select_text(VALUE_SELECTOR)))
        for row in page.select_rows(ROW_SELECTOR)
    ]

def scrape_breed(fetcher, url: str, suffixes: Iterable[str]) -> Dict[str, str]:
    """
    Fetch one breed page and build its record. The page is released before
    normalization starts.
    """
    with fetcher.open_page(url) as page:
        name = get_breed_name(page, suffixes)
        entries = get_breed_attributes(page)
    record = {"name": name}
    record.update(normalize_attributes(entries))
    logger.info(f"--> Got {name} ({url})")
    return record
