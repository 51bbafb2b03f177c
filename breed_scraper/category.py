"""
Category listing module for www.purina.com breed pages.

Resolves how many listing pages a category has, then collects the breed
detail-page URLs from all of them.

Functions:
    - find_last_page_index: Highest page index in a category's pagination control.
    - extract_links_from_page: Breed hrefs on one listing page.
    - collect_detail_links: All detail URLs of a category, in page order.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from categories import BASE_URL
from breed_scraper.errors import ExtractionFailure, PaginationNotFound
from breed_scraper.logging import get_logger
from breed_scraper.utils import absolute_url, deduplicate, page_url, query_int

logger = get_logger(__name__)

LAST_PAGE_SELECTOR = ".paginationSkip_last"
LISTING_LINK_SELECTOR = ".callout-bd .link"

def find_last_page_index(fetcher, root_url: str) -> int:
    """
    Fetch the category root once and read the "last page" link's page index.

    Raises:
        PaginationNotFound: if the control is missing or its href has no usable page value.
    """
    try:
        with fetcher.open_page(root_url) as page:
            href = page.select_attr(LAST_PAGE_SELECTOR, "href")
    except ExtractionFailure:
        raise PaginationNotFound(root_url) from None
    index = query_int(href, "page")
    if index is None:
        raise PaginationNotFound(root_url, f"Unusable last page link {href!r}")
    logger.debug(f"Last page index for {root_url}: {index}")
    return index

def extract_links_from_page(fetcher, listing_url: str) -> List[str]:
    """
    Return the breed hrefs on one listing page, in document order.
    Link nodes without an href are skipped.
    """
    with fetcher.open_page(listing_url) as page:
        hrefs = page.select_all_attr(LISTING_LINK_SELECTOR, "href")
    links = [href for href in hrefs if href]
    logger.debug(f"Found {len(links)} breed links on {listing_url}")
    return links

def collect_detail_links(
    fetcher,
    root_url: str,
    last_page_index: int,
    max_workers: Optional[int] = None,
    base_url: str = BASE_URL,
    dedupe: bool = False,
) -> List[str]:
    """
    Fetch listing pages 0..last_page_index concurrently and flatten their links.

    Args:
        fetcher: PageFetcher-like object with open_page().
        root_url (str): Category root URL.
        last_page_index (int): Highest page index (inclusive).
        max_workers (int|None): Pool bound; defaults to one worker per page.
        base_url (str): Host prepended to site-relative hrefs.
        dedupe (bool): Drop repeated URLs, keeping the first occurrence.

    Returns:
        list: Absolute detail URLs in page-index order.
    """
    if last_page_index < 0:
        raise ValueError("last_page_index must be >= 0")
    listing_urls = [page_url(root_url, i) for i in range(last_page_index + 1)]
    workers = max_workers or len(listing_urls)
    logger.info(f"Getting URLs for breed pages to scrape ({len(listing_urls)} listing pages)...")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        # map() yields in submission order, i.e. page-index order
        per_page = list(executor.map(lambda url: extract_links_from_page(fetcher, url), listing_urls))

    links = [absolute_url(base_url, href) for hrefs in per_page for href in hrefs]
    if dedupe:
        unique = deduplicate(links)
        if len(unique) != len(links):
            logger.info(f"Dropped {len(links) - len(unique)} repeated breed links")
        links = unique
    logger.info(f"Collected {len(links)} breed links from {root_url}")
    return links
