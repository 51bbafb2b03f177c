"""
breed_scraper/fetch.py

Page fetching and DOM query utilities for the Breed Scraper Suite.

Features:
    - Synchronous URL fetching with retries, throttling and rotating User-Agent.
    - Thread-local sessions with urllib3 retry logic and default headers.
    - Optional caching (requests-cache), and Playwright support for JavaScript-heavy pages.
    - PageHandle: a BeautifulSoup-backed document with CSS-selector text/attribute queries.
    - PageFetcher.open_page(): scoped page acquisition, released on success and failure.

USAGE:
    from breed_scraper.fetch import PageFetcher

    fetcher = PageFetcher(timeout=20, max_retries=3)
    with fetcher.open_page("http://www.purina.com/cats/cat-breeds") as page:
        href = page.select_attr(".paginationSkip_last", "href")

    # To enable caching:
    # enable_requests_cache(backend="sqlite", expire_after=3600)

DEPENDENCIES:
    - requests, urllib3
    - BeautifulSoup (bs4)
    - requests-cache (optional, enabled from the CLI)
    - playwright (optional for JS-heavy pages)
"""

import threading
import time
import random
from contextlib import contextmanager
from typing import List, Optional

import requests
from bs4 import BeautifulSoup
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from breed_scraper.errors import ExtractionFailure, FetchError
from breed_scraper.logging import get_logger

logger = get_logger(__name__)

DEFAULT_USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:115.0) Gecko/20100101 Firefox/115.0",
]
DEFAULT_HEADERS = {
    "Accept-Language": "en-US,en;q=0.9",
}
DEFAULT_TIMEOUT = 20
DEFAULT_MAX_RETRIES = 3

thread_local = threading.local()

def get_session():
    """
    Return a thread-local requests.Session with retry logic and default headers.
    """
    if not hasattr(thread_local, "session"):
        session = requests.Session()
        retries = Retry(
            total=3,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            raise_on_status=False
        )
        adapter = HTTPAdapter(max_retries=retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers.update(DEFAULT_HEADERS)
        thread_local.session = session
    return thread_local.session

def get_random_user_agent():
    """
    Select a random User-Agent string.
    """
    return random.choice(DEFAULT_USER_AGENTS)

def throttle_delay(base_delay=0.0, jitter=0.3):
    """
    Sleep for a randomized duration to throttle requests. No-op when base_delay is 0.
    """
    if base_delay <= 0:
        return
    delay = base_delay + random.uniform(0, jitter)
    logger.debug(f"Sleeping for {delay:.2f}s to throttle requests.")
    time.sleep(delay)

# --- requests-cache Support (optional) ---

def enable_requests_cache(backend="sqlite", expire_after=3600, cache_name="http_cache"):
    """
    Enable requests-cache for persistent HTTP response caching.

    Args:
        backend (str): Backend type (e.g. 'sqlite').
        expire_after (int): Expiry in seconds.
        cache_name (str): Name for cache DB/file.
    """
    import requests_cache

    requests_cache.install_cache(cache_name=cache_name, backend=backend, expire_after=expire_after)
    logger.info(f"Enabled requests-cache: backend={backend}, expire_after={expire_after}s, cache_name={cache_name}")

# --- Playwright Headless Browser Fetching (optional) ---

def fetch_with_playwright(url, timeout=DEFAULT_TIMEOUT, headless=True):
    """
    Fetch rendered page content in a fresh headless Chromium context.

    Args:
        url (str): URL to fetch.
        timeout (int): Timeout in seconds.
        headless (bool): Run browser headless.

    Returns:
        str: The rendered HTML.
    """
    from playwright.sync_api import sync_playwright

    with sync_playwright() as p:
        browser = p.chromium.launch(headless=headless)
        try:
            context = browser.new_context(user_agent=get_random_user_agent())
            page = context.new_page()
            page.goto(url, timeout=timeout * 1000)
            html = page.content()
            context.close()
        finally:
            browser.close()
    logger.debug(f"Fetched with Playwright: {url}")
    return html

# --- Synchronous Fetching ---

def fetch_url(
    url: str,
    headers: dict = None,
    timeout: int = DEFAULT_TIMEOUT,
    throttle: float = 0.0,
    max_retries: int = DEFAULT_MAX_RETRIES,
    use_playwright: bool = False,
) -> str:
    """
    Fetch a URL with bounded retries, optional throttling and a rotating User-Agent.

    Args:
        url (str): URL to fetch.
        headers (dict): Additional headers.
        timeout (int): Timeout per request, in seconds.
        throttle (float): Base throttle delay after a successful fetch.
        max_retries (int): Number of attempts.
        use_playwright (bool): Render with Playwright instead of a plain GET.

    Returns:
        str: Response text.

    Raises:
        FetchError: If all attempts fail.
    """
    last_exc = None
    for attempt in range(max_retries):
        try:
            if use_playwright:
                html = fetch_with_playwright(url, timeout=timeout)
            else:
                ua = (headers or {}).get("User-Agent") or get_random_user_agent()
                all_headers = {**DEFAULT_HEADERS, **(headers or {}), "User-Agent": ua}
                logger.debug(f"Requesting URL: {url}")
                resp = get_session().get(url, timeout=timeout, headers=all_headers)
                resp.raise_for_status()
                html = resp.text
            throttle_delay(base_delay=throttle)
            return html
        except Exception as e:
            last_exc = e
            logger.warning(f"Fetch failed ({url}), attempt {attempt+1}/{max_retries}: {e}")
            if attempt + 1 < max_retries:
                time.sleep(1.5 * (attempt + 1))
    logger.error(f"ERROR fetching {url}: {last_exc}")
    raise FetchError(url, str(last_exc)) from last_exc

# --- Queryable documents ---

class PageHandle:
    """
    Queryable view of one fetched document.

    Single-node queries raise ExtractionFailure when nothing matches; multi-node
    queries return an empty list. A closed handle refuses further queries.
    """

    def __init__(self, soup, url: Optional[str] = None):
        self.url = url
        self._soup = soup

    @classmethod
    def from_html(cls, html: str, url: Optional[str] = None) -> "PageHandle":
        return cls(BeautifulSoup(html, "html.parser"), url=url)

    @property
    def closed(self) -> bool:
        return self._soup is None

    def _node(self, selector: str):
        if self._soup is None:
            raise RuntimeError(f"Page handle already closed: {self.url}")
        node = self._soup.select_one(selector)
        if node is None:
            raise ExtractionFailure(selector, self.url)
        return node

    def _nodes(self, selector: str):
        if self._soup is None:
            raise RuntimeError(f"Page handle already closed: {self.url}")
        return self._soup.select(selector)

    def select_text(self, selector: str) -> str:
        """Text content of the first node matching selector (untrimmed)."""
        return self._node(selector).get_text()

    def select_all_text(self, selector: str) -> List[str]:
        return [node.get_text() for node in self._nodes(selector)]

    def select_attr(self, selector: str, attr: str) -> Optional[str]:
        """Attribute of the first node matching selector, None if the node lacks it."""
        return self._node(selector).get(attr)

    def select_all_attr(self, selector: str, attr: str) -> List[Optional[str]]:
        return [node.get(attr) for node in self._nodes(selector)]

    def select_rows(self, selector: str) -> List["PageHandle"]:
        """Sub-handles for every node matching selector, for per-row queries."""
        return [PageHandle(node, url=self.url) for node in self._nodes(selector)]

    def close(self):
        """Release the parsed document."""
        if self._soup is not None and isinstance(self._soup, BeautifulSoup):
            self._soup.decompose()
        self._soup = None

class PageFetcher:
    """
    Fetches pages and hands out PageHandle objects.

    Each call works on its own document; sessions are per thread, so workers
    never share a connection or a parsed page.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        throttle: float = 0.0,
        use_playwright: bool = False,
    ):
        if max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        self.timeout = timeout
        self.max_retries = max_retries
        self.throttle = throttle
        self.use_playwright = use_playwright

    def fetch(self, url: str) -> PageHandle:
        html = fetch_url(
            url,
            timeout=self.timeout,
            throttle=self.throttle,
            max_retries=self.max_retries,
            use_playwright=self.use_playwright,
        )
        return PageHandle.from_html(html, url=url)

    @contextmanager
    def open_page(self, url: str):
        """Fetch url and yield its PageHandle; the handle is closed on exit."""
        page = self.fetch(url)
        try:
            yield page
        finally:
            page.close()
