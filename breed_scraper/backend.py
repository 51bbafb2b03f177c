"""
Bounded-concurrency breed extraction.

ExtractionWorkerPool runs scrape_breed() over every detail link with at most
pool_size tasks in flight and appends each record to a ResultCollection, the
only structure the workers share.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Sequence

from breed_scraper.breed import scrape_breed
from breed_scraper.errors import BreedScraperError
from breed_scraper.logging import get_logger

logger = get_logger(__name__)

DEFAULT_POOL_SIZE = 3

class ResultCollection:
    """Append-only, lock-protected record list shared by concurrent workers."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: List[Dict[str, Any]] = []

    def append(self, record: Dict[str, Any]):
        with self._lock:
            self._records.append(record)

    def snapshot(self) -> List[Dict[str, Any]]:
        """Copy of the records collected so far, in completion order."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.snapshot())

@dataclass(frozen=True)
class TaskFailure:
    url: str
    error: BaseException

class ExtractionWorkerPool:
    """
    Fixed-size thread pool for per-breed fetch + extract + normalize tasks.

    Args:
        fetcher: PageFetcher-like object with open_page().
        suffixes: Category suffix tokens stripped from breed names.
        pool_size (int): Maximum number of tasks in flight (>= 1).
        fail_fast (bool): Re-raise the first failure instead of logging and skipping it.
        task (callable): Per-link task, scrape_breed by default.
    """

    def __init__(
        self,
        fetcher,
        suffixes: Sequence[str] = (),
        pool_size: int = DEFAULT_POOL_SIZE,
        fail_fast: bool = False,
        task: Callable[..., Dict[str, Any]] = scrape_breed,
    ):
        if pool_size < 1:
            raise ValueError("pool_size must be >= 1")
        self.fetcher = fetcher
        self.suffixes = tuple(suffixes)
        self.pool_size = pool_size
        self.fail_fast = fail_fast
        self.task = task

    def _process(self, url: str, results: ResultCollection):
        record = self.task(self.fetcher, url, self.suffixes)
        results.append(record)

    def run(self, links: Iterable[str], results: ResultCollection) -> List[TaskFailure]:
        """
        Process every link, appending records to results.

        Returns:
            list: TaskFailure for each link that was skipped.

        Raises:
            BreedScraperError: the first failure, when fail_fast is set. Queued
            links are cancelled; records already appended stay in results.
        """
        links = list(links)
        failures: List[TaskFailure] = []
        logger.info(f"Getting info for {len(links)} breeds using {self.pool_size} workers...")

        with ThreadPoolExecutor(max_workers=self.pool_size) as executor:
            future_to_url = {executor.submit(self._process, url, results): url for url in links}
            for future in as_completed(future_to_url):
                url = future_to_url[future]
                try:
                    future.result()
                except BreedScraperError as e:
                    if self.fail_fast:
                        logger.error(f"Aborting extraction after failure on {url}: {e}")
                        for pending in future_to_url:
                            pending.cancel()
                        raise
                    logger.warning(f"Skipping {url}: {e}")
                    failures.append(TaskFailure(url, e))
                except Exception:
                    for pending in future_to_url:
                        pending.cancel()
                    raise

        logger.info(f"Extracted {len(results)} breeds, {len(failures)} skipped.")
        return failures
