"""
End-to-end crawl of one category: pagination, listing links, breed extraction,
then JSON and CSV output.

USAGE:
    from categories import CAT_BREEDS
    from breed_scraper.fetch import PageFetcher
    from breed_scraper.crawler import crawl_category, save_category

    result = crawl_category(CAT_BREEDS, PageFetcher())
    save_category(result, "data")
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from categories import CategorySpec
from breed_exporter.csv import export_to_csv, regenerate_csv_from_json
from breed_exporter.json import export_to_json
from breed_exporter.qc import log_qc_report
from breed_scraper.backend import DEFAULT_POOL_SIZE, ExtractionWorkerPool, ResultCollection, TaskFailure
from breed_scraper.category import collect_detail_links, find_last_page_index
from breed_scraper.errors import BreedScraperError
from breed_scraper.logging import get_logger

logger = get_logger(__name__)

@dataclass
class CategoryRunResult:
    category: CategorySpec
    links: List[str] = field(default_factory=list)
    records: List[Dict[str, Any]] = field(default_factory=list)
    failures: List[TaskFailure] = field(default_factory=list)
    # set when fail_fast stopped extraction early; records hold what finished before
    error: Optional[BreedScraperError] = None

    @property
    def complete(self) -> bool:
        return self.error is None

def crawl_category(
    category: CategorySpec,
    fetcher,
    pool_size: int = DEFAULT_POOL_SIZE,
    fail_fast: bool = False,
    dedupe_links: bool = False,
) -> CategoryRunResult:
    """
    Crawl every breed of one category.

    Raises:
        PaginationNotFound: the category cannot be enumerated.

    With fail_fast, the first entity failure ends extraction and is stored in
    the result's error field alongside the records collected up to then.
    """
    logger.info(f"###### {category.label} ######")
    last_page_index = find_last_page_index(fetcher, category.root_url)
    links = collect_detail_links(fetcher, category.root_url, last_page_index, dedupe=dedupe_links)

    results = ResultCollection()
    pool = ExtractionWorkerPool(
        fetcher,
        suffixes=category.name_suffixes,
        pool_size=pool_size,
        fail_fast=fail_fast,
    )
    try:
        failures = pool.run(links, results)
    except BreedScraperError as e:
        return CategoryRunResult(category, links, results.snapshot(), [TaskFailure(getattr(e, "url", None) or "", e)], error=e)
    return CategoryRunResult(category, links, results.snapshot(), failures)

def save_category(result: CategoryRunResult, data_dir: str) -> Tuple[str, str]:
    """
    Write <stem>.json then <stem>.csv. A CSV failure leaves the JSON in place.
    """
    category = result.category
    json_path = export_to_json(result.records, category.output_path(data_dir, "json"))
    csv_path = export_to_csv(result.records, category.columns, category.output_path(data_dir, "csv"))
    log_qc_report(category.key, result.records, category.columns)
    return json_path, csv_path

def regenerate_category_csv(category: CategorySpec, data_dir: str) -> str:
    """Rebuild a category's CSV from its saved JSON."""
    return regenerate_csv_from_json(
        category.output_path(data_dir, "json"),
        category.columns,
        category.output_path(data_dir, "csv"),
    )
