"""
breed_exporter/qc.py

Quality-control summaries for breed records, logged after a crawl or a CSV
regeneration. Nothing here filters records; the reports only describe them.

- find_duplicate_records: groups of records sharing a normalized name. Listing
  pages can repeat a breed, and links are not de-duplicated by default.
- column_coverage: how many records fill each CSV column.
- log_qc_report: both of the above, through the suite logger.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from breed_scraper.logging import get_logger
from breed_scraper.utils import normalize_whitespace

logger = get_logger(__name__)

def find_duplicate_records(
    records: Sequence[Dict[str, Any]],
    key_fields: Optional[List[str]] = None
) -> List[Tuple[Tuple, List[Dict[str, Any]]]]:
    """
    Find groups of duplicate records based on normalized key fields.
    """
    if not key_fields:
        key_fields = ["name"]
    lookup = {}
    for record in records:
        key = tuple(normalize_whitespace(str(record.get(field, ""))).lower() for field in key_fields)
        lookup.setdefault(key, []).append(record)
    duplicates = [(k, v) for k, v in lookup.items() if len(v) > 1]
    for key, group in duplicates:
        logger.warning(f"Duplicate key {key}: {len(group)} occurrences")
    return duplicates

def column_coverage(records: Sequence[Dict[str, Any]], columns: Sequence[str]) -> Dict[str, int]:
    """
    Count, per column, the records with a non-empty value.
    """
    return {col: sum(1 for r in records if normalize_whitespace(str(r.get(col) or ""))) for col in columns}

def log_qc_report(label: str, records: Sequence[Dict[str, Any]], columns: Sequence[str]):
    duplicates = find_duplicate_records(records)
    coverage = column_coverage(records, columns)
    total = len(records)
    logger.info(f"QC Results [{label}] - Total: {total}, Duplicate names: {len(duplicates)}")
    for col, filled in coverage.items():
        if filled < total:
            logger.info(f"QC [{label}] column '{col}' filled in {filled}/{total} records")
