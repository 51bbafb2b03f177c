"""
breed_exporter/csv.py

Exports breed records to CSV with a fixed, per-category column order.

Format:
- Header row: the column names joined with ",".
- One row per record; a column the record lacks (or leaves empty) is an empty field.
- A value containing a comma is wrapped in double quotes. Embedded double
  quotes are NOT escaped, so such values do not round-trip through strict
  CSV readers.
- Rows are joined with "\\n"; there is no trailing newline.

API:
- records_to_csv(records, columns) -> str
- export_to_csv(records, columns, filename) -> filename
    Raises SerializationIOError on failure.
- regenerate_csv_from_json(json_filename, columns, csv_filename) -> filename
    Maintenance mode: rebuild the CSV from a saved JSON file, no network.

Typical usage:
    from breed_exporter.csv import export_to_csv
    export_to_csv(records, CAT_BREEDS.columns, "data/cat-breeds.csv")
"""

import os
from typing import Any, Dict, Sequence

from breed_scraper.errors import SerializationIOError
from breed_scraper.logging import get_logger

logger = get_logger(__name__)

def format_field(value: Any) -> str:
    if not value:
        return ""
    text = str(value)
    return f'"{text}"' if "," in text else text

def records_to_csv(records: Sequence[Dict[str, Any]], columns: Sequence[str]) -> str:
    rows = [",".join(columns)]
    for record in records:
        rows.append(",".join(format_field(record.get(col)) for col in columns))
    return "\n".join(rows)

def export_to_csv(records: Sequence[Dict[str, Any]], columns: Sequence[str], filename: str) -> str:
    """
    Write records to filename in the given column order.
    Returns the filename.
    """
    if not records:
        logger.warning(f"No records to export; {filename} will only hold the header.")
    text = records_to_csv(records, columns)
    try:
        folder = os.path.dirname(filename)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(filename, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        logger.error(f"Could not write CSV {filename}: {e}")
        raise SerializationIOError(filename, str(e)) from e
    logger.info(f"{filename} saved! ({len(records)} rows)")
    return filename

def regenerate_csv_from_json(json_filename: str, columns: Sequence[str], csv_filename: str) -> str:
    from breed_exporter.json import load_json

    records = load_json(json_filename)
    logger.info(f"Regenerating {csv_filename} from {json_filename} ({len(records)} records)")
    return export_to_csv(records, columns, csv_filename)
