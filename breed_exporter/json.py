"""
breed_exporter/json.py

JSON serialization of breed records, the durable intermediate of a crawl.

API:
- records_to_json(records) -> str
    Array of objects; each object keeps its record's field order.
- export_to_json(records, filename) -> filename
    Writes the JSON text as UTF-8. Raises SerializationIOError on failure.
- load_json(filename) -> list
    Reads records back (used by the CSV-only maintenance mode).
"""

import json
import os
from typing import Any, Dict, List, Sequence

from breed_scraper.errors import SerializationIOError
from breed_scraper.logging import get_logger

logger = get_logger(__name__)

def records_to_json(records: Sequence[Dict[str, Any]]) -> str:
    return json.dumps(list(records), ensure_ascii=False)

def export_to_json(records: Sequence[Dict[str, Any]], filename: str) -> str:
    text = records_to_json(records)
    try:
        folder = os.path.dirname(filename)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(filename, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        logger.error(f"Could not write JSON {filename}: {e}")
        raise SerializationIOError(filename, str(e)) from e
    logger.info(f"{filename} saved! ({len(records)} records)")
    return filename

def load_json(filename: str) -> List[Dict[str, Any]]:
    try:
        with open(filename, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read JSON {filename}: {e}")
        raise SerializationIOError(filename, str(e)) from e
    if not isinstance(data, list):
        raise SerializationIOError(filename, "expected a JSON array of records")
    return data
