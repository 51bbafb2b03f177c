
import re
from datetime import datetime
from typing import Optional, Any, List, Iterable
from urllib.parse import urlparse, parse_qs

# --- Text Normalization and Cleaning ---

EN_DASH = "\u2013"

def normalize_whitespace(text: Optional[str]) -> str:
    """Collapses multiple whitespace and trims the string."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()

def clean_label(text: Optional[str]) -> str:
    """Attribute-row label: lower-cased and trimmed."""
    if not text:
        return ""
    return text.lower().strip()

def clean_value(text: Optional[str]) -> str:
    """Attribute-row value: en dashes become hyphens, then trimmed."""
    if not text:
        return ""
    return text.replace(EN_DASH, "-").strip()

def strip_tokens(text: Optional[str], tokens: Iterable[str]) -> str:
    """
    Remove each token, in order, when it ends the text as a whole word, then trim.
    Example: strip_tokens("Dogo Argentino Dog Breed", ["Dog Breed", "Dog"]) -> "Dogo Argentino"
    """
    if not text:
        return ""
    text = text.strip()
    for token in tokens:
        text = re.sub(rf"(?:^|\s+){re.escape(token)}$", "", text)
    return text.strip()

# --- URL Utilities ---

def absolute_url(base: str, href: str) -> str:
    """
    Prepend the base host to a site-relative href. Absolute hrefs are kept.
    """
    if urlparse(href).scheme in ("http", "https"):
        return href
    return base.rstrip("/") + "/" + href.lstrip("/")

def page_url(root_url: str, index: int) -> str:
    """Listing page URL for a zero-based page index."""
    return f"{root_url}?page={index}"

def query_int(href: Optional[str], key: str = "page") -> Optional[int]:
    """
    Read a non-negative integer query parameter from an href like "?page=12".
    Returns None when absent or not an integer.
    """
    if not href:
        return None
    values = parse_qs(urlparse(href).query).get(key)
    if not values:
        return None
    value = values[0].strip()
    if not re.fullmatch(r"[0-9]+", value):
        return None
    return int(value)

# --- Duplicate Detection ---

def deduplicate(items: Iterable[Any]) -> List[Any]:
    """Drop repeated items, keeping the first occurrence order."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result

# --- Timestamps ---

def current_timestamp(fmt: str = "%Y%m%d_%H%M%S") -> str:
    """Return the current timestamp formatted as a string."""
    return datetime.now().strftime(fmt)
