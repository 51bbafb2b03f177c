"""
Attribute normalization for breed detail pages.

Turns the raw (label, value) rows of a breed's stats table into record fields.
Most labels pass through unchanged. "height" and "weight" are gendered: they
always produce a <field>Male and a <field>Female column.

Gendered value grammar:

    value   := half DELIM half [DELIM ...]
    DELIM   := ","  if the value contains a comma, else ";"
    half    := [PREFIX] text

Male prefixes, first match wins: "Male - ", "Males - ", "Male: ", "Males: ".
Female prefixes, first match wins: "Female - ", "Females - ", "Female: ", "Females: ".

Prefixes are only matched at the start of a trimmed half. A prefix appearing
later in the text is left alone, so "Adult Male - 10in" stays "Adult Male - 10in"
rather than having the prefix cut out of the middle.

A value only counts as split when it mentions both "Male" and "Female".
A split value without either delimiter yields two empty halves.
"""

from typing import Dict, Iterable, Optional, Tuple

from breed_scraper.logging import get_logger

logger = get_logger(__name__)

GENDERED_LABELS = ("height", "weight")
MALE_TOKEN = "Male"
FEMALE_TOKEN = "Female"
DELIMITERS = (",", ";")
MALE_PREFIXES = ("Male - ", "Males - ", "Male: ", "Males: ")
FEMALE_PREFIXES = ("Female - ", "Females - ", "Female: ", "Females: ")

def is_gender_split(value: str) -> bool:
    return MALE_TOKEN in value and FEMALE_TOKEN in value

def choose_delimiter(value: str) -> Optional[str]:
    """Comma if present, else semicolon if present, else None."""
    for delimiter in DELIMITERS:
        if delimiter in value:
            return delimiter
    return None

def strip_prefix(half: str, prefixes: Tuple[str, ...]) -> str:
    half = half.strip()
    for prefix in prefixes:
        if half.startswith(prefix):
            return half[len(prefix):].strip()
    return half

def split_gendered_value(value: str) -> Tuple[str, str]:
    """
    Split a "Male ..., Female ..." value into (male, female) figures.

    >>> split_gendered_value("Male - 10-12in, Female - 8-10in")
    ('10-12in', '8-10in')
    >>> split_gendered_value("Males: 8-10lb; Females: 6-8lb")
    ('8-10lb', '6-8lb')
    >>> split_gendered_value("Male and Female 10in")
    ('', '')
    """
    delimiter = choose_delimiter(value)
    if delimiter is None:
        logger.debug(f"No delimiter in gendered value {value!r}; leaving both halves empty")
        return "", ""
    male, female = value.split(delimiter)[:2]
    return strip_prefix(male, MALE_PREFIXES), strip_prefix(female, FEMALE_PREFIXES)

def normalize(label: str, value: str) -> Dict[str, str]:
    """
    Normalize a single (label, value) pair into one or two fields.
    Empty labels or values produce no fields.
    """
    if not label or not value:
        return {}
    if label in GENDERED_LABELS:
        if is_gender_split(value):
            male, female = split_gendered_value(value)
        else:
            male = female = value
        return {f"{label}Male": male, f"{label}Female": female}
    return {label: value}

def normalize_attributes(entries: Iterable[Tuple[Optional[str], Optional[str]]]) -> Dict[str, str]:
    """
    Normalize an ordered list of raw attribute rows into a field mapping.
    Field order follows the first appearance of each field.
    """
    fields: Dict[str, str] = {}
    for label, value in entries:
        fields.update(normalize(label, value))
    return fields
