"""
categories.py

Defines the crawlable categories of the Breed Scraper Suite.

Each category has its own listing root on www.purina.com, its own suffix
tokens to strip from breed headings, and its own fixed CSV column layout.

USAGE:
    from categories import CATEGORIES, get_category

    dogs = get_category("dogs")
    dogs.root_url   # "http://www.purina.com/dogs/dog-breeds"
    dogs.columns    # ("name", "size", "heightMale", ...)
"""

import os
from dataclasses import dataclass
from typing import Dict, Tuple

BASE_URL = "http://www.purina.com"

@dataclass(frozen=True)
class CategorySpec:
    """Immutable description of one category crawl."""
    key: str
    label: str
    path: str
    file_stem: str
    name_suffixes: Tuple[str, ...]
    columns: Tuple[str, ...]

    @property
    def root_url(self) -> str:
        return f"{BASE_URL}{self.path}"

    def output_path(self, data_dir: str, ext: str) -> str:
        return os.path.join(data_dir, f"{self.file_stem}.{ext}")

CAT_BREEDS = CategorySpec(
    key="cats",
    label="CATS",
    path="/cats/cat-breeds",
    file_stem="cat-breeds",
    name_suffixes=("Cat Breed", "Cat"),
    columns=("name", "size", "weight", "coat", "color"),
)

DOG_BREEDS = CategorySpec(
    key="dogs",
    label="DOGS",
    path="/dogs/dog-breeds",
    file_stem="dog-breeds",
    name_suffixes=("Dog Breed", "Dog"),
    columns=(
        "name",
        "size",
        "heightMale",
        "heightFemale",
        "weightMale",
        "weightFemale",
        "coat",
        "color",
        "energy",
        "activities",
    ),
)

CATEGORIES: Dict[str, CategorySpec] = {
    CAT_BREEDS.key: CAT_BREEDS,
    DOG_BREEDS.key: DOG_BREEDS,
}

def get_category(key: str) -> CategorySpec:
    """
    Look up a category by key.

    Raises:
        KeyError: if the key is unknown.

    Example:
        >>> get_category("cats").file_stem
        'cat-breeds'
    """
    try:
        return CATEGORIES[key]
    except KeyError:
        raise KeyError(f"Unknown category '{key}'. Known: {', '.join(CATEGORIES)}") from None
