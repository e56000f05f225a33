# locallens/models/category.py
"""
Business categories.

Businesses come from two generations of data: the current closed set
(RESTAURANTS, CLOTHING, ART, ENTERTAINMENT) and older free-text labels such
as "Food & Drink" or "Local Shopping". Both are funnelled through one alias
table so the rest of the code only ever compares `Category` members.
"""

from enum import Enum
from typing import Optional

from locallens.core.errors import UnknownCategoryError


class Category(str, Enum):
    RESTAURANTS = "RESTAURANTS"
    CLOTHING = "CLOTHING"
    ART = "ART"
    ENTERTAINMENT = "ENTERTAINMENT"


# request aliases + legacy labels → canonical
CATEGORY_ALIASES = {
    "restaurants": Category.RESTAURANTS,
    "restaurant": Category.RESTAURANTS,
    "food": Category.RESTAURANTS,
    "food & drink": Category.RESTAURANTS,
    "food and drink": Category.RESTAURANTS,
    "cafe": Category.RESTAURANTS,
    "bar": Category.RESTAURANTS,
    "clothing": Category.CLOTHING,
    "fashion": Category.CLOTHING,
    "shopping": Category.CLOTHING,
    "local shopping": Category.CLOTHING,
    "thrift": Category.CLOTHING,
    "boutique": Category.CLOTHING,
    "art": Category.ART,
    "arts": Category.ART,
    "gallery": Category.ART,
    "arts & culture": Category.ART,
    "arts and culture": Category.ART,
    "entertainment": Category.ENTERTAINMENT,
    "event": Category.ENTERTAINMENT,
    "events": Category.ENTERTAINMENT,
    "nightlife": Category.ENTERTAINMENT,
    "nightlife & events": Category.ENTERTAINMENT,
    "arcade": Category.ENTERTAINMENT,
    "comedy": Category.ENTERTAINMENT,
    "music": Category.ENTERTAINMENT,
}

# values meaning "no category filter"
_WILDCARDS = {"", "all", "all categories"}


def _key(value: str) -> str:
    return " ".join(str(value).strip().lower().split())


def category_from_label(label) -> Optional[Category]:
    """Lenient mapping used for stored records; unmappable labels give None."""
    if label is None:
        return None
    if isinstance(label, Category):
        return label
    return CATEGORY_ALIASES.get(_key(label))


def parse_category(value) -> Optional[Category]:
    """
    Strict mapping used for request parameters.

    Returns None for a missing/"all" value and raises UnknownCategoryError
    for anything that doesn't map to a canonical category.
    """
    if value is None or _key(value) in _WILDCARDS:
        return None
    category = category_from_label(value)
    if category is None:
        raise UnknownCategoryError(str(value))
    return category
