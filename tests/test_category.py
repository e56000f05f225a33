import pytest

from locallens.core.errors import UnknownCategoryError, ValidationError
from locallens.models.category import Category, category_from_label, parse_category


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("RESTAURANTS", Category.RESTAURANTS),
        ("restaurant", Category.RESTAURANTS),
        ("  Food  ", Category.RESTAURANTS),
        ("Food & Drink", Category.RESTAURANTS),
        ("fashion", Category.CLOTHING),
        ("Local Shopping", Category.CLOTHING),
        ("gallery", Category.ART),
        ("Arts & Culture", Category.ART),
        ("events", Category.ENTERTAINMENT),
        ("Nightlife & Events", Category.ENTERTAINMENT),
        ("arcade", Category.ENTERTAINMENT),
    ],
)
def test_parse_category_aliases(raw, expected):
    assert parse_category(raw) is expected


@pytest.mark.parametrize("raw", [None, "", "all", "All Categories"])
def test_parse_category_wildcards(raw):
    assert parse_category(raw) is None


def test_unknown_category_is_an_explicit_validation_error():
    with pytest.raises(UnknownCategoryError) as exc:
        parse_category("plumbing")
    assert isinstance(exc.value, ValidationError)
    assert exc.value.status_code == 400
    assert "plumbing" in exc.value.message


def test_record_labels_are_lenient():
    assert category_from_label("Health & Wellness") is None
    assert category_from_label(None) is None
    assert category_from_label(Category.ART) is Category.ART

