import pytest

from party_picks.catalog import (
    CATEGORIES,
    Category,
    Option,
    category_ids,
    get_category,
    grouped_categories,
    validate_catalog,
    validate_selection,
)
from party_picks.errors import InvalidOption, UnknownCategory


def test_catalog_has_fifteen_valid_categories():
    assert len(CATEGORIES) == 15
    assert validate_catalog() == []
    assert len(set(category_ids())) == 15


def test_validate_catalog_reports_duplicates_and_empty_categories():
    broken = (
        Category("dup", "Dup", "Star", "fun", (Option("a", "A"), Option("a", "A again"))),
        Category("dup", "Dup 2", "Star", "fun", ()),
    )
    problems = validate_catalog(broken)
    assert any("Duplicate category id" in p for p in problems)
    assert any("Duplicate option id" in p for p in problems)
    assert any("has no options" in p for p in problems)


def test_get_category_unknown():
    with pytest.raises(UnknownCategory):
        get_category("halftime-snacks")


def test_validate_selection():
    assert validate_selection("winner", "seahawks").id == "winner"
    with pytest.raises(InvalidOption):
        validate_selection("winner", "cowboys")


def test_grouped_categories_cover_catalog_in_order():
    groups = grouped_categories()
    assert [g["key"] for g in groups] == ["outcome", "player", "fun"]
    flattened = [c["id"] for g in groups for c in g["categories"]]
    assert flattened == category_ids()
