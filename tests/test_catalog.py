import pytest

from conftest import glyph
from iconatlas.catalog import (
    CatalogQuery,
    filter_descriptors,
    group_by_initial,
    index,
    iter_pages,
    paginate,
    sort_descriptors,
    suggestions,
)

FRUIT = [glyph(n) for n in ["Zebra", "apple", "Mango", "banana"]]
MANY = [glyph(f"icon-{i:03d}") for i in range(257)]


def names(descriptors):
    return [d.name for d in descriptors]


def test_search_is_case_insensitive_and_sorted():
    result = index(FRUIT, CatalogQuery(query="an", sort_ascending=True))
    assert names(result.filtered) == ["banana", "Mango"]


def test_descending_sort_reverses():
    result = index(FRUIT, CatalogQuery(sort_ascending=False))
    assert names(result.filtered) == ["Zebra", "Mango", "banana", "apple"]


def test_query_is_stripped_and_empty_matches_all():
    assert names(filter_descriptors(FRUIT, "  MAN ")) == ["Mango"]
    assert len(filter_descriptors(FRUIT, "")) == 4
    assert len(filter_descriptors(FRUIT, None)) == 4


def test_page_resets_when_filter_shrinks():
    five = [glyph(n) for n in ["alpha", "beta", "gamma", "delta", "epsilon"]]
    result = index(five, CatalogQuery(page_size=2))
    assert result.total_pages == 3

    narrowed = index(five, CatalogQuery(query="gam", page=5, page_size=2))
    assert narrowed.total_pages == 1
    assert narrowed.page == 1
    assert names(narrowed.paginated) == ["gamma"]


def test_empty_result_has_one_page():
    result = index(FRUIT, CatalogQuery(query="kiwi"))
    assert result.total_pages == 1
    assert result.page == 1
    assert result.paginated == []
    assert result.grouped_by_initial == []
    assert not result.has_previous and not result.has_next


def test_invalid_page_size_falls_back():
    assert CatalogQuery(page_size=0).page_size > 0
    assert CatalogQuery(page_size=-3).page_size > 0


@pytest.mark.parametrize("query", ["", "icon", "icon-1", "icon-12", "icon-125"])
def test_longer_query_never_grows_results(query):
    shorter = filter_descriptors(MANY, query[:-1])
    longer = filter_descriptors(MANY, query)
    assert set(names(longer)) <= set(names(shorter))


@pytest.mark.parametrize("page_size", [1, 7, 50, 120, 300])
def test_pages_cover_filtered_exactly(page_size):
    pages = list(iter_pages(MANY, page_size))
    flattened = [d for page in pages for d in page]
    assert flattened == MANY
    total = index(MANY, CatalogQuery(page_size=page_size)).total_pages
    assert len(pages) == total


def test_paginate_last_page_is_partial():
    items, page, total_pages = paginate(MANY, 3, 120)
    assert (page, total_pages) == (3, 3)
    assert len(items) == 17


def test_sort_idempotent_and_reversible():
    once = sort_descriptors(FRUIT)
    assert sort_descriptors(once) == once
    assert sort_descriptors(FRUIT, ascending=False) == list(reversed(once))


def test_group_by_initial():
    groups = group_by_initial(sort_descriptors(FRUIT))
    assert [initial for initial, _ in groups] == ["A", "B", "M", "Z"]
    assert names(dict(groups)["M"]) == ["Mango"]


def test_groups_use_whole_filtered_set():
    result = index(MANY + FRUIT, CatalogQuery(page_size=5))
    assert sum(len(g) for _, g in result.grouped_by_initial) == result.total_results


def test_suggestions_limit():
    assert suggestions(FRUIT, "a", limit=2) == ["apple", "banana"]
    assert suggestions(FRUIT, "zzz") == []


def test_page_to_dict():
    data = index(FRUIT, CatalogQuery(query="a", page_size=2)).to_dict()
    assert data["total_results"] == 4
    assert data["total_pages"] == 2
    assert [icon["name"] for icon in data["icons"]] == ["apple", "banana"]
    assert data["has_next"] is True
