import pytest

from grocery_app.core.errors import NotFoundError, ValidationError
from grocery_app.migrations import CATALOG_SEED


def test_empty_query_returns_whole_catalog(session, catalog_service):
    items = catalog_service.search_items(session, "")
    assert len(items) == len(CATALOG_SEED)
    assert [i.name for i in items] == [name for name, _ in CATALOG_SEED]

    assert len(catalog_service.search_items(session, "   ")) == len(CATALOG_SEED)


def test_search_is_case_insensitive_substring_in_storage_order(session, catalog_service):
    names = [i.name for i in catalog_service.search_items(session, "JUICE")]
    assert names == ["Orange Juice", "Apple Juice"]

    names = [i.name for i in catalog_service.search_items(session, "per lb")]
    assert names[0] == "Ground Beef (per LB)"
    assert all("(per LB)" in n for n in names)


def test_search_treats_wildcards_literally(session, catalog_service):
    assert catalog_service.search_items(session, "%") == []
    assert catalog_service.search_items(session, "_") == []


def test_search_no_match(session, catalog_service):
    assert catalog_service.search_items(session, "durian") == []


def test_seeded_items_have_no_category(session, catalog_service):
    assert all(i.category is None for i in catalog_service.search_items(session))
    assert catalog_service.list_categories(session) == []


def test_assign_category_and_filter(session, catalog_service):
    carrots = catalog_service.search_items(session, "Carrots")[0]
    broccoli = catalog_service.search_items(session, "Broccoli")[0]

    assert catalog_service.assign_category(session, carrots.id, "Produce") is True
    assert catalog_service.assign_category(session, broccoli.id, "produce") is True

    assert catalog_service.get_item(session, carrots.id).category == "produce"
    by_category = catalog_service.get_items_by_category(session, "PRODUCE")
    assert [i.name for i in by_category] == ["Carrots", "Broccoli"]
    assert catalog_service.list_categories(session) == ["produce"]


def test_assign_category_overwrites(session, catalog_service):
    milk = catalog_service.search_items(session, "Milk")[0]
    catalog_service.assign_category(session, milk.id, "misc")
    catalog_service.assign_category(session, milk.id, "Beverages")
    assert catalog_service.get_item(session, milk.id).category == "beverages"


def test_unknown_category_is_empty_not_everything(session, catalog_service):
    assert catalog_service.get_items_by_category(session, "snacks") == []
    assert catalog_service.get_items_by_category(session, "") == []


def test_assign_category_unknown_id_is_noop(session, catalog_service):
    assert catalog_service.assign_category(session, 9999, "produce") is False
    assert catalog_service.list_categories(session) == []


def test_assign_empty_category_rejected(session, catalog_service):
    with pytest.raises(ValidationError):
        catalog_service.assign_category(session, 1, "  ")


def test_get_item_missing(session, catalog_service):
    with pytest.raises(NotFoundError):
        catalog_service.get_item(session, 9999)
