from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from grocery_app.core.errors import StorageError, ValidationError
from grocery_app.models.types import utc_now


def test_add_creates_entry_with_defaults(session, cart_service):
    entry = cart_service.add_or_merge(session, "Milk", 3.99, 2)

    assert entry.id is not None
    assert entry.name == "Milk"
    assert entry.quantity == 2
    assert entry.price == 3.99
    assert entry.priority == "regular"
    assert entry.urgent_reminder_shown is False
    assert entry.added_at is not None
    assert abs((utc_now() - entry.added_at).total_seconds()) < 60


def test_repeat_add_merges_and_keeps_first_fields(session, cart_service):
    first = cart_service.add_or_merge(
        session, "Milk", 3.99, 2, category="Beverages", description="2%", priority="urgent"
    )
    second = cart_service.add_or_merge(
        session, "Milk", 9.99, 3, category="misc", description="skim", priority="regular"
    )

    entries = cart_service.list_entries(session)
    assert len(entries) == 1
    assert second.id == first.id
    assert second.quantity == 5
    assert second.price == 3.99
    assert second.category == "beverages"
    assert second.description == "2%"
    assert second.priority == "urgent"
    assert second.added_at == first.added_at


def test_repeat_add_is_case_insensitive(session, cart_service):
    """Catalog Milk 3.99: 'Milk' x2 then 'milk' x1 -> one entry, quantity 3."""
    cart_service.add_or_merge(session, "Milk", 3.99, 2)
    merged = cart_service.add_or_merge(session, "milk", 1.00, 1)

    entries = cart_service.list_entries(session)
    assert len(entries) == 1
    assert merged.name == "Milk"
    assert merged.quantity == 3
    assert merged.price == 3.99


def test_surrounding_whitespace_is_ignored_for_merge(session, cart_service):
    cart_service.add_or_merge(session, "Bread", 2.49, 1)
    merged = cart_service.add_or_merge(session, "  bread ", 2.49, 1)
    assert merged.quantity == 2
    assert len(cart_service.list_entries(session)) == 1


@pytest.mark.parametrize("name", ["", "   "])
def test_add_rejects_empty_name(session, cart_service, name):
    with pytest.raises(ValidationError):
        cart_service.add_or_merge(session, name, 1.0, 1)
    assert cart_service.list_entries(session) == []


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_rejects_non_positive_quantity(session, cart_service, quantity):
    with pytest.raises(ValidationError):
        cart_service.add_or_merge(session, "Eggs", 2.99, quantity)
    assert cart_service.list_entries(session) == []


def test_update_quantity_sets_value(session, cart_service):
    entry = cart_service.add_or_merge(session, "Eggs", 2.99, 1)

    assert cart_service.update_quantity(session, entry.id, 6) == 1

    [reloaded] = cart_service.list_entries(session)
    assert reloaded.quantity == 6


@pytest.mark.parametrize("quantity", [0, -3])
def test_update_quantity_non_positive_removes(session, cart_service, quantity):
    entry = cart_service.add_or_merge(session, "Eggs", 2.99, 4)

    assert cart_service.update_quantity(session, entry.id, quantity) == 1
    assert cart_service.list_entries(session) == []


def test_update_quantity_unknown_id(session, cart_service):
    assert cart_service.update_quantity(session, 999, 3) == 0


def test_remove_returns_count(session, cart_service):
    entry_id = cart_service.add_or_merge(session, "Rice", 3.49, 1).id

    assert cart_service.remove(session, entry_id) == 1
    assert cart_service.remove(session, entry_id) == 0


def test_clear_and_totals(session, cart_service):
    cart_service.add_or_merge(session, "Milk", 3.99, 2)
    cart_service.add_or_merge(session, "Bread", 2.49, 1)

    assert cart_service.total(session) == pytest.approx(3.99 * 2 + 2.49)
    assert cart_service.item_count(session) == 3

    assert cart_service.clear(session) == 2
    assert cart_service.total(session) == 0.0
    assert cart_service.item_count(session) == 0


def test_filter_by_category(session, cart_service):
    cart_service.add_or_merge(session, "Milk", 3.99, 1, category="Beverages")
    cart_service.add_or_merge(session, "Bacon", 7.99, 1, category="meats")
    cart_service.add_or_merge(session, "Salt", 1.49, 1)

    assert [e.name for e in cart_service.list_entries(session, "BEVERAGES")] == ["Milk"]
    assert [e.name for e in cart_service.list_entries(session, "meats")] == ["Bacon"]
    assert cart_service.list_entries(session, "produce") == []
    assert len(cart_service.list_entries(session, "")) == 3
    assert len(cart_service.list_entries(session, None)) == 3


def test_summary_totals_cover_whole_cart(session, cart_service):
    cart_service.add_or_merge(session, "Milk", 3.99, 2, category="beverages")
    cart_service.add_or_merge(session, "Bacon", 7.99, 1, category="meats")

    summary = cart_service.get_cart_summary(session, "meats")

    assert [i.name for i in summary.items] == ["Bacon"]
    assert summary.items[0].line_total == pytest.approx(7.99)
    assert summary.total_quantity == 3
    assert summary.total_price == pytest.approx(3.99 * 2 + 7.99)


def test_add_with_catalog_item_assigns_missing_category(session, cart_service, catalog_service):
    from grocery_app.schemas.cart import CartEntryCreate

    milk = catalog_service.search_items(session, "Milk")[0]
    assert milk.category is None

    cart_service.add_to_cart(
        session,
        CartEntryCreate(name="Milk", price=3.99, category="Beverages", catalog_item_id=milk.id),
    )
    assert catalog_service.get_item(session, milk.id).category == "beverages"

    # An existing category is left alone
    cart_service.add_to_cart(
        session,
        CartEntryCreate(name="Milk", price=3.99, category="Misc", catalog_item_id=milk.id),
    )
    assert catalog_service.get_item(session, milk.id).category == "beverages"


def test_due_within(session, cart_service):
    now = utc_now()
    cart_service.add_or_merge(session, "Milk", 3.99, 2, due_date=now + timedelta(days=2))
    cart_service.add_or_merge(session, "Bread", 2.49, 1, due_date=now + timedelta(days=6))
    cart_service.add_or_merge(session, "Wine", 12.99, 1, due_date=now + timedelta(days=10))
    cart_service.add_or_merge(session, "Salt", 1.49, 1, due_date=now - timedelta(days=1))
    cart_service.add_or_merge(session, "Rice", 3.49, 1)

    summary = cart_service.due_within(session, 7, now=now)

    assert [i.name for i in summary.items] == ["Milk", "Bread"]
    assert summary.count == 2
    assert summary.total_price == pytest.approx(3.99 * 2 + 2.49)


def test_due_date_round_trips_through_epoch_millis(session, cart_service):
    due = utc_now().replace(microsecond=0) + timedelta(days=3)
    entry = cart_service.add_or_merge(session, "Milk", 3.99, 1, due_date=due)
    assert entry.due_date == due


def test_storage_failure_becomes_storage_error(session, cart_service, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(cart_service.cart_repo, "upsert_increment", broken)

    with pytest.raises(StorageError):
        cart_service.add_or_merge(session, "Milk", 3.99, 1)


def test_failed_catalog_write_leaves_cart_untouched(session, cart_service, catalog_service, monkeypatch):
    from grocery_app.schemas.cart import CartEntryCreate

    milk = catalog_service.search_items(session, "Milk")[0]

    def broken(*args, **kwargs):
        raise OperationalError("UPDATE", {}, Exception("database is locked"))

    monkeypatch.setattr(cart_service.catalog_repo, "update", broken)

    with pytest.raises(StorageError):
        cart_service.add_to_cart(
            session,
            CartEntryCreate(name="Milk", price=3.99, category="Beverages", catalog_item_id=milk.id),
        )

    assert cart_service.list_entries(session) == []
    assert catalog_service.get_item(session, milk.id).category is None


def test_add_with_unknown_catalog_item_is_rejected(session, cart_service):
    from grocery_app.schemas.cart import CartEntryCreate

    with pytest.raises(ValidationError):
        cart_service.add_to_cart(
            session,
            CartEntryCreate(name="Milk", price=3.99, category="beverages", catalog_item_id=9999),
        )
    assert cart_service.list_entries(session) == []
