import pytest
from sqlalchemy.exc import IntegrityError

from database import Store, sqlite_path
from models import Menu, Order, OrderItem, Reservation


def menu(item_id, name, category, price=10):
    return {"id": item_id, "name": name, "category": category, "price": price, "prep_time": 10, "available": True}


def order(order_id, created_at, reservation_id=None):
    return {
        "id": order_id,
        "table_number": 3,
        "reservation_id": reservation_id,
        "status": "fired",
        "tax_rate": 0,
        "created_at": created_at,
    }


def test_create_tables_is_idempotent(store, database_url):
    store.create_tables()
    store.create_tables()
    assert sqlite_path(database_url).exists()
    assert store.count(Menu) == 0


def test_sqlite_path():
    assert sqlite_path("sqlite://") is None
    assert sqlite_path("sqlite:///:memory:") is None
    assert str(sqlite_path("sqlite:///./data/restaurant.db")) == "data/restaurant.db"
    assert sqlite_path("postgresql://user@localhost/db") is None


def test_menu_sorted_by_category_then_name(store):
    store.insert_menu(menu("m-3", "Tiramisu", "Dessert"))
    store.insert_menu(menu("m-1", "Steak", "Mains"))
    store.insert_menu(menu("m-2", "Affogato", "Dessert"))
    store.insert_menu(menu("m-4", "Gnocchi", "Mains"))
    assert [m.id for m in store.list_menu()] == ["m-2", "m-3", "m-4", "m-1"]


def test_reservations_sorted_by_time(seeded):
    times = [r.time_ms for r in seeded.list_reservations()]
    assert times == sorted(times)
    assert [r.id for r in seeded.list_reservations()] == ["r-anna", "r-omid", "r-liz"]


def test_orders_sorted_newest_first_with_items_in_insertion_order(store):
    store.insert_order(order("o-old", 1000), [{"menu_id": "m-b", "qty": 1}, {"menu_id": "m-a", "qty": 2}])
    store.insert_order(order("o-new", 5000), [{"menu_id": "m-c", "qty": 1}])
    listed = store.list_orders()
    assert [o.id for o, _ in listed] == ["o-new", "o-old"]
    assert [(i.menu_id, i.qty) for i in listed[1][1]] == [("m-b", 1), ("m-a", 2)]


def test_update_missing_rows_returns_none(store):
    assert store.update_menu("m-nope", {"name": "x"}) is None
    assert store.update_reservation("r-nope", {"name": "x"}) is None
    assert store.update_order("o-nope", {"status": "paid"}, [{"menu_id": "m-pasta", "qty": 1}]) is None
    assert store.count(OrderItem) == 0


def test_delete_menu_removes_referencing_line_items(seeded):
    seeded.insert_order(order("o-200", 2000), [{"menu_id": "m-burrata", "qty": 1}, {"menu_id": "m-salad", "qty": 1}])
    before = seeded.count(OrderItem)

    seeded.delete_menu("m-burrata")

    assert seeded.get_menu("m-burrata") is None
    assert seeded.count(OrderItem) == before - 2
    _, items = seeded.get_order("o-101")
    assert [i.menu_id for i in items] == ["m-pasta"]
    _, items = seeded.get_order("o-200")
    assert [i.menu_id for i in items] == ["m-salad"]


def test_delete_reservation_detaches_orders(seeded):
    seeded.delete_reservation("r-omid")

    assert seeded.get_reservation("r-omid") is None
    found = seeded.get_order("o-101")
    assert found is not None
    assert found[0].reservation_id is None
    assert seeded.get_order("o-102")[0].reservation_id == "r-liz"


def test_delete_order_removes_its_items(seeded):
    seeded.delete_order("o-101")
    assert seeded.get_order("o-101") is None
    assert seeded.count(Order) == 1
    assert seeded.count(OrderItem) == 2


def test_delete_unknown_ids_is_a_no_op(seeded):
    seeded.delete_menu("m-nope")
    seeded.delete_reservation("r-nope")
    seeded.delete_order("o-nope")
    assert seeded.count(Menu) == 5
    assert seeded.count(Reservation) == 3
    assert seeded.count(Order) == 2


def test_update_order_replaces_items(seeded):
    original, _ = seeded.get_order("o-101")
    updated, items = seeded.update_order(
        "o-101",
        {"table_number": 9, "reservation_id": None, "status": "paid", "tax_rate": 8.5},
        [{"menu_id": "m-pasta", "qty": 1}],
    )
    assert [(i.menu_id, i.qty) for i in items] == [("m-pasta", 1)]
    assert updated.table_number == 9
    assert updated.created_at == original.created_at


def test_failed_item_replacement_rolls_back(seeded):
    with pytest.raises(IntegrityError):
        seeded.update_order(
            "o-101",
            {"status": "paid"},
            [{"menu_id": "m-pasta", "qty": None}],
        )
    row, items = seeded.get_order("o-101")
    assert row.status == "fired"
    assert [(i.menu_id, i.qty) for i in items] == [("m-burrata", 2), ("m-pasta", 3)]


def test_duplicate_id_is_rejected(store):
    store.insert_menu(menu("m-1", "Steak", "Mains"))
    with pytest.raises(IntegrityError):
        store.insert_menu(menu("m-1", "Other", "Mains"))


def test_menu_prices(seeded):
    prices = seeded.menu_prices()
    assert prices["m-pasta"] == 22
    assert len(prices) == 5


def test_separate_stores_share_the_file(database_url, store):
    store.insert_menu(menu("m-1", "Steak", "Mains"))
    other = Store(database_url)
    try:
        assert other.get_menu("m-1").name == "Steak"
    finally:
        other.dispose()
