import logging
import time
from datetime import datetime

from database import Store
from models import Menu, Reservation, Order

logger = logging.getLogger(__name__)

HOUR_MS = 60 * 60 * 1000
MINUTE_MS = 60 * 1000


def seed_if_empty(store: Store):
    """Load demonstration rows into whichever tables are still empty."""
    if store.count(Menu) == 0:
        menu_items = [
            ("m-burrata", "Charred Burrata", "Small Plates", 14, 8, True),
            ("m-pasta", "Hand-cut Pappardelle", "Mains", 22, 14, True),
            ("m-halibut", "Miso Poached Halibut", "Mains", 28, 16, True),
            ("m-salad", "Smoked Citrus Salad", "Greens", 12, 6, True),
            ("m-brulee", "Cold Brew Crème Brûlée", "Dessert", 11, 10, False),
        ]
        for item_id, name, category, price, prep_time, available in menu_items:
            store.insert_menu({
                "id": item_id,
                "name": name,
                "category": category,
                "price": price,
                "prep_time": prep_time,
                "available": available,
            })
        logger.info("Seeded %d menu items", len(menu_items))

    if store.count(Reservation) == 0:
        # offsets count from the current minute, not from midnight
        base = int(datetime.now().replace(second=0, microsecond=0).timestamp() * 1000)
        reservations = [
            ("r-anna", "Anna Price", 2, 4, base + 18 * HOUR_MS, "booked", "Anniversary, quiet corner"),
            ("r-omid", "Omid R.", 5, 7, base + int(19.5 * HOUR_MS), "seated", ""),
            ("r-liz", "Liz & Kai", 3, 2, base + int(20.25 * HOUR_MS), "completed", "Vegan dessert"),
        ]
        for res_id, name, party_size, table, time_ms, status, notes in reservations:
            store.insert_reservation({
                "id": res_id,
                "name": name,
                "party_size": party_size,
                "table_number": table,
                "time_ms": time_ms,
                "status": status,
                "notes": notes,
            })
        logger.info("Seeded %d reservations", len(reservations))

    if store.count(Order) == 0:
        now = int(time.time() * 1000)
        orders = [
            ("o-101", 7, "r-omid", "fired", 8.5, now - 25 * MINUTE_MS, [("m-burrata", 2), ("m-pasta", 3)]),
            ("o-102", 2, "r-liz", "paid", 8.5, now - 80 * MINUTE_MS, [("m-halibut", 2), ("m-brulee", 3)]),
        ]
        for order_id, table, reservation_id, status, tax_rate, created_at, items in orders:
            store.insert_order(
                {
                    "id": order_id,
                    "table_number": table,
                    "reservation_id": reservation_id,
                    "status": status,
                    "tax_rate": tax_rate,
                    "created_at": created_at,
                },
                [{"menu_id": menu_id, "qty": qty} for menu_id, qty in items],
            )
        logger.info("Seeded %d orders", len(orders))


if __name__ == "__main__":
    from config import load_settings

    logging.basicConfig(level=logging.INFO)
    store = Store(load_settings().database_url)
    store.create_tables()
    seed_if_empty(store)
