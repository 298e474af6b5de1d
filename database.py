"""
Database Helper Functions

Relational storage for the menu, reservations, orders and order line items.
A Store is built once at startup and handed to the API layer; every method
opens its own session, and the multi-statement cascades run inside a single
transaction so a failure leaves nothing half-applied.
"""

import logging
from pathlib import Path
from typing import Optional, List, Dict, Any, Tuple, Iterable

from sqlalchemy import create_engine, func
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from models import Base, Menu, Reservation, Order, OrderItem

logger = logging.getLogger(__name__)

OrderWithItems = Tuple[Order, List[OrderItem]]

# ------------- Utilities -------------

def sqlite_path(database_url: str) -> Optional[Path]:
    """Filesystem path of a SQLite database URL, None for other engines or memory."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return None
    return Path(url.database)


def _apply(row, data: Dict[str, Any]):
    for key, value in data.items():
        setattr(row, key, value)
    return row


class Store:
    def __init__(self, database_url: str):
        self.database_url = database_url
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine = create_engine(database_url, connect_args=connect_args)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    @property
    def path(self) -> Optional[Path]:
        return sqlite_path(self.database_url)

    def create_tables(self):
        """Create any missing tables. Safe to call on every startup."""
        path = self.path
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)
        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()

    def count(self, model) -> int:
        with self.SessionLocal() as db:
            return db.query(func.count()).select_from(model).scalar()

    # ------------- Menu -------------

    def list_menu(self) -> List[Menu]:
        with self.SessionLocal() as db:
            return db.query(Menu).order_by(Menu.category, Menu.name).all()

    def get_menu(self, menu_id: str) -> Optional[Menu]:
        with self.SessionLocal() as db:
            return db.get(Menu, menu_id)

    def insert_menu(self, data: Dict[str, Any]) -> Menu:
        row = Menu(**data)
        with self.SessionLocal.begin() as db:
            db.add(row)
        return row

    def update_menu(self, menu_id: str, data: Dict[str, Any]) -> Optional[Menu]:
        with self.SessionLocal.begin() as db:
            row = db.get(Menu, menu_id)
            if row is None:
                return None
            _apply(row, data)
        return row

    def delete_menu(self, menu_id: str):
        """Drop every line item pointing at the dish, then the dish itself."""
        with self.SessionLocal.begin() as db:
            removed = db.query(OrderItem).filter(OrderItem.menu_id == menu_id).delete(synchronize_session=False)
            db.query(Menu).filter(Menu.id == menu_id).delete(synchronize_session=False)
        logger.debug("Deleted menu item %s and %d order line(s)", menu_id, removed)

    def menu_prices(self) -> Dict[str, float]:
        with self.SessionLocal() as db:
            return {menu_id: price for menu_id, price in db.query(Menu.id, Menu.price)}

    # ------------- Reservations -------------

    def list_reservations(self) -> List[Reservation]:
        with self.SessionLocal() as db:
            return db.query(Reservation).order_by(Reservation.time_ms.asc()).all()

    def get_reservation(self, reservation_id: str) -> Optional[Reservation]:
        with self.SessionLocal() as db:
            return db.get(Reservation, reservation_id)

    def insert_reservation(self, data: Dict[str, Any]) -> Reservation:
        row = Reservation(**data)
        with self.SessionLocal.begin() as db:
            db.add(row)
        return row

    def update_reservation(self, reservation_id: str, data: Dict[str, Any]) -> Optional[Reservation]:
        with self.SessionLocal.begin() as db:
            row = db.get(Reservation, reservation_id)
            if row is None:
                return None
            _apply(row, data)
        return row

    def delete_reservation(self, reservation_id: str):
        """Detach orders from the reservation, then delete it. The orders stay."""
        with self.SessionLocal.begin() as db:
            detached = (
                db.query(Order)
                .filter(Order.reservation_id == reservation_id)
                .update({Order.reservation_id: None}, synchronize_session=False)
            )
            db.query(Reservation).filter(Reservation.id == reservation_id).delete(synchronize_session=False)
        logger.debug("Deleted reservation %s, detached %d order(s)", reservation_id, detached)

    # ------------- Orders -------------

    @staticmethod
    def _items_for(db, order_ids: Iterable[str]) -> Dict[str, List[OrderItem]]:
        grouped: Dict[str, List[OrderItem]] = {}
        ids = list(order_ids)
        if not ids:
            return grouped
        rows = db.query(OrderItem).filter(OrderItem.order_id.in_(ids)).order_by(OrderItem.id).all()
        for item in rows:
            grouped.setdefault(item.order_id, []).append(item)
        return grouped

    @staticmethod
    def _insert_items(db, order_id: str, items: List[Dict[str, Any]]):
        for item in items:
            db.add(OrderItem(order_id=order_id, menu_id=item["menu_id"], qty=item["qty"]))

    def list_orders(self) -> List[OrderWithItems]:
        with self.SessionLocal() as db:
            orders = db.query(Order).order_by(Order.created_at.desc()).all()
            grouped = self._items_for(db, [o.id for o in orders])
            return [(o, grouped.get(o.id, [])) for o in orders]

    def get_order(self, order_id: str) -> Optional[OrderWithItems]:
        with self.SessionLocal() as db:
            order = db.get(Order, order_id)
            if order is None:
                return None
            return order, self._items_for(db, [order_id]).get(order_id, [])

    def insert_order(self, data: Dict[str, Any], items: List[Dict[str, Any]]) -> OrderWithItems:
        with self.SessionLocal.begin() as db:
            db.add(Order(**data))
            db.flush()
            self._insert_items(db, data["id"], items)
        return self.get_order(data["id"])

    def update_order(self, order_id: str, data: Dict[str, Any], items: List[Dict[str, Any]]) -> Optional[OrderWithItems]:
        """Overwrite the order row and replace its line items wholesale."""
        with self.SessionLocal.begin() as db:
            row = db.get(Order, order_id)
            if row is None:
                return None
            _apply(row, data)
            db.flush()
            db.query(OrderItem).filter(OrderItem.order_id == order_id).delete(synchronize_session=False)
            self._insert_items(db, order_id, items)
        return self.get_order(order_id)

    def delete_order(self, order_id: str):
        with self.SessionLocal.begin() as db:
            db.query(OrderItem).filter(OrderItem.order_id == order_id).delete(synchronize_session=False)
            db.query(Order).filter(Order.id == order_id).delete(synchronize_session=False)
        logger.debug("Deleted order %s", order_id)
