from sqlalchemy import Column, Integer, BigInteger, String, Float, Boolean, Text, ForeignKey
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Foreign keys are declared for documentation only; SQLite leaves them
# unenforced, so menu_id and reservation_id may point at deleted rows.


class Menu(Base):
    __tablename__ = "menu"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    prep_time = Column(Integer, default=10)
    available = Column(Boolean, default=True)


class Reservation(Base):
    __tablename__ = "reservations"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    party_size = Column(Integer, nullable=False)
    table_number = Column(Integer, nullable=False)
    time_ms = Column(BigInteger, nullable=False)
    status = Column(String, nullable=False)
    notes = Column(Text)


class Order(Base):
    __tablename__ = "orders"
    id = Column(String, primary_key=True)
    table_number = Column(Integer, nullable=False)
    reservation_id = Column(String, ForeignKey("reservations.id"), nullable=True)
    status = Column(String, nullable=False)
    tax_rate = Column(Float, default=0)
    created_at = Column(BigInteger, nullable=False)


class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String, ForeignKey("orders.id"), nullable=False, index=True)
    menu_id = Column(String, ForeignKey("menu.id"), nullable=False, index=True)
    qty = Column(Integer, nullable=False)
