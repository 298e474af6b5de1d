"""
Wire Schemas for the Restaurant Ops API

Request bodies are permissive: every field is optional so that a create with
a missing field can be answered with a plain 400 by the route itself. The
response models map storage rows back to the camelCase JSON the browser uses.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from models import Menu, Reservation, Order, OrderItem


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# -----------------------------
# Request bodies
# -----------------------------

class MenuIn(WireModel):
    id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    prep_time: int = Field(10, alias="prepTime", description="Minutes to prepare")
    available: bool = Field(True, description="False when the dish is 86'd")


class ReservationIn(WireModel):
    id: Optional[str] = None
    name: Optional[str] = None
    party_size: Optional[int] = Field(None, alias="partySize")
    table: Optional[int] = None
    time: Optional[int] = Field(None, description="Milliseconds since the epoch")
    status: Optional[str] = Field(None, description="booked | seated | completed | cancelled")
    notes: Optional[str] = ""


class LineItem(WireModel):
    menu_id: str = Field(..., alias="menuId")
    qty: int = 1


class OrderIn(WireModel):
    id: Optional[str] = None
    table: Optional[int] = None
    reservation_id: Optional[str] = Field("", alias="reservationId")
    status: Optional[str] = Field(None, description="fired | paid | ...")
    tax_rate: Optional[float] = Field(0, alias="taxRate", description="Percentage, e.g. 8.5")
    items: Optional[List[LineItem]] = Field(default_factory=list)


# -----------------------------
# Responses
# -----------------------------

class MenuItemOut(WireModel):
    id: str
    name: str
    category: str
    price: float
    prep_time: Optional[int] = Field(None, alias="prepTime")
    available: bool

    @classmethod
    def from_row(cls, row: Menu) -> "MenuItemOut":
        return cls(
            id=row.id,
            name=row.name,
            category=row.category,
            price=row.price,
            prep_time=row.prep_time,
            available=bool(row.available),
        )


class ReservationOut(WireModel):
    id: str
    name: str
    party_size: int = Field(..., alias="partySize")
    table: int
    time: int
    status: str
    notes: str = ""

    @classmethod
    def from_row(cls, row: Reservation) -> "ReservationOut":
        return cls(
            id=row.id,
            name=row.name,
            party_size=row.party_size,
            table=row.table_number,
            time=row.time_ms,
            status=row.status,
            notes=row.notes or "",
        )


class OrderOut(WireModel):
    id: str
    table: int
    reservation_id: str = Field("", alias="reservationId")
    status: str
    tax_rate: float = Field(0, alias="taxRate")
    created_at: int = Field(..., alias="createdAt")
    items: List[LineItem] = Field(default_factory=list)

    @classmethod
    def from_row(cls, row: Order, items: List[OrderItem]) -> "OrderOut":
        return cls(
            id=row.id,
            table=row.table_number,
            reservation_id=row.reservation_id or "",
            status=row.status,
            tax_rate=row.tax_rate or 0,
            created_at=row.created_at,
            items=[LineItem(menu_id=i.menu_id, qty=i.qty) for i in items],
        )


class TotalsOut(WireModel):
    order_id: str = Field(..., alias="orderId")
    subtotal: float
    tax: float
    total: float


class Health(BaseModel):
    ok: bool
    menu: int


class Stats(WireModel):
    revenue: float = Field(..., description="Sum of totals over paid orders")
    orders: int
    reservations: int
    seated: int
    available: int
    eighty_sixed: int = Field(..., alias="eightySixed")
