from typing import Mapping, Iterable, Tuple
from pydantic import BaseModel


class OrderTotals(BaseModel):
    subtotal: float
    tax: float
    total: float


def compute_totals(items: Iterable[Tuple[str, int]], tax_rate: float, prices: Mapping[str, float]) -> OrderTotals:
    """
    Price an order from (menu_id, qty) pairs against the current menu prices.

    A line whose menu item no longer exists contributes nothing. Nothing is
    cached: callers pass the prices as they are at read time.
    """
    subtotal = 0.0
    for menu_id, qty in items:
        subtotal += prices.get(menu_id, 0) * qty
    tax = subtotal * ((tax_rate or 0) / 100)
    return OrderTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)
