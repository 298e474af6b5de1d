import json
import logging
import os
import secrets
import time
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from config import Settings, load_settings
from database import Store
from models import Menu
from schemas import (
    MenuIn,
    MenuItemOut,
    ReservationIn,
    ReservationOut,
    OrderIn,
    OrderOut,
    TotalsOut,
    Health,
    Stats,
)
from seed import seed_if_empty
from totals import compute_totals

logger = logging.getLogger(__name__)

router = APIRouter()

# -----------------------------
# Utilities
# -----------------------------

def get_store(request: Request) -> Store:
    return request.app.state.store


def new_id(prefix: str) -> str:
    return f"{prefix}-{secrets.token_hex(3)}"


def now_ms() -> int:
    return int(time.time() * 1000)


def missing(*values) -> bool:
    return any(v is None or v == "" for v in values)


def menu_row(payload: MenuIn) -> dict:
    return {
        "name": payload.name,
        "category": payload.category,
        "price": payload.price,
        "prep_time": payload.prep_time,
        "available": payload.available,
    }


def reservation_row(payload: ReservationIn) -> dict:
    return {
        "name": payload.name,
        "party_size": payload.party_size,
        "table_number": payload.table,
        "time_ms": payload.time,
        "status": payload.status,
        "notes": payload.notes or "",
    }


def order_row(payload: OrderIn) -> dict:
    return {
        "table_number": payload.table,
        "reservation_id": payload.reservation_id or None,
        "status": payload.status,
        "tax_rate": payload.tax_rate or 0,
    }


def order_items(payload: OrderIn) -> List[dict]:
    return [{"menu_id": i.menu_id, "qty": i.qty} for i in payload.items or []]

# -----------------------------
# Health
# -----------------------------

@router.get("/health", response_model=Health)
def health(store: Store = Depends(get_store)):
    return Health(ok=True, menu=store.count(Menu))

# -----------------------------
# Menu Endpoints
# -----------------------------

@router.get("/menu", response_model=List[MenuItemOut])
def list_menu(store: Store = Depends(get_store)):
    return [MenuItemOut.from_row(row) for row in store.list_menu()]


@router.get("/menu/{item_id}", response_model=MenuItemOut)
def get_menu_item(item_id: str, store: Store = Depends(get_store)):
    row = store.get_menu(item_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Not found")
    return MenuItemOut.from_row(row)


@router.post("/menu", response_model=MenuItemOut, status_code=201)
def create_menu_item(payload: MenuIn, store: Store = Depends(get_store)):
    if missing(payload.name, payload.category, payload.price):
        raise HTTPException(status_code=400, detail="Missing fields")
    row = store.insert_menu({"id": payload.id or new_id("m"), **menu_row(payload)})
    return MenuItemOut.from_row(row)


@router.put("/menu/{item_id}", response_model=MenuItemOut)
def update_menu_item(item_id: str, payload: MenuIn, store: Store = Depends(get_store)):
    row = store.update_menu(item_id, menu_row(payload))
    if row is None:
        raise HTTPException(status_code=404, detail="Not found")
    return MenuItemOut.from_row(row)


@router.delete("/menu/{item_id}", status_code=204)
def delete_menu_item(item_id: str, store: Store = Depends(get_store)):
    store.delete_menu(item_id)
    return Response(status_code=204)

# -----------------------------
# Reservation Endpoints
# -----------------------------

@router.get("/reservations", response_model=List[ReservationOut])
def list_reservations(store: Store = Depends(get_store)):
    return [ReservationOut.from_row(row) for row in store.list_reservations()]


@router.get("/reservations/{reservation_id}", response_model=ReservationOut)
def get_reservation(reservation_id: str, store: Store = Depends(get_store)):
    row = store.get_reservation(reservation_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Not found")
    return ReservationOut.from_row(row)


@router.post("/reservations", response_model=ReservationOut, status_code=201)
def create_reservation(payload: ReservationIn, store: Store = Depends(get_store)):
    if missing(payload.name, payload.party_size, payload.table, payload.time, payload.status):
        raise HTTPException(status_code=400, detail="Missing fields")
    row = store.insert_reservation({"id": payload.id or new_id("r"), **reservation_row(payload)})
    return ReservationOut.from_row(row)


@router.put("/reservations/{reservation_id}", response_model=ReservationOut)
def update_reservation(reservation_id: str, payload: ReservationIn, store: Store = Depends(get_store)):
    row = store.update_reservation(reservation_id, reservation_row(payload))
    if row is None:
        raise HTTPException(status_code=404, detail="Not found")
    return ReservationOut.from_row(row)


@router.delete("/reservations/{reservation_id}", status_code=204)
def delete_reservation(reservation_id: str, store: Store = Depends(get_store)):
    store.delete_reservation(reservation_id)
    return Response(status_code=204)

# -----------------------------
# Order Endpoints
# -----------------------------

@router.get("/orders", response_model=List[OrderOut])
def list_orders(store: Store = Depends(get_store)):
    return [OrderOut.from_row(order, items) for order, items in store.list_orders()]


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(order_id: str, store: Store = Depends(get_store)):
    found = store.get_order(order_id)
    if found is None:
        raise HTTPException(status_code=404, detail="Not found")
    return OrderOut.from_row(*found)


@router.get("/orders/{order_id}/totals", response_model=TotalsOut)
def get_order_totals(order_id: str, store: Store = Depends(get_store)):
    found = store.get_order(order_id)
    if found is None:
        raise HTTPException(status_code=404, detail="Not found")
    order, items = found
    totals = compute_totals([(i.menu_id, i.qty) for i in items], order.tax_rate, store.menu_prices())
    return TotalsOut(
        order_id=order.id,
        subtotal=round(totals.subtotal, 2),
        tax=round(totals.tax, 2),
        total=round(totals.total, 2),
    )


@router.post("/orders", response_model=OrderOut, status_code=201)
def create_order(payload: OrderIn, store: Store = Depends(get_store)):
    if missing(payload.table, payload.status) or not payload.items:
        raise HTTPException(status_code=400, detail="Missing fields")
    data = {"id": payload.id or new_id("o"), "created_at": now_ms(), **order_row(payload)}
    order, items = store.insert_order(data, order_items(payload))
    return OrderOut.from_row(order, items)


@router.put("/orders/{order_id}", response_model=OrderOut)
def update_order(order_id: str, payload: OrderIn, store: Store = Depends(get_store)):
    found = store.update_order(order_id, order_row(payload), order_items(payload))
    if found is None:
        raise HTTPException(status_code=404, detail="Not found")
    return OrderOut.from_row(*found)


@router.delete("/orders/{order_id}", status_code=204)
def delete_order(order_id: str, store: Store = Depends(get_store)):
    store.delete_order(order_id)
    return Response(status_code=204)

# -----------------------------
# Dashboard
# -----------------------------

@router.get("/stats", response_model=Stats)
def stats(store: Store = Depends(get_store)):
    prices = store.menu_prices()
    orders = store.list_orders()
    revenue = sum(
        compute_totals([(i.menu_id, i.qty) for i in items], order.tax_rate, prices).total
        for order, items in orders
        if order.status == "paid"
    )
    reservations = store.list_reservations()
    menu = store.list_menu()
    available = sum(1 for m in menu if m.available)
    return Stats(
        revenue=round(revenue, 2),
        orders=len(orders),
        reservations=len(reservations),
        seated=sum(1 for r in reservations if r.status == "seated"),
        available=available,
        eighty_sixed=len(menu) - available,
    )

# -----------------------------
# Application
# -----------------------------

def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    settings = settings or load_settings()
    store = store or Store(settings.database_url)
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.create_tables()
        if settings.seed_demo:
            seed_if_empty(store)
        yield
        store.dispose()

    app = FastAPI(title="Restaurant Ops API", lifespan=lifespan)
    app.state.store = store
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - started) * 1000
        logger.info("%s %s %s - %.1f ms", request.method, request.url.path, response.status_code, elapsed)
        return response

    @app.exception_handler(SQLAlchemyError)
    async def storage_error(request: Request, exc: SQLAlchemyError):
        logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    @app.get("/config.js", include_in_schema=False)
    def config_js():
        body = f"window.LIVE_URL={json.dumps(settings.live_url)};window.API_BASE={json.dumps(settings.api_base)};"
        return Response(content=body, media_type="application/javascript")

    app.include_router(router, prefix="/api")

    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    else:
        @app.get("/")
        def root():
            return {"message": "Restaurant Ops API running"}

    return app


settings = load_settings()
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
