"""FastAPI application exposing the catalog, orders, reports and ratings over HTTP."""

from __future__ import annotations

import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Iterator

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from pizzeria import config
from pizzeria.cart import Cart
from pizzeria.catalog import (
    delete_customer,
    delete_product,
    get_product,
    list_customers,
    list_products,
    register_customer,
    register_product,
    search_products_by_name,
    seed_products,
    update_customer,
    update_product,
)
from pizzeria.errors import EmptyCartError, InvalidInputError, NotFoundError, PersistenceError, PizzeriaError
from pizzeria.feedback import average_rating, list_ratings, record_rating
from pizzeria.log import configure_logging, get_logger
from pizzeria.models import CartLine, Order
from pizzeria.orders import checkout, get_order, list_orders
from pizzeria.parsing import parse_category, parse_date
from pizzeria.persistence import bootstrap_schema, connect
from pizzeria.receipts import emit_receipt, render_receipt
from pizzeria.reports import filter_orders_by_date_range, generate_reports, top_customers, top_products
from pizzeria.schemas import (
    CustomerCreate,
    CustomerResponse,
    CustomerSalesResponse,
    CustomerUpdate,
    DateRangeResponse,
    ErrorResponse,
    OrderCreatedResponse,
    OrderCreateRequest,
    OrderLineResponse,
    OrderResponse,
    ProductCreate,
    ProductResponse,
    ProductSalesResponse,
    ProductUpdate,
    RatingCreate,
    RatingResponse,
    RatingSummaryResponse,
    ReceiptResponse,
    SalesReportResponse,
)

logger = get_logger(__name__)


def get_connection() -> Iterator[sqlite3.Connection]:
    """One connection per request, closed when the response is done."""
    conn = connect(config.DB_PATH)
    try:
        yield conn
    finally:
        conn.close()


def get_receipt_log_path() -> str | Path:
    return config.RECEIPT_LOG_PATH


@asynccontextmanager
async def lifespan(app: FastAPI):
    conn = connect(config.DB_PATH)
    try:
        bootstrap_schema(conn)
        seed_products(conn)
    finally:
        conn.close()
    logger.info("API started", db_path=str(config.DB_PATH))
    yield


app = FastAPI(
    title="Pizzeria Orders API",
    version="1.0.0",
    lifespan=lifespan,
    responses={code: {"model": ErrorResponse} for code in (400, 404, 500)},
)

_STATUS_BY_ERROR: dict[type[PizzeriaError], int] = {
    NotFoundError: 404,
    EmptyCartError: 400,
    InvalidInputError: 400,
    PersistenceError: 500,
}


@app.exception_handler(PizzeriaError)
async def pizzeria_error_handler(request: Request, exc: PizzeriaError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in _STATUS_BY_ERROR.items() if isinstance(exc, error_type)),
        500,
    )
    if status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=str(exc))
    else:
        logger.info("Request rejected", path=request.url.path, status_code=status_code, error=str(exc))
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse.model_validate(order)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/api/produtos", tags=["products"])


@product_router.get("", response_model=list[ProductResponse])
def read_products(categoria: str | None = None, conn: sqlite3.Connection = Depends(get_connection)):
    category = parse_category(categoria) if categoria else None
    return [ProductResponse.model_validate(p) for p in list_products(conn, category)]


@product_router.get("/busca", response_model=list[ProductResponse])
def search_products(q: str = "", conn: sqlite3.Connection = Depends(get_connection)):
    return [ProductResponse.model_validate(p) for p in search_products_by_name(conn, q)]


@product_router.post("", status_code=201, response_model=ProductResponse)
def create_product(payload: ProductCreate, conn: sqlite3.Connection = Depends(get_connection)):
    product = register_product(
        conn,
        payload.category,
        payload.name,
        payload.price,
        description=payload.description,
        meta=payload.meta,
    )
    return ProductResponse.model_validate(product)


@product_router.put("/{product_id}", response_model=ProductResponse)
def edit_product(product_id: str, payload: ProductUpdate, conn: sqlite3.Connection = Depends(get_connection)):
    product = update_product(conn, product_id, **payload.model_dump(exclude_unset=True))
    return ProductResponse.model_validate(product)


@product_router.delete("/{product_id}", status_code=204)
def remove_product(product_id: str, conn: sqlite3.Connection = Depends(get_connection)) -> None:
    delete_product(conn, product_id)


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/api/clientes", tags=["customers"])


@customer_router.get("", response_model=list[CustomerResponse])
def read_customers(conn: sqlite3.Connection = Depends(get_connection)):
    return [CustomerResponse.model_validate(c) for c in list_customers(conn)]


@customer_router.get("/busca", response_model=list[CustomerResponse])
def search_customers(q: str = "", conn: sqlite3.Connection = Depends(get_connection)):
    needle = q.strip().lower()
    return [
        CustomerResponse.model_validate(c)
        for c in list_customers(conn)
        if needle in c.name.lower() or needle == c.id.lower()
    ]


@customer_router.post("", status_code=201, response_model=CustomerResponse)
def create_customer(payload: CustomerCreate, conn: sqlite3.Connection = Depends(get_connection)):
    customer = register_customer(conn, payload.name, payload.phone, email=payload.email, address=payload.address)
    return CustomerResponse.model_validate(customer)


@customer_router.put("/{customer_id}", response_model=CustomerResponse)
def edit_customer(customer_id: str, payload: CustomerUpdate, conn: sqlite3.Connection = Depends(get_connection)):
    customer = update_customer(conn, customer_id, **payload.model_dump(exclude_unset=True))
    return CustomerResponse.model_validate(customer)


@customer_router.delete("/{customer_id}", status_code=204)
def remove_customer(customer_id: str, conn: sqlite3.Connection = Depends(get_connection)) -> None:
    delete_customer(conn, customer_id)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/api/pedidos", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderCreatedResponse)
def create_order(
    payload: OrderCreateRequest,
    conn: sqlite3.Connection = Depends(get_connection),
    receipt_log_path: str | Path = Depends(get_receipt_log_path),
):
    """Build a cart from the posted items, then finalize, pay and record it.

    The cart lives only for this request.
    """
    cart = Cart()
    for item in payload.items:
        product = get_product(conn, item.product_id)
        cart.add(CartLine.from_product(product, quantity=item.quantity, note=item.note))

    order = checkout(
        conn,
        cart,
        method=payload.payment_method,
        customer_id=payload.customer_id,
        cash_tendered=payload.cash_tendered,
        delivery_address=payload.delivery_address,
    )
    receipt = emit_receipt(order, receipt_log_path)
    return OrderCreatedResponse(order=_order_response(order), receipt=receipt)


@order_router.get("", response_model=list[OrderResponse])
def read_orders(conn: sqlite3.Connection = Depends(get_connection)):
    return [_order_response(order) for order in list_orders(conn)]


@order_router.get("/{order_id}", response_model=OrderResponse)
def read_order(order_id: str, conn: sqlite3.Connection = Depends(get_connection)):
    return _order_response(get_order(conn, order_id))


@order_router.get("/{order_id}/itens", response_model=list[OrderLineResponse])
def read_order_lines(order_id: str, conn: sqlite3.Connection = Depends(get_connection)):
    order = get_order(conn, order_id)
    return [OrderLineResponse.model_validate(line) for line in order.lines]


@order_router.get("/{order_id}/comprovante", response_model=ReceiptResponse)
def read_order_receipt(order_id: str, conn: sqlite3.Connection = Depends(get_connection)):
    order = get_order(conn, order_id)
    return ReceiptResponse(order_id=order.id, receipt=render_receipt(order))


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------
report_router = APIRouter(prefix="/api/relatorios", tags=["reports"])


@report_router.get("", response_model=SalesReportResponse)
def read_report(conn: sqlite3.Connection = Depends(get_connection)):
    return SalesReportResponse.model_validate(generate_reports(list_orders(conn)))


@report_router.get("/vendas", response_model=DateRangeResponse)
def read_sales_in_period(inicio: str, fim: str, conn: sqlite3.Connection = Depends(get_connection)):
    """Orders between two ``DD/MM/YYYY`` dates, both inclusive."""
    report = filter_orders_by_date_range(list_orders(conn), parse_date(inicio), parse_date(fim))
    return DateRangeResponse(
        start=report.start,
        end=report.end,
        order_count=report.order_count,
        total=report.total,
        orders=[_order_response(order) for order in report.orders],
    )


@report_router.get("/produtos", response_model=list[ProductSalesResponse])
def read_top_products(conn: sqlite3.Connection = Depends(get_connection)):
    return [ProductSalesResponse.model_validate(row) for row in top_products(list_orders(conn))]


@report_router.get("/clientes", response_model=list[CustomerSalesResponse])
def read_top_customers(conn: sqlite3.Connection = Depends(get_connection)):
    return [CustomerSalesResponse.model_validate(row) for row in top_customers(list_orders(conn))]


# ---------------------------------------------------------------------------
# Ratings
# ---------------------------------------------------------------------------
rating_router = APIRouter(prefix="/api/avaliacoes", tags=["ratings"])


@rating_router.post("", status_code=201, response_model=RatingResponse)
def create_rating(payload: RatingCreate, conn: sqlite3.Connection = Depends(get_connection)):
    return RatingResponse.model_validate(record_rating(conn, payload.customer_name, payload.score))


@rating_router.get("", response_model=RatingSummaryResponse)
def read_ratings(conn: sqlite3.Connection = Depends(get_connection)):
    ratings = list_ratings(conn)
    return RatingSummaryResponse(
        ratings=[RatingResponse.model_validate(r) for r in ratings],
        average=average_rating(ratings),
    )


app.include_router(product_router)
app.include_router(customer_router)
app.include_router(order_router)
app.include_router(report_router)
app.include_router(rating_router)


def run() -> None:
    """Serve the API with uvicorn, logging to stdout."""
    configure_logging()
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)
